"""Language-name to flag glyph table used for deck defaults."""

DEFAULT_GLYPH = "\U0001F310"  # globe

LANGUAGE_FLAGS = {
    # Major languages
    "english": "\U0001F1EC\U0001F1E7",
    "spanish": "\U0001F1EA\U0001F1F8",
    "french": "\U0001F1EB\U0001F1F7",
    "german": "\U0001F1E9\U0001F1EA",
    "italian": "\U0001F1EE\U0001F1F9",
    "portuguese": "\U0001F1F5\U0001F1F9",
    "russian": "\U0001F1F7\U0001F1FA",
    "chinese": "\U0001F1E8\U0001F1F3",
    "japanese": "\U0001F1EF\U0001F1F5",
    "korean": "\U0001F1F0\U0001F1F7",
    "arabic": "\U0001F1F8\U0001F1E6",
    "hindi": "\U0001F1EE\U0001F1F3",
    "turkish": "\U0001F1F9\U0001F1F7",

    # European languages
    "dutch": "\U0001F1F3\U0001F1F1",
    "polish": "\U0001F1F5\U0001F1F1",
    "swedish": "\U0001F1F8\U0001F1EA",
    "norwegian": "\U0001F1F3\U0001F1F4",
    "danish": "\U0001F1E9\U0001F1F0",
    "finnish": "\U0001F1EB\U0001F1EE",
    "greek": "\U0001F1EC\U0001F1F7",
    "czech": "\U0001F1E8\U0001F1FF",
    "hungarian": "\U0001F1ED\U0001F1FA",
    "romanian": "\U0001F1F7\U0001F1F4",
    "ukrainian": "\U0001F1FA\U0001F1E6",
    "irish": "\U0001F1EE\U0001F1EA",
    "icelandic": "\U0001F1EE\U0001F1F8",

    # Asian languages
    "thai": "\U0001F1F9\U0001F1ED",
    "vietnamese": "\U0001F1FB\U0001F1F3",
    "indonesian": "\U0001F1EE\U0001F1E9",
    "malay": "\U0001F1F2\U0001F1FE",
    "tagalog": "\U0001F1F5\U0001F1ED",
    "filipino": "\U0001F1F5\U0001F1ED",
    "persian": "\U0001F1EE\U0001F1F7",
    "farsi": "\U0001F1EE\U0001F1F7",
    "hebrew": "\U0001F1EE\U0001F1F1",

    # African languages
    "swahili": "\U0001F1F0\U0001F1EA",
    "afrikaans": "\U0001F1FF\U0001F1E6",
    "amharic": "\U0001F1EA\U0001F1F9",

    # Regional variants
    "english (us)": "\U0001F1FA\U0001F1F8",
    "english (uk)": "\U0001F1EC\U0001F1E7",
    "english (australia)": "\U0001F1E6\U0001F1FA",
    "english (canada)": "\U0001F1E8\U0001F1E6",
    "french (canada)": "\U0001F1E8\U0001F1E6",
    "portuguese (brazil)": "\U0001F1E7\U0001F1F7",
    "brazilian": "\U0001F1E7\U0001F1F7",
    "spanish (mexico)": "\U0001F1F2\U0001F1FD",
    "chinese (simplified)": "\U0001F1E8\U0001F1F3",
    "chinese (traditional)": "\U0001F1F9\U0001F1FC",

    # Special
    "esperanto": DEFAULT_GLYPH,
    "latin": "\U0001F3DB\uFE0F",
    "sign language": "\U0001F44B",
}


def get_flag(language_name: str) -> str:
    """Return the flag glyph for a language name, or the globe if unknown."""
    normalized = (language_name or "").strip().lower()
    return LANGUAGE_FLAGS.get(normalized, DEFAULT_GLYPH)


def available_languages() -> list:
    """Language names with a known flag, sorted."""
    return sorted(LANGUAGE_FLAGS.keys())
