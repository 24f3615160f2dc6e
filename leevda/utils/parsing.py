"""Text parsing utilities for consistent text processing across the application."""

import re
import unicodedata
from typing import Optional


class TextParser:
    """
    Centralized text parsing utilities.

    Single source of truth for trimming, blank checks and Unicode
    normalization of user-entered and imported text.
    """

    # Characters removed around decoded CSV fields
    ASCII_WHITESPACE = " \t\n\r\x0b\x0c"

    # Whitespace normalization pattern
    WHITESPACE_PATTERN = re.compile(r'\s+')

    @classmethod
    def normalize_unicode(cls, text: str) -> str:
        """
        Normalize text to NFC form for consistent Unicode handling.

        Prevents issues with characters like é being represented as
        either a single codepoint (NFC) or base + combining accent (NFD).

        Args:
            text: Input text

        Returns:
            NFC-normalized text
        """
        if not text:
            return ""
        return unicodedata.normalize('NFC', str(text))

    @classmethod
    def trim_ascii(cls, text: str) -> str:
        """Strip leading/trailing ASCII whitespace only."""
        return (text or "").strip(cls.ASCII_WHITESPACE)

    @classmethod
    def clean(cls, text: Optional[str]) -> str:
        """Trim surrounding whitespace and NFC-normalize user input."""
        if text is None:
            return ""
        return cls.normalize_unicode(str(text).strip())

    @classmethod
    def clean_optional(cls, text: Optional[str]) -> Optional[str]:
        """Like :meth:`clean` but maps None to None."""
        if text is None:
            return None
        return cls.clean(text)

    @classmethod
    def is_blank(cls, text: Optional[str]) -> bool:
        return not text or not text.strip()

    @classmethod
    def strip_bom(cls, text: str) -> str:
        """Remove a leading UTF-8 byte order mark."""
        if text and text[0] == "\ufeff":
            return text[1:]
        return text

    @classmethod
    def collapse_whitespace(cls, text: str) -> str:
        """Collapse internal whitespace runs to single spaces."""
        if not text:
            return ""
        return cls.WHITESPACE_PATTERN.sub(' ', text).strip()
