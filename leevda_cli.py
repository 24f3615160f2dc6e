"""
Leevda: Vocabulary Deck Manager
-------------------------------

Command line entry point for managing decks and moving them in and out of
the app as CSV files or ZIP bundles with audio.

    python leevda_cli.py decks
    python leevda_cli.py add-deck Turkish
    python leevda_cli.py export Turkish --audio --out ./exports
    python leevda_cli.py import Turkish Leevda_Turkish_2024-05-01.zip
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from leevda.config import SettingsManager
from leevda.errors import DeckNotFound, LeevdaError
from leevda.services import (
    DeckService,
    FileAudioStore,
    SQLiteRepository,
    TransferService,
    VocabularyService,
)
from leevda.utils import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="leevda", description="Manage Leevda vocabulary decks.")
    parser.add_argument("--settings", help="Path to the settings JSON file")
    parser.add_argument("--db", help="SQLite database file (overrides settings)")
    parser.add_argument("--audio-dir", help="Audio recordings directory (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("decks", help="List decks")

    add_deck = commands.add_parser("add-deck", help="Create a deck")
    add_deck.add_argument("name")
    add_deck.add_argument("--glyph", help="Custom glyph (defaults to the language flag)")

    words = commands.add_parser("words", help="List or search the words of a deck")
    words.add_argument("deck")
    words.add_argument("--search", default="", help="Case-insensitive filter")

    stats = commands.add_parser("stats", help="Show deck statistics")
    stats.add_argument("deck")

    export = commands.add_parser("export", help="Export a deck as CSV or ZIP bundle")
    export.add_argument("deck")
    export.add_argument(
        "--audio",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Bundle audio files into a ZIP archive (defaults to settings EXPORT_WITH_AUDIO)",
    )
    export.add_argument("--out", help="Output directory (defaults to settings EXPORT_DIR)")

    import_ = commands.add_parser("import", help="Import a CSV file or ZIP bundle into a deck")
    import_.add_argument("deck")
    import_.add_argument("file")

    return parser


def run(args: argparse.Namespace, settings: SettingsManager) -> bool:
    """Execute one command. Returns False on handled failure."""
    repository = SQLiteRepository(args.db or settings.get("DB_FILE"))
    audio_store = FileAudioStore(args.audio_dir or settings.get("AUDIO_DIR"))

    with repository:
        decks = DeckService(repository, audio_store, default_deck_name=settings.get("DEFAULT_DECK_NAME"))
        vocabulary = VocabularyService(repository, audio_store)
        transfer = TransferService(
            repository,
            audio_store,
            export_dir=settings.get("EXPORT_DIR"),
            io_workers=settings.get("IO_WORKERS"),
        )

        decks.ensure_default_deck()

        if args.command == "decks":
            for deck in decks.list_decks():
                print(f"{deck.glyph} {deck.name} ({repository.count_entries(deck.id)} words)")

        elif args.command == "add-deck":
            deck = decks.add_deck(args.name, args.glyph)
            print(f"✅ Deck created: {deck.glyph} {deck.name}")

        elif args.command == "words":
            deck = decks.get_deck(args.deck)
            for entry in vocabulary.search(deck, args.search):
                pronunciation = f" [{entry.pronunciation}]" if entry.pronunciation else ""
                print(f"{entry.word}{pronunciation} - {entry.meaning}")

        elif args.command == "stats":
            deck = decks.get_deck(args.deck)
            for key, value in vocabulary.get_statistics(deck).items():
                print(f"{key}: {value}")

        elif args.command == "export":
            deck = decks.get_deck(args.deck)
            include_audio = settings.get("EXPORT_WITH_AUDIO") if args.audio is None else args.audio
            if include_audio:
                result = asyncio.run(transfer.export_bundle_async(deck, args.out))
            else:
                result = transfer.export_csv(deck, args.out)
            print(f"✅ Exported {result.entry_count} words ({result.audio_count} audio files) to {result.path}")

        elif args.command == "import":
            try:
                deck = decks.get_deck(args.deck)
            except DeckNotFound:
                deck = decks.add_deck(args.deck)
                print(f"Created deck {deck.glyph} {deck.name}")

            result = asyncio.run(transfer.import_file_async(args.file, deck))
            print(f"✅ Imported into {deck.name}: {result.summary()}")

    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = SettingsManager(args.settings)
    setup_logger(level="DEBUG" if args.verbose else settings.get("LOG_LEVEL"))

    try:
        return 0 if run(args, settings) else 1
    except LeevdaError as e:
        print(f"❌ Error: {e}")
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n[!] Aborted by user.")
        sys.exit(1)
