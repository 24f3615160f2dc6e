"""
Export path generation utilities - single source of truth for file naming.

Used by the bundle packager, the transfer service and the vocabulary service.
"""

from datetime import date, datetime
from typing import Optional, Union

from ..config import Config


class ExportPathGenerator:
    """
    Centralized export and audio file name generator.

    Naming conventions:
        Leevda_<deck>_<yyyy-MM-dd>.csv   CSV-only export
        Leevda_<deck>_<yyyy-MM-dd>.zip   CSV + audio bundle
        <entry-id>.m4a                   recorded audio for an entry
    """

    # Characters that would escape the export directory
    UNSAFE_CHARS = ("/", "\\", "\x00")

    @classmethod
    def _safe_deck_name(cls, deck_name: str) -> str:
        name = (deck_name or "").strip()
        for char in cls.UNSAFE_CHARS:
            name = name.replace(char, "-")
        return name

    @classmethod
    def export_stem(cls, deck_name: str, when: Optional[Union[date, datetime]] = None) -> str:
        """
        Generate the base name shared by CSV and archive exports.

        Args:
            deck_name: Display name of the exported deck
            when: Export date (defaults to today)

        Returns:
            Name like "Leevda_Turkish_2024-05-01"
        """
        when = when or datetime.now()
        date_string = when.strftime(Config.EXPORT_DATE_FORMAT)
        return f"{Config.EXPORT_PREFIX}_{cls._safe_deck_name(deck_name)}_{date_string}"

    @classmethod
    def csv_export_name(cls, deck_name: str, when: Optional[Union[date, datetime]] = None) -> str:
        return f"{cls.export_stem(deck_name, when)}.csv"

    @classmethod
    def archive_name(cls, deck_name: str, when: Optional[Union[date, datetime]] = None) -> str:
        return f"{cls.export_stem(deck_name, when)}.{Config.ARCHIVE_FORMAT}"

    @classmethod
    def audio_file_name(cls, entry_id: str) -> str:
        """Audio filename for an entry: ``<entry-id>.m4a``."""
        return f"{entry_id}{Config.AUDIO_EXTENSION}"
