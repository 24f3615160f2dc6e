"""Data models for decks, vocabulary entries and interchange results."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple


def new_id() -> str:
    """Fresh opaque identifier."""
    return str(uuid.uuid4()).upper()


def word_key(word: str) -> str:
    """Normalized key for case-insensitive word comparison."""
    return (word or "").lower()


@dataclass(frozen=True)
class Deck:
    """A named language grouping vocabulary entries."""

    id: str
    name: str
    glyph: str = ""
    sort_order: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def sort_key(self) -> Tuple[int, str]:
        return (self.sort_order, self.name)


@dataclass(frozen=True)
class VocabularyEntry:
    """One word record inside a deck."""

    id: str
    deck_id: str
    word: str
    meaning: str
    pronunciation: str = ""
    note: Optional[str] = None
    audio_file_name: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def word_key(self) -> str:
        return word_key(self.word)

    def as_row(self) -> Tuple[str, str, str, str, str]:
        """CSV field tuple; missing optionals become empty strings."""
        return (
            self.word or "",
            self.meaning or "",
            self.pronunciation or "",
            self.note or "",
            self.audio_file_name or "",
        )


@dataclass(frozen=True)
class EntryFields:
    """Editable entry fields handed to the repository on create/update."""

    word: str
    meaning: str
    pronunciation: str = ""
    note: Optional[str] = None
    audio_file_name: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: VocabularyEntry) -> "EntryFields":
        return cls(
            word=entry.word,
            meaning=entry.meaning,
            pronunciation=entry.pronunciation,
            note=entry.note,
            audio_file_name=entry.audio_file_name,
        )


@dataclass(frozen=True)
class RawRow:
    """A decoded CSV record tagged with the line it started on."""

    line_index: int
    fields: Tuple[str, ...]

    @property
    def is_parsable(self) -> bool:
        return len(self.fields) >= 4


@dataclass
class DecodedDocument:
    """Result of decoding a CSV document."""

    has_audio_column: bool
    rows: List[RawRow] = field(default_factory=list)


@dataclass
class ImportOutcome:
    """Counts accumulated by the reconciliation engine."""

    added: int = 0
    updated: int = 0
    skipped: int = 0
    audio_candidates: List[str] = field(default_factory=list)


@dataclass
class ImportResult:
    """Combined result of a CSV or bundle import."""

    added: int = 0
    updated: int = 0
    skipped: int = 0
    audio_imported_count: int = 0

    @classmethod
    def from_outcome(cls, outcome: ImportOutcome, audio_imported_count: int = 0) -> "ImportResult":
        return cls(
            added=outcome.added,
            updated=outcome.updated,
            skipped=outcome.skipped,
            audio_imported_count=audio_imported_count,
        )

    def summary(self) -> str:
        parts = [f"{self.added} added", f"{self.updated} updated"]
        if self.skipped:
            parts.append(f"{self.skipped} skipped")
        if self.audio_imported_count:
            parts.append(f"{self.audio_imported_count} audio files")
        return ", ".join(parts)


@dataclass
class ExportResult:
    """Location and counts of a finished export."""

    path: Path
    entry_count: int = 0
    audio_count: int = 0
