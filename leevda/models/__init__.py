"""Data models for Leevda."""

from .vocabulary import (
    DecodedDocument,
    Deck,
    EntryFields,
    ExportResult,
    ImportOutcome,
    ImportResult,
    RawRow,
    VocabularyEntry,
    new_id,
    word_key,
)

__all__ = [
    'Deck',
    'VocabularyEntry',
    'EntryFields',
    'ExportResult',
    'RawRow',
    'DecodedDocument',
    'ImportOutcome',
    'ImportResult',
    'new_id',
    'word_key',
]
