"""
Vocabulary Service - CRUD operations for vocabulary entries.

Separates data access logic from the front end, enabling:
- Duplicate detection with the conflicting entry handed back to callers
- Audio cleanup when entries are removed
- Testable business logic
"""

import logging
from typing import Any, Dict, List, Optional

from ..errors import DuplicateWord, PersistError, ValidationError
from ..models import Deck, EntryFields, VocabularyEntry
from ..utils.parsing import TextParser
from ..utils.paths import ExportPathGenerator
from .audio_store import BaseAudioStore
from .repository import BaseRepository

logger = logging.getLogger(__name__)


class VocabularyService:
    """
    Service for managing the entries of one collection.

    Usage:
        service = VocabularyService(repository, audio_store)
        entry = service.add_entry(deck, "merhaba", "hello")
        matches = service.search(deck, "hel")
    """

    # Columns searched by :meth:`search`
    SEARCH_FIELDS = ("word", "meaning", "pronunciation")

    def __init__(self, repository: BaseRepository, audio_store: Optional[BaseAudioStore] = None):
        """
        Initialize vocabulary service.

        Args:
            repository: Deck and entry storage
            audio_store: Storage of recorded audio (optional)
        """
        self.repository = repository
        self.audio_store = audio_store

    def _save(self, action: str) -> None:
        if not self.repository.save():
            self.repository.rollback()
            raise PersistError(f"Failed to {action}")

    @staticmethod
    def _validated_fields(
        word: str,
        meaning: str,
        pronunciation: str,
        note: Optional[str],
        audio_file_name: Optional[str],
    ) -> EntryFields:
        word = TextParser.clean(word)
        meaning = TextParser.clean(meaning)

        if not word:
            raise ValidationError("Word cannot be empty")
        if not meaning:
            raise ValidationError("Meaning cannot be empty")

        return EntryFields(
            word=word,
            meaning=meaning,
            pronunciation=TextParser.clean(pronunciation),
            note=TextParser.clean_optional(note) or None,
            audio_file_name=audio_file_name,
        )

    def check_for_duplicate(self, deck: Deck, word: str) -> Optional[VocabularyEntry]:
        """Existing entry in the deck with the same word ignoring case."""
        return self.repository.find_by_word_case_insensitive(deck.id, TextParser.clean(word))

    def add_entry(
        self,
        deck: Deck,
        word: str,
        meaning: str,
        pronunciation: str = "",
        note: Optional[str] = None,
        audio_file_name: Optional[str] = None,
    ) -> VocabularyEntry:
        """
        Add a single entry.

        Raises:
            ValidationError: Empty word or meaning
            DuplicateWord: The word exists; ``error.existing`` is the conflicting entry
            PersistError: Save failed
        """
        fields = self._validated_fields(word, meaning, pronunciation, note, audio_file_name)

        existing = self.check_for_duplicate(deck, fields.word)
        if existing is not None:
            raise DuplicateWord(existing)

        entry = self.repository.create_entry(deck.id, fields)
        self._save(f"add word '{fields.word}'")
        return entry

    def update_entry(
        self,
        entry: VocabularyEntry,
        word: str,
        meaning: str,
        pronunciation: str = "",
        note: Optional[str] = None,
        audio_file_name: Optional[str] = None,
    ) -> VocabularyEntry:
        """
        Replace an entry's fields.

        Raises:
            ValidationError: Empty word or meaning
            DuplicateWord: The new word belongs to another entry of the deck
            PersistError: Save failed
        """
        fields = self._validated_fields(word, meaning, pronunciation, note, audio_file_name)

        if fields.word.lower() != entry.word.lower():
            existing = self.repository.find_by_word_case_insensitive(entry.deck_id, fields.word)
            if existing is not None and existing.id != entry.id:
                raise DuplicateWord(existing)

        updated = self.repository.update_entry(entry.id, fields)
        self._save(f"update word '{fields.word}'")
        return updated

    def delete_entry(self, entry: VocabularyEntry) -> bool:
        """Delete an entry and its audio file."""
        if not self.repository.delete_entry(entry.id):
            return False
        self._save(f"delete word '{entry.word}'")

        if entry.audio_file_name and self.audio_store is not None:
            self.audio_store.delete(entry.audio_file_name)
        return True

    def list_entries(self, deck: Deck) -> List[VocabularyEntry]:
        return self.repository.list_entries(deck.id)

    def search(self, deck: Deck, query: str) -> List[VocabularyEntry]:
        """
        Search entries by text query.

        Args:
            deck: Deck to search
            query: Case-insensitive substring; blank returns every entry

        Returns:
            Matching entries sorted by word
        """
        entries = self.list_entries(deck)
        query = TextParser.collapse_whitespace(query).lower()
        if not query:
            return entries

        return [
            entry for entry in entries
            if any(query in (getattr(entry, name) or "").lower() for name in self.SEARCH_FIELDS)
        ]

    @staticmethod
    def generate_audio_file_name(entry_id: str) -> str:
        return ExportPathGenerator.audio_file_name(entry_id)

    def get_statistics(self, deck: Deck) -> Dict[str, Any]:
        """
        Get vocabulary statistics for a deck.

        Returns:
            Dictionary with total_words, with_audio, with_note, with_pronunciation
        """
        df = self.repository.entries_frame(deck.id)
        if df.empty:
            return {"total_words": 0, "with_audio": 0, "with_note": 0, "with_pronunciation": 0}

        def non_blank(column: str) -> int:
            return int((df[column].fillna("").astype(str).str.strip() != "").sum())

        return {
            "total_words": len(df),
            "with_audio": non_blank("audio_file_name"),
            "with_note": non_blank("note"),
            "with_pronunciation": non_blank("pronunciation"),
        }
