"""
Deck Service - create, list and remove decks.

The reserved default deck ("English") always sorts first; every other new
deck is appended after the current maximum sort order.
"""

import dataclasses
import logging
from datetime import datetime
from typing import List, Optional

from ..config import Config, get_flag
from ..errors import DeckNotFound, DuplicateDeck, PersistError, ValidationError
from ..models import Deck, new_id
from ..utils.parsing import TextParser
from .audio_store import BaseAudioStore
from .repository import BaseRepository

logger = logging.getLogger(__name__)


class DeckService:
    """Service for managing decks."""

    def __init__(
        self,
        repository: BaseRepository,
        audio_store: Optional[BaseAudioStore] = None,
        default_deck_name: Optional[str] = None,
    ):
        """
        Args:
            repository: Deck and entry storage
            audio_store: Audio blobs to clean up when a deck is deleted
            default_deck_name: Reserved first deck (defaults to Config.DEFAULT_DECK_NAME)
        """
        self.repository = repository
        self.audio_store = audio_store
        self.default_deck_name = TextParser.clean(default_deck_name) or Config.DEFAULT_DECK_NAME

    def _save(self, action: str) -> None:
        if not self.repository.save():
            self.repository.rollback()
            raise PersistError(f"Failed to {action}")

    def is_default_name(self, name: str) -> bool:
        return name.strip().lower() == self.default_deck_name.lower()

    def ensure_default_deck(self) -> Deck:
        """Create the default deck unless a deck with that name (any case) exists."""
        existing = self.repository.find_deck_by_name(self.default_deck_name)
        if existing is not None:
            return existing

        deck = Deck(
            id=new_id(),
            name=self.default_deck_name,
            glyph=get_flag(self.default_deck_name),
            sort_order=0,
            created_at=datetime.now(),
        )
        self.repository.add_deck(deck)
        self._save("create default deck")
        logger.info("Default deck '%s' created", deck.name)
        return deck

    def list_decks(self) -> List[Deck]:
        return self.repository.list_decks()

    def get_deck(self, name: str) -> Deck:
        """Deck by name (case-insensitive). Raises DeckNotFound."""
        deck = self.repository.find_deck_by_name(name)
        if deck is None:
            raise DeckNotFound(f"Deck not found: {name}")
        return deck

    def deck_exists(self, name: str) -> bool:
        return self.repository.find_deck_by_name(name) is not None

    def add_deck(self, name: str, glyph: Optional[str] = None) -> Deck:
        """
        Create a deck.

        Args:
            name: Display name, unique case-insensitively
            glyph: Custom glyph; derived from the name when blank

        Raises:
            ValidationError: Blank name
            DuplicateDeck: Name already used
            PersistError: Save failed
        """
        name = TextParser.clean(name)
        if not name:
            raise ValidationError("Language name cannot be empty")

        if self.deck_exists(name):
            raise DuplicateDeck(name)

        custom_glyph = TextParser.clean(glyph)
        if self.is_default_name(name):
            sort_order = 0
        else:
            sort_order = max((d.sort_order for d in self.repository.list_decks()), default=0) + 1

        deck = Deck(
            id=new_id(),
            name=name,
            glyph=custom_glyph or get_flag(name),
            sort_order=sort_order,
            created_at=datetime.now(),
        )
        self.repository.add_deck(deck)
        self._save(f"add deck '{name}'")
        logger.info("Deck '%s' added", name)
        return deck

    def update_glyph(self, deck: Deck, glyph: str) -> Deck:
        """Set a deck's glyph; a blank glyph resets it to the derived default."""
        glyph = TextParser.clean(glyph)
        updated = dataclasses.replace(deck, glyph=glyph or get_flag(deck.name))
        self.repository.update_deck(updated)
        self._save(f"update glyph of '{deck.name}'")
        return updated

    def delete_deck(self, deck: Deck) -> None:
        """Delete a deck, its entries and their audio files."""
        audio_files = [
            e.audio_file_name for e in self.repository.list_entries(deck.id) if e.audio_file_name
        ]

        if not self.repository.delete_deck(deck.id):
            raise DeckNotFound(f"Deck not found: {deck.name}")
        self._save(f"delete deck '{deck.name}'")

        if self.audio_store is not None:
            for file_name in audio_files:
                self.audio_store.delete(file_name)
        logger.info("Deck '%s' deleted with %d audio files", deck.name, len(audio_files))
