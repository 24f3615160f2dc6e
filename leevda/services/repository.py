"""
Repository Pattern - Abstract data access layer.

Decks and their vocabulary entries live behind :class:`BaseRepository`.
Writes are staged and only become durable on :meth:`BaseRepository.save`;
:meth:`BaseRepository.rollback` discards everything staged since the last
successful save. Lookups always see staged changes.
"""

import dataclasses
import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from ..config import Config
from ..errors import DuplicateWord, EntryNotFound
from ..models import Deck, EntryFields, VocabularyEntry, new_id, word_key
from ..utils.parsing import TextParser

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Abstract base class for deck and vocabulary repositories.

    Defines the contract for all data access operations.
    Implementations can keep data in memory, SQLite, etc.
    """

    # ==================== Decks ====================

    @abstractmethod
    def add_deck(self, deck: Deck) -> Deck:
        """Stage a new deck."""

    @abstractmethod
    def get_deck(self, deck_id: str) -> Optional[Deck]:
        """Get deck by id."""

    @abstractmethod
    def find_deck_by_name(self, name: str) -> Optional[Deck]:
        """Get deck whose name matches case-insensitively."""

    @abstractmethod
    def list_decks(self) -> List[Deck]:
        """All decks ordered by sort order, then name."""

    @abstractmethod
    def update_deck(self, deck: Deck) -> Deck:
        """Replace a stored deck value."""

    @abstractmethod
    def delete_deck(self, deck_id: str) -> bool:
        """Delete a deck and all of its entries."""

    # ==================== Entries ====================

    @abstractmethod
    def find_by_word_case_insensitive(self, deck_id: str, word: str) -> Optional[VocabularyEntry]:
        """Entry in the deck whose word matches ignoring case."""

    @abstractmethod
    def create_entry(
        self,
        deck_id: str,
        fields: EntryFields,
        entry_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> VocabularyEntry:
        """Stage a new entry. Raises DuplicateWord when the word is taken."""

    @abstractmethod
    def update_entry(self, entry_id: str, fields: EntryFields, now: Optional[datetime] = None) -> VocabularyEntry:
        """Stage new field values for an entry and refresh ``updated_at``."""

    @abstractmethod
    def get_entry(self, entry_id: str) -> Optional[VocabularyEntry]:
        """Get entry by id."""

    @abstractmethod
    def delete_entry(self, entry_id: str) -> bool:
        """Stage deletion of an entry."""

    @abstractmethod
    def list_entries(self, deck_id: str) -> List[VocabularyEntry]:
        """Entries of a deck sorted by word."""

    # ==================== Unit of work ====================

    @abstractmethod
    def save(self) -> bool:
        """Persist all staged changes atomically. Returns True if successful."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes."""

    # ==================== Helpers ====================

    def count_entries(self, deck_id: str) -> int:
        return len(self.list_entries(deck_id))

    def entries_frame(self, deck_id: str) -> pd.DataFrame:
        """Entries of a deck as a DataFrame (one column per entry field)."""
        columns = [f.name for f in dataclasses.fields(VocabularyEntry)]
        rows = [dataclasses.asdict(entry) for entry in self.list_entries(deck_id)]
        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def _build_entry(
        deck_id: str,
        fields: EntryFields,
        entry_id: Optional[str],
        now: Optional[datetime],
    ) -> VocabularyEntry:
        now = now or datetime.now()
        return VocabularyEntry(
            id=entry_id or new_id(),
            deck_id=deck_id,
            word=TextParser.normalize_unicode(fields.word),
            meaning=TextParser.normalize_unicode(fields.meaning),
            pronunciation=TextParser.normalize_unicode(fields.pronunciation or ""),
            note=fields.note,
            audio_file_name=fields.audio_file_name,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def _apply_fields(entry: VocabularyEntry, fields: EntryFields, now: Optional[datetime]) -> VocabularyEntry:
        return dataclasses.replace(
            entry,
            word=TextParser.normalize_unicode(fields.word),
            meaning=TextParser.normalize_unicode(fields.meaning),
            pronunciation=TextParser.normalize_unicode(fields.pronunciation or ""),
            note=fields.note,
            audio_file_name=fields.audio_file_name,
            updated_at=now or datetime.now(),
        )


class InMemoryRepository(BaseRepository):
    """
    Dictionary-backed repository.

    Keeps a committed snapshot and a working copy; ``save`` swaps the
    working copy in, ``rollback`` restores it from the snapshot.
    """

    def __init__(self) -> None:
        self._decks: Dict[str, Deck] = {}
        self._entries: Dict[str, VocabularyEntry] = {}
        self._work_decks: Dict[str, Deck] = {}
        self._work_entries: Dict[str, VocabularyEntry] = {}
        self._word_index: Dict[Tuple[str, str], str] = {}
        self._dirty: bool = False

    @property
    def is_dirty(self) -> bool:
        """Check for unsaved changes."""
        return self._dirty

    def _rebuild_index(self) -> None:
        self._word_index = {
            (entry.deck_id, entry.word_key): entry.id
            for entry in self._work_entries.values()
        }

    # ==================== Decks ====================

    def add_deck(self, deck: Deck) -> Deck:
        self._work_decks[deck.id] = deck
        self._dirty = True
        return deck

    def get_deck(self, deck_id: str) -> Optional[Deck]:
        return self._work_decks.get(deck_id)

    def find_deck_by_name(self, name: str) -> Optional[Deck]:
        key = (name or "").strip().lower()
        for deck in self._work_decks.values():
            if deck.name.lower() == key:
                return deck
        return None

    def list_decks(self) -> List[Deck]:
        return sorted(self._work_decks.values(), key=lambda d: d.sort_key)

    def update_deck(self, deck: Deck) -> Deck:
        if deck.id not in self._work_decks:
            raise KeyError(deck.id)
        self._work_decks[deck.id] = deck
        self._dirty = True
        return deck

    def delete_deck(self, deck_id: str) -> bool:
        if self._work_decks.pop(deck_id, None) is None:
            return False
        for entry_id in [e.id for e in self._work_entries.values() if e.deck_id == deck_id]:
            del self._work_entries[entry_id]
        self._rebuild_index()
        self._dirty = True
        return True

    # ==================== Entries ====================

    def find_by_word_case_insensitive(self, deck_id: str, word: str) -> Optional[VocabularyEntry]:
        entry_id = self._word_index.get((deck_id, word_key(TextParser.normalize_unicode(word))))
        return self._work_entries.get(entry_id) if entry_id else None

    def create_entry(
        self,
        deck_id: str,
        fields: EntryFields,
        entry_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> VocabularyEntry:
        existing = self.find_by_word_case_insensitive(deck_id, fields.word)
        if existing is not None:
            raise DuplicateWord(existing)

        entry = self._build_entry(deck_id, fields, entry_id, now)
        self._work_entries[entry.id] = entry
        self._word_index[(deck_id, entry.word_key)] = entry.id
        self._dirty = True
        return entry

    def update_entry(self, entry_id: str, fields: EntryFields, now: Optional[datetime] = None) -> VocabularyEntry:
        current = self._work_entries.get(entry_id)
        if current is None:
            raise EntryNotFound(f"Entry not found: {entry_id}")

        updated = self._apply_fields(current, fields, now)
        self._word_index.pop((current.deck_id, current.word_key), None)
        self._work_entries[entry_id] = updated
        self._word_index[(updated.deck_id, updated.word_key)] = entry_id
        self._dirty = True
        return updated

    def get_entry(self, entry_id: str) -> Optional[VocabularyEntry]:
        return self._work_entries.get(entry_id)

    def delete_entry(self, entry_id: str) -> bool:
        entry = self._work_entries.pop(entry_id, None)
        if entry is None:
            return False
        self._word_index.pop((entry.deck_id, entry.word_key), None)
        self._dirty = True
        return True

    def list_entries(self, deck_id: str) -> List[VocabularyEntry]:
        return sorted(
            (e for e in self._work_entries.values() if e.deck_id == deck_id),
            key=lambda e: e.word,
        )

    # ==================== Unit of work ====================

    def _commit(self) -> None:
        """Swap the working copy in as the committed snapshot."""
        self._decks = dict(self._work_decks)
        self._entries = dict(self._work_entries)

    def save(self) -> bool:
        try:
            self._commit()
        except Exception as e:
            logger.error("Error saving repository: %s", e)
            return False
        self._dirty = False
        return True

    def rollback(self) -> None:
        self._work_decks = dict(self._decks)
        self._work_entries = dict(self._entries)
        self._rebuild_index()
        self._dirty = False


class SQLiteRepository(BaseRepository):
    """
    SQLite-based repository implementation.

    Provides:
    - Transactional updates: staged writes share one open transaction
    - Case-insensitive lookups through an indexed ``word_key`` column
    - Cascade delete of entries with their deck
    """

    # Schema version for migrations
    SCHEMA_VERSION = 1

    ENTRY_COLUMNS = [
        "id", "deck_id", "word", "word_key", "meaning", "pronunciation",
        "note", "audio_file_name", "created_at", "updated_at",
    ]

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize SQLite repository.

        Args:
            db_path: Path to SQLite database file (":memory:" supported)
        """
        self.db_path = db_path or Config.DB_FILE
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._connection = sqlite3.connect(self.db_path, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._connection.execute("PRAGMA foreign_keys = ON")
        self._init_schema()

    def close(self) -> None:
        self._connection.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        cursor = self._connection.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS decks (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                name_key TEXT NOT NULL,
                glyph TEXT,
                sort_order INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS entries (
                id TEXT PRIMARY KEY,
                deck_id TEXT NOT NULL REFERENCES decks(id) ON DELETE CASCADE,
                word TEXT NOT NULL,
                word_key TEXT NOT NULL,
                meaning TEXT NOT NULL,
                pronunciation TEXT,
                note TEXT,
                audio_file_name TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_entries_word ON entries(deck_id, word_key)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_decks_name ON decks(name_key)")

        cursor.execute("INSERT OR IGNORE INTO schema_version (version, applied_at) VALUES (?, ?)",
                       (self.SCHEMA_VERSION, datetime.now().isoformat()))

        self._connection.commit()

    # ==================== Row mapping helpers ====================

    @staticmethod
    def _value(row: Any, column: str) -> Any:
        """Column value with SQL NULL (None, or NaN from a DataFrame) mapped to None."""
        value = row[column]
        return None if pd.isna(value) else value

    @classmethod
    def _row_to_deck(cls, row: Any) -> Deck:
        return Deck(
            id=row["id"],
            name=row["name"],
            glyph=cls._value(row, "glyph") or "",
            sort_order=int(row["sort_order"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @classmethod
    def _row_to_entry(cls, row: Any) -> VocabularyEntry:
        return VocabularyEntry(
            id=row["id"],
            deck_id=row["deck_id"],
            word=row["word"],
            meaning=row["meaning"],
            pronunciation=cls._value(row, "pronunciation") or "",
            note=cls._value(row, "note"),
            audio_file_name=cls._value(row, "audio_file_name"),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _query_frame(self, sql: str, params: Tuple = ()) -> pd.DataFrame:
        return pd.read_sql_query(sql, self._connection, params=params)

    # ==================== Decks ====================

    def add_deck(self, deck: Deck) -> Deck:
        self._connection.execute(
            "INSERT INTO decks (id, name, name_key, glyph, sort_order, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (deck.id, deck.name, deck.name.lower(), deck.glyph, deck.sort_order, deck.created_at.isoformat()),
        )
        return deck

    def get_deck(self, deck_id: str) -> Optional[Deck]:
        row = self._connection.execute("SELECT * FROM decks WHERE id = ?", (deck_id,)).fetchone()
        return self._row_to_deck(row) if row else None

    def find_deck_by_name(self, name: str) -> Optional[Deck]:
        row = self._connection.execute(
            "SELECT * FROM decks WHERE name_key = ? LIMIT 1", ((name or "").strip().lower(),)
        ).fetchone()
        return self._row_to_deck(row) if row else None

    def list_decks(self) -> List[Deck]:
        df = self._query_frame("SELECT * FROM decks ORDER BY sort_order, name")
        return [self._row_to_deck(row) for _, row in df.iterrows()]

    def update_deck(self, deck: Deck) -> Deck:
        cursor = self._connection.execute(
            "UPDATE decks SET name = ?, name_key = ?, glyph = ?, sort_order = ? WHERE id = ?",
            (deck.name, deck.name.lower(), deck.glyph, deck.sort_order, deck.id),
        )
        if cursor.rowcount == 0:
            raise KeyError(deck.id)
        return deck

    def delete_deck(self, deck_id: str) -> bool:
        cursor = self._connection.execute("DELETE FROM decks WHERE id = ?", (deck_id,))
        return cursor.rowcount > 0

    # ==================== Entries ====================

    def find_by_word_case_insensitive(self, deck_id: str, word: str) -> Optional[VocabularyEntry]:
        row = self._connection.execute(
            "SELECT * FROM entries WHERE deck_id = ? AND word_key = ? LIMIT 1",
            (deck_id, word_key(TextParser.normalize_unicode(word))),
        ).fetchone()
        return self._row_to_entry(row) if row else None

    def create_entry(
        self,
        deck_id: str,
        fields: EntryFields,
        entry_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> VocabularyEntry:
        existing = self.find_by_word_case_insensitive(deck_id, fields.word)
        if existing is not None:
            raise DuplicateWord(existing)

        entry = self._build_entry(deck_id, fields, entry_id, now)
        self._connection.execute(
            f"INSERT INTO entries ({', '.join(self.ENTRY_COLUMNS)}) "
            f"VALUES ({', '.join('?' for _ in self.ENTRY_COLUMNS)})",
            (
                entry.id, entry.deck_id, entry.word, entry.word_key, entry.meaning,
                entry.pronunciation, entry.note, entry.audio_file_name,
                entry.created_at.isoformat(), entry.updated_at.isoformat(),
            ),
        )
        return entry

    def update_entry(self, entry_id: str, fields: EntryFields, now: Optional[datetime] = None) -> VocabularyEntry:
        current = self.get_entry(entry_id)
        if current is None:
            raise EntryNotFound(f"Entry not found: {entry_id}")

        updated = self._apply_fields(current, fields, now)
        self._connection.execute(
            """
            UPDATE entries
            SET word = ?, word_key = ?, meaning = ?, pronunciation = ?, note = ?,
                audio_file_name = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                updated.word, updated.word_key, updated.meaning, updated.pronunciation,
                updated.note, updated.audio_file_name, updated.updated_at.isoformat(), entry_id,
            ),
        )
        return updated

    def get_entry(self, entry_id: str) -> Optional[VocabularyEntry]:
        row = self._connection.execute("SELECT * FROM entries WHERE id = ?", (entry_id,)).fetchone()
        return self._row_to_entry(row) if row else None

    def delete_entry(self, entry_id: str) -> bool:
        cursor = self._connection.execute("DELETE FROM entries WHERE id = ?", (entry_id,))
        return cursor.rowcount > 0

    def list_entries(self, deck_id: str) -> List[VocabularyEntry]:
        df = self._query_frame("SELECT * FROM entries WHERE deck_id = ? ORDER BY word", (deck_id,))
        return [self._row_to_entry(row) for _, row in df.iterrows()]

    def count_entries(self, deck_id: str) -> int:
        return self._connection.execute(
            "SELECT COUNT(*) FROM entries WHERE deck_id = ?", (deck_id,)
        ).fetchone()[0]

    # ==================== Unit of work ====================

    @property
    def in_transaction(self) -> bool:
        return self._connection.in_transaction

    def _commit(self) -> None:
        self._connection.commit()

    def save(self) -> bool:
        try:
            self._commit()
            return True
        except sqlite3.Error as e:
            logger.error("Error saving SQLite repository: %s", e)
            return False

    def rollback(self) -> None:
        self._connection.rollback()
