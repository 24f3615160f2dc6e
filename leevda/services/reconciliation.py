"""
Reconciliation Engine - merge decoded CSV rows into a deck.

Each row is added, used to update the entry with the same word (compared
case-insensitively within the target deck), or skipped when unparsable.
All changes go to the repository as staged writes and are persisted with
a single ``save``; on failure nothing is committed.
"""

import dataclasses
import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..errors import PersistError
from ..models import Deck, EntryFields, ImportOutcome, RawRow
from .repository import BaseRepository

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """
    Applies add/update/skip decisions for imported rows.

    Usage:
        engine = ReconciliationEngine()
        document = CSVCodec.decode(text)
        outcome = engine.merge(document.rows, document.has_audio_column, deck, repository)
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            clock: Source of "now" for created/updated timestamps
        """
        self._clock = clock or datetime.now

    @staticmethod
    def row_to_fields(row: RawRow, has_audio_column: bool) -> Optional[EntryFields]:
        """
        Map a raw row onto entry fields.

        Returns:
            EntryFields, or None when the row has fewer than 4 fields or an
            empty word or meaning
        """
        if not row.is_parsable:
            return None

        word, meaning, pronunciation, note = row.fields[:4]
        if not word or not meaning:
            return None

        audio_file_name = None
        if has_audio_column and len(row.fields) > 4 and row.fields[4]:
            audio_file_name = row.fields[4]

        return EntryFields(
            word=word,
            meaning=meaning,
            pronunciation=pronunciation,
            note=note or None,
            audio_file_name=audio_file_name,
        )

    def merge(
        self,
        rows: Iterable[RawRow],
        has_audio_column: bool,
        target_deck: Deck,
        repository: BaseRepository,
    ) -> ImportOutcome:
        """
        Merge rows into ``target_deck`` in document order.

        Args:
            rows: Decoded rows (header excluded)
            has_audio_column: Whether the document declared an audio column
            target_deck: Deck receiving the entries
            repository: Repository holding the deck

        Returns:
            ImportOutcome with added/updated/skipped counts and audio candidates

        Raises:
            PersistError: The final save failed; staged changes are rolled back
        """
        outcome = ImportOutcome()
        now = self._clock()

        try:
            for row in rows:
                fields = self.row_to_fields(row, has_audio_column)
                if fields is None:
                    outcome.skipped += 1
                    logger.debug("Skipping line %d: %d field(s)", row.line_index, len(row.fields))
                    continue

                existing = repository.find_by_word_case_insensitive(target_deck.id, fields.word)
                if existing is not None:
                    # Keep the stored spelling of the word, overwrite the rest
                    repository.update_entry(existing.id, dataclasses.replace(fields, word=existing.word), now=now)
                    outcome.updated += 1
                else:
                    repository.create_entry(target_deck.id, fields, now=now)
                    outcome.added += 1

                if fields.audio_file_name:
                    outcome.audio_candidates.append(fields.audio_file_name)
        except Exception:
            repository.rollback()
            raise

        try:
            saved = repository.save()
        except Exception as e:
            repository.rollback()
            raise PersistError(f"Failed to save import into '{target_deck.name}': {e}") from e

        if not saved:
            repository.rollback()
            raise PersistError(f"Failed to save import into '{target_deck.name}'")

        logger.info(
            "Merged into '%s': %d added, %d updated, %d skipped",
            target_deck.name, outcome.added, outcome.updated, outcome.skipped,
        )
        return outcome
