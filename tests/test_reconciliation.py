"""Tests for merging decoded CSV rows into a deck."""

import sqlite3

import pytest

from conftest import FIXED_NOW, add_entry, make_deck
from leevda.errors import PersistError
from leevda.models import RawRow
from leevda.services import InMemoryRepository, ReconciliationEngine, SQLiteRepository
from leevda.utils import CSVCodec


def merge_text(repository, deck, text):
    document = CSVCodec.decode(text)
    engine = ReconciliationEngine(clock=lambda: FIXED_NOW)
    return engine.merge(document.rows, document.has_audio_column, deck, repository)


def test_audio_row_into_empty_deck(repository, deck):
    outcome = merge_text(
        repository, deck,
        "Word,Meaning,Pronunciation,Note,AudioFileName\ncat,kedi,kat,,cat123.m4a\n",
    )

    assert (outcome.added, outcome.updated, outcome.skipped) == (1, 0, 0)
    assert outcome.audio_candidates == ["cat123.m4a"]

    [entry] = repository.list_entries(deck.id)
    assert entry.word == "cat"
    assert entry.audio_file_name == "cat123.m4a"
    assert entry.note is None


def test_audio_field_ignored_without_audio_header(repository, deck):
    outcome = merge_text(repository, deck, "Word,Meaning,Pronunciation,Note\ncat,kedi,kat,,cat123.m4a\n")

    assert outcome.added == 1
    assert outcome.audio_candidates == []
    assert repository.list_entries(deck.id)[0].audio_file_name is None


def test_reimport_is_idempotent(repository, deck):
    text = "Word,Meaning,Pronunciation,Note\ncat,kedi,kat,\ndog,köpek,,pet\nbird,kuş,,\n"

    first = merge_text(repository, deck, text)
    second = merge_text(repository, deck, text)

    assert (first.added, first.updated) == (3, 0)
    assert (second.added, second.updated, second.skipped) == (0, 3, 0)
    assert repository.count_entries(deck.id) == 3


def test_case_insensitive_match_updates_existing(repository, deck):
    existing = add_entry(repository, deck, "Cat", "old meaning")

    outcome = merge_text(repository, deck, "Word,Meaning,Pronunciation,Note\ncat,kedi,kat,pet\n")

    assert (outcome.added, outcome.updated) == (0, 1)
    [entry] = repository.list_entries(deck.id)
    assert entry.id == existing.id
    assert entry.word == "Cat"
    assert entry.meaning == "kedi"
    assert entry.pronunciation == "kat"
    assert entry.note == "pet"
    assert entry.created_at == existing.created_at


def test_same_word_twice_in_one_document_adds_then_updates(repository, deck):
    outcome = merge_text(repository, deck, "Word,Meaning,Pronunciation,Note\ncat,first,,\nCAT,second,,\n")

    assert (outcome.added, outcome.updated) == (1, 1)
    [entry] = repository.list_entries(deck.id)
    assert entry.meaning == "second"


def test_short_rows_are_skipped(repository, deck):
    outcome = merge_text(repository, deck, "Word,Meaning,Pronunciation,Note\nonly,two\nthree,fields,here\n")

    assert (outcome.added, outcome.updated, outcome.skipped) == (0, 0, 2)
    assert repository.count_entries(deck.id) == 0


def test_rows_with_blank_word_or_meaning_are_skipped(repository, deck):
    outcome = merge_text(repository, deck, "Word,Meaning,Pronunciation,Note\n,kedi,,\ncat,,,\n")

    assert outcome.skipped == 2
    assert repository.count_entries(deck.id) == 0


def test_other_decks_are_untouched(repository, deck):
    other = make_deck(repository, "German", sort_order=2)
    add_entry(repository, other, "cat", "Katze")

    outcome = merge_text(repository, deck, "Word,Meaning,Pronunciation,Note\ncat,kedi,,\n")

    assert outcome.added == 1
    assert repository.list_entries(other.id)[0].meaning == "Katze"


def test_row_to_fields_maps_empty_note_to_none():
    fields = ReconciliationEngine.row_to_fields(RawRow(1, ("cat", "kedi", "kat", "", "a.m4a")), True)

    assert fields.note is None
    assert fields.audio_file_name == "a.m4a"
    assert ReconciliationEngine.row_to_fields(RawRow(2, ("cat", "kedi", "kat")), True) is None


class FailingRepository(InMemoryRepository):
    """Repository whose commit step fails after the first successful save."""

    fail = False

    def _commit(self):
        if self.fail:
            raise OSError("disk full")
        super()._commit()


def test_failed_save_raises_and_leaves_repository_unchanged():
    repository = FailingRepository()
    deck = make_deck(repository)
    add_entry(repository, deck, "cat", "kedi")
    repository.fail = True

    with pytest.raises(PersistError):
        merge_text(repository, deck, "Word,Meaning,Pronunciation,Note\ncat,changed,,\ndog,köpek,,\n")

    entries = repository.list_entries(deck.id)
    assert [(e.word, e.meaning) for e in entries] == [("cat", "kedi")]
    assert not repository.is_dirty


class FailingSQLiteRepository(SQLiteRepository):
    """SQLite repository whose commit fails while ``fail`` is set."""

    fail = False

    def _commit(self):
        if self.fail:
            raise sqlite3.OperationalError("database is locked")
        super()._commit()


def test_failed_sqlite_save_rolls_back_transaction(tmp_path):
    with FailingSQLiteRepository(str(tmp_path / "failing.db")) as repository:
        deck = make_deck(repository)
        add_entry(repository, deck, "cat", "kedi")
        repository.fail = True

        with pytest.raises(PersistError):
            merge_text(repository, deck, "Word,Meaning,Pronunciation,Note\ncat,changed,,\ndog,köpek,,\n")

        assert not repository.in_transaction
        entries = repository.list_entries(deck.id)
        assert [(e.word, e.meaning) for e in entries] == [("cat", "kedi")]
