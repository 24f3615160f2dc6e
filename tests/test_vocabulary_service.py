"""Tests for the single-entry vocabulary path."""

import pytest

from conftest import make_deck
from leevda.errors import DuplicateWord, PersistError, ValidationError


@pytest.fixture
def deck(memory_repository):
    return make_deck(memory_repository)


def test_add_entry_trims_and_saves(vocabulary_service, memory_repository, deck):
    entry = vocabulary_service.add_entry(deck, "  merhaba ", " hello ", " mer-ha-ba ", "  ")

    assert (entry.word, entry.meaning, entry.pronunciation, entry.note) == ("merhaba", "hello", "mer-ha-ba", None)
    assert not memory_repository.is_dirty
    assert memory_repository.count_entries(deck.id) == 1


@pytest.mark.parametrize("word, meaning", [("", "hello"), ("merhaba", "  ")])
def test_add_entry_requires_word_and_meaning(vocabulary_service, deck, word, meaning):
    with pytest.raises(ValidationError):
        vocabulary_service.add_entry(deck, word, meaning)


def test_add_entry_duplicate_carries_existing(vocabulary_service, deck):
    existing = vocabulary_service.add_entry(deck, "Merhaba", "hello")

    with pytest.raises(DuplicateWord) as excinfo:
        vocabulary_service.add_entry(deck, "merhaba", "hi")

    assert excinfo.value.existing == existing
    assert vocabulary_service.check_for_duplicate(deck, "MERHABA") == existing


def test_update_entry_same_word_new_case(vocabulary_service, deck):
    entry = vocabulary_service.add_entry(deck, "merhaba", "hello")

    updated = vocabulary_service.update_entry(entry, "Merhaba", "hi there")

    assert updated.id == entry.id
    assert (updated.word, updated.meaning) == ("Merhaba", "hi there")


def test_update_entry_collision_raises(vocabulary_service, deck):
    vocabulary_service.add_entry(deck, "cat", "kedi")
    dog = vocabulary_service.add_entry(deck, "dog", "köpek")

    with pytest.raises(DuplicateWord):
        vocabulary_service.update_entry(dog, "CAT", "köpek")


def test_delete_entry_removes_audio(vocabulary_service, memory_audio_store, deck):
    memory_audio_store.copy_into(b"a", "A.m4a")
    entry = vocabulary_service.add_entry(deck, "cat", "kedi", audio_file_name="A.m4a")

    assert vocabulary_service.delete_entry(entry)
    assert not memory_audio_store.exists("A.m4a")
    assert vocabulary_service.list_entries(deck) == []
    assert not vocabulary_service.delete_entry(entry)


def test_search(vocabulary_service, deck):
    vocabulary_service.add_entry(deck, "merhaba", "hello", "mer-ha-ba")
    vocabulary_service.add_entry(deck, "kedi", "cat")
    vocabulary_service.add_entry(deck, "su", "water", "soo")

    assert [e.word for e in vocabulary_service.search(deck, "HEL")] == ["merhaba"]
    assert [e.word for e in vocabulary_service.search(deck, "soo")] == ["su"]
    assert [e.word for e in vocabulary_service.search(deck, "  ")] == ["kedi", "merhaba", "su"]


def test_statistics(vocabulary_service, deck):
    vocabulary_service.add_entry(deck, "merhaba", "hello", "mer-ha-ba", "greeting", "M.m4a")
    vocabulary_service.add_entry(deck, "kedi", "cat")

    assert vocabulary_service.get_statistics(deck) == {
        "total_words": 2,
        "with_audio": 1,
        "with_note": 1,
        "with_pronunciation": 1,
    }


def test_statistics_empty_deck(vocabulary_service, deck):
    assert vocabulary_service.get_statistics(deck)["total_words"] == 0


def test_generate_audio_file_name(vocabulary_service):
    assert vocabulary_service.generate_audio_file_name("ABC") == "ABC.m4a"


def test_save_failure_raises_persist_error(vocabulary_service, memory_repository, deck, monkeypatch):
    def failing_commit():
        raise OSError("disk full")

    monkeypatch.setattr(memory_repository, "_commit", failing_commit)

    with pytest.raises(PersistError):
        vocabulary_service.add_entry(deck, "cat", "kedi")

    assert memory_repository.count_entries(deck.id) == 0
