"""Shared fixtures: repositories, audio stores and services on temp paths."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add project root to path so tests can import the leevda package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from leevda.config import SettingsManager
from leevda.models import Deck, EntryFields
from leevda.services import (
    DeckService,
    FileAudioStore,
    InMemoryAudioStore,
    InMemoryRepository,
    SQLiteRepository,
    TransferService,
    VocabularyService,
)

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def memory_repository():
    return InMemoryRepository()


@pytest.fixture
def sqlite_repository(tmp_path):
    repository = SQLiteRepository(str(tmp_path / "leevda.db"))
    yield repository
    repository.close()


@pytest.fixture(params=["memory", "sqlite"])
def repository(request, tmp_path):
    """Every repository implementation, for contract tests."""
    if request.param == "memory":
        yield InMemoryRepository()
    else:
        repository = SQLiteRepository(str(tmp_path / "contract.db"))
        yield repository
        repository.close()


@pytest.fixture
def audio_store(tmp_path):
    return FileAudioStore(str(tmp_path / "AudioRecordings"))


@pytest.fixture
def memory_audio_store():
    return InMemoryAudioStore()


def make_deck(repository, name="Turkish", sort_order=1):
    deck = Deck(id=f"DECK-{name.upper()}", name=name, glyph="", sort_order=sort_order, created_at=FIXED_NOW)
    repository.add_deck(deck)
    assert repository.save()
    return deck


def add_entry(repository, deck, word, meaning, pronunciation="", note=None, audio_file_name=None):
    entry = repository.create_entry(
        deck.id,
        EntryFields(word, meaning, pronunciation, note, audio_file_name),
        now=FIXED_NOW,
    )
    assert repository.save()
    return entry


@pytest.fixture
def deck(repository):
    return make_deck(repository)


@pytest.fixture
def deck_service(memory_repository, memory_audio_store):
    return DeckService(memory_repository, memory_audio_store)


@pytest.fixture
def vocabulary_service(memory_repository, memory_audio_store):
    return VocabularyService(memory_repository, memory_audio_store)


@pytest.fixture
def transfer_service(memory_repository, audio_store, tmp_path):
    return TransferService(memory_repository, audio_store, export_dir=str(tmp_path / "exports"))


@pytest.fixture
def settings(tmp_path):
    SettingsManager.reset_instance()
    manager = SettingsManager(str(tmp_path / "settings.json"))
    yield manager
    SettingsManager.reset_instance()
