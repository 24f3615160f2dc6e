"""Services layer for business logic separation."""

from .repository import BaseRepository, InMemoryRepository, SQLiteRepository
from .audio_store import BaseAudioStore, FileAudioStore, InMemoryAudioStore
from .reconciliation import ReconciliationEngine
from .bundle import BundlePackager, UnpackedBundle
from .deck_service import DeckService
from .vocabulary_service import VocabularyService
from .transfer_service import TransferService

__all__ = [
    "BaseRepository",
    "InMemoryRepository",
    "SQLiteRepository",
    "BaseAudioStore",
    "FileAudioStore",
    "InMemoryAudioStore",
    "ReconciliationEngine",
    "BundlePackager",
    "UnpackedBundle",
    "DeckService",
    "VocabularyService",
    "TransferService",
]
