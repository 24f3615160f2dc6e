"""Leevda - vocabulary decks with CSV and audio bundle interchange"""

__version__ = "1.0.0"
__author__ = "Leevda Team"

from .config import Config, SettingsManager
from .errors import LeevdaError, TransferError
from .models import Deck, ExportResult, ImportResult, VocabularyEntry
from .utils import CSVCodec
from .services import (
    BundlePackager,
    DeckService,
    FileAudioStore,
    ReconciliationEngine,
    SQLiteRepository,
    TransferService,
    VocabularyService,
)

__all__ = [
    'Config',
    'SettingsManager',
    'LeevdaError',
    'TransferError',
    'Deck',
    'VocabularyEntry',
    'ExportResult',
    'ImportResult',
    'CSVCodec',
    'BundlePackager',
    'DeckService',
    'FileAudioStore',
    'ReconciliationEngine',
    'SQLiteRepository',
    'TransferService',
    'VocabularyService',
]
