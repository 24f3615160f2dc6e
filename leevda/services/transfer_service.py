"""
Transfer Service - export and import orchestration.

Export:  entries -> CSV codec -> file, or -> bundle packager -> ZIP archive
Import:  file/archive -> (bundle unpackager) -> CSV codec -> reconciliation
         engine -> repository, then new audio files -> audio store

Every document-level failure is surfaced as one :class:`TransferError`
carrying the kind of the underlying error.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from ..config import Config
from ..errors import LeevdaError, TransferError, ValidationError
from ..models import Deck, ExportResult, ImportResult
from ..utils.csv_codec import CSVCodec
from ..utils.paths import ExportPathGenerator
from .audio_store import BaseAudioStore
from .bundle import BundlePackager
from .reconciliation import ReconciliationEngine
from .repository import BaseRepository

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class TransferService:
    """
    Coordinates CSV/ZIP export and import for one repository and audio store.

    Usage:
        transfer = TransferService(repository, audio_store)
        result = transfer.export_bundle(deck)
        outcome = transfer.import_file("Leevda_Turkish_2024-05-01.zip", other_deck)
    """

    # Thread pool for blocking I/O operations
    _executor = ThreadPoolExecutor(max_workers=Config.IO_WORKERS)

    def __init__(
        self,
        repository: BaseRepository,
        audio_store: BaseAudioStore,
        engine: Optional[ReconciliationEngine] = None,
        packager: Optional[BundlePackager] = None,
        export_dir: Optional[PathLike] = None,
        io_workers: Optional[int] = None,
    ):
        """
        Args:
            repository: Deck and entry storage
            audio_store: Audio blob storage
            engine: Reconciliation engine (a default one is created)
            packager: Bundle packager (defaults to one over ``audio_store``)
            export_dir: Default output directory (defaults to Config.EXPORT_DIR)
            io_workers: Thread pool size for the async wrappers (shared pool when omitted)
        """
        self.repository = repository
        self.audio_store = audio_store
        self.engine = engine or ReconciliationEngine()
        self.packager = packager or BundlePackager(audio_store)
        self.export_dir = Path(export_dir or Config.EXPORT_DIR)
        if io_workers and io_workers != Config.IO_WORKERS:
            self._executor = ThreadPoolExecutor(max_workers=io_workers)

    def _destination(self, destination_dir: Optional[PathLike]) -> Path:
        destination = Path(destination_dir) if destination_dir else self.export_dir
        destination.mkdir(parents=True, exist_ok=True)
        return destination

    # ==================== Export ====================

    def export_csv(
        self,
        deck: Deck,
        destination_dir: Optional[PathLike] = None,
        when: Optional[Union[date, datetime]] = None,
    ) -> ExportResult:
        """Write the deck as ``Leevda_<deck>_<yyyy-MM-dd>.csv`` without the audio column."""
        try:
            entries = self.repository.list_entries(deck.id)
            path = self._destination(destination_dir) / ExportPathGenerator.csv_export_name(deck.name, when)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(CSVCodec.encode(entries, include_audio_column=False))
        except OSError as e:
            raise TransferError(e, "export") from e

        logger.info("Exported %d entries of '%s' to %s", len(entries), deck.name, path.name)
        return ExportResult(path=path, entry_count=len(entries))

    def export_bundle(
        self,
        deck: Deck,
        destination_dir: Optional[PathLike] = None,
        when: Optional[Union[date, datetime]] = None,
    ) -> ExportResult:
        """Write the deck and its audio files as a ZIP bundle."""
        try:
            entries = self.repository.list_entries(deck.id)
            path, audio_count = self.packager.pack(entries, deck.name, self._destination(destination_dir), when)
        except (LeevdaError, OSError) as e:
            raise TransferError(e, "export") from e

        return ExportResult(path=path, entry_count=len(entries), audio_count=audio_count)

    def export(self, deck: Deck, include_audio: bool = True, destination_dir: Optional[PathLike] = None) -> ExportResult:
        if include_audio:
            return self.export_bundle(deck, destination_dir)
        return self.export_csv(deck, destination_dir)

    # ==================== Import ====================

    def import_csv_document(self, text: str, deck: Deck) -> ImportResult:
        """Decode a CSV document and merge it into ``deck``. Raises LeevdaError."""
        document = CSVCodec.decode(text)
        outcome = self.engine.merge(document.rows, document.has_audio_column, deck, self.repository)
        return ImportResult.from_outcome(outcome)

    @staticmethod
    def _read_csv(path: Path) -> str:
        try:
            return path.read_bytes().decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ValidationError(f"CSV file is not valid UTF-8: {e}") from e

    def import_csv(self, path: PathLike, deck: Deck) -> ImportResult:
        """Import a plain CSV file. No audio is copied."""
        path = Path(path)
        try:
            result = self.import_csv_document(self._read_csv(path), deck)
        except (LeevdaError, OSError) as e:
            raise TransferError(e, "import") from e

        logger.info("Imported %s into '%s': %s", path.name, deck.name, result.summary())
        return result

    def import_bundle(self, path: PathLike, deck: Deck) -> ImportResult:
        """
        Import a ZIP bundle: merge its CSV, then copy audio files that the
        audio store does not already have.
        """
        path = Path(path)
        try:
            bundle = self.packager.unpack(path)
            result = self.import_csv_document(bundle.csv_document, deck)
            result.audio_imported_count = self.packager.import_audio(bundle.audio_blobs)
        except (LeevdaError, OSError) as e:
            raise TransferError(e, "import") from e

        logger.info("Imported %s into '%s': %s", path.name, deck.name, result.summary())
        return result

    def import_file(self, path: PathLike, deck: Deck) -> ImportResult:
        """Import a ``.zip`` bundle or a CSV file, chosen by extension."""
        path = Path(path)
        if path.suffix.lower() == f".{Config.ARCHIVE_FORMAT}":
            return self.import_bundle(path, deck)
        return self.import_csv(path, deck)

    # ==================== Async wrappers ====================

    async def export_bundle_async(self, deck: Deck, destination_dir: Optional[PathLike] = None) -> ExportResult:
        """Run :meth:`export_bundle` in the I/O thread pool."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(self._executor, self.export_bundle, deck, destination_dir)

    async def import_file_async(self, path: PathLike, deck: Deck) -> ImportResult:
        """Run :meth:`import_file` in the I/O thread pool."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(self._executor, self.import_file, path, deck)
