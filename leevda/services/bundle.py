"""
Bundle Packager - CSV + audio folder to/from one ZIP archive.

Archive layout:
    vocabulary.csv
    Audio/<audio-file-name>...

Both directions work through a fresh staging directory that is removed
whether the operation succeeds or fails.
"""

import logging
import shutil
import tempfile
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

from ..config import Config
from ..errors import ArchiveCreationFailed, ArchiveExtractionFailed, CsvNotFound
from ..models import VocabularyEntry
from ..utils.csv_codec import CSVCodec
from ..utils.paths import ExportPathGenerator
from .audio_store import BaseAudioStore

logger = logging.getLogger(__name__)

# Resource-fork folders added by macOS archivers
IGNORED_DIRS = {"__MACOSX"}


@dataclass
class UnpackedBundle:
    """Contents pulled out of an archive."""

    csv_document: str
    audio_blobs: Dict[str, bytes] = field(default_factory=dict)


class BundlePackager:
    """
    Packs entries with their audio into an archive and unpacks archives.

    Usage:
        packager = BundlePackager(audio_store)
        archive_path, audio_count = packager.pack(entries, "Turkish", export_dir)
        bundle = packager.unpack(archive_path)
    """

    def __init__(self, audio_store: BaseAudioStore, staging_root: Optional[str] = None):
        """
        Args:
            audio_store: Source of audio bytes on export, target on import
            staging_root: Parent directory for staging areas (system temp by default)
        """
        self.audio_store = audio_store
        self.staging_root = staging_root

    def _new_staging_dir(self, prefix: str) -> Path:
        if self.staging_root:
            Path(self.staging_root).mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=prefix, dir=self.staging_root))

    # ==================== Export ====================

    def _stage_audio(self, entries: Iterable[VocabularyEntry], audio_folder: Path) -> int:
        """Copy referenced audio into the staging folder. Missing blobs are skipped."""
        copied = 0
        for entry in entries:
            name = entry.audio_file_name
            if not name:
                continue

            target = audio_folder / Path(name).name
            if Path(name).name != name or target.exists():
                continue

            if not self.audio_store.exists(name):
                logger.debug("Audio file missing for '%s': %s", entry.word, name)
                continue

            target.write_bytes(self.audio_store.read(name))
            copied += 1
        return copied

    def pack(
        self,
        entries: Iterable[VocabularyEntry],
        deck_name: str,
        destination_dir: Optional[Union[str, Path]] = None,
        when: Optional[Union[date, datetime]] = None,
    ) -> Tuple[Path, int]:
        """
        Build ``Leevda_<deck>_<yyyy-MM-dd>.zip`` with the CSV and audio files.

        Args:
            entries: Entries to export
            deck_name: Deck display name used in the archive name
            destination_dir: Output directory (defaults to Config.EXPORT_DIR)
            when: Date used in the archive name (defaults to today)

        Returns:
            Tuple of (archive path, number of audio files packed)

        Raises:
            ArchiveCreationFailed: Writing the archive failed or produced no file
        """
        entries = list(entries)
        destination = Path(destination_dir or Config.EXPORT_DIR)
        destination.mkdir(parents=True, exist_ok=True)
        archive_path = destination / ExportPathGenerator.archive_name(deck_name, when)

        staging = self._new_staging_dir("leevda-export-")
        try:
            csv_path = staging / Config.CSV_FILENAME
            with open(csv_path, "w", encoding="utf-8", newline="") as f:
                f.write(CSVCodec.encode(entries, include_audio_column=True))

            audio_folder = staging / Config.AUDIO_FOLDER
            audio_folder.mkdir()
            audio_count = self._stage_audio(entries, audio_folder)
            logger.debug("Copied %d audio files", audio_count)

            if archive_path.exists():
                archive_path.unlink()

            try:
                shutil.make_archive(
                    str(archive_path.with_suffix("")),
                    Config.ARCHIVE_FORMAT,
                    root_dir=str(staging),
                )
            except (OSError, zipfile.BadZipFile) as e:
                raise ArchiveCreationFailed(f"Failed to create ZIP archive: {e}") from e

            if not archive_path.is_file():
                raise ArchiveCreationFailed()
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        logger.info("Packed %d entries and %d audio files into %s", len(entries), audio_count, archive_path.name)
        return archive_path, audio_count

    # ==================== Import ====================

    @staticmethod
    def _extract(archive_path: Path, staging: Path) -> None:
        root = staging.resolve()
        try:
            with zipfile.ZipFile(archive_path) as archive:
                for member in archive.namelist():
                    target = (root / member).resolve()
                    if target != root and root not in target.parents:
                        raise ArchiveExtractionFailed(f"Unsafe path in archive: {member}")
                archive.extractall(root)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveExtractionFailed(f"Failed to extract ZIP archive: {e}") from e

    @staticmethod
    def _walk(directory: Path) -> Iterator[Path]:
        """
        Depth-first, pre-order traversal in name order.

        A directory's files come before its subdirectories, so a top-level
        CSV wins over anything inside the audio folder.
        """
        children = sorted(directory.iterdir(), key=lambda p: (p.is_dir(), p.name))
        for child in children:
            if child.is_dir() and child.name in IGNORED_DIRS:
                continue
            yield child
            if child.is_dir():
                yield from BundlePackager._walk(child)

    @classmethod
    def find_csv(cls, directory: Path) -> Optional[Path]:
        for path in cls._walk(directory):
            if path.is_file() and path.suffix.lower() == ".csv" and not path.name.startswith("."):
                return path
        return None

    @classmethod
    def find_audio_folder(cls, directory: Path) -> Optional[Path]:
        audio_name = Config.AUDIO_FOLDER.lower()
        for path in cls._walk(directory):
            if path.is_dir() and path.name.lower() == audio_name:
                return path
        return None

    def unpack(self, archive_path: Union[str, Path]) -> UnpackedBundle:
        """
        Extract an archive and collect its CSV document and audio files.

        Raises:
            ArchiveExtractionFailed: Missing, corrupt or unsafe archive, or non UTF-8 CSV
            CsvNotFound: No .csv file anywhere in the archive
        """
        archive_path = Path(archive_path)
        staging = self._new_staging_dir("leevda-import-")
        try:
            self._extract(archive_path, staging)

            csv_path = self.find_csv(staging)
            if csv_path is None:
                raise CsvNotFound()

            try:
                csv_document = csv_path.read_bytes().decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ArchiveExtractionFailed(f"CSV file is not valid UTF-8: {e}") from e

            audio_blobs: Dict[str, bytes] = {}
            audio_folder = self.find_audio_folder(staging)
            if audio_folder is not None:
                for path in sorted(audio_folder.iterdir(), key=lambda p: p.name):
                    if path.is_file() and not path.name.startswith("."):
                        audio_blobs[path.name] = path.read_bytes()

            return UnpackedBundle(csv_document=csv_document, audio_blobs=audio_blobs)
        finally:
            shutil.rmtree(staging, ignore_errors=True)

    def import_audio(self, audio_blobs: Dict[str, bytes]) -> int:
        """
        Copy blobs into the audio store, never overwriting existing keys.

        Returns:
            Number of blobs copied
        """
        imported = 0
        for file_name, data in audio_blobs.items():
            if self.audio_store.exists(file_name):
                continue
            self.audio_store.copy_into(data, file_name)
            imported += 1
        return imported
