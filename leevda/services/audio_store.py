"""
Audio Store - keyed storage of recorded audio clips.

Entries only reference audio by filename; the bytes live here.
"""

import logging
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from ..config import Config

logger = logging.getLogger(__name__)


class BaseAudioStore(ABC):
    """Contract for audio blob storage keyed by filename."""

    @abstractmethod
    def exists(self, file_name: str) -> bool:
        """Check whether a blob with this key exists."""

    @abstractmethod
    def copy_into(self, data: bytes, file_name: str) -> None:
        """Store bytes under the given key."""

    @abstractmethod
    def read(self, file_name: str) -> bytes:
        """Read the bytes stored under a key. Raises FileNotFoundError."""

    @abstractmethod
    def delete(self, file_name: str) -> bool:
        """Delete a blob. Returns True if something was removed."""

    @abstractmethod
    def list_files(self) -> List[str]:
        """All stored keys, sorted."""


class FileAudioStore(BaseAudioStore):
    """
    Audio store backed by a directory on disk.

    Every key is a plain filename inside ``audio_dir``.
    """

    def __init__(self, audio_dir: Optional[str] = None):
        """
        Initialize audio store.

        Args:
            audio_dir: Directory for audio files (defaults to Config.AUDIO_DIR)
        """
        self.audio_dir = Path(audio_dir or Config.AUDIO_DIR)
        self.audio_dir.mkdir(parents=True, exist_ok=True)

    def get_path(self, file_name: str) -> Path:
        """
        Get the path for an audio file.

        Raises:
            ValueError: The key is not a plain filename
        """
        name = Path(file_name).name
        if not file_name or name != file_name or name in (".", ".."):
            raise ValueError(f"Invalid audio file name: {file_name!r}")
        return self.audio_dir / name

    def exists(self, file_name: str) -> bool:
        try:
            return self.get_path(file_name).is_file()
        except ValueError:
            return False

    def copy_into(self, data: bytes, file_name: str) -> None:
        """Write bytes atomically: temp file + rename."""
        target = self.get_path(file_name)
        temp_file = target.with_name(f".{target.name}.{uuid.uuid4().hex[:8]}.tmp")
        try:
            temp_file.write_bytes(data)
            os.replace(temp_file, target)
        finally:
            if temp_file.exists():
                temp_file.unlink()

    def read(self, file_name: str) -> bytes:
        return self.get_path(file_name).read_bytes()

    def delete(self, file_name: str) -> bool:
        try:
            path = self.get_path(file_name)
        except ValueError:
            return False
        if not path.exists():
            return False
        path.unlink()
        logger.debug("Deleted audio file: %s", file_name)
        return True

    def list_files(self) -> List[str]:
        if not self.audio_dir.exists():
            return []
        return sorted(p.name for p in self.audio_dir.iterdir() if p.is_file() and not p.name.startswith("."))


class InMemoryAudioStore(BaseAudioStore):
    """Dictionary-backed audio store."""

    def __init__(self, blobs: Optional[Dict[str, bytes]] = None):
        self._blobs: Dict[str, bytes] = dict(blobs or {})

    def exists(self, file_name: str) -> bool:
        return file_name in self._blobs

    def copy_into(self, data: bytes, file_name: str) -> None:
        self._blobs[file_name] = bytes(data)

    def read(self, file_name: str) -> bytes:
        try:
            return self._blobs[file_name]
        except KeyError:
            raise FileNotFoundError(file_name) from None

    def delete(self, file_name: str) -> bool:
        return self._blobs.pop(file_name, None) is not None

    def list_files(self) -> List[str]:
        return sorted(self._blobs)
