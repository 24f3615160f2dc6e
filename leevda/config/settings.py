"""Global settings and configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass
class Config:
    """Application-wide configuration."""

    # Cross-platform paths using pathlib
    # BASE_DIR is the project root (parent of leevda/)
    BASE_DIR: Path = Path(__file__).parent.parent.parent.resolve()

    DATA_DIR: str = os.environ.get("LEEVDA_DATA_DIR", str(BASE_DIR / "data"))
    DB_FILE: str = os.environ.get("LEEVDA_DB_FILE", str(Path(DATA_DIR) / "leevda.db"))
    AUDIO_DIR: str = os.environ.get("LEEVDA_AUDIO_DIR", str(Path(DATA_DIR) / "AudioRecordings"))
    EXPORT_DIR: str = os.environ.get("LEEVDA_EXPORT_DIR", str(Path(DATA_DIR) / "exports"))
    LOG_LEVEL: str = os.environ.get("LEEVDA_LOG_LEVEL", "INFO")

    # Interchange format
    CSV_FILENAME: str = "vocabulary.csv"
    AUDIO_FOLDER: str = "Audio"
    EXPORT_PREFIX: str = "Leevda"
    ARCHIVE_FORMAT: str = "zip"
    EXPORT_DATE_FORMAT: str = "%Y-%m-%d"
    AUDIO_EXTENSION: str = ".m4a"

    # Decks
    DEFAULT_DECK_NAME: str = "English"

    # Thread pool size for *_async wrappers
    IO_WORKERS: int = 2
