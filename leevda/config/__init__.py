"""Configuration module for Leevda."""

from .settings import Config
from .languages import DEFAULT_GLYPH, LANGUAGE_FLAGS, available_languages, get_flag
from .config_manager import SettingsManager

__all__ = [
    'Config',
    'SettingsManager',
    'DEFAULT_GLYPH',
    'LANGUAGE_FLAGS',
    'available_languages',
    'get_flag',
]
