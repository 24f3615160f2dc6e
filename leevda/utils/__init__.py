"""Utils module."""

from .parsing import TextParser
from .csv_codec import CSVCodec
from .paths import ExportPathGenerator
from .logger import setup_logger

__all__ = [
    'TextParser',
    'CSVCodec',
    'ExportPathGenerator',
    'setup_logger'
]
