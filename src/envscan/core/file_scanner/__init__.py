"""
File scanner module for envscan.

Provides the language registry, directory walking under include/exclude
and depth policy, and per-file detection of environment variable reads.
"""

from .interfaces import FileScannerInterface, PathWalkerInterface
from .language_registry import LanguageRegistry, get_default_registry
from .models import (
    DetectionPattern,
    FileScanError,
    FileScanOutcome,
    LanguageConfig,
    UsageRecord,
)
from .scanner import DEFAULT_MAX_FILE_SIZE, FileScanner, relative_posix
from .walker import PathWalker

__all__ = [
    # Main classes
    "FileScanner",
    "FileScannerInterface",
    "PathWalker",
    "PathWalkerInterface",
    # Models
    "DetectionPattern",
    "LanguageConfig",
    "UsageRecord",
    "FileScanError",
    "FileScanOutcome",
    # Language registry
    "LanguageRegistry",
    "get_default_registry",
    # Helpers
    "relative_posix",
    "DEFAULT_MAX_FILE_SIZE",
]
