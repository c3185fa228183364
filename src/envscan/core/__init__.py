"""
Core Layer - Language registry, path walking, file scanning and configuration.
"""

from envscan.core.comment_stripper import strip_comments
from envscan.core.config import (
    EnvScanConfig,
    LoggingConfig,
    ScanOptions,
    load_config,
)
from envscan.core.errors import InvalidRootError, PatternCompileError, ScanError
from envscan.core.file_scanner import (
    DetectionPattern,
    FileScanError,
    FileScanner,
    FileScannerInterface,
    FileScanOutcome,
    LanguageConfig,
    LanguageRegistry,
    PathWalker,
    PathWalkerInterface,
    UsageRecord,
    get_default_registry,
)
from envscan.core.security import (
    DEFAULT_SECURITY_RULES,
    SecurityIssue,
    SecurityRule,
    Severity,
    check_line,
)

__all__ = [
    # Config
    "EnvScanConfig",
    "ScanOptions",
    "LoggingConfig",
    "load_config",
    # Errors
    "ScanError",
    "InvalidRootError",
    "PatternCompileError",
    # File scanner
    "DetectionPattern",
    "LanguageConfig",
    "LanguageRegistry",
    "get_default_registry",
    "UsageRecord",
    "FileScanError",
    "FileScanOutcome",
    "FileScanner",
    "FileScannerInterface",
    "PathWalker",
    "PathWalkerInterface",
    "strip_comments",
    # Security
    "Severity",
    "SecurityIssue",
    "SecurityRule",
    "DEFAULT_SECURITY_RULES",
    "check_line",
]
