"""
envscan - Multi-language environment variable usage scanner.
"""

from envscan.core.config import ScanOptions
from envscan.core.errors import InvalidRootError, PatternCompileError, ScanError
from envscan.core.file_scanner import LanguageConfig, LanguageRegistry, UsageRecord
from envscan.services import ScanResult, ScanService, VariableUsage, scan

__version__ = "0.1.0"

__all__ = [
    "scan",
    "ScanService",
    "ScanOptions",
    "ScanResult",
    "VariableUsage",
    "UsageRecord",
    "LanguageConfig",
    "LanguageRegistry",
    "ScanError",
    "InvalidRootError",
    "PatternCompileError",
    "__version__",
]
