"""
Services Layer - Scan orchestration and result aggregation.
"""

from envscan.services.aggregator import ScanAggregator
from envscan.services.scan_models import ScanResult, VariableUsage
from envscan.services.scan_service import (
    ProgressCallback,
    ScanService,
    scan,
    validate_root,
)

__all__ = [
    "ScanAggregator",
    "ScanResult",
    "VariableUsage",
    "ScanService",
    "ProgressCallback",
    "scan",
    "validate_root",
]
