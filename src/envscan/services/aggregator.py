"""
Aggregation of per-file scan outcomes into a ScanResult.
"""

import logging
from collections import Counter, defaultdict

from envscan.core.file_scanner import FileScanError, FileScanOutcome, UsageRecord
from envscan.core.security import SecurityIssue

from .scan_models import ScanResult, VariableUsage

logger = logging.getLogger(__name__)


class ScanAggregator:
    """
    Folds FileScanOutcome values into a deterministic ScanResult.

    Accumulation only appends and counts, and build() sorts everything it
    returns, so adding outcomes (or merging aggregators) in any order gives
    an equal result. Not thread-safe: give each worker its own aggregator, or
    add outcomes from a single thread.
    """

    def __init__(self) -> None:
        self._records: dict[str, list[UsageRecord]] = defaultdict(list)
        self._errors: list[FileScanError] = []
        self._security_issues: list[SecurityIssue] = []
        self._languages: Counter[str] = Counter()
        self._files_scanned = 0
        self._files_skipped = 0

    @property
    def files_scanned(self) -> int:
        return self._files_scanned

    @property
    def files_skipped(self) -> int:
        return self._files_skipped

    def add(self, outcome: FileScanOutcome) -> None:
        """Fold one file's outcome in."""
        if outcome.error is not None:
            self._errors.append(outcome.error)
            self._files_skipped += 1
            return

        self._files_scanned += 1
        self._languages[outcome.language] += 1
        for record in outcome.records:
            self._records[record.variable_name].append(record)
        self._security_issues.extend(outcome.security_issues)

    def add_skipped(self, count: int = 1) -> None:
        """Count files excluded by policy (e.g. unknown language)."""
        self._files_skipped += count

    def add_error(self, error: FileScanError) -> None:
        """Record an error that happened outside the file scanner."""
        self._errors.append(error)
        self._files_skipped += 1

    def merge(self, other: "ScanAggregator") -> "ScanAggregator":
        """Fold another aggregator's partial result into this one."""
        for name, records in other._records.items():
            self._records[name].extend(records)
        self._errors.extend(other._errors)
        self._security_issues.extend(other._security_issues)
        self._languages.update(other._languages)
        self._files_scanned += other._files_scanned
        self._files_skipped += other._files_skipped
        return self

    def build(self) -> ScanResult:
        """
        Produce the final ScanResult.

        Records are sorted by (file_path, line_number), with the remaining
        record fields as tie-breakers so equal inputs give identical output.
        """
        variables: dict[str, VariableUsage] = {}
        patterns_matched = 0
        for name in sorted(self._records):
            records = sorted(self._records[name])
            patterns_matched += len(records)
            variables[name] = VariableUsage(
                name=name,
                total_count=len(records),
                files=sorted({record.file_path for record in records}),
                records=records,
            )

        result = ScanResult(
            variables=variables,
            files_scanned=self._files_scanned,
            files_skipped=self._files_skipped,
            errors=sorted(self._errors),
            languages_detected=dict(sorted(self._languages.items())),
            patterns_matched=patterns_matched,
            security_issues=sorted(self._security_issues),
        )
        logger.debug(
            f"Aggregated {len(variables)} variables from {self._files_scanned} files"
        )
        return result
