"""
Scan Service data models.

Contains dataclasses for aggregated scan results.
"""

import json
from dataclasses import asdict, dataclass, field

import yaml

from envscan.core.file_scanner import FileScanError, UsageRecord
from envscan.core.security import SecurityIssue


@dataclass
class VariableUsage:
    """All usages of one environment variable."""

    name: str
    total_count: int = 0
    files: list[str] = field(default_factory=list)
    records: list[UsageRecord] = field(default_factory=list)


@dataclass
class ScanResult:
    """
    Result of a scan.

    Attributes:
        variables: Variable name -> VariableUsage, records sorted by (file, line)
        files_scanned: Files classified and read (with or without matches)
        files_skipped: Listed files rejected by the include/exclude patterns, files
            of unknown language and files that could not be read. Files inside
            pruned directories or beyond max_depth are never listed, so never
            counted
        errors: Non-fatal per-file errors, sorted by path
        languages_detected: Language name -> number of files scanned as it
        patterns_matched: Total number of usage records
        security_issues: Possible hardcoded secrets, sorted by location
        duration_seconds: Wall-clock duration (ignored when comparing results)
    """

    variables: dict[str, VariableUsage] = field(default_factory=dict)
    files_scanned: int = 0
    files_skipped: int = 0
    errors: list[FileScanError] = field(default_factory=list)
    languages_detected: dict[str, int] = field(default_factory=dict)
    patterns_matched: int = 0
    security_issues: list[SecurityIssue] = field(default_factory=list)
    duration_seconds: float = field(default=0.0, compare=False)

    def to_dict(self) -> dict:
        """Convert to plain data, variables and languages in name order."""
        data = asdict(self)
        data["variables"] = {name: data["variables"][name] for name in sorted(data["variables"])}
        data["languages_detected"] = dict(sorted(data["languages_detected"].items()))
        for issue in data["security_issues"]:
            issue["severity"] = issue["severity"].value
        return data

    def to_json(self) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def to_yaml(self) -> str:
        """Serialize to a YAML string."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
