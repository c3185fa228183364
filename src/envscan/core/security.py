"""
Heuristic detection of hardcoded secrets.

Rules are line based and deliberately loose. A line that reads a variable
from the environment is not a hardcoded secret, so the file scanner only
checks lines that produced no usage record.
"""

import re
from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """Severity of a security finding."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


@dataclass(frozen=True, order=True)
class SecurityIssue:
    """
    A possible hardcoded secret.

    Attributes:
        file_path: POSIX path relative to the scan root
        line_number: 1-based line of the finding
        rule: Name of the rule that fired
        severity: How serious the finding is
        message: Human-readable description (never includes the secret)
    """

    file_path: str
    line_number: int
    rule: str
    severity: Severity
    message: str


@dataclass(frozen=True)
class SecurityRule:
    name: str
    pattern: re.Pattern
    severity: Severity
    description: str


DEFAULT_SECURITY_RULES: tuple[SecurityRule, ...] = (
    SecurityRule(
        "password-assignment",
        re.compile(r"(?i)password\s*=\s*[\"']?[^\"'\s]+[\"']?"),
        Severity.HIGH,
        "Password assigned a literal value",
    ),
    SecurityRule(
        "secret-assignment",
        re.compile(r"(?i)secret.*=\s*[\"']?[^\"'\s]{8,}"),
        Severity.HIGH,
        "Secret assigned a literal value",
    ),
    SecurityRule(
        "api-key-assignment",
        re.compile(r"(?i)api[_-]?key.*=\s*[\"']?[^\"'\s]{16,}"),
        Severity.MEDIUM,
        "API key assigned a literal value",
    ),
    SecurityRule(
        "token-assignment",
        re.compile(r"(?i)token.*=\s*[\"']?[^\"'\s]{16,}"),
        Severity.MEDIUM,
        "Token assigned a literal value",
    ),
    SecurityRule(
        "private-key",
        re.compile(r"(?i)private[_-]?key"),
        Severity.CRITICAL,
        "Private key material referenced in source",
    ),
    SecurityRule(
        "aws-secret",
        re.compile(r"(?i)aws[_-]?secret"),
        Severity.CRITICAL,
        "AWS secret referenced in source",
    ),
    SecurityRule(
        "database-url-credentials",
        re.compile(r"(?i)database[_-]?url.*=.*://.*:"),
        Severity.HIGH,
        "Database URL with inline credentials",
    ),
    SecurityRule(
        "connection-string-password",
        re.compile(r"(?i)connection[_-]?string.*=.*password"),
        Severity.HIGH,
        "Connection string containing a password",
    ),
)


def check_line(
    line: str,
    file_path: str,
    line_number: int,
    rules: tuple[SecurityRule, ...] = DEFAULT_SECURITY_RULES,
) -> list[SecurityIssue]:
    """Return one issue per rule that matches the line."""
    issues = []
    for rule in rules:
        if rule.pattern.search(line):
            issues.append(
                SecurityIssue(
                    file_path=file_path,
                    line_number=line_number,
                    rule=rule.name,
                    severity=rule.severity,
                    message=f"Potential security issue: {rule.description}",
                )
            )
    return issues
