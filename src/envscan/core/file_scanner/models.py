"""
Data models for the file scanner module.
"""

import fnmatch
import re
from dataclasses import dataclass, field
from pathlib import PurePath

from envscan.core.errors import PatternCompileError
from envscan.core.security import SecurityIssue


@dataclass(frozen=True)
class DetectionPattern:
    """
    A regular expression that recognizes one way of reading an environment variable.

    Attributes:
        pattern: Regular expression source
        group: Index of the capture group holding the variable name
    """

    pattern: str
    group: int = 1


@dataclass(frozen=True)
class LanguageConfig:
    """
    Scanning rules for one language.

    Patterns are compiled when the config is created, so an invalid table
    fails before any file is read.

    Attributes:
        name: Language identifier ('python', 'javascript', 'go', ...)
        file_matchers: Extensions ('.py') or file name globs ('Dockerfile', '*.env.example')
        detection_patterns: Ordered patterns applied to every line
        comment_patterns: Optional comment regexes for the best-effort strip pass
        frameworks: Frameworks the patterns are known to cover (informational)
    """

    name: str
    file_matchers: tuple[str, ...]
    detection_patterns: tuple[DetectionPattern, ...]
    comment_patterns: tuple[str, ...] = ()
    frameworks: tuple[str, ...] = ()
    detectors: tuple[tuple[re.Pattern, int], ...] = field(
        init=False, repr=False, compare=False
    )
    comment_regex: re.Pattern | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "file_matchers", tuple(self.file_matchers))
        object.__setattr__(self, "detection_patterns", tuple(self.detection_patterns))
        object.__setattr__(self, "comment_patterns", tuple(self.comment_patterns))
        object.__setattr__(self, "frameworks", tuple(self.frameworks))

        detectors = []
        for detection in self.detection_patterns:
            compiled = self._compile(detection.pattern)
            if detection.group < 0 or detection.group > compiled.groups:
                raise PatternCompileError(
                    self.name,
                    detection.pattern,
                    f"capture group {detection.group} out of range "
                    f"(pattern has {compiled.groups})",
                )
            detectors.append((compiled, detection.group))
        object.__setattr__(self, "detectors", tuple(detectors))

        comment_regex = None
        if self.comment_patterns:
            for comment in self.comment_patterns:
                self._compile(comment, re.MULTILINE)
            # One alternation so the leftmost comment wins, e.g. `//` inside `/* */`
            comment_regex = self._compile(
                "|".join(f"(?:{comment})" for comment in self.comment_patterns),
                re.MULTILINE,
            )
        object.__setattr__(self, "comment_regex", comment_regex)

    def _compile(self, pattern: str, flags: int = 0) -> re.Pattern:
        try:
            return re.compile(pattern, flags)
        except re.error as e:
            raise PatternCompileError(self.name, pattern, str(e)) from e

    def matches(self, file_path: PurePath) -> bool:
        """Check whether a file belongs to this language by its name."""
        name = file_path.name
        lowered = name.lower()
        for matcher in self.file_matchers:
            if matcher.startswith(".") and not any(c in matcher for c in "*?["):
                if lowered.endswith(matcher.lower()):
                    return True
            elif fnmatch.fnmatchcase(name, matcher):
                return True
        return False


@dataclass(frozen=True, order=True)
class UsageRecord:
    """
    One detected read of an environment variable.

    Field order doubles as the sort order used for deterministic results.

    Attributes:
        file_path: POSIX path relative to the scan root
        line_number: Line on which the match starts (1-based)
        variable_name: Captured name, verbatim
        language: Language the file was scanned as
        context: Full original source line
    """

    file_path: str
    line_number: int
    variable_name: str
    language: str
    context: str


@dataclass(frozen=True, order=True)
class FileScanError:
    """A non-fatal problem with a single file."""

    file_path: str
    message: str


@dataclass
class FileScanOutcome:
    """Everything the file scanner learned about one file."""

    file_path: str
    language: str
    records: list[UsageRecord] = field(default_factory=list)
    security_issues: list[SecurityIssue] = field(default_factory=list)
    error: FileScanError | None = None
