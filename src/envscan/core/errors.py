"""Exception types for scanning.

Only fatal conditions are exceptions. Per-file problems are recorded as
``FileScanError`` values on the scan result and never raised.
"""


class ScanError(Exception):
    """Base exception for errors that abort a whole scan."""

    pass


class InvalidRootError(ScanError):
    """Scan root does not exist or is not a directory."""

    def __init__(self, root, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Invalid scan root {root}: {reason}")


class PatternCompileError(ScanError):
    """A language pattern failed to compile while building the registry.

    A registry with a broken pattern cannot produce a trustworthy result,
    so this is raised before any file is read.
    """

    def __init__(self, language: str, pattern: str, reason: str):
        self.language = language
        self.pattern = pattern
        self.reason = reason
        super().__init__(
            f"Invalid pattern for language '{language}': {pattern!r} ({reason})"
        )
