"""
Abstract interfaces for file discovery and scanning operations.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from pathlib import Path

from .models import FileScanOutcome, LanguageConfig


class PathWalkerInterface(ABC):
    """
    Abstract interface for enumerating candidate files under a root.

    Sequential and parallel implementations must yield the same set of
    paths; only the order may differ.
    """

    @abstractmethod
    def walk(
        self, root_path: Path, on_filtered: Callable[[Path], None] | None = None
    ) -> Iterator[Path]:
        """
        Lazily yield candidate file paths under root_path.

        on_filtered, when given, is called for each listed file the
        include/exclude policy rejects.

        Notes:
            - Never follows symlinks
            - Never descends into excluded directories
            - Never yields a file deeper than the configured maximum depth
        """
        pass


class FileScannerInterface(ABC):
    """Abstract interface for extracting usage records from one file."""

    @abstractmethod
    def scan_file(
        self, file_path: Path, root_path: Path, language: LanguageConfig
    ) -> FileScanOutcome:
        """
        Scan one file already classified as the given language.

        Notes:
            - Never raises for unreadable or oversized files; the problem is
              reported through FileScanOutcome.error instead
        """
        pass
