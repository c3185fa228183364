"""
Scan Service for envscan.

Orchestrates a scan: validates the root, walks candidate files, classifies
them with the language registry, scans them sequentially or on a bounded
thread pool, and aggregates the outcomes into a ScanResult.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional

from envscan.core.config import ScanOptions
from envscan.core.errors import InvalidRootError
from envscan.core.file_scanner import (
    FileScanError,
    FileScanner,
    FileScannerInterface,
    LanguageRegistry,
    PathWalker,
    PathWalkerInterface,
    get_default_registry,
    relative_posix,
)

from .aggregator import ScanAggregator
from .scan_models import ScanResult

logger = logging.getLogger(__name__)

# Progress callback: (files processed, files discovered so far, message)
ProgressCallback = Callable[[int, int, str], None]


def _count_skipped(aggregator: ScanAggregator) -> Callable[[Path], None]:
    """Callback counting files the walker filtered out as skipped."""

    def on_filtered(file_path: Path) -> None:
        aggregator.add_skipped()

    return on_filtered

def validate_root(root_path: Path | str) -> Path:
    """
    Resolve and check a scan root.

    Raises:
        InvalidRootError: If the root does not exist or is not a directory
    """
    root_path = Path(root_path)
    if not root_path.exists():
        raise InvalidRootError(root_path, "path does not exist")
    if not root_path.is_dir():
        raise InvalidRootError(root_path, "not a directory")
    return root_path.resolve()


class ScanService:
    """
    Service for scanning a source tree for environment variable reads.

    Parallel mode runs one task per file on a ThreadPoolExecutor bounded by
    options.max_workers. Each task returns a private FileScanOutcome and all
    aggregation happens on the calling thread, so the final result does not
    depend on scheduling.
    """

    def __init__(
        self,
        options: Optional[ScanOptions] = None,
        registry: Optional[LanguageRegistry] = None,
        walker: Optional[PathWalkerInterface] = None,
        file_scanner: Optional[FileScannerInterface] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the scan service.

        Args:
            options: Scan options. If None, defaults are used.
            registry: Language registry. If None, the packaged default table
                     is loaded (a broken table raises PatternCompileError here).
            walker: Custom path walker. If None, one is built from options.
            file_scanner: Custom file scanner. If None, one is built from options.
            progress_callback: Optional callback receiving progress updates.
        """
        self._options = options or ScanOptions()
        self._registry = registry if registry is not None else get_default_registry()
        self._walker = walker or PathWalker(
            include_patterns=self._options.include_patterns,
            exclude_patterns=self._options.exclude_patterns,
            max_depth=self._options.max_depth,
            parallel=self._options.parallel,
            max_workers=self._options.max_workers,
        )
        self._file_scanner = file_scanner or FileScanner(
            max_file_size=self._options.max_file_size,
            detect_secrets=self._options.detect_secrets,
        )
        self._progress_callback = progress_callback

    @property
    def registry(self) -> LanguageRegistry:
        return self._registry

    @property
    def options(self) -> ScanOptions:
        return self._options

    def _report_progress(self, current: int, total: int, message: str) -> None:
        """Report progress if callback is set."""
        if self._progress_callback:
            self._progress_callback(current, total, message)

    def scan(self, root_path: Path | str) -> ScanResult:
        """
        Scan a directory tree.

        Args:
            root_path: Directory to scan

        Returns:
            ScanResult with per-variable usage and file accounting

        Raises:
            InvalidRootError: If root_path is not an existing directory
        """
        start_time = time.time()
        root_path = validate_root(root_path)
        logger.debug(f"scan: starting for {root_path}")

        aggregator = ScanAggregator()
        if self._options.parallel and self._options.max_workers > 1:
            self._scan_parallel(root_path, aggregator)
        else:
            self._scan_sequential(root_path, aggregator)

        result = aggregator.build()
        result.duration_seconds = time.time() - start_time

        logger.info(
            "Scan completed",
            extra={
                "files_scanned": result.files_scanned,
                "files_skipped": result.files_skipped,
                "variables": len(result.variables),
                "errors": len(result.errors),
                "duration_seconds": result.duration_seconds,
            },
        )
        return result

    def _scan_sequential(self, root_path: Path, aggregator: ScanAggregator) -> None:
        """Scan files one at a time on the calling thread."""
        discovered = 0
        for file_path in self._walker.walk(root_path, on_filtered=_count_skipped(aggregator)):
            discovered += 1
            language = self._registry.detect(file_path)
            if language is None:
                logger.debug(f"Unknown language, skipping: {file_path}")
                aggregator.add_skipped()
                continue

            try:
                aggregator.add(self._file_scanner.scan_file(file_path, root_path, language))
            except Exception as e:
                self._record_failure(aggregator, file_path, root_path, e)

            self._report_progress(discovered, discovered, f"Scanned {file_path.name}")

    def _scan_parallel(self, root_path: Path, aggregator: ScanAggregator) -> None:
        """
        Scan files on a bounded thread pool.

        Files are submitted as the walker discovers them; outcomes are folded
        in on this thread once every task has been submitted.
        """
        futures: list[tuple[Future, Path]] = []
        with ThreadPoolExecutor(
            max_workers=self._options.max_workers, thread_name_prefix="envscan-scan"
        ) as executor:
            for file_path in self._walker.walk(
                root_path, on_filtered=_count_skipped(aggregator)
            ):
                language = self._registry.detect(file_path)
                if language is None:
                    logger.debug(f"Unknown language, skipping: {file_path}")
                    aggregator.add_skipped()
                    continue
                future = executor.submit(
                    self._file_scanner.scan_file, file_path, root_path, language
                )
                futures.append((future, file_path))

            total = len(futures)
            for processed, (future, file_path) in enumerate(futures, start=1):
                try:
                    aggregator.add(future.result())
                except Exception as e:
                    self._record_failure(aggregator, file_path, root_path, e)

                if processed % 10 == 0 or processed == total:
                    self._report_progress(processed, total, f"Scanned {processed} files")

    @staticmethod
    def _record_failure(
        aggregator: ScanAggregator, file_path: Path, root_path: Path, error: Exception
    ) -> None:
        rel_path = relative_posix(file_path, root_path)
        logger.error(f"Failed to scan {rel_path}: {error}")
        aggregator.add_error(FileScanError(file_path=rel_path, message=str(error)))


def scan(
    root_path: Path | str,
    options: Optional[ScanOptions] = None,
    registry: Optional[LanguageRegistry] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ScanResult:
    """
    Scan a directory tree for environment variable reads.

    Args:
        root_path: Directory to scan
        options: Scan options (defaults from defaults.yaml when None)
        registry: Language registry (packaged table when None)
        progress_callback: Optional progress callback

    Returns:
        ScanResult

    Raises:
        InvalidRootError: If root_path is not an existing directory
        PatternCompileError: If the language table contains a broken pattern
    """
    service = ScanService(
        options=options, registry=registry, progress_callback=progress_callback
    )
    return service.scan(root_path)
