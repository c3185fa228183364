"""
PathWalker implementation for enumerating candidate source files.
"""

import logging
from collections.abc import Callable, Iterator
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path

import pathspec

from .interfaces import PathWalkerInterface

logger = logging.getLogger(__name__)

# (files found, subdirectories to descend into with their depth, files filtered out)
_Listing = tuple[list[Path], list[tuple[Path, int]], list[Path]]

# Called with each listed file the include/exclude patterns reject
FilteredCallback = Callable[[Path], None]


def _compile_spec(patterns: list[str]) -> pathspec.PathSpec | None:
    lines = [p.strip() for p in patterns if p.strip() and not p.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def _report_filtered(filtered: list[Path], on_filtered: FilteredCallback | None) -> None:
    if on_filtered is not None:
        for path in filtered:
            on_filtered(path)


class PathWalker(PathWalkerInterface):
    """
    Concrete implementation of PathWalkerInterface.

    Policy:
    - Include patterns are gitignore-style globs matched against the file
      name; an empty include list accepts every file
    - Exclude patterns are gitignore-style globs matched against the path
      relative to the root, so a bare name like ``node_modules`` matches at
      any level; excluded directories are pruned without being listed
    - A file matching both an include and an exclude pattern is excluded
    - Symlinks are never followed
    - Depth counts path components below the root (``root/a.py`` is 1);
      nothing deeper than max_depth is visited

    Sequential mode walks depth-first in sorted order on the calling thread.
    Parallel mode lists directories on a thread pool and yields files as
    they are discovered. Both visit exactly the same files.
    """

    def __init__(
        self,
        include_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
        max_depth: int = 10,
        parallel: bool = False,
        max_workers: int = 4,
    ):
        """
        Initialize the PathWalker.

        Args:
            include_patterns: File name globs to accept (None or empty = all files).
            exclude_patterns: Gitignore-style patterns to exclude.
            max_depth: Deepest path component level to visit below the root.
            parallel: List directories concurrently on a thread pool.
            max_workers: Thread pool size for parallel mode.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self._include_spec = _compile_spec(list(include_patterns or []))
        self._exclude_spec = _compile_spec(list(exclude_patterns or []))
        self._max_depth = max_depth
        self._parallel = parallel
        self._max_workers = max_workers

    @property
    def parallel(self) -> bool:
        return self._parallel

    def is_excluded(self, rel_path: str, is_dir: bool = False) -> bool:
        """Check a POSIX path relative to the root against the exclude patterns."""
        if self._exclude_spec is None:
            return False
        if is_dir:
            return self._exclude_spec.match_file(rel_path + "/")
        return self._exclude_spec.match_file(rel_path)

    def is_included(self, file_name: str) -> bool:
        """Check a file name against the include patterns."""
        if self._include_spec is None:
            return True
        return self._include_spec.match_file(file_name)

    def walk(
        self, root_path: Path, on_filtered: FilteredCallback | None = None
    ) -> Iterator[Path]:
        """
        Lazily yield candidate files under root_path.

        Args:
            root_path: Existing directory to walk
            on_filtered: Called on the iterating thread for every listed file
                rejected by the include or exclude patterns. Files inside
                pruned directories are never listed, so never reported.

        Yields:
            Absolute paths of files passing the include/exclude/depth policy
        """
        root_path = Path(root_path).resolve()
        if self._parallel and self._max_workers > 1:
            yield from self._walk_parallel(root_path, on_filtered)
        else:
            yield from self._walk_sequential(root_path, on_filtered)

    def _walk_sequential(
        self, root_path: Path, on_filtered: FilteredCallback | None
    ) -> Iterator[Path]:
        stack: list[tuple[Path, int]] = [(root_path, 0)]
        while stack:
            directory, depth = stack.pop()
            files, subdirs, filtered = self._list_directory(root_path, directory, depth)
            _report_filtered(filtered, on_filtered)
            yield from files
            # Reversed so the smallest name is popped first
            stack.extend(reversed(subdirs))

    def _walk_parallel(
        self, root_path: Path, on_filtered: FilteredCallback | None
    ) -> Iterator[Path]:
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="envscan-walk"
        ) as executor:
            pending: set[Future] = {
                executor.submit(self._list_directory, root_path, root_path, 0)
            }
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    files, subdirs, filtered = future.result()
                    _report_filtered(filtered, on_filtered)
                    for subdir, depth in subdirs:
                        pending.add(
                            executor.submit(self._list_directory, root_path, subdir, depth)
                        )
                    yield from files

    def _list_directory(self, root_path: Path, directory: Path, depth: int) -> _Listing:
        """
        List one directory and apply the walk policy to its entries.

        Args:
            root_path: Walk root
            directory: Directory to list
            depth: Depth of directory itself (root = 0)

        Returns:
            Tuple of (accepted files, subdirectories to descend into,
            files rejected by the include or exclude patterns)
        """
        files: list[Path] = []
        subdirs: list[tuple[Path, int]] = []
        filtered: list[Path] = []
        entry_depth = depth + 1
        if entry_depth > self._max_depth:
            return files, subdirs, filtered

        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except PermissionError as e:
            logger.warning(f"Permission denied accessing directory: {directory} - {e}")
            return files, subdirs, filtered
        except OSError as e:
            logger.warning(f"Error accessing directory: {directory} - {e}")
            return files, subdirs, filtered

        for entry in entries:
            try:
                if entry.is_symlink():
                    logger.debug(f"Skipping symlink: {entry}")
                    continue
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                logger.warning(f"Error inspecting entry: {entry} - {e}")
                continue

            rel_path = entry.relative_to(root_path).as_posix()
            if self.is_excluded(rel_path, is_dir=is_dir):
                logger.debug(f"Excluded: {rel_path}")
                if is_file:
                    filtered.append(entry)
                continue

            if is_dir:
                if entry_depth < self._max_depth:
                    subdirs.append((entry, entry_depth))
            elif is_file:
                if self.is_included(entry.name):
                    files.append(entry)
                else:
                    filtered.append(entry)

        return files, subdirs, filtered
