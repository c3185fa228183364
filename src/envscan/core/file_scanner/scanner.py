"""
FileScanner implementation: turns one source file into usage records.
"""

import logging
from pathlib import Path

from envscan.core.comment_stripper import split_lines, strip_comments
from envscan.core.security import DEFAULT_SECURITY_RULES, SecurityRule, check_line

from .interfaces import FileScannerInterface
from .models import FileScanError, FileScanOutcome, LanguageConfig, UsageRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB


def relative_posix(file_path: Path, root_path: Path) -> str:
    """Path of file_path relative to root_path, with forward slashes."""
    try:
        return file_path.relative_to(root_path).as_posix()
    except ValueError:
        return file_path.as_posix()


class FileScanner(FileScannerInterface):
    """
    Concrete implementation of FileScannerInterface.

    For each file:
    - Enforces a size guard and reads the file as UTF-8
    - Blanks comments (best effort) without shifting line numbers
    - Applies every detection pattern, in order, to every line
    - Optionally flags hardcoded secrets on lines with no usage

    Every textual match becomes its own UsageRecord, including several
    patterns firing on the same variable on the same line. Deciding what
    counts as "one usage" is left to the aggregation step.

    The scanner holds no per-scan state and is safe to share between threads.
    """

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        detect_secrets: bool = True,
        security_rules: tuple[SecurityRule, ...] = DEFAULT_SECURITY_RULES,
    ):
        """
        Initialize the FileScanner.

        Args:
            max_file_size: Files larger than this many bytes are reported as errors.
            detect_secrets: Whether to run the hardcoded secret heuristics.
            security_rules: Rules used when detect_secrets is enabled.
        """
        self._max_file_size = max_file_size
        self._detect_secrets = detect_secrets
        self._security_rules = security_rules

    def scan_file(
        self, file_path: Path, root_path: Path, language: LanguageConfig
    ) -> FileScanOutcome:
        """
        Scan a single file.

        Args:
            file_path: Absolute path to the file
            root_path: Scan root, used to relativize paths
            language: Language the file was classified as

        Returns:
            FileScanOutcome with records, security issues, or an error
        """
        rel_path = relative_posix(file_path, root_path)
        outcome = FileScanOutcome(file_path=rel_path, language=language.name)

        content = self._read(file_path, rel_path, outcome)
        if content is None:
            return outcome

        outcome.records = self.scan_content(content, rel_path, language)

        if self._detect_secrets:
            lines_with_usage = {record.line_number for record in outcome.records}
            for line_number, line in enumerate(split_lines(content), start=1):
                if line_number in lines_with_usage:
                    continue
                outcome.security_issues.extend(
                    check_line(line, rel_path, line_number, self._security_rules)
                )

        return outcome

    def scan_content(
        self, content: str, rel_path: str, language: LanguageConfig
    ) -> list[UsageRecord]:
        """
        Extract usage records from already-loaded content.

        Args:
            content: File content
            rel_path: Path recorded on each UsageRecord
            language: Language whose patterns to apply

        Returns:
            Records in (line, pattern, match) order
        """
        if not content:
            return []

        original_lines = split_lines(content)
        stripped_lines = split_lines(strip_comments(content, language.comment_regex))

        records: list[UsageRecord] = []
        for index, line in enumerate(stripped_lines):
            if not line.strip():
                continue
            for regex, group in language.detectors:
                for match in regex.finditer(line):
                    name = match.group(group)
                    if not name:
                        continue
                    records.append(
                        UsageRecord(
                            file_path=rel_path,
                            line_number=index + 1,
                            variable_name=name,
                            language=language.name,
                            context=original_lines[index],
                        )
                    )
        return records

    def _read(
        self, file_path: Path, rel_path: str, outcome: FileScanOutcome
    ) -> str | None:
        """Read file content, recording a FileScanError on failure."""
        try:
            size_bytes = file_path.stat().st_size
            if size_bytes > self._max_file_size:
                return self._fail(
                    outcome,
                    rel_path,
                    f"File too large ({size_bytes} bytes, limit {self._max_file_size})",
                )
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            return self._fail(outcome, rel_path, f"Not valid UTF-8 text: {e.reason}")
        except FileNotFoundError:
            return self._fail(outcome, rel_path, "File vanished before it could be read")
        except PermissionError as e:
            return self._fail(outcome, rel_path, f"Permission denied: {e.strerror}")
        except OSError as e:
            return self._fail(outcome, rel_path, f"Error reading file: {e}")

        if "\x00" in content:
            return self._fail(outcome, rel_path, "Binary content (NUL bytes)")
        return content

    @staticmethod
    def _fail(outcome: FileScanOutcome, rel_path: str, message: str) -> None:
        logger.warning(f"Skipping {rel_path}: {message}")
        outcome.error = FileScanError(file_path=rel_path, message=message)
        return None
