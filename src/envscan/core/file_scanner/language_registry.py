"""
Language registry mapping file paths to scanning rules.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePath

import yaml

from envscan.core.errors import PatternCompileError

from .models import DetectionPattern, LanguageConfig

logger = logging.getLogger(__name__)

# Default path to the languages configuration file
_DEFAULT_LANGUAGES_CONFIG = Path(__file__).parent.parent / "languages.yaml"


class LanguageRegistry:
    """
    Immutable, ordered catalog of LanguageConfig entries.

    Every pattern is compiled while the registry is built; a broken pattern
    raises PatternCompileError and no registry is produced. Lookup walks the
    languages in registration order and the first match wins, so overlapping
    file matchers resolve the same way on every run.

    Example:
        >>> registry = LanguageRegistry.from_yaml("languages.yaml")
        >>> registry.detect(Path("src/app.py")).name
        'python'

        >>> # Derive a registry with an extra language (appended last)
        >>> registry = registry.with_language(templates_config)
    """

    def __init__(self, languages: Iterable[LanguageConfig] = ()):
        configs = tuple(languages)
        names = [config.name for config in configs]
        duplicates = {name for name in names if names.count(name) > 1}
        if duplicates:
            raise ValueError(f"Duplicate language names: {sorted(duplicates)}")
        self._languages: tuple[LanguageConfig, ...] = configs
        self._by_name: dict[str, LanguageConfig] = {c.name: c for c in configs}

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "LanguageRegistry":
        """
        Create a LanguageRegistry from a YAML language table.

        Expected format:
            languages:
              - name: python
                file_matchers: [".py"]
                detection_patterns:
                  - pattern: 'os\\.getenv\\(\\s*"([^"]+)"'
                    group: 1
                comment_patterns: ['#.*']

        Raises:
            FileNotFoundError: If the table doesn't exist
            ValueError: If the table format is invalid
            PatternCompileError: If any pattern fails to compile
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Languages config not found: {config_path}")

        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse languages config: {e}")
            raise ValueError(f"Invalid YAML in languages config: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict) or not isinstance(data.get("languages"), list):
            raise ValueError(
                f"Invalid languages config format in {config_path}: "
                "expected a 'languages' list"
            )

        registry = cls(_language_from_dict(entry) for entry in data["languages"])
        logger.debug(f"Loaded {len(registry)} languages from {config_path}")
        return registry

    def with_language(self, config: LanguageConfig) -> "LanguageRegistry":
        """Return a new registry with config appended (lowest precedence)."""
        return LanguageRegistry((*self._languages, config))

    def without_language(self, name: str) -> "LanguageRegistry":
        """Return a new registry without the named language."""
        return LanguageRegistry(c for c in self._languages if c.name != name)

    def detect(self, file_path: PurePath) -> LanguageConfig | None:
        """
        Find the language for a file path.

        Returns:
            First registered LanguageConfig accepting the path, or None if the
            file is of an unknown language
        """
        for config in self._languages:
            if config.matches(file_path):
                return config
        return None

    def get(self, name: str) -> LanguageConfig | None:
        return self._by_name.get(name)

    @property
    def languages(self) -> tuple[LanguageConfig, ...]:
        return self._languages

    @property
    def names(self) -> list[str]:
        """Language names in registration order."""
        return [config.name for config in self._languages]

    def __iter__(self) -> Iterator[LanguageConfig]:
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


def _language_from_dict(entry: dict) -> LanguageConfig:
    """Build a LanguageConfig from one entry of the YAML table."""
    if not isinstance(entry, dict) or "name" not in entry:
        raise ValueError(f"Invalid language entry: {entry!r}")

    name = str(entry["name"])
    detections = []
    for item in entry.get("detection_patterns") or []:
        if isinstance(item, str):
            detections.append(DetectionPattern(item))
        elif isinstance(item, dict) and "pattern" in item:
            detections.append(
                DetectionPattern(str(item["pattern"]), int(item.get("group", 1)))
            )
        else:
            raise PatternCompileError(name, repr(item), "expected a pattern entry")

    return LanguageConfig(
        name=name,
        file_matchers=tuple(str(m) for m in entry.get("file_matchers") or []),
        detection_patterns=tuple(detections),
        comment_patterns=tuple(str(p) for p in entry.get("comment_patterns") or []),
        frameworks=tuple(str(f) for f in entry.get("frameworks") or []),
    )


_default_registry: LanguageRegistry | None = None


def get_default_registry() -> LanguageRegistry:
    """Get the process-wide registry built from the packaged language table."""
    global _default_registry

    if _default_registry is None:
        _default_registry = LanguageRegistry.from_yaml(_DEFAULT_LANGUAGES_CONFIG)
    return _default_registry
