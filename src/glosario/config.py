"""
YAML configuration for glosario.

Example file::

    storage:
      backend: sqlite        # sqlite | json | memory
      path: ~/.glosario/glosario.db
    lookup:
      provider: wordnet      # wordnet | http
      lexicon: oewn:2024
      url: https://example.org/api/define
      timeout: 10
    quiz:
      points_per_correct: 10
      max_distractors: 3
      min_words: 2
    logging:
      level: WARNING
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ConfigError
from .lookup import DEFAULT_LEXICON, DEFAULT_TIMEOUT

STORAGE_BACKENDS = ("sqlite", "json", "memory")
LOOKUP_PROVIDERS = ("wordnet", "http")
DEFAULT_DB_PATH = Path("~/.glosario/glosario.db")


@dataclass
class StorageSettings:
    backend: str = "sqlite"
    path: Path = DEFAULT_DB_PATH


@dataclass
class LookupSettings:
    provider: str = "wordnet"
    lexicon: str = DEFAULT_LEXICON
    url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class QuizSettings:
    points_per_correct: int = 10
    max_distractors: int = 3
    min_words: int = 2


@dataclass
class Settings:
    storage: StorageSettings = field(default_factory=StorageSettings)
    lookup: LookupSettings = field(default_factory=LookupSettings)
    quiz: QuizSettings = field(default_factory=QuizSettings)
    log_level: str = "WARNING"


def load_config(
    source: Union[str, Path, Dict[str, Any], None] = None,
) -> Settings:
    """Load settings from a YAML file, a YAML string or a dictionary.

    Args:
        source: Path to YAML file, YAML string, parsed dictionary, or None
            for the defaults

    Returns:
        Settings object

    Raises:
        ConfigError: If the YAML is invalid or holds bad values
    """
    if source is None:
        return _parse_settings({})
    if isinstance(source, dict):
        data = source
    elif isinstance(source, Path) or (isinstance(source, str) and _is_file_path(source)):
        path = Path(source).expanduser()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = _load_yaml(f)
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
    else:
        data = _load_yaml(source)

    return _parse_settings(data)


def _is_file_path(s: str) -> bool:
    """Check if a string looks like a file path rather than YAML content."""
    if "\n" in s:
        return False
    if s.endswith((".yaml", ".yml")):
        return True
    return ("/" in s or "\\" in s) and ":" not in s


def _load_yaml(stream: Any) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(stream)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("YAML root must be a mapping (dictionary)")
    return data


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def _positive_int(section: Dict[str, Any], key: str, default: int, name: str) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{name}.{key} must be a positive integer")
    return value


def _parse_settings(data: Dict[str, Any]) -> Settings:
    storage = _section(data, "storage")
    backend = storage.get("backend", "sqlite")
    if backend not in STORAGE_BACKENDS:
        raise ConfigError(
            f"storage.backend must be one of {', '.join(STORAGE_BACKENDS)}"
        )
    path = Path(str(storage.get("path", DEFAULT_DB_PATH))).expanduser()

    lookup = _section(data, "lookup")
    provider = lookup.get("provider", "wordnet")
    if provider not in LOOKUP_PROVIDERS:
        raise ConfigError(
            f"lookup.provider must be one of {', '.join(LOOKUP_PROVIDERS)}"
        )
    url = lookup.get("url")
    if provider == "http" and not url:
        raise ConfigError("lookup.url is required for the http provider")
    try:
        timeout = float(lookup.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ConfigError("lookup.timeout must be a number") from e

    quiz = _section(data, "quiz")
    quiz_settings = QuizSettings(
        points_per_correct=_positive_int(quiz, "points_per_correct", 10, "quiz"),
        max_distractors=_positive_int(quiz, "max_distractors", 3, "quiz"),
        min_words=_positive_int(quiz, "min_words", 2, "quiz"),
    )
    if quiz_settings.min_words < 2:
        raise ConfigError("quiz.min_words must be at least 2")

    level = str(_section(data, "logging").get("level", "WARNING")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown logging level: {level}")

    return Settings(
        storage=StorageSettings(backend=backend, path=path),
        lookup=LookupSettings(
            provider=provider,
            lexicon=str(lookup.get("lexicon", DEFAULT_LEXICON)),
            url=url,
            timeout=timeout,
        ),
        quiz=quiz_settings,
        log_level=level,
    )
