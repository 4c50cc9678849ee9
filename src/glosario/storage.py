"""Key-value persistence backends and the single-document word-list store."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from glosario import db as _db
from glosario.exceptions import StorageError, ValidationError
from glosario.models import Definition, WordEntry, WordList, definition_from_dict

logger = logging.getLogger(__name__)

WORD_LISTS_KEY = "wordLists"
# Reserved by older releases; never read or written.
LEGACY_DEFAULT_LIST_KEY = "defaultList"


class KeyValueBackend(Protocol):
    """Minimal persistence contract: string documents under string keys."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------

class MemoryBackend:
    """Process-local backend, mostly for tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqliteBackend:
    """Backend storing each key as one row of an SQLite table."""

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self._db_path = str(db_path)
        self._conn = _db.connect(db_path)
        _db.check_schema_version(self._conn)
        _db.init_db(self._conn)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> SqliteBackend:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def get(self, key: str) -> str | None:
        return _db.get_value(self._conn, key)

    def set(self, key: str, value: str) -> None:
        _db.set_value(self._conn, key, value)


class JsonFileBackend:
    """Backend keeping all keys in one JSON object on disk.

    Writes go to a sibling ``.tmp`` file which is then moved over the
    target, so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Cannot write {self.path}: {e}") from e


# ---------------------------------------------------------------------------
# Document codec
# ---------------------------------------------------------------------------

def _parse_timestamp(value: Any, what: str) -> datetime:
    if not isinstance(value, str):
        raise StorageError(f"Missing timestamp on {what}")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise StorageError(f"Bad timestamp on {what}: {value!r}") from e


def _definition_to_dict(d: Definition) -> dict[str, Any]:
    return {
        "definition": d.definition,
        "category": d.category,
        "usage": d.usage,
        "synonyms": sorted(d.synonyms),
        "antonyms": sorted(d.antonyms),
    }


def entry_to_dict(entry: WordEntry) -> dict[str, Any]:
    """Serialize a WordEntry into its stored JSON shape."""
    return {
        "id": entry.id,
        "word": entry.word,
        "definitions": [_definition_to_dict(d) for d in entry.definitions],
        "etymology": entry.etymology,
        "addedAt": entry.added_at.isoformat(),
        "language": entry.language,
        "source": entry.source,
    }


def entry_from_dict(data: Any) -> WordEntry:
    """Rebuild a WordEntry from its stored JSON shape."""
    if not isinstance(data, dict):
        raise StorageError(f"Word record must be an object, got {data!r}")
    entry_id, word = data.get("id"), data.get("word")
    if not isinstance(entry_id, str) or not isinstance(word, str):
        raise StorageError(f"Word record without id/word: {data!r}")
    try:
        definitions = tuple(
            definition_from_dict(d) for d in data.get("definitions") or []
        )
    except (ValidationError, AttributeError) as e:
        raise StorageError(f"Bad definitions on word {word!r}: {e}") from e
    return WordEntry(
        id=entry_id,
        word=word,
        definitions=definitions,
        etymology=data.get("etymology") or None,
        added_at=_parse_timestamp(data.get("addedAt"), f"word {word!r}"),
        language=data.get("language") or None,
        source=data.get("source") or None,
    )


def list_to_dict(word_list: WordList) -> dict[str, Any]:
    """Serialize a WordList into its stored JSON shape."""
    return {
        "id": word_list.id,
        "name": word_list.name,
        "words": [entry_to_dict(e) for e in word_list.words],
        "createdAt": word_list.created_at.isoformat(),
    }


def list_from_dict(data: Any) -> WordList:
    """Rebuild a WordList from its stored JSON shape."""
    if not isinstance(data, dict):
        raise StorageError(f"List record must be an object, got {data!r}")
    list_id, name = data.get("id"), data.get("name")
    if not isinstance(list_id, str) or not isinstance(name, str):
        raise StorageError(f"List record without id/name: {data!r}")
    words = data.get("words") or []
    if not isinstance(words, list):
        raise StorageError(f"Field 'words' of list {list_id!r} must be a list")
    return WordList(
        id=list_id,
        name=name,
        words=tuple(entry_from_dict(w) for w in words),
        created_at=_parse_timestamp(data.get("createdAt"), f"list {list_id!r}"),
    )


# ---------------------------------------------------------------------------
# Document store
# ---------------------------------------------------------------------------

class DocumentStore:
    """The whole collection of word lists, (de)serialized as one document."""

    def __init__(self, backend: KeyValueBackend, key: str = WORD_LISTS_KEY) -> None:
        self.backend = backend
        self.key = key

    def load(self) -> list[WordList]:
        """Read every list. An uninitialized store yields an empty list."""
        raw = self.backend.get(self.key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Stored document is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise StorageError("Stored document must be a JSON array of lists")
        return [list_from_dict(item) for item in data]

    def save(self, lists: list[WordList]) -> None:
        """Serialize and write every list, replacing the previous document."""
        try:
            raw = json.dumps(
                [list_to_dict(wl) for wl in lists], ensure_ascii=False
            )
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize word lists: {e}") from e
        self.backend.set(self.key, raw)
        logger.debug("Saved %d lists under %r", len(lists), self.key)

    def close(self) -> None:
        """Close the backend if it holds a connection."""
        close = getattr(self.backend, "close", None)
        if close is not None:
            close()


def open_backend(kind: str, path: str | Path) -> KeyValueBackend:
    """Create the backend named *kind* (``sqlite``, ``json`` or ``memory``)."""
    if kind == "memory":
        return MemoryBackend()
    path = Path(path).expanduser()
    if kind == "json":
        return JsonFileBackend(path)
    if kind == "sqlite":
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {path.parent}: {e}") from e
        return SqliteBackend(path)
    raise StorageError(f"Unknown storage backend: {kind!r}")
