"""ListManager: CRUD over the word-list store."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, TypeVar

from glosario.exceptions import (
    DuplicateNameError,
    DuplicateWordError,
    GlosarioError,
    ListNotFoundError,
    ProtectedListError,
    StorageError,
    ValidationError,
)
from glosario.models import (
    DEFAULT_LIST_ID,
    DEFAULT_LIST_NAME,
    OperationResult,
    SaveReport,
    WordEntry,
    WordList,
    coerce_draft,
)
from glosario.storage import DocumentStore

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampIdFactory:
    """Millisecond timestamps as ids, strictly increasing per instance."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self, taken: set[str] | frozenset[str] = frozenset()) -> str:
        candidate = max(int(self._clock() * 1000), self._last + 1)
        while str(candidate) in taken:
            candidate += 1
        self._last = candidate
        return str(candidate)


# One factory per process so that separate managers never hand out the same id.
_default_id_factory = TimestampIdFactory()


def _reports_result(message: str) -> Callable[[_F], _F]:
    """Decorator: turn GlosarioError raised by the method into a failed result."""

    def decorate(method: _F) -> _F:
        @functools.wraps(method)
        def wrapper(self: ListManager, *args: Any, **kwargs: Any) -> Any:
            try:
                value = method(self, *args, **kwargs)
            except StorageError as e:
                logger.error(f"{method.__name__} failed: {e}")
                return OperationResult.fail(e)
            except GlosarioError as e:
                logger.debug(f"{method.__name__} rejected: {e}")
                return OperationResult.fail(e)
            return OperationResult.ok(message, value)

        return wrapper  # type: ignore[return-value]

    return decorate


class ListManager:
    """Keyed-list CRUD over a single-document store.

    Every mutation reads the whole store, changes it in memory and writes it
    back whole.  Nothing serializes two interleaved read-modify-write cycles,
    so the last writer wins.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        now: Callable[[], datetime] = _utcnow,
        id_factory: Callable[..., str] | None = None,
    ) -> None:
        self.store = store
        self._now = now
        self._new_id = id_factory or _default_id_factory

    def close(self) -> None:
        """Release the underlying storage backend."""
        self.store.close()

    def __enter__(self) -> ListManager:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all_lists(self) -> list[WordList]:
        """Return every list; storage failures are logged and read as empty."""
        try:
            return self.store.load()
        except StorageError as e:
            logger.error(f"Error loading word lists: {e}")
            return []

    def get_list(self, list_id: str) -> WordList | None:
        for word_list in self.get_all_lists():
            if word_list.id == list_id:
                return word_list
        return None

    def get_default_list(self) -> WordList | None:
        """Ensure the default list exists, then return it."""
        result = self.ensure_default_list()
        return result.value if result.success else None

    # ------------------------------------------------------------------
    # List management
    # ------------------------------------------------------------------

    @_reports_result("Default list ready")
    def ensure_default_list(self) -> WordList:
        lists = self.store.load()
        index = _find_index(lists, DEFAULT_LIST_ID)
        if index is None:
            default = WordList(
                id=DEFAULT_LIST_ID,
                name=DEFAULT_LIST_NAME,
                words=(),
                created_at=self._now(),
            )
            lists.append(default)
            self.store.save(lists)
            logger.info("Created default list")
            return default

        default = lists[index]
        if default.name != DEFAULT_LIST_NAME:
            default = replace(default, name=DEFAULT_LIST_NAME)
            lists[index] = default
            self.store.save(lists)
            logger.info(f"Renamed default list to {DEFAULT_LIST_NAME!r}")
        return default

    @_reports_result("List created")
    def create_list(self, name: str) -> WordList:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("List name cannot be empty")
        name = name.strip()

        lists = self.store.load()
        folded = name.casefold()
        for existing in lists:
            if existing.name.casefold() == folded:
                raise DuplicateNameError(
                    f"A list named {existing.name!r} already exists"
                )

        new_list = WordList(
            id=self._new_id({wl.id for wl in lists}),
            name=name,
            words=(),
            created_at=self._now(),
        )
        lists.append(new_list)
        self.store.save(lists)
        logger.info(f"Created list {new_list.id} ({name!r})")
        return new_list

    @_reports_result("List deleted")
    def delete_list(self, list_id: str) -> None:
        if list_id == DEFAULT_LIST_ID:
            raise ProtectedListError("The default list cannot be deleted")
        lists = self.store.load()
        self.store.save([wl for wl in lists if wl.id != list_id])
        logger.info(f"Deleted list {list_id}")

    @_reports_result("All data deleted")
    def delete_all_data(self) -> None:
        """Drop every list and word, leaving an empty default list behind."""
        default = WordList(
            id=DEFAULT_LIST_ID,
            name=DEFAULT_LIST_NAME,
            words=(),
            created_at=self._now(),
        )
        self.store.save([default])
        logger.info("Deleted all word lists")

    @_reports_result("List saved")
    def save_list(self, word_list: WordList) -> WordList:
        """Insert *word_list*, or replace the stored list with the same id."""
        lists = self.store.load()
        index = _find_index(lists, word_list.id)
        if index is None:
            lists.append(word_list)
        else:
            lists[index] = word_list
        self.store.save(lists)
        return word_list

    # ------------------------------------------------------------------
    # Word management
    # ------------------------------------------------------------------

    @_reports_result("Word saved")
    def add_word_to_list(self, list_id: str, word_data: Any) -> WordEntry:
        draft = coerce_draft(word_data)
        lists = self.store.load()
        index = _find_index(lists, list_id)
        if index is None:
            raise ListNotFoundError(f"List not found: {list_id!r}")

        word_list = lists[index]
        if word_list.find_word(draft.word) is not None:
            raise DuplicateWordError(
                f"{draft.word!r} is already in list {word_list.name!r}"
            )

        taken = {e.id for e in word_list.words}
        entry = WordEntry(
            id=self._new_id(taken),
            word=draft.word,
            definitions=draft.definitions,
            etymology=draft.etymology,
            added_at=self._now(),
            language=draft.language,
            source=draft.source,
        )
        lists[index] = replace(word_list, words=word_list.words + (entry,))
        self.store.save(lists)
        logger.debug(f"Added {draft.word!r} to list {list_id}")
        return entry

    @_reports_result("Word removed")
    def remove_word_from_list(self, list_id: str, word_id: str) -> None:
        lists = self.store.load()
        index = _find_index(lists, list_id)
        if index is None:
            raise ListNotFoundError(f"List not found: {list_id!r}")
        word_list = lists[index]
        lists[index] = replace(
            word_list,
            words=tuple(e for e in word_list.words if e.id != word_id),
        )
        self.store.save(lists)

    def save_word(self, word_data: Any, list_id: str = DEFAULT_LIST_ID) -> SaveReport:
        """Save a word to the default list and, if different, to *list_id*."""
        default_result = self.add_word_to_list(DEFAULT_LIST_ID, word_data)
        list_result = None
        if list_id != DEFAULT_LIST_ID:
            list_result = self.add_word_to_list(list_id, word_data)
        return SaveReport(default_result=default_result, list_result=list_result)


def _find_index(lists: list[WordList], list_id: str) -> int | None:
    for i, word_list in enumerate(lists):
        if word_list.id == list_id:
            return i
    return None
