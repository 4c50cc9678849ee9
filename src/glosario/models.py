"""Domain model dataclasses and enums for glosario."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from glosario.exceptions import DuplicateWordError, GlosarioError, ValidationError

T = TypeVar("T")

DEFAULT_LIST_ID = "default"
DEFAULT_LIST_NAME = "General"

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class QuizState(str, Enum):
    """Progress of a quiz session."""

    NOT_STARTED = "not_started"
    AWAITING_ANSWER = "awaiting_answer"
    ANSWERED = "answered"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Definition:
    """One sense of a word as returned by a lookup."""

    definition: str
    category: str | None = None
    usage: str | None = None
    synonyms: frozenset[str] = field(default_factory=frozenset)
    antonyms: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class WordDraft:
    """A word that has not been saved to any list yet."""

    word: str
    definitions: tuple[Definition, ...]
    etymology: str | None = None
    language: str | None = None
    source: str | None = None


@dataclass(frozen=True, slots=True)
class WordEntry:
    """A word saved in a list, with its own id and save time."""

    id: str
    word: str
    definitions: tuple[Definition, ...]
    etymology: str | None
    added_at: datetime
    language: str | None = None
    source: str | None = None


@dataclass(frozen=True, slots=True)
class WordList:
    """A named, user-owned collection of saved words."""

    id: str
    name: str
    words: tuple[WordEntry, ...]
    created_at: datetime

    @property
    def is_default(self) -> bool:
        return self.id == DEFAULT_LIST_ID

    def find_word(self, word: str) -> WordEntry | None:
        for entry in self.words:
            if entry.word == word:
                return entry
        return None


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Normalized answer of a word lookup service."""

    word: str
    language: str | None
    is_spanish: bool
    definitions: tuple[Definition, ...]
    etymology: str | None
    source: str

    def to_draft(self) -> WordDraft:
        return WordDraft(
            word=self.word,
            definitions=self.definitions,
            etymology=self.etymology,
            language=self.language,
            source=self.source,
        )


@dataclass(frozen=True, slots=True)
class Question:
    """A multiple-choice quiz question."""

    word: str
    correct_answer: str
    options: tuple[str, ...]
    etymology: str | None


@dataclass(frozen=True, slots=True)
class AnswerOutcome:
    """Result of answering a question, with the running totals."""

    is_correct: bool
    chosen_option: str
    correct_answer: str
    score: int
    questions_answered: int


@dataclass(frozen=True, slots=True)
class OperationResult(Generic[T]):
    """Success flag plus message, returned across the library boundary."""

    success: bool
    message: str
    value: T | None = None
    error: GlosarioError | None = None

    @classmethod
    def ok(cls, message: str, value: T | None = None) -> OperationResult[T]:
        return cls(success=True, message=message, value=value)

    @classmethod
    def fail(cls, error: GlosarioError) -> OperationResult[T]:
        return cls(success=False, message=str(error), error=error)


@dataclass(frozen=True, slots=True)
class SaveReport:
    """Outcome of saving one word to the default list and a chosen list."""

    default_result: OperationResult[WordEntry]
    list_result: OperationResult[WordEntry] | None

    @property
    def success(self) -> bool:
        if not self.default_result.success:
            return False
        return self.list_result is None or self.list_result.success

    @property
    def already_saved(self) -> bool:
        """True when the word was already in the default list."""
        return isinstance(self.default_result.error, DuplicateWordError)


# ---------------------------------------------------------------------------
# Validation / coercion
# ---------------------------------------------------------------------------

def _string_set(values: Any) -> frozenset[str]:
    if not values:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    return frozenset(str(v).strip() for v in values if str(v).strip())


def definition_from_dict(data: Mapping[str, Any]) -> Definition:
    """Build a Definition from its JSON shape."""
    text = data.get("definition")
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Definition text must be a non-empty string")
    return Definition(
        definition=text,
        category=data.get("category") or None,
        usage=data.get("usage") or None,
        synonyms=_string_set(data.get("synonyms")),
        antonyms=_string_set(data.get("antonyms")),
    )


def _coerce_definitions(items: Iterable[Any]) -> tuple[Definition, ...]:
    out = []
    for item in items:
        if isinstance(item, Definition):
            out.append(item)
        elif isinstance(item, Mapping):
            out.append(definition_from_dict(item))
        else:
            raise ValidationError(f"Unsupported definition: {item!r}")
    return tuple(out)


def coerce_draft(data: Any) -> WordDraft:
    """Turn whatever a caller hands in as word data into a valid WordDraft.

    Accepts a ``WordDraft``, ``LookupResult``, ``WordEntry`` or a mapping in
    the stored JSON shape.  Raises ``ValidationError`` when the word is blank
    or has no definitions.
    """
    if isinstance(data, LookupResult):
        draft = data.to_draft()
    elif isinstance(data, WordEntry):
        draft = WordDraft(
            word=data.word, definitions=data.definitions,
            etymology=data.etymology, language=data.language,
            source=data.source,
        )
    elif isinstance(data, WordDraft):
        draft = data
    elif isinstance(data, Mapping):
        raw_defs = data.get("definitions") or []
        if not isinstance(raw_defs, (list, tuple)):
            raise ValidationError("Field 'definitions' must be a list")
        word = data.get("word")
        if not isinstance(word, str):
            raise ValidationError("Field 'word' must be a string")
        draft = WordDraft(
            word=word,
            definitions=_coerce_definitions(raw_defs),
            etymology=data.get("etymology") or None,
            language=data.get("language") or None,
            source=data.get("source") or None,
        )
    else:
        raise ValidationError(f"Unsupported word data: {type(data).__name__}")

    if not draft.word.strip():
        raise ValidationError("Word cannot be empty")
    if not draft.definitions:
        raise ValidationError(f"Word {draft.word!r} has no definitions")
    return draft
