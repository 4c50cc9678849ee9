"""Multiple-choice quiz generation over a saved word list."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from typing import TypeVar

from glosario.exceptions import GlosarioError, ValidationError
from glosario.models import (
    DEFAULT_LIST_ID,
    AnswerOutcome,
    OperationResult,
    Question,
    QuizState,
    WordEntry,
    WordList,
)

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

MIN_WORDS = 2
MAX_DISTRACTORS = 3
POINTS_PER_CORRECT = 10


def shuffled(items: Iterable[_T], rng: random.Random | None = None) -> list[_T]:
    """Return a uniformly random permutation of *items* as a new list."""
    out = list(items)
    (rng or random).shuffle(out)
    return out


def playable_words(words: Iterable[WordEntry]) -> list[WordEntry]:
    """Words that have a definition to ask about."""
    return [w for w in words if w.definitions]


def select_eligible_lists(
    lists: Iterable[WordList], min_words: int = MIN_WORDS
) -> list[WordList]:
    """Lists with enough words to build a question."""
    return [wl for wl in lists if len(playable_words(wl.words)) >= min_words]


def choose_initial_list(eligible: Sequence[WordList]) -> WordList | None:
    """Prefer the default list, then the first eligible one."""
    for wl in eligible:
        if wl.id == DEFAULT_LIST_ID:
            return wl
    return eligible[0] if eligible else None


def generate_question(
    words: Sequence[WordEntry],
    rng: random.Random | None = None,
    *,
    max_distractors: int = MAX_DISTRACTORS,
) -> Question:
    """Build one question: a random word, its first definition and up to
    *max_distractors* first definitions of other words, shuffled together.

    Only the first definition of each word is ever used. Words without
    definitions are left out of both the answer and the distractors.
    """
    playable = playable_words(words)
    if len(playable) < MIN_WORDS:
        raise ValidationError(
            f"At least {MIN_WORDS} words with definitions are needed for a question"
        )
    chooser = rng or random
    correct = playable[chooser.randrange(len(playable))]
    correct_answer = correct.definitions[0].definition

    pool = [w for w in playable if w.word != correct.word]
    distractors = [
        w.definitions[0].definition for w in shuffled(pool, rng)[:max_distractors]
    ]
    options = shuffled([correct_answer, *distractors], rng)

    return Question(
        word=correct.word,
        correct_answer=correct_answer,
        options=tuple(options),
        etymology=correct.etymology,
    )


class QuizSession:
    """Score and progress of one open-ended quiz.

    Counters live only as long as the session; ``reset()`` is what a view
    calls when it regains focus or the user leaves.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        points_per_correct: int = POINTS_PER_CORRECT,
        max_distractors: int = MAX_DISTRACTORS,
        min_words: int = MIN_WORDS,
    ) -> None:
        self.rng = rng or random.Random()
        self.points_per_correct = points_per_correct
        self.max_distractors = max_distractors
        self.min_words = max(min_words, MIN_WORDS)
        self.reset()

    def reset(self) -> None:
        self.state = QuizState.NOT_STARTED
        self.word_list: WordList | None = None
        self.question: Question | None = None
        self.selected_answer: str | None = None
        self.score = 0
        self.questions_answered = 0

    def _new_question(self) -> Question:
        assert self.word_list is not None
        self.question = generate_question(
            self.word_list.words, self.rng, max_distractors=self.max_distractors
        )
        self.selected_answer = None
        self.state = QuizState.AWAITING_ANSWER
        return self.question

    def start(self, word_list: WordList) -> OperationResult[Question]:
        if len(playable_words(word_list.words)) < self.min_words:
            return OperationResult.fail(ValidationError(
                f"You need at least {self.min_words} words in "
                f"{word_list.name!r} to play"
            ))
        self.word_list = word_list
        try:
            question = self._new_question()
        except GlosarioError as e:
            self.reset()
            return OperationResult.fail(e)
        logger.debug(f"Quiz started on list {word_list.id}")
        return OperationResult.ok("Quiz started", question)

    def select_list(self, word_list: WordList) -> OperationResult[Question]:
        """Switch to another list; the score starts over."""
        self.reset()
        return self.start(word_list)

    def record_answer(self, chosen_option: str) -> OperationResult[AnswerOutcome]:
        if self.state is not QuizState.AWAITING_ANSWER or self.question is None:
            return OperationResult.fail(
                ValidationError("There is no unanswered question")
            )
        is_correct = chosen_option == self.question.correct_answer
        self.selected_answer = chosen_option
        self.questions_answered += 1
        if is_correct:
            self.score += self.points_per_correct
        self.state = QuizState.ANSWERED

        outcome = AnswerOutcome(
            is_correct=is_correct,
            chosen_option=chosen_option,
            correct_answer=self.question.correct_answer,
            score=self.score,
            questions_answered=self.questions_answered,
        )
        return OperationResult.ok("Correct!" if is_correct else "Incorrect", outcome)

    def next_question(self) -> OperationResult[Question]:
        if self.state is QuizState.NOT_STARTED or self.word_list is None:
            return OperationResult.fail(ValidationError("The quiz has not started"))
        try:
            question = self._new_question()
        except GlosarioError as e:
            return OperationResult.fail(e)
        return OperationResult.ok("Next question", question)
