"""
Command-line interface for glosario word lists.
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional

from .config import Settings, load_config
from .exceptions import ConfigError, StorageError
from .lists import ListManager
from .lookup import create_lookup_service, search_word
from .models import DEFAULT_LIST_ID, OperationResult, WordEntry, WordList
from .quiz import QuizSession, choose_initial_list, select_eligible_lists
from .sharing import format_share_text
from .storage import DocumentStore, open_backend


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the glosario CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = load_config(args.config)
    except ConfigError as e:
        print(f"[CONFIG ERROR] {e}")
        return 1

    level = logging.DEBUG if args.verbose else settings.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        manager = build_manager(settings)
    except StorageError as e:
        print(f"[STORAGE ERROR] {e}")
        return 1
    with manager:
        manager.ensure_default_list()
        return args.func(args, manager, settings)


def build_manager(settings: Settings) -> ListManager:
    """Wire a ListManager to the backend named in *settings*."""
    backend = open_backend(settings.storage.backend, settings.storage.path)
    return ListManager(DocumentStore(backend))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="glosario",
        description="Save looked-up words into lists and quiz yourself on them",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="YAML configuration file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    lists_parser = subparsers.add_parser("lists", help="Show all word lists")
    lists_parser.set_defaults(func=cmd_lists)

    create_list_parser = subparsers.add_parser("create-list", help="Create a new list")
    create_list_parser.add_argument("name", help="Name of the new list")
    create_list_parser.set_defaults(func=cmd_create_list)

    delete_parser = subparsers.add_parser("delete-list", help="Delete a list")
    delete_parser.add_argument("list_id", help="ID of the list to delete")
    delete_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    delete_parser.set_defaults(func=cmd_delete_list)

    delete_all_parser = subparsers.add_parser(
        "delete-all", help="Delete every list and saved word"
    )
    delete_all_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    delete_all_parser.set_defaults(func=cmd_delete_all)

    lookup_parser = subparsers.add_parser("lookup", help="Look up a word")
    lookup_parser.add_argument("term", help="Word to look up")
    lookup_parser.add_argument(
        "--save",
        metavar="LIST_ID",
        nargs="?",
        const=DEFAULT_LIST_ID,
        help="Save the word to this list (and always to the default list)",
    )
    lookup_parser.set_defaults(func=cmd_lookup)

    words_parser = subparsers.add_parser("words", help="Show the words of a list")
    words_parser.add_argument("list_id", nargs="?", default=DEFAULT_LIST_ID)
    words_parser.set_defaults(func=cmd_words)

    remove_parser = subparsers.add_parser("remove-word", help="Remove a word from a list")
    remove_parser.add_argument("list_id")
    remove_parser.add_argument("word_id")
    remove_parser.set_defaults(func=cmd_remove_word)

    share_parser = subparsers.add_parser("share", help="Print a word as shareable text")
    share_parser.add_argument("list_id")
    share_parser.add_argument("word_id")
    share_parser.set_defaults(func=cmd_share)

    quiz_parser = subparsers.add_parser("quiz", help="Play a multiple-choice quiz")
    quiz_parser.add_argument("--list", dest="list_id", help="List to play with")
    quiz_parser.add_argument("--seed", type=int, help="Random seed")
    quiz_parser.set_defaults(func=cmd_quiz)

    return parser


def _report(result: OperationResult) -> int:
    if result.success:
        print(result.message)
        return 0
    print(f"[ERROR] {result.message}")
    return 1


def cmd_lists(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle lists command."""
    lists = manager.get_all_lists()
    if not lists:
        print("No lists found.")
        return 0

    print(f"{'ID':<16} {'Name':<30} {'Words'}")
    print("-" * 54)
    for wl in lists:
        name = (wl.name[:27] + "...") if len(wl.name) > 30 else wl.name
        print(f"{wl.id:<16} {name:<30} {len(wl.words)}")
    return 0


def cmd_create_list(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle create-list command."""
    result = manager.create_list(args.name)
    if result.success:
        print(f"Created list {result.value.name!r} (id {result.value.id})")
        return 0
    return _report(result)


def cmd_delete_list(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle delete-list command."""
    word_list = manager.get_list(args.list_id)
    if word_list is not None and not args.yes and not word_list.is_default:
        response = input(f"Delete {word_list.name!r} and its {len(word_list.words)} words? [y/N] ")
        if response.lower() not in ("y", "yes"):
            print("Aborted.")
            return 1
    return _report(manager.delete_list(args.list_id))


def cmd_delete_all(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle delete-all command."""
    if not args.yes:
        response = input("Delete all lists and saved words? This cannot be undone. [y/N] ")
        if response.lower() not in ("y", "yes"):
            print("Aborted.")
            return 1
    return _report(manager.delete_all_data())


def cmd_lookup(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle lookup command."""
    service = create_lookup_service(settings)
    try:
        result = search_word(service, args.term)
    finally:
        close = getattr(service, "close", None)
        if close is not None:
            close()
    if not result.success:
        print(f"[ERROR] {result.message}")
        return 1

    found = result.value
    print(f"\n{found.word}")
    if found.language and not found.is_spanish:
        print(f"  Language: {found.language}")
    for index, d in enumerate(found.definitions, start=1):
        category = f" ({d.category})" if d.category else ""
        print(f"  {index}. {d.definition}{category}")
    print(f"  Source: {found.source}")

    if args.save is None:
        return 0

    target = manager.get_list(args.save)
    if target is None:
        print(f"[ERROR] List not found: {args.save!r}")
        return 1
    report = manager.save_word(found, args.save)
    if report.success:
        where = '"General"' if target.is_default else f'"General" and "{target.name}"'
        print(f"\nSaved to {where}")
        return 0
    if report.already_saved:
        print("\nThe word was already in your library")
        return 0
    failed = report.list_result if report.default_result.success else report.default_result
    print(f"\n[ERROR] {failed.message}")
    return 1


def _find_entry(manager: ListManager, list_id: str, word_id: str) -> tuple[WordList | None, WordEntry | None]:
    word_list = manager.get_list(list_id)
    if word_list is None:
        return None, None
    entry = next((e for e in word_list.words if e.id == word_id), None)
    return word_list, entry


def cmd_words(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle words command."""
    word_list = manager.get_list(args.list_id)
    if word_list is None:
        print(f"[ERROR] List not found: {args.list_id!r}")
        return 1
    if not word_list.words:
        print(f"{word_list.name} has no words yet.")
        return 0

    print(f"\n{word_list.name} ({len(word_list.words)} words)\n")
    newest_first = sorted(word_list.words, key=lambda e: e.added_at, reverse=True)
    for entry in newest_first:
        first = entry.definitions[0].definition if entry.definitions else ""
        print(f"{entry.id:<16} {entry.word:<20} {first}")
    return 0


def cmd_remove_word(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle remove-word command."""
    return _report(manager.remove_word_from_list(args.list_id, args.word_id))


def cmd_share(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle share command."""
    word_list, entry = _find_entry(manager, args.list_id, args.word_id)
    if word_list is None:
        print(f"[ERROR] List not found: {args.list_id!r}")
        return 1
    if entry is None:
        print(f"[ERROR] Word not found: {args.word_id!r}")
        return 1
    print(format_share_text(entry))
    return 0


def cmd_quiz(args: argparse.Namespace, manager: ListManager, settings: Settings) -> int:
    """Handle quiz command."""
    eligible = select_eligible_lists(manager.get_all_lists(), settings.quiz.min_words)
    if args.list_id:
        word_list = next((wl for wl in eligible if wl.id == args.list_id), None)
    else:
        word_list = choose_initial_list(eligible)
    if word_list is None:
        print(f"You need at least {settings.quiz.min_words} words in a list to play.")
        return 1

    session = QuizSession(
        random.Random(args.seed),
        points_per_correct=settings.quiz.points_per_correct,
        max_distractors=settings.quiz.max_distractors,
        min_words=settings.quiz.min_words,
    )
    result = session.start(word_list)
    if not result.success:
        return _report(result)

    print(f"\nQuiz on {word_list.name!r}. Type the option number, or q to quit.")
    question = result.value
    while True:
        print(f"\nWhat does {question.word!r} mean?")
        for index, option in enumerate(question.options, start=1):
            print(f"  {index}. {option}")
        try:
            response = input("> ").strip().lower()
        except EOFError:
            response = "q"
        if response in ("q", "quit"):
            break
        if not response.isdigit() or not 1 <= int(response) <= len(question.options):
            print(f"Please type a number between 1 and {len(question.options)}.")
            continue

        answer = session.record_answer(question.options[int(response) - 1]).value
        if answer.is_correct:
            print("Correct!")
        else:
            print(f"Incorrect. The answer was: {answer.correct_answer}")
        if question.etymology:
            print(f"  Etymology: {question.etymology}")
        print(f"Score: {answer.score} ({answer.questions_answered} answered)")
        result = session.next_question()
        if not result.success:
            print(f"[ERROR] {result.message}")
            break
        question = result.value

    print(f"\nFinal score: {session.score} after {session.questions_answered} questions")
    session.reset()
    return 0


if __name__ == "__main__":
    sys.exit(main())
