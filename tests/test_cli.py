"""Tests for the glosario command-line interface."""

from datetime import datetime, timedelta, timezone

import pytest

from glosario import (
    Definition,
    LookupResult,
    OperationResult,
    ValidationError,
    WordEntry,
    WordList,
    WordNotFoundError,
)
from glosario import cli
from glosario.cli import main
from glosario.config import load_config

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class StubLookup:
    def lookup(self, term):
        if term != "casa":
            raise WordNotFoundError(f"No definitions found for {term!r}")
        return LookupResult(
            word="casa", language="Spanish", is_spanish=True,
            definitions=(Definition("vivienda", category="sustantivo"),),
            etymology=None, source="stub",
        )


@pytest.fixture
def config(tmp_path):
    path = tmp_path / "glosario.yaml"
    path.write_text(
        "storage:\n"
        "  backend: json\n"
        f"  path: {tmp_path / 'lists.json'}\n",
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def run(config, monkeypatch):
    monkeypatch.setattr(cli, "create_lookup_service", lambda settings: StubLookup())

    def _run(*args):
        return main(["--config", config, *args])

    return _run


def answers(monkeypatch, *responses):
    it = iter(responses)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(it))


class TestLists:

    def test_default_list_exists(self, run, capsys):
        assert run("lists") == 0
        out = capsys.readouterr().out
        assert "default" in out
        assert "General" in out

    def test_create_and_delete(self, run, capsys):
        assert run("create-list", "Verbos") == 0
        out = capsys.readouterr().out
        list_id = out.split("(id ")[1].split(")")[0]
        assert run("create-list", "verbos") == 1
        assert run("delete-list", list_id, "--yes") == 0
        capsys.readouterr()
        run("lists")
        assert "Verbos" not in capsys.readouterr().out

    def test_delete_default_fails(self, run, capsys):
        assert run("delete-list", "default") == 1
        assert "cannot be deleted" in capsys.readouterr().out

    def test_delete_asks_for_confirmation(self, run, monkeypatch, capsys):
        run("create-list", "Viajes")
        list_id = capsys.readouterr().out.split("(id ")[1].split(")")[0]
        answers(monkeypatch, "n")
        assert run("delete-list", list_id) == 1
        assert "Aborted." in capsys.readouterr().out


class TestLookup:

    def test_lookup_prints_definitions(self, run, capsys):
        assert run("lookup", "Casa") == 0
        out = capsys.readouterr().out
        assert "1. vivienda (sustantivo)" in out

    def test_lookup_not_found(self, run, capsys):
        assert run("lookup", "zzz") == 1
        assert "No definitions found" in capsys.readouterr().out

    def test_lookup_and_save(self, run, capsys):
        assert run("lookup", "casa", "--save") == 0
        assert 'Saved to "General"' in capsys.readouterr().out
        assert run("lookup", "casa", "--save") == 0
        assert "already in your library" in capsys.readouterr().out
        run("words")
        assert "vivienda" in capsys.readouterr().out

    def test_save_to_unknown_list(self, run, capsys):
        assert run("lookup", "casa", "--save", "nope") == 1

    def test_lookup_service_is_closed(self, config, monkeypatch, capsys):
        class ClosingLookup(StubLookup):
            closed = False

            def close(self):
                self.closed = True

        service = ClosingLookup()
        monkeypatch.setattr(cli, "create_lookup_service", lambda settings: service)
        assert main(["--config", config, "lookup", "zzz"]) == 1
        assert service.closed


class TestWords:

    def _saved_id(self, run, capsys):
        run("lookup", "casa", "--save")
        capsys.readouterr()
        run("words", "default")
        line = [l for l in capsys.readouterr().out.splitlines() if "casa" in l][0]
        return line.split()[0]

    def test_share(self, run, capsys):
        word_id = self._saved_id(run, capsys)
        assert run("share", "default", word_id) == 0
        out = capsys.readouterr().out
        assert "*casa*" in out
        assert "*1.* vivienda _(sustantivo)_" in out

    def test_remove(self, run, capsys):
        word_id = self._saved_id(run, capsys)
        assert run("remove-word", "default", word_id) == 0
        capsys.readouterr()
        run("words")
        assert "no words yet" in capsys.readouterr().out

    def test_unknown_list(self, run, capsys):
        assert run("words", "nope") == 1
        assert run("share", "nope", "1") == 1
        assert run("remove-word", "nope", "1") == 1

    def test_newest_first(self, run, config, capsys):
        manager = cli.build_manager(load_config(config))
        words = tuple(
            WordEntry(id=str(i), word=text, definitions=(Definition(text + "!"),),
                      etymology=None, added_at=NOW + timedelta(days=i))
            for i, text in enumerate(["viejo", "medio", "nuevo"])
        )
        manager.save_list(WordList(id="default", name="General", words=words, created_at=NOW))
        assert run("words") == 0
        out = capsys.readouterr().out
        assert out.index("nuevo") < out.index("medio") < out.index("viejo")
        stored = manager.get_list("default").words
        assert [e.word for e in stored] == ["viejo", "medio", "nuevo"]


class TestQuiz:

    def test_needs_two_words(self, run, capsys):
        assert run("quiz") == 1
        assert "at least 2 words" in capsys.readouterr().out

    def test_play_one_round(self, run, config, monkeypatch, capsys):
        manager = cli.build_manager(load_config(config))
        manager.ensure_default_list()
        manager.save_word({"word": "sol", "definitions": [{"definition": "estrella"}]})
        manager.save_word({"word": "luna", "definitions": [{"definition": "satélite"}]})

        answers(monkeypatch, "9", "1", "q")
        assert run("quiz", "--seed", "3") == 0
        out = capsys.readouterr().out
        assert "Please type a number between 1 and 2." in out
        assert "Final score:" in out
        assert "after 1 questions" in out

    def test_word_without_definitions_never_asked(self, run, config, monkeypatch, capsys):
        manager = cli.build_manager(load_config(config))
        words = tuple(
            WordEntry(
                id=str(i), word=text,
                definitions=(Definition(meaning),) if meaning else (),
                etymology=None, added_at=NOW,
            )
            for i, (text, meaning) in enumerate(
                [("a", "uno"), ("b", "dos"), ("c", "tres"),
                 ("d", "cuatro"), ("e", "cinco"), ("f", None)]
            )
        )
        manager.save_list(WordList(id="default", name="General", words=words, created_at=NOW))

        for seed in range(5):
            answers(monkeypatch, *["1"] * 8, "q")
            assert run("quiz", "--seed", str(seed)) == 0
            out = capsys.readouterr().out
            assert "What does 'f' mean?" not in out
            assert "[ERROR]" not in out
            assert "after 8 questions" in out

    def test_list_with_one_defined_word_is_not_playable(self, run, config, capsys):
        manager = cli.build_manager(load_config(config))
        words = (
            WordEntry(id="1", word="sol", definitions=(Definition("estrella"),),
                      etymology=None, added_at=NOW),
            WordEntry(id="2", word="vacío", definitions=(), etymology=None, added_at=NOW),
        )
        manager.save_list(WordList(id="default", name="General", words=words, created_at=NOW))
        assert run("quiz") == 1
        assert "at least 2 words" in capsys.readouterr().out

    def test_failed_next_question_ends_quiz(self, run, config, monkeypatch, capsys):
        manager = cli.build_manager(load_config(config))
        manager.ensure_default_list()
        manager.save_word({"word": "sol", "definitions": [{"definition": "estrella"}]})
        manager.save_word({"word": "luna", "definitions": [{"definition": "satélite"}]})
        monkeypatch.setattr(
            cli.QuizSession, "next_question",
            lambda self: OperationResult.fail(ValidationError("Word 'x' has no definitions")),
        )

        answers(monkeypatch, "1")
        assert run("quiz") == 0
        out = capsys.readouterr().out
        assert "[ERROR] Word 'x' has no definitions" in out
        assert "after 1 questions" in out


class TestDeleteAll:

    def _fill(self, run, capsys):
        run("create-list", "Verbos")
        run("lookup", "casa", "--save")
        capsys.readouterr()

    def test_delete_all_with_yes(self, run, capsys):
        self._fill(run, capsys)
        assert run("delete-all", "--yes") == 0
        assert "All data deleted" in capsys.readouterr().out
        run("lists")
        out = capsys.readouterr().out
        assert "Verbos" not in out
        assert "General" in out
        run("words")
        assert "no words yet" in capsys.readouterr().out

    def test_delete_all_asks_for_confirmation(self, run, monkeypatch, capsys):
        self._fill(run, capsys)
        answers(monkeypatch, "n")
        assert run("delete-all") == 1
        assert "Aborted." in capsys.readouterr().out
        run("lists")
        assert "Verbos" in capsys.readouterr().out

    def test_delete_all_confirmed(self, run, monkeypatch, capsys):
        self._fill(run, capsys)
        answers(monkeypatch, "y")
        assert run("delete-all") == 0
        capsys.readouterr()
        run("lists")
        assert "Verbos" not in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 1


def test_bad_config(tmp_path, capsys):
    path = tmp_path / "bad.yaml"
    path.write_text("storage:\n  backend: redis\n", encoding="utf-8")
    assert main(["--config", str(path), "lists"]) == 1
    assert "[CONFIG ERROR]" in capsys.readouterr().out


def test_unwritable_storage_dir(tmp_path, capsys):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    path = tmp_path / "glosario.yaml"
    path.write_text(
        "storage:\n"
        "  backend: sqlite\n"
        f"  path: {blocker / 'sub' / 'glosario.db'}\n",
        encoding="utf-8",
    )
    assert main(["--config", str(path), "lists"]) == 1
    assert "[STORAGE ERROR]" in capsys.readouterr().out
