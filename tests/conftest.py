"""Shared test fixtures for glosario."""

from datetime import datetime, timezone

import pytest

from glosario import DocumentStore, ListManager, MemoryBackend
from glosario.lists import TimestampIdFactory

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return DocumentStore(backend)


@pytest.fixture
def manager(store):
    """A manager over an empty in-memory store with a fixed clock."""
    return ListManager(
        store,
        now=lambda: FIXED_NOW,
        id_factory=TimestampIdFactory(clock=lambda: 1714564800.0),
    )


@pytest.fixture
def manager_with_default(manager):
    """Manager whose store already holds the default list."""
    manager.ensure_default_list()
    return manager


def _word(text, definition, **extra):
    """Word data in the stored JSON shape."""
    return {"word": text, "definitions": [{"definition": definition}], **extra}


@pytest.fixture
def manager_with_words(manager_with_default):
    """Default list holding four words, plus an empty 'Verbos' list."""
    ed = manager_with_default
    for text, definition in (
        ("casa", "vivienda"),
        ("perro", "animal doméstico"),
        ("sol", "estrella del sistema solar"),
        ("mar", "masa de agua salada"),
    ):
        ed.add_word_to_list("default", _word(text, definition))
    verbos = ed.create_list("Verbos").value
    return ed, verbos


@pytest.fixture
def make_word():
    """Factory for word data in the stored JSON shape."""
    return _word


@pytest.fixture
def fixed_now():
    """The clock value the ``manager`` fixture stamps on new records."""
    return FIXED_NOW
