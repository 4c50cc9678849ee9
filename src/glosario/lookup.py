"""Word lookup collaborators: local WordNet and a remote definition proxy."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from glosario.exceptions import (
    ConfigError,
    LookupAuthError,
    LookupNetworkError,
    LookupRateLimitError,
    MalformedLookupResponseError,
    ValidationError,
    WordLookupError,
    WordNotFoundError,
)
from glosario.models import Definition, LookupResult, OperationResult, definition_from_dict

logger = logging.getLogger(__name__)

DEFAULT_LEXICON = "oewn:2024"
DEFAULT_TIMEOUT = 10.0

_POS_NAMES = {
    "n": "noun",
    "v": "verb",
    "a": "adjective",
    "s": "adjective",
    "r": "adverb",
    "t": "phrase",
    "c": "conjunction",
    "p": "adposition",
}


class WordLookupService(Protocol):
    """Anything that turns a term into a LookupResult or raises WordLookupError."""

    def lookup(self, term: str) -> LookupResult: ...


def search_word(service: WordLookupService, term: str) -> OperationResult[LookupResult]:
    """Look *term* up, collapsing every failure into a message."""
    clean = (term or "").strip().lower()
    if not clean:
        return OperationResult.fail(ValidationError("Please type a word"))
    try:
        result = service.lookup(clean)
    except WordLookupError as e:
        logger.warning(f"Lookup of {clean!r} failed: {e}")
        return OperationResult.fail(e)
    return OperationResult.ok("Word found", result)


# ---------------------------------------------------------------------------
# HTTP definition proxy
# ---------------------------------------------------------------------------

class HttpLookupService:
    """Client for a definition proxy answering ``GET <url>?word=<term>``."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> HttpLookupService:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def lookup(self, term: str) -> LookupResult:
        try:
            response = self.client.get(self.url, params={"word": term})
        except httpx.RequestError as e:
            raise LookupNetworkError(
                "Connection error. Check your internet connection and try again."
            ) from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            message = message or f"Server error: {response.status_code}"
            if response.status_code in (401, 403):
                raise LookupAuthError(message)
            if response.status_code == 429:
                raise LookupRateLimitError(message)
            if response.status_code == 404:
                raise WordNotFoundError(message)
            raise WordLookupError(message)

        if not isinstance(data, dict):
            raise MalformedLookupResponseError("The dictionary sent an unreadable answer")
        return _parse_payload(data, term)


def _parse_payload(data: dict[str, Any], term: str) -> LookupResult:
    raw_defs = data.get("definitions")
    if not isinstance(raw_defs, list):
        raise MalformedLookupResponseError("Answer has no 'definitions' list")
    try:
        definitions = tuple(definition_from_dict(d) for d in raw_defs)
    except (ValidationError, AttributeError) as e:
        raise MalformedLookupResponseError(f"Bad definition in answer: {e}") from e
    if not definitions:
        raise WordNotFoundError(f"No definitions found for {term!r}")

    language = data.get("language") or None
    is_spanish = data.get("isSpanish")
    if not isinstance(is_spanish, bool):
        is_spanish = bool(language and language.lower().startswith(("es", "span")))
    return LookupResult(
        word=str(data.get("word") or term),
        language=language,
        is_spanish=is_spanish,
        definitions=definitions,
        etymology=data.get("etymology") or None,
        source=str(data.get("source") or "proxy"),
    )


# ---------------------------------------------------------------------------
# Local WordNet (wn)
# ---------------------------------------------------------------------------

class WordNetLookupService:
    """Look words up in a locally installed wordnet.

    The ``wn`` lexicon must have been downloaded beforehand, e.g. with
    ``python -m wn download oewn:2024``.
    """

    def __init__(self, lexicon: str = DEFAULT_LEXICON, *, wordnet: Any = None) -> None:
        self.lexicon = lexicon
        self._wordnet = wordnet

    def _get_wordnet(self) -> Any:
        if self._wordnet is None:
            import wn

            try:
                self._wordnet = wn.Wordnet(self.lexicon)
            except wn.Error as e:
                raise WordLookupError(
                    f"Lexicon {self.lexicon!r} is not available: {e}"
                ) from e
        return self._wordnet

    def _language(self, wordnet: Any) -> str | None:
        lexicons = wordnet.lexicons()
        return lexicons[0].language if lexicons else None

    def lookup(self, term: str) -> LookupResult:
        wordnet = self._get_wordnet()
        synsets = wordnet.synsets(term)
        if not synsets:
            raise WordNotFoundError(f"No definitions found for {term!r}")

        definitions = []
        for synset in synsets:
            text = synset.definition()
            if not text:
                continue
            examples = synset.examples()
            synonyms = {str(lemma) for lemma in synset.lemmas()} - {term}
            antonyms = set()
            for sense in synset.senses():
                if str(sense.word().lemma()) != term:
                    continue
                for related in sense.get_related("antonym"):
                    antonyms.add(str(related.word().lemma()))
            definitions.append(Definition(
                definition=text,
                category=_POS_NAMES.get(synset.pos),
                usage=examples[0] if examples else None,
                synonyms=frozenset(synonyms),
                antonyms=frozenset(antonyms),
            ))
        if not definitions:
            raise WordNotFoundError(f"No definitions found for {term!r}")

        language = self._language(wordnet)
        return LookupResult(
            word=term,
            language=language,
            is_spanish=bool(language and language.startswith("es")),
            definitions=tuple(definitions),
            etymology=None,
            source=f"WordNet ({self.lexicon})",
        )


def create_lookup_service(settings: Any) -> WordLookupService:
    """Build the lookup service named by ``settings.lookup``."""
    lookup = settings.lookup
    if lookup.provider == "http":
        if not lookup.url:
            raise ConfigError("lookup.url is required for the http provider")
        return HttpLookupService(lookup.url, timeout=lookup.timeout)
    return WordNetLookupService(lookup.lexicon)
