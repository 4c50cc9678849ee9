"""Custom exception hierarchy for glosario."""


class GlosarioError(Exception):
    """Base exception for all glosario errors."""


class ValidationError(GlosarioError):
    """Invalid input (empty list name, word without definitions)."""


class DuplicateNameError(GlosarioError):
    """A list with the same name (case-insensitive) already exists."""


class DuplicateWordError(GlosarioError):
    """The word is already saved in the target list."""


class ListNotFoundError(GlosarioError):
    """List doesn't exist in the store."""


class ProtectedListError(GlosarioError):
    """Attempt to delete the default list."""


class StorageError(GlosarioError):
    """Serialization or persistence failure, schema version mismatch."""


class ConfigError(GlosarioError):
    """Malformed or invalid configuration."""


class WordLookupError(GlosarioError):
    """External word lookup failed."""


class LookupAuthError(WordLookupError):
    """The lookup service rejected our credentials."""


class LookupRateLimitError(WordLookupError):
    """The lookup service is throttling requests."""


class LookupNetworkError(WordLookupError):
    """The lookup service could not be reached."""


class MalformedLookupResponseError(WordLookupError):
    """The lookup service answered with something we cannot parse."""


class WordNotFoundError(WordLookupError):
    """The term has no definitions."""
