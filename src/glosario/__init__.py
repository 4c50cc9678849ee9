__version__ = "0.1.0"

from .exceptions import (
    GlosarioError as GlosarioError,
    ValidationError as ValidationError,
    DuplicateNameError as DuplicateNameError,
    DuplicateWordError as DuplicateWordError,
    ListNotFoundError as ListNotFoundError,
    ProtectedListError as ProtectedListError,
    StorageError as StorageError,
    ConfigError as ConfigError,
    WordLookupError as WordLookupError,
    LookupAuthError as LookupAuthError,
    LookupRateLimitError as LookupRateLimitError,
    LookupNetworkError as LookupNetworkError,
    MalformedLookupResponseError as MalformedLookupResponseError,
    WordNotFoundError as WordNotFoundError,
)

from .models import (
    DEFAULT_LIST_ID as DEFAULT_LIST_ID,
    DEFAULT_LIST_NAME as DEFAULT_LIST_NAME,
    QuizState as QuizState,
    Definition as Definition,
    WordDraft as WordDraft,
    WordEntry as WordEntry,
    WordList as WordList,
    LookupResult as LookupResult,
    Question as Question,
    AnswerOutcome as AnswerOutcome,
    OperationResult as OperationResult,
    SaveReport as SaveReport,
)

from .storage import (
    DocumentStore as DocumentStore,
    MemoryBackend as MemoryBackend,
    SqliteBackend as SqliteBackend,
    JsonFileBackend as JsonFileBackend,
    open_backend as open_backend,
)

from .lists import ListManager as ListManager

from .quiz import (
    QuizSession as QuizSession,
    generate_question as generate_question,
    select_eligible_lists as select_eligible_lists,
    choose_initial_list as choose_initial_list,
)

from .lookup import (
    HttpLookupService as HttpLookupService,
    WordNetLookupService as WordNetLookupService,
    search_word as search_word,
)

from .sharing import (
    format_share_text as format_share_text,
    share_entry as share_entry,
)

from .config import (
    Settings as Settings,
    load_config as load_config,
)

__all__ = [
    # Errors
    "GlosarioError",
    "ValidationError",
    "DuplicateNameError",
    "DuplicateWordError",
    "ListNotFoundError",
    "ProtectedListError",
    "StorageError",
    "ConfigError",
    "WordLookupError",
    "LookupAuthError",
    "LookupRateLimitError",
    "LookupNetworkError",
    "MalformedLookupResponseError",
    "WordNotFoundError",
    # Constants
    "DEFAULT_LIST_ID",
    "DEFAULT_LIST_NAME",
    # Models
    "QuizState",
    "Definition",
    "WordDraft",
    "WordEntry",
    "WordList",
    "LookupResult",
    "Question",
    "AnswerOutcome",
    "OperationResult",
    "SaveReport",
    # Storage
    "DocumentStore",
    "MemoryBackend",
    "SqliteBackend",
    "JsonFileBackend",
    "open_backend",
    # Lists
    "ListManager",
    # Quiz
    "QuizSession",
    "generate_question",
    "select_eligible_lists",
    "choose_initial_list",
    # Lookup
    "HttpLookupService",
    "WordNetLookupService",
    "search_word",
    # Sharing
    "format_share_text",
    "share_entry",
    # Config
    "Settings",
    "load_config",
]
