"""
LinguaSync Classroom - Runtime components for content, progress and sessions.

This module provides:
- ContentCatalog: modules and their completion state
- ProgressLedger: cumulative stats, streak, weekly goal, badges
- SessionEngine: one lesson or quiz at a time
- Navigator: availability and summaries for display
- Stores and loaders for persisted state and content
"""

from .catalog import (
    ContentCatalog,
    create_completion_badge,
)

from .progress import (
    ProgressLedger,
    calculate_streak,
    PROGRESS_KEY,
    PREFERENCES_KEY,
)

from .session import (
    SessionEngine,
    SessionState,
    SessionResult,
    score_quiz,
    create_quiz_badge,
)

from .navigator import (
    Navigator,
    Availability,
    ModuleSummary,
)

from .loader import (
    load_modules,
    parse_modules,
    BUNDLED_CONTENT,
)

from .storage import (
    BlobStore,
    MemoryBlobStore,
    SQLiteBlobStore,
    DEFAULT_PROGRESS_DB,
)

__all__ = [
    # Catalog
    "ContentCatalog",
    "create_completion_badge",
    # Progress
    "ProgressLedger",
    "calculate_streak",
    "PROGRESS_KEY",
    "PREFERENCES_KEY",
    # Session
    "SessionEngine",
    "SessionState",
    "SessionResult",
    "score_quiz",
    "create_quiz_badge",
    # Navigator
    "Navigator",
    "Availability",
    "ModuleSummary",
    # Loader
    "load_modules",
    "parse_modules",
    "BUNDLED_CONTENT",
    # Storage
    "BlobStore",
    "MemoryBlobStore",
    "SQLiteBlobStore",
    "DEFAULT_PROGRESS_DB",
]
