"""
Application wiring - build one catalog, ledger, session and navigator.

Each component is created once and passed to the ones that depend on it,
so the presentation layer works with explicit instances instead of
process-wide singletons.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from linguasync.classroom import (
    BlobStore,
    ContentCatalog,
    Navigator,
    ProgressLedger,
    SessionEngine,
    SQLiteBlobStore,
    load_modules,
)
from linguasync.config import Settings


logger = logging.getLogger(__name__)


@dataclass
class LinguaSync:
    settings: Settings
    catalog: ContentCatalog
    ledger: ProgressLedger
    session: SessionEngine
    navigator: Navigator


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[BlobStore] = None,
    clock: Callable[[], datetime] = datetime.now,
    load_content: bool = True,
) -> LinguaSync:
    """
    Build the engine components.

    Args:
        settings: Configuration (default: read from the environment)
        store: Blob store for learner state (default: SQLite under settings.home)
        clock: Source of "now" shared by all components
        load_content: Populate the catalog immediately; when False the caller
            loads it later with `catalog.load(...)`
    """
    settings = settings or Settings.from_env()
    store = store if store is not None else SQLiteBlobStore(settings.progress_db)

    catalog = ContentCatalog(clock=clock)
    if load_content:
        catalog.load(load_modules(settings.content_path))

    ledger = ProgressLedger(store, clock=clock)
    session = SessionEngine(
        catalog,
        ledger,
        lesson_minutes=settings.lesson_minutes,
        quiz_minutes=settings.quiz_minutes,
        clock=clock,
    )
    logger.debug(f"Engine ready (home={settings.home})")
    return LinguaSync(
        settings=settings,
        catalog=catalog,
        ledger=ledger,
        session=session,
        navigator=Navigator(catalog),
    )
