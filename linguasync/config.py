"""
LinguaSync configuration.

Settings come from environment variables, optionally seeded from a `.env`
file in the working directory:

    LINGUASYNC_HOME             data directory (default: ~/.linguasync)
    LINGUASYNC_CONTENT          YAML catalog path (default: bundled sample)
    LINGUASYNC_LESSON_MINUTES   minutes credited per finished lesson
    LINGUASYNC_QUIZ_MINUTES     minutes credited per finished quiz
    LINGUASYNC_LOG_LEVEL        DEBUG, INFO, WARNING, ERROR
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


DEFAULT_HOME = Path.home() / ".linguasync"
DEFAULT_LESSON_MINUTES = 15
DEFAULT_QUIZ_MINUTES = 10
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    home: Path = DEFAULT_HOME
    content_path: Optional[Path] = None
    lesson_minutes: int = Field(DEFAULT_LESSON_MINUTES, ge=0)
    quiz_minutes: int = Field(DEFAULT_QUIZ_MINUTES, ge=0)
    log_level: str = "INFO"

    @property
    def progress_db(self) -> Path:
        return self.home / "progress.db"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """Build settings from the environment after loading `.env`."""
        load_dotenv(env_file or Path.cwd() / ".env")
        values = {}
        if os.getenv("LINGUASYNC_HOME"):
            values["home"] = Path(os.environ["LINGUASYNC_HOME"]).expanduser()
        if os.getenv("LINGUASYNC_CONTENT"):
            values["content_path"] = Path(os.environ["LINGUASYNC_CONTENT"]).expanduser()
        if os.getenv("LINGUASYNC_LESSON_MINUTES"):
            values["lesson_minutes"] = os.environ["LINGUASYNC_LESSON_MINUTES"]
        if os.getenv("LINGUASYNC_QUIZ_MINUTES"):
            values["quiz_minutes"] = os.environ["LINGUASYNC_QUIZ_MINUTES"]
        if os.getenv("LINGUASYNC_LOG_LEVEL"):
            values["log_level"] = os.environ["LINGUASYNC_LOG_LEVEL"].upper()
        return cls(**values)


def configure_logging(level: str = "INFO"):
    """Set up root logging for CLI runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
