"""
Progress tracking schemas for LinguaSync.

Defines Pydantic models for learner state:
- Cumulative progress, streak and weekly goal
- User-declared preferences
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .content import Badge


DEFAULT_WEEKLY_GOAL = 5


class LearningGoal(str, Enum):
    TRAVEL = "Travel"
    BUSINESS = "Business"
    ACADEMIC = "Academic"
    PERSONAL = "Personal Interest"
    CAREER = "Career Development"

    @property
    def description(self) -> str:
        return _GOAL_DESCRIPTIONS[self]


_GOAL_DESCRIPTIONS = {
    LearningGoal.TRAVEL: "Learn for traveling and tourism",
    LearningGoal.BUSINESS: "Professional communication",
    LearningGoal.ACADEMIC: "Academic studies and research",
    LearningGoal.PERSONAL: "Personal enrichment and culture",
    LearningGoal.CAREER: "Career advancement opportunities",
}


class UserProgress(BaseModel):
    """Persisted state of the progress ledger."""
    model_config = ConfigDict(frozen=True)

    total_modules_completed: int = Field(0, ge=0)
    total_lessons_completed: int = Field(0, ge=0)
    total_quizzes_completed: int = Field(0, ge=0)
    total_time_spent: int = Field(0, ge=0)  # minutes
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    badges_earned: tuple[Badge, ...] = ()  # append-only
    last_activity_date: Optional[datetime] = None
    weekly_goal: int = DEFAULT_WEEKLY_GOAL  # lessons per week
    weekly_progress: int = Field(0, ge=0)

    @model_validator(mode="after")
    def longest_covers_current(self):
        if self.longest_streak < self.current_streak:
            raise ValueError("longest_streak must be >= current_streak")
        return self


class UserPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    selected_languages: tuple[str, ...] = ()
    learning_goals: tuple[LearningGoal, ...] = ()
    daily_reminder_time: Optional[datetime] = None
    sound_enabled: bool = True
    haptic_feedback_enabled: bool = True
    dark_mode_enabled: bool = False
    onboarding_completed: bool = False
