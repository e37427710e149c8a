"""
ProgressLedger - Cumulative learner stats, streak, weekly goal and badges.

Keeps two persisted records:
- UserProgress: counters, streak, badges, weekly goal
- UserPreferences: user-declared settings

Every mutation builds a new validated record, writes it through to the
blob store and then notifies subscribers. Input that would produce an
invalid record raises before anything is stored.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel

from linguasync.schemas import Badge, LearningGoal, UserPreferences, UserProgress
from linguasync.utils import EventChannel

from .storage import BlobStore


logger = logging.getLogger(__name__)

PROGRESS_KEY = "UserProgress"
PREFERENCES_KEY = "UserPreferences"

RecordT = TypeVar("RecordT", bound=BaseModel)


def calculate_streak(
    last_activity: Optional[datetime],
    now: datetime,
    current_streak: int,
    longest_streak: int,
) -> tuple[int, int]:
    """
    Compute the streak after an activity at `now`.

    Days are counted between calendar dates, so 23:59 -> 00:01 is one day.

    Returns:
        Tuple of (current streak, longest streak)
    """
    if last_activity is None:
        streak = 1
    else:
        days_since = (now.date() - last_activity.date()).days
        if days_since <= 0:
            streak = max(1, current_streak)
        elif days_since == 1:
            streak = current_streak + 1
        else:
            streak = 1
    return streak, max(longest_streak, streak)


class ProgressLedger:
    """
    Track learner progress on top of a key-value blob store.

    Missing or unreadable blobs fall back to default records; nothing is
    raised to the caller.
    """

    def __init__(self, store: BlobStore, clock: Callable[[], datetime] = datetime.now):
        """
        Initialize ledger.

        Args:
            store: Blob store holding the progress and preferences records
            clock: Source of "now", replaceable for tests
        """
        self.store = store
        self.clock = clock
        self.events = EventChannel("progress")
        self._progress = self._load(PROGRESS_KEY, UserProgress)
        self._preferences = self._load(PREFERENCES_KEY, UserPreferences)

    @property
    def progress(self) -> UserProgress:
        return self._progress

    @property
    def preferences(self) -> UserPreferences:
        return self._preferences

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _load(self, key: str, model: type[RecordT]) -> RecordT:
        raw = self.store.load(key)
        if raw is None:
            return model()
        try:
            return model.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable {key} record, using defaults: {e}")
            return model()

    def _revise(self, record: RecordT, **updates) -> RecordT:
        """Copy of `record` with `updates` applied, validated like a loaded record."""
        return type(record).model_validate({**record.model_dump(), **updates})

    def _set_progress(self, progress: UserProgress, action: str):
        self._progress = progress
        self.store.save(PROGRESS_KEY, progress.model_dump_json())
        self.events.emit(action)

    def _set_preferences(self, preferences: UserPreferences, action: str):
        self._preferences = preferences
        self.store.save(PREFERENCES_KEY, preferences.model_dump_json())
        self.events.emit(action)

    # -------------------------------------------------------------------------
    # Progress Management
    # -------------------------------------------------------------------------

    def record_activity(
        self,
        modules_completed: Optional[int] = None,
        lessons_completed: Optional[int] = None,
        quizzes_completed: Optional[int] = None,
        time_spent_minutes: Optional[int] = None,
    ) -> UserProgress:
        """
        Apply counter updates and refresh the streak.

        `modules_completed` replaces the module total; the other fields are
        added to their totals. Lessons also count toward the weekly goal.
        A call without any field changes nothing.

        Raises:
            pydantic.ValidationError: If a total would become negative
        """
        current = self._progress
        updates = {}

        if modules_completed is not None:
            updates["total_modules_completed"] = modules_completed
        if lessons_completed is not None:
            updates["total_lessons_completed"] = current.total_lessons_completed + lessons_completed
            updates["weekly_progress"] = current.weekly_progress + lessons_completed
        if quizzes_completed is not None:
            updates["total_quizzes_completed"] = current.total_quizzes_completed + quizzes_completed
        if time_spent_minutes is not None:
            updates["total_time_spent"] = current.total_time_spent + time_spent_minutes

        if not updates:
            logger.debug("record_activity called without fields, ignoring")
            return current

        now = self.clock()
        streak, longest = calculate_streak(
            current.last_activity_date, now, current.current_streak, current.longest_streak
        )
        updates.update(
            current_streak=streak,
            longest_streak=longest,
            last_activity_date=now,
        )
        self._set_progress(self._revise(current, **updates), "record_activity")
        return self._progress

    def add_badge(self, badge: Badge) -> UserProgress:
        """Append a badge. Duplicates are kept."""
        badges = (*self._progress.badges_earned, badge)
        self._set_progress(self._revise(self._progress, badges_earned=badges), "add_badge")
        logger.info(f"Badge earned: {badge.name} ({badge.description})")
        return self._progress

    def set_weekly_goal(self, goal: int) -> UserProgress:
        self._set_progress(self._revise(self._progress, weekly_goal=goal), "set_weekly_goal")
        return self._progress

    def reset_weekly_progress(self) -> UserProgress:
        self._set_progress(self._revise(self._progress, weekly_progress=0), "reset_weekly_progress")
        return self._progress

    # -------------------------------------------------------------------------
    # Preferences Management
    # -------------------------------------------------------------------------

    def update_preferences(
        self,
        selected_languages: Optional[list[str]] = None,
        learning_goals: Optional[list[LearningGoal]] = None,
        daily_reminder_time: Optional[datetime] = None,
        sound_enabled: Optional[bool] = None,
        haptic_feedback_enabled: Optional[bool] = None,
        dark_mode_enabled: Optional[bool] = None,
        onboarding_completed: Optional[bool] = None,
    ) -> UserPreferences:
        """
        Merge the supplied fields into the preferences; omitted fields stay.

        Raises:
            pydantic.ValidationError: If a supplied value has the wrong type
        """
        supplied = {
            "selected_languages": selected_languages,
            "learning_goals": learning_goals,
            "daily_reminder_time": daily_reminder_time,
            "sound_enabled": sound_enabled,
            "haptic_feedback_enabled": haptic_feedback_enabled,
            "dark_mode_enabled": dark_mode_enabled,
            "onboarding_completed": onboarding_completed,
        }
        updates = {name: value for name, value in supplied.items() if value is not None}
        self._set_preferences(self._revise(self._preferences, **updates), "update_preferences")
        return self._preferences

    # -------------------------------------------------------------------------
    # Data Reset
    # -------------------------------------------------------------------------

    def reset_all_data(self):
        """Replace progress and preferences with defaults and persist both."""
        logger.info("Resetting all learner data")
        self._set_progress(UserProgress(), "reset_all_data")
        self._set_preferences(UserPreferences(), "reset_all_data")

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def get_weekly_progress_percentage(self) -> float:
        """Weekly progress as a fraction of the goal, clamped to [0, 1]."""
        goal = self._progress.weekly_goal
        if goal <= 0:
            return 0.0
        return min(self._progress.weekly_progress / goal, 1.0)

    def get_lessons_until_weekly_goal(self) -> int:
        return max(0, self._progress.weekly_goal - self._progress.weekly_progress)

    def get_average_time_per_lesson(self) -> float:
        lessons = self._progress.total_lessons_completed
        if lessons <= 0:
            return 0.0
        return self._progress.total_time_spent / lessons

    def get_recent_badges(self, days: int = 7) -> list[Badge]:
        """Badges earned within the last `days` days, newest first."""
        cutoff = self.clock() - timedelta(days=days)
        recent = [
            badge for badge in self._progress.badges_earned
            if badge.date_earned is not None and badge.date_earned >= cutoff
        ]
        return sorted(recent, key=lambda badge: badge.date_earned, reverse=True)

    def get_motivational_message(self) -> str:
        streak = self._progress.current_streak
        weekly = self.get_weekly_progress_percentage()

        if streak >= 7:
            return f"Amazing! You're on a {streak}-day streak!"
        elif weekly >= 1.0:
            return "Congratulations! You've reached your weekly goal!"
        elif weekly >= 0.8:
            return "You're so close to your weekly goal!"
        elif weekly >= 0.5:
            return "Great progress! Keep it up!"
        elif streak > 0:
            return "Nice work! You're building a great habit!"
        else:
            return "Ready to start your learning journey?"

    def get_stats(self) -> dict:
        """Summary of the ledger for display."""
        progress = self._progress
        return {
            "modules_completed": progress.total_modules_completed,
            "lessons_completed": progress.total_lessons_completed,
            "quizzes_completed": progress.total_quizzes_completed,
            "total_time_minutes": progress.total_time_spent,
            "current_streak": progress.current_streak,
            "longest_streak": progress.longest_streak,
            "badges": len(progress.badges_earned),
            "weekly_goal": progress.weekly_goal,
            "weekly_progress": progress.weekly_progress,
            "weekly_percent": round(self.get_weekly_progress_percentage() * 100, 1),
            "average_minutes_per_lesson": round(self.get_average_time_per_lesson(), 1),
        }
