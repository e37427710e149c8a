"""
ContentCatalog - Canonical list of modules and their completion state.

Provides:
- Module lookup by id
- Lesson and quiz completion, replacing the module with a new value
- Deterministic completion badges
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from linguasync.schemas import Badge, Module
from linguasync.utils import EventChannel


logger = logging.getLogger(__name__)

COMPLETION_BADGE_ICON = "star.fill"
COMPLETION_BADGE_COLOR = "#FFD700"


def create_completion_badge(module: Module, earned_at: Optional[datetime] = None) -> Badge:
    """
    Mint the badge for finishing a module.

    The descriptive fields depend only on the module's language, difficulty
    and title; only the id and earned date differ between calls.
    """
    return Badge(
        name=f"{module.language} {module.difficulty.value}",
        description=f"Completed {module.title}",
        icon_name=COMPLETION_BADGE_ICON,
        color=COMPLETION_BADGE_COLOR,
        date_earned=earned_at or datetime.now(),
    )


class ContentCatalog:
    """
    Hold the learning modules and apply completion events.

    Unknown module, lesson or quiz ids are treated as no-ops.
    """

    def __init__(
        self,
        modules: Optional[Iterable[Module]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.clock = clock
        self.events = EventChannel("catalog")
        self._modules: list[Module] = list(modules) if modules is not None else []
        self._loaded = modules is not None

    @property
    def modules(self) -> list[Module]:
        return list(self._modules)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self, modules: Iterable[Module]):
        """Replace the whole catalog."""
        self._modules = list(modules)
        self._loaded = True
        logger.info(f"Catalog loaded with {len(self._modules)} modules")
        self.events.emit("load", count=len(self._modules))

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_module(self, module_id: str) -> Optional[Module]:
        return next((m for m in self._modules if m.id == module_id), None)

    def _index_of(self, module_id: str) -> Optional[int]:
        for idx, module in enumerate(self._modules):
            if module.id == module_id:
                return idx
        return None

    def completed_module_count(self) -> int:
        return sum(1 for module in self._modules if module.is_completed)

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def complete_lesson(self, lesson_id: str, module_id: str) -> Optional[Module]:
        """
        Mark a lesson complete and refresh the module.

        A completion badge is attached only when this call moves the module
        into full completion.

        Returns:
            The updated module, or None if the module or lesson is unknown
        """
        idx = self._index_of(module_id)
        if idx is None:
            logger.debug(f"complete_lesson: unknown module {module_id}")
            return None
        module = self._modules[idx]
        if module.get_lesson(lesson_id) is None:
            logger.debug(f"complete_lesson: unknown lesson {lesson_id} in module {module_id}")
            return None

        lessons = tuple(
            lesson.model_copy(update={"is_completed": True}) if lesson.id == lesson_id else lesson
            for lesson in module.lessons
        )
        updated = module.model_copy(update={"lessons": lessons})

        if updated.is_completed and not module.is_completed:
            badge = create_completion_badge(updated, self.clock())
            updated = updated.model_copy(update={"badge_earned": badge})
            logger.info(f"Module completed: {updated.title}")

        self._modules[idx] = updated
        self.events.emit("complete_lesson", module_id=module_id, lesson_id=lesson_id)
        return updated

    def complete_quiz(self, quiz_id: str, module_id: str, score: int) -> Optional[Module]:
        """
        Record a quiz score.

        The quiz counts as completed when the score meets its own passing
        score. Module completion is not affected.

        Returns:
            The updated module, or None if the module or quiz is unknown
        """
        idx = self._index_of(module_id)
        if idx is None:
            logger.debug(f"complete_quiz: unknown module {module_id}")
            return None
        module = self._modules[idx]
        if module.get_quiz(quiz_id) is None:
            logger.debug(f"complete_quiz: unknown quiz {quiz_id} in module {module_id}")
            return None

        quizzes = tuple(
            quiz.model_copy(update={"is_completed": score >= quiz.passing_score, "user_score": score})
            if quiz.id == quiz_id else quiz
            for quiz in module.quizzes
        )
        updated = module.model_copy(update={"quizzes": quizzes})
        self._modules[idx] = updated
        self.events.emit("complete_quiz", module_id=module_id, quiz_id=quiz_id, score=score)
        return updated

    def update_module_progress(self, module_id: str, progress: float) -> Optional[Module]:
        """
        Set a module's progress by marking its leading lessons complete.

        Progress is derived from lessons, so a fraction is expressed as the
        first round(progress * lesson_count) lessons being complete.
        """
        idx = self._index_of(module_id)
        if idx is None:
            logger.debug(f"update_module_progress: unknown module {module_id}")
            return None
        module = self._modules[idx]
        fraction = min(max(progress, 0.0), 1.0)
        done = round(fraction * len(module.lessons))

        lessons = tuple(
            lesson.model_copy(update={"is_completed": position < done})
            for position, lesson in enumerate(module.lessons)
        )
        updated = module.model_copy(update={"lessons": lessons})
        if updated.is_completed and not module.is_completed:
            updated = updated.model_copy(update={"badge_earned": create_completion_badge(updated, self.clock())})

        self._modules[idx] = updated
        self.events.emit("update_module_progress", module_id=module_id, progress=updated.progress)
        return updated
