"""
Navigator - Availability and summaries for the presentation layer.

Provides:
- Lesson and quiz availability (quizzes unlock once every lesson is done)
- Next lesson recommendation within a module
- Module summaries for cards and sidebars

This is display policy only; the session engine does not enforce it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from linguasync.schemas import Lesson, Module, Quiz

from .catalog import ContentCatalog


class Availability(str, Enum):
    """Availability status for UI display."""
    LOCKED = "locked"           # Lessons not finished yet
    AVAILABLE = "available"     # Can start
    COMPLETED = "completed"     # Finished


@dataclass
class ModuleSummary:
    """Module counts for a module card."""
    module_id: str
    title: str
    language: str
    difficulty: str
    difficulty_color: str
    completed_lessons: int
    total_lessons: int
    completed_quizzes: int
    total_quizzes: int
    progress: float
    is_completed: bool


class Navigator:
    """
    Answer "what can the learner do next" questions against the catalog.
    """

    def __init__(self, catalog: ContentCatalog):
        self.catalog = catalog

    # -------------------------------------------------------------------------
    # Availability Checking
    # -------------------------------------------------------------------------

    def get_lesson_availability(self, lesson: Lesson) -> Availability:
        if lesson.is_completed:
            return Availability.COMPLETED
        return Availability.AVAILABLE

    def get_quiz_availability(self, module: Module, quiz: Quiz) -> Availability:
        """
        Quizzes stay locked until all of the module's lessons are complete.
        """
        if quiz.is_completed:
            return Availability.COMPLETED
        if not all(lesson.is_completed for lesson in module.lessons):
            return Availability.LOCKED
        return Availability.AVAILABLE

    def is_quiz_locked(self, module_id: str, quiz_id: str) -> bool:
        module = self.catalog.get_module(module_id)
        if module is None:
            return True
        quiz = module.get_quiz(quiz_id)
        if quiz is None:
            return True
        return self.get_quiz_availability(module, quiz) == Availability.LOCKED

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def get_next_lesson(self, module_id: str) -> Optional[Lesson]:
        """First incomplete lesson of a module, in order."""
        module = self.catalog.get_module(module_id)
        if module is None:
            return None
        return next((lesson for lesson in module.lessons if not lesson.is_completed), None)

    # -------------------------------------------------------------------------
    # Summaries
    # -------------------------------------------------------------------------

    def get_module_summary(self, module_id: str) -> Optional[ModuleSummary]:
        module = self.catalog.get_module(module_id)
        if module is None:
            return None
        return ModuleSummary(
            module_id=module.id,
            title=module.title,
            language=module.language,
            difficulty=module.difficulty.value,
            difficulty_color=module.difficulty.color,
            completed_lessons=sum(1 for lesson in module.lessons if lesson.is_completed),
            total_lessons=len(module.lessons),
            completed_quizzes=sum(1 for quiz in module.quizzes if quiz.is_completed),
            total_quizzes=len(module.quizzes),
            progress=module.progress,
            is_completed=module.is_completed,
        )

    def get_module_summaries(self) -> list[ModuleSummary]:
        """Summaries for every module, easiest difficulty first."""
        modules = sorted(self.catalog.modules, key=lambda m: m.difficulty.rank)
        return [self.get_module_summary(module.id) for module in modules]
