"""
SessionEngine - Walk a learner through one lesson or one quiz.

States:
- IDLE: a module may be loaded, nothing running
- IN_LESSON: stepping through a lesson's exercises
- IN_QUIZ: answering a quiz's questions
- SHOWING_RESULTS: a lesson or quiz just finished

Finishing a lesson or quiz writes back into the catalog and the progress
ledger exactly once, at the moment the last exercise or question is passed.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from linguasync.config import DEFAULT_LESSON_MINUTES, DEFAULT_QUIZ_MINUTES
from linguasync.schemas import Badge, Exercise, Lesson, Module, Question, Quiz
from linguasync.utils import EventChannel

from .catalog import ContentCatalog
from .progress import ProgressLedger


logger = logging.getLogger(__name__)

QUIZ_BADGE_NAME = "Quiz Master"
QUIZ_BADGE_ICON = "checkmark.seal.fill"
QUIZ_BADGE_COLOR = "#4CAF50"


class SessionState(str, Enum):
    IDLE = "idle"
    IN_LESSON = "in_lesson"
    IN_QUIZ = "in_quiz"
    SHOWING_RESULTS = "showing_results"


@dataclass(frozen=True)
class SessionResult:
    """Outcome of a finished lesson or quiz, shown on the results screen."""
    kind: str                      # "lesson" or "quiz"
    item_id: str
    title: str
    score: Optional[int] = None    # quizzes only, percent
    passed: bool = False
    module_completed: bool = False
    badges: tuple[Badge, ...] = ()


def score_quiz(quiz: Quiz, answers: list[str]) -> int:
    """
    Score answers against a quiz as an integer percentage.

    Answers are option texts, compared with the text of the correct option.
    Halves round up. A quiz without questions scores 0.
    """
    total = len(quiz.questions)
    if total == 0:
        return 0
    correct = sum(
        1 for idx, question in enumerate(quiz.questions)
        if idx < len(answers) and answers[idx] == question.correct_option
    )
    return int(correct * 100 / total + 0.5)


def create_quiz_badge(quiz: Quiz, score: int, earned_at: Optional[datetime] = None) -> Badge:
    return Badge(
        name=QUIZ_BADGE_NAME,
        description=f"Passed {quiz.title} with {score}%",
        icon_name=QUIZ_BADGE_ICON,
        color=QUIZ_BADGE_COLOR,
        date_earned=earned_at or datetime.now(),
    )


class SessionEngine:
    """
    State machine over a single module.

    Transitions that don't apply to the current state are ignored and
    reported with a False return value.
    """

    def __init__(
        self,
        catalog: ContentCatalog,
        ledger: ProgressLedger,
        lesson_minutes: int = DEFAULT_LESSON_MINUTES,
        quiz_minutes: int = DEFAULT_QUIZ_MINUTES,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize engine.

        Args:
            catalog: Catalog that receives lesson and quiz completions
            ledger: Ledger that receives activity and badges
            lesson_minutes: Time credited per finished lesson
            quiz_minutes: Time credited per finished quiz
            clock: Source of "now" for badge dates (default: the ledger's)
        """
        self.catalog = catalog
        self.ledger = ledger
        self.lesson_minutes = lesson_minutes
        self.quiz_minutes = quiz_minutes
        self.clock = clock or ledger.clock
        self.events = EventChannel("session")

        self.state = SessionState.IDLE
        self.module: Optional[Module] = None
        self.lesson: Optional[Lesson] = None
        self.quiz: Optional[Quiz] = None
        self.exercise_index: Optional[int] = None
        self.question_index = 0
        self.answers: list[str] = []
        self.result: Optional[SessionResult] = None

    def _clear_run(self):
        self.lesson = None
        self.quiz = None
        self.exercise_index = None
        self.question_index = 0
        self.answers = []
        self.result = None

    def _can_start(self, action: str) -> bool:
        if self.module is None:
            logger.debug(f"{action}: no module loaded")
            return False
        if self.state not in (SessionState.IDLE, SessionState.SHOWING_RESULTS):
            logger.debug(f"{action}: ignored in state {self.state.value}")
            return False
        return True

    # -------------------------------------------------------------------------
    # Module and session control
    # -------------------------------------------------------------------------

    def load_module(self, module: Module):
        self.module = module
        self._clear_run()
        self.state = SessionState.IDLE
        self.events.emit("load_module", module_id=module.id)

    def reset_session(self):
        """Return to IDLE, discarding any lesson or quiz in progress."""
        self._clear_run()
        self.state = SessionState.IDLE
        self.events.emit("reset_session")

    # -------------------------------------------------------------------------
    # Lessons
    # -------------------------------------------------------------------------

    @property
    def current_exercise(self) -> Optional[Exercise]:
        if self.lesson is None or self.exercise_index is None:
            return None
        return self.lesson.exercises[self.exercise_index]

    def start_lesson(self, lesson: Lesson) -> bool:
        if not self._can_start("start_lesson"):
            return False
        self._clear_run()
        self.lesson = lesson
        self.exercise_index = 0 if lesson.exercises else None
        self.state = SessionState.IN_LESSON
        self.events.emit("start_lesson", lesson_id=lesson.id)
        return True

    def advance_exercise(self) -> bool:
        """Move to the next exercise, or finish the lesson after the last one."""
        if self.state != SessionState.IN_LESSON:
            return False
        last = len(self.lesson.exercises) - 1
        if self.exercise_index is not None and self.exercise_index < last:
            self.exercise_index += 1
            self.events.emit("advance_exercise", index=self.exercise_index)
        else:
            self._complete_lesson()
        return True

    def retreat_exercise(self) -> bool:
        if self.state != SessionState.IN_LESSON or not self.exercise_index:
            return False
        self.exercise_index -= 1
        self.events.emit("retreat_exercise", index=self.exercise_index)
        return True

    def _complete_lesson(self):
        module, lesson = self.module, self.lesson
        before = self.catalog.get_module(module.id)
        updated = self.catalog.complete_lesson(lesson.id, module.id)
        became_completed = (
            updated is not None
            and updated.is_completed
            and not (before is not None and before.is_completed)
        )

        activity = {"lessons_completed": 1, "time_spent_minutes": self.lesson_minutes}
        if became_completed:
            activity["modules_completed"] = self.catalog.completed_module_count()
        self.ledger.record_activity(**activity)

        badges = []
        if became_completed and updated.badge_earned is not None:
            self.ledger.add_badge(updated.badge_earned)
            badges.append(updated.badge_earned)

        if updated is not None:
            self.module = updated
            self.lesson = updated.get_lesson(lesson.id)

        logger.info(f"Lesson finished: {lesson.title}")
        self.result = SessionResult(
            kind="lesson",
            item_id=lesson.id,
            title=lesson.title,
            passed=True,
            module_completed=became_completed,
            badges=tuple(badges),
        )
        self.state = SessionState.SHOWING_RESULTS
        self.events.emit("complete_lesson", lesson_id=lesson.id)

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    @property
    def current_question(self) -> Optional[Question]:
        if self.quiz is None or not self.quiz.questions:
            return None
        return self.quiz.questions[self.question_index]

    def start_quiz(self, quiz: Quiz) -> bool:
        if not self._can_start("start_quiz"):
            return False
        self._clear_run()
        self.quiz = quiz
        self.answers = [""] * len(quiz.questions)
        self.state = SessionState.IN_QUIZ
        self.events.emit("start_quiz", quiz_id=quiz.id)
        return True

    def select_answer(self, answer: str, question_index: int) -> bool:
        """Record the chosen option text for a question."""
        if self.state != SessionState.IN_QUIZ:
            return False
        if not 0 <= question_index < len(self.answers):
            return False
        self.answers[question_index] = answer
        self.events.emit("select_answer", index=question_index)
        return True

    def advance_question(self) -> bool:
        """Move to the next question, or score the quiz after the last one."""
        if self.state != SessionState.IN_QUIZ:
            return False
        if self.question_index < len(self.quiz.questions) - 1:
            self.question_index += 1
            self.events.emit("advance_question", index=self.question_index)
        else:
            self._complete_quiz()
        return True

    def retreat_question(self) -> bool:
        if self.state != SessionState.IN_QUIZ or self.question_index == 0:
            return False
        self.question_index -= 1
        self.events.emit("retreat_question", index=self.question_index)
        return True

    def calculate_quiz_score(self) -> int:
        if self.quiz is None:
            return 0
        return score_quiz(self.quiz, self.answers)

    def _complete_quiz(self):
        module, quiz = self.module, self.quiz
        score = self.calculate_quiz_score()
        passed = score >= quiz.passing_score

        updated = self.catalog.complete_quiz(quiz.id, module.id, score)
        self.ledger.record_activity(quizzes_completed=1, time_spent_minutes=self.quiz_minutes)

        badges = []
        if passed:
            badge = create_quiz_badge(quiz, score, self.clock())
            self.ledger.add_badge(badge)
            badges.append(badge)

        if updated is not None:
            self.module = updated
            self.quiz = updated.get_quiz(quiz.id)

        logger.info(f"Quiz finished: {quiz.title} ({score}%, {'passed' if passed else 'not passed'})")
        self.result = SessionResult(
            kind="quiz",
            item_id=quiz.id,
            title=quiz.title,
            score=score,
            passed=passed,
            badges=tuple(badges),
        )
        self.state = SessionState.SHOWING_RESULTS
        self.events.emit("complete_quiz", quiz_id=quiz.id, score=score)

    # -------------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------------

    def is_question_answered(self, question_index: int) -> bool:
        if not 0 <= question_index < len(self.answers):
            return False
        return self.answers[question_index] != ""

    def can_proceed_to_next_question(self) -> bool:
        return self.is_question_answered(self.question_index)

    @property
    def progress_percentage(self) -> float:
        return self.module.progress if self.module else 0.0

    @property
    def completed_lessons_count(self) -> int:
        if self.module is None:
            return 0
        return sum(1 for lesson in self.module.lessons if lesson.is_completed)

    @property
    def total_lessons_count(self) -> int:
        return len(self.module.lessons) if self.module else 0

    @property
    def completed_quizzes_count(self) -> int:
        if self.module is None:
            return 0
        return sum(1 for quiz in self.module.quizzes if quiz.is_completed)

    @property
    def total_quizzes_count(self) -> int:
        return len(self.module.quizzes) if self.module else 0
