"""
Content schemas for LinguaSync.

Defines Pydantic models for the learning catalog:
- Modules bundling lessons and quizzes
- Lessons with exercises and vocabulary
- Quizzes with multiple-choice questions
- Badges awarded on completion

All models are frozen and hold tuples instead of lists. Changes go through
`model_copy(update=...)`, which produces a new value and leaves the original
untouched.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


MULTIPLE_CHOICE_DELIMITER = "|"


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

    @property
    def rank(self) -> int:
        """Severity order: beginner < intermediate < advanced."""
        return _DIFFICULTY_RANKS[self]

    @property
    def color(self) -> str:
        return _DIFFICULTY_COLORS[self]


_DIFFICULTY_RANKS = {
    Difficulty.BEGINNER: 1,
    Difficulty.INTERMEDIATE: 2,
    Difficulty.ADVANCED: 3,
}

_DIFFICULTY_COLORS = {
    Difficulty.BEGINNER: "#4CAF50",
    Difficulty.INTERMEDIATE: "#FF9800",
    Difficulty.ADVANCED: "#F44336",
}


class LessonType(str, Enum):
    VOCABULARY = "Vocabulary"
    GRAMMAR = "Grammar"
    CONVERSATION = "Conversation"
    LISTENING = "Listening"
    READING = "Reading"
    WRITING = "Writing"

    @property
    def icon_name(self) -> str:
        return _LESSON_ICONS[self]


_LESSON_ICONS = {
    LessonType.VOCABULARY: "book.fill",
    LessonType.GRAMMAR: "textformat",
    LessonType.CONVERSATION: "bubble.left.and.bubble.right.fill",
    LessonType.LISTENING: "ear.fill",
    LessonType.READING: "doc.text.fill",
    LessonType.WRITING: "pencil",
}


class ExerciseType(str, Enum):
    FILL_IN_THE_BLANK = "Fill in the Blank"
    MULTIPLE_CHOICE = "Multiple Choice"
    TRANSLATION = "Translation"
    MATCHING = "Matching"
    SPEAKING = "Speaking"
    LISTENING = "Listening"

    @property
    def icon_name(self) -> str:
        return _EXERCISE_ICONS[self]


_EXERCISE_ICONS = {
    ExerciseType.FILL_IN_THE_BLANK: "square.and.pencil",
    ExerciseType.MULTIPLE_CHOICE: "list.bullet.circle",
    ExerciseType.TRANSLATION: "arrow.left.arrow.right",
    ExerciseType.MATCHING: "link",
    ExerciseType.SPEAKING: "mic.fill",
    ExerciseType.LISTENING: "speaker.wave.2.fill",
}


def new_id() -> str:
    return str(uuid.uuid4())


# -----------------------------------------------------------------------------
# Lesson building blocks
# -----------------------------------------------------------------------------

class VocabularyItem(BaseModel):
    """Word list entry shown with a lesson (informational, never graded)."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    word: str
    translation: str
    pronunciation: str = ""
    example: str = ""
    is_learned: bool = False


class Exercise(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    instruction: str
    type: ExerciseType
    content: str                 # interpretation depends on type
    correct_answer: str
    is_completed: bool = False   # not used for scoring

    @property
    def options(self) -> list[str]:
        """Choices for a multiple-choice exercise, empty for other types."""
        if self.type != ExerciseType.MULTIPLE_CHOICE:
            return []
        return [part.strip() for part in self.content.split(MULTIPLE_CHOICE_DELIMITER)]


class Question(BaseModel):
    """
    Multiple-choice quiz question.

    `correct_answer` is a zero-based index into `options`. Options need not
    be unique; scoring compares option text, not positions.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    text: str
    options: tuple[str, ...] = Field(..., min_length=1)
    correct_answer: int = Field(..., ge=0)
    explanation: str = ""

    @model_validator(mode="after")
    def correct_answer_in_range(self):
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} out of range for {len(self.options)} options"
            )
        return self

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer]


# -----------------------------------------------------------------------------
# Lessons, quizzes, badges
# -----------------------------------------------------------------------------

class Lesson(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    title: str
    content: str = ""
    type: LessonType
    vocabulary: tuple[VocabularyItem, ...] = ()
    exercises: tuple[Exercise, ...] = ()
    is_completed: bool = False


class Quiz(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    title: str
    questions: tuple[Question, ...] = ()
    passing_score: int = Field(70, ge=0, le=100)  # percent
    is_completed: bool = False
    user_score: Optional[int] = None

    @property
    def passed(self) -> bool:
        return self.user_score is not None and self.user_score >= self.passing_score


class Badge(BaseModel):
    """Award record. A new Badge is minted for every award event."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    description: str
    icon_name: str
    color: str
    date_earned: Optional[datetime] = None


# -----------------------------------------------------------------------------
# Module
# -----------------------------------------------------------------------------

class Module(BaseModel):
    """
    A language course unit bundling lessons and quizzes.

    `progress` and `is_completed` are derived from the lessons on every
    access. Quizzes are tracked on their own and do not gate completion.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    language: str
    difficulty: Difficulty
    estimated_time: int = Field(0, ge=0)  # minutes
    lessons: tuple[Lesson, ...] = ()
    quizzes: tuple[Quiz, ...] = ()
    badge_earned: Optional[Badge] = None

    @computed_field
    @property
    def progress(self) -> float:
        """Completed lessons / total lessons, 0.0 for a module without lessons."""
        if not self.lessons:
            return 0.0
        completed = sum(1 for lesson in self.lessons if lesson.is_completed)
        return completed / len(self.lessons)

    @computed_field
    @property
    def is_completed(self) -> bool:
        return self.progress >= 1.0

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        return next((lesson for lesson in self.lessons if lesson.id == lesson_id), None)

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        return next((quiz for quiz in self.quizzes if quiz.id == quiz_id), None)
