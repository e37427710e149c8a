"""Shared fixtures for LinguaSync tests."""

from datetime import datetime, timedelta

import pytest

from linguasync.classroom import ContentCatalog, MemoryBlobStore, ProgressLedger, SessionEngine
from linguasync.schemas import (
    Difficulty,
    Exercise,
    ExerciseType,
    Lesson,
    LessonType,
    Module,
    Question,
    Quiz,
)


class FakeClock:
    """Controllable replacement for datetime.now."""

    def __init__(self, start: datetime = datetime(2024, 3, 4, 9, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0):
        self.now += timedelta(days=days, hours=hours)


def make_question(idx: int, correct: int = 0) -> Question:
    return Question(
        id=f"q{idx}",
        text=f"Question {idx}?",
        options=[f"right {idx}", f"wrong {idx}", "other", "again"],
        correct_answer=correct,
        explanation=f"Because {idx}",
    )


def make_lesson(idx: int, exercises: int = 2) -> Lesson:
    return Lesson(
        id=f"lesson-{idx}",
        title=f"Lesson {idx}",
        content="Body",
        type=LessonType.VOCABULARY,
        exercises=[
            Exercise(
                id=f"ex-{idx}-{n}",
                instruction="Translate",
                type=ExerciseType.TRANSLATION,
                content="Hello",
                correct_answer="Hola",
            )
            for n in range(exercises)
        ],
    )


def make_module(
    module_id: str = "spanish",
    lessons: int = 2,
    questions: int = 4,
    passing_score: int = 70,
    exercises: int = 2,
) -> Module:
    return Module(
        id=module_id,
        title="Spanish Basics",
        description="Greetings and numbers",
        language="Spanish",
        difficulty=Difficulty.BEGINNER,
        estimated_time=45,
        lessons=[make_lesson(i, exercises) for i in range(1, lessons + 1)],
        quizzes=[
            Quiz(
                id="quiz-1",
                title="Spanish Basics Quiz",
                questions=[make_question(i) for i in range(1, questions + 1)],
                passing_score=passing_score,
            )
        ],
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryBlobStore()


@pytest.fixture
def ledger(store, clock):
    return ProgressLedger(store, clock=clock)


@pytest.fixture
def module():
    return make_module()


@pytest.fixture
def catalog(module, clock):
    return ContentCatalog([module], clock=clock)


@pytest.fixture
def engine(catalog, ledger, clock):
    return SessionEngine(catalog, ledger, lesson_minutes=15, quiz_minutes=10, clock=clock)
