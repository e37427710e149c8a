"""
LinguaSync Schemas - Pydantic models for the language learning engine.

This module exports all schema classes for:
- Content: modules, lessons, quizzes, questions, exercises, badges
- Progress: learner progress and preferences
"""

# Content schemas
from .content import (
    Difficulty,
    LessonType,
    ExerciseType,
    VocabularyItem,
    Exercise,
    Question,
    Lesson,
    Quiz,
    Badge,
    Module,
    MULTIPLE_CHOICE_DELIMITER,
    new_id,
)

# Progress schemas
from .progress import (
    LearningGoal,
    UserProgress,
    UserPreferences,
    DEFAULT_WEEKLY_GOAL,
)

__all__ = [
    # Content
    'Difficulty',
    'LessonType',
    'ExerciseType',
    'VocabularyItem',
    'Exercise',
    'Question',
    'Lesson',
    'Quiz',
    'Badge',
    'Module',
    'MULTIPLE_CHOICE_DELIMITER',
    'new_id',
    # Progress
    'LearningGoal',
    'UserProgress',
    'UserPreferences',
    'DEFAULT_WEEKLY_GOAL',
]
