"""
LinguaSync - Progress, scoring and session engine for language learning.

Structured content (modules -> lessons/quizzes -> exercises/questions),
quiz scoring, daily streaks, weekly goals and badges.
"""

__version__ = "0.1.0"
