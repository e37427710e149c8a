"""Tests for the session engine state machine."""

from linguasync.classroom import (
    ContentCatalog,
    SessionEngine,
    SessionState,
    score_quiz,
)
from linguasync.schemas import Question, Quiz

from conftest import make_module


def answer_all(engine, answers):
    for idx, answer in enumerate(answers):
        engine.select_answer(answer, idx)
        engine.advance_question()


def finish_lesson(engine, lesson):
    engine.start_lesson(lesson)
    for _ in range(max(len(lesson.exercises), 1)):
        engine.advance_exercise()


class TestScoring:
    def make_quiz(self, count):
        return Quiz(
            title="Quiz",
            questions=[
                Question(text=f"Q{i}", options=["a", "b", "c"], correct_answer=i % 3)
                for i in range(count)
            ],
        )

    def test_three_of_four(self):
        quiz = self.make_quiz(4)
        answers = ["a", "b", "c", "c"]
        assert score_quiz(quiz, answers) == 75

    def test_empty_quiz_scores_zero(self):
        assert score_quiz(Quiz(title="Empty"), []) == 0

    def test_rounds_to_nearest(self):
        quiz = self.make_quiz(3)
        assert score_quiz(quiz, ["a", "b", "x"]) == 67
        assert score_quiz(quiz, ["a", "x", "x"]) == 33

    def test_half_rounds_up(self):
        quiz = self.make_quiz(8)
        assert score_quiz(quiz, ["a"]) == 13

    def test_compares_option_text(self):
        quiz = Quiz(
            title="Twins",
            questions=[Question(text="Pick", options=["same", "same"], correct_answer=1)],
        )
        assert score_quiz(quiz, ["same"]) == 100

    def test_unanswered_and_short_answer_lists(self):
        quiz = self.make_quiz(4)
        assert score_quiz(quiz, ["", "b"]) == 25


class TestSessionTransitions:
    def test_starts_idle(self, engine):
        assert engine.state == SessionState.IDLE
        assert engine.current_exercise is None
        assert engine.current_question is None

    def test_cannot_start_without_module(self, engine, module):
        assert engine.start_lesson(module.lessons[0]) is False
        assert engine.start_quiz(module.quizzes[0]) is False
        assert engine.state == SessionState.IDLE

    def test_start_lesson(self, engine, module):
        engine.load_module(module)
        assert engine.start_lesson(module.lessons[0]) is True
        assert engine.state == SessionState.IN_LESSON
        assert engine.current_exercise == module.lessons[0].exercises[0]

    def test_exercise_navigation(self, engine, module):
        engine.load_module(module)
        engine.start_lesson(module.lessons[0])
        assert engine.retreat_exercise() is False
        engine.advance_exercise()
        assert engine.exercise_index == 1
        assert engine.retreat_exercise() is True
        assert engine.exercise_index == 0

    def test_cannot_start_quiz_during_lesson(self, engine, module):
        engine.load_module(module)
        engine.start_lesson(module.lessons[0])
        assert engine.start_quiz(module.quizzes[0]) is False
        assert engine.state == SessionState.IN_LESSON

    def test_start_quiz(self, engine, module):
        engine.load_module(module)
        assert engine.start_quiz(module.quizzes[0]) is True
        assert engine.state == SessionState.IN_QUIZ
        assert engine.question_index == 0
        assert engine.answers == ["", "", "", ""]

    def test_select_answer_bounds(self, engine, module):
        engine.load_module(module)
        engine.start_quiz(module.quizzes[0])
        assert engine.select_answer("right 1", 0) is True
        assert engine.select_answer("x", 4) is False
        assert engine.select_answer("x", -1) is False
        assert engine.answers == ["right 1", "", "", ""]

    def test_select_answer_outside_quiz(self, engine, module):
        engine.load_module(module)
        assert engine.select_answer("x", 0) is False

    def test_question_navigation(self, engine, module):
        engine.load_module(module)
        engine.start_quiz(module.quizzes[0])
        assert engine.retreat_question() is False
        engine.advance_question()
        engine.advance_question()
        assert engine.question_index == 2
        engine.retreat_question()
        assert engine.question_index == 1
        assert engine.current_question.id == "q2"

    def test_answer_helpers(self, engine, module):
        engine.load_module(module)
        engine.start_quiz(module.quizzes[0])
        assert engine.can_proceed_to_next_question() is False
        engine.select_answer("wrong 1", 0)
        assert engine.is_question_answered(0) is True
        assert engine.can_proceed_to_next_question() is True
        assert engine.is_question_answered(9) is False

    def test_reset_session(self, engine, module):
        engine.load_module(module)
        engine.start_quiz(module.quizzes[0])
        engine.select_answer("right 1", 0)
        engine.reset_session()
        assert engine.state == SessionState.IDLE
        assert engine.answers == []
        assert engine.quiz is None
        assert engine.module == module

    def test_load_module_clears_run(self, engine, module):
        engine.load_module(module)
        engine.start_lesson(module.lessons[0])
        other = make_module("other")
        engine.load_module(other)
        assert engine.state == SessionState.IDLE
        assert engine.lesson is None
        assert engine.module == other

    def test_events_emitted(self, engine, module):
        events = []
        engine.events.subscribe(events.append)
        engine.load_module(module)
        engine.start_lesson(module.lessons[0])
        assert [e.action for e in events] == ["load_module", "start_lesson"]


class TestLessonCompletion:
    def test_last_exercise_completes_lesson(self, engine, module, catalog, ledger):
        engine.load_module(module)
        finish_lesson(engine, module.lessons[0])

        assert engine.state == SessionState.SHOWING_RESULTS
        assert engine.result.kind == "lesson"
        assert catalog.get_module(module.id).get_lesson("lesson-1").is_completed is True
        assert ledger.progress.total_lessons_completed == 1
        assert ledger.progress.total_time_spent == 15
        assert ledger.progress.weekly_progress == 1

    def test_completion_runs_once(self, engine, module, ledger):
        engine.load_module(module)
        finish_lesson(engine, module.lessons[0])
        assert engine.advance_exercise() is False
        assert ledger.progress.total_lessons_completed == 1

    def test_lesson_without_exercises(self, clock, ledger):
        module = make_module(exercises=0)
        catalog = ContentCatalog([module], clock=clock)
        engine = SessionEngine(catalog, ledger, clock=clock)
        engine.load_module(module)
        engine.start_lesson(module.lessons[0])
        assert engine.current_exercise is None
        engine.advance_exercise()
        assert engine.state == SessionState.SHOWING_RESULTS
        assert catalog.get_module(module.id).get_lesson("lesson-1").is_completed is True

    def test_module_completion_scenario(self, engine, module, catalog, ledger):
        engine.load_module(module)

        finish_lesson(engine, module.lessons[0])
        after_first = catalog.get_module(module.id)
        assert after_first.progress == 0.5
        assert after_first.is_completed is False
        assert ledger.progress.badges_earned == ()

        finish_lesson(engine, module.lessons[1])
        after_second = catalog.get_module(module.id)
        assert after_second.progress == 1.0
        assert after_second.is_completed is True
        assert after_second.badge_earned is not None
        assert ledger.progress.badges_earned == (after_second.badge_earned,)
        assert ledger.progress.total_modules_completed == 1
        assert engine.result.module_completed is True
        assert engine.result.badges == (after_second.badge_earned,)
        assert engine.progress_percentage == 1.0
        assert engine.completed_lessons_count == engine.total_lessons_count == 2

    def test_repeating_a_lesson_does_not_rebadge(self, engine, module, ledger):
        engine.load_module(module)
        finish_lesson(engine, module.lessons[0])
        finish_lesson(engine, module.lessons[1])
        finish_lesson(engine, module.lessons[1])
        assert len(ledger.progress.badges_earned) == 1
        assert ledger.progress.total_lessons_completed == 3


class TestQuizCompletion:
    def test_passing_quiz_scenario(self, clock, ledger):
        module = make_module(questions=5, passing_score=70)
        catalog = ContentCatalog([module], clock=clock)
        engine = SessionEngine(catalog, ledger, clock=clock)
        engine.load_module(module)
        engine.start_quiz(module.quizzes[0])

        answer_all(engine, ["right 1", "right 2", "right 3", "right 4", "wrong 5"])

        assert engine.state == SessionState.SHOWING_RESULTS
        assert engine.result.score == 80
        assert engine.result.passed is True
        quiz = catalog.get_module(module.id).get_quiz("quiz-1")
        assert quiz.is_completed is True
        assert quiz.user_score == 80
        badge = ledger.progress.badges_earned[-1]
        assert "80" in badge.description
        assert "Spanish Basics Quiz" in badge.description
        assert badge.date_earned == clock.now
        assert ledger.progress.total_quizzes_completed == 1
        assert ledger.progress.total_time_spent == 10
        assert engine.completed_quizzes_count == 1

    def test_failing_quiz(self, engine, module, catalog, ledger):
        engine.load_module(module)
        engine.start_quiz(module.quizzes[0])
        answer_all(engine, ["right 1", "wrong", "wrong", "wrong"])

        assert engine.result.score == 25
        assert engine.result.passed is False
        quiz = catalog.get_module(module.id).get_quiz("quiz-1")
        assert quiz.is_completed is False
        assert quiz.user_score == 25
        assert ledger.progress.badges_earned == ()
        assert ledger.progress.total_quizzes_completed == 1

    def test_quiz_before_lessons_is_scored(self, engine, module, catalog):
        engine.load_module(module)
        engine.start_quiz(module.quizzes[0])
        answer_all(engine, ["right 1", "right 2", "right 3", "right 4"])
        updated = catalog.get_module(module.id)
        assert updated.get_quiz("quiz-1").is_completed is True
        assert updated.is_completed is False

    def test_empty_quiz(self, clock, ledger):
        module = make_module(questions=0)
        catalog = ContentCatalog([module], clock=clock)
        engine = SessionEngine(catalog, ledger, clock=clock)
        engine.load_module(module)
        engine.start_quiz(module.quizzes[0])
        engine.advance_question()
        assert engine.result.score == 0
        assert engine.state == SessionState.SHOWING_RESULTS

    def test_retaking_passed_quiz_awards_again(self, engine, module, ledger):
        engine.load_module(module)
        for _ in range(2):
            engine.start_quiz(module.quizzes[0])
            answer_all(engine, ["right 1", "right 2", "right 3", "right 4"])
        assert [b.name for b in ledger.progress.badges_earned] == ["Quiz Master", "Quiz Master"]

    def test_streak_updated_by_session(self, engine, module, ledger, clock):
        engine.load_module(module)
        finish_lesson(engine, module.lessons[0])
        clock.advance(days=1)
        engine.start_quiz(module.quizzes[0])
        answer_all(engine, ["wrong"] * 4)
        assert ledger.progress.current_streak == 2


class TestSubscriberFailures:
    def test_lesson_completion_survives_failing_catalog_subscriber(self, engine, module, catalog, ledger):
        def broken(event):
            raise RuntimeError("display refresh failed")

        catalog.events.subscribe(broken)
        engine.load_module(module)
        finish_lesson(engine, module.lessons[0])
        finish_lesson(engine, module.lessons[1])

        assert engine.state == SessionState.SHOWING_RESULTS
        assert ledger.progress.total_lessons_completed == 2
        assert ledger.progress.total_modules_completed == 1
        assert len(ledger.progress.badges_earned) == 1
