"""Tests for quiz grading (F1)."""

import pytest

from hobbyu.core.models import Question
from hobbyu.core.quiz_grader import QuizSubmissionError, grade_quiz, score_band


@pytest.fixture
def questions():
    """Three-question lesson quiz."""
    return [
        Question(
            question_id="trial-d01-q01",
            question_text="What is the most important aspect of professional development?",
            options=[
                "Consistency in practice",
                "Natural talent",
                "Expensive equipment",
                "Formal education",
            ],
            correct_answer=0,
        ),
        Question(
            question_id="trial-d01-q02",
            question_text="How often should you practice to see improvement?",
            options=["Once a week", "Daily", "Monthly", "When inspired"],
            correct_answer=1,
        ),
        Question(
            question_id="trial-d01-q03",
            question_text="What mindset is crucial for turning a hobby into a profession?",
            options=[
                "Perfectionism",
                "Growth mindset",
                "Competitive mindset",
                "Casual approach",
            ],
            correct_answer=1,
        ),
    ]


class TestGradeQuiz:
    """Tests for grade_quiz."""

    def test_all_correct(self, questions):
        grade = grade_quiz(questions, [0, 1, 1])

        assert grade.total_questions == 3
        assert grade.correct_count == 3
        assert grade.score == 100
        assert grade.band == "good"

    def test_two_of_three_rounds_to_67(self, questions):
        """Score is round(correct / total * 100)."""
        grade = grade_quiz(questions, [0, 1, 0])

        assert grade.correct_count == 2
        assert grade.score == 67
        assert grade.band == "fair"

    def test_one_of_three(self, questions):
        grade = grade_quiz(questions, [3, 1, 0])

        assert grade.score == 33
        assert grade.band == "poor"

    def test_per_question_results(self, questions):
        grade = grade_quiz(questions, [0, 2, 1])

        assert [r.is_correct for r in grade.results] == [True, False, True]
        assert grade.results[1].to_dict() == {
            "question_id": "trial-d01-q02",
            "given_answer": 2,
            "correct_answer": 1,
            "is_correct": False,
        }

    def test_unanswered_question_rejected(self, questions):
        with pytest.raises(QuizSubmissionError, match="Please answer all questions"):
            grade_quiz(questions, [0, None, 1])

    def test_missing_answers_rejected(self, questions):
        with pytest.raises(QuizSubmissionError, match="Please answer all questions"):
            grade_quiz(questions, [0, 1])

    def test_extra_answers_rejected(self, questions):
        with pytest.raises(QuizSubmissionError):
            grade_quiz(questions, [0, 1, 1, 2])

    def test_out_of_range_answer_rejected(self, questions):
        with pytest.raises(QuizSubmissionError, match="out of range"):
            grade_quiz(questions, [0, 1, 4])

    def test_boolean_answer_rejected(self, questions):
        with pytest.raises(QuizSubmissionError, match="option index"):
            grade_quiz(questions, [True, 1, 1])

    def test_lesson_without_questions_rejected(self):
        with pytest.raises(QuizSubmissionError, match="no quiz questions"):
            grade_quiz([], [])


class TestScoreBand:
    """Tests for score_band."""

    @pytest.mark.parametrize(
        "score,band",
        [(100, "good"), (80, "good"), (79, "fair"), (60, "fair"), (59, "poor"), (0, "poor")],
    )
    def test_bands(self, score, band):
        assert score_band(score) == band
