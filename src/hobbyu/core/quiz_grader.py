"""Quiz grading.

Lesson quizzes are multiple choice only, so grading is a deterministic
comparison of answer indices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

import structlog

from hobbyu.core.models import Question
from hobbyu.core.progress_tracker import round_half_up

logger = structlog.get_logger(__name__)

ScoreBand = Literal["good", "fair", "poor"]


class QuizSubmissionError(Exception):
    """Error validating a quiz submission."""

    pass


@dataclass
class QuestionGrade:
    """Grade for a single question."""

    question_id: str
    given_answer: int
    correct_answer: int

    @property
    def is_correct(self) -> bool:
        return self.given_answer == self.correct_answer

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "question_id": self.question_id,
            "given_answer": self.given_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
        }


@dataclass
class QuizGrade:
    """Result of grading a quiz."""

    total_questions: int
    correct_count: int
    score: int
    results: list[QuestionGrade] = field(default_factory=list)

    @property
    def band(self) -> ScoreBand:
        return score_band(self.score)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_questions": self.total_questions,
            "correct_count": self.correct_count,
            "score": self.score,
            "band": self.band,
            "results": [r.to_dict() for r in self.results],
        }


def score_band(score: int) -> ScoreBand:
    """Classify a 0-100 score."""
    if score >= 80:
        return "good"
    if score >= 60:
        return "fair"
    return "poor"


def grade_quiz(
    questions: Sequence[Question],
    answers: Sequence[int | None],
) -> QuizGrade:
    """Grade a quiz.

    Args:
        questions: Lesson questions in order
        answers: Selected option index per question, in the same order

    Returns:
        QuizGrade with score = round(correct / total * 100)

    Raises:
        QuizSubmissionError: If the lesson has no questions, a question is
            unanswered, or an answer index is out of range
    """
    if not questions:
        raise QuizSubmissionError("Lesson has no quiz questions")

    if len(answers) != len(questions) or any(a is None for a in answers):
        raise QuizSubmissionError("Please answer all questions")

    results: list[QuestionGrade] = []
    for question, answer in zip(questions, answers):
        if isinstance(answer, bool) or not isinstance(answer, int):
            raise QuizSubmissionError(
                f"Answer for {question.question_id} must be an option index"
            )
        if not 0 <= answer < len(question.options):
            raise QuizSubmissionError(
                f"Answer {answer} out of range for {question.question_id}"
            )
        results.append(
            QuestionGrade(
                question_id=question.question_id,
                given_answer=answer,
                correct_answer=question.correct_answer,
            )
        )

    correct_count = sum(1 for r in results if r.is_correct)
    score = round_half_up(correct_count / len(questions) * 100)

    logger.debug(
        "quiz_graded",
        total=len(questions),
        correct=correct_count,
        score=score,
    )

    return QuizGrade(
        total_questions=len(questions),
        correct_count=correct_count,
        score=score,
        results=results,
    )
