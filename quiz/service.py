"""
Submission flow: resolve test -> score -> record result.

Every function takes the request's Session explicitly; nothing here keeps
state between calls.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Tuple

from sqlalchemy.orm import Session

from .crud import append_result, get_test_structure
from .errors import NotFound
from .models import TestResult
from .scoring import score

logger = logging.getLogger("quiz-service")


@dataclass(frozen=True)
class SubmissionOutcome:
    result_id: int
    score: Decimal
    total_questions: int
    correct_count: int


def record(db: Session, student_id: int, test_id: int, percentage: Decimal) -> TestResult:
    return append_result(db, student_id, test_id, percentage)


def submit_answers(
    db: Session,
    student_id: int,
    test_id: int,
    answers: Iterable[Tuple[int, int]],
) -> SubmissionOutcome:
    test = get_test_structure(db, test_id)
    if test is None:
        raise NotFound(f"Test {test_id} not found")

    outcome = score(test, answers)
    result = record(db, student_id, test_id, outcome.percentage)

    logger.info(
        "Test %s submitted by student %s: %s/%s (%s%%)",
        test_id, student_id, outcome.correct_count, outcome.total_questions, outcome.percentage,
    )
    return SubmissionOutcome(
        result_id=result.id,
        score=outcome.percentage,
        total_questions=outcome.total_questions,
        correct_count=outcome.correct_count,
    )
