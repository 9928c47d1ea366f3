import enum
import logging
from decimal import Decimal

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .errors import PersistenceError
from .models import Test, Question, AnswerOption, TestResult

logger = logging.getLogger("quiz-service")

class UpdateOutcome(enum.Enum):
    UPDATED = "updated"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"

def _build_question(q: dict) -> Question:
    return Question(
        text=q["text"],
        options=[AnswerOption(text=o["text"], is_correct=bool(o.get("is_correct", False))) for o in q.get("options", [])],
    )

def get_test_structure(db: Session, test_id: int) -> Test | None:
    """Load a test with all its questions and options, or None."""
    return (
        db.query(Test)
        .options(selectinload(Test.questions).selectinload(Question.options))
        .filter(Test.id == test_id)
        .first()
    )

def list_tests(db: Session, topic_id: int | None = None):
    q = db.query(Test)
    if topic_id is not None:
        q = q.filter(Test.topic_id == topic_id)
    return q.order_by(Test.id.asc()).all()

def create_test(db: Session, payload: dict) -> Test:
    t = Test(
        title=payload["title"],
        description=payload.get("description", ""),
        topic_id=payload.get("topic_id"),
        questions=[_build_question(q) for q in payload.get("questions", [])],
    )
    db.add(t)
    db.commit()
    return get_test_structure(db, t.id)

def update_test(db: Session, test_id: int, payload: dict, expected_version: int) -> UpdateOutcome:
    """
    Update title/description/topic and optionally replace the question set.
    The row is only touched if its version still matches expected_version.
    """
    res = db.execute(
        update(Test)
        .where(Test.id == test_id, Test.version == expected_version)
        .values(
            title=payload["title"],
            description=payload.get("description", ""),
            topic_id=payload.get("topic_id"),
            version=Test.version + 1,
        )
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        db.rollback()
        if db.get(Test, test_id) is None:
            return UpdateOutcome.NOT_FOUND
        return UpdateOutcome.CONFLICT

    questions = payload.get("questions")
    if questions is not None:
        # delete-orphan cascade removes the old questions and their options
        t = get_test_structure(db, test_id)
        t.questions = [_build_question(q) for q in questions]

    db.commit()
    return UpdateOutcome.UPDATED

def delete_test(db: Session, test_id: int) -> bool:
    t = db.get(Test, test_id)
    if not t:
        return False
    # results go with the test
    db.execute(delete(TestResult).where(TestResult.test_id == test_id))
    db.delete(t)
    db.commit()
    return True

def append_result(db: Session, student_id: int, test_id: int, score: Decimal) -> TestResult:
    """
    Append one result row. Rows are never updated; a failed commit is rolled
    back and surfaced as PersistenceError.
    """
    r = TestResult(student_id=student_id, test_id=test_id, score=score)
    db.add(r)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error("Result rejected for student=%s test=%s: %s", student_id, test_id, e.orig)
        raise PersistenceError("Result references an unknown student or test", integrity=True) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Could not store result for student=%s test=%s: %s", student_id, test_id, e)
        raise PersistenceError("Could not store result") from e
    db.refresh(r)
    return r

def list_results(db: Session, student_id: int | None = None, test_id: int | None = None):
    q = db.query(TestResult)
    if student_id is not None:
        q = q.filter(TestResult.student_id == student_id)
    if test_id is not None:
        q = q.filter(TestResult.test_id == test_id)
    return q.order_by(TestResult.id.desc()).all()
