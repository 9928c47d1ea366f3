from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from shared.auth import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER, current_user_id, require_roles
from shared.database import db_dependency
from .schemas import (
    TestCreateIn, TestUpdateIn,
    TestSummaryOut, TestOut, TestKeyOut,
    SubmitTestIn, SubmitTestOut, ResultOut,
)
from .crud import (
    UpdateOutcome,
    get_test_structure, list_tests, create_test, update_test, delete_test,
    list_results,
)
from .errors import DomainError, NotFound, PersistenceError
from .models import Test
from .service import submit_answers

ANY_ROLE = require_roles(ROLE_STUDENT, ROLE_TEACHER, ROLE_ADMIN)
STAFF = require_roles(ROLE_TEACHER, ROLE_ADMIN)
STUDENT = require_roles(ROLE_STUDENT)

def build_router(SessionLocal):
    router = APIRouter()
    get_db = db_dependency(SessionLocal)

    @router.get("/", response_model=list[TestSummaryOut])
    def get_all(topic_id: int | None = Query(default=None), db: Session = Depends(get_db), _user: dict = Depends(ANY_ROLE)):
        return list_tests(db, topic_id)

    @router.post("/submit", response_model=SubmitTestOut)
    def submit(
        payload: SubmitTestIn,
        db: Session = Depends(get_db),
        _user: dict = Depends(STUDENT),
        uid: int = Depends(current_user_id),
    ):
        answers = [(a.question_id, a.selected_option_id) for a in payload.answers]
        try:
            outcome = submit_answers(db, uid, payload.test_id, answers)
        except NotFound:
            raise HTTPException(404, "Test not found")
        except DomainError as e:
            raise HTTPException(422, str(e))
        except PersistenceError as e:
            raise HTTPException(409 if e.integrity else 503, str(e))

        return SubmitTestOut(
            result_id=outcome.result_id,
            score=outcome.score,
            total_questions=outcome.total_questions,
            correct_count=outcome.correct_count,
        )

    @router.get("/results/me", response_model=list[ResultOut])
    def my_results(db: Session = Depends(get_db), _user: dict = Depends(STUDENT), uid: int = Depends(current_user_id)):
        return list_results(db, student_id=uid)

    @router.get("/{test_id}")
    def get_one(test_id: int, db: Session = Depends(get_db), user: dict = Depends(ANY_ROLE)):
        t = get_test_structure(db, test_id)
        if not t:
            raise HTTPException(404, "Test not found")
        # the answer key is for staff only
        out = TestOut if user["role"] == ROLE_STUDENT else TestKeyOut
        return out.model_validate(t).model_dump(mode="json")

    @router.get("/{test_id}/results", response_model=list[ResultOut])
    def test_results(test_id: int, db: Session = Depends(get_db), _user: dict = Depends(STAFF)):
        if db.get(Test, test_id) is None:
            raise HTTPException(404, "Test not found")
        return list_results(db, test_id=test_id)

    @router.post("/", response_model=TestKeyOut, status_code=status.HTTP_201_CREATED)
    def create(payload: TestCreateIn, db: Session = Depends(get_db), _user: dict = Depends(STAFF)):
        return create_test(db, payload.model_dump())

    @router.put("/{test_id}", status_code=status.HTTP_204_NO_CONTENT)
    def update(test_id: int, payload: TestUpdateIn, db: Session = Depends(get_db), _user: dict = Depends(STAFF)):
        data = payload.model_dump()
        outcome = update_test(db, test_id, data, expected_version=data.pop("version"))
        if outcome is UpdateOutcome.NOT_FOUND:
            raise HTTPException(404, "Test not found")
        if outcome is UpdateOutcome.CONFLICT:
            raise HTTPException(409, "Test was modified by someone else; reload and retry")

    @router.delete("/{test_id}", status_code=status.HTTP_204_NO_CONTENT)
    def remove(test_id: int, db: Session = Depends(get_db), _user: dict = Depends(STAFF)):
        if not delete_test(db, test_id):
            raise HTTPException(404, "Test not found")

    return router
