from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

class OptionCreateIn(BaseModel):
    text: str = Field(min_length=1)
    is_correct: bool = False

class QuestionCreateIn(BaseModel):
    text: str = Field(min_length=1)
    options: list[OptionCreateIn] = Field(default_factory=list)

class TestCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    topic_id: int | None = None
    questions: list[QuestionCreateIn] = Field(default_factory=list)

class TestUpdateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    topic_id: int | None = None
    version: int = Field(ge=1, description="Version the client last read; stale versions are rejected")
    # None keeps the current questions, a list replaces them
    questions: list[QuestionCreateIn] | None = None

class TestSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    topic_id: int | None
    version: int

# Students get options without the correctness flag
class OptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str

class OptionKeyOut(OptionOut):
    is_correct: bool

class QuestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    options: list[OptionOut]

class QuestionKeyOut(QuestionOut):
    options: list[OptionKeyOut]

class TestOut(TestSummaryOut):
    questions: list[QuestionOut]

class TestKeyOut(TestSummaryOut):
    questions: list[QuestionKeyOut]

class SubmitAnswerIn(BaseModel):
    question_id: int
    selected_option_id: int

class SubmitTestIn(BaseModel):
    test_id: int
    answers: list[SubmitAnswerIn] = Field(default_factory=list)

class SubmitTestOut(BaseModel):
    result_id: int
    score: Decimal
    total_questions: int
    correct_count: int

class ResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    test_id: int
    score: Decimal
    submitted_at: datetime | None = None
