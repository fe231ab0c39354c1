"""Pydantic schemas for the Web API.

Request and response models for every resource. Response models read
repository records directly (from_attributes).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

AccountType = Literal["student", "teacher", "admin"]
OptionKey = Literal["a", "b", "c", "d"]


def _lower_option(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


# =============================================================================
# COMMON
# =============================================================================


class DeleteResponse(BaseModel):
    """Response for a delete."""

    ok: bool = True
    changes: int


# =============================================================================
# USER SCHEMAS
# =============================================================================


class UserCreate(BaseModel):
    """Request body for creating a user."""

    name: str = Field(..., min_length=1, max_length=100)
    surname: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=200)
    password: str = Field(default="", max_length=200)
    account_type: AccountType = "student"
    student_number: str | None = Field(default=None, max_length=50)
    joined_at: str | None = None
    comment: str = Field(default="", max_length=2000)


class UserUpdate(BaseModel):
    """Request body for a partial user update. Omitted fields are kept."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    surname: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, min_length=3, max_length=200)
    password: str | None = Field(default=None, max_length=200)
    account_type: AccountType | None = None
    student_number: str | None = Field(default=None, max_length=50)
    joined_at: str | None = None
    comment: str | None = Field(default=None, max_length=2000)


class UserResponse(BaseModel):
    """Response for a user. The password is never included."""

    id: int
    name: str
    surname: str
    email: str
    account_type: str
    student_number: str | None = None
    joined_at: str
    comment: str = ""

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: list[UserResponse]
    count: int


# =============================================================================
# CATEGORY SCHEMAS
# =============================================================================


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str
    question_count: int = 0

    model_config = {"from_attributes": True}


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]
    count: int


# =============================================================================
# SUBJECT SCHEMAS
# =============================================================================


class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    teacher_id: int


class SubjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    teacher_id: int | None = None


class SubjectResponse(BaseModel):
    id: int
    name: str
    description: str
    teacher_id: int | None
    teacher_name: str | None = None

    model_config = {"from_attributes": True}


class SubjectListResponse(BaseModel):
    subjects: list[SubjectResponse]
    count: int


# =============================================================================
# QUESTION BANK SCHEMAS
# =============================================================================


class BankCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    subject_id: int | None = None


class BankUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    subject_id: int | None = None


class BankResponse(BaseModel):
    id: int
    name: str
    description: str
    subject_id: int | None
    question_count: int = 0

    model_config = {"from_attributes": True}


class BankListResponse(BaseModel):
    banks: list[BankResponse]
    count: int


# =============================================================================
# QUESTION SCHEMAS
# =============================================================================


class QuestionCreate(BaseModel):
    """Request body for creating a question.

    A question must belong to a bank, a category, or both.
    """

    content: str = Field(..., min_length=1, max_length=4000)
    option_a: str = Field(default="", max_length=1000)
    option_b: str = Field(default="", max_length=1000)
    option_c: str = Field(default="", max_length=1000)
    option_d: str = Field(default="", max_length=1000)
    correct_option: OptionKey
    points: int = Field(default=1, ge=1, le=100)
    bank_id: int | None = None
    category_id: int | None = None

    normalize_correct_option = field_validator("correct_option", mode="before")(_lower_option)

    @model_validator(mode="after")
    def check_owner(self) -> QuestionCreate:
        if self.bank_id is None and self.category_id is None:
            raise ValueError("bank_id or category_id is required")
        return self


class QuestionUpdate(BaseModel):
    content: str | None = Field(default=None, min_length=1, max_length=4000)
    option_a: str | None = Field(default=None, max_length=1000)
    option_b: str | None = Field(default=None, max_length=1000)
    option_c: str | None = Field(default=None, max_length=1000)
    option_d: str | None = Field(default=None, max_length=1000)
    correct_option: OptionKey | None = None
    points: int | None = Field(default=None, ge=1, le=100)
    bank_id: int | None = None
    category_id: int | None = None

    normalize_correct_option = field_validator("correct_option", mode="before")(_lower_option)


class QuestionResponse(BaseModel):
    id: int
    bank_id: int | None
    category_id: int | None
    content: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_option: str
    points: int

    model_config = {"from_attributes": True}


class QuestionListResponse(BaseModel):
    questions: list[QuestionResponse]
    count: int


class TestQuestionResponse(BaseModel):
    """A question as shown to a student: no correct option."""

    id: int
    content: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    points: int

    model_config = {"from_attributes": True}


# =============================================================================
# TEST SCHEMAS
# =============================================================================


class TestGenerateRequest(BaseModel):
    """Request to draw a random test from a category."""

    category_id: int
    question_count: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)


class TestUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)


class TestResponse(BaseModel):
    id: int
    name: str
    category_id: int | None
    category_name: str | None = None
    created_at: str
    question_count: int = 0

    model_config = {"from_attributes": True}


class TestGenerateResponse(TestResponse):
    question_ids: list[int]


class TestListResponse(BaseModel):
    tests: list[TestResponse]
    count: int


class TestSubmitRequest(BaseModel):
    """Answers keyed by question id, e.g. {"12": "b"}."""

    student_id: int
    answers: dict[int, str | int | None] = Field(default_factory=dict)


# =============================================================================
# RESULT SCHEMAS
# =============================================================================


class ResultCreate(BaseModel):
    """Raw score for a test; percentage and grade are computed server-side."""

    student_id: int
    test_id: int
    points: float = Field(..., ge=0, allow_inf_nan=False)
    max_points: float = Field(..., gt=0, allow_inf_nan=False)
    taken_at: str | None = None


class ResultUpdate(BaseModel):
    points: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    max_points: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    taken_at: str | None = None


class ResultResponse(BaseModel):
    id: int
    student_id: int
    student_name: str | None = None
    test_id: int
    test_name: str | None = None
    points: float
    max_points: float
    percentage: float
    grade: int
    grade_label: str = ""
    taken_at: str

    model_config = {"from_attributes": True}


class ResultListResponse(BaseModel):
    results: list[ResultResponse]
    count: int


class SubmitResponse(ResultResponse):
    correct_question_ids: list[int] = Field(default_factory=list)


# =============================================================================
# LOGIN SCHEMAS
# =============================================================================


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str


class LoginResponse(BaseModel):
    ok: bool = True
    user: UserResponse


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
