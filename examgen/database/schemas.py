"""
Pydantic schemas for request/response validation
Separate from SQLAlchemy models for clean API contracts.
JSON keys are camelCase on the wire (timeLimitMin, createdAt, ...); snake_case is accepted on input too.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from examgen.auth.security import BCRYPT_MAX_BYTES, password_too_long
from examgen.database.models import QuestionKind, UserRole
from examgen.generation.schemas import DisplayQuestion, QuestionOption


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ==========================================
# USER SCHEMAS
# ==========================================

class UserRegister(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Optional[str] = Field(None, validate_default=True)

    @field_validator("role")
    @classmethod
    def _role_default(cls, value: Optional[str]) -> str:
        # "" is treated as missing
        if value is None or value == "":
            return UserRole.STUDENT.value
        allowed = [r.value for r in UserRole]
        if value not in allowed:
            raise ValueError(f"role must be one of {', '.join(allowed)}")
        return value

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value: str) -> str:
        if password_too_long(value):
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return value

    @field_validator("email")
    @classmethod
    def _email_lower(cls, value: str) -> str:
        return value.lower()


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    preferences: Optional[Dict[str, Any]] = None


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    role: str
    preferences: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class RegisterResponse(BaseModel):
    user: UserOut
    message: str


class LoginResponse(BaseModel):
    token: str
    user: UserOut


class UserRef(CamelModel):
    """Creator / performer reference embedded in tests and activity logs."""
    id: int
    name: str
    email: str
    role: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# ==========================================
# QUESTION SCHEMAS
# ==========================================

class QuestionOut(CamelModel):
    id: int
    text: str
    type: QuestionKind
    options: List[QuestionOption] = Field(default_factory=list)
    difficulty: str
    topic: str
    metadata: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("meta", "metadata")
    )
    created_at: Optional[datetime] = None


# ==========================================
# TEST SCHEMAS
# ==========================================

class TestSettings(CamelModel):
    time_limit_min: int = Field(0, ge=0)
    shuffle_questions: bool = True


class TestOut(CamelModel):
    id: int
    title: str
    description: str = ""
    created_by: Optional[UserRef] = None
    questions: List[int] = Field(default_factory=list)
    settings: TestSettings = Field(default_factory=TestSettings)
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, test) -> "TestOut":
        return cls(
            id=test.id,
            title=test.title,
            description=test.description or "",
            created_by=UserRef.model_validate(test.created_by) if test.created_by else None,
            questions=test.question_ids,
            settings=TestSettings(
                time_limit_min=test.time_limit_min or 0,
                shuffle_questions=bool(test.shuffle_questions),
            ),
            created_at=test.created_at,
        )


class TestDetail(TestOut):
    """Single test with its questions re-expressed for display."""
    questions: List[DisplayQuestion] = Field(default_factory=list)

    @classmethod
    def from_model(cls, test, display_questions: List[DisplayQuestion]) -> "TestDetail":
        base = TestOut.from_model(test).model_dump(exclude={"questions"})
        return cls(**base, questions=display_questions)


class GenerateTestRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    notes: str = Field(..., min_length=1)
    count: int = Field(10, ge=1, le=100)
    difficulty: str = "medium"
    topic: str = "General"
    description: str = ""
    question_types: Optional[List[str]] = None
    time_limit_min: int = Field(0, ge=0)

    @field_validator("question_types")
    @classmethod
    def _drop_blank_types(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        return [t.strip() for t in value if t and t.strip()]


class GenerateTestResponse(BaseModel):
    test: TestOut
    questions: List[DisplayQuestion]


# ==========================================
# ACTIVITY LOG SCHEMAS
# ==========================================

class ActivityLogOut(CamelModel):
    id: int
    action: str
    performed_by: Optional[UserRef] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
