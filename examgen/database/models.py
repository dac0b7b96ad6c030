"""
SQLAlchemy models for users, tests and questions.

Open-ended fields (question options/metadata, user preferences, activity details)
are JSON columns so the records keep the loose document shape the API exposes.
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from examgen.database.database import Base


class UserRole(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class QuestionKind(str, enum.Enum):
    """Canonical storage kinds for questions."""
    MCQ = "mcq"
    SHORT = "short"
    LONG = "long"
    TRUE_FALSE = "truefalse"
    FILL_BLANK = "fillup"


# ==========================================
# AUTH: USERS
# ==========================================

class User(Base):
    """
    User account for authentication.
    Email is stored lowercase; role gates the admin endpoints.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, default="User")
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.STUDENT.value, index=True)
    preferences = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class ActivityLog(Base):
    """Audit trail of admin actions (e.g. delete_user, delete_test)."""
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(100), nullable=False)
    performed_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    details = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    performed_by = relationship("User", backref="activity_logs")

    def __repr__(self):
        return f"<ActivityLog(id={self.id}, action='{self.action}')>"


# ==========================================
# TESTS & QUESTIONS
# ==========================================

class Question(Base):
    """
    Canonical question: text, storage kind, structured options.
    `meta` maps to the "metadata" column (the attribute name is reserved by SQLAlchemy).
    """
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default=QuestionKind.MCQ.value)  # mcq, short, long, truefalse, fillup
    options = Column(JSON, nullable=False, default=list)  # [{"text": ..., "isCorrect": bool}]
    difficulty = Column(String(20), nullable=False, default="medium")
    topic = Column(String(255), nullable=False, default="")
    meta = Column("metadata", JSON, nullable=False, default=dict)  # originalType, answer, provider extras
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Question(id={self.id}, type='{self.type}')>"


class Test(Base):
    """A test references an ordered list of questions; it does not own them."""
    __tablename__ = "tests"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    time_limit_min = Column(Integer, nullable=False, default=0)
    shuffle_questions = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    created_by = relationship("User", backref="tests")
    question_links = relationship(
        "TestQuestion",
        back_populates="test",
        order_by="TestQuestion.position",
        cascade="all, delete-orphan",
    )

    @property
    def questions(self):
        return [link.question for link in self.question_links]

    @property
    def question_ids(self):
        return [link.question_id for link in self.question_links]

    def __repr__(self):
        return f"<Test(id={self.id}, title='{self.title}')>"


class TestQuestion(Base):
    """Ordered Test → Question reference."""
    __tablename__ = "test_questions"

    test_id = Column(Integer, ForeignKey("tests.id", ondelete="CASCADE"), primary_key=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    test = relationship("Test", back_populates="question_links")
    question = relationship("Question")
