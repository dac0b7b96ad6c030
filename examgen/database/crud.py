"""
CRUD operations for users, tests, questions and the activity log
All database operations go through these functions
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session, joinedload

from examgen.database import models
from examgen.generation.schemas import CanonicalQuestion


# ==========================================
# USER CRUD
# ==========================================

def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.lower()).first()


def create_user(
    db: Session,
    email: str,
    hashed_password: str,
    name: Optional[str] = None,
    role: str = models.UserRole.STUDENT.value,
) -> models.User:
    db_user = models.User(
        name=name or "User",
        email=email.lower(),
        hashed_password=hashed_password,
        role=role,
        preferences={},
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def list_users(db: Session) -> List[models.User]:
    """All users, newest first"""
    return db.query(models.User).order_by(models.User.created_at.desc(), models.User.id.desc()).all()


def update_user(db: Session, user: models.User, data: Dict[str, Any]) -> models.User:
    for field, value in data.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: models.User) -> None:
    """Delete a user; their tests and log entries keep a NULL reference"""
    db.delete(user)
    db.commit()


# ==========================================
# QUESTION CRUD
# ==========================================

def create_questions(db: Session, questions: Sequence[CanonicalQuestion]) -> List[models.Question]:
    """Insert a batch of canonical questions in one commit; rows come back in input order."""
    rows = [models.Question(**q.to_record()) for q in questions]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows


def create_question(db: Session, question: CanonicalQuestion) -> models.Question:
    return create_questions(db, [question])[0]


# ==========================================
# TEST CRUD
# ==========================================

def create_test(
    db: Session,
    title: str,
    question_ids: Sequence[int],
    description: str = "",
    time_limit_min: int = 0,
    shuffle_questions: bool = True,
    created_by_id: Optional[int] = None,
) -> models.Test:
    """Create a test referencing existing questions, keeping the given order."""
    db_test = models.Test(
        title=title,
        description=description or "",
        time_limit_min=time_limit_min or 0,
        shuffle_questions=shuffle_questions,
        created_by_id=created_by_id,
    )
    db_test.question_links = [
        models.TestQuestion(question_id=qid, position=pos)
        for pos, qid in enumerate(question_ids)
    ]
    db.add(db_test)
    db.commit()
    db.refresh(db_test)
    return db_test


def get_test(db: Session, test_id: int) -> Optional[models.Test]:
    """Get a test with its creator and ordered questions loaded"""
    return db.query(models.Test).options(
        joinedload(models.Test.created_by),
        joinedload(models.Test.question_links).joinedload(models.TestQuestion.question),
    ).filter(models.Test.id == test_id).first()


def list_tests(db: Session, limit: int = 50) -> List[models.Test]:
    """Newest tests first, creator loaded"""
    return db.query(models.Test).options(
        joinedload(models.Test.created_by),
    ).order_by(models.Test.created_at.desc(), models.Test.id.desc()).limit(limit).all()


def attach_question(db: Session, test: models.Test, question: models.Question) -> models.Test:
    """Append a question to the end of a test"""
    next_position = max((link.position for link in test.question_links), default=-1) + 1
    test.question_links.append(models.TestQuestion(question_id=question.id, position=next_position))
    db.commit()
    db.refresh(test)
    return test


def delete_test(db: Session, test: models.Test) -> None:
    """Delete a test (its question links go with it; questions stay)"""
    db.delete(test)
    db.commit()


# ==========================================
# ACTIVITY LOG
# ==========================================

def log_activity(
    db: Session,
    action: str,
    performed_by_id: Optional[int],
    details: Optional[Dict[str, Any]] = None,
) -> models.ActivityLog:
    entry = models.ActivityLog(action=action, performed_by_id=performed_by_id, details=details or {})
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def list_activity_logs(db: Session, limit: int = 200) -> List[models.ActivityLog]:
    return db.query(models.ActivityLog).options(
        joinedload(models.ActivityLog.performed_by),
    ).order_by(models.ActivityLog.created_at.desc(), models.ActivityLog.id.desc()).limit(limit).all()
