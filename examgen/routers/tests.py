"""
Tests router: /api/tests

  POST /api/tests/generate   generate a test from notes with Gemini
  POST /api/tests/question   add a question manually (optionally to a test)
  GET  /api/tests            newest 50 tests
  GET  /api/tests/{id}       one test with display-shaped questions
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from examgen.auth.dependencies import get_current_user
from examgen.database import crud
from examgen.database.database import get_db
from examgen.database.models import User
from examgen.database.schemas import (
    GenerateTestRequest, GenerateTestResponse, QuestionOut, TestDetail, TestOut,
)
from examgen.generation.display import to_display_questions
from examgen.generation.normalizer import QuestionNormalizationError
from examgen.generation.question_generator import GenerationError, QuestionGenerator
from examgen.generation.schemas import CanonicalQuestion, GenerationOptions
from examgen.services.test_service import create_test_with_ai_questions

router = APIRouter(prefix="/api/tests", tags=["tests"])

log = logging.getLogger("examgen.generation")


def get_question_generator(request: Request) -> Optional[QuestionGenerator]:
    """The generator built at startup, or None when no Gemini key is configured."""
    return getattr(request.app.state, "question_generator", None)


@router.post("/generate", response_model=GenerateTestResponse, status_code=status.HTTP_201_CREATED)
async def generate_test(
    payload: GenerateTestRequest,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    generator: Optional[QuestionGenerator] = Depends(get_question_generator),
):
    if not payload.question_types:
        raise HTTPException(status_code=400, detail="Please select at least one question type.")
    if generator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="GEMINI_API_KEY is not set. Question generation is unavailable.",
        )

    options = GenerationOptions(
        count=payload.count,
        difficulty=payload.difficulty,
        topic=payload.topic,
        description=payload.description,
        question_types=payload.question_types,
    )
    log.info(f"[GENERATE] user={current.id} title='{payload.title[:80]}'")

    try:
        test, questions = await create_test_with_ai_questions(
            db,
            generator,
            title=payload.title,
            notes=payload.notes,
            options=options,
            time_limit_min=payload.time_limit_min,
            created_by_id=current.id,
        )
    except QuestionNormalizationError as e:
        raise HTTPException(status_code=422, detail=f"Generated questions were invalid: {e}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return GenerateTestResponse(
        test=TestOut.from_model(test),
        questions=to_display_questions(questions),
    )


@router.post("/question", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
def add_question(
    payload: CanonicalQuestion,
    test_id: Optional[int] = Query(None, alias="testId"),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    question = crud.create_question(db, payload)
    if test_id is not None:
        test = crud.get_test(db, test_id)
        if test:
            crud.attach_question(db, test, question)
        else:
            log.warning(f"[QUESTION] test {test_id} not found, question {question.id} left unattached")
    return QuestionOut.model_validate(question)


@router.get("", response_model=List[TestOut])
def list_tests(
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [TestOut.from_model(t) for t in crud.list_tests(db, limit=50)]


@router.get("/{test_id}", response_model=TestDetail)
def get_test(
    test_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    test = crud.get_test(db, test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test not found")
    return TestDetail.from_model(test, to_display_questions(test.questions))
