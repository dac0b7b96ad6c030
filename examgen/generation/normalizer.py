"""
Turn raw provider questions into CanonicalQuestion records.

- question text comes from "text" or "question"
- type label goes through the taxonomy (unknown → mcq)
- options become {text, isCorrect}; True/False questions without options get True/False
- a free-text "answer" marks matching options correct (case-insensitive exact or
  substring match in either direction; more than one option may match)
"""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from examgen.database.models import QuestionKind
from examgen.generation.schemas import CanonicalQuestion, QuestionOption, RawProviderQuestion
from examgen.generation.taxonomy import to_storage_kind

log = logging.getLogger(__name__)

_KNOWN_FIELDS = {"question", "text", "type", "options", "answer", "difficulty", "topic", "metadata"}


class QuestionNormalizationError(ValueError):
    """A provider question could not be turned into a canonical question."""


# ─── Options ──────────────────────────────────────────────────────────────────

def _as_bool(value: Any) -> bool:
    # providers sometimes quote booleans: "false" must stay false
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _coerce_option(raw: Any) -> QuestionOption:
    if isinstance(raw, dict) and raw.get("text"):
        return QuestionOption(text=str(raw["text"]), is_correct=_as_bool(raw.get("isCorrect", False)))
    if isinstance(raw, str):
        return QuestionOption(text=raw, is_correct=False)
    return QuestionOption(text=str(raw), is_correct=False)


def _normalize_text(value: Any) -> str:
    return str(value).strip().lower()


def mark_correct_options(options: List[QuestionOption], answer: Any) -> List[QuestionOption]:
    """Flag every option whose text matches the answer. Existing flags are kept."""
    if not answer or not options:
        return options

    expected = _normalize_text(answer)
    for option in options:
        if not option.text:
            continue
        candidate = _normalize_text(option.text)
        if candidate == expected or expected in candidate or candidate in expected:
            option.is_correct = True
    return options


def normalize_options(kind: QuestionKind, raw_options: Any, answer: Any = None) -> List[QuestionOption]:
    has_options = isinstance(raw_options, list) and len(raw_options) > 0

    if kind == QuestionKind.TRUE_FALSE and not has_options:
        options = [
            QuestionOption(text="True", is_correct=False),
            QuestionOption(text="False", is_correct=False),
        ]
    elif has_options:
        options = [_coerce_option(opt) for opt in raw_options]
    else:
        options = []

    return mark_correct_options(options, answer)


# ─── Questions ────────────────────────────────────────────────────────────────

def normalize_question(
    raw: RawProviderQuestion,
    difficulty: Optional[str] = None,
    topic: Optional[str] = None,
) -> CanonicalQuestion:
    """
    Build one CanonicalQuestion. Question-level difficulty/topic win over the
    run-level defaults passed in.
    """
    if not isinstance(raw, dict):
        raise QuestionNormalizationError(f"Question must be an object, got {type(raw).__name__}")

    text = raw.get("text") or raw.get("question") or ""
    if not isinstance(text, str):
        text = str(text)
    if not text.strip():
        raise QuestionNormalizationError("Question must have either 'text' or 'question' field.")

    kind = to_storage_kind(raw.get("type"))
    answer = raw.get("answer")

    metadata = {
        "originalType": raw.get("type") or kind.value,
        "answer": answer or None,
    }
    metadata.update({k: v for k, v in raw.items() if k not in _KNOWN_FIELDS})
    if isinstance(raw.get("metadata"), dict):
        metadata.update(raw["metadata"])

    try:
        return CanonicalQuestion(
            text=text,
            type=kind,
            options=normalize_options(kind, raw.get("options"), answer),
            difficulty=str(raw.get("difficulty") or difficulty or "medium"),
            topic=str(raw.get("topic") or topic or ""),
            metadata=metadata,
        )
    except ValidationError as e:
        raise QuestionNormalizationError(str(e)) from e


def normalize_questions(
    raw_questions: List[RawProviderQuestion],
    difficulty: Optional[str] = None,
    topic: Optional[str] = None,
) -> List[CanonicalQuestion]:
    """All-or-nothing: the first invalid question fails the whole batch."""
    if not isinstance(raw_questions, list):
        raise QuestionNormalizationError("AI response must be an array of questions.")

    normalized = []
    for idx, raw in enumerate(raw_questions, start=1):
        try:
            normalized.append(normalize_question(raw, difficulty=difficulty, topic=topic))
        except QuestionNormalizationError as e:
            log.warning(f"[NORMALIZE] question {idx} rejected: {e}")
            raise QuestionNormalizationError(f"Question {idx}: {e}") from e
    return normalized
