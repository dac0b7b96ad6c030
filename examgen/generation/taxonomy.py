"""
Question type taxonomy.

Two independent lookups:
  provider label  → storage kind   (what the model wrote → what we persist)
  storage kind    → display label  (what we persist → what the caller sees)

Both default to MCQ for anything unrecognized and never raise.
"""

import re
from typing import Any

from examgen.database.models import QuestionKind

PROVIDER_TYPE_MAP = {
    "mcq": QuestionKind.MCQ,
    "mcqs": QuestionKind.MCQ,
    "multiple choice": QuestionKind.MCQ,
    "multiple-choice": QuestionKind.MCQ,
    "multiplechoice": QuestionKind.MCQ,
    "multiple choice question": QuestionKind.MCQ,
    "short answer": QuestionKind.SHORT,
    "short-answer": QuestionKind.SHORT,
    "shortanswer": QuestionKind.SHORT,
    "short": QuestionKind.SHORT,
    "long answer": QuestionKind.LONG,
    "long-answer": QuestionKind.LONG,
    "longanswer": QuestionKind.LONG,
    "long": QuestionKind.LONG,
    "essay": QuestionKind.LONG,
    "true/false": QuestionKind.TRUE_FALSE,
    "true / false": QuestionKind.TRUE_FALSE,
    "truefalse": QuestionKind.TRUE_FALSE,
    "true false": QuestionKind.TRUE_FALSE,
    "true-false": QuestionKind.TRUE_FALSE,
    "true or false": QuestionKind.TRUE_FALSE,
    "t/f": QuestionKind.TRUE_FALSE,
    "fillblank": QuestionKind.FILL_BLANK,
    "fill blank": QuestionKind.FILL_BLANK,
    "fill-blank": QuestionKind.FILL_BLANK,
    "fillup": QuestionKind.FILL_BLANK,
    "fill-up": QuestionKind.FILL_BLANK,
    "fill up": QuestionKind.FILL_BLANK,
    "fill in the blank": QuestionKind.FILL_BLANK,
    "fill in the blanks": QuestionKind.FILL_BLANK,
    "fill-in-the-blank": QuestionKind.FILL_BLANK,
}

DISPLAY_LABELS = {
    "mcq": "MCQ",
    "short": "Short Answer",
    "long": "Long Answer",
    "essay": "Long Answer",
    "truefalse": "True/False",
    "fillup": "Fill in the Blank",
    "fillblank": "Fill in the Blank",
}

DEFAULT_KIND = QuestionKind.MCQ
DEFAULT_LABEL = "MCQ"


def _normalize_label(label: Any) -> str:
    if label is None:
        return ""
    if isinstance(label, QuestionKind):
        return label.value
    return re.sub(r"\s+", " ", str(label)).strip().lower()


def to_storage_kind(label: Any) -> QuestionKind:
    """Map a free-form provider type label to a storage kind (default: mcq)."""
    return PROVIDER_TYPE_MAP.get(_normalize_label(label), DEFAULT_KIND)


def to_display_label(kind: Any) -> str:
    """Map a storage kind to its human label (default: MCQ)."""
    return DISPLAY_LABELS.get(_normalize_label(kind), DEFAULT_LABEL)
