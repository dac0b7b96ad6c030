"""
Re-express stored questions in the shape the frontend renders.
"""

from typing import Any, Iterable, List

from examgen.generation.schemas import DisplayQuestion
from examgen.generation.taxonomy import to_display_label


def _field(obj: Any, name: str, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _option_text(option: Any) -> str:
    if isinstance(option, str):
        return option
    if isinstance(option, dict) and option.get("text"):
        return str(option["text"])
    return str(option)


def to_display_question(question: Any) -> DisplayQuestion:
    """Works on Question rows and on plain dicts of the stored shape."""
    text = _field(question, "text") or _field(question, "question") or ""
    label = to_display_label(_field(question, "type"))
    raw_options = _field(question, "options") or []

    options = [_option_text(o) for o in raw_options] if isinstance(raw_options, list) else []
    if label == "True/False" and not options:
        options = ["True", "False"]

    return DisplayQuestion(question=text, type=label, options=options)


def to_display_questions(questions: Iterable[Any]) -> List[DisplayQuestion]:
    if questions is None:
        return []
    return [to_display_question(q) for q in questions]
