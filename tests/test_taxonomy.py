import pytest

from examgen.database.models import QuestionKind
from examgen.generation.taxonomy import to_display_label, to_storage_kind


@pytest.mark.parametrize("label,expected", [
    ("MCQ", QuestionKind.MCQ),
    ("Multiple Choice", QuestionKind.MCQ),
    ("Short Answer", QuestionKind.SHORT),
    ("long-answer", QuestionKind.LONG),
    ("Essay", QuestionKind.LONG),
    ("True/False", QuestionKind.TRUE_FALSE),
    ("  true   or false ", QuestionKind.TRUE_FALSE),
    ("FillBlank", QuestionKind.FILL_BLANK),
    ("Fill in the Blank", QuestionKind.FILL_BLANK),
])
def test_provider_labels_map_to_storage_kinds(label, expected):
    assert to_storage_kind(label) == expected


@pytest.mark.parametrize("label", [None, "", "matching", 42])
def test_unknown_provider_labels_default_to_mcq(label):
    assert to_storage_kind(label) == QuestionKind.MCQ


@pytest.mark.parametrize("kind,expected", [
    ("mcq", "MCQ"),
    ("short", "Short Answer"),
    ("long", "Long Answer"),
    ("essay", "Long Answer"),
    ("truefalse", "True/False"),
    (QuestionKind.TRUE_FALSE, "True/False"),
    ("fillup", "Fill in the Blank"),
    ("fillblank", "Fill in the Blank"),
])
def test_storage_kinds_map_to_display_labels(kind, expected):
    assert to_display_label(kind) == expected


def test_unknown_storage_kind_displays_as_mcq():
    assert to_display_label("diagram") == "MCQ"
    assert to_display_label(None) == "MCQ"
