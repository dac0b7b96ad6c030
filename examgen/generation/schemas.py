"""
Pydantic schemas for the question generation pipeline.

RawProviderQuestion  → plain dict (untrusted provider output)
CanonicalQuestion    → normalized, persisted form
DisplayQuestion      → caller-facing shape, derived on every read
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from examgen.database.models import QuestionKind

RawProviderQuestion = Dict[str, Any]


class QuestionOption(BaseModel):
    """One structured option. Serialised with the `isCorrect` key."""
    model_config = ConfigDict(populate_by_name=True)

    text: str
    is_correct: bool = Field(False, alias="isCorrect")


class CanonicalQuestion(BaseModel):
    """Normalized question ready for persistence."""
    text: str = Field(..., min_length=1)
    type: QuestionKind = QuestionKind.MCQ
    options: List[QuestionOption] = Field(default_factory=list)
    difficulty: str = "medium"
    topic: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Question text must not be empty")
        return value

    @model_validator(mode="after")
    def _true_false_has_both_options(self) -> "CanonicalQuestion":
        if self.type == QuestionKind.TRUE_FALSE and not self.options:
            self.options = [QuestionOption(text="True"), QuestionOption(text="False")]
        return self

    def to_record(self) -> Dict[str, Any]:
        """Column values for a `Question` row."""
        return {
            "text": self.text,
            "type": self.type.value,
            "options": [o.model_dump(by_alias=True) for o in self.options],
            "difficulty": self.difficulty,
            "topic": self.topic,
            "meta": dict(self.metadata),
        }


class GenerationOptions(BaseModel):
    """Caller parameters for one generation run."""
    count: int = 10
    difficulty: str = "medium"
    topic: str = "General"
    description: str = ""
    question_types: List[str] = Field(default_factory=list)


class DisplayQuestion(BaseModel):
    question: str
    type: str
    options: List[str] = Field(default_factory=list)
