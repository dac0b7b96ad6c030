"""
Question Generation Orchestrator

Builds one prompt from the caller's parameters and walks the candidate model
list in order until a model returns a parseable JSON array of questions.

Each model attempt yields an AttemptResult: either the parsed questions or an
AttemptFailure tagged with a category and whether trying the next model can help.
  - network / model-not-found / empty / unparseable / other → next model
  - invalid credential                                      → abort immediately
"""

import enum
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

import httpx
import openai

from examgen import config
from examgen.generation.json_extractor import extract_json
from examgen.generation.schemas import GenerationOptions, RawProviderQuestion

log = logging.getLogger("examgen.generation")


class CompletionClient(Protocol):
    async def complete(self, model: str, prompt: str) -> str: ...


# ─── Errors ───────────────────────────────────────────────────────────────────

class GenerationError(RuntimeError):
    """Every candidate model failed (or a fatal provider error stopped the run)."""

    def __init__(self, message: str, attempts: Optional[List["AttemptResult"]] = None):
        super().__init__(message)
        self.attempts = attempts or []


class ProviderAuthError(GenerationError):
    """The provider rejected the API key; no other model can succeed with it."""


# ─── Attempt results ──────────────────────────────────────────────────────────

class FailureCategory(str, enum.Enum):
    NETWORK = "network"
    MODEL_NOT_FOUND = "model_not_found"
    AUTH = "auth"
    EMPTY_RESPONSE = "empty_response"
    NO_JSON = "no_json"
    INVALID_JSON = "invalid_json"
    NOT_AN_ARRAY = "not_an_array"
    OTHER = "other"


@dataclass
class AttemptFailure:
    category: FailureCategory
    message: str
    recoverable: bool = True


@dataclass
class AttemptResult:
    model: str
    questions: List[RawProviderQuestion] = field(default_factory=list)
    failure: Optional[AttemptFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


NETWORK_MARKERS = (
    "fetch failed",
    "econnrefused",
    "enotfound",
    "etimedout",
    "network",
    "connection refused",
    "connection error",
    "name or service not known",
    "timed out",
)
AUTH_MARKERS = ("api key", "api_key_invalid")


def classify_provider_error(exc: BaseException) -> AttemptFailure:
    """Decide whether a provider exception is worth retrying on another model."""
    message = str(exc) or type(exc).__name__
    lowered = message.lower()
    body = str(getattr(exc, "body", "") or "")

    if isinstance(exc, (openai.APIConnectionError, httpx.TransportError, ConnectionError, TimeoutError)) \
            or any(m in lowered for m in NETWORK_MARKERS):
        return AttemptFailure(FailureCategory.NETWORK, message)

    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)) \
            or any(m in lowered for m in AUTH_MARKERS) \
            or "API_KEY_INVALID" in body:
        return AttemptFailure(FailureCategory.AUTH, message, recoverable=False)

    if isinstance(exc, openai.NotFoundError) or getattr(exc, "status_code", None) == 404 \
            or "404" in lowered or "not found" in lowered:
        return AttemptFailure(FailureCategory.MODEL_NOT_FOUND, message)

    return AttemptFailure(FailureCategory.OTHER, message)


# ─── Prompt ───────────────────────────────────────────────────────────────────

TYPE_DESCRIPTIONS = {
    "MCQ": "Multiple Choice Questions (MCQ)",
    "Short Answer": "Short Answer questions (requiring brief responses)",
    "Long Answer": "Long Answer/Essay questions (requiring detailed explanations)",
    "True/False": "True/False questions",
    "FillBlank": "Fill in the Blank questions (FillBlank)",
}

SELECTED_TYPES_INSTRUCTION = """CRITICAL: You MUST ONLY generate the following question types (selected by user):
{type_lines}

Distribute these question types evenly across the {count} questions. Do NOT generate any other question types."""

ALL_TYPES_INSTRUCTION = """CRITICAL: You MUST generate a VARIETY of question types. Include a good mix of:
{type_lines}

Do NOT generate only MCQs. Distribute the question types evenly across the {count} questions."""

GENERATION_PROMPT = """
Generate exactly {count} exam questions based on the following information.

Topic: {topic}
Difficulty: {difficulty}

Source Notes:
{notes}

Extra Instructions:
{description}

IMPORTANT: Return ONLY valid JSON array, no markdown, no code blocks, no explanations. Start with [ and end with ].

{types_instruction}

JSON Format:
[
  {{
    "question": "The question text here",
    "type": "MCQ",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "answer": "Correct answer text"
  }}
]

IMPORTANT FORMAT RULES:
- Use "question" field (not "text") for the question text
- For question types, use exactly: "MCQ", "Short Answer", "Long Answer", "True/False", or "FillBlank"
- For MCQ questions: provide options as an array of strings: ["Option 1", "Option 2", "Option 3", "Option 4"]
- For True/False questions: provide options: ["True", "False"]
- For Short Answer, Long Answer, and FillBlank: set options to null or []
- For FillBlank questions: use underscores or [blank] in the question text to indicate where the answer goes
- For Long Answer questions: make them require detailed explanations or essays
- The "answer" field should contain the correct answer text (this will help match it to options)
"""


def _describe_type(label: str) -> str:
    normalized = "Long Answer" if label == "Essay" else label
    return TYPE_DESCRIPTIONS.get(normalized, normalized)


def build_types_instruction(question_types: Sequence[str], count: int) -> str:
    selected = [_describe_type(t) for t in (question_types or []) if t]
    if selected:
        return SELECTED_TYPES_INSTRUCTION.format(
            type_lines="\n".join(f"- {d}" for d in selected),
            count=count,
        )
    return ALL_TYPES_INSTRUCTION.format(
        type_lines="\n".join(f"- {d}" for d in TYPE_DESCRIPTIONS.values()),
        count=count,
    )


def build_prompt(notes: str, options: GenerationOptions) -> str:
    return GENERATION_PROMPT.format(
        count=options.count,
        topic=options.topic,
        difficulty=options.difficulty,
        notes=notes,
        description=options.description,
        types_instruction=build_types_instruction(options.question_types, options.count),
    )


# ─── Orchestrator ─────────────────────────────────────────────────────────────

class QuestionGenerator:
    """
    Tries each candidate model in order; the first one that returns a JSON array wins.
    Attempts are strictly sequential.
    """

    def __init__(self, client: CompletionClient, models: Optional[Sequence[str]] = None):
        self.client = client
        self.models = list(models) if models is not None else list(config.GEMINI_MODELS)

    async def _attempt(self, model: str, prompt: str) -> AttemptResult:
        try:
            response_text = await self.client.complete(model, prompt)
        except Exception as e:
            return AttemptResult(model=model, failure=classify_provider_error(e))

        if not response_text or not response_text.strip():
            return AttemptResult(model=model, failure=AttemptFailure(
                FailureCategory.EMPTY_RESPONSE, "Gemini API returned an empty response."))

        json_text = extract_json(response_text)
        if not json_text:
            return AttemptResult(model=model, failure=AttemptFailure(
                FailureCategory.NO_JSON, "Could not extract JSON from Gemini response."))

        try:
            parsed = json.loads(json_text)
        except ValueError as e:
            log.warning(f"[MODEL] {model}: unparseable JSON (first 300 chars): {json_text[:300]!r}")
            return AttemptResult(model=model, failure=AttemptFailure(
                FailureCategory.INVALID_JSON, f"Gemini returned invalid JSON: {e}"))

        if not isinstance(parsed, list):
            return AttemptResult(model=model, failure=AttemptFailure(
                FailureCategory.NOT_AN_ARRAY, "Gemini response is not a JSON array."))

        return AttemptResult(model=model, questions=parsed)

    async def generate(self, notes: str, options: Optional[GenerationOptions] = None) -> List[RawProviderQuestion]:
        options = options or GenerationOptions()
        if not notes or not notes.strip():
            raise ValueError("Notes are required to generate questions.")
        if options.count < 1:
            raise ValueError("Question count must be at least 1.")
        if not self.models:
            raise GenerationError("No Gemini models configured.")

        prompt = build_prompt(notes, options)
        log.info(
            f"[GENERATE] count={options.count}, difficulty={options.difficulty}, "
            f"topic='{options.topic}', types={options.question_types or 'all'}"
        )

        attempts: List[AttemptResult] = []
        for model in self.models:
            result = await self._attempt(model, prompt)
            attempts.append(result)

            if result.ok:
                log.info(f"[MODEL] {model}: {len(result.questions)} question(s) returned")
                return result.questions

            failure = result.failure
            if not failure.recoverable:
                log.error(f"[MODEL] {model}: {failure.category.value} error, aborting: {failure.message}")
                raise ProviderAuthError(
                    "Invalid API Key Error: your GEMINI_API_KEY is not valid. "
                    "Generate a new key at https://aistudio.google.com/apikey, update your .env file "
                    f"and restart the server. Provider said: {failure.message}",
                    attempts=attempts,
                )
            log.warning(f"[MODEL] {model}: {failure.category.value}: {failure.message}, trying next model")

        last = attempts[-1].failure
        if last.category == FailureCategory.NETWORK:
            raise GenerationError(
                "Network Connection Failed: unable to connect to Gemini API. "
                "Check your internet connection, firewall/proxy, VPN and DNS settings. "
                f"Last error: {last.message}",
                attempts=attempts,
            )
        raise GenerationError(f"All Gemini models failed. Last error: {last.message}", attempts=attempts)
