import asyncio

import httpx
import openai
import pytest

from examgen.generation.question_generator import (
    FailureCategory,
    GenerationError,
    ProviderAuthError,
    QuestionGenerator,
    build_prompt,
    classify_provider_error,
)
from examgen.generation.schemas import GenerationOptions

MODELS = ["model-a", "model-b", "model-c"]
VALID = '[{"question": "What is 2+2?", "type": "MCQ", "options": ["3", "4"], "answer": "4"}]'


def run(coro):
    return asyncio.run(coro)


def _request():
    return httpx.Request("POST", "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions")


# ====================
# Model fallback
# ====================

def test_falls_through_empty_responses_until_one_model_succeeds(scripted_client):
    client = scripted_client(["", "   ", VALID])
    generator = QuestionGenerator(client, models=MODELS)

    questions = run(generator.generate("Arithmetic notes"))

    assert client.models_called == MODELS
    assert questions[0]["question"] == "What is 2+2?"


def test_first_success_stops_the_walk(scripted_client):
    client = scripted_client([VALID])
    generator = QuestionGenerator(client, models=MODELS)

    run(generator.generate("notes"))

    assert client.models_called == ["model-a"]


def test_invalid_key_aborts_after_one_attempt(scripted_client):
    client = scripted_client([Exception("API key not valid. Please pass a valid API key."), VALID])
    generator = QuestionGenerator(client, models=MODELS)

    with pytest.raises(ProviderAuthError) as excinfo:
        run(generator.generate("notes"))

    assert client.models_called == ["model-a"]
    assert "Invalid API Key" in str(excinfo.value)
    assert excinfo.value.attempts[0].failure.category == FailureCategory.AUTH


def test_network_failures_on_every_model_raise_network_error(scripted_client):
    client = scripted_client([ConnectionError("connection refused")] * 3)
    generator = QuestionGenerator(client, models=MODELS)

    with pytest.raises(GenerationError, match="Network Connection Failed"):
        run(generator.generate("notes"))

    assert len(client.calls) == 3


def test_missing_models_and_bad_json_are_skipped(scripted_client):
    client = scripted_client([
        Exception("Error code: 404 - models/model-a is not found"),
        "[{\"question\": \"broken\",]",
        VALID,
    ])
    generator = QuestionGenerator(client, models=MODELS)

    questions = run(generator.generate("notes"))

    assert len(questions) == 1
    assert len(client.calls) == 3


def test_exhaustion_reports_the_last_failure(scripted_client):
    client = scripted_client(['{"question": "single object"}', "no json at all", '{"a": 1}'])
    generator = QuestionGenerator(client, models=MODELS)

    with pytest.raises(GenerationError) as excinfo:
        run(generator.generate("notes"))

    assert str(excinfo.value).startswith("All Gemini models failed. Last error:")
    assert [a.failure.category for a in excinfo.value.attempts] == [
        FailureCategory.NOT_AN_ARRAY,
        FailureCategory.INVALID_JSON,
        FailureCategory.NOT_AN_ARRAY,
    ]
    assert not isinstance(excinfo.value, ProviderAuthError)


def test_every_attempt_uses_the_same_prompt(scripted_client):
    client = scripted_client(["", VALID])
    generator = QuestionGenerator(client, models=MODELS)

    run(generator.generate("Photosynthesis notes", GenerationOptions(count=3, topic="Biology")))

    prompts = {prompt for _, prompt in client.calls}
    assert len(prompts) == 1
    assert "Photosynthesis notes" in prompts.pop()


@pytest.mark.parametrize("notes,options", [
    ("", None),
    ("   ", None),
    ("notes", GenerationOptions(count=0)),
])
def test_bad_input_is_rejected_before_any_provider_call(scripted_client, notes, options):
    client = scripted_client([VALID])
    generator = QuestionGenerator(client, models=MODELS)

    with pytest.raises(ValueError):
        run(generator.generate(notes, options))

    assert client.calls == []


def test_empty_model_list_fails(scripted_client):
    generator = QuestionGenerator(scripted_client([]), models=[])

    with pytest.raises(GenerationError, match="No Gemini models"):
        run(generator.generate("notes"))


# ====================
# Prompt
# ====================

def test_prompt_lists_only_selected_types():
    prompt = build_prompt("notes", GenerationOptions(count=5, question_types=["MCQ", "True/False"]))

    assert "Generate exactly 5 exam questions" in prompt
    assert "ONLY generate the following question types" in prompt
    assert "- Multiple Choice Questions (MCQ)" in prompt
    assert "- True/False questions" in prompt
    assert "Fill in the Blank questions" not in prompt.split("JSON Format:")[0]


def test_prompt_asks_for_variety_when_no_types_selected():
    prompt = build_prompt("notes", GenerationOptions(count=4, difficulty="hard", topic="Physics"))

    assert "VARIETY of question types" in prompt
    assert "Difficulty: hard" in prompt
    assert "Topic: Physics" in prompt
    assert '"question": "The question text here"' in prompt


def test_essay_is_described_as_long_answer():
    prompt = build_prompt("notes", GenerationOptions(question_types=["Essay"]))
    assert "- Long Answer/Essay questions" in prompt


# ====================
# Error classification
# ====================

def test_classify_network_errors():
    assert classify_provider_error(openai.APIConnectionError(request=_request())).category == FailureCategory.NETWORK
    assert classify_provider_error(httpx.ConnectError("boom")).category == FailureCategory.NETWORK
    assert classify_provider_error(Exception("fetch failed")).category == FailureCategory.NETWORK


def test_classify_not_found():
    exc = openai.NotFoundError(
        "model not found",
        response=httpx.Response(404, request=_request()),
        body=None,
    )
    failure = classify_provider_error(exc)
    assert failure.category == FailureCategory.MODEL_NOT_FOUND
    assert failure.recoverable


def test_classify_auth_is_not_recoverable():
    exc = openai.AuthenticationError(
        "Incorrect credentials",
        response=httpx.Response(401, request=_request()),
        body={"error": {"status": "API_KEY_INVALID"}},
    )
    failure = classify_provider_error(exc)
    assert failure.category == FailureCategory.AUTH
    assert failure.recoverable is False


def test_classify_anything_else_as_other():
    failure = classify_provider_error(RuntimeError("quota exceeded"))
    assert failure.category == FailureCategory.OTHER
    assert failure.recoverable
