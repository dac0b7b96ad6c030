import asyncio
from types import SimpleNamespace

import pytest

from examgen.generation.gemini_client import GeminiClient, build_gemini_client


def _fake_completions(captured, choices):
    async def create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(choices=choices)

    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


@pytest.mark.parametrize("key", ["", "   "])
def test_blank_key_is_rejected(key):
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY is not set"):
        GeminiClient(key)


def test_build_without_configured_key_fails():
    with pytest.raises(RuntimeError):
        build_gemini_client()


def test_complete_sends_model_prompt_and_temperature():
    client = GeminiClient("test-key", temperature=0.2)
    captured = {}
    message = SimpleNamespace(message=SimpleNamespace(content='[{"question": "Q"}]'))
    client._client = _fake_completions(captured, [message])

    text = asyncio.run(client.complete("gemini-2.5-flash", "Generate exactly 1 question"))

    assert text == '[{"question": "Q"}]'
    assert captured["model"] == "gemini-2.5-flash"
    assert captured["temperature"] == 0.2
    assert captured["messages"][-1] == {"role": "user", "content": "Generate exactly 1 question"}
    assert "max_tokens" not in captured


def test_complete_without_choices_is_empty():
    client = GeminiClient("test-key")
    client._client = _fake_completions({}, [])

    assert asyncio.run(client.complete("gemini-pro", "prompt")) == ""


def test_max_tokens_is_forwarded_when_set():
    client = GeminiClient("test-key", max_tokens=512)
    captured = {}
    client._client = _fake_completions(captured, [])

    asyncio.run(client.complete("gemini-pro", "prompt"))

    assert captured["max_tokens"] == 512
