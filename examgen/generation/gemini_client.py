"""
Gemini text-completion client (OpenAI-compatible endpoint).

Used by:
  - question_generator.py  (QuestionGenerator is constructed with a client instance)

The client is built once at application startup and injected; nothing here is a
module-level singleton.
"""

from typing import Optional

from openai import AsyncOpenAI

from examgen import config


class GeminiClient:
    """Thin async wrapper: one prompt in, completion text out."""

    def __init__(
        self,
        api_key: str,
        base_url: str = config.GEMINI_BASE_URL,
        temperature: float = config.GEMINI_TEMPERATURE,
        max_tokens: Optional[int] = config.GEMINI_MAX_TOKENS,
        system: str = "You are an expert exam question setter. Output only what is asked.",
    ):
        if not api_key or not api_key.strip():
            raise RuntimeError("GEMINI_API_KEY is not set. Add it to your .env file.")
        self._client = AsyncOpenAI(api_key=api_key.strip(), base_url=base_url)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system = system

    async def complete(self, model: str, prompt: str) -> str:
        """
        Call Chat Completions on `model` and return the assistant message text.
        Provider errors (openai.APIError subclasses, connection errors) propagate.
        """
        kwargs = {}
        if self.max_tokens:
            kwargs["max_tokens"] = self.max_tokens
        response = await self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": self.system},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            **kwargs,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self._client.close()


def build_gemini_client(api_key: Optional[str] = None) -> GeminiClient:
    """Construct a client from configuration (raises RuntimeError when no key is set)."""
    return GeminiClient(
        api_key=api_key if api_key is not None else (config.GEMINI_API_KEY or ""),
        max_tokens=config.GEMINI_MAX_TOKENS,
    )
