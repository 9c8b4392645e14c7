"""LLM client — ABC, OpenAI implementation, and mocks."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator

logger = logging.getLogger(__name__)


class LLMClient(ABC):
    """Abstract LLM interface: one-shot ``invoke`` and incremental ``stream``."""

    @abstractmethod
    async def invoke(self, prompt: str) -> str: ...

    @abstractmethod
    def stream(self, prompt: str) -> AsyncIterator[str]: ...


# ---------------------------------------------------------------------------
# OpenAI implementation
# ---------------------------------------------------------------------------

class OpenAILLMClient(LLMClient):
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        temperature: float = 0.7,
    ) -> None:
        # Late import so the rest of the package works without openai installed
        from openai import AsyncOpenAI

        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model
        self._temperature = temperature

    def _kwargs(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._temperature,
        }

    async def invoke(self, prompt: str) -> str:
        response = await self._client.chat.completions.create(**self._kwargs(prompt))
        return response.choices[0].message.content or ""

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        chunks = await self._client.chat.completions.create(**self._kwargs(prompt), stream=True)
        async for chunk in chunks:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta


# ---------------------------------------------------------------------------
# Test mock — deterministic, pre-loaded responses
# ---------------------------------------------------------------------------

class MockLLMClient(LLMClient):
    """Returns pre-configured responses in order. Used in unit tests.

    A response that is an ``Exception`` instance is raised instead. Streaming
    splits the response into word-level increments.
    """

    def __init__(self, responses: list[str | Exception]) -> None:
        self._responses = list(responses)
        self._call_index = 0
        self.prompts: list[str] = []

    def _next(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self._call_index >= len(self._responses):
            return "[mock responses exhausted]"
        result = self._responses[self._call_index]
        self._call_index += 1
        if isinstance(result, Exception):
            raise result
        return result

    async def invoke(self, prompt: str) -> str:
        return self._next(prompt)

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        content = self._next(prompt)
        words = content.split(" ")
        for i, word in enumerate(words):
            yield word if i == len(words) - 1 else word + " "

    @property
    def call_count(self) -> int:
        return self._call_index


# ---------------------------------------------------------------------------
# Demo mock — prompt-aware, for running without an API key
# ---------------------------------------------------------------------------

_FOLLOW_UP_RE = re.compile(r"Follow up question:\s*(.+?)\s*\nRephrased question:", re.DOTALL)


class DemoMockLLMClient(LLMClient):
    """Walks the whole pipeline without a real LLM.

    Behaviour:
    1. Query formulation prompts → echo the follow-up question.
    2. Restaurant extraction prompts → fixed tagged sections.
    3. Restaurant evaluation prompts → a fixed verdict.
    4. Otherwise → a generic answer.
    """

    async def invoke(self, prompt: str) -> str:
        questions = _FOLLOW_UP_RE.findall(prompt)
        if questions:
            # last one is the user's; earlier ones are prompt examples
            return f"<question>\n{questions[-1]}\n</question>"
        if "<atmosphere>" in prompt:
            return (
                "<atmosphere>Demo atmosphere.</atmosphere>\n"
                "<cuisine>Demo cuisine.</cuisine>\n"
                "<menu>Demo menu.</menu>\n"
                "<reviews>Demo reviews.</reviews>"
            )
        if "specialty cheese program" in prompt:
            return (
                "Based on the demo findings, this restaurant has a 5 out of 10 likelihood "
                "of being a good fit for a specialty cheese program because no real data was used."
            )
        return "This is a demo response. Set OPENAI_API_KEY for real LLM output."

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        content = await self.invoke(prompt)
        for word in content.split(" "):
            yield word + " "
