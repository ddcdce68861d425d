"""Shared fakes for the EcoScout test-suite."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable

import pytest

from config import Config


class FakeResponse:
    def __init__(self, status: int = 200, payload: Any = None, text: str | None = None, delay: float = 0.0):
        self.status = status
        self._payload = payload
        self._text = text
        self._delay = delay

    async def __aenter__(self):
        if self._delay:
            await asyncio.sleep(self._delay)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    async def text(self):
        if self._text is not None:
            return self._text
        return json.dumps(self._payload)


class FakeSession:
    """Records calls and hands back queued responses (last one repeats)."""

    def __init__(self, *responses: FakeResponse | Exception):
        self._responses = list(responses) or [FakeResponse()]
        self.calls: list[dict[str, Any]] = []

    def _next(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url: str, **kwargs):
        return self._next("POST", url, **kwargs)

    def head(self, url: str, **kwargs):
        return self._next("HEAD", url, **kwargs)


class FakeGenerator:
    """Routes prompts to canned answers.

    routes: list of (substring, answer) pairs; the first substring found in
    the prompt wins. An answer may be a string, an exception instance, or a
    callable taking the prompt.
    """

    def __init__(
        self,
        routes: list[tuple[str, Any]] | None = None,
        image: Callable[[str], str] | str | Exception = "data:image/png;base64,AAAA",
    ):
        self.routes = routes or []
        self.image = image
        self.prompts: list[str] = []
        self.image_prompts: list[str] = []
        self.kwargs: list[dict[str, Any]] = []

    async def generate(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        self.kwargs.append(kwargs)
        for needle, answer in self.routes:
            if needle in prompt:
                return _resolve(answer, prompt)
        raise AssertionError(f"unexpected prompt: {prompt[:80]}")

    async def generate_image(self, prompt: str) -> str:
        self.image_prompts.append(prompt)
        return _resolve(self.image, prompt)


class FakeSearch:
    """Search double; shopping/images map a query to results or an exception."""

    def __init__(
        self,
        shopping: Callable[[str], Any] | list | Exception | None = None,
        images: Callable[[str], Any] | list | Exception | None = None,
    ):
        self._shopping = shopping if shopping is not None else []
        self._images = images if images is not None else []
        self.queries: list[tuple[str, str]] = []

    async def shopping(self, query: str):
        self.queries.append(("shopping", query))
        return _resolve(self._shopping, query)

    async def images(self, query: str):
        self.queries.append(("images", query))
        return _resolve(self._images, query)


def _resolve(answer: Any, arg: str) -> Any:
    if isinstance(answer, Exception):
        raise answer
    if callable(answer):
        result = answer(arg)
        if isinstance(result, Exception):
            raise result
        return result
    return answer


def fenced(payload: Any) -> str:
    """Wrap a payload the way models usually answer."""
    return f"Here you go:\n```json\n{json.dumps(payload)}\n```\nEnjoy!"


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        gemini_api_key="test-gemini",
        serper_api_key="test-serper",
        trend_count=3,
        article_count=3,
        log_dir=tmp_path / "log",
    )
