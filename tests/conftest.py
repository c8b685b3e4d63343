"""Shared fixtures: canned remote endpoints and clients wired to them."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from sheeter_counsel.services import (
    GenerativeLanguageClient,
    ResilientInvoker,
    RetryPolicy,
    SpeechSynthesisClient,
)

GEMINI_URL = "https://gemini.test/v1beta/models/test-model:generateContent"
TTS_URL = "https://tts.test/v1/text:synthesize"
TEST_API_KEY = "test-key"


def candidate_envelope(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def model_reply(payload: Any) -> httpx.Response:
    """A 200 Gemini response whose candidate text is ``payload`` as JSON."""

    text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return httpx.Response(200, json=candidate_envelope(text))


class FakeRemote:
    """Serve queued responses (or raise queued errors) through a MockTransport.

    The last queued item is repeated once the queue is down to one entry.
    """

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(item, Exception):
            raise item
        # Fresh copy so a repeated response is never reused across requests.
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def json_bodies(self) -> list[Any]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def sleeps() -> list[float]:
    """Seconds passed to the invoker's sleep function, in call order."""

    return []


@pytest.fixture
def make_invoker(sleeps: list[float]) -> Callable[..., ResilientInvoker]:
    def factory(
        remote: FakeRemote,
        *,
        jitter: float = 0.0,
        policy: RetryPolicy | None = None,
    ) -> ResilientInvoker:
        async def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)

        return ResilientInvoker(
            policy or RetryPolicy(),
            transport=remote.transport,
            sleep=fake_sleep,
            jitter=lambda: jitter,
        )

    return factory


@pytest.fixture
def make_generative_client(
    make_invoker: Callable[..., ResilientInvoker],
) -> Callable[[FakeRemote], GenerativeLanguageClient]:
    def factory(remote: FakeRemote) -> GenerativeLanguageClient:
        return GenerativeLanguageClient(
            TEST_API_KEY,
            url=GEMINI_URL,
            invoker=make_invoker(remote),
        )

    return factory


@pytest.fixture
def make_speech_client(
    make_invoker: Callable[..., ResilientInvoker],
) -> Callable[[FakeRemote], SpeechSynthesisClient]:
    def factory(remote: FakeRemote) -> SpeechSynthesisClient:
        return SpeechSynthesisClient(
            TEST_API_KEY,
            url=TTS_URL,
            language_code="te-IN",
            sample_rate_hertz=24000,
            invoker=make_invoker(remote),
        )

    return factory


@pytest.fixture
def prep_payload() -> dict[str, Any]:
    return {
        "personalDetails": {"name": "Ravi Kumar", "age": 34, "area": "Old City", "id": "RS-1024"},
        "criminalHistory": [
            {"cases": "Assault", "sections": "IPC 324", "frequency": "2"},
            {"cases": "Extortion", "sections": "IPC 384", "frequency": "1"},
        ],
        "behavioralTags": ["violent", "repeat offender"],
        "riskLevel": "High",
        "previousCounselingSummaries": ["Showed remorse.", "Skipped follow-up."],
    }


@pytest.fixture
def sheeter_profile_payload() -> dict[str, Any]:
    return {
        "personalDetails": {"name": "Ravi Kumar", "age": 34, "area": "Old City"},
        "criminalHistory": [{"cases": "Assault", "sections": "IPC 324", "frequency": "2"}],
        "behavioralTags": ["violent"],
        "riskLevel": "Medium",
    }
