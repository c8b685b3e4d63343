"""Retrying HTTP invoker shared by every outbound Google API call.

Every remote call made by the flows goes through :class:`ResilientInvoker`.
It retries rate-limited (HTTP 429) responses and transport-level failures with
exponential backoff plus jitter, honours ``Retry-After`` when the server sends
one, and hands every other response back to the caller untouched.
"""

from __future__ import annotations

import asyncio
import logging
import random
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping

import httpx

from sheeter_counsel.config.settings import RetryConfig, settings
from sheeter_counsel.telemetry import increment_upstream_retry

logger = logging.getLogger(__name__)

RATE_LIMITED_STATUS = 429

# Leading ASCII digits only; a fractional part is truncated.
_RETRY_AFTER_SECONDS = re.compile(r"\s*([0-9]+)")


class RequestExhaustedError(RuntimeError):
    """Raised when every attempt was consumed without a usable response."""

    def __init__(
        self,
        attempts: int,
        last_error: Exception | None = None,
        last_status: int | None = None,
    ) -> None:
        if last_error is not None:
            message = f"Request failed after {attempts} attempts: {last_error}"
        elif last_status is not None:
            message = (
                f"Request failed after {attempts} attempts "
                f"(last status {last_status})."
            )
        else:
            message = f"Request failed after {attempts} attempts."
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error
        self.last_status = last_status


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff with additive jitter, in milliseconds."""

    max_attempts: int = 4
    base_delay_ms: int = 500
    max_jitter_ms: int = 100

    def backoff_ms(self, attempt_index: int, jitter_fraction: float) -> float:
        """Wait before retrying after the zero-based ``attempt_index``."""

        return self.base_delay_ms * (2**attempt_index) + jitter_fraction * self.max_jitter_ms

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay_ms=config.base_delay_ms,
            max_jitter_ms=config.max_jitter_ms,
        )


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to (re)send one outbound request."""

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    json: Any = None


@dataclass(frozen=True)
class RetryState:
    """Snapshot of a single retry decision."""

    attempt: int
    wait_ms: float
    reason: str
    last_error: Exception | None = None


def parse_retry_after_ms(value: str | None) -> float | None:
    """Return the ``Retry-After`` delay in milliseconds, read as whole seconds."""

    if value is None:
        return None
    match = _RETRY_AFTER_SECONDS.match(value)
    if match is None:
        return None
    return int(match.group(1)) * 1000.0


class ResilientInvoker:
    """Send requests with bounded retries on 429 and transport failures."""

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        jitter: Callable[[], float] = random.random,
    ) -> None:
        self._policy = policy or RetryPolicy()
        self._timeout = timeout
        self._transport = transport
        self._sleep = sleep
        self._jitter = jitter

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def send(self, request: RequestDescriptor) -> httpx.Response:
        """Deliver ``request``, retrying transient failures.

        Returns the first response whose status is not 429, whatever that
        status is. Raises :class:`RequestExhaustedError` once
        ``policy.max_attempts`` attempts have been used.
        """

        max_attempts = self._policy.max_attempts
        last_error: Exception | None = None
        last_status: int | None = None

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            for attempt in range(max_attempts):
                try:
                    response = await client.request(
                        request.method,
                        request.url,
                        headers=dict(request.headers),
                        json=request.json,
                    )
                except httpx.UnsupportedProtocol:
                    raise
                except httpx.TransportError as exc:
                    last_error = exc
                    state = RetryState(
                        attempt=attempt + 1,
                        wait_ms=self._policy.backoff_ms(attempt, self._jitter()),
                        reason="network",
                        last_error=exc,
                    )
                else:
                    if response.status_code != RATE_LIMITED_STATUS:
                        return response
                    last_status = response.status_code
                    retry_after_ms = parse_retry_after_ms(
                        response.headers.get("Retry-After")
                    )
                    state = RetryState(
                        attempt=attempt + 1,
                        wait_ms=(
                            retry_after_ms
                            if retry_after_ms is not None
                            else self._policy.backoff_ms(attempt, self._jitter())
                        ),
                        reason="rate_limited",
                    )

                if state.attempt >= max_attempts:
                    break
                await self._wait(request, state)

        raise RequestExhaustedError(
            attempts=max_attempts,
            last_error=last_error,
            last_status=last_status,
        )

    async def _wait(self, request: RequestDescriptor, state: RetryState) -> None:
        if state.reason == "rate_limited":
            logger.warning(
                "API rate limited for %s %s. Retrying in %.0fms (attempt %s/%s)",
                request.method,
                request.url,
                state.wait_ms,
                state.attempt,
                self._policy.max_attempts,
            )
        else:
            logger.warning(
                "Request to %s %s failed: %r. Retrying in %.0fms (attempt %s/%s)",
                request.method,
                request.url,
                state.last_error,
                state.wait_ms,
                state.attempt,
                self._policy.max_attempts,
            )
        increment_upstream_retry(state.reason)
        await self._sleep(state.wait_ms / 1000.0)


def get_default_invoker() -> ResilientInvoker:
    """Return the invoker configured from application settings."""

    return _DEFAULT_INVOKER


_DEFAULT_INVOKER = ResilientInvoker(
    RetryPolicy.from_config(settings.retry),
    timeout=settings.retry.request_timeout_seconds,
)


__all__ = [
    "RATE_LIMITED_STATUS",
    "RequestDescriptor",
    "RequestExhaustedError",
    "ResilientInvoker",
    "RetryPolicy",
    "RetryState",
    "get_default_invoker",
    "parse_retry_after_ms",
]
