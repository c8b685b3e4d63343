"""Shared logging and metrics around a single flow invocation."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from sheeter_counsel.telemetry import observe_flow

logger = logging.getLogger("sheeter_counsel.flows")


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)


@contextmanager
def flow_span(flow: str) -> Iterator[None]:
    """Log start/outcome of ``flow`` and count it by outcome.

    Exceptions are re-raised unchanged.
    """

    start_time = time.perf_counter()
    logger.info("flow=%s status=started", flow)
    try:
        yield
    except Exception as exc:
        logger.warning(
            "flow=%s status=failed duration_ms=%s error=%s: %s",
            flow,
            _elapsed_ms(start_time),
            type(exc).__name__,
            exc,
        )
        observe_flow(flow, type(exc).__name__)
        raise
    logger.info("flow=%s status=succeeded duration_ms=%s", flow, _elapsed_ms(start_time))
    observe_flow(flow, "success")


__all__ = ["flow_span"]
