"""Validation of structured JSON replies from the generative model.

Every flow asks the model for a JSON object and runs the reply through
:func:`parse_structured_output` so callers only ever receive a fully
validated record. Validation is strict: values are never coerced between
types, and any failure is logged together with the offending raw text.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResponseContractError(RuntimeError):
    """Raised when a remote response does not honour its expected contract."""


class EmptyResponseError(ResponseContractError):
    """The response envelope carried no usable payload."""


class InvalidJsonResponseError(ResponseContractError):
    """The model's text payload is not parseable JSON."""


class SchemaValidationError(ResponseContractError):
    """The parsed JSON does not conform to the declared output schema."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def _truncate(value: str, max_length: int = 2000) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def extract_candidate_text(envelope: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` from a response envelope."""

    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        text = None

    if not isinstance(text, str) or not text:
        logger.error("Response envelope without candidate text: %s", _truncate(repr(envelope)))
        raise EmptyResponseError("Empty or invalid response from the generative model.")
    return text


def parse_structured_output(envelope: Mapping[str, Any], schema: type[ModelT]) -> ModelT:
    """Extract, parse and validate the model reply against ``schema``."""

    raw_text = extract_candidate_text(envelope)

    try:
        json.loads(raw_text)
    except json.JSONDecodeError as exc:
        logger.error(
            "Failed to parse model response as JSON for %s: %s",
            schema.__name__,
            _truncate(raw_text),
        )
        raise InvalidJsonResponseError(
            f"Invalid JSON response from the generative model for {schema.__name__}."
        ) from exc

    try:
        return schema.model_validate_json(raw_text, strict=True)
    except ValidationError as exc:
        logger.error(
            "Model response does not match %s (%s error(s)): %s",
            schema.__name__,
            exc.error_count(),
            _truncate(raw_text),
        )
        raise SchemaValidationError(
            f"Model response does not match the {schema.__name__} schema.",
            errors=exc.errors(include_url=False),
        ) from exc


__all__ = [
    "EmptyResponseError",
    "InvalidJsonResponseError",
    "ResponseContractError",
    "SchemaValidationError",
    "extract_candidate_text",
    "parse_structured_output",
]
