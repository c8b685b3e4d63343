"""Thin clients for the Generative Language and Text-to-Speech REST APIs."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Mapping, Sequence, TypeVar

import httpx
from pydantic import BaseModel

from sheeter_counsel.config.settings import settings
from sheeter_counsel.services.resilient_client import (
    RequestDescriptor,
    ResilientInvoker,
    get_default_invoker,
)
from sheeter_counsel.services.response_contract import (
    EmptyResponseError,
    parse_structured_output,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class UpstreamHttpError(RuntimeError):
    """Raised when a Google API answers with a non-retryable error status."""

    def __init__(self, service: str, status_code: int, reason: str) -> None:
        super().__init__(f"{service} request failed: {status_code} {reason}".strip())
        self.service = service
        self.status_code = status_code
        self.reason = reason


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def inline_data_part(mime_type: str, data: str) -> dict[str, Any]:
    return {"inline_data": {"mime_type": mime_type, "data": data}}


def _ensure_success(response: httpx.Response, service: str) -> None:
    if response.is_success:
        return
    logger.error(
        "%s API error status=%s body=%s",
        service,
        response.status_code,
        response.text[:2000],
    )
    raise UpstreamHttpError(service, response.status_code, response.reason_phrase)


def _json_body(response: httpx.Response, service: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        logger.error("%s API returned a non-JSON body: %s", service, response.text[:2000])
        raise EmptyResponseError(f"Empty or invalid response from {service} API.") from exc


class GenerativeLanguageClient:
    """Call ``models/<model>:generateContent`` and validate JSON replies."""

    service_name = "Gemini"

    def __init__(
        self,
        api_key: str | None,
        *,
        url: str = settings.gemini.generate_content_url,
        api_key_header: str = settings.gemini.api_key_header,
        invoker: ResilientInvoker | None = None,
    ) -> None:
        self._api_key = api_key or ""
        self._url = url
        self._api_key_header = api_key_header
        self._invoker = invoker or get_default_invoker()

    @staticmethod
    def build_payload(
        parts: Sequence[Mapping[str, Any]],
        *,
        safety_settings: Sequence[Mapping[str, str]] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "contents": [{"parts": [dict(part) for part in parts]}],
            "generationConfig": {"response_mime_type": "application/json"},
        }
        if safety_settings:
            payload["safetySettings"] = [dict(item) for item in safety_settings]
        return payload

    async def generate_structured(
        self,
        parts: Sequence[Mapping[str, Any]],
        schema: type[ModelT],
        *,
        safety_settings: Sequence[Mapping[str, str]] | None = None,
    ) -> ModelT:
        """Send ``parts`` to the model and return the reply validated as ``schema``."""

        request = RequestDescriptor(
            method="POST",
            url=self._url,
            headers={
                "Content-Type": "application/json",
                self._api_key_header: self._api_key,
            },
            json=self.build_payload(parts, safety_settings=safety_settings),
        )
        response = await self._invoker.send(request)
        _ensure_success(response, self.service_name)
        return parse_structured_output(_json_body(response, self.service_name), schema)


class SpeechSynthesisClient:
    """Call ``text:synthesize`` and return decoded LINEAR16 PCM bytes."""

    service_name = "Text-to-Speech"

    def __init__(
        self,
        api_key: str | None,
        *,
        url: str = settings.speech.url,
        api_key_header: str = settings.gemini.api_key_header,
        language_code: str = settings.speech.language_code,
        sample_rate_hertz: int = settings.speech.sample_rate_hertz,
        invoker: ResilientInvoker | None = None,
    ) -> None:
        self._api_key = api_key or ""
        self._url = url
        self._api_key_header = api_key_header
        self._language_code = language_code
        self._sample_rate_hertz = sample_rate_hertz
        self._invoker = invoker or get_default_invoker()

    @property
    def sample_rate_hertz(self) -> int:
        return self._sample_rate_hertz

    def build_payload(self, text: str) -> dict[str, Any]:
        return {
            "input": {"text": text},
            "voice": {"languageCode": self._language_code},
            "audioConfig": {
                "audioEncoding": "LINEAR16",
                "sampleRateHertz": self._sample_rate_hertz,
            },
        }

    async def synthesize_pcm(self, text: str) -> bytes:
        request = RequestDescriptor(
            method="POST",
            url=self._url,
            headers={
                "Content-Type": "application/json",
                self._api_key_header: self._api_key,
            },
            json=self.build_payload(text),
        )
        response = await self._invoker.send(request)
        _ensure_success(response, self.service_name)

        body = _json_body(response, self.service_name)
        audio_content = body.get("audioContent") if isinstance(body, Mapping) else None
        if not isinstance(audio_content, str) or not audio_content:
            logger.error("Text-to-Speech response without audioContent: %s", response.text[:2000])
            raise EmptyResponseError("No audio content returned from Text-to-Speech API.")

        try:
            return base64.b64decode(audio_content, validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.error("Text-to-Speech audioContent is not valid base64: %s", audio_content[:200])
            raise EmptyResponseError("Invalid audio content returned from Text-to-Speech API.") from exc


def _api_key_value() -> str | None:
    secret = settings.gemini.api_key
    return secret.get_secret_value() if secret is not None else None


def get_generative_client() -> GenerativeLanguageClient:
    """Return the default Generative Language client."""

    return _DEFAULT_GENERATIVE_CLIENT


def get_speech_client() -> SpeechSynthesisClient:
    """Return the default Text-to-Speech client."""

    return _DEFAULT_SPEECH_CLIENT


_DEFAULT_GENERATIVE_CLIENT = GenerativeLanguageClient(_api_key_value())
_DEFAULT_SPEECH_CLIENT = SpeechSynthesisClient(_api_key_value())


__all__ = [
    "GenerativeLanguageClient",
    "SpeechSynthesisClient",
    "UpstreamHttpError",
    "get_generative_client",
    "get_speech_client",
    "inline_data_part",
    "text_part",
]
