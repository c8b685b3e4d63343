"""Telugu speech transcription through the generative model."""

from __future__ import annotations

import logging

from sheeter_counsel.services import (
    GenerativeLanguageClient,
    InvalidAudioDataUriError,
    get_generative_client,
    inline_data_part,
    parse_data_uri,
    text_part,
)

from .prompts import TRANSCRIPTION_PROMPT
from .tracking import flow_span
from .types import SpeechToTextInput, SpeechToTextOutput

logger = logging.getLogger(__name__)


async def speech_to_text(
    request: SpeechToTextInput,
    *,
    client: GenerativeLanguageClient | None = None,
) -> SpeechToTextOutput:
    """Transcribe a ``data:<mime>;base64,<audio>`` recording."""

    client = client or get_generative_client()
    with flow_span("speech_to_text"):
        try:
            audio = parse_data_uri(request.audio_data_uri)
        except InvalidAudioDataUriError:
            logger.error("Rejected audio data URI: %s", request.audio_data_uri[:120])
            raise

        parts = [
            text_part(TRANSCRIPTION_PROMPT),
            inline_data_part(audio.mime_type, audio.data),
        ]
        return await client.generate_structured(parts, SpeechToTextOutput)


__all__ = ["speech_to_text"]
