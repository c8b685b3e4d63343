"""Telugu speech synthesis returned as a WAV data URI."""

from __future__ import annotations

from sheeter_counsel.services import (
    SILENT_WAV_DATA_URI,
    SpeechSynthesisClient,
    encode_data_uri,
    get_speech_client,
    pcm_to_wav,
)

from .tracking import flow_span
from .types import TextToSpeechInput, TextToSpeechOutput


async def text_to_speech(
    request: TextToSpeechInput,
    *,
    client: SpeechSynthesisClient | None = None,
) -> TextToSpeechOutput:
    """Synthesize ``request.text``; blank text yields a fixed silent clip."""

    if not request.text.strip():
        return TextToSpeechOutput(audio_data_uri=SILENT_WAV_DATA_URI)

    client = client or get_speech_client()
    with flow_span("text_to_speech"):
        pcm = await client.synthesize_pcm(request.text)
        wav_bytes = pcm_to_wav(pcm, sample_rate=client.sample_rate_hertz)
        return TextToSpeechOutput(audio_data_uri=encode_data_uri("audio/wav", wav_bytes))


__all__ = ["text_to_speech"]
