"""PCM/WAV and data-URI helpers for the speech flows."""

from __future__ import annotations

import base64
import io
import re
import wave
from dataclasses import dataclass

DEFAULT_CHANNELS = 1
DEFAULT_SAMPLE_RATE = 24000
DEFAULT_SAMPLE_WIDTH = 2  # bytes per sample (16-bit)

# Returned for empty text so the UI always has something playable.
SILENT_WAV_DATA_URI = (
    "data:audio/wav;base64,"
    "UklGRigAAABXQVZFZm10IBIAAAABAAEARKwAAIhYAQACABAAAABkYXRhAgAAAAEA"
)

_DATA_URI_PATTERN = re.compile(r"data:([^,]+?);base64,(.+)", re.DOTALL)


class InvalidAudioDataUriError(ValueError):
    """Raised when an audio payload is not a ``data:<mime>;base64,<data>`` URI."""


@dataclass(frozen=True)
class DataUri:
    """Decomposed ``data:`` URI; ``data`` stays base64-encoded."""

    mime_type: str
    data: str


def parse_data_uri(uri: str) -> DataUri:
    match = _DATA_URI_PATTERN.fullmatch(uri.strip()) if isinstance(uri, str) else None
    if match is None:
        raise InvalidAudioDataUriError("Invalid audio data URI format.")
    return DataUri(mime_type=match.group(1), data=match.group(2))


def encode_data_uri(mime_type: str, payload: bytes) -> str:
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def pcm_to_wav(
    pcm: bytes,
    *,
    channels: int = DEFAULT_CHANNELS,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    sample_width: int = DEFAULT_SAMPLE_WIDTH,
) -> bytes:
    """Wrap raw little-endian linear PCM in a RIFF/WAVE container."""

    with io.BytesIO() as buffer:
        with wave.open(buffer, "wb") as wave_file:
            wave_file.setnchannels(channels)
            wave_file.setsampwidth(sample_width)
            wave_file.setframerate(sample_rate)
            wave_file.writeframes(pcm)
        return buffer.getvalue()


__all__ = [
    "DEFAULT_CHANNELS",
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_SAMPLE_WIDTH",
    "DataUri",
    "InvalidAudioDataUriError",
    "SILENT_WAV_DATA_URI",
    "encode_data_uri",
    "parse_data_uri",
    "pcm_to_wav",
]
