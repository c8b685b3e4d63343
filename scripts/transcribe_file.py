"""Manual check: transcribe an audio file and speak the transcript back.

Usage: python scripts/transcribe_file.py path/to/answer.webm [out.wav]
Requires GEMINI_API_KEY in the environment or .env.
"""

import asyncio
import base64
import mimetypes
import os
import sys

# Add project root to path so we can import sheeter_counsel
sys.path.append(os.getcwd())

from sheeter_counsel.flows import speech_to_text, text_to_speech
from sheeter_counsel.flows.types import SpeechToTextInput, TextToSpeechInput
from sheeter_counsel.services import (
    RequestExhaustedError,
    ResponseContractError,
    UpstreamHttpError,
    parse_data_uri,
)


async def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/transcribe_file.py path/to/audio [out.wav]")
        return

    file_path = sys.argv[1]
    out_path = sys.argv[2] if len(sys.argv) > 2 else "readback.wav"
    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found.")
        return

    mime_type = mimetypes.guess_type(file_path)[0] or "audio/webm"
    with open(file_path, "rb") as f:
        encoded = base64.b64encode(f.read()).decode("ascii")

    print(f"Transcribing {file_path} as {mime_type}...")
    try:
        result = await speech_to_text(
            SpeechToTextInput(audio_data_uri=f"data:{mime_type};base64,{encoded}")
        )
        print("\n--- Transcript ---")
        print(result.transcript)
        print("------------------")

        speech = await text_to_speech(TextToSpeechInput(text=result.transcript))
    except (UpstreamHttpError, ResponseContractError, RequestExhaustedError) as e:
        print(f"\nFlow failed: {e}")
        return

    audio = parse_data_uri(speech.audio_data_uri)
    with open(out_path, "wb") as f:
        f.write(base64.b64decode(audio.data))
    print(f"Readback written to {out_path}")


if __name__ == "__main__":
    asyncio.run(main())
