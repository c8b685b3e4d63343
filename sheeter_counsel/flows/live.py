"""One turn of the live, spoken counseling interview."""

from __future__ import annotations

from sheeter_counsel.services import (
    GenerativeLanguageClient,
    SpeechSynthesisClient,
    get_generative_client,
    text_part,
)

from .prompts import render_live_counseling_prompt
from .synthesis import text_to_speech
from .tracking import flow_span
from .types import (
    LiveCounselingInput,
    LiveCounselingOutput,
    LiveCounselingReply,
    TextToSpeechInput,
)


async def live_counseling(
    request: LiveCounselingInput,
    *,
    client: GenerativeLanguageClient | None = None,
    speech_client: SpeechSynthesisClient | None = None,
) -> LiveCounselingOutput:
    """Generate the counselor's next reply and its spoken audio.

    A failure to synthesize the audio fails the whole turn.
    """

    client = client or get_generative_client()
    with flow_span("live_counseling"):
        prompt = render_live_counseling_prompt(request)
        reply = await client.generate_structured([text_part(prompt)], LiveCounselingReply)
        speech = await text_to_speech(
            TextToSpeechInput(text=reply.response_text),
            client=speech_client,
        )
        return LiveCounselingOutput(
            response_text=reply.response_text,
            audio_data_uri=speech.audio_data_uri,
        )


__all__ = ["live_counseling"]
