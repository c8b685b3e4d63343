"""End-to-end flow behaviour against fake remote endpoints."""

from __future__ import annotations

import base64
import io
import json
import struct
import wave

import httpx
import pytest

from conftest import TEST_API_KEY, FakeRemote, model_reply
from sheeter_counsel.flows import (
    counseling_prep,
    counseling_question,
    interaction_report,
    live_counseling,
    speech_to_text,
    text_to_speech,
)
from sheeter_counsel.flows.prompts import START_SESSION_INSTRUCTION
from sheeter_counsel.flows.types import (
    START_SESSION_MARKER,
    CounselingPrepInput,
    CounselingQuestionInput,
    InteractionReportInput,
    LiveCounselingInput,
    SpeechToTextInput,
    TextToSpeechInput,
)
from sheeter_counsel.services import (
    SILENT_WAV_DATA_URI,
    EmptyResponseError,
    InvalidAudioDataUriError,
    InvalidJsonResponseError,
    RequestExhaustedError,
    SchemaValidationError,
    UpstreamHttpError,
    parse_data_uri,
)

PCM = struct.pack("<4h", 0, 500, -500, 0)


def _tts_reply(pcm: bytes = PCM) -> httpx.Response:
    return httpx.Response(200, json={"audioContent": base64.b64encode(pcm).decode("ascii")})


def _prompt_text(remote: FakeRemote, index: int = 0) -> str:
    return remote.json_bodies()[index]["contents"][0]["parts"][0]["text"]


REPORT_FIELDS = {
    "emotionalIndicators": "calm",
    "cooperationLevel": "high",
    "behavioralChangeTrend": "improving",
    "riskLevelReassessment": "Medium",
    "sessionSummary": "Discussed employment.",
    "recommendedNextAction": "Further counseling",
}


def _report_request() -> InteractionReportInput:
    return InteractionReportInput(
        criminal_history="Assault",
        behavioral_patterns="Volatile",
        previous_counseling_responses="Denied",
        session_transcript="Sheeter: I want to work.",
    )


# ── Speech to text ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_speech_to_text_scenario(make_generative_client):
    remote = FakeRemote(
        httpx.Response(
            200,
            content='{"candidates":[{"content":{"parts":[{"text":"{\\"transcript\\":\\"హలో\\"}"}]}}]}'.encode(),
            headers={"Content-Type": "application/json"},
        )
    )

    result = await speech_to_text(
        SpeechToTextInput(audio_data_uri="data:audio/webm;base64,AAAA"),
        client=make_generative_client(remote),
    )

    assert result.model_dump(by_alias=True) == {"transcript": "హలో"}
    body = remote.json_bodies()[0]
    parts = body["contents"][0]["parts"]
    assert "Telugu" in parts[0]["text"]
    assert parts[1] == {"inline_data": {"mime_type": "audio/webm", "data": "AAAA"}}
    assert body["generationConfig"] == {"response_mime_type": "application/json"}
    assert "safetySettings" not in body
    assert remote.requests[0].headers["X-goog-api-key"] == TEST_API_KEY


@pytest.mark.asyncio
async def test_speech_to_text_rejects_bad_data_uri_before_calling_remote(make_generative_client):
    remote = FakeRemote(model_reply({"transcript": "unused"}))

    with pytest.raises(InvalidAudioDataUriError, match="Invalid audio data URI format"):
        await speech_to_text(
            SpeechToTextInput(audio_data_uri="audio/webm,AAAA"),
            client=make_generative_client(remote),
        )

    assert remote.requests == []


@pytest.mark.asyncio
async def test_speech_to_text_missing_transcript_fails(make_generative_client):
    remote = FakeRemote(model_reply({"text": "హలో"}))

    with pytest.raises(SchemaValidationError):
        await speech_to_text(
            SpeechToTextInput(audio_data_uri="data:audio/webm;base64,AAAA"),
            client=make_generative_client(remote),
        )


# ── Counseling prep ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_counseling_prep_returns_validated_suggestions(make_generative_client, prep_payload):
    remote = FakeRemote(
        model_reply(
            {
                "focusAreas": ["Anger management", "Employment"],
                "suggestedQuestions": ["మీ కుటుంబం ఎలా ఉంది?"],
            }
        )
    )

    result = await counseling_prep(
        CounselingPrepInput.model_validate(prep_payload),
        client=make_generative_client(remote),
    )

    assert result.focus_areas == ["Anger management", "Employment"]
    assert result.suggested_questions == ["మీ కుటుంబం ఎలా ఉంది?"]
    body = remote.json_bodies()[0]
    assert {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"} in body[
        "safetySettings"
    ]
    assert "Ravi Kumar" in _prompt_text(remote)


@pytest.mark.asyncio
async def test_counseling_prep_retries_rate_limit_then_succeeds(
    make_generative_client, prep_payload, sleeps
):
    remote = FakeRemote(
        httpx.Response(429),
        model_reply({"focusAreas": ["Family"], "suggestedQuestions": ["ప్రశ్న"]}),
    )

    result = await counseling_prep(
        CounselingPrepInput.model_validate(prep_payload),
        client=make_generative_client(remote),
    )

    assert result.focus_areas == ["Family"]
    assert len(remote.requests) == 2
    assert sleeps == [0.5]


@pytest.mark.asyncio
async def test_counseling_prep_surfaces_exhaustion(make_generative_client, prep_payload):
    remote = FakeRemote(httpx.Response(429))

    with pytest.raises(RequestExhaustedError):
        await counseling_prep(
            CounselingPrepInput.model_validate(prep_payload),
            client=make_generative_client(remote),
        )

    assert len(remote.requests) == 4


# ── Interaction report ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_interaction_report_returns_all_fields(make_generative_client):
    remote = FakeRemote(model_reply(REPORT_FIELDS))

    result = await interaction_report(_report_request(), client=make_generative_client(remote))

    assert result.model_dump(by_alias=True) == REPORT_FIELDS
    assert "Sheeter: I want to work." in _prompt_text(remote)


@pytest.mark.asyncio
async def test_interaction_report_server_error_is_not_retried(make_generative_client, sleeps):
    remote = FakeRemote(httpx.Response(500, text="backend exploded"))

    with pytest.raises(UpstreamHttpError) as excinfo:
        await interaction_report(_report_request(), client=make_generative_client(remote))

    assert excinfo.value.status_code == 500
    assert "Internal Server Error" in str(excinfo.value)
    assert len(remote.requests) == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_interaction_report_partial_output_is_rejected(make_generative_client):
    partial = dict(REPORT_FIELDS)
    partial.pop("sessionSummary")
    remote = FakeRemote(model_reply(partial))

    with pytest.raises(SchemaValidationError):
        await interaction_report(_report_request(), client=make_generative_client(remote))


@pytest.mark.asyncio
async def test_non_json_envelope_is_an_empty_response(make_generative_client):
    remote = FakeRemote(httpx.Response(200, text="<html>proxy error</html>"))

    with pytest.raises(EmptyResponseError):
        await interaction_report(_report_request(), client=make_generative_client(remote))


# ── Counseling question ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_counseling_question_returns_question(make_generative_client):
    remote = FakeRemote(model_reply({"question": "What would you like to change?"}))
    request = CounselingQuestionInput(
        profile_details="Ravi, 34",
        criminal_history="Assault",
        behavioral_patterns="Aggressive",
        previous_responses="None",
    )

    result = await counseling_question(request, client=make_generative_client(remote))

    assert result.question == "What would you like to change?"


@pytest.mark.asyncio
async def test_counseling_question_invalid_json_fails(make_generative_client):
    remote = FakeRemote(model_reply("What would you like to change?"))
    request = CounselingQuestionInput(
        profile_details="Ravi, 34",
        criminal_history="Assault",
        behavioral_patterns="Aggressive",
        previous_responses="None",
    )

    with pytest.raises(InvalidJsonResponseError):
        await counseling_question(request, client=make_generative_client(remote))


# ── Text to speech ───────────────────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
async def test_blank_text_returns_silent_clip_without_remote_call(make_speech_client, text):
    remote = FakeRemote(_tts_reply())
    client = make_speech_client(remote)

    first = await text_to_speech(TextToSpeechInput(text=text), client=client)
    second = await text_to_speech(TextToSpeechInput(text=text), client=client)

    assert first.audio_data_uri == SILENT_WAV_DATA_URI
    assert second.audio_data_uri == first.audio_data_uri
    assert remote.requests == []


@pytest.mark.asyncio
async def test_text_to_speech_wraps_pcm_in_wav(make_speech_client):
    remote = FakeRemote(_tts_reply())

    result = await text_to_speech(
        TextToSpeechInput(text="నమస్కారం"),
        client=make_speech_client(remote),
    )

    audio = parse_data_uri(result.audio_data_uri)
    assert audio.mime_type == "audio/wav"
    with wave.open(io.BytesIO(base64.b64decode(audio.data)), "rb") as reader:
        assert reader.getnchannels() == 1
        assert reader.getframerate() == 24000
        assert reader.getsampwidth() == 2
        assert reader.readframes(reader.getnframes()) == PCM

    assert remote.json_bodies()[0] == {
        "input": {"text": "నమస్కారం"},
        "voice": {"languageCode": "te-IN"},
        "audioConfig": {"audioEncoding": "LINEAR16", "sampleRateHertz": 24000},
    }
    assert remote.requests[0].headers["X-goog-api-key"] == TEST_API_KEY


@pytest.mark.asyncio
async def test_text_to_speech_without_audio_content_fails(make_speech_client):
    remote = FakeRemote(httpx.Response(200, json={}))

    with pytest.raises(EmptyResponseError, match="No audio content"):
        await text_to_speech(TextToSpeechInput(text="హలో"), client=make_speech_client(remote))


@pytest.mark.asyncio
async def test_text_to_speech_rejects_undecodable_audio(make_speech_client):
    remote = FakeRemote(httpx.Response(200, json={"audioContent": "***not base64***"}))

    with pytest.raises(EmptyResponseError):
        await text_to_speech(TextToSpeechInput(text="హలో"), client=make_speech_client(remote))


# ── Live counseling ──────────────────────────────────────────────────────


def _live_request(profile, latest=START_SESSION_MARKER, history=()):
    return LiveCounselingInput.model_validate(
        {
            "sheeterProfile": profile,
            "conversationHistory": list(history),
            "latestSheeterMessage": latest,
        }
    )


@pytest.mark.asyncio
async def test_live_counseling_start_session_scenario(
    make_generative_client, make_speech_client, sheeter_profile_payload
):
    gemini = FakeRemote(model_reply({"responseText": "నమస్కారం, నేను మీ కౌన్సెలర్‌ని."}))
    tts = FakeRemote(_tts_reply())

    result = await live_counseling(
        _live_request(sheeter_profile_payload),
        client=make_generative_client(gemini),
        speech_client=make_speech_client(tts),
    )

    prompt = _prompt_text(gemini)
    assert START_SESSION_INSTRUCTION in prompt
    assert f"Sheeter's Latest Message:\n{START_SESSION_MARKER}" in prompt
    assert result.response_text == "నమస్కారం, నేను మీ కౌన్సెలర్‌ని."
    assert result.audio_data_uri.startswith("data:audio/wav;base64,")
    assert result.audio_data_uri != SILENT_WAV_DATA_URI
    assert tts.json_bodies()[0]["input"]["text"] == result.response_text


@pytest.mark.asyncio
async def test_live_counseling_serializes_with_wire_names(
    make_generative_client, make_speech_client, sheeter_profile_payload
):
    gemini = FakeRemote(model_reply({"responseText": "సరే"}))
    tts = FakeRemote(_tts_reply())

    result = await live_counseling(
        _live_request(sheeter_profile_payload, latest="సరే"),
        client=make_generative_client(gemini),
        speech_client=make_speech_client(tts),
    )

    assert set(result.model_dump(by_alias=True)) == {"responseText", "audioDataUri"}


@pytest.mark.asyncio
async def test_live_counseling_fails_when_speech_fails(
    make_generative_client, make_speech_client, sheeter_profile_payload
):
    gemini = FakeRemote(model_reply({"responseText": "మీరు ఎలా ఉన్నారు?"}))
    tts = FakeRemote(httpx.Response(403, json={"error": {"message": "API key not valid"}}))

    with pytest.raises(UpstreamHttpError) as excinfo:
        await live_counseling(
            _live_request(sheeter_profile_payload),
            client=make_generative_client(gemini),
            speech_client=make_speech_client(tts),
        )

    assert excinfo.value.service == "Text-to-Speech"
    assert excinfo.value.status_code == 403


@pytest.mark.asyncio
async def test_live_counseling_invalid_reply_skips_speech(
    make_generative_client, make_speech_client, sheeter_profile_payload
):
    gemini = FakeRemote(model_reply({"reply": "missing responseText"}))
    tts = FakeRemote(_tts_reply())

    with pytest.raises(SchemaValidationError):
        await live_counseling(
            _live_request(sheeter_profile_payload),
            client=make_generative_client(gemini),
            speech_client=make_speech_client(tts),
        )

    assert tts.requests == []


@pytest.mark.asyncio
async def test_live_counseling_blank_reply_uses_silent_audio(
    make_generative_client, make_speech_client, sheeter_profile_payload
):
    gemini = FakeRemote(model_reply({"responseText": " "}))
    tts = FakeRemote(_tts_reply())

    result = await live_counseling(
        _live_request(sheeter_profile_payload),
        client=make_generative_client(gemini),
        speech_client=make_speech_client(tts),
    )

    assert result.audio_data_uri == SILENT_WAV_DATA_URI
    assert tts.requests == []


def test_request_payload_is_plain_json(prep_payload):
    # Flow inputs round-trip through the wire names used by the web client.
    request = CounselingPrepInput.model_validate(prep_payload)

    assert json.loads(request.model_dump_json(by_alias=True, exclude_none=True)) == prep_payload
