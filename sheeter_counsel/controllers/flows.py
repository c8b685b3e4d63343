"""HTTP endpoints exposing the AI flows to the web front-end.

Each route accepts and returns the camelCase records from
``sheeter_counsel.flows.types``. Flow failures are translated as follows:

* malformed audio data URI -> 422
* remote API error status or malformed model output -> 502
* retries exhausted on the remote API -> 503
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import APIRouter, HTTPException, status

from sheeter_counsel.flows import (
    counseling_prep,
    counseling_question,
    interaction_report,
    live_counseling,
    speech_to_text,
    text_to_speech,
)
from sheeter_counsel.flows.types import (
    CounselingPrepInput,
    CounselingPrepOutput,
    CounselingQuestionInput,
    CounselingQuestionOutput,
    InteractionReportInput,
    InteractionReportOutput,
    LiveCounselingInput,
    LiveCounselingOutput,
    SpeechToTextInput,
    SpeechToTextOutput,
    TextToSpeechInput,
    TextToSpeechOutput,
)
from sheeter_counsel.services import (
    InvalidAudioDataUriError,
    RequestExhaustedError,
    ResponseContractError,
    UpstreamHttpError,
)

router = APIRouter(prefix="/flows", tags=["flows"])

logger = logging.getLogger(__name__)


@contextmanager
def _flow_errors() -> Iterator[None]:
    """Translate flow failures into HTTP errors."""

    try:
        yield
    except InvalidAudioDataUriError as exc:
        raise HTTPException(
            status_code=422,
            detail=str(exc),
        ) from exc
    except UpstreamHttpError as exc:
        logger.exception("Remote API rejected the request", exc_info=exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    except ResponseContractError as exc:
        logger.exception("Remote API returned an invalid payload", exc_info=exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    except RequestExhaustedError as exc:
        logger.exception("Remote API unavailable after retries", exc_info=exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc


@router.post("/counseling-prep", response_model=CounselingPrepOutput)
async def post_counseling_prep(request: CounselingPrepInput) -> CounselingPrepOutput:
    """Suggest focus areas and Telugu questions for a sheeter profile."""

    with _flow_errors():
        return await counseling_prep(request)


@router.post("/interaction-report", response_model=InteractionReportOutput)
async def post_interaction_report(
    request: InteractionReportInput,
) -> InteractionReportOutput:
    """Generate the post-session interaction report."""

    with _flow_errors():
        return await interaction_report(request)


@router.post("/counseling-question", response_model=CounselingQuestionOutput)
async def post_counseling_question(
    request: CounselingQuestionInput,
) -> CounselingQuestionOutput:
    with _flow_errors():
        return await counseling_question(request)


@router.post("/live-counseling", response_model=LiveCounselingOutput)
async def post_live_counseling(request: LiveCounselingInput) -> LiveCounselingOutput:
    """Produce the interviewer's next turn with synthesized audio."""

    with _flow_errors():
        return await live_counseling(request)


@router.post("/speech-to-text", response_model=SpeechToTextOutput)
async def post_speech_to_text(request: SpeechToTextInput) -> SpeechToTextOutput:
    with _flow_errors():
        return await speech_to_text(request)


@router.post("/text-to-speech", response_model=TextToSpeechOutput)
async def post_text_to_speech(request: TextToSpeechInput) -> TextToSpeechOutput:
    with _flow_errors():
        return await text_to_speech(request)
