"""Counseling preparation: focus areas and Telugu questions for a profile."""

from __future__ import annotations

from sheeter_counsel.services import (
    GenerativeLanguageClient,
    get_generative_client,
    text_part,
)

from .prompts import COUNSELING_PREP_SAFETY_SETTINGS, render_counseling_prep_prompt
from .tracking import flow_span
from .types import CounselingPrepInput, CounselingPrepOutput


async def counseling_prep(
    request: CounselingPrepInput,
    *,
    client: GenerativeLanguageClient | None = None,
) -> CounselingPrepOutput:
    """Suggest focus areas and questions for an upcoming counseling session."""

    client = client or get_generative_client()
    with flow_span("counseling_prep"):
        prompt = render_counseling_prep_prompt(request)
        return await client.generate_structured(
            [text_part(prompt)],
            CounselingPrepOutput,
            safety_settings=COUNSELING_PREP_SAFETY_SETTINGS,
        )


__all__ = ["counseling_prep"]
