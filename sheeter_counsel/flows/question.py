"""Single reflective question for a voice counseling session."""

from __future__ import annotations

from sheeter_counsel.services import (
    GenerativeLanguageClient,
    get_generative_client,
    text_part,
)

from .prompts import render_counseling_question_prompt
from .tracking import flow_span
from .types import CounselingQuestionInput, CounselingQuestionOutput


async def counseling_question(
    request: CounselingQuestionInput,
    *,
    client: GenerativeLanguageClient | None = None,
) -> CounselingQuestionOutput:
    client = client or get_generative_client()
    with flow_span("counseling_question"):
        prompt = render_counseling_question_prompt(request)
        return await client.generate_structured([text_part(prompt)], CounselingQuestionOutput)


__all__ = ["counseling_question"]
