"""Post-session interaction report generation."""

from __future__ import annotations

from sheeter_counsel.services import (
    GenerativeLanguageClient,
    get_generative_client,
    text_part,
)

from .prompts import render_interaction_report_prompt
from .tracking import flow_span
from .types import InteractionReportInput, InteractionReportOutput


async def interaction_report(
    request: InteractionReportInput,
    *,
    client: GenerativeLanguageClient | None = None,
) -> InteractionReportOutput:
    """Generate the structured report for a finished counseling session."""

    client = client or get_generative_client()
    with flow_span("interaction_report"):
        prompt = render_interaction_report_prompt(request)
        return await client.generate_structured([text_part(prompt)], InteractionReportOutput)


__all__ = ["interaction_report"]
