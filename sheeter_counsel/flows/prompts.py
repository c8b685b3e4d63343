"""Prompt templates and renderers for the counseling flows.

Each renderer fills a fixed template with values from the flow's input
record. Values are inserted verbatim. Collections become one ``- `` bullet
per element, and an empty collection becomes a single fallback bullet
(``- No ... available.``). Every template closes with the JSON shape the
model must answer with.
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from .types import (
    START_SESSION_MARKER,
    ConversationMessage,
    CounselingPrepInput,
    CounselingQuestionInput,
    CriminalHistoryEntry,
    InteractionReportInput,
    LiveCounselingInput,
    VoiceInteraction,
)

T = TypeVar("T")

START_SESSION_INSTRUCTION = (
    f"If the latest message is '{START_SESSION_MARKER}', begin the interview with a brief "
    "introduction and an opening question in Telugu."
)

# Safety thresholds sent with the counseling preparation request.
COUNSELING_PREP_SAFETY_SETTINGS = (
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_LOW_AND_ABOVE"},
)

COUNSELING_PREP_PROMPT = """\
You are an AI assistant designed to help counselors prepare for counseling sessions with rowdy sheeters.
Analyze the provided rowdy sheeter profile and suggest focus areas and context-appropriate questions for the upcoming counseling session.
Consider the criminal history, behavioral tags, risk level, and previous counseling summaries to tailor your suggestions.

Rowdy Sheeter Profile:
----------------------
Personal Details:
- Name: {name}
- Age: {age}
- Area: {area}
- ID: {sheeter_id}

Criminal History:
{criminal_history}

Behavioral Tags:
{behavioral_tags}

Risk Level: {risk_level}

Previous Counseling Summaries:
{previous_summaries}

Voice Interaction History:
{voice_interactions}

Based on this profile, suggest 3-5 focus areas in English, and 3-5 context-appropriate questions for the counseling session in Telugu.

Format your output as a JSON object with exactly these fields:
- "focusAreas": a list of strings, the suggested focus areas in English
- "suggestedQuestions": a list of strings, the suggested questions in Telugu
"""

INTERACTION_REPORT_PROMPT = """\
You are an AI assistant that generates interaction reports after counseling sessions with rowdy sheeters.

Based on the criminal history, behavioral patterns, previous counseling responses, and the current session transcript, generate a comprehensive interaction report.

Include emotional indicators, cooperation level, behavioral change trend, risk level reassessment, a session summary, and recommended next action. Ensure the report is detailed and provides actionable insights for the counselor.

Criminal History: {criminal_history}
Behavioral Patterns: {behavioral_patterns}
Previous Counseling Responses: {previous_counseling_responses}
Session Transcript: {session_transcript}

Output the following fields, as strings in a JSON object:
- "emotionalIndicators": The emotional indicators observed during the session (e.g., calm, aggressive, defensive).
- "cooperationLevel": The level of cooperation exhibited by the rowdy sheeter during the session.
- "behavioralChangeTrend": The trend in behavioral change observed based on previous sessions.
- "riskLevelReassessment": A reassessment of the rowdy sheeter's risk level based on the session.
- "sessionSummary": A summary of the key points and outcomes of the counseling session.
- "recommendedNextAction": Recommended next steps such as further counseling, monitoring, referral to rehabilitation, or legal escalation.
"""

COUNSELING_QUESTION_PROMPT = """\
You are an AI assistant designed to generate context-appropriate counseling questions based on the rowdy sheeter's profile and previous responses.

Consider the following information about the rowdy sheeter:
Profile Details: {profile_details}
Criminal History: {criminal_history}
Behavioral Patterns: {behavioral_patterns}
Previous Responses: {previous_responses}

Based on this information, generate a single, clear, and concise question that encourages the rowdy sheeter to reflect on their behavior and consider positive changes.
The question should be open-ended and avoid leading the sheeter towards a specific answer. Focus on promoting self-awareness and personal responsibility.
Ensure the question is neutral and professional, with no emotional manipulation or coercion.
The question should be appropriate for a law enforcement setting and comply with ethical guidelines for AI use in counseling.

Format your output as a JSON object with a single field:
- "question": the generated question, as a string
"""

LIVE_COUNSELING_PROMPT = """\
You are an AI assistant acting as a professional counselor for a police department. You are conducting a live interview with a "rowdy sheeter". Your goal is to examine their current status and behavior by engaging in a conversation. The entire conversation MUST be in Telugu.

Maintain an empathetic, neutral, and professional tone. Ask open-ended questions to encourage self-reflection. Do not be accusatory. Guide the conversation based on their profile and their responses. Keep your responses concise and conversational.

{start_session_instruction}

Sheeter Profile:
- Name: {name}
- Age: {age}
- Area: {area}
- Risk Level: {risk_level}

Behavioral Tags:
{behavioral_tags}

Criminal History:
{criminal_history}

Conversation History:
{conversation_history}

Sheeter's Latest Message:
{latest_message}

Generate your next response to the sheeter in Telugu.

Format your output as a JSON object with a single field:
- "responseText": your response to the sheeter in Telugu, as a string
"""

TRANSCRIPTION_PROMPT = (
    "Transcribe the following audio. The audio is in Telugu. Only return the "
    'transcribed text in Telugu script in a JSON object with a single "transcript" key.'
)


def render_bullets(
    items: Iterable[T],
    fallback: str,
    formatter: Callable[[T], str] = str,
) -> str:
    """One ``- `` line per item, or ``- <fallback>`` when there are none."""

    lines = [f"- {formatter(item)}" for item in items]
    if not lines:
        return f"- {fallback}"
    return "\n".join(lines)


def _format_case(entry: CriminalHistoryEntry) -> str:
    return f"{entry.cases} (Sections: {entry.sections}, Frequency: {entry.frequency})"


def _format_voice_interaction(entry: VoiceInteraction) -> str:
    return f"{entry.date} (Duration: {entry.duration})"


def _format_message(message: ConversationMessage) -> str:
    speaker = "AI Counselor" if message.role == "ai" else "Sheeter"
    return f"{speaker}: {message.content}"


def render_counseling_prep_prompt(request: CounselingPrepInput) -> str:
    details = request.personal_details
    return COUNSELING_PREP_PROMPT.format(
        name=details.name,
        age=details.age,
        area=details.area,
        sheeter_id=details.id if details.id is not None else "Not available",
        criminal_history=render_bullets(
            request.criminal_history,
            "No criminal history available.",
            _format_case,
        ),
        behavioral_tags=render_bullets(
            request.behavioral_tags,
            "No behavioral tags available.",
        ),
        risk_level=request.risk_level,
        previous_summaries=render_bullets(
            request.previous_counseling_summaries,
            "No previous counseling summaries available.",
        ),
        voice_interactions=render_bullets(
            request.voice_interaction_history_metadata or (),
            "No voice interaction history available.",
            _format_voice_interaction,
        ),
    )


def render_interaction_report_prompt(request: InteractionReportInput) -> str:
    return INTERACTION_REPORT_PROMPT.format(
        criminal_history=request.criminal_history,
        behavioral_patterns=request.behavioral_patterns,
        previous_counseling_responses=request.previous_counseling_responses,
        session_transcript=request.session_transcript,
    )


def render_counseling_question_prompt(request: CounselingQuestionInput) -> str:
    return COUNSELING_QUESTION_PROMPT.format(
        profile_details=request.profile_details,
        criminal_history=request.criminal_history,
        behavioral_patterns=request.behavioral_patterns,
        previous_responses=request.previous_responses,
    )


def render_live_counseling_prompt(request: LiveCounselingInput) -> str:
    profile = request.sheeter_profile
    details = profile.personal_details
    return LIVE_COUNSELING_PROMPT.format(
        start_session_instruction=START_SESSION_INSTRUCTION,
        name=details.name,
        age=details.age,
        area=details.area,
        risk_level=profile.risk_level,
        behavioral_tags=render_bullets(
            profile.behavioral_tags,
            "No behavioral tags available.",
        ),
        criminal_history=render_bullets(
            profile.criminal_history,
            "No criminal history available.",
            _format_case,
        ),
        conversation_history=render_bullets(
            request.conversation_history,
            "No conversation history available.",
            _format_message,
        ),
        latest_message=request.latest_sheeter_message,
    )


__all__ = [
    "COUNSELING_PREP_PROMPT",
    "COUNSELING_PREP_SAFETY_SETTINGS",
    "COUNSELING_QUESTION_PROMPT",
    "INTERACTION_REPORT_PROMPT",
    "LIVE_COUNSELING_PROMPT",
    "START_SESSION_INSTRUCTION",
    "TRANSCRIPTION_PROMPT",
    "render_bullets",
    "render_counseling_prep_prompt",
    "render_counseling_question_prompt",
    "render_interaction_report_prompt",
    "render_live_counseling_prompt",
]
