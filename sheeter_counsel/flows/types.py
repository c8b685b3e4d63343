"""Typed input/output records for the AI flows.

Attributes are snake_case; every field also carries its camelCase alias so the
records serialize to (and accept) the wire shape used by the web front-end.
Output records are what the model must return; they are validated strictly
by :func:`sheeter_counsel.services.parse_structured_output`.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

RiskLevel = Literal["Low", "Medium", "High"]
ConversationRole = Literal["ai", "sheeter"]

START_SESSION_MARKER = "[START_SESSION]"


class FlowRecord(BaseModel):
    """Base for immutable flow records with camelCase aliases."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PersonalDetails(FlowRecord):
    name: str
    age: int
    area: str
    id: Optional[str] = None


class CriminalHistoryEntry(FlowRecord):
    cases: str
    sections: str
    frequency: str


class VoiceInteraction(FlowRecord):
    date: str
    duration: str


# -- Counseling preparation ---------------------------------------------------


class CounselingPrepInput(FlowRecord):
    personal_details: PersonalDetails = Field(alias="personalDetails")
    criminal_history: list[CriminalHistoryEntry] = Field(alias="criminalHistory")
    behavioral_tags: list[str] = Field(alias="behavioralTags")
    risk_level: RiskLevel = Field(alias="riskLevel")
    previous_counseling_summaries: list[str] = Field(alias="previousCounselingSummaries")
    voice_interaction_history_metadata: Optional[list[VoiceInteraction]] = Field(
        default=None,
        alias="voiceInteractionHistoryMetadata",
    )


class CounselingPrepOutput(FlowRecord):
    focus_areas: list[str] = Field(alias="focusAreas")
    suggested_questions: list[str] = Field(alias="suggestedQuestions")


# -- Interaction report -------------------------------------------------------


class InteractionReportInput(FlowRecord):
    criminal_history: str = Field(alias="criminalHistory")
    behavioral_patterns: str = Field(alias="behavioralPatterns")
    previous_counseling_responses: str = Field(alias="previousCounselingResponses")
    session_transcript: str = Field(alias="sessionTranscript")


class InteractionReportOutput(FlowRecord):
    emotional_indicators: str = Field(alias="emotionalIndicators")
    cooperation_level: str = Field(alias="cooperationLevel")
    behavioral_change_trend: str = Field(alias="behavioralChangeTrend")
    risk_level_reassessment: str = Field(alias="riskLevelReassessment")
    session_summary: str = Field(alias="sessionSummary")
    recommended_next_action: str = Field(alias="recommendedNextAction")


# -- Counseling question ------------------------------------------------------


class CounselingQuestionInput(FlowRecord):
    profile_details: str = Field(alias="profileDetails")
    criminal_history: str = Field(alias="criminalHistory")
    behavioral_patterns: str = Field(alias="behavioralPatterns")
    previous_responses: str = Field(alias="previousResponses")


class CounselingQuestionOutput(FlowRecord):
    question: str


# -- Live counseling ----------------------------------------------------------


class SheeterPersonalDetails(FlowRecord):
    name: str
    age: int
    area: str


class SheeterProfile(FlowRecord):
    personal_details: SheeterPersonalDetails = Field(alias="personalDetails")
    criminal_history: list[CriminalHistoryEntry] = Field(alias="criminalHistory")
    behavioral_tags: list[str] = Field(alias="behavioralTags")
    risk_level: RiskLevel = Field(alias="riskLevel")


class ConversationMessage(FlowRecord):
    role: ConversationRole
    content: str


class LiveCounselingInput(FlowRecord):
    sheeter_profile: SheeterProfile = Field(alias="sheeterProfile")
    conversation_history: list[ConversationMessage] = Field(alias="conversationHistory")
    latest_sheeter_message: str = Field(alias="latestSheeterMessage")


class LiveCounselingReply(FlowRecord):
    """What the model returns for one conversational turn."""

    response_text: str = Field(alias="responseText")


class LiveCounselingOutput(FlowRecord):
    response_text: str = Field(alias="responseText")
    audio_data_uri: str = Field(alias="audioDataUri")


# -- Speech -------------------------------------------------------------------


class SpeechToTextInput(FlowRecord):
    audio_data_uri: str = Field(alias="audioDataUri")


class SpeechToTextOutput(FlowRecord):
    transcript: str


class TextToSpeechInput(FlowRecord):
    text: str


class TextToSpeechOutput(FlowRecord):
    audio_data_uri: str = Field(alias="audioDataUri")


__all__ = [
    "START_SESSION_MARKER",
    "ConversationMessage",
    "ConversationRole",
    "CounselingPrepInput",
    "CounselingPrepOutput",
    "CounselingQuestionInput",
    "CounselingQuestionOutput",
    "CriminalHistoryEntry",
    "InteractionReportInput",
    "InteractionReportOutput",
    "LiveCounselingInput",
    "LiveCounselingOutput",
    "LiveCounselingReply",
    "PersonalDetails",
    "RiskLevel",
    "SheeterPersonalDetails",
    "SheeterProfile",
    "SpeechToTextInput",
    "SpeechToTextOutput",
    "TextToSpeechInput",
    "TextToSpeechOutput",
    "VoiceInteraction",
]
