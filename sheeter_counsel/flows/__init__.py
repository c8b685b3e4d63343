"""AI flows used by the counseling front-end.

Each module exposes exactly one coroutine:

1. ``prep`` – ``counseling_prep``: focus areas and questions before a session.
2. ``question`` – ``counseling_question``: one reflective question.
3. ``live`` – ``live_counseling``: next interviewer turn plus its spoken audio.
4. ``transcription`` – ``speech_to_text``: transcribe a recorded answer.
5. ``synthesis`` – ``text_to_speech``: speak a piece of Telugu text.
6. ``report`` – ``interaction_report``: structured report after the session.

All of them build a prompt (``prompts``), send it through the retrying
client, and validate the reply against the records in ``types``.
"""

from .live import live_counseling
from .prep import counseling_prep
from .question import counseling_question
from .report import interaction_report
from .synthesis import text_to_speech
from .transcription import speech_to_text

__all__ = [
    "counseling_prep",
    "counseling_question",
    "interaction_report",
    "live_counseling",
    "speech_to_text",
    "text_to_speech",
]
