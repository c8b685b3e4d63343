"""Service layer helpers for external integrations."""

from .audio_codec import (
    SILENT_WAV_DATA_URI,
    DataUri,
    InvalidAudioDataUriError,
    encode_data_uri,
    parse_data_uri,
    pcm_to_wav,
)
from .resilient_client import (
    RequestDescriptor,
    RequestExhaustedError,
    ResilientInvoker,
    RetryPolicy,
    get_default_invoker,
)
from .response_contract import (
    EmptyResponseError,
    InvalidJsonResponseError,
    ResponseContractError,
    SchemaValidationError,
    parse_structured_output,
)
from .google_api import (
    GenerativeLanguageClient,
    SpeechSynthesisClient,
    UpstreamHttpError,
    get_generative_client,
    get_speech_client,
    inline_data_part,
    text_part,
)

__all__ = [
    "SILENT_WAV_DATA_URI",
    "DataUri",
    "InvalidAudioDataUriError",
    "encode_data_uri",
    "parse_data_uri",
    "pcm_to_wav",
    "RequestDescriptor",
    "RequestExhaustedError",
    "ResilientInvoker",
    "RetryPolicy",
    "get_default_invoker",
    "EmptyResponseError",
    "InvalidJsonResponseError",
    "ResponseContractError",
    "SchemaValidationError",
    "parse_structured_output",
    "GenerativeLanguageClient",
    "SpeechSynthesisClient",
    "UpstreamHttpError",
    "get_generative_client",
    "get_speech_client",
    "inline_data_part",
    "text_part",
]
