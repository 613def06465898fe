"""
Typed pipeline failures.

Each stage raises its own failure kind so the API boundary can map it to a
short, specific message. The diagnostic (raw reply, upstream error text) is
kept on the exception for logging and is never returned to the client.
"""

from enum import Enum
from typing import Optional


class PipelineErrorType(str, Enum):
    """Failure kinds, grouped by the stage that raises them"""
    # Extraction
    INVALID_INPUT = "invalid_input"
    PARSE_FAILURE = "parse_failure"
    EMPTY_RESULT = "empty_result"
    # Reasoning service
    AUTH_FAILURE = "auth_failure"
    QUOTA_EXCEEDED = "quota_exceeded"
    SERVICE_UNAVAILABLE = "service_unavailable"
    UNEXPECTED_RESPONSE_SHAPE = "unexpected_response_shape"
    # Normalization
    MALFORMED_REPLY = "malformed_reply"
    # Sessions
    SUPERSEDED = "superseded"


# error_type -> (HTTP status, user-facing message)
ERROR_RESPONSES = {
    PipelineErrorType.INVALID_INPUT: (400, "No file provided or invalid file"),
    PipelineErrorType.PARSE_FAILURE: (422, "Could not extract text from the PDF"),
    PipelineErrorType.EMPTY_RESULT: (422, "No extractable text found in the PDF"),
    PipelineErrorType.AUTH_FAILURE: (502, "Analysis service is not configured correctly"),
    PipelineErrorType.QUOTA_EXCEEDED: (429, "Analysis service quota exceeded, please try again later"),
    PipelineErrorType.SERVICE_UNAVAILABLE: (503, "Analysis service unavailable"),
    PipelineErrorType.UNEXPECTED_RESPONSE_SHAPE: (502, "Analysis service returned an unexpected response"),
    PipelineErrorType.MALFORMED_REPLY: (502, "Response could not be parsed"),
    PipelineErrorType.SUPERSEDED: (409, "Upload was replaced by a newer upload"),
}


class ContractPipelineError(Exception):
    """Base failure for every pipeline stage"""

    def __init__(
        self,
        message: str,
        error_type: PipelineErrorType,
        user_message: Optional[str] = None,
        status_code: Optional[int] = None,
        diagnostic: Optional[str] = None,
        retry_after: Optional[float] = None,
    ):
        self.message = message
        self.error_type = error_type
        default_status, default_message = ERROR_RESPONSES[error_type]
        self.user_message = user_message or default_message
        self.status_code = status_code or default_status
        self.diagnostic = diagnostic
        self.retry_after = retry_after
        super().__init__(self.message)


class ExtractionError(ContractPipelineError):
    """InvalidInput, ParseFailure or EmptyResult"""


class AnalysisServiceError(ContractPipelineError):
    """AuthFailure, QuotaExceeded, ServiceUnavailable or UnexpectedResponseShape"""


class MalformedReplyError(ContractPipelineError):
    """The reasoning service reply could not be turned into a contract record"""

    def __init__(self, message: str, raw_reply: str):
        super().__init__(
            message,
            PipelineErrorType.MALFORMED_REPLY,
            diagnostic=raw_reply,
        )
        self.raw_reply = raw_reply


class SupersededError(ContractPipelineError):
    """A newer upload for the same session cancelled this one"""

    def __init__(self, session_id: str):
        super().__init__(
            f"Pipeline for session {session_id} was superseded",
            PipelineErrorType.SUPERSEDED,
        )
        self.session_id = session_id
