"""
HTTP request/response schemas
"""

from typing import Any, Dict

from pydantic import BaseModel, Field

from app.schemas.classification import ClassificationView


class ProcessTextRequest(BaseModel):
    """Body of POST /api/process-text"""
    text: str = Field(..., description="Contract text extracted from the uploaded document")


class ExtractTextResponse(BaseModel):
    text: str = Field(..., description="Plain text extracted from the PDF")


class AnalyzeResponse(BaseModel):
    """Result of the one-shot upload-and-analyze endpoint"""
    session_id: str = Field(..., description="Session that owns the uploaded document")
    record: Dict[str, Any] = Field(..., description="Contract record in its camelCase JSON shape")
    view: ClassificationView


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Short user-facing failure message")


# OpenAPI documentation for the failure statuses pipeline endpoints can return
ERROR_RESPONSES_DOC = {
    status: {"model": ErrorResponse}
    for status in (400, 409, 413, 422, 429, 502, 503)
}
