"""
Document schemas: the uploaded file and the text extracted from it
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from app.core.errors import ContractPipelineError, ExtractionError, PipelineErrorType
from app.utils.checksum import calculate_checksum, short_checksum

PDF_MEDIA_TYPES = frozenset({"application/pdf", "application/x-pdf", "application/acrobat"})
GENERIC_MEDIA_TYPES = frozenset({"application/octet-stream", "binary/octet-stream", ""})


@dataclass(frozen=True)
class RawDocument:
    """Immutable uploaded document. Build it with `from_upload` so limits are enforced."""
    content: bytes = field(repr=False)
    media_type: str
    file_name: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def checksum(self) -> str:
        return calculate_checksum(self.content)

    @property
    def short_id(self) -> str:
        return short_checksum(self.content)

    @classmethod
    def from_upload(
        cls,
        content: bytes,
        media_type: Optional[str],
        file_name: Optional[str] = None,
        *,
        max_size_bytes: int,
    ) -> "RawDocument":
        """
        Validate an upload at the file boundary.

        Raises:
            ExtractionError: INVALID_INPUT when the buffer is empty, the declared
                media type is not PDF-compatible, or the size exceeds the limit
        """
        if not content:
            raise ExtractionError("Uploaded file is empty", PipelineErrorType.INVALID_INPUT)

        if len(content) > max_size_bytes:
            max_mb = max_size_bytes / (1024 * 1024)
            raise ExtractionError(
                f"Uploaded file is {len(content)} bytes, limit is {max_size_bytes}",
                PipelineErrorType.INVALID_INPUT,
                user_message=f"File too large (max {max_mb:g} MB)",
                status_code=413,
            )

        normalized_type = (media_type or "").split(";", 1)[0].strip().lower()
        if normalized_type not in PDF_MEDIA_TYPES:
            looks_like_pdf_name = bool(file_name) and file_name.lower().endswith(".pdf")
            if not (normalized_type in GENERIC_MEDIA_TYPES and looks_like_pdf_name):
                raise ExtractionError(
                    f"Unsupported media type {media_type!r} for file {file_name!r}",
                    PipelineErrorType.INVALID_INPUT,
                    user_message="File must be a PDF",
                )
            normalized_type = "application/pdf"

        return cls(content=bytes(content), media_type=normalized_type, file_name=file_name)


class ExtractionStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class ExtractedText:
    """Text pulled out of a document plus a status flag"""
    text: str
    status: ExtractionStatus
    page_count: int = 0
    error: Optional[ContractPipelineError] = None

    @property
    def ok(self) -> bool:
        return self.status is ExtractionStatus.OK

    def raise_for_status(self) -> "ExtractedText":
        """Raise the typed failure matching the status, or return self when ok"""
        if self.status is ExtractionStatus.EMPTY:
            raise ExtractionError(
                f"Document parsed ({self.page_count} pages) but contains no extractable text",
                PipelineErrorType.EMPTY_RESULT,
            )
        if self.status is ExtractionStatus.FAILED:
            if self.error is not None:
                raise self.error
            raise ExtractionError("Text extraction failed", PipelineErrorType.PARSE_FAILURE)
        return self
