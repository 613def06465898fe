"""
PDF Text Extractor
Converts an uploaded PDF into plain text with pypdf. Parsing is
deterministic, so failures are reported once and never retried.
"""

import asyncio
import io
import logging
from typing import List

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from app.core.errors import ExtractionError, PipelineErrorType
from app.schemas.document import ExtractedText, ExtractionStatus, RawDocument

logger = logging.getLogger(__name__)


class PdfTextExtractor:
    """
    Linear text extraction for PDF documents.

    `extract_sync` never raises for document problems; it returns an
    ExtractedText whose status is `failed` or `empty` instead. Call
    `raise_for_status()` on the result to turn that into a typed failure.
    """

    PAGE_SEPARATOR = "\n\n"

    def extract_sync(self, document: RawDocument) -> ExtractedText:
        """Parse the document in the current thread"""
        try:
            pages = self._read_pages(document.content)
        except ExtractionError as e:
            logger.warning(f"Could not parse PDF {document.short_id}: {e.message}")
            return ExtractedText(text="", status=ExtractionStatus.FAILED, error=e)

        text = self.PAGE_SEPARATOR.join(pages).strip()
        if not text:
            logger.info(f"PDF {document.short_id} has {len(pages)} pages but no extractable text")
            return ExtractedText(text="", status=ExtractionStatus.EMPTY, page_count=len(pages))

        logger.info(f"Extracted {len(text)} characters from {len(pages)} pages")
        return ExtractedText(text=text, status=ExtractionStatus.OK, page_count=len(pages))

    async def extract(self, document: RawDocument) -> ExtractedText:
        """Parse the document in a worker thread so the event loop stays responsive"""
        return await asyncio.to_thread(self.extract_sync, document)

    def _read_pages(self, content: bytes) -> List[str]:
        try:
            reader = PdfReader(io.BytesIO(content))
            if reader.is_encrypted and not reader.decrypt(""):
                raise ExtractionError(
                    "PDF is encrypted and cannot be opened without a password",
                    PipelineErrorType.PARSE_FAILURE,
                )
            return [(page.extract_text() or "").strip() for page in reader.pages]
        except ExtractionError:
            raise
        except PdfReadError as e:
            raise ExtractionError(
                f"pypdf could not read document: {e}",
                PipelineErrorType.PARSE_FAILURE,
                diagnostic=repr(e),
            ) from e
        except Exception as e:
            # pypdf surfaces malformed object streams as assorted builtin errors
            raise ExtractionError(
                f"Unexpected error while parsing PDF: {e}",
                PipelineErrorType.PARSE_FAILURE,
                diagnostic=repr(e),
            ) from e
