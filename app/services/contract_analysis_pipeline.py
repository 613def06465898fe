"""
Contract Analysis Pipeline
Complete pipeline: PDF → Text → Prompt → Reasoning service → Contract record
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.errors import ExtractionError, PipelineErrorType
from app.schemas.analysis import AnalysisRequest
from app.schemas.classification import ClassificationView
from app.schemas.contract import ContractRecord
from app.schemas.document import ExtractedText, RawDocument
from app.services.analysis_client import ReasoningClient
from app.services.contract_classifier import select_view
from app.services.pdf_text_extractor import PdfTextExtractor
from app.services.prompt_builder import build_analysis_request
from app.services.response_normalizer import normalize_reply

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything one upload produced"""
    record: ContractRecord
    view: ClassificationView
    extracted: ExtractedText


class ContractAnalysisPipeline:
    """
    Sequential pipeline for a single contract document.

    Steps:
    1. PDF → Text (pypdf)
    2. Text → Analysis request (fixed instructions + schema)
    3. Request → Raw reply (reasoning service)
    4. Raw reply → ContractRecord (normalizer)
    5. Record → ClassificationView

    A failure at any step raises the step's typed error and stops the
    pipeline; no default record is ever substituted.
    """

    def __init__(
        self,
        analysis_client: Optional[ReasoningClient] = None,
        extractor: Optional[PdfTextExtractor] = None,
        max_input_chars: Optional[int] = None,
        admission_gate: Optional[asyncio.Semaphore] = None,
    ):
        """
        Initialize pipeline.

        Args:
            analysis_client: Reasoning client (required for analysis steps)
            extractor: PDF text extractor (defaults to PdfTextExtractor)
            max_input_chars: Optional cap on contract text sent for analysis
            admission_gate: Optional semaphore bounding concurrent analysis calls
        """
        self.analysis_client = analysis_client
        self.extractor = extractor or PdfTextExtractor()
        self.max_input_chars = max_input_chars
        self.admission_gate = admission_gate

    async def extract_text(self, document: RawDocument) -> ExtractedText:
        """Step 1 only: returns an ok ExtractedText or raises the extraction failure"""
        logger.info(
            f"Extracting text from {document.file_name or 'upload'} "
            f"({document.size} bytes, checksum {document.short_id})"
        )
        extracted = await self.extractor.extract(document)
        return extracted.raise_for_status()

    async def analyze_text(self, text: str) -> ContractRecord:
        """Steps 2-4: text → request → reply → record"""
        if not text or not text.strip():
            raise ExtractionError(
                "Contract text is empty",
                PipelineErrorType.INVALID_INPUT,
                user_message="Contract text is empty",
            )
        if self.analysis_client is None:
            raise RuntimeError("ContractAnalysisPipeline was built without an analysis client")

        logger.info("Building analysis request...")
        request = build_analysis_request(text, max_chars=self.max_input_chars)

        logger.info("Calling reasoning service...")
        reply = await self._complete(request)

        logger.info("Normalizing reply...")
        return normalize_reply(reply)

    async def process_document(self, document: RawDocument) -> PipelineResult:
        """Run the whole pipeline for one uploaded document"""
        logger.info("Starting contract analysis pipeline...")
        extracted = await self.extract_text(document)
        record = await self.analyze_text(extracted.text)
        view = select_view(record)
        logger.info(
            f"Pipeline complete: state={view.state.value}, "
            f"manual_review={view.needs_manual_review}, high_risks={view.has_high_risks}"
        )
        return PipelineResult(record=record, view=view, extracted=extracted)

    async def _complete(self, request: AnalysisRequest):
        if self.admission_gate is None:
            return await self.analysis_client.complete(request)
        async with self.admission_gate:
            return await self.analysis_client.complete(request)
