"""
Shared FastAPI dependencies.
Only this module reads the global settings; services receive explicit values.
"""

import asyncio
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, File, UploadFile

from app.core.config import Settings, settings
from app.core.errors import ExtractionError, PipelineErrorType
from app.schemas.document import RawDocument
from app.services.analysis_client import AnalysisClient, ReasoningClient
from app.services.contract_analysis_pipeline import ContractAnalysisPipeline
from app.services.pdf_text_extractor import PdfTextExtractor
from app.services.upload_session_service import UploadSessionService

logger = logging.getLogger(__name__)

_session_service = UploadSessionService()


def get_settings() -> Settings:
    return settings


def get_session_service() -> UploadSessionService:
    """Dependency to get the process-wide upload session registry"""
    return _session_service


@lru_cache(maxsize=1)
def _admission_gate(limit: Optional[int]) -> Optional[asyncio.Semaphore]:
    if not limit or limit <= 0:
        return None
    logger.info(f"Limiting concurrent analysis calls to {limit}")
    return asyncio.Semaphore(limit)


def get_analysis_client(app_settings: Settings = Depends(get_settings)) -> ReasoningClient:
    """Dependency to build the reasoning client from configuration"""
    return AnalysisClient(
        api_key=app_settings.OPENAI_API_KEY,
        model=app_settings.ANALYSIS_MODEL,
        timeout=app_settings.ANALYSIS_TIMEOUT_SECONDS,
        temperature=app_settings.ANALYSIS_TEMPERATURE,
        json_mode=app_settings.ANALYSIS_JSON_MODE,
    )


def get_extraction_pipeline() -> ContractAnalysisPipeline:
    """Pipeline without a reasoning client, for text extraction only"""
    return ContractAnalysisPipeline(extractor=PdfTextExtractor())


def get_pipeline(
    analysis_client: ReasoningClient = Depends(get_analysis_client),
    app_settings: Settings = Depends(get_settings),
) -> ContractAnalysisPipeline:
    """Dependency to get a full analysis pipeline"""
    return ContractAnalysisPipeline(
        analysis_client=analysis_client,
        extractor=PdfTextExtractor(),
        max_input_chars=app_settings.ANALYSIS_MAX_INPUT_CHARS,
        admission_gate=_admission_gate(app_settings.ANALYSIS_MAX_CONCURRENCY),
    )


async def read_upload(file: Optional[UploadFile], max_size_bytes: int) -> RawDocument:
    """
    Read an uploaded file into a RawDocument without buffering more than
    one byte past the configured limit.

    Raises:
        ExtractionError: INVALID_INPUT for a missing, oversize, empty or non-PDF file
    """
    if file is None or not isinstance(file.filename, str):
        raise ExtractionError("No file in upload", PipelineErrorType.INVALID_INPUT)
    try:
        content = await file.read(max_size_bytes + 1)
    finally:
        await file.close()
    return RawDocument.from_upload(
        content,
        file.content_type,
        file.filename,
        max_size_bytes=max_size_bytes,
    )


async def get_uploaded_document(
    file: Optional[UploadFile] = File(None, description="PDF contract file"),
    app_settings: Settings = Depends(get_settings),
) -> RawDocument:
    """
    Dependency that validates the upload. List it before pipeline
    dependencies so upload errors win over service configuration errors.
    """
    return await read_upload(file, app_settings.max_upload_size_bytes)
