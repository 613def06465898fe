"""
Text extraction endpoint
Accepts a multipart upload with the PDF under the `file` field.
"""

import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_extraction_pipeline, get_uploaded_document
from app.schemas.api import ERROR_RESPONSES_DOC, ExtractTextResponse
from app.schemas.document import RawDocument
from app.services.contract_analysis_pipeline import ContractAnalysisPipeline

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=ExtractTextResponse, responses=ERROR_RESPONSES_DOC)
async def extract_text(
    document: RawDocument = Depends(get_uploaded_document),
    pipeline: ContractAnalysisPipeline = Depends(get_extraction_pipeline),
):
    """
    Extract plain text from an uploaded PDF.

    Returns `{"text": ...}` or `{"error": ...}` with a 4xx/5xx status.
    """
    extracted = await pipeline.extract_text(document)
    return ExtractTextResponse(text=extracted.text)


@router.options("")
async def extract_text_preflight():
    """Capability check for cross-origin callers"""
    return {}
