"""
Contract analysis endpoint
Sends already-extracted contract text to the reasoning service and returns
the normalized contract record.
"""

import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_pipeline
from app.schemas.api import ERROR_RESPONSES_DOC, ProcessTextRequest
from app.services.contract_analysis_pipeline import ContractAnalysisPipeline

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", responses=ERROR_RESPONSES_DOC)
async def process_text(
    body: ProcessTextRequest,
    pipeline: ContractAnalysisPipeline = Depends(get_pipeline),
):
    """
    Analyze contract text.

    Returns the contract record in its camelCase JSON shape, or
    `{"error": ...}` with a 4xx/5xx status.
    """
    record = await pipeline.analyze_text(body.text)
    return record.to_json_dict()


@router.options("")
async def process_text_preflight():
    """Capability check for cross-origin callers"""
    return {}
