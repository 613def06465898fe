"""
One-shot analyze endpoint
Upload a PDF and get the contract record plus its classification view.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form

from app.api.deps import get_pipeline, get_session_service, get_uploaded_document
from app.schemas.api import ERROR_RESPONSES_DOC, AnalyzeResponse
from app.schemas.document import RawDocument
from app.services.contract_analysis_pipeline import ContractAnalysisPipeline
from app.services.upload_session_service import UploadSessionService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=AnalyzeResponse, responses=ERROR_RESPONSES_DOC)
async def analyze_contract(
    document: RawDocument = Depends(get_uploaded_document),
    session_id: Optional[str] = Form(None, description="Existing session to replace the upload of"),
    pipeline: ContractAnalysisPipeline = Depends(get_pipeline),
    sessions: UploadSessionService = Depends(get_session_service),
):
    """
    Run the full pipeline on an uploaded contract.

    Uploading again with the same `session_id` cancels any analysis still
    running for that session and releases its previous document.
    """
    session_id = session_id or sessions.new_session_id()

    result = await sessions.run_upload(session_id, document, pipeline)
    return AnalyzeResponse(
        session_id=session_id,
        record=result.record.to_json_dict(),
        view=result.view,
    )
