"""
Upload session endpoints: document preview and release
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from app.api.deps import get_session_service
from app.services.upload_session_service import UploadSessionService

router = APIRouter()


@router.get("/{session_id}/document")
async def get_session_document(
    session_id: str,
    sessions: UploadSessionService = Depends(get_session_service),
):
    """Serve the session's current upload for preview"""
    document = sessions.get_document(session_id)
    if document is None:
        return JSONResponse(status_code=404, content={"error": "No document for this session"})
    headers = {}
    if document.file_name:
        headers["Content-Disposition"] = f"inline; filename*=UTF-8''{quote(document.file_name)}"
    return Response(content=document.content, media_type=document.media_type, headers=headers)


@router.delete("/{session_id}")
async def release_session(
    session_id: str,
    sessions: UploadSessionService = Depends(get_session_service),
):
    """Release the session's document preview and cancel any running analysis"""
    return {"released": sessions.release(session_id)}
