"""
Upload session service
Tracks, per session, the current uploaded document (served back as a
preview), the in-flight pipeline task and the latest contract record.
Starting a new upload supersedes the previous one: its task is cancelled
and its preview released.
"""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from app.core.errors import SupersededError
from app.schemas.contract import ContractRecord
from app.schemas.document import RawDocument
from app.services.contract_analysis_pipeline import ContractAnalysisPipeline, PipelineResult

logger = logging.getLogger(__name__)


@dataclass
class UploadSession:
    session_id: str
    document: Optional[RawDocument] = None
    record: Optional[ContractRecord] = None
    task: Optional[asyncio.Task] = None

    def cancel_pending(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()
        self.task = None

    def release_document(self) -> None:
        self.document = None
        self.record = None


class UploadSessionService:
    """In-memory session registry. Nothing here is persisted."""

    DEFAULT_MAX_SESSIONS = 1000

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, UploadSession]" = OrderedDict()

    @staticmethod
    def new_session_id() -> str:
        return str(uuid4())

    def get(self, session_id: str) -> Optional[UploadSession]:
        return self._sessions.get(session_id)

    def get_document(self, session_id: str) -> Optional[RawDocument]:
        session = self._sessions.get(session_id)
        return session.document if session else None

    def _open(self, session_id: str) -> UploadSession:
        session = self._sessions.get(session_id)
        if session is None:
            session = UploadSession(session_id=session_id)
            self._sessions[session_id] = session
            while len(self._sessions) > self.max_sessions:
                evicted_id, evicted = self._sessions.popitem(last=False)
                evicted.cancel_pending()
                evicted.release_document()
                logger.info(f"Evicted idle upload session {evicted_id}")
        else:
            self._sessions.move_to_end(session_id)
        return session

    async def run_upload(
        self,
        session_id: str,
        document: RawDocument,
        pipeline: ContractAnalysisPipeline,
    ) -> PipelineResult:
        """
        Make `document` the session's current upload and run the pipeline on it.

        Raises:
            SupersededError: If another upload (or a release) for the same
                session replaced this one before it finished
            ContractPipelineError: Any pipeline stage failure
        """
        session = self._open(session_id)
        if session.task is not None and not session.task.done():
            logger.info(f"Session {session_id}: new upload supersedes in-flight analysis")
        session.cancel_pending()
        session.release_document()

        session.document = document
        task = asyncio.create_task(pipeline.process_document(document))
        session.task = task

        try:
            result = await task
        except asyncio.CancelledError:
            if session.task is task and self._sessions.get(session_id) is session:
                # The caller itself was cancelled; abandon the remote call too
                task.cancel()
                session.task = None
                raise
            raise SupersededError(session_id)

        if session.task is not task or self._sessions.get(session_id) is not session:
            raise SupersededError(session_id)

        session.task = None
        session.record = result.record
        return result

    def release(self, session_id: str) -> bool:
        """Cancel in-flight work and drop the session's preview and record"""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.cancel_pending()
        session.release_document()
        logger.info(f"Released upload session {session_id}")
        return True
