from __future__ import annotations

from typing import Optional, Any, Dict, List, Literal

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel
from sqlmodel import Session

from recap.deps import get_orchestrator, get_session, get_storage
from recap.errors import NotFound
from recap.models.meeting import Meeting, MeetingSource, MeetingStatus
from recap.repositories.action_items import ActionItemsRepository
from recap.repositories.meetings import MeetingsRepository
from recap.repositories.summaries import SummariesRepository
from recap.repositories.transcripts import TranscriptsRepository
from recap.services.pipeline import PipelineOrchestrator
from recap.services.storage import RecordingStorage
import logging
logger = logging.getLogger("recap.api")


router = APIRouter(prefix="/meetings", tags=["meetings"])


class UploadResponse(BaseModel):
    meeting_id: int


class UpdateMeetingRequest(BaseModel):
    title: Optional[str] = None


class StatusResponse(BaseModel):
    meeting_id: int
    status: MeetingStatus


class TranscribeResponse(BaseModel):
    ok: bool
    segment_count: int
    language: str


class SummaryCounts(BaseModel):
    decisions_count: int
    risks_count: int
    questions_count: int
    action_items_count: int


class WarningItem(BaseModel):
    code: str
    message: str


class SummarizeResponse(BaseModel):
    ok: bool
    summary: SummaryCounts
    warnings: List[WarningItem] = []


@router.post("")
def upload_meeting(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    source: Literal["manual", "zoom", "google_meet"] = Form("manual"),
    session: Session = Depends(get_session),
    storage: RecordingStorage = Depends(get_storage),
) -> UploadResponse:
    meeting = Meeting(
        title=(title or "").strip() or "Untitled meeting",
        source=MeetingSource(source).value,
        status=MeetingStatus.CREATED.value,
    )
    meeting = MeetingsRepository(session).create(meeting)
    storage.save(meeting.id, file.filename or "", file.file.read())
    logger.info("Meeting %s created from upload %s", meeting.id, file.filename)
    return UploadResponse(meeting_id=meeting.id)


@router.get("")
def list_meetings(
    limit: int = 50,
    offset: int = 0,
    search: Optional[str] = None,
    status: Optional[MeetingStatus] = None,
    session: Session = Depends(get_session),
) -> List[Meeting]:
    return MeetingsRepository(session).list(
        limit=limit,
        offset=offset,
        search=search,
        status=status.value if status else None,
    )


@router.get("/{meeting_id}")
def get_meeting_detail(meeting_id: int, session: Session = Depends(get_session)) -> Dict[str, Any]:
    meeting = MeetingsRepository(session).get(meeting_id)
    if meeting is None:
        raise NotFound(f"Meeting {meeting_id} not found")
    return {
        "meeting": meeting,
        "transcript_segments": TranscriptsRepository(session).list_by_meeting(meeting_id),
        "summary": SummariesRepository(session).get_by_meeting(meeting_id),
        "action_items": ActionItemsRepository(session).list_by_meeting(meeting_id),
    }


@router.get("/{meeting_id}/status")
def meeting_status(meeting_id: int, orchestrator: PipelineOrchestrator = Depends(get_orchestrator)) -> StatusResponse:
    return StatusResponse(meeting_id=meeting_id, status=orchestrator.status(meeting_id))


@router.post("/{meeting_id}/transcribe")
def transcribe_meeting(
    meeting_id: int, orchestrator: PipelineOrchestrator = Depends(get_orchestrator)
) -> TranscribeResponse:
    outcome = orchestrator.run_transcription(meeting_id)
    return TranscribeResponse(ok=True, segment_count=outcome.segment_count, language=outcome.language)


@router.post("/{meeting_id}/summarize")
def summarize_meeting(
    meeting_id: int, orchestrator: PipelineOrchestrator = Depends(get_orchestrator)
) -> SummarizeResponse:
    outcome = orchestrator.run_summarization(meeting_id)
    return SummarizeResponse(
        ok=True,
        summary=SummaryCounts(
            decisions_count=outcome.decisions_count,
            risks_count=outcome.risks_count,
            questions_count=outcome.questions_count,
            action_items_count=outcome.action_items_count,
        ),
        warnings=[WarningItem(code=w.code, message=w.message) for w in outcome.warnings],
    )


@router.put("/{meeting_id}")
def update_meeting(meeting_id: int, body: UpdateMeetingRequest, session: Session = Depends(get_session)) -> Meeting:
    repo_m = MeetingsRepository(session)
    meeting = repo_m.get(meeting_id)
    if meeting is None:
        raise NotFound(f"Meeting {meeting_id} not found")

    if body.title is not None:
        meeting.title = body.title
        meeting = repo_m.update(meeting)

    return meeting
