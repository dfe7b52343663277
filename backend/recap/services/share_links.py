from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from sqlmodel import Session

from recap.errors import InvalidState, LinkExpired, NotFound
from recap.models.meeting import MeetingStatus
from recap.models.share_link import ShareLink
from recap.repositories.action_items import ActionItemsRepository
from recap.repositories.meetings import MeetingsRepository
from recap.repositories.share_links import ShareLinksRepository
from recap.repositories.summaries import SummariesRepository
from recap.repositories.transcripts import TranscriptsRepository

logger = logging.getLogger("recap.share")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive values on some driver versions
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def generate_token() -> str:
    return secrets.token_hex(32)


def create_share_link(
    session: Session,
    meeting_id: int,
    expires_in_days: int,
    include_transcript: bool = True,
    now: Optional[datetime] = None,
) -> ShareLink:
    meeting = MeetingsRepository(session).get(meeting_id)
    if meeting is None:
        raise NotFound(f"Meeting {meeting_id} not found")
    if meeting.status == MeetingStatus.CREATED.value:
        raise InvalidState("Meeting must be processed before sharing")

    created = now or datetime.now(timezone.utc)
    link = ShareLink(
        token=generate_token(),
        meeting_id=meeting_id,
        include_transcript=include_transcript,
        expires_at=created + timedelta(days=expires_in_days),
        created_at=created,
    )
    link = ShareLinksRepository(session).create(link)
    logger.info("Share link created for meeting %s (token %s...)", meeting_id, link.token[:8])
    return link


def resolve_share_link(session: Session, token: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    link = ShareLinksRepository(session).get(token)
    if link is None:
        raise NotFound("Share link not found or expired")
    if (now or datetime.now(timezone.utc)) > _as_utc(link.expires_at):
        raise LinkExpired("Share link has expired")

    meeting = MeetingsRepository(session).get(link.meeting_id)
    if meeting is None:
        raise NotFound("Meeting not found")

    transcript = TranscriptsRepository(session).list_by_meeting(link.meeting_id) if link.include_transcript else []
    payload: Dict[str, Any] = {
        "meeting": {
            "id": meeting.id,
            "title": meeting.title,
            "status": meeting.status,
            "created_at": meeting.created_at,
        },
        "summary": SummariesRepository(session).get_by_meeting(link.meeting_id),
        "action_items": ActionItemsRepository(session).list_by_meeting(link.meeting_id),
        "transcript": transcript,
        "share_settings": {
            "include_transcript": link.include_transcript,
            "expires_at": link.expires_at,
        },
    }
    return payload
