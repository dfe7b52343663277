from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlmodel import Session

from recap.config import get_settings
from recap.deps import get_session
from recap.services.share_links import create_share_link, resolve_share_link


router = APIRouter(tags=["share"])


class ShareRequest(BaseModel):
    expires_in_days: Optional[int] = Field(default=None, ge=1, le=365)
    include_transcript: bool = True


class ShareResponse(BaseModel):
    ok: bool
    token: str
    share_url: str
    expires_at: datetime
    include_transcript: bool


@router.post("/meetings/{meeting_id}/share")
def share_meeting(
    meeting_id: int, body: ShareRequest | None = None, session: Session = Depends(get_session)
) -> ShareResponse:
    settings = get_settings()
    req = body or ShareRequest()
    link = create_share_link(
        session,
        meeting_id,
        expires_in_days=req.expires_in_days or settings.share_link_ttl_days,
        include_transcript=req.include_transcript,
    )
    return ShareResponse(
        ok=True,
        token=link.token,
        share_url=f"{settings.public_base_url.rstrip('/')}/share/{link.token}",
        expires_at=link.expires_at,
        include_transcript=link.include_transcript,
    )


@router.get("/shared/{token}")
def shared_meeting(token: str, session: Session = Depends(get_session)) -> Dict[str, Any]:
    return resolve_share_link(session, token)
