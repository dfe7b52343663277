from __future__ import annotations

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class ShareLink(SQLModel, table=True):
    token: str = Field(primary_key=True)
    meeting_id: int = Field(index=True, foreign_key="meeting.id")
    include_transcript: bool = Field(default=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
