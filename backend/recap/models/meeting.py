from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field


class MeetingStatus(str, Enum):
    CREATED = "created"
    PROCESSING = "processing"
    TRANSCRIBED = "transcribed"
    SUMMARIZED = "summarized"
    ERROR = "error"


class MeetingSource(str, Enum):
    MANUAL = "manual"
    ZOOM = "zoom"
    GOOGLE_MEET = "google_meet"


class Meeting(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(default="Untitled meeting")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    source: str = Field(default=MeetingSource.MANUAL.value)  # manual|zoom|google_meet
    status: str = Field(default=MeetingStatus.CREATED.value, index=True)
    language: Optional[str] = None
