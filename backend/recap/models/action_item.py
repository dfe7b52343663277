from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field


class ActionItemStatus(str, Enum):
    PENDING = "pending"
    SYNCED = "synced"
    DONE = "done"


class ActionItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    meeting_id: int = Field(index=True, foreign_key="meeting.id")
    title: str
    assignee: Optional[str] = None  # None -> unassigned
    due_date: Optional[str] = None  # None -> no date
    priority: Optional[str] = None  # high|medium|low
    source_quote: Optional[str] = None
    status: str = Field(default=ActionItemStatus.PENDING.value)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
