from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Summary(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    meeting_id: int = Field(index=True, foreign_key="meeting.id")
    tl_dr: str = ""
    # Lists are stored as the provider returned them: decisions carry
    # decision/context/confidence, risks risk/impact/likelihood, questions
    # question/category/urgency.
    decisions: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    risks: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    questions: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
