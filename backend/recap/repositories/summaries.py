from __future__ import annotations

from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from recap.errors import PersistenceError
from recap.models.summary import Summary


class SummariesRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert_for_meeting(
        self,
        meeting_id: int,
        tl_dr: str,
        decisions: List[Dict[str, Any]],
        risks: List[Dict[str, Any]],
        questions: List[Dict[str, Any]],
    ) -> Summary:
        summary = self.get_by_meeting(meeting_id)
        if summary is None:
            summary = Summary(meeting_id=meeting_id)
        summary.tl_dr = tl_dr
        summary.decisions = decisions
        summary.risks = risks
        summary.questions = questions
        try:
            self.session.add(summary)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to save summary: {exc}") from exc
        self.session.refresh(summary)
        return summary

    def get_by_meeting(self, meeting_id: int) -> Optional[Summary]:
        statement = select(Summary).where(Summary.meeting_id == meeting_id)
        return self.session.exec(statement).first()
