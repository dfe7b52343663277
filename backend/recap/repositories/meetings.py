from __future__ import annotations

from typing import Dict, Optional
from sqlalchemy import func, or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from recap.errors import PersistenceError
from recap.models.action_item import ActionItem
from recap.models.meeting import Meeting, MeetingStatus
from recap.models.transcript_segment import TranscriptSegment


class MeetingsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, meeting: Meeting) -> Meeting:
        self.session.add(meeting)
        self._commit("create meeting")
        self.session.refresh(meeting)
        return meeting

    def get(self, meeting_id: int) -> Optional[Meeting]:
        return self.session.get(Meeting, meeting_id)

    def list(
        self,
        limit: int = 50,
        offset: int = 0,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Meeting]:
        statement = select(Meeting)
        if search:
            statement = statement.where(Meeting.title.contains(search, autoescape=True))
        if status:
            statement = statement.where(Meeting.status == status)
        statement = statement.order_by(Meeting.created_at.desc(), Meeting.id.desc()).limit(limit).offset(offset)
        return list(self.session.exec(statement))

    def update(self, meeting: Meeting) -> Meeting:
        self.session.add(meeting)
        self._commit("update meeting")
        self.session.refresh(meeting)
        return meeting

    def set_status(self, meeting_id: int, status: MeetingStatus, language: Optional[str] = None) -> None:
        values: Dict[str, object] = {"status": status.value}
        if language:
            values["language"] = language
        statement = update(Meeting).where(Meeting.id == meeting_id).values(**values)
        try:
            self.session.execute(statement)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to set meeting {meeting_id} status to {status.value}: {exc}") from exc

    def compare_and_set_status(self, meeting_id: int, expected: MeetingStatus, new: MeetingStatus) -> bool:
        """Move ``meeting_id`` from ``expected`` to ``new`` in one conditional UPDATE.

        Returns False when the row was not in ``expected`` (or does not exist),
        which callers treat as a lost race.
        """
        statement = (
            update(Meeting)
            .where(Meeting.id == meeting_id, Meeting.status == expected.value)
            .values(status=new.value)
        )
        try:
            result = self.session.execute(statement)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to update meeting {meeting_id} status: {exc}") from exc
        return result.rowcount == 1

    def stats(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in MeetingStatus}
        rows = self.session.exec(select(Meeting.status, func.count(Meeting.id)).group_by(Meeting.status))
        for status, count in rows:
            counts[str(status)] = int(count)
        total_items = self.session.exec(select(func.count(ActionItem.id))).one()
        total_segments = self.session.exec(select(func.count(TranscriptSegment.id))).one()
        return {
            "total": sum(counts.values()),
            **counts,
            "total_action_items": int(total_items),
            "total_segments": int(total_segments),
        }

    def _commit(self, what: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to {what}: {exc}") from exc
