from __future__ import annotations

from typing import Iterable
from sqlalchemy import delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from recap.errors import PersistenceError
from recap.models.transcript_segment import TranscriptSegment


class TranscriptsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def replace_for_meeting(self, meeting_id: int, segments: Iterable[TranscriptSegment]) -> int:
        """Drop any earlier segments of the meeting and insert ``segments``.

        Both happen in one transaction so a re-run never leaves two copies.
        """
        rows = list(segments)
        try:
            self.session.execute(delete(TranscriptSegment).where(TranscriptSegment.meeting_id == meeting_id))
            for seg in rows:
                seg.meeting_id = meeting_id
                self.session.add(seg)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to save segments: {exc}") from exc
        return len(rows)

    def list_by_meeting(self, meeting_id: int) -> list[TranscriptSegment]:
        statement = (
            select(TranscriptSegment)
            .where(TranscriptSegment.meeting_id == meeting_id)
            .order_by(TranscriptSegment.start_s.asc(), TranscriptSegment.id.asc())
        )
        return list(self.session.exec(statement))

    def count_for_meeting(self, meeting_id: int) -> int:
        statement = select(func.count(TranscriptSegment.id)).where(TranscriptSegment.meeting_id == meeting_id)
        return int(self.session.exec(statement).one())
