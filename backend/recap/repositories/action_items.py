from __future__ import annotations

from typing import Iterable, List, Optional
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from recap.errors import PersistenceError
from recap.models.action_item import ActionItem, ActionItemStatus


class ActionItemsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def replace_for_meeting(self, meeting_id: int, items: Iterable[ActionItem]) -> List[ActionItem]:
        # Simple approach: delete existing then insert, in one transaction
        saved: List[ActionItem] = []
        try:
            self.session.execute(delete(ActionItem).where(ActionItem.meeting_id == meeting_id))
            for item in items:
                item.meeting_id = meeting_id
                self.session.add(item)
                saved.append(item)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to save action items: {exc}") from exc
        for item in saved:
            self.session.refresh(item)
        return saved

    def list_by_meeting(self, meeting_id: int) -> list[ActionItem]:
        statement = (
            select(ActionItem)
            .where(ActionItem.meeting_id == meeting_id)
            .order_by(ActionItem.created_at.asc(), ActionItem.id.asc())
        )
        return list(self.session.exec(statement))

    def get(self, item_id: int) -> Optional[ActionItem]:
        return self.session.get(ActionItem, item_id)

    def set_status(self, item: ActionItem, status: ActionItemStatus) -> ActionItem:
        item.status = status.value
        try:
            self.session.add(item)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to update action item {item.id}: {exc}") from exc
        self.session.refresh(item)
        return item
