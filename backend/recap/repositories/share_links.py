from __future__ import annotations

from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from recap.errors import PersistenceError
from recap.models.share_link import ShareLink


class ShareLinksRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, link: ShareLink) -> ShareLink:
        try:
            self.session.add(link)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Failed to create share link: {exc}") from exc
        self.session.refresh(link)
        return link

    def get(self, token: str) -> Optional[ShareLink]:
        return self.session.get(ShareLink, token)
