from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from recap.deps import get_session
from recap.errors import NotFound
from recap.models.action_item import ActionItem, ActionItemStatus
from recap.repositories.action_items import ActionItemsRepository


router = APIRouter(prefix="/action-items", tags=["action-items"])


class UpdateActionItemRequest(BaseModel):
    status: Literal["pending", "synced", "done"]


@router.patch("/{item_id}")
def update_action_item(item_id: int, body: UpdateActionItemRequest, session: Session = Depends(get_session)) -> ActionItem:
    repo = ActionItemsRepository(session)
    item = repo.get(item_id)
    if item is None:
        raise NotFound(f"Action item {item_id} not found")
    return repo.set_status(item, ActionItemStatus(body.status))
