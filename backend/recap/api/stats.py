from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends
from sqlmodel import Session

from recap.deps import get_session
from recap.repositories.meetings import MeetingsRepository


router = APIRouter(tags=["stats"])


@router.get("/stats")
def meeting_stats(session: Session = Depends(get_session)) -> Dict[str, int]:
    return MeetingsRepository(session).stats()
