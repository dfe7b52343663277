from __future__ import annotations

from typing import Iterator

from fastapi import Depends
from sqlmodel import Session

from recap.config import get_settings
from recap.models.base import engine
from recap.repositories.action_items import ActionItemsRepository
from recap.repositories.meetings import MeetingsRepository
from recap.repositories.summaries import SummariesRepository
from recap.repositories.transcripts import TranscriptsRepository
from recap.services.pipeline import PipelineOrchestrator
from recap.services.storage import RecordingStorage
from recap.services.summarization_service import ChatCompletionSummarizer
from recap.services.transcription_service import WhisperApiTranscriber


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session


def get_storage() -> RecordingStorage:
    return RecordingStorage(get_settings().audio_dir)


def get_orchestrator(
    session: Session = Depends(get_session),
    storage: RecordingStorage = Depends(get_storage),
) -> PipelineOrchestrator:
    settings = get_settings()
    transcriber = WhisperApiTranscriber.from_settings(settings)
    return PipelineOrchestrator(
        meetings=MeetingsRepository(session),
        transcripts=TranscriptsRepository(session),
        summaries=SummariesRepository(session),
        action_items=ActionItemsRepository(session),
        storage=storage,
        transcriber=transcriber,
        summarizer=ChatCompletionSummarizer.from_settings(settings),
        language_hint=transcriber.language_hint,
    )
