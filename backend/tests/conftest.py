import os
import sys
from pathlib import Path

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are cached on first use, so point them somewhere harmless before any import
os.environ.setdefault("RECAP_HOME", str(ROOT / ".pytest-recap-home"))
os.environ.setdefault("RECAP_API_KEY", "test-key")

from fakes import FakeSummarizer, FakeTranscriber  # noqa: E402
from recap.models.base import init_db  # noqa: E402
from recap.models.meeting import Meeting, MeetingStatus  # noqa: E402
from recap.repositories.action_items import ActionItemsRepository  # noqa: E402
from recap.repositories.meetings import MeetingsRepository  # noqa: E402
from recap.repositories.summaries import SummariesRepository  # noqa: E402
from recap.repositories.transcripts import TranscriptsRepository  # noqa: E402
from recap.services.pipeline import PipelineOrchestrator  # noqa: E402
from recap.services.storage import RecordingStorage  # noqa: E402


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def storage(tmp_path):
    return RecordingStorage(tmp_path / "recordings")


@pytest.fixture
def make_meeting(session, storage):
    def _make(status=MeetingStatus.CREATED, title="Weekly sync", with_recording=True):
        meeting = MeetingsRepository(session).create(Meeting(title=title, status=status.value))
        if with_recording:
            storage.save(meeting.id, "recording.mp3", b"fake-audio")
        return meeting.id

    return _make


@pytest.fixture
def current_status(session):
    def _status(meeting_id):
        session.expire_all()
        return MeetingsRepository(session).get(meeting_id).status

    return _status


@pytest.fixture
def build_orchestrator(session, storage):
    def _build(transcriber=None, summarizer=None, **overrides):
        kwargs = dict(
            meetings=MeetingsRepository(session),
            transcripts=TranscriptsRepository(session),
            summaries=SummariesRepository(session),
            action_items=ActionItemsRepository(session),
            storage=storage,
            transcriber=transcriber or FakeTranscriber(),
            summarizer=summarizer or FakeSummarizer(),
            language_hint="en",
        )
        kwargs.update(overrides)
        return PipelineOrchestrator(**kwargs)

    return _build
