"""Drives a meeting through transcription and summarization.

Both runs follow the same shape: check the status, move to ``processing``,
call the provider, persist, move to the success status. Anything that fails
after ``processing`` was entered is compensated by writing the transition's
failure status before the original error propagates.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from recap.errors import EmptyTranscript, InvalidState, MalformedResponse, MissingAsset, NotFound
from recap.models.action_item import ActionItem, ActionItemStatus
from recap.models.meeting import Meeting, MeetingStatus
from recap.models.transcript_segment import TranscriptSegment
from recap.repositories.action_items import ActionItemsRepository
from recap.repositories.meetings import MeetingsRepository
from recap.repositories.summaries import SummariesRepository
from recap.repositories.transcripts import TranscriptsRepository
from recap.services import state_machine
from recap.services.segment_normalizer import normalize_segments
from recap.services.state_machine import Transition, Trigger
from recap.services.storage import RecordingStorage
from recap.services.summarization_service import SummarizationProvider, render_transcript
from recap.services.transcription_service import TranscriptionProvider

logger = logging.getLogger("recap.pipeline")

UNASSIGNED = "unassigned"
NO_DATE = "no date"


@dataclass(frozen=True)
class PipelineWarning:
    code: str
    message: str


@dataclass
class TranscriptionOutcome:
    segment_count: int
    language: str


@dataclass
class SummarizationOutcome:
    decisions_count: int
    risks_count: int
    questions_count: int
    action_items_count: int
    warnings: List[PipelineWarning] = field(default_factory=list)


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else []


def _none_if(value: Any, sentinel: str) -> Optional[str]:
    if value is None or value == sentinel:
        return None
    return str(value)


def normalize_action_item(raw: Dict[str, Any]) -> ActionItem:
    """Build an ActionItem row from one provider entry, mapping sentinel strings to None."""
    priority = raw.get("priority")
    quote = raw.get("source_quote")
    return ActionItem(
        meeting_id=0,
        title=str(raw.get("task") or ""),
        assignee=_none_if(raw.get("assignee"), UNASSIGNED),
        due_date=_none_if(raw.get("due_date"), NO_DATE),
        priority=str(priority) if priority is not None else None,
        source_quote=str(quote) if quote is not None else None,
        status=ActionItemStatus.PENDING.value,
    )


class PipelineOrchestrator:
    def __init__(
        self,
        meetings: MeetingsRepository,
        transcripts: TranscriptsRepository,
        summaries: SummariesRepository,
        action_items: ActionItemsRepository,
        storage: RecordingStorage,
        transcriber: TranscriptionProvider,
        summarizer: SummarizationProvider,
        language_hint: Optional[str] = None,
    ) -> None:
        self.meetings = meetings
        self.transcripts = transcripts
        self.summaries = summaries
        self.action_items = action_items
        self.storage = storage
        self.transcriber = transcriber
        self.summarizer = summarizer
        self.language_hint = language_hint

    def status(self, meeting_id: int) -> MeetingStatus:
        return MeetingStatus(self._load(meeting_id).status)

    def run_transcription(self, meeting_id: int) -> TranscriptionOutcome:
        meeting = self._load(meeting_id)
        begin = self._enter_processing(meeting, Trigger.BEGIN_TRANSCRIPTION)
        logger.info("Transcription started for meeting %s", meeting_id)

        try:
            audio_path = self.storage.find(meeting_id)
            if audio_path is None:
                raise MissingAsset(f"Recording file for meeting {meeting_id} not found in storage")

            response = self.transcriber.transcribe(audio_path)
            segments = normalize_segments(response)
            rows = [
                TranscriptSegment(
                    meeting_id=meeting_id,
                    start_s=seg.start_s,
                    end_s=seg.end_s,
                    speaker=seg.speaker,
                    text=seg.text,
                )
                for seg in segments
            ]
            self.transcripts.replace_for_meeting(meeting_id, rows)

            language = str(response.get("language") or self.language_hint or "unknown")
            finish = state_machine.transition(MeetingStatus.PROCESSING, Trigger.FINISH_TRANSCRIPTION)
            self.meetings.set_status(meeting_id, finish.target, language=language)
        except Exception:
            self._compensate(meeting_id, begin)
            raise

        logger.info("Transcription finished for meeting %s: %d segments", meeting_id, len(rows))
        return TranscriptionOutcome(segment_count=len(rows), language=language)

    def run_summarization(self, meeting_id: int) -> SummarizationOutcome:
        meeting = self._load(meeting_id)
        state_machine.transition(meeting.status, Trigger.BEGIN_SUMMARIZATION)
        segments = self.transcripts.list_by_meeting(meeting_id)
        if not segments:
            raise EmptyTranscript(f"No transcript found for meeting {meeting_id}. Please transcribe first.")

        begin = self._enter_processing(meeting, Trigger.BEGIN_SUMMARIZATION)
        logger.info("Summarization started for meeting %s (%d segments)", meeting_id, len(segments))

        warnings: List[PipelineWarning] = []
        try:
            content = self.summarizer.summarize(render_transcript(segments))
            try:
                parsed = json.loads(content)
            except (TypeError, ValueError) as exc:
                logger.error("Summarization returned invalid JSON: %s", str(content)[:500])
                raise MalformedResponse("Invalid JSON response from summarization provider") from exc
            if not isinstance(parsed, dict):
                raise MalformedResponse("Summarization provider did not return a JSON object")

            decisions = _as_list(parsed.get("decisions"))
            risks = _as_list(parsed.get("risks"))
            questions = _as_list(parsed.get("questions"))
            raw_items = [item for item in _as_list(parsed.get("action_items")) if isinstance(item, dict)]

            self.summaries.upsert_for_meeting(
                meeting_id,
                tl_dr=str(parsed.get("tl_dr") or ""),
                decisions=decisions,
                risks=risks,
                questions=questions,
            )

            if raw_items:
                try:
                    self.action_items.replace_for_meeting(
                        meeting_id, [normalize_action_item(item) for item in raw_items]
                    )
                except Exception as exc:
                    logger.exception("Saving action items failed for meeting %s", meeting_id)
                    warnings.append(PipelineWarning(code="action_items_not_saved", message=str(exc)))

            finish = state_machine.transition(MeetingStatus.PROCESSING, Trigger.FINISH_SUMMARIZATION)
            self.meetings.set_status(meeting_id, finish.target)
        except Exception:
            self._compensate(meeting_id, begin)
            raise

        logger.info("Summarization finished for meeting %s", meeting_id)
        return SummarizationOutcome(
            decisions_count=len(decisions),
            risks_count=len(risks),
            questions_count=len(questions),
            action_items_count=len(raw_items),
            warnings=warnings,
        )

    def _load(self, meeting_id: int) -> Meeting:
        meeting = self.meetings.get(meeting_id)
        if meeting is None:
            raise NotFound(f"Meeting {meeting_id} not found")
        return meeting

    def _enter_processing(self, meeting: Meeting, trigger: Trigger) -> Transition:
        begin = state_machine.transition(meeting.status, trigger)
        if not self.meetings.compare_and_set_status(meeting.id, begin.source, begin.target):
            raise InvalidState(
                f"Meeting {meeting.id} is no longer '{begin.source.value}'; it was already picked up"
            )
        return begin

    def _compensate(self, meeting_id: int, begin: Transition) -> None:
        logger.warning(
            "Pipeline step failed for meeting %s, moving status to %s", meeting_id, begin.on_failure.value
        )
        try:
            self.meetings.set_status(meeting_id, begin.on_failure)
        except Exception:
            logger.exception("Failed to update status of meeting %s to %s", meeting_id, begin.on_failure.value)
