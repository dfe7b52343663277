"""Meeting status transitions.

The table below is the only place that decides which pipeline trigger may fire
from which status, where a success lands and which status a failure falls back
to. Transcription failures land in ``error``; summarization failures fall
back to ``transcribed`` with the stored transcript untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from recap.errors import InvalidState
from recap.models.meeting import MeetingStatus


class Trigger(str, Enum):
    BEGIN_TRANSCRIPTION = "begin_transcription"
    FINISH_TRANSCRIPTION = "finish_transcription"
    BEGIN_SUMMARIZATION = "begin_summarization"
    FINISH_SUMMARIZATION = "finish_summarization"


@dataclass(frozen=True)
class Transition:
    source: MeetingStatus
    trigger: Trigger
    target: MeetingStatus
    on_failure: MeetingStatus


_TABLE: Dict[Tuple[MeetingStatus, Trigger], Transition] = {
    (t.source, t.trigger): t
    for t in [
        Transition(MeetingStatus.CREATED, Trigger.BEGIN_TRANSCRIPTION, MeetingStatus.PROCESSING, MeetingStatus.ERROR),
        Transition(MeetingStatus.PROCESSING, Trigger.FINISH_TRANSCRIPTION, MeetingStatus.TRANSCRIBED, MeetingStatus.ERROR),
        Transition(MeetingStatus.TRANSCRIBED, Trigger.BEGIN_SUMMARIZATION, MeetingStatus.PROCESSING, MeetingStatus.TRANSCRIBED),
        Transition(MeetingStatus.PROCESSING, Trigger.FINISH_SUMMARIZATION, MeetingStatus.SUMMARIZED, MeetingStatus.TRANSCRIBED),
    ]
}

_REQUIRED: Dict[Trigger, MeetingStatus] = {t.trigger: t.source for t in _TABLE.values()}

_ACTION_LABELS: Dict[Trigger, str] = {
    Trigger.BEGIN_TRANSCRIPTION: "start transcription",
    Trigger.FINISH_TRANSCRIPTION: "finish transcription",
    Trigger.BEGIN_SUMMARIZATION: "start summarization",
    Trigger.FINISH_SUMMARIZATION: "finish summarization",
}


def _coerce(status: MeetingStatus | str) -> MeetingStatus:
    return status if isinstance(status, MeetingStatus) else MeetingStatus(str(status))


def required_status(trigger: Trigger) -> MeetingStatus:
    return _REQUIRED[trigger]


def can_fire(current: MeetingStatus | str, trigger: Trigger) -> bool:
    return (_coerce(current), trigger) in _TABLE


def transition(current: MeetingStatus | str, trigger: Trigger) -> Transition:
    """Return the transition ``trigger`` takes from ``current``.

    Raises InvalidState naming the required status when the trigger is not
    allowed from ``current``.
    """
    status = _coerce(current)
    found = _TABLE.get((status, trigger))
    if found is None:
        raise InvalidState(
            f"Meeting must be '{required_status(trigger).value}' to {_ACTION_LABELS[trigger]}, "
            f"but it is '{status.value}'"
        )
    return found


def is_terminal(status: MeetingStatus | str) -> bool:
    s = _coerce(status)
    return not any(source == s for source, _ in _TABLE)
