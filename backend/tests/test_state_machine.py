import pytest

from recap.errors import InvalidState
from recap.models.meeting import MeetingStatus
from recap.services import state_machine
from recap.services.state_machine import Trigger


@pytest.mark.parametrize(
    "source,trigger,target,on_failure",
    [
        (MeetingStatus.CREATED, Trigger.BEGIN_TRANSCRIPTION, MeetingStatus.PROCESSING, MeetingStatus.ERROR),
        (MeetingStatus.PROCESSING, Trigger.FINISH_TRANSCRIPTION, MeetingStatus.TRANSCRIBED, MeetingStatus.ERROR),
        (MeetingStatus.TRANSCRIBED, Trigger.BEGIN_SUMMARIZATION, MeetingStatus.PROCESSING, MeetingStatus.TRANSCRIBED),
        (MeetingStatus.PROCESSING, Trigger.FINISH_SUMMARIZATION, MeetingStatus.SUMMARIZED, MeetingStatus.TRANSCRIBED),
    ],
)
def test_transition_table(source, trigger, target, on_failure):
    t = state_machine.transition(source, trigger)
    assert t.target == target
    assert t.on_failure == on_failure


def test_transition_accepts_stored_string_status():
    t = state_machine.transition("created", Trigger.BEGIN_TRANSCRIPTION)
    assert t.source is MeetingStatus.CREATED


@pytest.mark.parametrize("status", ["processing", "transcribed", "summarized", "error"])
def test_transcription_rejected_outside_created(status):
    assert not state_machine.can_fire(status, Trigger.BEGIN_TRANSCRIPTION)
    with pytest.raises(InvalidState) as info:
        state_machine.transition(status, Trigger.BEGIN_TRANSCRIPTION)
    assert "'created'" in str(info.value)
    assert f"'{status}'" in str(info.value)


def test_summarization_requires_transcribed():
    assert state_machine.required_status(Trigger.BEGIN_SUMMARIZATION) == MeetingStatus.TRANSCRIBED
    with pytest.raises(InvalidState, match="transcribed"):
        state_machine.transition(MeetingStatus.CREATED, Trigger.BEGIN_SUMMARIZATION)


def test_terminal_states():
    assert state_machine.is_terminal(MeetingStatus.SUMMARIZED)
    assert state_machine.is_terminal(MeetingStatus.ERROR)
    assert not state_machine.is_terminal(MeetingStatus.CREATED)
    assert not state_machine.is_terminal(MeetingStatus.PROCESSING)
    assert not state_machine.is_terminal(MeetingStatus.TRANSCRIBED)
