import json

import pytest
import requests

from recap.errors import MalformedResponse, ProviderError
from recap.models.transcript_segment import TranscriptSegment
from recap.services import summarization_service, transcription_service
from recap.services.summarization_service import ChatCompletionSummarizer, format_timestamp, render_transcript
from recap.services.transcription_service import WhisperApiTranscriber


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "7.m4a"
    path.write_bytes(b"\x00\x01")
    return path


def test_transcriber_sends_fixed_parameters(monkeypatch, audio_file):
    seen = {}

    def fake_post(url, headers=None, files=None, data=None, timeout=None):
        seen.update(url=url, headers=headers, data=data, timeout=timeout, filename=files["file"][0])
        return FakeResponse(payload={"text": "hi", "language": "en"})

    monkeypatch.setattr(transcription_service.requests, "post", fake_post)
    client = WhisperApiTranscriber(api_key="k", base_url="https://example.test/v1/", timeout=12)

    assert client.transcribe(audio_file) == {"text": "hi", "language": "en"}
    assert seen["url"] == "https://example.test/v1/audio/transcriptions"
    assert seen["headers"] == {"Authorization": "Bearer k"}
    assert seen["data"] == {"model": "whisper-large-v3", "response_format": "verbose_json", "language": "en"}
    assert seen["timeout"] == 12
    assert seen["filename"] == "7.m4a"


def test_transcriber_omits_empty_language(monkeypatch, audio_file):
    seen = {}

    def fake_post(url, headers=None, files=None, data=None, timeout=None):
        seen["data"] = data
        return FakeResponse(payload={"text": ""})

    monkeypatch.setattr(transcription_service.requests, "post", fake_post)
    WhisperApiTranscriber(api_key="k", language="").transcribe(audio_file)
    assert "language" not in seen["data"]


def test_transcriber_surfaces_upstream_status_and_body(monkeypatch, audio_file):
    monkeypatch.setattr(
        transcription_service.requests,
        "post",
        lambda *a, **kw: FakeResponse(status_code=413, text='{"error": "file too large"}'),
    )
    with pytest.raises(ProviderError) as info:
        WhisperApiTranscriber(api_key="k").transcribe(audio_file)
    assert info.value.status == 413
    assert info.value.body == '{"error": "file too large"}'
    assert "413" in str(info.value)


def test_transcriber_wraps_connection_errors(monkeypatch, audio_file):
    def boom(*a, **kw):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(transcription_service.requests, "post", boom)
    with pytest.raises(ProviderError) as info:
        WhisperApiTranscriber(api_key="k").transcribe(audio_file)
    assert info.value.status is None


def test_transcriber_rejects_non_json_success(monkeypatch, audio_file):
    monkeypatch.setattr(transcription_service.requests, "post", lambda *a, **kw: FakeResponse(text="<html>"))
    with pytest.raises(MalformedResponse):
        WhisperApiTranscriber(api_key="k").transcribe(audio_file)


def test_summarizer_requests_json_object_at_low_temperature(monkeypatch):
    seen = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        seen.update(url=url, body=json)
        return FakeResponse(payload={"choices": [{"message": {"content": '{"tl_dr": "ok"}'}}]})

    monkeypatch.setattr(summarization_service.requests, "post", fake_post)
    content = ChatCompletionSummarizer(api_key="k").summarize("[00:00] hello")

    assert content == '{"tl_dr": "ok"}'
    assert seen["url"].endswith("/chat/completions")
    body = seen["body"]
    assert body["response_format"] == {"type": "json_object"}
    assert body["temperature"] == pytest.approx(0.1)
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert "[00:00] hello" in body["messages"][1]["content"]
    assert "action_items" in body["messages"][0]["content"]


def test_summarizer_surfaces_upstream_error(monkeypatch):
    monkeypatch.setattr(
        summarization_service.requests, "post", lambda *a, **kw: FakeResponse(status_code=500, text="oops")
    )
    with pytest.raises(ProviderError) as info:
        ChatCompletionSummarizer(api_key="k").summarize("x")
    assert (info.value.status, info.value.body) == (500, "oops")


@pytest.mark.parametrize("payload", [{}, {"choices": []}, {"choices": [{"message": {}}]}, None])
def test_summarizer_rejects_broken_envelope(monkeypatch, payload):
    monkeypatch.setattr(
        summarization_service.requests, "post", lambda *a, **kw: FakeResponse(payload=payload, text="garbage")
    )
    with pytest.raises(MalformedResponse):
        ChatCompletionSummarizer(api_key="k").summarize("x")


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "[00:00]"), (59.99, "[00:59]"), (75.9, "[01:15]"), (3600, "[60:00]"), (6061, "[101:01]")],
)
def test_format_timestamp(seconds, expected):
    assert format_timestamp(seconds) == expected


def test_render_transcript_one_line_per_segment():
    segs = [
        TranscriptSegment(meeting_id=1, start_s=0.0, end_s=1.0, text="first"),
        TranscriptSegment(meeting_id=1, start_s=61.0, end_s=62.0, text="second"),
    ]
    assert render_transcript(segs) == "[00:00] first\n[01:01] second"
