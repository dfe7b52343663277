from __future__ import annotations

import logging
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from recap.config import Settings
from recap.errors import MalformedResponse, ProviderError

logger = logging.getLogger("recap.providers")


class TranscriptionProvider(ABC):
    @abstractmethod
    def transcribe(self, audio_path: Path) -> Dict[str, Any]:
        """Return ``{"text": str, "segments": [...]?, "language": str?}`` for the audio file."""
        raise NotImplementedError


class WhisperApiTranscriber(TranscriptionProvider):
    """Hosted Whisper behind an OpenAI-compatible ``/audio/transcriptions`` endpoint."""

    name = "Transcription API"

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-large-v3",
        base_url: str = "https://api.groq.com/openai/v1",
        language: Optional[str] = "en",
        timeout: float = 300.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._language = language or None
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "WhisperApiTranscriber":
        return cls(
            api_key=settings.api_key,
            model=settings.transcription_model,
            base_url=settings.provider_base_url,
            language=settings.transcription_language,
            timeout=settings.transcription_timeout_s,
        )

    @property
    def language_hint(self) -> Optional[str]:
        return self._language

    def transcribe(self, audio_path: Path) -> Dict[str, Any]:
        path = Path(audio_path)
        mime = mimetypes.guess_type(path.name)[0] or "audio/mpeg"
        data: Dict[str, str] = {"model": self._model, "response_format": "verbose_json"}
        if self._language:
            data["language"] = self._language

        logger.info("Sending recording to transcription API", extra={"file": path.name, "model": self._model})
        try:
            with path.open("rb") as fh:
                response = requests.post(
                    f"{self._base_url}/audio/transcriptions",
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    files={"file": (path.name, fh, mime)},
                    data=data,
                    timeout=self._timeout,
                )
        except requests.RequestException as exc:
            raise ProviderError(self.name, None, str(exc)) from exc

        if not response.ok:
            logger.error("Transcription API error %s: %s", response.status_code, response.text[:500])
            raise ProviderError(self.name, response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponse("Transcription API returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise MalformedResponse("Transcription API returned an unexpected body")
        return payload
