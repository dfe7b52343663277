from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

import requests

from recap.config import Settings
from recap.errors import MalformedResponse, ProviderError
from recap.models.transcript_segment import TranscriptSegment

logger = logging.getLogger("recap.providers")


SYSTEM_PROMPT = """You are an expert meeting analyst. Analyze the meeting transcript and extract key information in JSON format.

Your task is to identify:
1. A concise TL;DR summary (2-3 sentences max)
2. Key decisions made (with context and confidence level 0.0-1.0)
3. Risks mentioned (with impact and likelihood assessment)
4. Open questions raised (categorized by urgency)
5. Action items (with assignees, due dates, priority, and exact source quote)

Guidelines:
- Be specific and accurate
- Only include information explicitly mentioned in the transcript
- For assignees: use actual names mentioned, or "unassigned" if unclear
- For due dates: extract actual dates mentioned, or "no date" if none specified
- For source quotes: use exact phrases from the transcript

Return ONLY valid JSON in this exact format:
{
  "tl_dr": "Brief summary of the meeting key outcomes...",
  "decisions": [
    {"decision": "What was decided", "context": "Why this decision was made", "confidence": 0.9}
  ],
  "risks": [
    {"risk": "Description of the risk mentioned", "impact": "high|medium|low", "likelihood": "high|medium|low"}
  ],
  "questions": [
    {"question": "What question was raised?", "category": "technical|business|process|other", "urgency": "high|medium|low"}
  ],
  "action_items": [
    {
      "task": "What needs to be done",
      "assignee": "Person responsible or 'unassigned'",
      "due_date": "YYYY-MM-DD or 'no date'",
      "priority": "high|medium|low",
      "source_quote": "Exact quote from transcript"
    }
  ]
}"""

USER_PROMPT = "Please analyze this meeting transcript and extract the key information:\n\n{transcript}"


def format_timestamp(seconds: float) -> str:
    total = max(0, int(seconds))
    return f"[{total // 60:02d}:{total % 60:02d}]"


def render_transcript(segments: Iterable[TranscriptSegment]) -> str:
    return "\n".join(f"{format_timestamp(seg.start_s)} {seg.text}" for seg in segments)


class SummarizationProvider(ABC):
    @abstractmethod
    def summarize(self, transcript: str) -> str:
        """Return the raw JSON text produced for the rendered transcript."""
        raise NotImplementedError


class ChatCompletionSummarizer(SummarizationProvider):
    """Summaries from an OpenAI-compatible ``/chat/completions`` endpoint in JSON mode."""

    name = "Summarization API"

    def __init__(
        self,
        api_key: str,
        model: str = "llama-3.1-8b-instant",
        base_url: str = "https://api.groq.com/openai/v1",
        temperature: float = 0.1,
        max_tokens: int = 2000,
        timeout: float = 120.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChatCompletionSummarizer":
        return cls(
            api_key=settings.api_key,
            model=settings.summarization_model,
            base_url=settings.provider_base_url,
            temperature=settings.summarization_temperature,
            max_tokens=settings.summarization_max_tokens,
            timeout=settings.summarization_timeout_s,
        )

    def build_request(self, transcript: str) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": USER_PROMPT.format(transcript=transcript)},
        ]
        return {
            "model": self._model,
            "messages": messages,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "response_format": {"type": "json_object"},
        }

    def summarize(self, transcript: str) -> str:
        logger.info("Sending transcript to summarization API", extra={"chars": len(transcript), "model": self._model})
        try:
            response = requests.post(
                f"{self._base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json=self.build_request(transcript),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ProviderError(self.name, None, str(exc)) from exc

        if not response.ok:
            logger.error("Summarization API error %s: %s", response.status_code, response.text[:500])
            raise ProviderError(self.name, response.status_code, response.text)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise MalformedResponse("Summarization API response is missing message content") from exc
        if not isinstance(content, str):
            raise MalformedResponse("Summarization API response is missing message content")
        return content
