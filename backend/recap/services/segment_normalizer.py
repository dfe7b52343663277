from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

WORDS_PER_SEGMENT = 50
# Rough speaking rate used when the provider returns flat text only
SECONDS_PER_WORD = 0.6


@dataclass(frozen=True)
class NormalizedSegment:
    start_s: float
    end_s: float
    text: str
    speaker: Optional[str] = None


def normalize_segments(response: Dict[str, Any]) -> List[NormalizedSegment]:
    """Turn a transcription response into ordered, timed text segments.

    Native provider segments are kept as-is (text trimmed). Without them the
    flat text is cut into chunks of ``WORDS_PER_SEGMENT`` words whose offsets
    are spread proportionally over an estimated duration.
    """
    native = response.get("segments") or []
    if isinstance(native, list) and native:
        return [
            NormalizedSegment(
                start_s=float(seg.get("start", 0.0)),
                end_s=float(seg.get("end", 0.0)),
                text=str(seg.get("text") or "").strip(),
            )
            for seg in native
        ]
    return _estimate_segments(str(response.get("text") or ""))


def _estimate_segments(text: str) -> List[NormalizedSegment]:
    words = text.split()
    total = len(words)
    if total == 0:
        return []
    estimated_duration = total * SECONDS_PER_WORD
    out: List[NormalizedSegment] = []
    for i in range(0, total, WORDS_PER_SEGMENT):
        start = (i / total) * estimated_duration
        end = min(((i + WORDS_PER_SEGMENT) / total) * estimated_duration, estimated_duration)
        out.append(NormalizedSegment(start_s=start, end_s=end, text=" ".join(words[i : i + WORDS_PER_SEGMENT])))
    return out
