from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger("recap.storage")


class RecordingStorage:
    """Uploaded recordings on local disk, one file per meeting named ``<meeting_id>.<ext>``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def save(self, meeting_id: int, filename: str, data: bytes) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        ext = Path(filename or "").suffix.lstrip(".").lower() or "dat"
        path = self.root / f"{meeting_id}.{ext}"
        path.write_bytes(data)
        logger.info("Stored recording", extra={"meeting_id": meeting_id, "path": str(path), "bytes": len(data)})
        return path

    def find(self, meeting_id: int) -> Optional[Path]:
        if not self.root.is_dir():
            return None
        matches = sorted(p for p in self.root.glob(f"{meeting_id}.*") if p.is_file())
        return matches[0] if matches else None
