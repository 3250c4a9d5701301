"""
Student Records Storage
app/services/records_storage.py

Append-only JSON array of student score records (one entry per save).
A missing or unreadable file is treated as an empty list and replaced on
the next write. Repeated saves are stored as separate entries.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from app.config import settings
from app.models.api import SaveRecordRequest, StudentRecord

logger = logging.getLogger(__name__)


class RecordsStorage:
    """File-backed store for StudentRecord entries."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.RECORDS_PATH)
        self._lock = threading.Lock()

    def load(self) -> List[dict]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"⚠️ Records file {self.path} unreadable, starting a new one: {e}")
            return []
        return data if isinstance(data, list) else []

    def append(self, request: SaveRecordRequest) -> StudentRecord:
        """Build a record from the request (filling defaults) and append it to the file."""
        record = StudentRecord(
            name=request.name,
            block=request.block,
            correct=request.correct or 0,
            round=request.round or 1,
            streak=request.streak or 0,
            timestamp=request.timestamp or datetime.now(timezone.utc).isoformat(),
        )

        with self._lock:
            records = self.load()
            records.append(record.model_dump())
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)

        logger.info(f"Record saved for {record.name} (Block {record.block}): "
                    f"{record.correct} correct, Round {record.round}")
        return record


# Singleton
_records: Optional[RecordsStorage] = None

def get_records_storage() -> RecordsStorage:
    global _records
    if _records is None:
        _records = RecordsStorage()
    return _records
