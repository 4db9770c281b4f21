import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, Iterator, List, Optional

from fraud_service.models.records import PredictionResult, TransactionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """A prediction together with the transaction it was made for"""

    record: TransactionRecord
    result: PredictionResult
    model: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class PredictionHistory:
    """
    In-memory prediction history, newest entry first.

    Each application instance owns its own history; entries are only ever
    added or removed, never edited.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries
        self._entries: Deque[HistoryEntry] = deque(maxlen=max_entries)

    def add(self, record: TransactionRecord, result: PredictionResult, model: str) -> HistoryEntry:
        entry = HistoryEntry(record=record, result=result, model=model)
        # A full history drops its oldest entry from the right
        self._entries.appendleft(entry)

        logger.info(f"History: added {entry.id} ({result.prediction.value}, {len(self._entries)} total)")
        return entry

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def delete(self, entry_id: str) -> bool:
        """Remove an entry by id; returns False when no such entry exists"""
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[i]
                logger.info(f"History: deleted {entry_id}")
                return True
        return False

    def clear(self) -> int:
        removed = len(self._entries)
        self._entries.clear()
        logger.info(f"History: cleared {removed} entries")
        return removed

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def stats(self) -> Dict[str, int]:
        fraud = sum(1 for entry in self._entries if entry.result.is_fraud)
        return {"total": len(self._entries), "fraud": fraud, "not_fraud": len(self._entries) - fraud}

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
