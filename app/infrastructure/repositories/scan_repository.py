"""
Storage collaborator for validated scans
"""
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from app.models.domain import ScanRecord

HISTORY_LIMIT = 50


class BaseScanRepository(ABC):
    """Where validated scans are kept, keyed by scan id"""

    @abstractmethod
    def save(self, record: ScanRecord) -> None:
        pass

    @abstractmethod
    def get(self, scan_id: str) -> Optional[ScanRecord]:
        pass

    @abstractmethod
    def list_by_user(self, user_id: str, limit: int = HISTORY_LIMIT) -> List[ScanRecord]:
        """At most `limit` scans of one user, newest first"""
        pass


class InMemoryScanRepository(BaseScanRepository):
    """Process-local repository; contents are lost on restart"""

    def __init__(self):
        self._records: Dict[str, ScanRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: ScanRecord) -> None:
        with self._lock:
            self._records[record.scan_id] = record

    def get(self, scan_id: str) -> Optional[ScanRecord]:
        with self._lock:
            return self._records.get(scan_id)

    def list_by_user(self, user_id: str, limit: int = HISTORY_LIMIT) -> List[ScanRecord]:
        # dicts keep insertion order, which is save order
        with self._lock:
            records = [r for r in self._records.values() if r.user_id == user_id]
        return records[::-1][:limit]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
