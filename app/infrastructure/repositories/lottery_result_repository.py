"""
Published draw results that stored scans are checked against
"""
import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List

from pydantic import TypeAdapter, ValidationError

from app.core.exceptions import ConfigurationError
from app.models.domain import LotteryResult

_RESULTS_ADAPTER = TypeAdapter(List[LotteryResult])


def number_key(value) -> str:
    """Comparable text form of a ticket or winning number ("007" and 7 agree)"""
    return str(value).strip().lstrip("0") or "0"


class BaseLotteryResultRepository(ABC):
    """Where draw results are looked up"""

    @abstractmethod
    def find_matching(self, numbers: Iterable[int]) -> List[LotteryResult]:
        """
        Draw results whose winning number is one of the given numbers

        Args:
            numbers: Numbers read from a ticket

        Returns:
            Matching results, in no particular order
        """
        pass


class InMemoryLotteryResultRepository(BaseLotteryResultRepository):
    """Draw results held in memory, indexed by winning number"""

    def __init__(self, results: Iterable[LotteryResult] = ()):
        self._by_number: Dict[str, List[LotteryResult]] = {}
        self._lock = threading.Lock()
        for result in results:
            self.add(result)

    def add(self, result: LotteryResult) -> None:
        with self._lock:
            self._by_number.setdefault(number_key(result.winning_number), []).append(result)

    def find_matching(self, numbers: Iterable[int]) -> List[LotteryResult]:
        keys = {number_key(n) for n in numbers}
        with self._lock:
            return [r for key in keys for r in self._by_number.get(key, [])]


def load_lottery_results(path: str) -> List[LotteryResult]:
    """
    Read draw results from a JSON file

    Args:
        path: File holding a JSON list of {id, date, region, prize_type, winning_number}

    Returns:
        Parsed results

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        return _RESULTS_ADAPTER.validate_python(payload)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(
            f"Cannot load lottery results from {path}: {str(e)}",
            details={"path": path}
        )
