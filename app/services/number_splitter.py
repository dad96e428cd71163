"""
Recovery of LOTO numbers from OCR word tokens

Bingo-style tickets print numbers in adjacent cells, and the OCR engine often
reads two neighbours as one word ("523" for 5 and 23). These helpers undo that.
"""
from typing import List, Optional

LOTO_MIN = 1
LOTO_MAX = 90


def _in_range(value: int, low: int, high: int) -> bool:
    return low <= value <= high


def _try_split(token: str, at: int, first_range: tuple, rest_range: tuple) -> Optional[List[int]]:
    first, rest = int(token[:at]), int(token[at:])
    if _in_range(first, *first_range) and _in_range(rest, *rest_range):
        return [first, rest]
    return None


def split_loto_numbers(token: str) -> List[int]:
    """
    Turn one OCR word into zero, one or two LOTO numbers

    Args:
        token: Word as read by the OCR engine

    Returns:
        The numbers found, in reading order. Empty when the word is not a
        plausible LOTO number or pair of numbers.
    """
    if not token or not token.isascii() or not token.isdigit():
        return []

    value = int(token)
    if _in_range(value, LOTO_MIN, LOTO_MAX):
        return [value]

    if len(token) == 3:
        # (1, 2) is checked first and wins when both splits are valid
        return (
            _try_split(token, 1, (1, 9), (10, LOTO_MAX))
            or _try_split(token, 2, (LOTO_MIN, LOTO_MAX), (1, 9))
            or []
        )

    if len(token) == 4:
        return (
            _try_split(token, 2, (LOTO_MIN, LOTO_MAX), (LOTO_MIN, LOTO_MAX))
            or _try_split(token, 1, (1, 9), (LOTO_MIN, LOTO_MAX))
            or []
        )

    return []
