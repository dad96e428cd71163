"""
Final business rules applied to every recognition result
"""
from typing import List

from app.core.enums import LotteryType, ScanStatus
from app.models.domain import RecognitionResult, ValidationOutcome
from app.services.number_splitter import LOTO_MAX, LOTO_MIN

MIN_CONFIDENCE = 0.6
CONFIRM_CONFIDENCE = 0.85

CONFIDENCE_TOO_LOW = "confidence too low"
NO_VALID_NUMBERS = "no valid numbers found"


def _filter_numbers(result: RecognitionResult) -> List[int]:
    seen = set()
    valid = []
    for number in result.numbers:
        if result.lottery_type == LotteryType.LOTO and not LOTO_MIN <= number <= LOTO_MAX:
            continue
        if number in seen:
            continue
        seen.add(number)
        valid.append(number)
    return valid


def validate_recognition(
    result: RecognitionResult,
    min_confidence: float = MIN_CONFIDENCE,
    confirm_confidence: float = CONFIRM_CONFIDENCE,
) -> ValidationOutcome:
    """
    Classify a recognition result into an acceptance tier

    Args:
        result: Reading from any recognizer or from reconciliation
        min_confidence: Below this the result is rejected outright
        confirm_confidence: At or above this the result needs no user check

    Returns:
        ValidationOutcome. Rejection is a normal outcome, not an exception.
    """
    if result.confidence < min_confidence:
        return ValidationOutcome(status=ScanStatus.REJECTED, error=CONFIDENCE_TOO_LOW)

    numbers = _filter_numbers(result)
    if not numbers:
        return ValidationOutcome(status=ScanStatus.REJECTED, error=NO_VALID_NUMBERS)

    if result.confidence >= confirm_confidence:
        status = ScanStatus.CONFIRMED
    else:
        status = ScanStatus.NEEDS_CONFIRMATION

    return ValidationOutcome(numbers=numbers, status=status)
