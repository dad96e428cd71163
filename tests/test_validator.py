from app.core.enums import LotteryType, ScanStatus
from app.models.domain import RecognitionResult
from app.services.validator import (
    CONFIDENCE_TOO_LOW,
    NO_VALID_NUMBERS,
    validate_recognition,
)


def test_low_confidence_is_rejected_regardless_of_numbers():
    outcome = validate_recognition(RecognitionResult(numbers=[1, 2, 3], confidence=0.5))

    assert outcome.status == ScanStatus.REJECTED
    assert outcome.numbers == []
    assert outcome.error == CONFIDENCE_TOO_LOW
    assert not outcome.accepted


def test_out_of_range_and_duplicates_are_dropped():
    outcome = validate_recognition(RecognitionResult(numbers=[5, 95, 5], confidence=0.9))

    assert outcome.status == ScanStatus.CONFIRMED
    assert outcome.numbers == [5]
    assert outcome.error is None


def test_no_valid_numbers_is_rejected():
    outcome = validate_recognition(RecognitionResult(numbers=[0, 91, 120], confidence=0.9))

    assert outcome.status == ScanStatus.REJECTED
    assert outcome.error == NO_VALID_NUMBERS


def test_medium_confidence_needs_confirmation():
    outcome = validate_recognition(RecognitionResult(numbers=[10, 20], confidence=0.7))

    assert outcome.status == ScanStatus.NEEDS_CONFIRMATION
    assert outcome.numbers == [10, 20]


def test_threshold_boundaries():
    at_min = validate_recognition(RecognitionResult(numbers=[10], confidence=0.6))
    at_confirm = validate_recognition(RecognitionResult(numbers=[10], confidence=0.85))

    assert at_min.status == ScanStatus.NEEDS_CONFIRMATION
    assert at_confirm.status == ScanStatus.CONFIRMED


def test_six_digit_numbers_are_not_range_checked():
    result = RecognitionResult(
        lottery_type=LotteryType.VN_6_DIGIT,
        numbers=[123456, 654321],
        confidence=0.9,
    )

    outcome = validate_recognition(result)

    assert outcome.status == ScanStatus.CONFIRMED
    assert outcome.numbers == [123456, 654321]


def test_custom_thresholds():
    result = RecognitionResult(numbers=[10], confidence=0.7)

    assert validate_recognition(result, min_confidence=0.75).status == ScanStatus.REJECTED
    assert validate_recognition(result, confirm_confidence=0.7).status == ScanStatus.CONFIRMED
