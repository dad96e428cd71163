"""
Reconciliation of the OCR reading with the AI reading of a ticket

The AI is the high-precision primary source; OCR is a low-precision,
high-recall corroboration signal. Nothing here logs or performs I/O, so the
same two inputs always give the same output.
"""
from dataclasses import dataclass
from typing import List

from app.core.enums import AgreementTier, LotteryType
from app.models.domain import OCRResult, RecognitionResult
from app.services.number_splitter import LOTO_MAX, LOTO_MIN

OCR_ONLY_NOTES = "OCR-only fallback"


@dataclass(frozen=True)
class ReconciliationPolicy:
    """Calibration parameters of the agreement tiers"""

    high_agreement: float = 0.85
    full_agreement: float = 0.95
    full_agreement_boost: float = 1.10
    moderate_agreement: float = 0.70
    moderate_ai_weight: float = 0.7
    low_agreement_penalty: float = 0.8
    confident_ai: float = 0.7
    confidence_floor: float = 0.4
    ocr_only_penalty: float = 0.9


DEFAULT_POLICY = ReconciliationPolicy()


@dataclass(frozen=True)
class Reconciliation:
    """Merged result together with the agreement figures that produced it"""

    result: RecognitionResult
    tier: AgreementTier
    agreed: int
    coverage: float
    ocr_count: int
    ai_count: int


def _loto_numbers(numbers: List[int]) -> set:
    return {n for n in numbers if LOTO_MIN <= n <= LOTO_MAX}


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def reconcile(
    ocr: OCRResult,
    ai: RecognitionResult,
    policy: ReconciliationPolicy = DEFAULT_POLICY,
) -> Reconciliation:
    """
    Merge an OCR reading and an AI reading into one result

    Args:
        ocr: Completed OCR result
        ai: Completed AI result
        policy: Agreement thresholds and confidence weights

    Returns:
        Reconciliation holding a new RecognitionResult; ``ai`` is left untouched
    """
    ocr_set = _loto_numbers(ocr.numbers)
    ai_set = set(ai.numbers)

    agreed = len(ai_set & ocr_set)
    coverage = agreed / len(ai_set) if ai_set else 0.0

    if coverage >= policy.high_agreement:
        tier = AgreementTier.HIGH
        final_set = ai_set
        confidence = (ai.confidence + ocr.confidence) / 2
        if coverage >= policy.full_agreement:
            confidence = min(confidence * policy.full_agreement_boost, 1.0)
        notes = f"hybrid scan: {coverage:.0%} of AI numbers confirmed by OCR"

    elif coverage >= policy.moderate_agreement:
        tier = AgreementTier.MODERATE
        final_set = ai_set
        confidence = (
            policy.moderate_ai_weight * ai.confidence
            + (1 - policy.moderate_ai_weight) * ocr.confidence
        )
        notes = f"hybrid scan: {coverage:.0%} of AI numbers confirmed by OCR"

    else:
        tier = AgreementTier.LOW
        final_set = ai_set & ocr_set
        if ai.confidence >= policy.confident_ai:
            final_set = final_set | ai_set
        confidence = (ai.confidence + ocr.confidence) / 2 * policy.low_agreement_penalty
        confidence = max(confidence, policy.confidence_floor)
        notes = f"hybrid scan: low coverage ({coverage:.0%}), merged results due to low agreement"

    result = ai.model_copy(
        update={
            "numbers": sorted(final_set),
            "confidence": _clamp(confidence),
            "notes": notes,
        }
    )
    return Reconciliation(
        result=result,
        tier=tier,
        agreed=agreed,
        coverage=coverage,
        ocr_count=len(ocr_set),
        ai_count=len(ai_set),
    )


def build_ocr_only_result(
    ocr: OCRResult,
    policy: ReconciliationPolicy = DEFAULT_POLICY,
) -> RecognitionResult:
    """
    Result used when the AI could not be reached

    OCR alone is never fully trusted, so its confidence is discounted.
    """
    return RecognitionResult(
        lottery_type=LotteryType.LOTO,
        numbers=sorted(_loto_numbers(ocr.numbers)),
        confidence=_clamp(ocr.confidence * policy.ocr_only_penalty),
        notes=OCR_ONLY_NOTES,
    )
