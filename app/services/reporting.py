"""
Observability side channel of the scan pipeline
"""
from typing import Any, Optional

from app.core.logging import get_logger
from app.models.domain import OCRResult, RecognitionResult
from app.services.reconciler import Reconciliation


class ScanReporter:
    """
    Receives the intermediate results of a scan and logs them

    Injected into the orchestrator so that reconciliation and validation stay
    free of logging. Tests pass a recording subclass.
    """

    def __init__(self, logger: Optional[Any] = None):
        self.logger = logger or get_logger("app.scan")

    def ocr_completed(self, ocr: OCRResult) -> None:
        self.logger.info(
            "OCR completed",
            provider=ocr.provider,
            numbers_found=len(ocr.numbers),
            numbers=ocr.numbers,
            confidence=round(ocr.confidence, 3),
        )

    def ocr_failed(self, error: Exception) -> None:
        self.logger.warning("OCR failed, falling back to AI-only", error=str(error))

    def ai_completed(self, ai: RecognitionResult, provider: str) -> None:
        self.logger.info(
            "AI scan completed",
            provider=provider,
            lottery_type=ai.lottery_type.value,
            numbers_found=len(ai.numbers),
            numbers=ai.numbers,
            confidence=round(ai.confidence, 3),
            ticket_id=ai.ticket_id,
            blocks=[
                {"row1": b.row1, "row2": b.row2, "row3": b.row3}
                for b in ai.blocks
            ],
        )

    def ai_failed(self, error: Exception) -> None:
        self.logger.warning("AI scan failed, using OCR-only result", error=str(error))

    def reconciled(self, reconciliation: Reconciliation) -> None:
        self.logger.info(
            "Reconciliation",
            tier=reconciliation.tier.value,
            ocr_count=reconciliation.ocr_count,
            ai_count=reconciliation.ai_count,
            agreed=reconciliation.agreed,
            coverage=round(reconciliation.coverage, 3),
        )

    def final_result(self, result: RecognitionResult) -> None:
        self.logger.info(
            "Final scan result",
            lottery_type=result.lottery_type.value,
            numbers_count=len(result.numbers),
            numbers=result.numbers,
            confidence=round(result.confidence, 3),
            notes=result.notes,
        )
