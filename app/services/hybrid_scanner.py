"""
OCR + AI scan with reconciliation and graceful degradation
"""
import base64
from typing import Optional

from app.core.exceptions import RecognizerError, RecognizerTransportError
from app.infrastructure.ai_scanners.base_scanner import BaseAIScanner
from app.infrastructure.ai_scanners.prompts import format_ocr_hint
from app.infrastructure.ocr_engines.base_engine import BaseOCREngine
from app.models.domain import RecognitionResult
from app.services.reconciler import (
    DEFAULT_POLICY,
    ReconciliationPolicy,
    build_ocr_only_result,
    reconcile,
)
from app.services.reporting import ScanReporter


class HybridScanner:
    """
    Runs OCR first, feeds its findings to the AI scanner, then reconciles

    - no OCR engine, or OCR failure: the AI-only result is returned unchanged
    - AI transport failure after OCR succeeded: OCR-only fallback result
    - AI malformed output: the error propagates to the caller
    """

    def __init__(
        self,
        ai_scanner: BaseAIScanner,
        ocr_engine: Optional[BaseOCREngine] = None,
        policy: ReconciliationPolicy = DEFAULT_POLICY,
        reporter: Optional[ScanReporter] = None,
    ):
        self.ai_scanner = ai_scanner
        self.ocr_engine = ocr_engine
        self.policy = policy
        self.reporter = reporter or ScanReporter()

    @property
    def hybrid_enabled(self) -> bool:
        return self.ocr_engine is not None

    async def scan(self, image_bytes: bytes, mime_type: str) -> RecognitionResult:
        """
        Recognize a ticket image

        Args:
            image_bytes: Decoded, validated image
            mime_type: Image MIME type

        Returns:
            RecognitionResult ready for validation

        Raises:
            RecognizerError: When no usable result could be produced
        """
        image_base64 = base64.b64encode(image_bytes).decode("utf-8")

        if self.ocr_engine is None:
            return await self._scan_ai_only(image_base64, mime_type)

        try:
            ocr = await self.ocr_engine.scan(image_bytes, mime_type)
        except RecognizerError as e:
            self.reporter.ocr_failed(e)
            return await self._scan_ai_only(image_base64, mime_type)

        self.reporter.ocr_completed(ocr)

        try:
            ai = await self.ai_scanner.scan_ticket(
                image_base64,
                mime_type,
                ocr_hint=format_ocr_hint(ocr),
            )
        except RecognizerTransportError as e:
            self.reporter.ai_failed(e)
            result = build_ocr_only_result(ocr, self.policy)
            self.reporter.final_result(result)
            return result

        self.reporter.ai_completed(ai, self.ai_scanner.provider)

        reconciliation = reconcile(ocr, ai, self.policy)
        self.reporter.reconciled(reconciliation)
        self.reporter.final_result(reconciliation.result)
        return reconciliation.result

    async def _scan_ai_only(self, image_base64: str, mime_type: str) -> RecognitionResult:
        result = await self.ai_scanner.scan_ticket(image_base64, mime_type)
        self.reporter.ai_completed(result, self.ai_scanner.provider)
        return result
