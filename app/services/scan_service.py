"""
Main scan service - orchestrator
"""
import time
import uuid
from typing import Iterable, List, Optional

from app.core.exceptions import ScanNotFoundError
from app.core.logging import get_logger
from app.infrastructure.repositories.lottery_result_repository import (
    BaseLotteryResultRepository,
    InMemoryLotteryResultRepository,
    number_key,
)
from app.infrastructure.repositories.scan_repository import HISTORY_LIMIT, BaseScanRepository
from app.models.domain import NumberMatch, ResultCheck, ScanRecord
from app.services.hybrid_scanner import HybridScanner
from app.services.validator import (
    CONFIRM_CONFIDENCE,
    MIN_CONFIDENCE,
    validate_recognition,
)
from app.utils.image_utils import (
    decode_base64_image,
    validate_image_format,
    validate_image_size,
)

logger = get_logger(__name__)


class ScanService:
    """
    Main service for ticket scanning
    Orchestrates the whole process: image checks → hybrid scan → validation → storage
    """

    def __init__(
        self,
        scanner: HybridScanner,
        repository: BaseScanRepository,
        max_image_size_mb: int = 5,
        allowed_image_formats: Optional[Iterable[str]] = None,
        min_confidence: float = MIN_CONFIDENCE,
        confirm_confidence: float = CONFIRM_CONFIDENCE,
        result_repository: Optional[BaseLotteryResultRepository] = None,
        history_limit: int = HISTORY_LIMIT,
    ):
        """
        Initialize the scan service

        Args:
            scanner: OCR + AI scanner
            repository: Storage for accepted scans
            max_image_size_mb: Maximum image size in MB
            allowed_image_formats: Accepted image formats
            min_confidence: Rejection threshold of the validator
            confirm_confidence: Confirmation threshold of the validator
            result_repository: Published draw results (none when omitted)
            history_limit: Maximum number of scans returned by the history
        """
        self.scanner = scanner
        self.repository = repository
        self.max_image_size_mb = max_image_size_mb
        self.allowed_image_formats = list(allowed_image_formats) if allowed_image_formats else None
        self.min_confidence = min_confidence
        self.confirm_confidence = confirm_confidence
        self.result_repository = result_repository or InMemoryLotteryResultRepository()
        self.history_limit = history_limit

        logger.info(
            "Scan Service initialized",
            hybrid=scanner.hybrid_enabled,
            ai_provider=scanner.ai_scanner.provider,
            max_image_size_mb=max_image_size_mb
        )

    async def scan_ticket(
        self,
        image_base64: str,
        user_id: Optional[str] = None
    ) -> ScanRecord:
        """
        Full ticket scan

        Args:
            image_base64: Image in base64
            user_id: Owner of the scan, if known

        Returns:
            ScanRecord. Accepted scans carry the id they were stored under;
            rejected scans have no id and are not stored.

        Raises:
            ImageValidationError: Image is not acceptable
            RecognizerError: No recognizer produced a usable result
        """
        start_time = time.time()

        logger.info("Starting ticket scan", user_id=user_id)

        try:
            image_bytes = decode_base64_image(image_base64)
            image_format = validate_image_format(image_bytes, self.allowed_image_formats)
            validate_image_size(image_bytes, self.max_image_size_mb)

            recognition = await self.scanner.scan(image_bytes, image_format.mime_type)
            outcome = validate_recognition(
                recognition,
                min_confidence=self.min_confidence,
                confirm_confidence=self.confirm_confidence,
            )

            processing_time_ms = int((time.time() - start_time) * 1000)

            if not outcome.accepted:
                logger.warning(
                    "Scan validation failed",
                    confidence=round(recognition.confidence, 3),
                    error=outcome.error,
                    processing_time_ms=processing_time_ms
                )
                return ScanRecord(user_id=user_id, recognition=recognition, outcome=outcome)

            record = ScanRecord(
                scan_id=str(uuid.uuid4()),
                user_id=user_id,
                recognition=recognition,
                outcome=outcome,
            )
            self.repository.save(record)

            logger.info(
                "Ticket scan completed successfully",
                scan_id=record.scan_id,
                status=outcome.status.value,
                numbers_count=len(outcome.numbers),
                confidence=round(recognition.confidence, 3),
                processing_time_ms=processing_time_ms
            )

            return record

        except Exception as e:
            processing_time_ms = int((time.time() - start_time) * 1000)

            logger.error(
                "Ticket scan failed",
                error=str(e),
                error_type=type(e).__name__,
                processing_time_ms=processing_time_ms
            )

            raise

    def get_scan(self, scan_id: str) -> ScanRecord:
        """
        Look up a stored scan

        Raises:
            ScanNotFoundError: Unknown scan id
        """
        record = self.repository.get(scan_id)
        if record is None:
            raise ScanNotFoundError(f"Scan {scan_id} not found", details={"scan_id": scan_id})
        return record

    def get_scan_history(self, user_id: str) -> List[ScanRecord]:
        """Stored scans of a user, newest first"""
        return self.repository.list_by_user(user_id, limit=self.history_limit)

    def check_result(self, scan_id: str) -> ResultCheck:
        """
        Check the numbers of a stored scan against the published draw results

        Args:
            scan_id: Id of an accepted scan

        Returns:
            ResultCheck with one entry per scanned number, in scan order

        Raises:
            ScanNotFoundError: Unknown scan id
        """
        record = self.get_scan(scan_id)
        numbers = record.outcome.numbers

        winners = {
            number_key(result.winning_number): result
            for result in self.result_repository.find_matching(numbers)
        }

        matches = []
        for number in numbers:
            winner = winners.get(number_key(number))
            if winner is None:
                matches.append(NumberMatch(number=str(number)))
                continue
            matches.append(NumberMatch(
                number=str(number),
                matched=True,
                prize_type=winner.prize_type,
                winning_number=winner.winning_number,
                region=winner.region,
            ))

        logger.info(
            "Scan checked against draw results",
            scan_id=scan_id,
            numbers_count=len(numbers),
            matched_count=sum(1 for m in matches if m.matched)
        )

        return ResultCheck(scan_id=scan_id, matches=matches)

    def is_ready(self) -> bool:
        """
        Readiness of the service

        Returns:
            True when the OCR engine (if configured) is loaded
        """
        engine = self.scanner.ocr_engine
        return engine is None or engine.is_available()
