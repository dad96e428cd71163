"""
FastAPI dependencies for dependency injection
"""
from functools import lru_cache
from typing import Optional

from app.config import get_settings
from app.core.enums import AIProvider
from app.core.exceptions import ConfigurationError
from app.core.logging import get_logger
from app.infrastructure.ai_scanners.base_scanner import BaseAIScanner
from app.infrastructure.ai_scanners.gemini_scanner import GeminiScanner
from app.infrastructure.ai_scanners.openai_scanner import OpenAIScanner
from app.infrastructure.ocr_engines.base_engine import BaseOCREngine
from app.infrastructure.ocr_engines.easyocr_engine import EasyOCREngine
from app.infrastructure.repositories.lottery_result_repository import (
    BaseLotteryResultRepository,
    InMemoryLotteryResultRepository,
    load_lottery_results,
)
from app.infrastructure.repositories.scan_repository import (
    BaseScanRepository,
    InMemoryScanRepository,
)
from app.services.hybrid_scanner import HybridScanner
from app.services.scan_service import ScanService

logger = get_logger(__name__)


@lru_cache()
def get_ai_scanner() -> BaseAIScanner:
    """
    Get the vision model scanner (singleton)
    The vendor is chosen once, from AI_PROVIDER
    """
    settings = get_settings()

    if settings.AI_PROVIDER == AIProvider.GEMINI:
        if not settings.GOOGLE_API_KEY:
            raise ConfigurationError("GOOGLE_API_KEY is required when AI_PROVIDER=gemini")
        logger.info("Using Google Gemini AI provider", model=settings.GOOGLE_AI_MODEL)
        return GeminiScanner(
            api_key=settings.GOOGLE_API_KEY,
            model=settings.GOOGLE_AI_MODEL,
            thinking=settings.GOOGLE_AI_THINKING,
            timeout=settings.AI_TIMEOUT_SECONDS,
            retry_backoff=settings.RECOGNIZER_RETRY_BACKOFF_SECONDS,
        )

    if not settings.OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY is required when AI_PROVIDER=openai")
    logger.info("Using OpenAI provider", model=settings.OPENAI_MODEL)
    return OpenAIScanner(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        reasoning_effort=settings.OPENAI_REASONING_EFFORT,
        timeout=settings.AI_TIMEOUT_SECONDS,
        retry_backoff=settings.RECOGNIZER_RETRY_BACKOFF_SECONDS,
    )


@lru_cache()
def get_ocr_engine() -> Optional[BaseOCREngine]:
    """
    Get the EasyOCR engine (singleton)
    Initialized once and reused; None means AI-only mode
    """
    settings = get_settings()

    if not settings.OCR_ENABLED:
        logger.info("OCR disabled, using AI-only mode")
        return None

    engine = EasyOCREngine(
        languages=settings.easyocr_languages_list,
        gpu=settings.EASYOCR_USE_GPU,
        timeout=settings.OCR_TIMEOUT_SECONDS,
        retry_backoff=settings.RECOGNIZER_RETRY_BACKOFF_SECONDS,
    )

    try:
        engine.initialize()
    except ConfigurationError as e:
        logger.warning("OCR engine not available, using AI-only mode", error=e.message)
        return None

    logger.info("Hybrid scanner enabled (OCR + AI)")
    return engine


@lru_cache()
def get_scan_repository() -> BaseScanRepository:
    """Get the scan repository (singleton)"""
    return InMemoryScanRepository()


@lru_cache()
def get_lottery_result_repository() -> BaseLotteryResultRepository:
    """
    Get the draw results repository (singleton)
    Seeded from LOTTERY_RESULTS_FILE when set
    """
    settings = get_settings()

    if not settings.LOTTERY_RESULTS_FILE:
        return InMemoryLotteryResultRepository()

    results = load_lottery_results(settings.LOTTERY_RESULTS_FILE)
    logger.info("Loaded lottery results", path=settings.LOTTERY_RESULTS_FILE, count=len(results))
    return InMemoryLotteryResultRepository(results)


@lru_cache()
def get_hybrid_scanner() -> HybridScanner:
    """Get the hybrid scanner (singleton)"""
    settings = get_settings()
    return HybridScanner(
        ai_scanner=get_ai_scanner(),
        ocr_engine=get_ocr_engine(),
        policy=settings.reconciliation_policy,
    )


@lru_cache()
def get_scan_service() -> ScanService:
    """Get the Scan Service (singleton)"""
    settings = get_settings()

    return ScanService(
        scanner=get_hybrid_scanner(),
        repository=get_scan_repository(),
        max_image_size_mb=settings.MAX_IMAGE_SIZE_MB,
        allowed_image_formats=settings.allowed_image_formats_list,
        min_confidence=settings.VALIDATION_MIN_CONFIDENCE,
        confirm_confidence=settings.VALIDATION_CONFIRM_CONFIDENCE,
        result_repository=get_lottery_result_repository(),
        history_limit=settings.SCAN_HISTORY_LIMIT,
    )
