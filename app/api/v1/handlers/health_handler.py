"""
Health check handlers
"""
from fastapi import APIRouter, Depends

from app.models.responses import HealthResponse
from app.services.scan_service import ScanService
from app.api.dependencies import get_scan_service
from app.config import get_settings

router = APIRouter(prefix="/health", tags=["Health"])


def _health(status: str, scan_service: ScanService) -> HealthResponse:
    settings = get_settings()
    scanner = scan_service.scanner
    return HealthResponse(
        status=status,
        version=settings.APP_VERSION,
        ai_provider=scanner.ai_scanner.provider,
        hybrid_enabled=scanner.hybrid_enabled,
        ocr_engine_available=scanner.hybrid_enabled and scan_service.is_ready()
    )


@router.get("", response_model=HealthResponse)
@router.get("/", response_model=HealthResponse, include_in_schema=False)
async def health_check(
    scan_service: ScanService = Depends(get_scan_service)
) -> HealthResponse:
    """
    Basic health check
    The service is up and its recognizers are wired
    """
    return _health("healthy", scan_service)


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(
    scan_service: ScanService = Depends(get_scan_service)
) -> HealthResponse:
    """
    Readiness check for Kubernetes
    Ready once the configured OCR engine is loaded
    """
    return _health("ready" if scan_service.is_ready() else "not_ready", scan_service)
