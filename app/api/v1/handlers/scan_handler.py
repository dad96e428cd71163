"""
Ticket handlers - scan, history and lookup endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.models.requests import ScanRequest
from app.models.responses import (
    CheckResultResponse,
    ScanHistoryItem,
    ScanHistoryResponse,
    ScanResponse,
)
from app.services.scan_service import ScanService
from app.api.dependencies import get_scan_service
from app.core.exceptions import (
    ImageValidationError,
    RecognizerResponseError,
    RecognizerTransportError,
    ScanNotFoundError
)
from app.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post("/scan", response_model=ScanResponse, status_code=status.HTTP_200_OK)
async def scan_ticket(
    request: ScanRequest,
    scan_service: ScanService = Depends(get_scan_service)
) -> ScanResponse:
    """
    Scan a lottery ticket photo

    Takes a base64 image, reads it with OCR and the vision model, reconciles
    both readings and validates the numbers. A rejected scan is a normal
    200 response with status "rejected".

    Args:
        request: Request with the base64 image
        scan_service: Scan service (DI)

    Returns:
        ScanResponse

    Raises:
        HTTPException 400: Image validation failed
        HTTPException 422: Vision model answered with unusable output
        HTTPException 502: Recognizers unreachable
        HTTPException 500: Internal server error
    """
    try:
        logger.info("Received scan request")

        record = await scan_service.scan_ticket(
            image_base64=request.image,
            user_id=request.user_id
        )

        return ScanResponse.from_record(record)

    except ImageValidationError as e:
        logger.warning("Image validation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Image validation failed",
                "message": e.message,
                "details": e.details
            }
        )

    except RecognizerResponseError as e:
        logger.error("Recognizer output could not be parsed", error=str(e), provider=e.provider)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Scan failed",
                "message": e.message,
                "provider": e.provider
            }
        )

    except RecognizerTransportError as e:
        logger.error("Recognizer unavailable", error=str(e), provider=e.provider)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "Scan failed",
                "message": e.message,
                "provider": e.provider
            }
        )

    except Exception as e:
        logger.error("Unexpected error", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )


@router.get("/history", response_model=ScanHistoryResponse)
async def scan_history(
    user_id: str = Query(..., min_length=1, description="Owner of the scans"),
    scan_service: ScanService = Depends(get_scan_service)
) -> ScanHistoryResponse:
    """Stored scans of a user, newest first"""
    records = scan_service.get_scan_history(user_id)
    return ScanHistoryResponse(scans=[ScanHistoryItem.from_record(r) for r in records])


@router.get("/{scan_id}", response_model=ScanResponse)
async def get_scan(
    scan_id: str,
    scan_service: ScanService = Depends(get_scan_service)
) -> ScanResponse:
    """Stored scan by id"""
    try:
        record = scan_service.get_scan(scan_id)
    except ScanNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Scan not found", "message": e.message}
        )
    return ScanResponse.from_record(record)


@router.get("/{scan_id}/check", response_model=CheckResultResponse)
async def check_result(
    scan_id: str,
    scan_service: ScanService = Depends(get_scan_service)
) -> CheckResultResponse:
    """
    Check a stored scan against the published draw results

    Args:
        scan_id: Id of an accepted scan
        scan_service: Scan service (DI)

    Returns:
        CheckResultResponse with one entry per scanned number

    Raises:
        HTTPException 404: Unknown scan id
    """
    try:
        check = scan_service.check_result(scan_id)
    except ScanNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Scan not found", "message": e.message}
        )
    return CheckResultResponse.from_check(check)
