"""
Pydantic models for API responses
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import LotteryType, ScanStatus
from app.models.domain import ResultCheck, ScanRecord, TicketBlock


class ScanResponse(BaseModel):
    """Result of a ticket scan"""
    scan_id: Optional[str] = Field(None, description="Id of the stored scan")
    lottery_type: LotteryType = Field(..., description="Detected ticket type")
    blocks: List[TicketBlock] = Field(default_factory=list, description="LOTO card blocks")
    all_numbers: List[int] = Field(default_factory=list, description="Validated numbers")
    ticket_id: str = Field("", description="Ticket / series number printed on the ticket")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Calibrated confidence")
    status: ScanStatus = Field(..., description="Acceptance tier")
    notes: str = Field("", description="How the result was obtained, or why it was rejected")

    @classmethod
    def from_record(cls, record: ScanRecord) -> "ScanResponse":
        recognition = record.recognition
        outcome = record.outcome
        if not outcome.accepted:
            return cls(
                lottery_type=recognition.lottery_type,
                confidence=recognition.confidence,
                status=outcome.status,
                notes=outcome.error or "",
            )
        return cls(
            scan_id=record.scan_id,
            lottery_type=recognition.lottery_type,
            blocks=recognition.blocks,
            all_numbers=outcome.numbers,
            ticket_id=recognition.ticket_id,
            confidence=recognition.confidence,
            status=outcome.status,
            notes=recognition.notes,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "scan_id": "0f8c2a64-6a43-4a4e-9a3e-5d7f0c1b2e11",
                "lottery_type": "LOTO",
                "blocks": [
                    {"row1": [13, 22, 41, 61, 86], "row2": [3, 24, 34, 52, 71], "row3": [1, 35, 56, 64, 83]}
                ],
                "all_numbers": [1, 3, 13, 22, 24, 34, 35, 41, 52, 56, 61, 64, 71, 83, 86],
                "ticket_id": "",
                "confidence": 0.93,
                "status": "confirmed",
                "notes": "hybrid scan: 100% of AI numbers confirmed by OCR"
            }
        }
    )


class ScanHistoryItem(BaseModel):
    """Stored scan summary"""
    scan_id: str
    all_numbers: List[int]
    confidence: float
    status: ScanStatus
    created_at: datetime

    @classmethod
    def from_record(cls, record: ScanRecord) -> "ScanHistoryItem":
        return cls(
            scan_id=record.scan_id,
            all_numbers=record.outcome.numbers,
            confidence=record.recognition.confidence,
            status=record.outcome.status,
            created_at=record.created_at,
        )


class ScanHistoryResponse(BaseModel):
    """Scans of one user, newest first"""
    scans: List[ScanHistoryItem] = Field(default_factory=list)


class MatchResponse(BaseModel):
    """One scanned number and the draw result it won, if any"""
    number: str
    matched: bool
    prize_type: Optional[str] = None
    winning_number: Optional[str] = None
    region: Optional[str] = None


class CheckResultResponse(BaseModel):
    """Scanned numbers of a stored scan checked against the draw results"""
    scan_id: str
    matches: List[MatchResponse] = Field(default_factory=list)

    @classmethod
    def from_check(cls, check: ResultCheck) -> "CheckResultResponse":
        return cls(
            scan_id=check.scan_id,
            matches=[MatchResponse(**match.model_dump()) for match in check.matches],
        )


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    ai_provider: str = Field(..., description="Vision model vendor in use")
    hybrid_enabled: bool = Field(..., description="OCR corroboration configured")
    ocr_engine_available: bool = Field(..., description="OCR engine loaded")
