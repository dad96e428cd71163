"""
Domain models: recognizer outputs, validation outcome, stored scans, draw results
"""
from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.core.enums import LotteryType, ScanStatus


def _clamp_confidence(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


class OCRToken(BaseModel):
    """Single word detected by the OCR engine"""
    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    bbox: Tuple[int, int, int, int] = Field(
        (0, 0, 0, 0),
        description="x, y, width, height of the word's bounding box",
    )


class OCRResult(BaseModel):
    """Output of one OCR invocation"""
    model_config = ConfigDict(frozen=True)

    tokens: List[OCRToken] = Field(default_factory=list)
    numbers: List[int] = Field(
        default_factory=list,
        description="LOTO numbers recovered from the tokens, deduplicated and ascending",
    )
    full_text: str = ""
    confidence: float = Field(0.0, description="Mean token confidence")
    provider: str

    @field_validator("numbers")
    @classmethod
    def dedupe_numbers(cls, v: List[int]) -> List[int]:
        return sorted(set(v))

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return _clamp_confidence(v)


class TicketBlock(BaseModel):
    """One 3x9 block of a LOTO card"""
    model_config = ConfigDict(frozen=True)

    row1: List[int] = Field(default_factory=list)
    row2: List[int] = Field(default_factory=list)
    row3: List[int] = Field(default_factory=list)


class RecognitionResult(BaseModel):
    """
    Structured ticket reading, produced by an AI scanner or by reconciliation

    Serialized with the keys the vision model is asked to answer with
    (``all_numbers`` for the number set).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    lottery_type: LotteryType = LotteryType.LOTO
    blocks: List[TicketBlock] = Field(default_factory=list, max_length=3)
    numbers: List[int] = Field(default_factory=list, alias="all_numbers")
    ticket_id: str = ""
    confidence: float = 0.0
    notes: str = ""

    @field_validator("blocks", mode="before")
    @classmethod
    def keep_first_three_blocks(cls, v):
        if v is None:
            return []
        return list(v)[:3]

    @field_validator("blocks")
    @classmethod
    def drop_blocks_for_six_digit(cls, v: List[TicketBlock], info: ValidationInfo) -> List[TicketBlock]:
        if info.data.get("lottery_type") == LotteryType.VN_6_DIGIT:
            return []
        return v

    @field_validator("numbers", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v

    @field_validator("numbers")
    @classmethod
    def dedupe_numbers(cls, v: List[int]) -> List[int]:
        return sorted(set(v))

    @field_validator("ticket_id", "notes", mode="before")
    @classmethod
    def none_as_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return _clamp_confidence(v)


class ValidationOutcome(BaseModel):
    """Final verdict on a recognition result"""
    model_config = ConfigDict(frozen=True)

    numbers: List[int] = Field(default_factory=list)
    status: ScanStatus
    error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status != ScanStatus.REJECTED


class ScanRecord(BaseModel):
    """A validated scan; stored (and given an id) only when accepted"""
    model_config = ConfigDict(frozen=True)

    scan_id: Optional[str] = None
    user_id: Optional[str] = None
    recognition: RecognitionResult
    outcome: ValidationOutcome
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LotteryResult(BaseModel):
    """One published winning number of a draw"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    draw_date: date = Field(..., alias="date")
    region: str
    prize_type: str
    winning_number: str

    @field_validator("winning_number", mode="before")
    @classmethod
    def number_as_text(cls, v):
        return str(v).strip()


class NumberMatch(BaseModel):
    """Outcome of checking one scanned number against the draw results"""
    model_config = ConfigDict(frozen=True)

    number: str
    matched: bool = False
    prize_type: Optional[str] = None
    winning_number: Optional[str] = None
    region: Optional[str] = None


class ResultCheck(BaseModel):
    """All numbers of a stored scan, each with its match, in scan order"""
    model_config = ConfigDict(frozen=True)

    scan_id: str
    matches: List[NumberMatch] = Field(default_factory=list)
