"""
Enums for type safety
"""
from enum import Enum


class AIProvider(str, Enum):
    """Vision model vendors"""
    OPENAI = "openai"
    GEMINI = "gemini"


class ImageFormat(str, Enum):
    """Accepted image formats (as reported by Pillow)"""
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


class LotteryType(str, Enum):
    """Ticket layouts the scanner understands"""
    LOTO = "LOTO"  # bingo card, 3 blocks of 3 rows, numbers 1-90
    VN_6_DIGIT = "VN_6_DIGIT"  # traditional ticket with 6-digit numbers


class ScanStatus(str, Enum):
    """Acceptance tier of a validated scan"""
    CONFIRMED = "confirmed"
    NEEDS_CONFIRMATION = "needs_confirmation"
    REJECTED = "rejected"


class AgreementTier(str, Enum):
    """How well the OCR numbers corroborate the AI numbers"""
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
