"""
Test doubles built on the real recognizer base classes
"""
import io
import json
from typing import List, Optional

import numpy as np
from PIL import Image

from app.infrastructure.ai_scanners.base_scanner import BaseAIScanner
from app.infrastructure.ocr_engines.base_engine import BaseOCREngine
from app.models.domain import OCRToken
from app.services.reporting import ScanReporter


def make_image_bytes(fmt: str = "PNG", size=(16, 16)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(255, 255, 255)).save(buffer, format=fmt)
    return buffer.getvalue()


def ai_json(
    numbers: List[int],
    confidence: float,
    lottery_type: str = "LOTO",
    blocks: Optional[list] = None,
    ticket_id: str = "",
    notes: str = "",
) -> str:
    return json.dumps(
        {
            "lottery_type": lottery_type,
            "blocks": blocks or [],
            "all_numbers": numbers,
            "ticket_id": ticket_id,
            "confidence": confidence,
            "notes": notes,
        }
    )


def number_tokens(numbers: List[int], confidence: float) -> List[OCRToken]:
    return [OCRToken(text=str(n), confidence=confidence) for n in numbers]


class FakeAIScanner(BaseAIScanner):
    """Answers from a script; exceptions in the script are raised"""

    provider = "fake-ai"

    def __init__(self, *responses):
        super().__init__(model="fake-model", timeout=1.0, retry_backoff=0)
        self.responses = list(responses)
        self.prompts: List[str] = []

    async def complete(self, prompt: str, image_base64: str, mime_type: str) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, BaseException):
            raise response
        return response


class FakeOCREngine(BaseOCREngine):
    provider = "fake-ocr"

    def __init__(self, tokens: List[OCRToken] = None, error: Exception = None, available: bool = True):
        super().__init__(timeout=1.0, retry_backoff=0)
        self.tokens = tokens or []
        self.error = error
        self.available = available
        self.calls = 0
        self.last_shape = None

    def initialize(self) -> None:
        self.available = True

    def read_tokens(self, image: np.ndarray) -> List[OCRToken]:
        self.calls += 1
        self.last_shape = image.shape
        if self.error is not None:
            raise self.error
        return self.tokens

    def is_available(self) -> bool:
        return self.available


class RecordingReporter(ScanReporter):
    """Keeps the names of the reported events"""

    def __init__(self):
        super().__init__()
        self.events: List[str] = []
        self.reconciliations = []

    def ocr_completed(self, ocr):
        self.events.append("ocr_completed")

    def ocr_failed(self, error):
        self.events.append("ocr_failed")

    def ai_completed(self, ai, provider):
        self.events.append("ai_completed")

    def ai_failed(self, error):
        self.events.append("ai_failed")

    def reconciled(self, reconciliation):
        self.events.append("reconciled")
        self.reconciliations.append(reconciliation)

    def final_result(self, result):
        self.events.append("final_result")
