"""
Abstract base class for OCR engines
"""
import asyncio
import threading
from abc import ABC, abstractmethod
from typing import List

import numpy as np

from app.core.exceptions import RecognizerTransportError
from app.core.retry import call_with_retry
from app.models.domain import OCRResult, OCRToken
from app.services.number_splitter import split_loto_numbers
from app.utils.image_utils import bytes_to_numpy

# Punctuation OCR tends to glue onto numbers in grid cells
TOKEN_STRIP_CHARS = ".,;:|()[]'\""


def build_ocr_result(tokens: List[OCRToken], provider: str) -> OCRResult:
    """
    Assemble an OCRResult from the engine's words

    Every whitespace-separated word is passed through the LOTO number splitter;
    the confidence is the mean of the token confidences.

    Args:
        tokens: Words in reading order
        provider: Engine name

    Returns:
        OCRResult
    """
    numbers: List[int] = []
    for token in tokens:
        for word in token.text.split():
            numbers.extend(split_loto_numbers(word.strip(TOKEN_STRIP_CHARS)))

    confidence = (
        sum(token.confidence for token in tokens) / len(tokens) if tokens else 0.0
    )

    return OCRResult(
        tokens=tokens,
        numbers=numbers,
        full_text="\n".join(token.text for token in tokens),
        confidence=confidence,
        provider=provider,
    )


class BaseOCREngine(ABC):
    """
    Abstract base class for all OCR engines
    Defines one interface over the different OCR libraries
    """

    provider: str = "ocr"

    def __init__(self, timeout: float = 30.0, retry_backoff: float = 1.0):
        self.timeout = timeout
        self.retry_backoff = retry_backoff
        self._read_lock = threading.Lock()

    @abstractmethod
    def initialize(self) -> None:
        """Load the engine"""
        pass

    @abstractmethod
    def read_tokens(self, image: np.ndarray) -> List[OCRToken]:
        """
        Blocking text detection

        Args:
            image: Image as a numpy array (RGB)

        Returns:
            Detected words with confidence and bounding box

        Raises:
            RecognizerTransportError: If the engine failed
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check that the engine is ready

        Returns:
            True if the engine can be used
        """
        pass

    def cleanup(self) -> None:
        """Release resources (optional)"""
        pass

    def _read_tokens_exclusive(self, image: np.ndarray) -> List[OCRToken]:
        # A timed-out attempt is abandoned, not aborted: its worker thread keeps
        # the reader until it returns, and the retry waits for it here.
        with self._read_lock:
            return self.read_tokens(image)

    async def scan(self, image_bytes: bytes, mime_type: str) -> OCRResult:
        """
        Detect the words of a ticket image and recover its LOTO numbers

        Args:
            image_bytes: Decoded image
            mime_type: Image MIME type, already validated upstream

        Returns:
            OCRResult

        Raises:
            RecognizerTransportError: Engine unavailable, failed or timed out twice
        """
        if not self.is_available():
            raise RecognizerTransportError(
                f"{self.provider} engine not initialized",
                provider=self.provider,
            )

        image = bytes_to_numpy(image_bytes)
        tokens = await call_with_retry(
            lambda: asyncio.to_thread(self._read_tokens_exclusive, image),
            provider=self.provider,
            timeout=self.timeout,
            backoff=self.retry_backoff,
        )
        return build_ocr_result(tokens, self.provider)
