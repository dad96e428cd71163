"""
Wrapper for EasyOCR
"""
from typing import List, Optional

import easyocr
import numpy as np

from app.core.exceptions import ConfigurationError, RecognizerTransportError
from app.core.logging import get_logger
from app.infrastructure.ocr_engines.base_engine import BaseOCREngine
from app.models.domain import OCRToken

logger = get_logger(__name__)

# Ticket numbers are digits; restricting the charset cuts letter/digit confusion
DIGIT_ALLOWLIST = "0123456789"


class EasyOCREngine(BaseOCREngine):
    """
    EasyOCR wrapper, the text detector used to corroborate the AI reading
    """

    provider = "easyocr"

    def __init__(
            self,
            languages: List[str] = None,
            gpu: bool = False,
            timeout: float = 30.0,
            retry_backoff: float = 1.0,
    ):
        """
        Configure the EasyOCR engine

        Args:
            languages: Recognition languages
            gpu: Use the GPU when available
            timeout: Per-attempt timeout in seconds
            retry_backoff: Pause before the single retry, in seconds
        """
        super().__init__(timeout=timeout, retry_backoff=retry_backoff)
        self.languages = languages or ['en']
        self.gpu = gpu
        self.reader: Optional[easyocr.Reader] = None

        logger.info(
            "EasyOCR engine configured",
            languages=self.languages,
            gpu=self.gpu
        )

    def initialize(self) -> None:
        """Load the EasyOCR reader"""
        try:
            logger.info("Initializing EasyOCR...")

            self.reader = easyocr.Reader(
                lang_list=self.languages,
                gpu=self.gpu,
                verbose=False
            )

            logger.info("EasyOCR initialized successfully")

        except Exception as e:
            logger.error("Failed to initialize EasyOCR", error=str(e))
            raise ConfigurationError(
                f"Failed to initialize EasyOCR: {str(e)}",
                details={"error": str(e)}
            )

    def read_tokens(self, image: np.ndarray) -> List[OCRToken]:
        """
        Detect words with EasyOCR

        Args:
            image: Image as a numpy array (RGB)

        Returns:
            Detected words in reading order

        Raises:
            RecognizerTransportError: If EasyOCR failed
        """
        if self.reader is None:
            raise RecognizerTransportError(
                "EasyOCR not initialized. Call initialize() first.",
                provider=self.provider,
            )

        try:
            # readtext returns: [([[x1,y1], [x2,y2], [x3,y3], [x4,y4]], text, confidence), ...]
            results = self.reader.readtext(image, allowlist=DIGIT_ALLOWLIST)
        except Exception as e:
            logger.error("EasyOCR extraction failed", error=str(e))
            raise RecognizerTransportError(
                f"Failed to extract text with EasyOCR: {str(e)}",
                provider=self.provider,
                details={"error": str(e)}
            )

        tokens = []
        for bbox, text, confidence in results:
            xs = [int(x) for x, _ in bbox]
            ys = [int(y) for _, y in bbox]
            tokens.append(
                OCRToken(
                    text=text,
                    confidence=min(max(float(confidence), 0.0), 1.0),
                    bbox=(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys)),
                )
            )

        logger.debug("EasyOCR extraction completed", tokens_count=len(tokens))
        return tokens

    def is_available(self) -> bool:
        """
        Check EasyOCR availability

        Returns:
            True if the reader is loaded
        """
        return self.reader is not None

    def cleanup(self) -> None:
        """Release resources"""
        if self.reader is not None:
            logger.info("Cleaning up EasyOCR resources")
            self.reader = None
