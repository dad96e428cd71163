"""
Abstract base class for vision-model ticket scanners
"""
import json
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import ValidationError

from app.core.enums import LotteryType
from app.core.exceptions import RecognizerResponseError
from app.core.logging import get_logger
from app.core.retry import call_with_retry
from app.infrastructure.ai_scanners.prompts import build_prompt
from app.models.domain import RecognitionResult
from app.services.number_splitter import LOTO_MAX, LOTO_MIN

logger = get_logger(__name__)

SIX_DIGIT_MAX = 999_999


def clean_json(content: str) -> str:
    """Strip the Markdown code fence models like to wrap JSON in"""
    content = content.strip()
    for prefix in ("```json", "```"):
        if content.startswith(prefix):
            content = content[len(prefix):]
            break
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def parse_recognition_response(content: str, provider: str) -> RecognitionResult:
    """
    Parse the model's JSON answer into a RecognitionResult

    Numbers outside the range of the ticket type are dropped here, so later
    stages can take the AI number set as range-checked.

    Args:
        content: Raw text answer of the model
        provider: Scanner name used in errors

    Returns:
        RecognitionResult

    Raises:
        RecognizerResponseError: If the answer is not the expected JSON
    """
    cleaned = clean_json(content)
    try:
        payload = json.loads(cleaned)
        result = RecognitionResult.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(
            "Failed to parse model response",
            provider=provider,
            raw_content=content,
            cleaned_content=cleaned,
            error=str(e),
        )
        raise RecognizerResponseError(
            f"Invalid JSON from {provider}: {str(e)}",
            provider=provider,
            details={"raw_content": content[:1000]},
        )

    if result.lottery_type == LotteryType.LOTO:
        low, high = LOTO_MIN, LOTO_MAX
    else:
        low, high = 0, SIX_DIGIT_MAX

    in_range = [n for n in result.numbers if low <= n <= high]
    if len(in_range) != len(result.numbers):
        result = result.model_copy(update={"numbers": in_range})
    return result


class BaseAIScanner(ABC):
    """
    Common flow of every vision-model scanner: prompt, call with timeout and
    one retry, parse. Subclasses only implement the vendor request.
    """

    provider: str = "ai"

    def __init__(self, model: str, timeout: float = 90.0, retry_backoff: float = 1.0):
        self.model = model
        self.timeout = timeout
        self.retry_backoff = retry_backoff

    @abstractmethod
    async def complete(self, prompt: str, image_base64: str, mime_type: str) -> str:
        """
        Send one request to the model

        Returns:
            The model's raw text answer

        Raises:
            RecognizerTransportError: Network/API failure, refusal or empty answer
        """
        pass

    async def scan_ticket(
        self,
        image_base64: str,
        mime_type: str,
        ocr_hint: Optional[str] = None,
    ) -> RecognitionResult:
        """
        Read the numbers of a ticket image

        Args:
            image_base64: Image in base64
            mime_type: Image MIME type
            ocr_hint: OCR findings to include in the prompt

        Returns:
            RecognitionResult

        Raises:
            RecognizerTransportError: The model could not be reached twice
            RecognizerResponseError: The model answered with unusable output
        """
        prompt = build_prompt(ocr_hint)
        content = await call_with_retry(
            lambda: self.complete(prompt, image_base64, mime_type),
            provider=self.provider,
            timeout=self.timeout,
            backoff=self.retry_backoff,
        )
        return parse_recognition_response(content, self.provider)
