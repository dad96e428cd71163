"""
Google Gemini vision model scanner
"""
import base64
import binascii
from typing import Optional

import httpx
from google import genai
from google.genai import errors, types

from app.core.exceptions import ImageValidationError, RecognizerTransportError
from app.core.logging import get_logger
from app.infrastructure.ai_scanners.base_scanner import BaseAIScanner

logger = get_logger(__name__)

THINKING_OFF = {"off", "none", "0"}


def build_generate_config(thinking: str) -> Optional[types.GenerateContentConfig]:
    """
    Translate the GOOGLE_AI_THINKING setting into a request config

    Args:
        thinking: "" for the model default, off/none/0, a token budget, or a
            thinking level such as "low" or "high"

    Returns:
        GenerateContentConfig, or None to use the model default
    """
    thinking = thinking.strip().lower()
    if not thinking:
        return None
    if thinking in THINKING_OFF:
        return types.GenerateContentConfig(
            thinking_config=types.ThinkingConfig(thinking_budget=0)
        )
    if thinking.isdigit():
        return types.GenerateContentConfig(
            thinking_config=types.ThinkingConfig(thinking_budget=int(thinking))
        )
    return types.GenerateContentConfig(
        thinking_config=types.ThinkingConfig(thinking_level=thinking.upper())
    )


class GeminiScanner(BaseAIScanner):
    """Reads tickets through the Gemini API with inline image bytes"""

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        thinking: str = "",
        timeout: float = 90.0,
        retry_backoff: float = 1.0,
        client: Optional[genai.Client] = None,
    ):
        super().__init__(model=model, timeout=timeout, retry_backoff=retry_backoff)
        self.config = build_generate_config(thinking)
        self.client = client or genai.Client(api_key=api_key)

    async def complete(self, prompt: str, image_base64: str, mime_type: str) -> str:
        try:
            image_bytes = base64.b64decode(image_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageValidationError(
                f"Failed to decode base64 image: {str(e)}",
                details={"error": str(e)}
            )

        contents = [
            types.Part.from_text(text=prompt),
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
        ]

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=self.config,
            )
        except errors.APIError as e:
            raise RecognizerTransportError(
                f"gemini request failed: {str(e)}",
                provider=self.provider,
                details={"code": getattr(e, "code", None)},
            )
        except httpx.HTTPError as e:
            # the SDK lets connection failures through as raw httpx errors
            raise RecognizerTransportError(
                f"gemini unreachable: {str(e)}",
                provider=self.provider,
                details={"error_type": type(e).__name__},
            )

        content = (response.text or "").strip()
        if not content:
            raise RecognizerTransportError("gemini returned empty content", provider=self.provider)

        return content
