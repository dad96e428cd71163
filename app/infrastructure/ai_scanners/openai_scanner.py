"""
OpenAI vision model scanner
"""
from typing import Any, Dict, Optional

import openai
from openai import AsyncOpenAI

from app.core.exceptions import RecognizerTransportError
from app.core.logging import get_logger
from app.infrastructure.ai_scanners.base_scanner import BaseAIScanner

logger = get_logger(__name__)

MAX_COMPLETION_TOKENS = 16000


class OpenAIScanner(BaseAIScanner):
    """Reads tickets through the chat completions API with an inline image"""

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-5.2",
        reasoning_effort: str = "",
        timeout: float = 90.0,
        retry_backoff: float = 1.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        super().__init__(model=model, timeout=timeout, retry_backoff=retry_backoff)
        self.reasoning_effort = reasoning_effort.lower()
        # retries are handled by call_with_retry
        self.client = client or AsyncOpenAI(api_key=api_key, max_retries=0)

    async def complete(self, prompt: str, image_base64: str, mime_type: str) -> str:
        data_uri = f"data:{mime_type};base64,{image_base64}"
        params: Dict[str, Any] = {
            "model": self.model,
            "max_completion_tokens": MAX_COMPLETION_TOKENS,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": data_uri}},
                    ],
                }
            ],
        }
        if self.reasoning_effort:
            params["reasoning_effort"] = self.reasoning_effort

        try:
            response = await self.client.chat.completions.create(**params)
        except openai.APIError as e:
            raise RecognizerTransportError(
                f"openai request failed: {str(e)}",
                provider=self.provider,
                details={"error_type": type(e).__name__},
            )

        if not response.choices:
            raise RecognizerTransportError("openai returned no choices", provider=self.provider)

        message = response.choices[0].message
        if message.refusal:
            logger.warning("Model refusal", provider=self.provider, refusal=message.refusal)
            raise RecognizerTransportError(
                f"model refused the request: {message.refusal}",
                provider=self.provider,
            )

        content = (message.content or "").strip()
        if not content:
            raise RecognizerTransportError("openai returned empty content", provider=self.provider)

        return content
