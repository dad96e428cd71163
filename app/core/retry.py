"""
Timeout and single-retry policy shared by all recognizer calls
"""
import asyncio
from typing import Awaitable, Callable, TypeVar

from app.core.exceptions import RecognizerResponseError, RecognizerTransportError
from app.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    provider: str,
    timeout: float,
    retries: int = 1,
    backoff: float = 1.0,
) -> T:
    """
    Run a recognizer call bounded by a timeout, retrying transport failures

    Args:
        operation: Factory producing a fresh awaitable for every attempt
        provider: Recognizer name used in logs and errors
        timeout: Per-attempt timeout in seconds
        retries: Extra attempts after the first one
        backoff: Fixed pause before each retry, in seconds

    Returns:
        Whatever the operation returns

    Raises:
        RecognizerTransportError: All attempts timed out or failed in transport
        RecognizerResponseError: Raised by the operation; not retried
    """
    attempts = retries + 1
    last_error: RecognizerTransportError = None

    for attempt in range(1, attempts + 1):
        if attempt > 1:
            logger.warning(
                "Retrying recognizer call",
                provider=provider,
                attempt=attempt,
                backoff_seconds=backoff,
            )
            await asyncio.sleep(backoff)

        try:
            return await asyncio.wait_for(operation(), timeout=timeout)
        except RecognizerResponseError:
            raise
        except asyncio.TimeoutError:
            last_error = RecognizerTransportError(
                f"{provider} call timed out after {timeout}s",
                provider=provider,
                details={"attempt": attempt, "timeout_seconds": timeout},
            )
        except RecognizerTransportError as e:
            last_error = e

        logger.warning(
            "Recognizer call failed",
            provider=provider,
            attempt=attempt,
            attempts=attempts,
            error=last_error.message,
        )

    raise last_error
