"""
Custom exceptions for the ticket scanning service
"""
from typing import Optional


class ScanException(Exception):
    """Base exception for the scanning service"""
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ImageValidationError(ScanException):
    """Uploaded image could not be decoded or is not acceptable"""
    pass


class RecognizerError(ScanException):
    """Failure of a recognizer (OCR engine or AI model)"""
    def __init__(self, message: str, provider: Optional[str] = None, details: dict = None):
        self.provider = provider
        super().__init__(message, details)


class RecognizerTransportError(RecognizerError):
    """Timeout, network or engine failure. Retried once before surfacing"""
    pass


class RecognizerResponseError(RecognizerError):
    """Recognizer answered with output that cannot be parsed. Never retried"""
    pass


class ConfigurationError(ScanException):
    """Configuration error"""
    pass


class ScanNotFoundError(ScanException):
    """Requested scan does not exist in the repository"""
    pass
