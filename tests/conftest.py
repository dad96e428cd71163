import base64

import pytest

from app.infrastructure.repositories.scan_repository import InMemoryScanRepository
from tests.fakes import RecordingReporter, make_image_bytes


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def png_base64(png_bytes) -> str:
    return base64.b64encode(png_bytes).decode("utf-8")


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def repository() -> InMemoryScanRepository:
    return InMemoryScanRepository()
