import asyncio
import threading
import time

import numpy as np
import pytest

from app.core.exceptions import RecognizerTransportError
from app.infrastructure.ocr_engines.base_engine import build_ocr_result
from app.infrastructure.ocr_engines.easyocr_engine import EasyOCREngine
from app.models.domain import OCRToken
from tests.fakes import FakeOCREngine, number_tokens


def test_build_ocr_result_splits_words_and_averages_confidence():
    tokens = [
        OCRToken(text="13 22", confidence=0.9),
        OCRToken(text="523", confidence=0.8),
        OCRToken(text="LOTO", confidence=0.7),
        OCRToken(text="91", confidence=0.6),
        OCRToken(text="40,", confidence=0.5),
    ]

    result = build_ocr_result(tokens, "test-ocr")

    assert result.numbers == [5, 13, 22, 23, 40]
    assert result.confidence == pytest.approx(0.7)
    assert result.full_text == "13 22\n523\nLOTO\n91\n40,"
    assert result.provider == "test-ocr"
    assert result.tokens == tokens


def test_build_ocr_result_without_tokens():
    result = build_ocr_result([], "test-ocr")

    assert result.numbers == []
    assert result.confidence == 0.0
    assert result.full_text == ""


def test_engine_scan_reads_image_and_builds_result(png_bytes):
    engine = FakeOCREngine(tokens=number_tokens([30, 4, 30], 0.9))

    result = asyncio.run(engine.scan(png_bytes, "image/png"))

    assert result.numbers == [4, 30]
    assert result.confidence == pytest.approx(0.9)
    assert engine.last_shape == (16, 16, 3)


def test_engine_scan_retries_once_then_fails(png_bytes):
    engine = FakeOCREngine(error=RecognizerTransportError("engine crashed", provider="fake-ocr"))

    with pytest.raises(RecognizerTransportError):
        asyncio.run(engine.scan(png_bytes, "image/png"))
    assert engine.calls == 2


def test_unavailable_engine_fails_without_reading(png_bytes):
    engine = FakeOCREngine(available=False)

    with pytest.raises(RecognizerTransportError, match="not initialized"):
        asyncio.run(engine.scan(png_bytes, "image/png"))
    assert engine.calls == 0


class _SlowOCREngine(FakeOCREngine):
    """First read outlives the attempt timeout"""

    def __init__(self):
        super().__init__(tokens=number_tokens([5], 0.9))
        self.timeout = 0.1
        self.active = 0
        self.max_active = 0
        self._counter_lock = threading.Lock()

    def read_tokens(self, image):
        with self._counter_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            first = self.calls == 0
            self.calls += 1
        if first:
            time.sleep(0.3)
        with self._counter_lock:
            self.active -= 1
        return self.tokens


def test_timed_out_read_never_overlaps_the_retry(png_bytes):
    engine = _SlowOCREngine()

    with pytest.raises(RecognizerTransportError, match="timed out"):
        asyncio.run(engine.scan(png_bytes, "image/png"))

    # asyncio.run waits for the abandoned worker threads before returning
    assert engine.calls == 2
    assert engine.max_active == 1


class _FakeReader:
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error
        self.kwargs = None

    def readtext(self, image, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.results


def test_easyocr_tokens_from_reader_output():
    engine = EasyOCREngine(languages=["en"])
    engine.reader = _FakeReader(
        [([[10, 20], [50, 20], [50, 40], [10, 40]], "523", 0.87)]
    )

    tokens = engine.read_tokens(np.zeros((8, 8, 3), dtype=np.uint8))

    assert tokens == [OCRToken(text="523", confidence=0.87, bbox=(10, 20, 40, 20))]
    assert engine.reader.kwargs == {"allowlist": "0123456789"}
    assert engine.is_available()


def test_easyocr_failures_are_transport_errors():
    engine = EasyOCREngine()

    with pytest.raises(RecognizerTransportError):
        engine.read_tokens(np.zeros((8, 8, 3), dtype=np.uint8))

    engine.reader = _FakeReader(error=RuntimeError("CUDA out of memory"))
    with pytest.raises(RecognizerTransportError, match="CUDA"):
        engine.read_tokens(np.zeros((8, 8, 3), dtype=np.uint8))

    engine.cleanup()
    assert not engine.is_available()
