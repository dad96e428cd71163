import asyncio
import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from app.core.enums import LotteryType
from app.core.exceptions import RecognizerResponseError, RecognizerTransportError
from app.infrastructure.ai_scanners.base_scanner import clean_json, parse_recognition_response
from app.infrastructure.ai_scanners.gemini_scanner import GeminiScanner, build_generate_config
from app.infrastructure.ai_scanners.openai_scanner import OpenAIScanner
from app.infrastructure.ai_scanners.prompts import (
    HYBRID_RULES,
    OCR_HINT_MAX_TEXT,
    SCAN_PROMPT,
    build_prompt,
    format_ocr_hint,
)
from app.models.domain import OCRResult
from tests.fakes import FakeAIScanner, ai_json


def test_clean_json_strips_code_fences():
    assert clean_json('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_json('```\n{"a": 1}```') == '{"a": 1}'
    assert clean_json('  {"a": 1}  ') == '{"a": 1}'


def test_parse_fenced_response():
    content = "```json\n" + ai_json([22, 13, 13], 0.9, ticket_id="XY") + "\n```"

    result = parse_recognition_response(content, "test")

    assert result.lottery_type == LotteryType.LOTO
    assert result.numbers == [13, 22]
    assert result.ticket_id == "XY"


def test_parse_drops_out_of_range_loto_numbers():
    result = parse_recognition_response(ai_json([0, 5, 90, 91], 0.9), "test")

    assert result.numbers == [5, 90]


def test_parse_six_digit_ticket_clears_blocks():
    content = ai_json(
        [123456, 1234567],
        0.8,
        lottery_type="VN_6_DIGIT",
        blocks=[{"row1": [1], "row2": [], "row3": []}],
    )

    result = parse_recognition_response(content, "test")

    assert result.lottery_type == LotteryType.VN_6_DIGIT
    assert result.blocks == []
    assert result.numbers == [123456]


def test_parse_keeps_at_most_three_blocks_and_clamps_confidence():
    blocks = [{"row1": [i], "row2": [], "row3": []} for i in range(1, 5)]

    result = parse_recognition_response(ai_json([1, 2, 3, 4], 1.4, blocks=blocks), "test")

    assert len(result.blocks) == 3
    assert result.confidence == 1.0


def test_parse_accepts_null_fields():
    content = json.dumps({"lottery_type": "LOTO", "blocks": None, "all_numbers": None,
                          "ticket_id": None, "confidence": 0.0, "notes": None})

    result = parse_recognition_response(content, "test")

    assert result.numbers == []
    assert result.notes == ""


@pytest.mark.parametrize(
    "content",
    [
        "I cannot read this ticket",
        '{"lottery_type": "KENO", "all_numbers": [1], "confidence": 0.5}',
        '{"lottery_type": "LOTO", "all_numbers": ["x"], "confidence": 0.5}',
        "[1, 2, 3]",
    ],
)
def test_parse_invalid_output_raises_response_error(content):
    with pytest.raises(RecognizerResponseError) as exc_info:
        parse_recognition_response(content, "test")
    assert exc_info.value.provider == "test"


def test_prompt_without_hint_is_plain_scan_prompt():
    assert build_prompt() == SCAN_PROMPT
    assert build_prompt("") == SCAN_PROMPT


def test_prompt_with_hint_contains_ocr_data_and_hybrid_rules():
    ocr = OCRResult(numbers=[13, 22], full_text="13 22", confidence=0.83, provider="easyocr")

    prompt = build_prompt(format_ocr_hint(ocr))

    assert "Detected numbers: [13, 22]" in prompt
    assert "OCR confidence: 0.83" in prompt
    assert "from easyocr" in prompt
    assert SCAN_PROMPT in prompt
    assert HYBRID_RULES in prompt


def test_ocr_hint_truncates_raw_text():
    ocr = OCRResult(full_text="7" * 2000, provider="easyocr")

    hint = format_ocr_hint(ocr)

    assert "7" * OCR_HINT_MAX_TEXT in hint
    assert "7" * (OCR_HINT_MAX_TEXT + 1) not in hint


def test_scan_ticket_retries_transport_failure_then_parses():
    scanner = FakeAIScanner(
        RecognizerTransportError("empty content", provider="fake-ai"),
        ai_json([10, 20], 0.9),
    )

    result = asyncio.run(scanner.scan_ticket("aGVsbG8=", "image/png", ocr_hint="## OCR Data"))

    assert result.numbers == [10, 20]
    assert len(scanner.prompts) == 2
    assert all("## OCR Data" in prompt for prompt in scanner.prompts)


def test_scan_ticket_does_not_retry_malformed_output():
    scanner = FakeAIScanner("not json")

    with pytest.raises(RecognizerResponseError):
        asyncio.run(scanner.scan_ticket("aGVsbG8=", "image/png"))
    assert len(scanner.prompts) == 1


class _FakeCompletions:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def create(self, **params):
        self.calls.append(params)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _openai_scanner(completions, **kwargs):
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIScanner(api_key="test", retry_backoff=0, client=client, **kwargs)


def _completion(content=None, refusal=None):
    message = SimpleNamespace(content=content, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def test_openai_scanner_sends_image_data_uri():
    completions = _FakeCompletions(_completion(ai_json([1, 2], 0.9)))
    scanner = _openai_scanner(completions, model="gpt-test", reasoning_effort="Low")

    result = asyncio.run(scanner.scan_ticket("aGVsbG8=", "image/jpeg"))

    params = completions.calls[0]
    assert result.numbers == [1, 2]
    assert params["model"] == "gpt-test"
    assert params["reasoning_effort"] == "low"
    content = params["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": SCAN_PROMPT}
    assert content[1]["image_url"]["url"] == "data:image/jpeg;base64,aGVsbG8="


def test_openai_scanner_retries_api_errors_and_refusals():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    completions = _FakeCompletions(
        openai.APIConnectionError(request=request),
        openai.APIConnectionError(request=request),
    )
    scanner = _openai_scanner(completions)

    with pytest.raises(RecognizerTransportError):
        asyncio.run(scanner.scan_ticket("aGVsbG8=", "image/png"))
    assert len(completions.calls) == 2

    completions = _FakeCompletions(_completion(refusal="no"), _completion(ai_json([4], 0.7)))
    scanner = _openai_scanner(completions)

    assert asyncio.run(scanner.scan_ticket("aGVsbG8=", "image/png")).numbers == [4]


class _FakeGeminiModels:
    def __init__(self, text, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def test_gemini_scanner_sends_inline_image():
    models = _FakeGeminiModels("```json\n" + ai_json([7, 8], 0.8) + "\n```")
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    scanner = GeminiScanner(api_key="test", model="gemini-test", retry_backoff=0, client=client)

    result = asyncio.run(scanner.scan_ticket("aGVsbG8=", "image/png"))

    call = models.calls[0]
    assert result.numbers == [7, 8]
    assert call["model"] == "gemini-test"
    assert call["config"] is None
    assert call["contents"][1].inline_data.data == b"hello"
    assert call["contents"][1].inline_data.mime_type == "image/png"


def test_gemini_empty_answer_is_transport_error():
    models = _FakeGeminiModels(None)
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    scanner = GeminiScanner(api_key="test", retry_backoff=0, client=client)

    with pytest.raises(RecognizerTransportError):
        asyncio.run(scanner.scan_ticket("aGVsbG8=", "image/png"))
    assert len(models.calls) == 2


def test_gemini_thinking_config():
    assert build_generate_config("") is None
    assert build_generate_config("off").thinking_config.thinking_budget == 0
    assert build_generate_config("512").thinking_config.thinking_budget == 512


def test_gemini_connection_failure_is_retried_as_transport_error():
    request = httpx.Request("POST", "https://generativelanguage.googleapis.com/")
    models = _FakeGeminiModels(None, error=httpx.ConnectError("All connection attempts failed", request=request))
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    scanner = GeminiScanner(api_key="test", retry_backoff=0, client=client)

    with pytest.raises(RecognizerTransportError) as exc_info:
        asyncio.run(scanner.scan_ticket("aGVsbG8=", "image/png"))

    assert exc_info.value.provider == "gemini"
    assert "unreachable" in exc_info.value.message
    assert len(models.calls) == 2
