"""
Prompts for the vision model
"""
from app.models.domain import OCRResult

# Raw OCR text beyond this is noise for the model
OCR_HINT_MAX_TEXT = 500

SCAN_PROMPT = """You are a Vietnamese lottery ticket scanner. Analyze the image and extract all numbers visible on the ticket.

The ticket may be:
- "LOTO" (Lô Tô): A bingo-style card with 3 blocks, each block has 3 rows x 9 columns. Numbers range from 1 to 90. Each row has 5 numbers and 4 blank cells.
- "VN_6_DIGIT": A traditional lottery ticket with 6-digit numbers.

Respond ONLY with valid JSON in this exact format:
{
  "lottery_type": "LOTO",
  "blocks": [
    {"row1": [13, 22, 41, 61, 86], "row2": [3, 24, 34, 52, 71], "row3": [1, 35, 56, 64, 83]},
    {"row1": [], "row2": [], "row3": []},
    {"row1": [], "row2": [], "row3": []}
  ],
  "all_numbers": [1, 3, 13, 22, 24, 34, 35, 41, 52, 56, 61, 64, 71, 83, 86],
  "ticket_id": "",
  "confidence": 0.0,
  "notes": ""
}

Rules:
- For LOTO: each number is 1-90, extract every number from all 3 blocks
- For VN_6_DIGIT: each number is exactly 6 digits, put them in all_numbers, leave blocks empty
- all_numbers must contain every unique number on the ticket, sorted ascending
- confidence is 0.0 to 1.0 based on image clarity
- ticket_id: any visible ticket/series number
- If you cannot read the ticket, set confidence to 0.0 and all_numbers to empty array
- Do not make up numbers. Only extract what you can clearly see."""

HYBRID_RULES = """Additional rules for hybrid mode:
- Prefer OCR-detected numbers unless the image clearly contradicts them
- If OCR missed numbers that are clearly visible in the image, add them
- If OCR detected wrong numbers (e.g., OCR says 18 but image shows 13), correct them
- Set higher confidence when OCR and your reading agree
- In notes, mention any corrections you made vs the OCR data"""


def format_ocr_hint(ocr: OCRResult) -> str:
    """
    Describe an OCR reading for the vision model

    Args:
        ocr: Completed OCR result

    Returns:
        Hint text listing the detected numbers, OCR confidence and raw text
    """
    numbers = ", ".join(str(n) for n in ocr.numbers)
    full_text = ocr.full_text[:OCR_HINT_MAX_TEXT]
    return (
        f"## OCR Data (from {ocr.provider})\n"
        f"Detected numbers: [{numbers}]\n"
        f"OCR confidence: {ocr.confidence:.2f}\n"
        f'Raw text: "{full_text}"'
    )


def build_prompt(ocr_hint: str = None) -> str:
    """Plain scan prompt, or the OCR-augmented one when a hint is given"""
    if not ocr_hint:
        return SCAN_PROMPT

    return (
        "You have OCR data to help you. Analyze BOTH the image and the OCR data below.\n\n"
        f"{ocr_hint}\n\n"
        "## Your Task\n"
        "Use the OCR numbers as your primary reference. "
        "Only override OCR numbers when the image clearly shows different digits.\n\n"
        f"{SCAN_PROMPT}\n\n"
        f"{HYBRID_RULES}"
    )
