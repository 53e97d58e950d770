"""
Adapters from Tesseract output to OcrWord lists.

Running Tesseract (and rasterizing the PDF) happens outside this package; these
functions only parse what it returns.
"""

import html
import logging
import re
from typing import Dict, List

from filingkit.models.layout import OcrWord

logger = logging.getLogger(__name__)

_HOCR_WORD = re.compile(
    r"<span[^>]+class=['\"]ocrx_word['\"][^>]+title=['\"]bbox (\d+) (\d+) (\d+) (\d+)([^'\"]*)['\"][^>]*>"
    r"([\s\S]*?)</span>"
)
_CONFIDENCE = re.compile(r'x_wconf (\d+)')
_MARKUP = re.compile(r'<[^>]+>')


def words_from_hocr(hocr: str) -> List[OcrWord]:
    """
    Parse ``ocrx_word`` spans from Tesseract hOCR.

    Inner markup (<strong>, <em>) is stripped and entities are decoded; empty
    words are dropped.
    """
    words = []
    for match in _HOCR_WORD.finditer(hocr):
        text = html.unescape(_MARKUP.sub('', match.group(6))).strip()
        if not text:
            continue
        confidence = _CONFIDENCE.search(match.group(5))
        words.append(OcrWord(
            text=text,
            x1=int(match.group(1)),
            y1=int(match.group(2)),
            x2=int(match.group(3)),
            y2=int(match.group(4)),
            confidence=float(confidence.group(1)) if confidence else None,
        ))

    logger.debug(f"Parsed {len(words)} words from hOCR")
    return words


def words_from_tesseract_data(data: Dict[str, List]) -> List[OcrWord]:
    """
    Convert ``pytesseract.image_to_data(..., output_type=Output.DICT)`` output.

    Args:
        data: Dictionary with keys: 'text', 'left', 'top', 'width', 'height', 'conf'

    Returns:
        Words with non-empty text and non-negative confidence
    """
    if not data or 'text' not in data:
        return []

    words = []
    for i in range(len(data['text'])):
        text = str(data['text'][i]).strip()

        # Skip empty text
        if not text:
            continue

        # Negative confidence marks layout boxes, not words
        conf = float(data['conf'][i])
        if conf < 0:
            continue

        x = int(data['left'][i])
        y = int(data['top'][i])
        words.append(OcrWord(
            text=text,
            x1=x,
            y1=y,
            x2=x + int(data['width'][i]),
            y2=y + int(data['height'][i]),
            confidence=conf,
        ))
    return words
