"""
Shared text normalization utilities for OCR and text-layer output.

Handles the canonicalization steps the field extractor relies on:
- Line endings: CRLF / CR → LF
- Digits: full-width ０-９ ↔ half-width 0-9
- Fax numbers: full-width digits and dash look-alikes → "06-1234-5678"
- Whitespace: OCR inserts spaces inside multi-character tokens

Digit and punctuation conversion is applied per field, never globally, because
some patterns have to see the full-width numerals before conversion.
"""

import re
from typing import Optional

_FULL_WIDTH_OFFSET = 0xFEE0

_FULL_WIDTH_DIGITS = re.compile(r'[０-９]')
_HALF_WIDTH_DIGITS = re.compile(r'[0-9]')
_DASH_LOOKALIKES = re.compile(r'[－ー―‐−]')
_WHITESPACE = re.compile(r'\s+')


def normalize_line_endings(text: Optional[str]) -> str:
    """
    Unify line endings to a single LF.

    Examples:
        >>> normalize_line_endings("a\\r\\nb\\rc")
        'a\\nb\\nc'
    """
    if not text:
        return ""
    return text.replace('\r\n', '\n').replace('\r', '\n')


def to_half_width_digits(text: str) -> str:
    """Convert full-width digits (０-９) to ASCII digits."""
    return _FULL_WIDTH_DIGITS.sub(lambda m: chr(ord(m.group(0)) - _FULL_WIDTH_OFFSET), text)


def to_full_width_digits(text: str) -> str:
    """Convert ASCII digits to full-width digits (０-９)."""
    return _HALF_WIDTH_DIGITS.sub(lambda m: chr(ord(m.group(0)) + _FULL_WIDTH_OFFSET), text)


def strip_whitespace(text: str) -> str:
    """Remove every whitespace character, including newlines and U+3000."""
    return _WHITESPACE.sub('', text)


def normalize_fax(raw: str) -> str:
    """
    Canonicalize a fax number captured from OCR text.

    Examples:
        >>> normalize_fax("０６－６３１６ー２８０４")
        '06-6316-2804'
    """
    return _DASH_LOOKALIKES.sub('-', to_half_width_digits(strip_whitespace(raw)))


def has_usable_text_layer(text: Optional[str], min_chars: int = 10) -> bool:
    """
    Decide whether an embedded text layer is worth extracting from.

    Scanned PDFs often carry an empty or whitespace-only text layer; anything
    shorter than ``min_chars`` non-whitespace characters should go to OCR.
    """
    if not text:
        return False
    return len(strip_whitespace(text)) >= min_chars
