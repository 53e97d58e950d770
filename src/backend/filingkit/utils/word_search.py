"""
Spatial search helpers over OCR word lists.

Pixel space throughout: y grows downwards, so "lowest on the page" means the
largest y1.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from filingkit.models.layout import OcrWord
from filingkit.utils.vocabulary import RECEIPT_LABEL_TOKENS

# Split-label search: "受　領　書" recognised one glyph per word
SPLIT_LABEL_Y_TOLERANCE = 50
SPLIT_LABEL_MAX_GAP_X = 300


@dataclass(frozen=True)
class LabelHit:
    """Result of looking for the receipt-section label on a page."""
    found: bool
    y: Optional[int] = None
    word: Optional[OcrWord] = None
    split: bool = False


def find_receipt_label(words: Sequence[OcrWord]) -> LabelHit:
    """
    Find the receipt label ("受領書" / "受領").

    Tries an exact substring match first, then the split pattern where "受"
    and "領" are separate words on the same line with "領" to the right.
    """
    for word in words:
        if any(token in word.text for token in RECEIPT_LABEL_TOKENS):
            return LabelHit(found=True, y=word.y1, word=word)

    for ju in (w for w in words if w.text == '受'):
        for ryou in words:
            if (ryou.text == '領'
                    and abs(ryou.y1 - ju.y1) < SPLIT_LABEL_Y_TOLERANCE
                    and ju.x1 < ryou.x1 < ju.x1 + SPLIT_LABEL_MAX_GAP_X):
                return LabelHit(found=True, y=ju.y1, word=ju, split=True)

    return LabelHit(found=False)


def words_containing(words: Iterable[OcrWord], tokens: Sequence[str]) -> List[OcrWord]:
    """Words whose text contains any of ``tokens``."""
    return [w for w in words if any(token in w.text for token in tokens)]


def words_matching(words: Iterable[OcrWord], predicate: Callable[[OcrWord], bool]) -> List[OcrWord]:
    return [w for w in words if predicate(w)]


def on_same_line(words: Iterable[OcrWord], y: int, tolerance: int) -> List[OcrWord]:
    """Words whose top edge is within ``tolerance`` pixels of ``y``."""
    return [w for w in words if abs(w.y1 - y) < tolerance]


def topmost(words: Sequence[OcrWord]) -> Optional[OcrWord]:
    """Word with the smallest y1; the first one wins ties."""
    best = None
    for word in words:
        if best is None or word.y1 < best.y1:
            best = word
    return best


def lowest(words: Sequence[OcrWord]) -> Optional[OcrWord]:
    """Word with the largest y1; the first one wins ties."""
    best = None
    for word in words:
        if best is None or word.y1 > best.y1:
            best = word
    return best


def rightmost(words: Sequence[OcrWord]) -> Optional[OcrWord]:
    """Word with the largest x1; the first one wins ties."""
    best = None
    for word in words:
        if best is None or word.x1 > best.x1:
            best = word
    return best


def joined_text(words: Iterable[OcrWord]) -> str:
    return ''.join(w.text for w in words)
