"""
Spatial data types: OCR words in pixel space, anchors, and write positions
in document space (points, origin bottom-left).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class OcrWord:
    """A recognized word with its pixel bounding box (origin top-left)."""
    text: str
    x1: int
    y1: int
    x2: int
    y2: int
    confidence: Optional[float] = None

    @property
    def bbox(self) -> Tuple[int, int, int, int]:
        return (self.x1, self.y1, self.x2, self.y2)

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1


@dataclass(frozen=True)
class OcrPage:
    """One rasterized page as handed over by the OCR collaborator."""
    words: List[OcrWord]
    image_width: int
    image_height: int
    page_width: float
    page_height: float


@dataclass(frozen=True)
class Anchor:
    """
    A located (or estimated) landmark in pixel space.

    title_end_x / line_start_x are only set on signature anchors: the right
    edge of the "…人" token closing the title phrase and the left edge of the
    first token on the signature line.
    """
    text: str
    x1: int
    y1: int
    x2: int
    y2: int
    estimated: bool = False
    title_end_x: Optional[int] = None
    line_start_x: Optional[int] = None

    @classmethod
    def from_word(cls, word: OcrWord, **extra) -> 'Anchor':
        return cls(text=word.text, x1=word.x1, y1=word.y1, x2=word.x2, y2=word.y2, **extra)

    @classmethod
    def estimate(cls, x: int, y: int, width: int, height: int, text: str) -> 'Anchor':
        return cls(text=text, x1=x, y1=y, x2=x + width, y2=y + height, estimated=True)


@dataclass(frozen=True)
class AnchorSet:
    """Anchors found inside the receipt section of one page."""
    strike_target: Optional[Anchor]
    date_blank: Anchor
    signature_line: Anchor
    section_top: int = 0
    label_found: bool = False


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class StrikePosition:
    """Where the honorific-replacement strike-through goes."""
    left_x: float
    right_x: float
    baseline_y: float
    top_y: float
    width: float
    height: float
    pixel_top: int


@dataclass(frozen=True)
class DatePosition:
    x: float
    top_y: float
    baseline_y: float
    estimated: bool = False

    @property
    def height(self) -> float:
        return self.top_y - self.baseline_y


@dataclass(frozen=True)
class SignaturePosition:
    x: float
    top_y: float
    baseline_y: float
    title_end_x: Optional[float] = None
    estimated: bool = False

    @property
    def height(self) -> float:
        return self.top_y - self.baseline_y


@dataclass(frozen=True)
class WritePosition:
    """Document-space targets for the page-annotation collaborator."""
    strike: Optional[StrikePosition]
    date: DatePosition
    signature: SignaturePosition
    page_width: float
    page_height: float
    warnings: Tuple[str, ...] = field(default_factory=tuple)
