"""
Receipt layout: pixel anchors → document-space write positions → drawing plan.

The plan is a list of plain drawing instructions (lines, rectangles, text,
images) in document space. Rendering them onto the PDF is left to the caller.
"""

import logging
import unicodedata
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Union

from filingkit.models.layout import (
    AnchorSet,
    DatePosition,
    SignaturePosition,
    StrikePosition,
    WritePosition,
)
from filingkit.utils.era import format_reiwa_date
from filingkit.utils.geometry import PageGeometry

logger = logging.getLogger(__name__)

TextMeasurer = Callable[[str, float], float]

HONORIFIC = '先生'
SEAL_GLYPH = '㊞'
IDEOGRAPHIC_SPACE = '　'
WHITE = (1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0)

# Strike-through
STRIKE_LINE_GAP = 3.0
STRIKE_LINE_THICKNESS = 0.8
STRIKE_CENTER_RATIO = 0.40
HONORIFIC_OFFSET = 2.0
# Date
DATE_COVER_PAD_X = 4.0
DATE_COVER_PAD_Y = 3.0
DATE_COVER_EXTRA_WIDTH = 40.0
# Signature
NAME_OFFSET = 4.0
NAME_COVER_PAD_X = 2.0
NAME_COVER_EXTRA_WIDTH = 20.0
SEAL_OFFSET = 2.0
SEAL_BASELINE_DROP = 18.0
SEAL_RAISE_RATIO = 0.3
SEAL_GLYPH_OFFSET = 4.0


def estimate_text_width(text: str, font_size: float) -> float:
    """
    Approximate rendered width: full-width glyphs take one em, others half.

    Examples:
        >>> estimate_text_width('山田 A', 10.0)
        30.0
    """
    width = 0.0
    for char in text:
        width += font_size if unicodedata.east_asian_width(char) in ('W', 'F') else font_size / 2
    return width


def build_write_position(anchors: AnchorSet, geometry: PageGeometry) -> WritePosition:
    """Map detected anchors (pixel space) to document-space write targets."""
    warnings = []

    strike = None
    target = anchors.strike_target
    if target is not None:
        left = geometry.to_document(target.x1, target.y2)
        right = geometry.to_document(target.x2, target.y2)
        strike = StrikePosition(
            left_x=left.x,
            right_x=right.x,
            baseline_y=left.y,
            top_y=geometry.to_document(target.x1, target.y1).y,
            width=geometry.scale_x(target.x2 - target.x1),
            height=geometry.scale_y(target.y2 - target.y1),
            pixel_top=target.y1,
        )
    else:
        warnings.append('strike_target_missing')

    blank = anchors.date_blank
    date_baseline = geometry.to_document(blank.x1, blank.y2)
    date_position = DatePosition(
        x=date_baseline.x,
        top_y=geometry.to_document(blank.x1, blank.y1).y,
        baseline_y=date_baseline.y,
        estimated=blank.estimated,
    )
    if blank.estimated:
        warnings.append('date_estimated')

    line = anchors.signature_line
    sig_baseline = geometry.to_document(line.x1, line.y2)
    signature = SignaturePosition(
        x=sig_baseline.x,
        top_y=geometry.to_document(line.x1, line.y1).y,
        baseline_y=sig_baseline.y,
        title_end_x=geometry.scale_x(line.title_end_x) if line.title_end_x is not None else None,
        estimated=line.estimated,
    )
    if line.estimated:
        warnings.append('signature_estimated')

    return WritePosition(
        strike=strike,
        date=date_position,
        signature=signature,
        page_width=geometry.page_width,
        page_height=geometry.page_height,
        warnings=tuple(warnings),
    )


# ---------------------------------------------------------------------------
# Drawing plan
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DrawLine:
    x1: float
    y1: float
    x2: float
    y2: float
    thickness: float
    color: tuple = BLACK


@dataclass(frozen=True)
class DrawRect:
    x: float
    y: float
    width: float
    height: float
    color: tuple = WHITE


@dataclass(frozen=True)
class DrawText:
    x: float
    y: float
    text: str
    size: float


@dataclass(frozen=True)
class DrawImage:
    x: float
    y: float
    width: float
    height: float
    data: bytes


DrawOp = Union[DrawLine, DrawRect, DrawText, DrawImage]


@dataclass(frozen=True)
class AnnotationOptions:
    """
    What to write on the receipt.

    receipt_date defaults to today in 令和 notation; signer_name has no default
    here, callers resolve it from settings (last own lawyer or fallback name).
    """
    signer_name: str
    signer_title: str = '被告訴訟代理人'
    receipt_date: Optional[str] = None
    font_size: float = 10.5
    seal_image: Optional[bytes] = None
    seal_size: float = 36.0

    def resolved_date(self, today: Optional[date] = None) -> str:
        return self.receipt_date or format_reiwa_date(today)


def plan_strike(strike: StrikePosition, font_size: float, measure_text: TextMeasurer) -> List[DrawOp]:
    """Double line through "行" and the honorific written after it."""
    width = min(strike.width, measure_text('行', font_size))
    center_y = strike.baseline_y + font_size * STRIKE_CENTER_RATIO
    ops: List[DrawOp] = []
    for y in (center_y - STRIKE_LINE_GAP / 2, center_y + STRIKE_LINE_GAP / 2):
        ops.append(DrawLine(x1=strike.left_x, y1=y, x2=strike.left_x + width, y2=y,
                            thickness=STRIKE_LINE_THICKNESS))
    ops.append(DrawText(x=strike.right_x + HONORIFIC_OFFSET, y=strike.baseline_y,
                        text=HONORIFIC, size=font_size))
    return ops


def plan_date(position: DatePosition, text: str, font_size: float, page_width: float,
              measure_text: TextMeasurer) -> List[DrawOp]:
    """White-out the blank date line, then write the receipt date."""
    cover_width = max(measure_text(text, font_size) + DATE_COVER_EXTRA_WIDTH, page_width / 2)
    cover_bottom = position.baseline_y - DATE_COVER_PAD_Y
    return [
        DrawRect(x=position.x - DATE_COVER_PAD_X, y=cover_bottom, width=cover_width,
                 height=position.top_y + DATE_COVER_PAD_Y - cover_bottom),
        DrawText(x=position.x, y=position.baseline_y, text=text, size=font_size),
    ]


def plan_signature(position: SignaturePosition, options: AnnotationOptions,
                   measure_text: TextMeasurer) -> List[DrawOp]:
    """Signer name after the title phrase, then a seal image or the ㊞ glyph."""
    size = options.font_size
    if position.title_end_x is not None:
        name_x = position.title_end_x + NAME_OFFSET
    else:
        name_x = position.x + measure_text(options.signer_title, size) + NAME_OFFSET

    name_text = IDEOGRAPHIC_SPACE + options.signer_name
    name_width = measure_text(name_text, size)
    cover_bottom = position.baseline_y - DATE_COVER_PAD_Y

    ops: List[DrawOp] = [
        DrawRect(x=name_x - NAME_COVER_PAD_X, y=cover_bottom, width=name_width + NAME_COVER_EXTRA_WIDTH,
                 height=position.top_y + DATE_COVER_PAD_Y - cover_bottom),
        DrawText(x=name_x, y=position.baseline_y, text=name_text, size=size),
    ]

    name_end = name_x + name_width
    if options.seal_image:
        ops.append(DrawImage(
            x=name_end + SEAL_OFFSET,
            y=position.baseline_y - SEAL_BASELINE_DROP + size * SEAL_RAISE_RATIO,
            width=options.seal_size,
            height=options.seal_size,
            data=options.seal_image,
        ))
    else:
        ops.append(DrawText(x=name_end + SEAL_GLYPH_OFFSET, y=position.baseline_y, text=SEAL_GLYPH, size=size))
    return ops


def plan_receipt_annotations(
    positions: WritePosition,
    options: AnnotationOptions,
    measure_text: TextMeasurer = estimate_text_width,
    today: Optional[date] = None,
) -> List[DrawOp]:
    """
    Ordered drawing instructions for the receipt section.

    The strike-through is omitted when no strike target was found.
    """
    ops: List[DrawOp] = []
    if positions.strike is not None:
        ops.extend(plan_strike(positions.strike, options.font_size, measure_text))
    else:
        logger.warning("Skipping strike-through: no strike target on receipt page")

    ops.extend(plan_date(positions.date, options.resolved_date(today), options.font_size,
                         positions.page_width, measure_text))
    ops.extend(plan_signature(positions.signature, options, measure_text))
    return ops
