"""
Anchor detection inside the receipt section of a page.

Finds where the three receipt annotations go: the "行" to strike through, the
date blank and the signature line. Date and signature fall back to estimated
positions; the strike target never does.
"""

import logging
from typing import List, Optional, Sequence

from filingkit.models.layout import Anchor, AnchorSet, OcrWord
from filingkit.utils.vocabulary import (
    AGENT_TOKENS,
    COUNSEL_TOKENS,
    DATE_MARKERS,
    ERA_TOKEN_PREFIX,
    PARTY_TOKENS,
    STRIKE_TARGET_TOKEN,
    TITLE_END_TOKEN,
)
from filingkit.utils.word_search import (
    find_receipt_label,
    lowest,
    on_same_line,
    rightmost,
    topmost,
    words_containing,
    words_matching,
)

logger = logging.getLogger(__name__)

# Pixel margin above the receipt label still belonging to the section
SECTION_TOP_MARGIN = 50
# Vertical tolerance for "same line" comparisons
LINE_TOLERANCE = 60
# Date band padding below the strike target / above the signature line
DATE_BAND_TOP_PADDING = 20
DATE_BAND_BOTTOM_PADDING = 10

# Estimated date anchor
ESTIMATED_DATE_X_RATIO = 0.05
ESTIMATED_DATE_ABOVE_SIGNATURE_RATIO = 0.06
ESTIMATED_DATE_SIZE = (200, 40)
# Estimated signature anchor
ESTIMATED_SIGNATURE_X_RATIO = 0.20
ESTIMATED_SIGNATURE_DEPTH_RATIO = 0.85
ESTIMATED_SIGNATURE_SIZE = (300, 40)
# Party-name fallback for the signature line is limited to the lower half
PARTY_FALLBACK_DEPTH_RATIO = 0.5


class AnchorDetector:
    """Service for locating annotation anchors on the receipt page."""

    def detect(self, words: Sequence[OcrWord], image_width: int, image_height: int) -> AnchorSet:
        """
        Detect strike target, date blank and signature line.

        Args:
            words: OCR words of the receipt page (pixel space)
            image_width: Rasterized page width in pixels
            image_height: Rasterized page height in pixels

        Returns:
            AnchorSet; ``strike_target`` may be None, date/signature are
            always present (possibly estimated)
        """
        label = find_receipt_label(words)
        section_top = max(0, label.y - SECTION_TOP_MARGIN) if label.found else 0
        section = [w for w in words if w.y1 >= section_top]

        logger.debug("Receipt section", extra={
            "label_found": label.found,
            "section_top": section_top,
            "section_words": len(section),
        })

        strike = self.find_strike_target(section)
        if strike is None:
            logger.warning("Strike target not found; strike-through will be skipped")

        signature = self.find_signature_line(section, section_top, image_height)
        date = self.find_date_blank(section, strike, signature, section_top, image_height)

        if date is None:
            date = self.estimate_date_blank(signature, section_top, image_width, image_height)
            logger.warning("Date anchor estimated", extra={"x": date.x1, "y": date.y1})
        if signature is None:
            signature = self.estimate_signature_line(section_top, image_width, image_height)
            logger.warning("Signature anchor estimated", extra={"x": signature.x1, "y": signature.y1})

        return AnchorSet(
            strike_target=strike,
            date_blank=date,
            signature_line=signature,
            section_top=section_top,
            label_found=label.found,
        )

    def find_strike_target(self, section: Sequence[OcrWord]) -> Optional[Anchor]:
        """
        The addressee suffix "行" printed after the filer's name.

        Only an exact single-token match counts; near-misses such as 殿 or 宛
        belong to other layouts and are never struck.
        """
        targets = [w for w in section if w.text == STRIKE_TARGET_TOKEN]
        if not targets:
            return None

        counsel_words = words_containing(section, COUNSEL_TOKENS)
        if counsel_words:
            same_line = [
                t for t in targets
                if any(abs(t.y1 - c.y1) < LINE_TOLERANCE for c in counsel_words)
            ]
            if same_line:
                return Anchor.from_word(rightmost(same_line))

        return Anchor.from_word(topmost(targets))

    def find_signature_line(
        self,
        section: Sequence[OcrWord],
        section_top: int,
        image_height: int,
    ) -> Optional[Anchor]:
        """
        Lowest 代理人 token, else the lowest 原告/被告 token in the lower half of
        the section, annotated with where its title phrase starts and ends.
        """
        agent = lowest(words_containing(section, AGENT_TOKENS))
        if agent is None:
            lower_half = section_top + (image_height - section_top) * PARTY_FALLBACK_DEPTH_RATIO
            agent = lowest([w for w in words_containing(section, PARTY_TOKENS) if w.y1 > lower_half])
        if agent is None:
            return None

        line = sorted(on_same_line(section, agent.y1, LINE_TOLERANCE), key=lambda w: w.x1)
        title_end = next((w for w in line if w.text.endswith(TITLE_END_TOKEN)), None)
        line_start = line[0] if line and line[0].x1 < agent.x1 else None

        return Anchor.from_word(
            agent,
            title_end_x=title_end.x2 if title_end else None,
            line_start_x=line_start.x1 if line_start else None,
        )

    def find_date_blank(
        self,
        section: Sequence[OcrWord],
        strike: Optional[Anchor],
        signature: Optional[Anchor],
        section_top: int,
        image_height: int,
    ) -> Optional[Anchor]:
        """Era token (令…) between the strike target and the signature line, else 年/月."""
        band_top = strike.y1 + DATE_BAND_TOP_PADDING if strike else section_top
        band_bottom = signature.y1 - DATE_BAND_BOTTOM_PADDING if signature else image_height
        band: List[OcrWord] = [w for w in section if band_top < w.y1 < band_bottom]

        era = topmost(words_matching(band, lambda w: w.text.startswith(ERA_TOKEN_PREFIX)))
        if era is not None:
            return Anchor.from_word(era)

        marker = topmost(words_containing(band, DATE_MARKERS))
        return Anchor.from_word(marker) if marker else None

    @staticmethod
    def estimate_date_blank(
        signature: Optional[Anchor],
        section_top: int,
        image_width: int,
        image_height: int,
    ) -> Anchor:
        x = round(image_width * ESTIMATED_DATE_X_RATIO)
        if signature is not None:
            y = round(signature.y1 - image_height * ESTIMATED_DATE_ABOVE_SIGNATURE_RATIO)
        else:
            y = round(section_top + (image_height - section_top) * 0.5)
        width, height = ESTIMATED_DATE_SIZE
        return Anchor.estimate(x, y, width, height, text='令和')

    @staticmethod
    def estimate_signature_line(section_top: int, image_width: int, image_height: int) -> Anchor:
        x = round(image_width * ESTIMATED_SIGNATURE_X_RATIO)
        y = round(section_top + (image_height - section_top) * ESTIMATED_SIGNATURE_DEPTH_RATIO)
        width, height = ESTIMATED_SIGNATURE_SIZE
        return Anchor.estimate(x, y, width, height, text='代理人')
