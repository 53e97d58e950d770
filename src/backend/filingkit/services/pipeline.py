"""
Filing pipeline: the single entry point shared by every deployment surface
(CLI, web server, embedded tool).

- extract_info: cover-sheet text → DocumentInfo
- locate_and_plan: OCR'd pages → receipt page, write positions, drawing plan
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence

from filingkit.config import ExtractionConfig, settings
from filingkit.models.document import DocumentInfo
from filingkit.models.layout import OcrPage, WritePosition
from filingkit.services.anchor_detector import AnchorDetector
from filingkit.services.extractor import FieldExtractor
from filingkit.services.receipt_layout import (
    AnnotationOptions,
    DrawOp,
    TextMeasurer,
    build_write_position,
    estimate_text_width,
    plan_receipt_annotations,
)
from filingkit.services.receipt_locator import ReceiptPageLocator
from filingkit.utils.geometry import PageGeometry
from filingkit.utils.text import normalize_line_endings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReceiptPlan:
    """Where and what to draw on the receipt page (1-based page number)."""
    page_number: int
    positions: WritePosition
    instructions: List[DrawOp]


def default_annotation_options() -> AnnotationOptions:
    return AnnotationOptions(
        signer_name=settings.default_signer_name(),
        signer_title=settings.DEFAULT_SIGNER_TITLE,
        font_size=settings.RECEIPT_FONT_SIZE,
        seal_size=settings.SEAL_SIZE,
    )


class FilingPipeline:
    """Service wiring extraction, receipt location and anchor layout together."""

    def __init__(self, extraction_config: Optional[ExtractionConfig] = None):
        """
        Args:
            extraction_config: defaults to the one derived from environment settings
        """
        self.extractor = FieldExtractor(extraction_config or settings.extraction_config())
        self.locator = ReceiptPageLocator()
        self.detector = AnchorDetector()

    def extract_info(self, text: str, _debug: Optional[Dict] = None) -> DocumentInfo:
        """Extract cover-sheet fields from a text layer or OCR transcript."""
        info = self.extractor.extract(normalize_line_endings(text), _debug=_debug)

        missing = info.missing_fields()
        logger.info("Extracted filing info", extra={
            "court_name": info.court_name,
            "case_number": info.case_number,
            "missing_fields": missing,
        })
        if info.case_number_guessed:
            logger.warning("Case number is a guess; needs human review", extra={
                "case_number": info.case_number,
            })
        return info

    def locate_and_plan(
        self,
        pages: Sequence[OcrPage],
        options: Optional[AnnotationOptions] = None,
        measure_text: TextMeasurer = estimate_text_width,
        today: Optional[date] = None,
    ) -> Optional[ReceiptPlan]:
        """Plan receipt annotations over already-OCR'd pages; None for an empty document."""
        return self.locate_and_plan_lazy(
            len(pages), lambda page_number: pages[page_number - 1],
            options=options, measure_text=measure_text, today=today,
        )

    def locate_and_plan_lazy(
        self,
        page_count: int,
        load_page: Callable[[int], OcrPage],
        options: Optional[AnnotationOptions] = None,
        measure_text: TextMeasurer = estimate_text_width,
        today: Optional[date] = None,
    ) -> Optional[ReceiptPlan]:
        """
        Plan receipt annotations, OCR-ing pages on demand.

        ``load_page`` is called at most once per page and never for pages after
        the receipt page was confidently identified.
        """
        loaded: Dict[int, OcrPage] = {}

        def load_words(page_number: int):
            if page_number not in loaded:
                loaded[page_number] = load_page(page_number)
            return loaded[page_number].words

        located = self.locator.locate_lazy(page_count, load_words)
        if located is None:
            logger.warning("No pages to annotate")
            return None

        page = loaded[located.page_number]
        anchors = self.detector.detect(page.words, page.image_width, page.image_height)
        geometry = PageGeometry(
            image_width=page.image_width,
            image_height=page.image_height,
            page_width=page.page_width,
            page_height=page.page_height,
        )
        positions = build_write_position(anchors, geometry)
        for warning in positions.warnings:
            logger.warning(f"Receipt layout degraded: {warning}", extra={"page": located.page_number})

        instructions = plan_receipt_annotations(
            positions, options or default_annotation_options(), measure_text=measure_text, today=today,
        )
        logger.info(f"Planned {len(instructions)} drawing instructions on page {located.page_number}")
        return ReceiptPlan(page_number=located.page_number, positions=positions, instructions=instructions)
