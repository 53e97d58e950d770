"""
Receipt page location.

The receipt section (受領書) is almost always on the first page, less often on
the last one, so pages are scanned in the order [1, N, 2, ..., N-1] and the scan
stops at the first page that carries the receipt label.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence

from filingkit.models.layout import OcrWord
from filingkit.utils.scoring import PageScore, score_receipt_page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocatedPage:
    """The page chosen for annotation (1-based page number)."""
    page_number: int
    words: List[OcrWord]
    score: Optional[PageScore] = None


def scan_order(page_count: int) -> Iterator[int]:
    """
    Yield 1-based page numbers in receipt-likelihood order.

    Examples:
        >>> list(scan_order(5))
        [1, 5, 2, 3, 4]
    """
    if page_count < 0:
        raise ValueError(f"page_count must not be negative, got {page_count}")
    if page_count == 0:
        return
    yield 1
    if page_count > 1:
        yield page_count
    yield from range(2, page_count)


class ReceiptPageLocator:
    """Service for choosing which page of a filing holds the receipt section."""

    def locate(self, pages: Sequence[List[OcrWord]]) -> Optional[LocatedPage]:
        """
        Pick the receipt page from already-OCR'd pages.

        Args:
            pages: OCR words per page, page 1 first

        Returns:
            LocatedPage, or None for an empty document
        """
        return self.locate_lazy(len(pages), lambda page_number: pages[page_number - 1])

    def locate_lazy(
        self,
        page_count: int,
        load_page: Callable[[int], List[OcrWord]],
    ) -> Optional[LocatedPage]:
        """
        Pick the receipt page, loading (rasterize + OCR) pages on demand.

        ``load_page`` is called with 1-based page numbers in scan order and is
        never called for pages after a confident match.
        """
        if page_count == 0:
            return None
        if page_count == 1:
            return LocatedPage(page_number=1, words=load_page(1))

        best: Optional[LocatedPage] = None
        for page_number in scan_order(page_count):
            words = load_page(page_number)
            score = score_receipt_page(words)
            logger.debug("Receipt page score", extra={
                "page": page_number,
                "score": score.total,
                "breakdown": score.as_dict(),
            })

            candidate = LocatedPage(page_number=page_number, words=words, score=score)
            if score.is_confident:
                logger.info(f"Receipt page found: page {page_number} (score {score.total})")
                return candidate
            if best is None or score.total > best.score.total:
                best = candidate

        logger.info(f"No confident receipt page; using page {best.page_number} (score {best.score.total})")
        return best
