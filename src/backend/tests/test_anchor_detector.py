"""
Test suite for AnchorDetector.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from filingkit.models.layout import OcrWord
from filingkit.services.anchor_detector import AnchorDetector

IMAGE_WIDTH = 1000
IMAGE_HEIGHT = 1400


def word(text, x1, y1, x2, y2):
    return OcrWord(text=text, x1=x1, y1=y1, x2=x2, y2=y2)


RECEIPT_WORDS = [
    word('行', 50, 100, 80, 130),  # above the receipt section
    word('受領書', 400, 600, 520, 640),
    word('弁護士', 500, 700, 580, 740),
    word('石口俊一', 590, 700, 700, 740),
    word('行', 710, 702, 740, 738),
    word('令和', 100, 800, 160, 840),
    word('年', 200, 800, 220, 840),
    word('被告訴訟代理人', 100, 900, 300, 940),
    word('弁護士', 310, 900, 380, 940),
]


@pytest.fixture
def detector():
    return AnchorDetector()


class TestDetectedAnchors:
    """All three anchors present on the page."""

    def test_section_top(self, detector):
        anchors = detector.detect(RECEIPT_WORDS, IMAGE_WIDTH, IMAGE_HEIGHT)
        assert anchors.label_found
        assert anchors.section_top == 550

    def test_strike_target_next_to_counsel(self, detector):
        anchors = detector.detect(RECEIPT_WORDS, IMAGE_WIDTH, IMAGE_HEIGHT)
        assert anchors.strike_target.x1 == 710
        assert anchors.strike_target.estimated is False

    def test_signature_line(self, detector):
        signature = detector.detect(RECEIPT_WORDS, IMAGE_WIDTH, IMAGE_HEIGHT).signature_line
        assert signature.text == '被告訴訟代理人'
        assert signature.title_end_x == 300
        assert signature.line_start_x is None
        assert signature.estimated is False

    def test_date_prefers_era_token(self, detector):
        date = detector.detect(RECEIPT_WORDS, IMAGE_WIDTH, IMAGE_HEIGHT).date_blank
        assert date.text == '令和'
        assert date.estimated is False

    def test_date_falls_back_to_month_marker(self, detector):
        words = [w for w in RECEIPT_WORDS if w.text != '令和']
        date = detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT).date_blank
        assert date.text == '年'

    def test_date_band_bounds_are_exclusive(self, detector):
        # Band runs strictly between strike y1 + 20 (722) and signature y1 - 10 (890)
        words = [w for w in RECEIPT_WORDS if w.text not in ('令和', '年')] + [
            word('令和', 100, 722, 160, 760),
            word('令和', 100, 890, 160, 930),
            word('月', 260, 760, 280, 800),
        ]
        date = detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT).date_blank
        assert date.text == '月'
        assert date.y1 == 760

    def test_rightmost_target_on_counsel_line(self, detector):
        words = RECEIPT_WORDS + [word('行', 300, 705, 330, 735)]
        anchors = detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT)
        assert anchors.strike_target.x1 == 710

    def test_topmost_target_without_counsel(self, detector):
        words = [
            word('受領書', 400, 600, 520, 640),
            word('行', 300, 800, 330, 830),
            word('行', 300, 700, 330, 730),
        ]
        assert detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT).strike_target.y1 == 700

    def test_line_start_before_agent(self, detector):
        words = [
            word('受領書', 400, 600, 520, 640),
            word('被告', 100, 900, 150, 940),
            word('訴訟代理人', 160, 900, 300, 940),
        ]
        signature = detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT).signature_line
        assert signature.text == '訴訟代理人'
        assert signature.line_start_x == 100
        assert signature.title_end_x == 300


class TestStrikeTargetNeverEstimated:
    """Near-miss honorifics must not produce a strike target."""

    def test_absent_with_near_misses(self, detector):
        words = [
            word('受領書', 400, 600, 520, 640),
            word('弁護士', 500, 700, 580, 740),
            word('石口俊一', 590, 700, 700, 740),
            word('殿', 710, 702, 740, 738),
            word('宛', 750, 702, 780, 738),
            word('行く', 790, 702, 840, 738),
            word('様', 850, 702, 880, 738),
        ]
        anchors = detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT)
        assert anchors.strike_target is None

    def test_target_above_section_ignored(self, detector):
        words = [word('行', 50, 100, 80, 130), word('受領書', 400, 600, 520, 640)]
        assert detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT).strike_target is None


class TestEstimatedAnchors:
    """Date and signature fallbacks."""

    def test_both_estimated(self, detector):
        anchors = detector.detect([word('受領書', 400, 650, 520, 690)], IMAGE_WIDTH, IMAGE_HEIGHT)

        assert anchors.section_top == 600
        assert anchors.date_blank.estimated
        assert (anchors.date_blank.x1, anchors.date_blank.y1) == (50, 1000)
        assert anchors.signature_line.estimated
        assert (anchors.signature_line.x1, anchors.signature_line.y1) == (200, 1280)

    def test_date_estimated_above_signature(self, detector):
        words = [word('受領書', 400, 650, 520, 690), word('被告代理人', 100, 1200, 300, 1240)]
        anchors = detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT)

        assert anchors.signature_line.estimated is False
        assert anchors.date_blank.estimated
        assert anchors.date_blank.y1 == 1116

    def test_party_fallback_in_lower_half(self, detector):
        words = [
            word('受領書', 400, 650, 520, 690),
            word('被告', 100, 700, 150, 740),
            word('原告', 100, 1300, 150, 1340),
        ]
        signature = detector.detect(words, IMAGE_WIDTH, IMAGE_HEIGHT).signature_line
        assert signature.text == '原告'
        assert signature.estimated is False

    def test_no_label_uses_whole_page(self, detector):
        anchors = detector.detect([word('行', 300, 100, 330, 130)], IMAGE_WIDTH, IMAGE_HEIGHT)
        assert anchors.label_found is False
        assert anchors.section_top == 0
        assert anchors.strike_target.y1 == 100
