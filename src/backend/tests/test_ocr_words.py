"""
Test suite for Tesseract output adapters.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from filingkit.models.layout import OcrWord
from filingkit.services.ocr_words import words_from_hocr, words_from_tesseract_data

HOCR = """
<div class='ocr_page' id='page_1' title='image "page.png"; bbox 0 0 2480 3508'>
 <span class='ocr_line' id='line_1_1' title="bbox 400 600 900 640">
  <span class='ocrx_word' id='word_1_1' title='bbox 400 600 520 640; x_wconf 96'>受領書</span>
  <span class='ocrx_word' id='word_1_2' title='bbox 530 600 560 640; x_wconf 0'> </span>
  <span class='ocrx_word' id='word_1_3' title='bbox 710 702 740 738; x_wconf 88'><strong>行</strong></span>
  <span class='ocrx_word' id='word_1_4' title='bbox 750 702 800 738'>A&amp;B</span>
 </span>
</div>
"""


class TestHocr:
    """hOCR word spans."""

    def test_words_and_boxes(self):
        words = words_from_hocr(HOCR)
        assert [w.text for w in words] == ['受領書', '行', 'A&B']
        assert words[0] == OcrWord(text='受領書', x1=400, y1=600, x2=520, y2=640, confidence=96.0)

    def test_inner_markup_stripped(self):
        assert words_from_hocr(HOCR)[1].bbox == (710, 702, 740, 738)

    def test_missing_confidence(self):
        assert words_from_hocr(HOCR)[2].confidence is None

    def test_empty_input(self):
        assert words_from_hocr('') == []


class TestTesseractData:
    """pytesseract.image_to_data DICT output."""

    def test_conversion(self):
        data = {
            'text': ['', '受領書', '行', 'noise'],
            'left': [0, 400, 710, 10],
            'top': [0, 600, 702, 10],
            'width': [2480, 120, 30, 5],
            'height': [3508, 40, 36, 5],
            'conf': ['-1', '96.5', 88, -1],
        }
        words = words_from_tesseract_data(data)
        assert [w.text for w in words] == ['受領書', '行']
        assert words[0].bbox == (400, 600, 520, 640)
        assert words[0].confidence == 96.5

    def test_empty(self):
        assert words_from_tesseract_data({}) == []
        assert words_from_tesseract_data({'text': [], 'left': [], 'top': [], 'width': [], 'height': [], 'conf': []}) == []
