"""
Test suite for coordinate mapping, write positions and the annotation plan.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from datetime import date

import pytest

from filingkit.models.layout import Anchor, AnchorSet, DatePosition, SignaturePosition, WritePosition
from filingkit.services.receipt_layout import (
    AnnotationOptions,
    DrawImage,
    DrawLine,
    DrawRect,
    DrawText,
    build_write_position,
    estimate_text_width,
    plan_receipt_annotations,
)
from filingkit.utils.geometry import PageGeometry, px_to_document


class TestCoordinateMapping:
    """Pixel (top-left origin) → document (bottom-left origin)."""

    def test_origin_flip(self):
        point = px_to_document(0, 0, 2480, 3508, 595.0, 842.0)
        assert point.x == 0.0
        assert point.y == 842.0

    def test_opposite_corner(self):
        point = px_to_document(2480, 3508, 2480, 3508, 595.0, 842.0)
        assert point.x == pytest.approx(595.0)
        assert point.y == pytest.approx(0.0)

    def test_midpoint(self):
        point = px_to_document(500, 250, 1000, 1000, 600.0, 800.0)
        assert point.x == pytest.approx(300.0)
        assert point.y == pytest.approx(600.0)

    @pytest.mark.parametrize("dims", [
        (0, 1000, 595.0, 842.0),
        (1000, -1, 595.0, 842.0),
        (1000, 1000, 0, 842.0),
    ])
    def test_non_positive_dimensions(self, dims):
        with pytest.raises(ValueError):
            px_to_document(10, 10, *dims)

    def test_page_geometry_scaling(self):
        geometry = PageGeometry(image_width=1000, image_height=1000, page_width=500.0, page_height=1000.0)
        assert geometry.scale_x(30) == pytest.approx(15.0)
        assert geometry.scale_y(36) == pytest.approx(36.0)

    def test_page_geometry_validates(self):
        with pytest.raises(ValueError):
            PageGeometry(image_width=1000, image_height=0, page_width=500.0, page_height=1000.0)


GEOMETRY = PageGeometry(image_width=1000, image_height=1000, page_width=500.0, page_height=1000.0)


def anchors(strike=True, estimated=False):
    return AnchorSet(
        strike_target=Anchor('行', 710, 702, 740, 738) if strike else None,
        date_blank=Anchor('令和', 100, 800, 160, 840, estimated=estimated),
        signature_line=Anchor('被告訴訟代理人', 100, 900, 300, 940, title_end_x=300),
        section_top=550,
        label_found=True,
    )


class TestWritePosition:
    """Anchors mapped into document space."""

    def test_strike_position(self):
        strike = build_write_position(anchors(), GEOMETRY).strike
        assert strike.left_x == pytest.approx(355.0)
        assert strike.right_x == pytest.approx(370.0)
        assert strike.baseline_y == pytest.approx(262.0)
        assert strike.top_y == pytest.approx(298.0)
        assert strike.width == pytest.approx(15.0)
        assert strike.height == pytest.approx(36.0)
        assert strike.pixel_top == 702

    def test_date_and_signature(self):
        positions = build_write_position(anchors(), GEOMETRY)
        assert positions.date.x == pytest.approx(50.0)
        assert positions.date.baseline_y == pytest.approx(160.0)
        assert positions.date.top_y == pytest.approx(200.0)
        assert positions.signature.title_end_x == pytest.approx(150.0)
        assert positions.signature.baseline_y == pytest.approx(60.0)
        assert positions.warnings == ()

    def test_missing_strike_and_estimated_date(self):
        positions = build_write_position(anchors(strike=False, estimated=True), GEOMETRY)
        assert positions.strike is None
        assert positions.date.estimated
        assert positions.warnings == ('strike_target_missing', 'date_estimated')


def write_position(with_strike=True, title_end_x=150.0):
    return WritePosition(
        strike=build_write_position(anchors(), GEOMETRY).strike if with_strike else None,
        date=DatePosition(x=50.0, top_y=200.0, baseline_y=160.0),
        signature=SignaturePosition(x=50.0, top_y=100.0, baseline_y=60.0, title_end_x=title_end_x),
        page_width=500.0,
        page_height=1000.0,
    )


OPTIONS = AnnotationOptions(signer_name='山田太郎', receipt_date='令和7年3月4日', font_size=10.0)


class TestTextWidth:

    @pytest.mark.parametrize("text,expected", [
        ('行', 10.0),
        ('山田 A', 30.0),
        ('12', 10.0),
        ('', 0.0),
    ])
    def test_estimate(self, text, expected):
        assert estimate_text_width(text, 10.0) == pytest.approx(expected)


class TestAnnotationPlan:
    """Drawing instructions derived from write positions."""

    def test_instruction_sequence(self):
        ops = plan_receipt_annotations(write_position(), OPTIONS)
        assert [type(op) for op in ops] == [
            DrawLine, DrawLine, DrawText,   # strike + 先生
            DrawRect, DrawText,             # date
            DrawRect, DrawText, DrawText,   # name + ㊞
        ]

    def test_double_strike_line(self):
        first, second, honorific = plan_receipt_annotations(write_position(), OPTIONS)[:3]
        assert first.x1 == pytest.approx(355.0)
        assert first.x2 == pytest.approx(365.0)
        assert second.y1 - first.y1 == pytest.approx(3.0)
        assert (first.y1 + second.y1) / 2 == pytest.approx(266.0)
        assert first.thickness == pytest.approx(0.8)
        assert honorific.text == '先生'
        assert honorific.x == pytest.approx(372.0)

    def test_strike_skipped_without_target(self):
        ops = plan_receipt_annotations(write_position(with_strike=False), OPTIONS)
        assert not any(isinstance(op, DrawLine) for op in ops)
        assert len(ops) == 5

    def test_date_cover_and_text(self):
        ops = plan_receipt_annotations(write_position(with_strike=False), OPTIONS)
        cover, text = ops[0], ops[1]
        assert cover.x == pytest.approx(46.0)
        assert cover.y == pytest.approx(157.0)
        assert cover.width == pytest.approx(250.0)
        assert cover.height == pytest.approx(46.0)
        assert text.text == '令和7年3月4日'
        assert text.y == pytest.approx(160.0)

    def test_signer_name_after_title(self):
        ops = plan_receipt_annotations(write_position(with_strike=False), OPTIONS)
        cover, name, seal = ops[2], ops[3], ops[4]
        assert name.text == '　山田太郎'
        assert name.x == pytest.approx(154.0)
        assert cover.x == pytest.approx(152.0)
        assert cover.width == pytest.approx(70.0)
        assert seal.text == '㊞'
        assert seal.x == pytest.approx(208.0)

    def test_signer_name_measured_from_title_without_title_end(self):
        ops = plan_receipt_annotations(write_position(with_strike=False, title_end_x=None), OPTIONS)
        # 被告訴訟代理人 is seven full-width glyphs
        assert ops[3].x == pytest.approx(50.0 + 70.0 + 4.0)

    def test_seal_image(self):
        options = AnnotationOptions(signer_name='山田太郎', receipt_date='令和7年3月4日',
                                    font_size=10.0, seal_image=b'PNG', seal_size=36.0)
        seal = plan_receipt_annotations(write_position(with_strike=False), options)[-1]
        assert isinstance(seal, DrawImage)
        assert seal.x == pytest.approx(206.0)
        assert seal.y == pytest.approx(60.0 - 18.0 + 3.0)
        assert seal.width == 36.0

    def test_default_receipt_date(self):
        options = AnnotationOptions(signer_name='山田太郎')
        ops = plan_receipt_annotations(write_position(with_strike=False), options, today=date(2025, 3, 4))
        assert ops[1].text == '令和7年3月4日'
