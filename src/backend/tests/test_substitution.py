"""
Test suite for run-safe substitution and the WordprocessingML adapter.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from filingkit.models.rich_text import Block, TextRun
from filingkit.services.substitution import (
    replace_in_block,
    replace_in_blocks,
    replace_in_document_xml,
    replace_in_texts,
)


class TestReplaceInBlock:
    """Replacement across run boundaries."""

    def test_match_spanning_two_runs(self):
        block = Block.from_texts('ABC', 'DEF')
        result = replace_in_block(block, 'CD', 'XYZ')
        assert [run.text for run in result.runs] == ['ABXYZ', 'EF']
        assert result.text == 'ABXYZEF'

    def test_match_inside_one_run(self):
        result = replace_in_block(Block.from_texts('AB', 'CDEF', 'G'), 'DE', '-')
        assert [run.text for run in result.runs] == ['AB', 'C-F', 'G']

    def test_middle_runs_emptied_not_removed(self):
        result = replace_in_block(Block.from_texts('AB', 'CD', 'EF'), 'BCDE', 'X')
        assert [run.text for run in result.runs] == ['AX', '', 'F']

    def test_last_run_fully_consumed(self):
        result = replace_in_block(Block.from_texts('AB', 'CD'), 'BCD', 'X')
        assert [run.text for run in result.runs] == ['AX', '']

    def test_only_first_occurrence(self):
        result = replace_in_block(Block.from_texts('ab', 'ab'), 'ab', 'X')
        assert result.text == 'Xab'

    def test_attributes_preserved(self):
        block = Block(runs=(TextRun('bold', '令和３年'), TextRun('plain', '（ワ）第８００号')))
        result = replace_in_block(block, '令和３年（ワ）', '令和６年（ネ）')
        assert [run.attributes for run in result.runs] == ['bold', 'plain']
        assert result.text == '令和６年（ネ）第８００号'

    def test_untouched_runs_are_same_objects(self):
        block = Block.from_texts('AB', 'CD', 'EF')
        result = replace_in_block(block, 'C', 'X')
        assert result.runs[0] is block.runs[0]
        assert result.runs[2] is block.runs[2]

    @pytest.mark.parametrize("old", ['ZZ', ''])
    def test_no_match_returns_block_unchanged(self, old):
        block = Block.from_texts('ABC', 'DEF')
        assert replace_in_block(block, old, 'X') is block

    def test_replace_in_blocks(self):
        blocks = [Block.from_texts('ABC'), Block.from_texts('XYZ')]
        result = replace_in_blocks(blocks, 'B', '-')
        assert [b.text for b in result] == ['A-C', 'XYZ']
        assert result[1] is blocks[1]

    def test_replace_in_texts_keeps_run_count(self):
        assert len(replace_in_texts(['a', 'b', 'c', 'd'], 'abcd', '')) == 4


class TestReplaceInDocumentXml:
    """WordprocessingML paragraphs of <w:t> runs."""

    XML = (
        '<w:body>'
        '<w:p><w:pPr><w:jc w:val="left"/></w:pPr>'
        '<w:r><w:rPr><w:b/></w:rPr><w:t>神戸地方</w:t></w:r>'
        '<w:r><w:t>裁判所</w:t></w:r></w:p>'
        '<w:p><w:r><w:t>other</w:t></w:r></w:p>'
        '</w:body>'
    )

    def test_split_runs_rewritten(self):
        result = replace_in_document_xml(self.XML, '地方裁判', 'X')
        assert '<w:t xml:space="preserve">神戸X</w:t>' in result
        assert '<w:t xml:space="preserve">所</w:t>' in result
        assert '<w:rPr><w:b/></w:rPr>' in result

    def test_other_paragraphs_byte_identical(self):
        result = replace_in_document_xml(self.XML, '地方裁判', 'X')
        assert result.endswith('<w:p><w:r><w:t>other</w:t></w:r></w:p></w:body>')

    def test_no_match_is_identity(self):
        assert replace_in_document_xml(self.XML, '高等', 'X') == self.XML

    def test_every_paragraph_gets_one_replacement(self):
        xml = '<w:p><w:r><w:t>AA</w:t></w:r></w:p><w:p><w:r><w:t>A</w:t></w:r></w:p>'
        result = replace_in_document_xml(xml, 'A', 'B')
        assert result == (
            '<w:p><w:r><w:t xml:space="preserve">BA</w:t></w:r></w:p>'
            '<w:p><w:r><w:t xml:space="preserve">B</w:t></w:r></w:p>'
        )

    def test_escaping(self):
        xml = '<w:p><w:r><w:t xml:space="preserve">A &amp; B</w:t></w:r></w:p>'
        result = replace_in_document_xml(xml, 'A & B', '<C>')
        assert result == '<w:p><w:r><w:t xml:space="preserve">&lt;C&gt;</w:t></w:r></w:p>'

    @pytest.mark.parametrize("encoded,decoded", [
        ('&quot;ABC&quot;', '"XYZ"'),
        ('&apos;ABC&apos;', "'XYZ'"),
        ('&#12300;ABC&#x300D;', '「XYZ」'),
    ])
    def test_entities_in_rewritten_run_are_not_double_escaped(self, encoded, decoded):
        xml = f'<w:p><w:r><w:t>{encoded}</w:t></w:r></w:p>'
        result = replace_in_document_xml(xml, 'ABC', 'XYZ')
        assert result == f'<w:p><w:r><w:t xml:space="preserve">{decoded}</w:t></w:r></w:p>'
        assert '&amp;' not in result

    def test_entity_spanning_match(self):
        xml = '<w:p><w:r><w:t>&quot;A</w:t></w:r><w:r><w:t>B&quot;</w:t></w:r></w:p>'
        result = replace_in_document_xml(xml, '"AB"', 'C')
        assert result == (
            '<w:p><w:r><w:t xml:space="preserve">C</w:t></w:r>'
            '<w:r><w:t xml:space="preserve"></w:t></w:r></w:p>'
        )

    def test_tab_elements_are_not_runs(self):
        xml = '<w:p><w:r><w:tab/><w:t>AB</w:t></w:r></w:p>'
        assert replace_in_document_xml(xml, 'B', 'C') == (
            '<w:p><w:r><w:tab/><w:t xml:space="preserve">AC</w:t></w:r></w:p>'
        )
