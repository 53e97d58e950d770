"""
Run-safe text substitution.

Word processors split a visible line into styled runs at arbitrary points
("令和３年（ワ）" may be three runs). Replacing a value therefore works on the
concatenated text of a block and writes the result back into the original runs
without adding, removing or restyling any of them.
"""

import html
import logging
import re
from typing import Iterable, List, Sequence, Tuple
from xml.sax.saxutils import escape

from filingkit.models.rich_text import Block, TextRun

logger = logging.getLogger(__name__)


def run_spans(texts: Sequence[str]) -> List[Tuple[int, int]]:
    """Cumulative (start, end) character offsets of each run."""
    spans = []
    offset = 0
    for text in texts:
        spans.append((offset, offset + len(text)))
        offset += len(text)
    return spans


def replace_in_texts(texts: Sequence[str], old: str, new: str) -> List[str]:
    """
    Replace the first occurrence of ``old`` across a list of run texts.

    Runs outside the match are returned unchanged; the first affected run gets
    its prefix plus ``new``, the last keeps its suffix, runs in between become
    empty strings. The number of runs never changes.

    Examples:
        >>> replace_in_texts(["ABC", "DEF"], "CD", "XYZ")
        ['ABXYZ', 'EF']
    """
    texts = list(texts)
    if not old:
        return texts
    match_start = ''.join(texts).find(old)
    if match_start < 0:
        return texts
    match_end = match_start + len(old)

    spans = run_spans(texts)
    affected = [
        index for index, (start, end) in enumerate(spans)
        if end > match_start and start < match_end
    ]
    first, last = affected[0], affected[-1]

    if first == last:
        start, _ = spans[first]
        text = texts[first]
        texts[first] = text[:match_start - start] + new + text[match_end - start:]
        return texts

    first_start, _ = spans[first]
    texts[first] = texts[first][:match_start - first_start] + new
    for index in affected[1:-1]:
        texts[index] = ''
    last_start, _ = spans[last]
    texts[last] = texts[last][match_end - last_start:]
    return texts


def replace_in_block(block: Block, old: str, new: str) -> Block:
    """Replace one occurrence of ``old`` in a block; blocks without it are returned as-is."""
    if not old or old not in block.text:
        return block
    texts = replace_in_texts([run.text for run in block.runs], old, new)
    return Block(runs=tuple(
        run if run.text == text else TextRun(attributes=run.attributes, text=text)
        for run, text in zip(block.runs, texts)
    ))


def replace_in_blocks(blocks: Iterable[Block], old: str, new: str) -> List[Block]:
    """Apply replace_in_block to every block (one replacement per block)."""
    return [replace_in_block(block, old, new) for block in blocks]


# ---------------------------------------------------------------------------
# WordprocessingML adapter
# ---------------------------------------------------------------------------

_PARAGRAPH = re.compile(r'<w:p[\s>][\s\S]*?</w:p>')
_TEXT_RUN = re.compile(r'<w:t((?:\s[^>]*)?)>([^<]*)</w:t>')
_PRESERVE_SPACE = 'xml:space="preserve"'


def _replace_in_paragraph(paragraph: str, old: str, new: str) -> str:
    runs = list(_TEXT_RUN.finditer(paragraph))
    texts = [html.unescape(m.group(2)) for m in runs]
    if old not in ''.join(texts):
        return paragraph

    replaced = replace_in_texts(texts, old, new)
    parts = []
    cursor = 0
    for match, before, after in zip(runs, texts, replaced):
        if before == after:
            continue
        attributes = match.group(1)
        if _PRESERVE_SPACE not in attributes:
            attributes = f'{attributes} {_PRESERVE_SPACE}'
        parts.append(paragraph[cursor:match.start()])
        parts.append(f'<w:t{attributes}>{escape(after)}</w:t>')
        cursor = match.end()
    parts.append(paragraph[cursor:])
    return ''.join(parts)


def replace_in_document_xml(xml: str, old: str, new: str) -> str:
    """
    Replace ``old`` with ``new`` once in every ``<w:p>`` paragraph containing it.

    Only the affected ``<w:t>`` elements are rewritten; everything else in the
    document is left byte-identical.
    """
    if not old:
        return xml
    count = 0

    def substitute(match: re.Match) -> str:
        nonlocal count
        paragraph = match.group(0)
        result = _replace_in_paragraph(paragraph, old, new)
        if result != paragraph:
            count += 1
        return result

    result = _PARAGRAPH.sub(substitute, xml)
    logger.debug("Template substitution", extra={"old": old, "new": new, "paragraphs": count})
    return result
