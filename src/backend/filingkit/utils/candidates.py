"""
Candidate dataclasses for field extraction.

Each candidate represents a potential extracted value with the metadata used
to rank it against other matches for the same field. Candidates never leave
the extractor; only the winning value ends up in DocumentInfo.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import re

from filingkit.utils.vocabulary import ADDRESSEE_SUFFIXES, BOILERPLATE_LEADING_CHARS


@dataclass
class Candidate:
    """Base class for extraction candidates."""
    value: str
    pattern_name: str
    match_span: tuple[int, int]  # (start, end) character positions
    priority: int = 100  # Lower is better (like CSS priority)
    raw_text: str = ""  # Original matched text


@dataclass
class CounselCandidate(Candidate):
    """
    Candidate for opposing counsel's name.

    Ranking factors:
    - priority: pattern tier (1 = explicit "原告訴訟代理人弁護士 NAME")
    - is_typical_length: 3-4 characters, the usual length of a personal name
    """

    @property
    def is_typical_length(self) -> bool:
        return 3 <= len(self.value) <= 4


@dataclass
class CaseNumberCandidate(Candidate):
    """Case number candidate; ``guessed`` marks values reconstructed from partial evidence."""
    guessed: bool = False


class FaxRole(str, Enum):
    """Who a fax number belongs to."""
    COURT = 'court'
    COUNSEL = 'counsel'
    SELF = 'self'  # filer's own office, never reported
    UNKNOWN = 'unknown'


@dataclass
class FaxCandidate(Candidate):
    """
    Candidate for a fax number.

    - label: named entity preceding an explicit "(FAX …)" parenthetical, if any
    - role: classification result
    - reason: short tag explaining the classification (for debug output)
    """
    label: Optional[str] = None
    role: FaxRole = FaxRole.UNKNOWN
    reason: str = ""


_NATIVE_NAME_CHARS = re.compile(r'[\u4e00-\u9fff\u3040-\u309f\u30a0-\u30ff]+')
_ADDRESSEE_TAIL = re.compile('(?:' + '|'.join(ADDRESSEE_SUFFIXES) + ')+$')
_BOILERPLATE_HEAD = re.compile(f'^[{BOILERPLATE_LEADING_CHARS}]')

COUNSEL_NAME_MIN = 2
COUNSEL_NAME_MAX = 6


def clean_counsel_name(raw_name: str) -> Optional[str]:
    """
    Reduce a raw OCR capture following "弁護士" to a plausible personal name.

    Only kanji/hiragana/katakana survive ("石 口 R \\"pet i" → "石口"), addressee
    tails (宛て, 殿, 様, 御中 …) are dropped, and anything outside 2-6 characters
    or starting like boilerplate (弁護士法, 弁護士会 …) is rejected.

    Examples:
        >>> clean_counsel_name("石 口 俊 一 宛て")
        '石口俊一'
        >>> clean_counsel_name("法第23条") is None
        True
    """
    runs = _NATIVE_NAME_CHARS.findall(raw_name.strip())
    if not runs:
        return None
    name = ''.join(runs)
    name = _ADDRESSEE_TAIL.sub('', name)

    if len(name) < COUNSEL_NAME_MIN or len(name) > COUNSEL_NAME_MAX:
        return None
    if _BOILERPLATE_HEAD.match(name):
        return None
    return name


def create_counsel_candidate(
    raw_capture: str,
    pattern_name: str,
    match_span: tuple[int, int],
    priority: int,
) -> Optional[CounselCandidate]:
    """
    Create CounselCandidate from a raw capture, or None if it does not clean up
    into a plausible name.
    """
    name = clean_counsel_name(raw_capture)
    if name is None:
        return None
    return CounselCandidate(
        value=name,
        pattern_name=pattern_name,
        match_span=match_span,
        priority=priority,
        raw_text=raw_capture,
    )
