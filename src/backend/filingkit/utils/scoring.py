"""
Scoring and ranking functions for extraction candidates and receipt pages.

Each heuristic is a named function returning either a sort key or a structured
breakdown, so individual bonuses/penalties can be tested in isolation.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from filingkit.models.layout import OcrWord
from filingkit.utils.candidates import CounselCandidate
from filingkit.utils.word_search import find_receipt_label, joined_text

__all__ = [
    'PageScore', 'score_receipt_page', 'RECEIPT_PAGE_CONFIDENT_SCORE',
    'dedupe_counsel_candidates', 'counsel_sort_key', 'select_best_counsel',
]


# ---------------------------------------------------------------------------
# Receipt page scoring
# ---------------------------------------------------------------------------

RECEIPT_LABEL_BONUS = 50
ERA_BONUS = 10
AGENT_BONUS = 10
LONG_PAGE_PENALTY = 20
LONG_PAGE_WORDS = 200
VERY_LONG_PAGE_WORDS = 300

# A page with the receipt label is accepted without scanning further
RECEIPT_PAGE_CONFIDENT_SCORE = 50


@dataclass(frozen=True)
class PageScore:
    """
    Breakdown of the "is this the receipt page" score.

    - label_bonus: +50 if the receipt label (受領書 / 受領, or split 受…領) is present
    - era_bonus: +10 if 令和 appears anywhere on the page
    - agent_bonus: +10 if 代理人 appears anywhere on the page
    - length_penalty: -20 above 200 words, another -20 above 300 (body text pages)
    """
    word_count: int
    label_found: bool
    label_y: Optional[int]
    label_bonus: int
    era_bonus: int
    agent_bonus: int
    length_penalty: int

    @property
    def total(self) -> int:
        return self.label_bonus + self.era_bonus + self.agent_bonus - self.length_penalty

    @property
    def is_confident(self) -> bool:
        return self.total >= RECEIPT_PAGE_CONFIDENT_SCORE

    def as_dict(self) -> Dict[str, int]:
        return {
            'label': self.label_bonus,
            'era': self.era_bonus,
            'agent': self.agent_bonus,
            'length_penalty': -self.length_penalty,
            'total': self.total,
        }


def score_length_penalty(word_count: int) -> int:
    """Penalty (as a positive number) for pages that look like body text."""
    penalty = 0
    if word_count > LONG_PAGE_WORDS:
        penalty += LONG_PAGE_PENALTY
    if word_count > VERY_LONG_PAGE_WORDS:
        penalty += LONG_PAGE_PENALTY
    return penalty


def score_receipt_page(words: Sequence[OcrWord]) -> PageScore:
    """
    Score a page's OCR words for containing the receipt section.

    Args:
        words: OCR words of one page

    Returns:
        PageScore breakdown; ``.total`` is the scalar score
    """
    label = find_receipt_label(words)
    all_text = joined_text(words)

    return PageScore(
        word_count=len(words),
        label_found=label.found,
        label_y=label.y,
        label_bonus=RECEIPT_LABEL_BONUS if label.found else 0,
        era_bonus=ERA_BONUS if '令和' in all_text else 0,
        agent_bonus=AGENT_BONUS if '代理人' in all_text else 0,
        length_penalty=score_length_penalty(len(words)),
    )


# ---------------------------------------------------------------------------
# Counsel name ranking
# ---------------------------------------------------------------------------

# Five-character winners are checked for one trailing OCR noise glyph
NOISY_NAME_LENGTH = 5
SURNAME_MAX_LENGTH = 3


def dedupe_counsel_candidates(candidates: Sequence[CounselCandidate]) -> List[CounselCandidate]:
    """
    Collapse candidates with the same cleaned name, keeping the best (lowest)
    priority. First-seen order of names is preserved.
    """
    best: Dict[str, CounselCandidate] = {}
    for candidate in candidates:
        current = best.get(candidate.value)
        if current is None or candidate.priority < current.priority:
            best[candidate.value] = candidate
    return list(best.values())


def counsel_sort_key(candidate: CounselCandidate) -> tuple:
    """
    Sort key: pattern tier, then typical 3-4 character length, then longer names.
    """
    return (
        candidate.priority,
        0 if candidate.is_typical_length else 1,
        -len(candidate.value),
    )


def trim_trailing_noise(best: str, others: Sequence[CounselCandidate]) -> str:
    """
    Drop the last glyph of a 5-character name when a surname-length candidate
    is a strict prefix of it ("石口俊一知" with "石口" present → "石口俊一").
    """
    if len(best) != NOISY_NAME_LENGTH:
        return best
    for other in others:
        if len(other.value) <= SURNAME_MAX_LENGTH and best.startswith(other.value) and other.value != best:
            return best[:NOISY_NAME_LENGTH - 1]
    return best


def select_best_counsel(candidates: Sequence[CounselCandidate]) -> Optional[str]:
    """
    Select the counsel name from all tiers' candidates.

    Returns:
        Winning cleaned name, or None if there were no candidates
    """
    if not candidates:
        return None

    ranked = sorted(dedupe_counsel_candidates(candidates), key=counsel_sort_key)
    return trim_trailing_noise(ranked[0].value, ranked)
