"""
Named pattern strategies and the small driver loops that evaluate them.

A field's extraction is an ordered list of Matchers (first hit wins) or
Collectors (every hit becomes a candidate, ranked afterwards). Keeping each
strategy a named pure function makes the cascade testable one step at a time.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from filingkit.utils.candidates import Candidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    priority: Optional[int] = None
    flags: int = re.IGNORECASE
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))

    def search(self, text: str) -> Optional[re.Match]:
        return self.compiled.search(text)

    def finditer(self, text: str) -> Iterable[re.Match]:
        return self.compiled.finditer(text)


@dataclass(frozen=True)
class Matcher:
    """A strategy producing at most one candidate: ``(text) -> Candidate?``."""
    name: str
    priority: int
    func: Callable[[str], Optional[Candidate]]

    def __call__(self, text: str) -> Optional[Candidate]:
        return self.func(text)


@dataclass(frozen=True)
class Collector:
    """A strategy producing every candidate it can find: ``(text) -> [Candidate]``."""
    name: str
    priority: int
    func: Callable[[str], List[Candidate]]

    def __call__(self, text: str) -> List[Candidate]:
        return self.func(text)


def spec_matcher(
    spec: PatternSpec,
    build: Callable[[re.Match], Optional[Candidate]],
) -> Matcher:
    """Wrap a PatternSpec as a Matcher: first regex hit, turned into a candidate by ``build``."""
    def run(text: str) -> Optional[Candidate]:
        match = spec.search(text)
        if match is None:
            return None
        return build(match)

    return Matcher(name=spec.name, priority=spec.priority or 100, func=run)


def first_match(
    matchers: Sequence[Matcher],
    text: str,
    field_name: str = "",
    _debug: Optional[Dict] = None,
) -> Optional[Candidate]:
    """
    Run matchers in priority order and return the first candidate produced.

    Ties in priority keep list order.
    """
    for matcher in sorted(matchers, key=lambda m: m.priority):
        candidate = matcher(text)
        if candidate is None:
            continue
        logger.debug("%s matched by %s: %r", field_name or "field", matcher.name, candidate.value)
        if _debug is not None:
            _debug.setdefault('patterns_matched', {})[field_name] = matcher.name
        return candidate
    return None


def collect_all(
    collectors: Sequence[Collector],
    text: str,
    field_name: str = "",
    _debug: Optional[Dict] = None,
) -> List[Candidate]:
    """Run every collector (priority order) and concatenate their candidates."""
    candidates: List[Candidate] = []
    for collector in sorted(collectors, key=lambda c: c.priority):
        found = collector(text)
        if found:
            logger.debug("%s: %s produced %d candidate(s)", field_name or "field", collector.name, len(found))
        candidates.extend(found)

    if _debug is not None and candidates:
        _debug.setdefault('candidates', {})[field_name] = [
            {'value': c.value, 'pattern': c.pattern_name, 'priority': c.priority}
            for c in candidates
        ]
    return candidates
