"""
Run-fragmented rich text: a Block is one paragraph made of styled TextRuns.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class TextRun:
    """A contiguous styled fragment. ``attributes`` is opaque to the core."""
    attributes: str
    text: str


@dataclass(frozen=True)
class Block:
    """An ordered sequence of runs forming one semantic paragraph/line."""
    runs: Tuple[TextRun, ...]

    @property
    def text(self) -> str:
        return ''.join(run.text for run in self.runs)

    @classmethod
    def from_texts(cls, *texts: str, attributes: str = '') -> 'Block':
        return cls(runs=tuple(TextRun(attributes=attributes, text=t) for t in texts))
