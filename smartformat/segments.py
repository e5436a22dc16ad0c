"""
Code-Fence-Aware Document Segmenter

Splits a document into an ordered sequence of prose and code segments.
Fenced code regions (``` ... ```) are opaque: prose stages never see them,
and reassembly reproduces them byte for byte.

Usage:
    segments = segment_document(text)
    segments = map_prose(segments, str.upper)
    text = reassemble(segments)
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

FENCE_PATTERN = re.compile(r'^\s*```')


class SegmentKind(Enum):
    PROSE = 'prose'
    CODE = 'code'


@dataclass(frozen=True)
class Segment:
    """
    A maximal run of lines of one kind.

    Attributes:
        kind: PROSE or CODE
        content: The lines of the segment joined with '\\n'. A CODE segment
                 includes its opening and (if present) closing fence lines.
    """
    kind: SegmentKind
    content: str

    @property
    def is_prose(self) -> bool:
        return self.kind is SegmentKind.PROSE


def segment_document(text: str) -> list[Segment]:
    """
    Split text into prose/code segments by tracking fence lines.

    An unterminated fence at end of input still yields a trailing CODE
    segment; it is not closed automatically.

    Args:
        text: Document text

    Returns:
        Ordered segments; '\\n'.join of their contents equals text.
    """
    segments: list[Segment] = []
    current: list[str] = []
    in_code = False

    for line in text.split('\n'):
        if FENCE_PATTERN.match(line):
            if not in_code:
                if current:
                    segments.append(Segment(SegmentKind.PROSE, '\n'.join(current)))
                current = [line]
                in_code = True
            else:
                current.append(line)
                segments.append(Segment(SegmentKind.CODE, '\n'.join(current)))
                current = []
                in_code = False
        else:
            current.append(line)

    if current:
        kind = SegmentKind.CODE if in_code else SegmentKind.PROSE
        segments.append(Segment(kind, '\n'.join(current)))

    return segments


def reassemble(segments: list[Segment]) -> str:
    """Concatenate segment contents in order, newline separated."""
    return '\n'.join(s.content for s in segments)


def map_prose(segments: list[Segment], fn: Callable[[str], str]) -> list[Segment]:
    """Apply fn to every prose segment; code segments pass through untouched."""
    return [replace(s, content=fn(s.content)) if s.is_prose else s for s in segments]
