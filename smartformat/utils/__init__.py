"""
Utility Modules for SmartFormat

Shared text helpers and guard predicates used across detectors and stages.
"""

from .text_utils import (
    MINOR_WORDS,
    capitalize_first,
    has_header,
    is_greeting,
    is_non_prose_line,
    split_blocks,
    split_sentences,
    to_title_case,
    word_count,
)

__all__ = [
    'MINOR_WORDS',
    'capitalize_first',
    'has_header',
    'is_greeting',
    'is_non_prose_line',
    'split_blocks',
    'split_sentences',
    'to_title_case',
    'word_count',
]
