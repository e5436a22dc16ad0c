"""
Final Polish Stages

- SentenceEndingFixer: add the missing period to a paragraph's last sentence
- SmartPunctuation: "--" -> em dash, "..." -> ellipsis
"""

import re

from smartformat.config import SENTENCE_ENDING_MIN_CHARS, SENTENCE_ENDING_MIN_WORDS
from smartformat.stages.base import BaseStage, StageResult
from smartformat.utils.text_utils import is_non_prose_line, word_count

# Endings that are already punctuation or markup
_NO_PERIOD_AFTER = re.compile(r'([.!?:;,\-—…)]|\*\*|\}\}|\]|`)$')


def needs_period(line: str) -> bool:
    """A prose sentence of 6+ words and 30+ chars without closing punctuation."""
    return (
        len(line) > SENTENCE_ENDING_MIN_CHARS
        and word_count(line) >= SENTENCE_ENDING_MIN_WORDS
        and not _NO_PERIOD_AFTER.search(line)
    )


class SentenceEndingFixer(BaseStage):
    """
    Appends a period to prose lines at a paragraph boundary.

    Only the last line of a paragraph (followed by a blank line or the end of
    the text) is considered, so wrapped lines and titles are left alone.
    """

    name = "Sentence Ending Fixer"
    label = "Punctuation"

    def process(self, text: str) -> StageResult:
        lines = text.split('\n')
        out = []
        changes = 0

        for i, line in enumerate(lines):
            t = line.strip()
            next_line = lines[i + 1].strip() if i + 1 < len(lines) else ''
            if is_non_prose_line(t) or re.match(r'^\*\*\w', t):
                out.append(line)
                continue
            if next_line == '' and needs_period(t):
                changes += 1
                out.append(line + '.')
                continue
            out.append(line)

        return StageResult(text='\n'.join(out), changes_made=changes)


# A double hyphen that is not part of a "---" divider or table rule
_DOUBLE_HYPHEN = re.compile(r'[ \t]*(?<!-)--(?!-)[ \t]*')
_INLINE_CODE_SPAN = re.compile(r'(`[^`\n]*`)')


class SmartPunctuation(BaseStage):
    """Typographic dashes and ellipses outside inline code spans."""

    name = "Smart Punctuation"
    label = "Punctuation"

    def process(self, text: str) -> StageResult:
        changes = 0
        parts = _INLINE_CODE_SPAN.split(text)

        for i in range(0, len(parts), 2):
            part, dashes = _DOUBLE_HYPHEN.subn(' — ', parts[i])
            part, ellipses = re.subn(r'\.\.\.', '…', part)
            changes += dashes + ellipses
            parts[i] = part

        result = ''.join(parts)
        return StageResult(text=result, changes_made=changes if result != text else 0)
