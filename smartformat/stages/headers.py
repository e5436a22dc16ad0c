"""
Header Promotion Stages

Second round of heading work, after paragraphs have been split:

- NumberedSectionHeaders: "1. Topic Name" on its own line -> "## 1. Topic Name"
- AutoSection: infer "## Context", "## Task", ... for headerless blocks
- EnsureTitle: promote "Title: X" or a short first line to "# X"
- TitleCaseHeaders: title-case every heading
"""

import math
import re

from smartformat.config import AUTO_SECTION_HEADER_RATIO
from smartformat.logging_config import debug_log
from smartformat.sections import (
    SectionKind,
    generate_title,
    infer_section,
    is_first_person_narrative,
)
from smartformat.stages.base import BaseStage, StageResult
from smartformat.utils.text_utils import (
    has_header,
    is_greeting,
    split_blocks,
    to_title_case,
    word_count,
)

_TRAILING_PUNCT = re.compile(r'[.!?,;:]$')
_NUMBERED_PREFIX = re.compile(r'^[0-9]+[.)]\s')
_BULLET_PREFIX = re.compile(r'^[-*+•]')


def is_title_candidate(line: str) -> bool:
    """
    Short first line that reads like a document title.

    Under 80 chars, at least two words, not a greeting, not a list item and
    without trailing punctuation.
    """
    return (
        0 < len(line) < 80
        and word_count(line) >= 2
        and not is_greeting(line)
        and not _NUMBERED_PREFIX.match(line)
        and not _BULLET_PREFIX.match(line)
        and not _TRAILING_PUNCT.search(line)
    )


class NumberedSectionHeaders(BaseStage):
    """Promotes "N. Heading Text" lines without sentence punctuation to "## N. Heading Text"."""

    name = "Numbered Section Headers"
    label = "Headers"

    PATTERN = re.compile(r'^(\d+)\.\s+([A-Z][A-Za-z &\-,]{2,50})\s*$', re.MULTILINE)

    def process(self, text: str) -> StageResult:
        changes = 0

        def replace_heading(match):
            nonlocal changes
            heading = match.group(2).strip()
            if re.search(r'[.!?]$', heading):
                return match.group(0)
            changes += 1
            return f"\n## {match.group(1)}. {to_title_case(heading)}\n"

        result = self.PATTERN.sub(replace_heading, text)
        return StageResult(text=result, changes_made=changes)


class AutoSection(BaseStage):
    """
    Infers section headings for headerless blocks.

    Skipped when AUTO_SECTION_HEADER_RATIO of the blocks (and at least two)
    already carry a heading. Each section kind is used at most once, and
    first-person narrative blocks are never tagged.

    The first block may also receive a document title, either from its own
    first line or synthesized from a role/task phrase anywhere in the text.
    """

    name = "Auto-Section"
    label = "Structured"

    def process(self, text: str) -> StageResult:
        blocks = split_blocks(text)
        if len(blocks) < 2:
            return StageResult(text=text)

        header_count = sum(1 for b in blocks if has_header(b))
        if header_count >= math.ceil(len(blocks) * AUTO_SECTION_HEADER_RATIO) and header_count >= 2:
            debug_log(f"[STAGES] Auto-section skipped: {header_count}/{len(blocks)} blocks have headers")
            return StageResult(text=text)

        used: set[SectionKind] = set()
        out: list[str] = []
        changes = 0
        has_title = any(re.match(r'^#\s', b.strip()) for b in blocks)

        def tag(block: str) -> str | None:
            kind = infer_section(block)
            if kind is None or kind in used:
                return None
            used.add(kind)
            return f"## {kind.label}\n\n{block}"

        for i, block in enumerate(blocks):
            trimmed = block.strip()
            if has_header(block):
                out.append(block)
                continue

            if i == 0 and not has_title:
                first, _, rest = trimmed.partition('\n')
                if is_title_candidate(first):
                    out.append(f"# {to_title_case(first)}")
                    if rest.strip():
                        out.append(tag(rest) or rest)
                    has_title = True
                    changes += 1
                    continue

                title = generate_title('\n'.join(b.strip() for b in blocks))
                if title:
                    out.append(f"# {title}")
                    has_title = True
                    changes += 1

            tagged = None if is_first_person_narrative(trimmed) else tag(trimmed)
            if tagged:
                changes += 1
                out.append(tagged)
            else:
                out.append(trimmed)

        return StageResult(text='\n\n'.join(out), changes_made=changes,
                           metadata={'sections': [k.value for k in used]})


class EnsureTitle(BaseStage):
    """
    Gives the document a "# Title" first line.

    Example:
        "Subject: quarterly report"  -> "# Quarterly Report"
        "Onboarding checklist\\n..."  -> "# Onboarding Checklist\\n..."
    """

    name = "Ensure Title"
    label = "Title"

    EXPLICIT_TITLE = re.compile(r'^(Title|Subject|Prompt|Topic|Name|Heading):\s*(.+)$', re.IGNORECASE)

    def process(self, text: str) -> StageResult:
        lines = text.split('\n')
        first = lines[0].strip()
        if first.startswith('#'):
            return StageResult(text=text)

        explicit = self.EXPLICIT_TITLE.match(first)
        if explicit:
            lines[0] = f"# {to_title_case(explicit.group(2))}"
            return StageResult(text='\n'.join(lines), changes_made=1)

        if len(lines) > 1 and not re.match(r'^##?\s', first) and is_title_candidate(first):
            lines[0] = f"# {to_title_case(first)}"
            return StageResult(text='\n'.join(lines), changes_made=1)

        return StageResult(text=text)


class TitleCaseHeaders(BaseStage):
    """Rewrites every heading in title case."""

    name = "Title-Case Headers"
    label = "Headers"

    PATTERN = re.compile(r'^(#{1,6})\s+(.+)$', re.MULTILINE)

    def process(self, text: str) -> StageResult:
        changes = 0

        def replace_heading(match):
            nonlocal changes
            heading = f"{match.group(1)} {to_title_case(match.group(2))}"
            if heading != match.group(0):
                changes += 1
            return heading

        result = self.PATTERN.sub(replace_heading, text)
        return StageResult(text=result, changes_made=changes)
