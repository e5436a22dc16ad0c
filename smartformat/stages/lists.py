"""
List Formatting Stages

- StepHeaders: "Step 2: ..." -> "### Step 2: ..."
- normalize_bullets: unicode / * / + bullets -> "- ", "1)" -> "1."
- RunOnListSplitter: "- a - b - c" on one line -> one item per line
- UnbulletedListDetector: a run of short lines under a heading -> bullets
- EmbeddedListExtractor: "Languages: Python, Go, and Rust" -> label + bullets
- SequentialInstructionExtractor: "First, ... Then, ... Finally, ..." -> numbered list
"""

import re

from smartformat.config import (
    RUN_ON_LIST_MAX_AVG_ITEM_LEN,
    RUN_ON_LIST_MIN_ITEMS,
    UNBULLETED_LIST_MAX_WORDS,
    UNBULLETED_LIST_MIN_LINES,
)
from smartformat.stages.base import BaseStage, StageResult
from smartformat.utils.text_utils import capitalize_first, is_non_prose_line, word_count


class StepHeaders(BaseStage):
    """Turns "Step N:" and "Phase N -" prefixes into "### Step N: " sub-headings."""

    name = "Step Headers"
    label = "Steps"

    PATTERN = re.compile(r'^(Step|Phase)\s+(\d+)\s*[:.—-]\s*', re.MULTILINE | re.IGNORECASE)

    def process(self, text: str) -> StageResult:
        result, count = self.PATTERN.subn(
            lambda m: f"### {m.group(1).capitalize()} {m.group(2)}: ", text
        )
        return StageResult(text=result, changes_made=count if result != text else 0)


_UNICODE_BULLET = re.compile(
    r'^[•●○◦▪▫►▸➤➜→]\s+', re.MULTILINE
)
_STAR_PLUS_BULLET = re.compile(r'^([ \t]*)[*+]\s+', re.MULTILINE)
_PAREN_NUMBER = re.compile(r'^([ \t]*)(\d+)\)\s+', re.MULTILINE)


def normalize_bullets(text: str) -> str:
    """Normalize bullet glyphs to "- " and "1)" numbering to "1."."""
    result = _UNICODE_BULLET.sub('- ', text)
    result = _STAR_PLUS_BULLET.sub(r'\1- ', result)
    return _PAREN_NUMBER.sub(r'\1\2. ', result)


def is_run_on_bullet_items(items: list[str]) -> bool:
    """Enough short items; long ones mean prose with spaced dashes."""
    if len(items) < RUN_ON_LIST_MIN_ITEMS or not all(len(it) >= 2 for it in items):
        return False
    return sum(len(it) for it in items) / len(items) < RUN_ON_LIST_MAX_AVG_ITEM_LEN


class RunOnListSplitter(BaseStage):
    """
    Splits lists pasted onto a single line.

    Example:
        "- eggs - milk - flour"   -> "- eggs\\n- milk\\n- flour"
        "1. one 2. two 3. three"  -> "1. one\\n2. two\\n3. three"
    """

    name = "Run-On List Splitter"
    label = "Lists"

    RUN_ON_BULLETS = re.compile(r'^-\s+.+\s+-\s+')
    RUN_ON_NUMBERED = re.compile(r'^\d+\.\s+.+\s+\d+\.\s+')

    def process(self, text: str) -> StageResult:
        out = []
        changes = 0

        for line in text.split('\n'):
            trimmed = line.strip()

            if self.RUN_ON_BULLETS.match(trimmed):
                parts = re.split(r'\s+-\s+', trimmed)
                if len(parts) >= RUN_ON_LIST_MIN_ITEMS:
                    items = [p for p in (re.sub(r'^-\s+', '', p).strip() for p in parts) if p]
                    if is_run_on_bullet_items(items):
                        changes += 1
                        out.extend(f"- {item}" for item in items)
                        continue

            if self.RUN_ON_NUMBERED.match(trimmed):
                items = re.split(r'\s+(?=\d+\.\s+)', trimmed)
                if len(items) >= RUN_ON_LIST_MIN_ITEMS:
                    changes += 1
                    out.extend(item.strip() for item in items)
                    continue

            out.append(line)

        return StageResult(text='\n'.join(out), changes_made=changes)


_SECTION_HEADING = re.compile(r'^#{2,6}\s+')


def is_list_boundary_line(line: str) -> bool:
    """Markup that ends a run of candidate list lines."""
    return is_non_prose_line(line) or line.startswith('**')


def is_prose_sentence(line: str) -> bool:
    """Too long, or a full sentence of 12+ words."""
    return len(line) > 100 or (re.search(r'[.!?]$', line) is not None and word_count(line) >= 12)


def is_short_list_line(line: str) -> bool:
    return word_count(line) <= UNBULLETED_LIST_MAX_WORDS and re.match(r'^[A-Z0-9<(]', line) is not None


class UnbulletedListDetector(BaseStage):
    """
    Bulletizes runs of three or more short lines that follow a "##" heading.

    Example input:
        ## Skills
        Python
        Distributed systems
        Technical writing

    Example output:
        ## Skills
        - Python
        - Distributed systems
        - Technical writing

    Content before the first section heading (bios, metadata) is left alone.
    """

    name = "Unbulleted List Detector"
    label = "Lists"

    def process(self, text: str) -> StageResult:
        lines = text.split('\n')
        out = []
        changes = 0
        seen_header = False

        i = 0
        while i < len(lines):
            trimmed = lines[i].strip()
            if _SECTION_HEADING.match(trimmed):
                seen_header = True

            if is_list_boundary_line(trimmed):
                out.append(lines[i])
                i += 1
                continue

            run_start = i
            run = []
            while i < len(lines):
                t = lines[i].strip()
                if is_list_boundary_line(t) or is_prose_sentence(t):
                    break
                run.append(t)
                i += 1

            if not run:
                out.append(lines[i])
                i += 1
            elif seen_header and len(run) >= UNBULLETED_LIST_MIN_LINES and all(is_short_list_line(r) for r in run):
                changes += 1
                out.extend(f"- {item}" for item in run)
            else:
                out.extend(lines[run_start:run_start + len(run)])

        return StageResult(text='\n'.join(out), changes_made=changes)


# First words that mark "X: ..." as a sentence rather than a category label
EMBEDDED_LIST_SKIP_WORDS = frozenset({
    'The', 'This', 'That', 'These', 'Those', 'There', 'Then', 'They', 'However', 'Here', 'He',
    'She', 'It', 'If', 'In', 'Is', 'I', 'We', 'You', 'When', 'Where', 'What', 'Why', 'Who',
    'Which', 'While', 'With', 'Would', 'Will', 'Was', 'Were', 'Are', 'Do', 'But', 'And', 'Or',
    'Not', 'No', 'So', 'For', 'From', 'By', 'At', 'On', 'To', 'As', 'Be',
})

_LABEL_VERB = re.compile(
    r'\b(is|are|was|were|has|have|had|do|does|did|will|would|can|could|shall|should|may|might|'
    r'must|make|makes|need|needs)\b',
    re.IGNORECASE,
)


def is_category_label(label: str) -> bool:
    """1-3 capitalized words, no sentence starter, no verb."""
    words = label.split()
    return (
        bool(words)
        and words[0] not in EMBEDDED_LIST_SKIP_WORDS
        and len(words) <= 3
        and re.match(r'^[A-Z]', label) is not None
        and not _LABEL_VERB.search(label)
    )


def split_semicolon_items(rest: str) -> list[str] | None:
    items = re.split(r';\s*', rest)
    if len(items) >= 3 and all(2 <= len(it.strip()) <= 80 for it in items):
        return items
    return None


def split_comma_items(rest: str) -> list[str] | None:
    """
    Split "a, b and c" or "a, b, and c" into items.

    Items must be short noun phrases (2-50 chars, at most five words) and the
    text must not read as several sentences.
    """
    items = re.split(r',\s*', rest)
    last = items[-1]
    and_split = re.split(r'\s+and\s+', last, flags=re.IGNORECASE)
    if len(and_split) == 2 and len(and_split[0].strip()) >= 2 and len(and_split[1].strip()) >= 2:
        items[-1:] = [and_split[0].strip(), and_split[1].strip()]
    else:
        oxford = re.match(r'^and\s+(.+)', last, re.IGNORECASE)
        if oxford:
            items[-1] = oxford.group(1)

    if (
        len(items) >= 3
        and all(2 <= len(it.strip()) <= 50 for it in items)
        and '. ' not in rest
        and all(word_count(it) <= 5 for it in items)
    ):
        return items
    return None


class EmbeddedListExtractor(BaseStage):
    """
    Extracts inline lists introduced by a category label.

    Example input:
        Languages: Python, Go, and Rust

    Example output:
        **Languages:**
        - Python
        - Go
        - Rust

    Semicolon-separated items are tried first; comma lists also accept a
    final "and" with or without the Oxford comma.
    """

    name = "Embedded List Extractor"
    label = "Lists"

    COLON_LIST = re.compile(r'^(.{2,40}):\s*(.+)$')

    def process(self, text: str) -> StageResult:
        out = []
        changes = 0

        for line in text.split('\n'):
            trimmed = line.strip()
            if is_non_prose_line(trimmed):
                out.append(line)
                continue

            match = self.COLON_LIST.match(trimmed)
            if not match or not is_category_label(match.group(1).strip()):
                out.append(line)
                continue

            label, rest = match.group(1).strip(), match.group(2)
            items = split_semicolon_items(rest) or split_comma_items(rest)
            if not items:
                out.append(line)
                continue

            changes += 1
            out.append(f"\n**{label}:**\n")
            out.extend(f"- {capitalize_first(it.strip())}" for it in items if it.strip())

        return StageResult(text='\n'.join(out), changes_made=changes)


STRONG_SEQUENCE = re.compile(
    r'^(First|Second|Third|Fourth|Fifth|Sixth|Finally|Lastly|Start by|Begin by|Begin with|'
    r'Following that|Subsequently|Last of all|To start|To begin|To finish)\b',
    re.IGNORECASE,
)
# Weak markers only count with a comma ("Then, run it" but not "Then the dog ran")
WEAK_SEQUENCE_COMMA = re.compile(
    r'^(Next|Then|After that|Additionally|Furthermore|Moreover|Also|In addition|Last),\s',
    re.IGNORECASE,
)
SEQUENCE_PREFIX = re.compile(
    r'^(First|Second|Third|Fourth|Fifth|Sixth|Next|Then|After that|Finally|Lastly|Additionally|'
    r'Furthermore|Moreover|Also|Start by|Begin by|Begin with|Following that|Subsequently|'
    r'In addition|Last of all|Last|To start|To begin|To finish),?\s*',
    re.IGNORECASE,
)
_TERMINATED_SENTENCE = re.compile(r'[^.!?]+[.!?]+')


def is_sequence_sentence(sentence: str) -> bool:
    s = sentence.strip()
    return bool(STRONG_SEQUENCE.match(s) or WEAK_SEQUENCE_COMMA.match(s))


def is_instruction_sequence(seq_count: int, sentence_count: int) -> bool:
    """Three markers, or two markers covering half of a short paragraph."""
    return seq_count >= 3 or (seq_count >= 2 and sentence_count <= 4 and seq_count / sentence_count >= 0.5)


class SequentialInstructionExtractor(BaseStage):
    """
    Rewrites narrated procedures as a numbered list.

    Example input:
        First, install the CLI. Then, log in. Finally, deploy the app.

    Example output:
        1. Install the CLI.
        2. Log in.
        3. Deploy the app.
    """

    name = "Sequential Instruction Extractor"
    label = "Lists"

    def process(self, text: str) -> StageResult:
        out = []
        changes = 0

        for line in text.split('\n'):
            trimmed = line.strip()
            if is_non_prose_line(trimmed):
                out.append(line)
                continue

            sentences = _TERMINATED_SENTENCE.findall(trimmed)
            if len(sentences) < 3:
                out.append(line)
                continue

            seq_count = sum(1 for s in sentences if is_sequence_sentence(s))
            if not is_instruction_sequence(seq_count, len(sentences)):
                out.append(line)
                continue

            tail = trimmed[len(''.join(sentences)):].strip()
            if tail:
                sentences[-1] = f"{sentences[-1]} {tail}"

            changes += 1
            for step, sentence in enumerate(sentences, start=1):
                cleaned = SEQUENCE_PREFIX.sub('', sentence.strip(), count=1)
                out.append(f"{step}. {capitalize_first(cleaned)}")

        return StageResult(text='\n'.join(out), changes_made=changes)
