"""
Structural Detection Stages

Find the section structure a document already implies and turn it into
Markdown headings:

- ChatTranscriptHeaders: "System: ... User: ..." transcripts
- XmlTagHeaders: <instructions> ... </instructions> prompt tags
- AllCapsHeaders: "CONSTRAINTS" on its own line
- KeywordHeaders: "background:" -> "## Context"
- ColonLineHeaders: "Project Timeline:" on its own line
- ShortLineHeaders: a short title line right before a long paragraph
- expand_tabs: tabs become two spaces before detection runs

Every stage leaves already-correct headings alone so a second pass is a no-op.
"""

import re

from smartformat.config import (
    SHORT_HEADER_MAX_WORDS,
    SHORT_HEADER_MIN_WORDS,
    SHORT_HEADER_NEXT_PARAGRAPH_WORDS,
)
from smartformat.stages.base import BaseStage, StageResult
from smartformat.utils.text_utils import (
    is_non_prose_line,
    to_title_case,
    word_count,
)


class ChatTranscriptHeaders(BaseStage):
    """
    Converts chat role markers into headings.

    Example input:
        System: You are terse.
        User: Summarize this.

    Example output:
        ## System

        You are terse.

        ## User

        Summarize this.

    Requires at least two markers so a single "User:" in prose is left alone.
    """

    name = "Chat Transcript Headers"
    label = "Chat Prompt"

    ROLE_PATTERN = re.compile(r'^(System|User|Assistant|Human|AI)\s*:\s*', re.MULTILINE | re.IGNORECASE)

    def process(self, text: str) -> StageResult:
        matches = self.ROLE_PATTERN.findall(text)
        if len(matches) < 2:
            return StageResult(text=text)

        def replace_role(match):
            role = match.group(1)
            return f"\n## {role[:1].upper() + role[1:].lower()}\n\n"

        result = self.ROLE_PATTERN.sub(replace_role, text).strip()
        return StageResult(text=result, changes_made=len(matches), metadata={'roles': len(matches)})


_XML_TAG_NAMES = (
    r'instructions|context|examples?|constraints|rules|output|task|role|system|input|'
    r'steps|format|response|thinking|answer|question'
)


class XmlTagHeaders(BaseStage):
    """
    Converts prompt-style XML section tags into headings.

    "<instructions>" becomes "## Instructions" and the matching closing tag
    becomes a "---" divider.
    """

    name = "XML Tag Headers"
    label = "XML Tags"

    OPEN_TAG = re.compile(rf'^<({_XML_TAG_NAMES})>\s*$', re.MULTILINE | re.IGNORECASE)
    CLOSE_TAG = re.compile(rf'^</({_XML_TAG_NAMES})>\s*$', re.MULTILINE | re.IGNORECASE)

    def process(self, text: str) -> StageResult:
        if not self.OPEN_TAG.search(text):
            return StageResult(text=text)

        result, opened = self.OPEN_TAG.subn(lambda m: f"\n## {to_title_case(m.group(1))}\n", text)
        result, closed = self.CLOSE_TAG.subn('\n---\n', result)
        return StageResult(text=result.strip(), changes_made=opened + closed)


# Section names recognized when typed in ALL CAPS on their own line
ALL_CAPS_SECTION_NAMES = (
    'ROLE', 'SYSTEM ROLE', 'CONTEXT', 'BACKGROUND', 'TASK', 'OBJECTIVE', 'GOAL', 'INSTRUCTIONS',
    'STEPS', 'PROCESS', 'WORKFLOW', 'CONSTRAINTS', 'RULES', 'LIMITATIONS', 'REQUIREMENTS',
    'OUTPUT', 'OUTPUT FORMAT', 'FORMAT', 'RESPONSE FORMAT', 'EXAMPLES', 'SAMPLES', 'TONE',
    'STYLE', 'VOICE', 'AUDIENCE', 'INPUT', 'DEFINITIONS', 'GLOSSARY', 'NOTES', 'IMPORTANT',
    'GUIDELINES', 'CRITERIA', 'DELIVERABLES', 'EXPECTED OUTPUT', 'ADDITIONAL CONTEXT',
    'ADDITIONAL INSTRUCTIONS', 'OVERVIEW', 'DESCRIPTION', 'SUMMARY', 'INTRODUCTION', 'PURPOSE',
    'SCOPE', 'PARAMETERS', 'CONFIGURATION', 'SETTINGS', 'OPTIONS', 'CONCLUSION', 'REFERENCES',
    'APPENDIX', 'PREREQUISITES', 'ASSUMPTIONS', 'METHODS', 'RESULTS', 'DISCUSSION', 'ABSTRACT',
)


class AllCapsHeaders(BaseStage):
    """Promotes known ALL-CAPS section names to "## Title Case" headings."""

    name = "All-Caps Headers"
    label = "Headers"

    PATTERN = re.compile(
        r'^\s*(#{1,3}\s*)?(' + '|'.join(re.escape(n) for n in ALL_CAPS_SECTION_NAMES) + r')\s*:?\s*$',
        re.MULTILINE,
    )

    def process(self, text: str) -> StageResult:
        changes = 0

        def replace_name(match):
            nonlocal changes
            heading = f"## {to_title_case(match.group(2).strip())}"
            if match.group(0).strip() == heading:
                return match.group(0)
            changes += 1
            return f"\n{heading}\n"

        result = self.PATTERN.sub(replace_name, text)
        return StageResult(text=result, changes_made=changes)


# Canonical heading -> keywords that introduce it
KEYWORD_HEADERS: dict[str, tuple[str, ...]] = {
    'System Role': ('role', 'system role', 'persona'),
    'Context': ('context', 'background', 'situation', 'overview', 'scenario', 'premise'),
    'Task': ('task', 'goal', 'objective', 'mission', 'assignment', 'purpose'),
    'Instructions': ('instructions', 'guidelines', 'directions', 'guidance', 'requirements'),
    'Steps': ('steps', 'process', 'workflow', 'procedure', 'sequence'),
    'Constraints': ('constraints', 'rules', 'limitations', 'restrictions', 'boundaries'),
    'Output Format': ('output', 'output format', 'response format', 'format', 'deliverables',
                      'expected output'),
    'Examples': ('example', 'examples', 'few-shot', 'sample', 'samples'),
    'Tone & Style': ('tone', 'style', 'voice', 'writing style'),
    'Audience': ('audience', 'target audience'),
    'Input': ('input', 'input data', 'source data'),
    'Definitions': ('definitions', 'glossary', 'terminology'),
    'Notes': ('notes', 'additional notes', 'remarks'),
    'Criteria': ('criteria', 'evaluation criteria', 'scoring'),
    'Introduction': ('introduction', 'intro'),
    'Conclusion': ('conclusion', 'summary', 'wrap up'),
    'Prerequisites': ('prerequisites', 'requirements', 'setup'),
    'References': ('references', 'sources', 'bibliography'),
}


class KeywordHeaders(BaseStage):
    """
    Maps section keywords on their own line to canonical headings.

    Example:
        "background:"  -> "## Context"
        "Examples"     -> "## Examples"
    """

    name = "Keyword Headers"
    label = "Headers"

    PATTERNS: tuple[tuple[str, re.Pattern], ...] = tuple(
        (
            heading,
            re.compile(
                r'^\s*(?:#{1,3}\s*)?(' + '|'.join(re.escape(k) for k in keywords) + r')\s*:?\s*$',
                re.MULTILINE | re.IGNORECASE,
            ),
        )
        for heading, keywords in KEYWORD_HEADERS.items()
    )

    def process(self, text: str) -> StageResult:
        changes = 0
        result = text

        for heading, pattern in self.PATTERNS:
            canonical = f"## {heading}"

            def replace_keyword(match, canonical=canonical):
                nonlocal changes
                if match.group(0).strip() == canonical:
                    return match.group(0)
                changes += 1
                return f"\n{canonical}\n"

            result = pattern.sub(replace_keyword, result)

        return StageResult(text=result, changes_made=changes)


# Colon-terminated labels that introduce content rather than a section
COLON_HEADER_SKIP = frozenset({
    'Note', 'Warning', 'Tip', 'Important', 'Caution',
    'Example', 'Answer', 'Question', 'Response', 'Reply',
    'Reason', 'Result', 'Problem', 'Solution', 'Error',
    'Input', 'Output', 'Return', 'Default', 'Value',
})


def is_sentence_fragment_label(label: str) -> bool:
    """Two "and"s suggest a clause ("Cats and dogs and birds:"), not a heading."""
    return re.search(r'\band\b.*\band\b', label) is not None


class ColonLineHeaders(BaseStage):
    """Promotes "Word Word:" lines standing alone to headings."""

    name = "Colon Line Headers"
    label = "Headers"

    PATTERN = re.compile(r'^(?!#)([A-Z][A-Za-z &\-()]{2,40}):\s*$', re.MULTILINE)

    def process(self, text: str) -> StageResult:
        changes = 0

        def replace_label(match):
            nonlocal changes
            label = match.group(1).strip()
            if label in COLON_HEADER_SKIP or is_sentence_fragment_label(label):
                return match.group(0)
            changes += 1
            return f"\n## {to_title_case(label)}\n"

        result = self.PATTERN.sub(replace_label, text)
        return StageResult(text=result, changes_made=changes)


_SHORT_LINE_SKIP = re.compile(
    r'^(Dear|Hey|Hi|Hello|Thanks|Thank you|Sincerely|Regards|Best|Cheers|Yours|Love|Signed|From|'
    r'Sent|I |We |My |Our |You |Your |It |The |A |An |This |That )',
    re.IGNORECASE,
)
_COMMON_VERB = re.compile(
    r'\b(is|are|was|were|will|would|can|could|should|have|has|had|do|does|want|need|make|let|'
    r'get|try|go)\b',
    re.IGNORECASE,
)


def is_salutation_or_pronoun_lead(line: str) -> bool:
    """Greetings, sign-offs, and pronoun/article-led lines are not titles."""
    return bool(_SHORT_LINE_SKIP.match(line))


def has_common_verb(line: str) -> bool:
    """A common verb usually means a sentence fragment, not a section title."""
    return bool(_COMMON_VERB.search(line))


def looks_like_short_title(line: str) -> bool:
    """2-5 words, capitalized, no trailing punctuation, no verb, no greeting."""
    words = word_count(line)
    return (
        SHORT_HEADER_MIN_WORDS <= words <= SHORT_HEADER_MAX_WORDS
        and re.match(r'[A-Z]', line) is not None
        and not re.search(r'[.!?;,]$', line)
        and not is_salutation_or_pronoun_lead(line)
        and not has_common_verb(line)
    )


def is_long_paragraph_line(line: str) -> bool:
    return (
        word_count(line) >= SHORT_HEADER_NEXT_PARAGRAPH_WORDS
        and re.match(r'[A-Z]', line) is not None
        and not is_non_prose_line(line)
    )


class ShortLineHeaders(BaseStage):
    """
    Promotes a short standalone title line that precedes a long paragraph.

    Example input:
        Project Background
        The migration started in March after the old cluster ran out of ...

    Example output:
        ## Project Background
        The migration started in March after the old cluster ran out of ...
    """

    name = "Short Line Headers"
    label = "Headers"

    def process(self, text: str) -> StageResult:
        lines = text.split('\n')
        out = []
        changes = 0

        for i, line in enumerate(lines):
            t = line.strip()
            if is_non_prose_line(t) or t.startswith('**') or not looks_like_short_title(t):
                out.append(line)
                continue

            next_idx = i + 1
            while next_idx < len(lines) and not lines[next_idx].strip():
                next_idx += 1

            if next_idx < len(lines) and is_long_paragraph_line(lines[next_idx].strip()):
                changes += 1
                out.append(f"\n## {to_title_case(t)}\n")
                continue

            out.append(line)

        return StageResult(text='\n'.join(out), changes_made=changes)


def expand_tabs(text: str) -> str:
    """Tabs become two spaces. Runs on prose only, after the table detector has seen them."""
    return text.replace('\t', '  ')
