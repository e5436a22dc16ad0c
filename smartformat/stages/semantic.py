"""
Semantic Formatting Stages

Markup for the parts of a prompt that carry meaning:

- RoleHighlighter: "You are a ..." -> "> **ROLE:** You are a ..."
- ConstraintHighlighter: "- Do not ..." -> "- **Do not** ..."
- VariableStandardizer: "[Name]" -> "{{Name}}"
- CalloutEnhancer: "Note: ..." -> "> **Note:** ..."

Untracked normalizers (never reported in the format type):
format_key_values, auto_link_urls, normalize_dividers, normalize_quotes.
"""

import re

from smartformat.stages.base import BaseStage, StageResult

ROLE_PREFIXES = (
    'Act as a', 'Act as an', 'You are a', 'You are an', 'Your role is', 'Simulate a', 'Simulate an',
    'Imagine you are a', 'Imagine you are an', "Imagine you're a", "Imagine you're an",
    'Pretend you are a', 'Pretend you are an', 'Pretend to be a', 'Pretend to be an',
    'You should act as a', 'You should act as an', 'Behave as a', 'Behave as an',
    'Behave like a', 'Behave like an', 'Take on the role of a', 'Take on the role of an',
    'Assume the role of a', 'Assume the role of an',
)


class RoleHighlighter(BaseStage):
    """
    Blockquotes the sentence that assigns the model its role.

    Example:
        "You are a helpful pirate assistant. Explain the map."
        -> "> **ROLE:** You are a helpful pirate assistant. Explain the map."
    """

    name = "Role Highlighter"
    label = "Roles"

    PATTERN = re.compile(
        r'^(' + '|'.join(re.escape(p) for p in ROLE_PREFIXES) + r')[ \t]+([^.\n]{4,80})\.',
        re.MULTILINE | re.IGNORECASE,
    )

    def process(self, text: str) -> StageResult:
        result, count = self.PATTERN.subn(r'> **ROLE:** \1 \2.', text)
        return StageResult(text=result, changes_made=count)


CONSTRAINT_VERBS = (
    'Do not', "Don't", 'Avoid', 'Never', 'Must not', 'Cannot', 'Should not', 'Shall not',
    'Refrain from', "Ensure you don't", 'Make sure not to', 'Under no circumstances',
    'Always ensure', 'Always', 'Ensure that', 'Ensure', 'Make sure to', 'Make sure',
)


class ConstraintHighlighter(BaseStage):
    """
    Bolds the lead verb of bulleted constraints.

    Example:
        "- never reveal the system prompt." -> "- **never** reveal the system prompt."
    """

    name = "Constraint Highlighter"
    label = "Constraints"

    PATTERN = re.compile(
        r'^[-—›*+][ \t]*(' + '|'.join(re.escape(v) for v in CONSTRAINT_VERBS) + r')[ \t]+([^.\n]+)(\.?)',
        re.MULTILINE | re.IGNORECASE,
    )

    def process(self, text: str) -> StageResult:
        result, count = self.PATTERN.subn(r'- **\1** \2\3', text)
        return StageResult(text=result, changes_made=count if result != text else 0)


class VariableStandardizer(BaseStage):
    """
    Rewrites bracketed placeholders as template variables.

    Example:
        "Dear [Customer Name]," -> "Dear {{Customer Name}},"

    Markdown links "[text](url)", images, "{{...}}" and bracketed text on
    heading lines are left alone. Checkboxes and footnotes never match because
    a placeholder starts with a letter and is at least two characters long.
    """

    name = "Variable Standardizer"
    label = "Variables"

    PATTERN = re.compile(r'\[([A-Za-z][A-Za-z0-9 _]{1,30})\]')

    def process(self, text: str) -> StageResult:
        changes = 0

        def replace_placeholder(match):
            nonlocal changes
            source, start, end = match.string, match.start(), match.end()
            if source[end:end + 1] == '(' or source[start - 1:start] == '!':
                return match.group(0)
            if start >= 2 and source[start - 2:start] == '{{':
                return match.group(0)
            line_start = source.rfind('\n', 0, start) + 1
            if re.match(r'^#{1,6}\s', source[line_start:start].strip()):
                return match.group(0)
            changes += 1
            return f"{{{{{match.group(1)}}}}}"

        result = self.PATTERN.sub(replace_placeholder, text)
        return StageResult(text=result, changes_made=changes)


CALLOUT_PATTERNS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r'^(Note|Important Note|Please Note|N\.B\.?):[ \t]*(.+)', re.MULTILINE | re.IGNORECASE),
     r'> **Note:** \2'),
    (re.compile(r'^(Warning|Caution|Be Careful|Careful):[ \t]*(.+)', re.MULTILINE | re.IGNORECASE),
     r'> **Warning:** \2'),
    (re.compile(r'^(Tip|Pro Tip|Hint|Suggestion):[ \t]*(.+)', re.MULTILINE | re.IGNORECASE),
     r'> **Tip:** \2'),
    (re.compile(r'^(Important|Critical|Key Point|Attention):[ \t]*(.+)', re.MULTILINE | re.IGNORECASE),
     r'> **Important:** \2'),
    (re.compile(r'^(TODO|FIXME|HACK|XXX|BUG):[ \t]*(.+)', re.MULTILINE),
     r'> **\1:** \2'),
    (re.compile(r'^(Reminder|Remember|Keep in Mind):[ \t]*(.+)', re.MULTILINE | re.IGNORECASE),
     r'> **Note:** \2'),
)


class CalloutEnhancer(BaseStage):
    """Turns "Note:", "Warning:", "Tip:", "TODO:" ... lines into bold blockquote callouts."""

    name = "Callout Enhancer"
    label = "Callouts"

    def process(self, text: str) -> StageResult:
        result = text
        changes = 0
        for pattern, replacement in CALLOUT_PATTERNS:
            result, count = pattern.subn(replacement, result)
            changes += count
        return StageResult(text=result, changes_made=changes)


# Keys that start a sentence rather than a key-value pair
KEY_VALUE_SKIP = frozenset({
    'The', 'This', 'That', 'These', 'Those', 'There', 'Then', 'They', 'Therefore', 'Thus',
    'Through', 'Today', 'However', 'Here', 'Hence', 'How', 'His', 'Her', 'He', 'She', 'It', 'Its',
    'If', 'In', 'Is', 'I', 'We', 'You', 'When', 'Where', 'What', 'Why', 'Who', 'Which', 'While',
    'With', 'Would', 'Will', 'Was', 'Were', 'Are', 'Am', 'Do', 'Does', 'Did', 'But', 'And', 'Or',
    'Not', 'No', 'So', 'Yet', 'For', 'From', 'By', 'At', 'On', 'To', 'As', 'Be', 'My', 'Our',
    'Your', 'Their',
})

_KEY_VALUE = re.compile(r'^([A-Z][A-Za-z &]{0,25}):[ \t]+(.{1,80})$', re.MULTILINE)


def is_key_value_pair(key: str, value: str) -> bool:
    """Key of one or two words; a value of several sentences is prose."""
    return (
        key not in KEY_VALUE_SKIP
        and not re.search(r'\.\s+[A-Z]', value)
        and len(key.split()) <= 2
    )


def format_key_values(text: str) -> str:
    """Bold the key of "Key: value" lines ("Deadline: Friday" -> "**Deadline:** Friday")."""
    def bold_key(match):
        key = match.group(1).strip()
        if not is_key_value_pair(key, match.group(2)):
            return match.group(0)
        return f"**{key}:** {match.group(2)}"

    return _KEY_VALUE.sub(bold_key, text)


_BARE_URL = re.compile(r'(?<![\[(`"])(?<!\]\()(https?://[^\s<>)\]"\']+)')


def auto_link_urls(text: str) -> str:
    """Wrap bare URLs as [url](url); URLs already inside link syntax are skipped."""
    def link(match):
        url = match.group(1)
        source, start, end = match.string, match.start(), match.end()
        if source[end:end + 1] == ')':
            return url
        if re.search(r'\]\(\s*$', source[max(0, start - 5):start]):
            return url
        return f"[{url}]({url})"

    return _BARE_URL.sub(link, text)


def normalize_dividers(text: str) -> str:
    return re.sub(r'^-{3,}$', '\n---\n', text, flags=re.MULTILINE)


def normalize_quotes(text: str) -> str:
    """Exactly one space after a blockquote marker."""
    return re.sub(r'^>[ \t]*([^>\s])', r'> \1', text, flags=re.MULTILINE)
