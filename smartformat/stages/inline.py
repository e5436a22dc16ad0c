"""
Inline Formatting Stages

Line-scoped Markdown emphasis. Header, blockquote and fence lines are never
touched.

- InlineCodeWrapper: file paths, $ENV_VARS, snake_case, camelCase,
  PascalCase and --flags get backticks
- TechAcronymWrapper: standalone API / JSON / SQL ... get backticks
- AllCapsEmphasis: "DO NOT SHARE" -> "**Do Not Share**"
- DefinitionTermBolder: "Term - definition" -> "**Term** — definition"
- QuotedTermEmphasis: "Technical Term" in quotes -> **Technical Term**

Every pattern refuses text that is already wrapped, so a second pass finds
nothing to do.
"""

import re

from smartformat.stages.base import BaseStage, StageResult
from smartformat.utils.text_utils import to_title_case, word_count

# Token must end before whitespace, closing punctuation or end of line
_TOKEN_END = r'(?=[\s.,;:!?)]|$)'

_HEADER_LINE = re.compile(r'^\s*#{1,6}\s')


def is_protected_inline_line(line: str) -> bool:
    """Header, blockquote or code-fence line."""
    trimmed = line.strip()
    return bool(_HEADER_LINE.match(line) or re.match(r'^>\s', trimmed) or trimmed.startswith('```'))


def is_list_or_quote_prefix(prefix: str) -> bool:
    return bool(re.match(r'^[-*+>]', prefix) or re.match(r'^\d+[.)]', prefix))


# snake_case look-alikes that are really abbreviations
_NOT_SNAKE_CASE = frozenset({'e_g', 'i_e', 'a_lot'})

# Capitalized words that PascalCase matching must never wrap
PASCAL_CASE_SKIP = frozenset({
    'The', 'This', 'That', 'There', 'They', 'Their', 'These', 'Those', 'After', 'Before', 'About',
    'Above', 'Below', 'Between', 'During', 'Without', 'Within', 'Through', 'Against', 'Around',
    'Beyond', 'Until',
})


class InlineCodeWrapper(BaseStage):
    """
    Wraps code-like tokens in prose with backticks.

    Example:
        "set max_retries in ./config/app.yaml via --force"
        -> "set `max_retries` in `./config/app.yaml` via `--force`"
    """

    name = "Inline Code Wrapper"
    label = "Code"

    FILE_PATH = re.compile(r'(?<![`\[(\w./:~])((?:\.?/|~/)[a-zA-Z0-9_\-./]+\.\w{1,6})(?![\w`)/])')
    ENV_VAR = re.compile(r'(?<![`\w])(\$\{?[A-Z][A-Z0-9_]{2,}\}?)(?![\w`}])')
    SNAKE_CASE = re.compile(r'(?<!\S)([a-z][a-z0-9]*(?:_[a-z0-9]+)+)' + _TOKEN_END)
    CAMEL_CASE = re.compile(r'(?<!\S)([a-z][a-z0-9]*[A-Z][a-zA-Z0-9]{1,30})' + _TOKEN_END)
    PASCAL_CASE = re.compile(r'(?<!\S)([A-Z][a-z]+(?:[A-Z][a-z]+){1,5})' + _TOKEN_END)
    CLI_FLAG = re.compile(r'(?<!\S)(--[a-z][a-z0-9-]{1,20})' + _TOKEN_END)

    def process(self, text: str) -> StageResult:
        changes = 0

        def wrap(match):
            nonlocal changes
            changes += 1
            return f"`{match.group(1)}`"

        def wrap_identifier(skip):
            def replace(match):
                if match.group(1) in skip:
                    return match.group(0)
                return wrap(match)
            return replace

        out = []
        for line in text.split('\n'):
            if is_protected_inline_line(line):
                out.append(line)
                continue
            line = self.FILE_PATH.sub(wrap, line)
            line = self.ENV_VAR.sub(wrap, line)
            line = self.SNAKE_CASE.sub(wrap_identifier(_NOT_SNAKE_CASE), line)
            line = self.CAMEL_CASE.sub(wrap, line)
            line = self.PASCAL_CASE.sub(wrap_identifier(PASCAL_CASE_SKIP), line)
            line = self.CLI_FLAG.sub(wrap, line)
            out.append(line)

        return StageResult(text='\n'.join(out), changes_made=changes)


TECH_ACRONYMS = frozenset({
    'API', 'APIs', 'REST', 'JSON', 'HTML', 'CSS', 'HTTP', 'HTTPS', 'SQL',
    'URL', 'URLs', 'URI', 'URIs', 'CLI', 'SDK', 'IDE', 'GUI', 'XML', 'CSV',
    'YAML', 'TOML', 'JWT', 'SSH', 'SSL', 'TLS', 'DNS', 'TCP', 'UDP',
    'AWS', 'GCP', 'CDN', 'NPM', 'CORS', 'CRUD', 'DOM', 'AJAX', 'WASM',
    'GPU', 'CPU', 'RAM', 'SSD', 'HDD', 'EOF',
    'UUID', 'GUID', 'ENUM', 'ORM', 'MVC', 'MVVM',
})


class TechAcronymWrapper(BaseStage):
    """Wraps standalone technical acronyms ("call the API") in backticks."""

    name = "Tech Acronym Wrapper"
    label = "Code"

    PATTERN = re.compile(r'(?<!\S)([A-Z]{2,6}s?)' + _TOKEN_END)

    def process(self, text: str) -> StageResult:
        changes = 0

        def replace_acronym(match):
            nonlocal changes
            if match.group(1) not in TECH_ACRONYMS:
                return match.group(0)
            changes += 1
            return f"`{match.group(1)}`"

        out = []
        for line in text.split('\n'):
            if is_protected_inline_line(line):
                out.append(line)
                continue
            out.append(self.PATTERN.sub(replace_acronym, line))

        return StageResult(text='\n'.join(out), changes_made=changes)


def is_emphasis_phrase(phrase: str) -> bool:
    """At least two words; a lone short token is an acronym, not emphasis."""
    if len(phrase) <= 8 and ' ' not in phrase:
        return False
    return word_count(phrase) >= 2


class AllCapsEmphasis(BaseStage):
    """
    Bolds multi-word ALL-CAPS phrases in prose.

    Example:
        "Please DO NOT SHARE this file." -> "Please **Do Not Share** this file."

    List items, blockquotes and headings keep their capitals.
    """

    name = "All-Caps Emphasis"
    label = "Emphasis"

    PATTERN = re.compile(r'(?<!\S)([A-Z]{2}[A-Z ]{1,25}[A-Z])' + _TOKEN_END)

    def process(self, text: str) -> StageResult:
        changes = 0
        out = []

        for line in text.split('\n'):
            def replace_phrase(match, line=line):
                nonlocal changes
                phrase = match.group(1).strip()
                prefix = line[:match.start()].strip()
                if prefix.startswith('#') or not is_emphasis_phrase(phrase):
                    return match.group(0)
                if is_list_or_quote_prefix(prefix):
                    return match.group(0)
                changes += 1
                return f"**{to_title_case(phrase)}**"

            out.append(self.PATTERN.sub(replace_phrase, line))

        return StageResult(text='\n'.join(out), changes_made=changes)


class DefinitionTermBolder(BaseStage):
    """
    Bolds the term of a "Term - definition" line.

    Example:
        "Latency - time between request and response"
        -> "**Latency** — time between request and response"
    """

    name = "Definition Term Bolder"
    label = "Emphasis"

    PATTERN = re.compile(r'^([A-Z][A-Za-z ]{1,30})[ \t]+[-–—][ \t]+(.{10,})$', re.MULTILINE)

    def process(self, text: str) -> StageResult:
        changes = 0

        def replace_term(match):
            nonlocal changes
            term = match.group(1).strip()
            if word_count(term) > 3:
                return match.group(0)
            changes += 1
            return f"**{term}** — {match.group(2)}"

        result = self.PATTERN.sub(replace_term, text)
        return StageResult(text=result, changes_made=changes)


_CONVERSATIONAL_QUOTE = re.compile(
    r'^(yes|no|yeah|nah|ok|okay|sure|thanks|hello|hi|hey|please|sorry|right|maybe|well|hmm|oh|'
    r'wow|great|fine|good|nice|cool|true|false)$',
    re.IGNORECASE,
)


def is_conversational_quote(inner: str) -> bool:
    return bool(_CONVERSATIONAL_QUOTE.match(inner))


def looks_technical(inner: str) -> bool:
    """Capitalized, dotted/underscored, or camelCased."""
    return bool(re.match(r'^[A-Z]', inner) or re.search(r'[_.]', inner) or re.search(r'[a-z][A-Z]', inner))


def is_emphasizable_quote(inner: str) -> bool:
    """
    Short technical-looking quoted span.

    Speech, full sentences, URLs and conversational one-worders keep their
    quotation marks.
    """
    trimmed = inner.strip()
    if re.search(r'\.\s', inner) or re.match(r'^https?:', inner):
        return False
    if word_count(trimmed) > 4:
        return False
    if re.match(r'^[a-z]', trimmed) and not looks_technical(trimmed):
        return False
    return not is_conversational_quote(trimmed)


class QuotedTermEmphasis(BaseStage):
    """Replaces quotes around short technical terms with bold."""

    name = "Quoted Term Emphasis"
    label = "Emphasis"

    PATTERN = re.compile(r'"([^"\n]{2,40})"')

    def process(self, text: str) -> StageResult:
        changes = 0
        out = []

        for line in text.split('\n'):
            if is_protected_inline_line(line):
                out.append(line)
                continue

            def replace_quote(match, line=line):
                nonlocal changes
                inner = match.group(1)
                if line[max(0, match.start() - 1):match.start()] == '`':
                    return match.group(0)
                if not is_emphasizable_quote(inner):
                    return match.group(0)
                changes += 1
                return f"**{inner}**"

            out.append(self.PATTERN.sub(replace_quote, line))

        return StageResult(text='\n'.join(out), changes_made=changes)
