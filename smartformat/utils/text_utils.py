"""
Text Utility Functions

Common text helpers and named guard predicates shared by the stages.

Every stage that needs to know "is this line prose?" asks the same
predicates, so the answer stays consistent across the pipeline.
"""

import re

# Words kept lowercase in title case unless they start the heading
MINOR_WORDS = frozenset({
    'a', 'an', 'the', 'and', 'but', 'or', 'for', 'nor', 'at', 'by', 'in', 'of', 'on',
    'to', 'up', 'as', 'is', 'it', 'so', 'yet', 'via', 'vs', 'per', 'with', 'into', 'onto', 'from',
})

# Lines starting with these are markup, not prose
_MARKUP_START = re.compile(r'^[#>*\-+|`]')
_NUMBERED_ITEM = re.compile(r'^\d+[.)]\s')
_HEADER_LINE = re.compile(r'^#{1,6}\s')
_SENTENCE = re.compile(r'[^.!?]+[.!?]+\s*')
_GREETING = re.compile(
    r'^(hey|hi|hello|dear|ok|okay|so|well|um|uh|please|thanks|yo|sup|sure|right|'
    r'anyway|basically|actually|just|like)\b',
    re.IGNORECASE,
)


def to_title_case(text: str) -> str:
    """
    Title-case a heading, keeping minor words lowercase.

    Whitespace runs collapse to single spaces. The first word is always
    capitalized; every other word is lowercased after its first letter.

    Example:
        >>> to_title_case("the ROLE of the assistant")
        'The Role of the Assistant'
    """
    words = text.split()
    out = []
    for i, word in enumerate(words):
        lower = word.lower()
        if i == 0 or lower not in MINOR_WORDS:
            out.append(word[:1].upper() + word[1:].lower())
        else:
            out.append(lower)
    return ' '.join(out)


def capitalize_first(text: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    return text[:1].upper() + text[1:]


def word_count(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def split_sentences(text: str) -> list[str]:
    """
    Split text into sentences ending in . ! or ?.

    Each sentence keeps the whitespace that follows it, so ''.join() gives
    back the paragraph up to its last terminal punctuation mark. Text after
    that mark is dropped.
    """
    return _SENTENCE.findall(text)


def split_blocks(prose: str) -> list[str]:
    """Split prose into blank-line separated blocks (blank lines dropped)."""
    blocks = []
    buf = []
    for line in prose.split('\n'):
        if line.strip() == '':
            if buf:
                blocks.append('\n'.join(buf))
                buf = []
        else:
            buf.append(line)
    if buf:
        blocks.append('\n'.join(buf))
    return blocks


def has_header(block: str) -> bool:
    """True when the block starts with a Markdown heading."""
    return bool(_HEADER_LINE.match(block.strip()))


def is_non_prose_line(line: str) -> bool:
    """
    Blank, heading, list, blockquote, table, code-fence or numbered line.

    Stages that rewrite prose skip these lines entirely.
    """
    stripped = line.strip()
    return (
        not stripped
        or bool(_MARKUP_START.match(stripped))
        or bool(_NUMBERED_ITEM.match(stripped))
    )


def is_greeting(text: str) -> bool:
    """Conversational opener ("Hey", "So", "Basically") that is never a title."""
    return bool(_GREETING.match(text))
