"""
Spacing Post-Processor

Normalizes blank lines after the stage pipeline has reassembled a document:

- one blank line before and after headings
- one blank line before a bullet list, numbered list or blockquote
- no runs of more than one blank line
- no immediately repeated identical headings

Only prose segments are touched; fenced code keeps its exact bytes.
"""

import re

from smartformat.segments import Segment, reassemble, segment_document

_EXTRA_BLANK_LINES = re.compile(r'\n{3,}')
_LINE_BEFORE_HEADING = re.compile(r'([^\n])\n(#{1,6}\s)')
_LINE_AFTER_HEADING = re.compile(r'^(#{1,6}\s.+)\n([^\n#>*\-])', re.MULTILINE)
_HEADING = re.compile(r'^#{1,6}\s+')

# (starts a block, continues the block)
_BLOCK_STARTS = (
    (re.compile(r'^- '), re.compile(r'^-\s')),
    (re.compile(r'^\d+\.\s'), re.compile(r'^\d+\.\s')),
    (re.compile(r'^> '), re.compile(r'^>\s')),
)


def deduplicate_consecutive_headers(text: str) -> str:
    """
    Drop a heading identical to the previous heading when only blank lines separate them.

    Example:
        "## Task\\n\\n## Task\\n\\nDo it." -> "## Task\\n\\nDo it."
    """
    out = []
    last_header = ''
    for line in text.split('\n'):
        trimmed = line.strip()
        if _HEADING.match(trimmed):
            if trimmed == last_header:
                continue
            last_header = trimmed
        elif trimmed:
            last_header = ''
        out.append(line)
    return '\n'.join(out)


def _separate_blocks(text: str) -> str:
    """Insert a blank line before the first item of each list or blockquote."""
    lines = text.split('\n')
    out: list[str] = []
    for line in lines:
        prev = out[-1] if out else ''
        if prev:
            for starts, continues in _BLOCK_STARTS:
                if starts.match(line) and not continues.match(prev.strip()):
                    out.append('')
                    break
        out.append(line)
    return '\n'.join(out)


def space_prose(text: str) -> str:
    """Apply the blank-line rules to one prose segment."""
    out = _EXTRA_BLANK_LINES.sub('\n\n', text)
    out = _LINE_BEFORE_HEADING.sub(r'\1\n\n\2', out)
    out = _LINE_AFTER_HEADING.sub(r'\1\n\n\2', out)
    out = _separate_blocks(out)
    out = deduplicate_consecutive_headers(out)
    return _EXTRA_BLANK_LINES.sub('\n\n', out)


def _trim_edges(content: str, at_start: bool, at_end: bool) -> str:
    """
    Trim a prose segment's edges.

    Document edges lose all whitespace; edges next to a code fence keep at
    most one blank line.
    """
    if at_start:
        content = content.lstrip()
    elif content.startswith('\n'):
        content = '\n' + content.lstrip('\n')
    if at_end:
        content = content.rstrip()
    elif content.endswith('\n'):
        content = content.rstrip('\n') + '\n'
    if not content.strip():
        return ''
    return content


def post_process_spacing(text: str) -> str:
    """
    Normalize spacing in the prose of a reassembled document.

    Args:
        text: Output of the stage pipeline

    Returns:
        Document with consistent blank lines; code segments unchanged
    """
    segments = segment_document(text)
    last = len(segments) - 1
    out: list[Segment] = []
    for i, segment in enumerate(segments):
        if not segment.is_prose:
            out.append(segment)
            continue
        spaced = space_prose(segment.content)
        out.append(Segment(segment.kind, _trim_edges(spaced, i == 0, i == last)))

    # An emptied leading/trailing prose segment would leave a stray newline
    while out and out[0].is_prose and not out[0].content:
        out.pop(0)
    while out and out[-1].is_prose and not out[-1].content:
        out.pop()
    return reassemble(out)
