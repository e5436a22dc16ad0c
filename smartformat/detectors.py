"""
Early-Exit Format Detectors

Cheap whole-document classifiers that recognize input which is already a
known, non-prose format. When one matches, its result is final and the stage
pipeline never runs.

Detectors run in a fixed order:
1. JSON        - checked first so that {...} objects are not taken for source code
2. YAML front matter
3. Source code - fenced with an inferred language tag
4. Delimited table (tab or pipe separated)

Each detector returns None or a DetectionResult; none of them raise.
"""

import json
import math
import re
from dataclasses import dataclass
from decimal import Decimal

from smartformat.config import CODE_LINE_RATIO, LANGUAGE_MIN_INDICATORS, TABLE_LINE_RATIO
from smartformat.logging_config import debug_log


@dataclass(frozen=True)
class DetectionResult:
    """
    Final output of an early-exit detector.

    Attributes:
        result: The formatted document
        label: Format type reported to the caller (e.g. "JSON Prettify")
    """
    result: str
    label: str


# Indicator patterns per language; the best language needs LANGUAGE_MIN_INDICATORS hits
LANGUAGE_INDICATORS: dict[str, tuple[re.Pattern, ...]] = {
    'python': (
        re.compile(r'\bdef\s+\w+\('), re.compile(r'\bimport\s+\w+'),
        re.compile(r'\bclass\s+\w+:'), re.compile(r'\bprint\('), re.compile(r'\bself\.'),
    ),
    'javascript': (
        re.compile(r'\bconst\s+\w+\s*='), re.compile(r'\blet\s+\w+'),
        re.compile(r'\bfunction\s+\w+'), re.compile(r'=>\s*\{'), re.compile(r'\bconsole\.log'),
    ),
    'typescript': (
        re.compile(r'\binterface\s+\w+'), re.compile(r':\s*(string|number|boolean|any)\b'),
        re.compile(r'\btype\s+\w+\s*='),
    ),
    'bash': (
        re.compile(r'^#!', re.MULTILINE), re.compile(r'\becho\s+'), re.compile(r'\bif\s+\['),
        re.compile(r'\bfi\b'), re.compile(r'\$\{?\w+\}?'),
    ),
    'json': (
        re.compile(r'^\s*[{\[]', re.MULTILINE), re.compile(r'"\w+":\s'),
        re.compile(r'^\s*[}\]]', re.MULTILINE),
    ),
    'html': (
        re.compile(r'<\w+[^>]*>'), re.compile(r'</\w+>'), re.compile(r'<!DOCTYPE', re.IGNORECASE),
    ),
    'css': (
        re.compile(r'\{[^}]*:[^}]*;[^}]*\}'), re.compile(r'@media\s'), re.compile(r'\.[\w-]+\s*\{'),
    ),
    'sql': (
        re.compile(r'\bSELECT\b.*\bFROM\b', re.IGNORECASE),
        re.compile(r'\bINSERT\s+INTO\b', re.IGNORECASE),
        re.compile(r'\bCREATE\s+TABLE\b', re.IGNORECASE),
    ),
    'rust': (re.compile(r'\bfn\s+\w+'), re.compile(r'\blet\s+mut\b'), re.compile(r'\bimpl\s+')),
    'go': (re.compile(r'\bfunc\s+'), re.compile(r'\bpackage\s+\w+'), re.compile(r'\bfmt\.')),
    'yaml': (re.compile(r'^\w[\w\s]*:\s', re.MULTILINE), re.compile(r'^\s*-\s+\w', re.MULTILINE)),
}

CODE_KEYWORDS = (
    'import ', 'export ', 'function ', 'const ', 'let ', 'var ', 'class ', 'interface ',
    'return ', 'console.', '=>', 'def ', 'fn ', 'func ', 'package ',
)

_YAML_KEY_VALUE = re.compile(r'^\s*\w[\w\s]*:\s*.+')
_TABLE_SEPARATOR_ROW = re.compile(r'^\|?\s*[-:]+([\s|]*[-:]+)+\s*\|?\s*$')


def detect_language(text: str) -> str:
    """
    Guess the language of a code snippet for the fence info string.

    Returns:
        Language name, or '' when no language reaches LANGUAGE_MIN_INDICATORS hits.
    """
    best, best_score = '', 0
    for lang, patterns in LANGUAGE_INDICATORS.items():
        score = sum(1 for p in patterns if p.search(text))
        if score > best_score:
            best_score, best = score, lang
    return best if best_score >= LANGUAGE_MIN_INDICATORS else ''


# JSON.stringify(obj, null, 2) output
JSON_INDENT = '  '
JS_MAX_SAFE_INTEGER = 2 ** 53 - 1
JS_MAX_ARRAY_INDEX = 2 ** 32 - 1
_ARRAY_INDEX_KEY = re.compile(r'0|[1-9][0-9]*')


def _reject_constant(name: str):
    # JSON.parse rejects NaN/Infinity; so do we
    raise ValueError(f"non-standard JSON constant {name}")


def _order_object_keys(pairs: list[tuple[str, object]]) -> dict:
    """Build an object with array-index keys first, ascending, as JS engines order them."""
    obj = dict(pairs)
    index_keys = sorted(
        (k for k in obj if _ARRAY_INDEX_KEY.fullmatch(k) and int(k) < JS_MAX_ARRAY_INDEX),
        key=int,
    )
    if not index_keys:
        return obj
    ordered = {k: obj[k] for k in index_keys}
    ordered.update((k, v) for k, v in obj.items() if k not in ordered)
    return ordered


def js_number(value: int | float) -> str:
    """
    Render a number the way JavaScript's Number.prototype.toString does.

    Integers outside the safe range and all floats go through the shortest
    round-trip digits, so 1.0 -> "1", 1e21 -> "1e+21", 1.5e-7 -> "1.5e-7".
    Non-finite values become "null", as in JSON.stringify.
    """
    if isinstance(value, int) and abs(value) <= JS_MAX_SAFE_INTEGER:
        return str(value)
    try:
        value = float(value)
    except OverflowError:
        return 'null'
    if not math.isfinite(value):
        return 'null'
    if value == 0:
        return '0'

    sign = '-' if value < 0 else ''
    parts = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = ''.join(str(d) for d in parts.digits)
    k = len(digits)
    n = parts.exponent + k

    if k <= n <= 21:
        body = digits + '0' * (n - k)
    elif 0 < n <= 21:
        body = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        body = f"0.{'0' * -n}{digits}"
    else:
        exponent = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"
    return sign + body


def js_stringify(value, level: int = 0) -> str:
    """Serialize parsed JSON like JSON.stringify(value, null, 2)."""
    if value is None:
        return 'null'
    if value is True:
        return 'true'
    if value is False:
        return 'false'
    if isinstance(value, (int, float)):
        return js_number(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)

    pad = JSON_INDENT * (level + 1)
    if isinstance(value, dict):
        if not value:
            return '{}'
        items = [
            f"{pad}{json.dumps(k, ensure_ascii=False)}: {js_stringify(v, level + 1)}"
            for k, v in value.items()
        ]
        return '{\n' + ',\n'.join(items) + '\n' + JSON_INDENT * level + '}'
    if not value:
        return '[]'
    items = [f"{pad}{js_stringify(v, level + 1)}" for v in value]
    return '[\n' + ',\n'.join(items) + '\n' + JSON_INDENT * level + ']'


def try_format_json(text: str) -> DetectionResult | None:
    """Prettify a document that parses as a JSON object or array."""
    t = text.strip()
    if not ((t.startswith('{') and t.endswith('}')) or (t.startswith('[') and t.endswith(']'))):
        return None
    try:
        parsed = json.loads(t, parse_constant=_reject_constant, object_pairs_hook=_order_object_keys)
    except (ValueError, RecursionError):
        debug_log("[DETECT] JSON candidate failed to parse, falling through")
        return None
    if not isinstance(parsed, (dict, list)):
        return None
    try:
        pretty = js_stringify(parsed)
    except RecursionError:
        debug_log("[DETECT] JSON candidate nested too deeply to print, falling through")
        return None
    return DetectionResult(f"```json\n{pretty}\n```", 'JSON Prettify')


def try_preserve_yaml(text: str) -> DetectionResult | None:
    """
    Preserve a leading YAML front matter block.

    The block must be delimited by '---' lines and contain at least one
    'key: value' line. The document after it is returned unformatted.
    """
    t = text.strip()
    if not t.startswith('---'):
        return None
    end = t.find('---', 4)
    if end < 0:
        return None
    front_matter = t[:end + 3]
    body = t[end + 3:].strip()
    inner_lines = front_matter.split('\n')[1:-1]
    if not any(_YAML_KEY_VALUE.match(line.strip()) for line in inner_lines):
        return None
    result = f"{front_matter}\n\n{body}" if body else front_matter
    return DetectionResult(result, 'YAML Front Matter')


def _is_code_like_line(line: str) -> bool:
    t = line.strip()
    return (
        any(k in t for k in CODE_KEYWORDS)
        or bool(re.match(r'^[{}\[\]();]', t))
        or bool(re.search(r'[{}\[\]();,]$', t))
        or bool(re.match(r'^/[/*]', t))
        or t.startswith('*')
    )


def try_detect_code(text: str) -> DetectionResult | None:
    """Fence a document that is mostly source code."""
    if text.strip().startswith('```'):
        return None
    non_empty = [line for line in text.split('\n') if line.strip()]
    if len(non_empty) < 3 or not any(k in text for k in CODE_KEYWORDS):
        return None
    code_lines = sum(1 for line in non_empty if _is_code_like_line(line))
    if code_lines / len(non_empty) <= CODE_LINE_RATIO:
        return None
    lang = detect_language(text)
    debug_log(f"[DETECT] Source code detected ({code_lines}/{len(non_empty)} lines, lang={lang or 'none'})")
    return DetectionResult(f"```{lang}\n{text.strip()}\n```", 'Auto-Code Block')


def build_markdown_table(rows: list[list[str]]) -> str:
    """Render rows as a Markdown table; the first row is the header."""
    header = rows[0]
    lines = [
        '| ' + ' | '.join(header) + ' |',
        '| ' + ' | '.join('---' for _ in header) + ' |',
    ]
    lines.extend('| ' + ' | '.join(row) + ' |' for row in rows[1:])
    return '\n'.join(lines)


def try_detect_table(text: str) -> DetectionResult | None:
    """Convert tab- or pipe-delimited rows into a Markdown table."""
    lines = text.strip().split('\n')
    if len(lines) < 2:
        return None

    tab_lines = [line for line in lines if '\t' in line]
    if len(tab_lines) >= 2 and len(tab_lines) / len(lines) > TABLE_LINE_RATIO:
        rows = [[cell.strip() for cell in line.split('\t')] for line in lines]
        cols = len(rows[0])
        if cols >= 2 and all(abs(len(row) - cols) <= 1 for row in rows):
            return DetectionResult(build_markdown_table(rows), 'Table Auto-Format')

    pipe_lines = [line for line in lines if '|' in line and not line.startswith('#')]
    if len(pipe_lines) >= 2 and len(pipe_lines) / len(lines) > TABLE_LINE_RATIO:
        # Already a Markdown table if a separator row exists
        if not any(_TABLE_SEPARATOR_ROW.match(line) for line in lines):
            rows = [
                [cell.strip() for cell in re.sub(r'\|$', '', re.sub(r'^\|', '', line)).split('|')]
                for line in lines
            ]
            cols = len(rows[0])
            if cols >= 2 and all(abs(len(row) - cols) <= 1 for row in rows):
                return DetectionResult(build_markdown_table(rows), 'Table Auto-Format')

    return None


EARLY_EXIT_DETECTORS = (
    try_format_json,
    try_preserve_yaml,
    try_detect_code,
    try_detect_table,
)


def run_early_exit_detectors(text: str) -> DetectionResult | None:
    """Return the first detector hit, in order, or None."""
    for detector in EARLY_EXIT_DETECTORS:
        hit = detector(text)
        if hit is not None:
            debug_log(f"[DETECT] Early exit via {detector.__name__}: {hit.label}")
            return hit
    return None
