"""
Smart Formatter Entry Point

Turns pasted plain text into clean Markdown:

    custom rules -> whitespace normalization -> early-exit detectors
    -> stage pipeline (pass 1) -> spacing post-process
    -> stage pipeline again (stabilization) -> format type label

The stage pipeline is not guaranteed to be idempotent: one stage can create
text another stage then rewrites (auto-section creates a heading that title
casing later changes). Running the full pipeline again on its own output and
keeping that result brings the output closer to a fixed point, so formatting
an already-formatted document is (almost always) a no-op.

Usage:
    from smartformat import smart_format

    result = smart_format("you are a helpful pirate assistant. explain the map.")
    print(result.formatted)
    print(result.format_type)   # e.g. "Grammar + Roles"
"""

import re
from dataclasses import dataclass, replace

import ftfy

from smartformat.config import (
    FORMAT_TYPE_MAX_LABELS,
    STABILIZATION_MAX_PASSES,
    get_setting,
)
from smartformat.custom_rules import CustomRule, apply_custom_rules
from smartformat.detectors import run_early_exit_detectors
from smartformat.logging_config import Timer, debug_log, error, warning
from smartformat.post_processor import post_process_spacing
from smartformat.segments import map_prose, reassemble, segment_document
from smartformat.stages import PipelineRun, StagePipeline, create_default_pipeline

STANDARD_FORMAT_TYPE = "Standard"
CUSTOM_RULES_LABEL = "Custom Rules"

# Repair encoding and line breaks only; quotes, HTML entities and Unicode
# forms are the user's own.
_FTFY_CONFIG = ftfy.TextFixerConfig(
    unescape_html=False,
    uncurl_quotes=False,
    fix_latin_ligatures=False,
    fix_character_width=False,
    normalization=None,
)

_TRAILING_WHITESPACE = re.compile(r'[ \t]+$', re.MULTILINE)
_EXTRA_BLANK_LINES = re.compile(r'\n{3,}')

# Stages keep no state between calls, so one pipeline serves every caller
_DEFAULT_PIPELINE = create_default_pipeline()


@dataclass(frozen=True)
class FormatResult:
    """
    Output of smart_format.

    Attributes:
        formatted: The Markdown document
        format_type: Human-readable summary of what was done
                     (e.g. "Headers + Lists + Grammar", "JSON Prettify", "Standard")
    """
    formatted: str
    format_type: str


def _tidy_prose(text: str) -> str:
    text = _TRAILING_WHITESPACE.sub('', text)
    return _EXTRA_BLANK_LINES.sub('\n\n', text)


def normalize_whitespace(text: str) -> str:
    """
    Stage 0: repair encoding, unify line endings, tidy prose whitespace.

    Trailing whitespace is stripped and 3+ newlines collapse to one blank
    line, outside fenced code only. Tabs are kept so the table detector can
    still see tab-delimited rows.
    """
    fixed = ftfy.fix_text(text, config=_FTFY_CONFIG)
    fixed = fixed.replace('\r\n', '\n').replace('\r', '\n')
    return reassemble(map_prose(segment_document(fixed), _tidy_prose)).strip()


def build_format_type(transforms: tuple[str, ...] | list[str], max_labels: int | None = None) -> str:
    """
    Summarize the transform log as a label.

    Labels are de-duplicated in first-seen order. Up to max_labels are joined
    with " + "; beyond that the first (max_labels - 1) are shown followed by
    "+N more".

    Example:
        >>> build_format_type(['Headers', 'Lists', 'Headers'])
        'Headers + Lists'
        >>> build_format_type(['Headers', 'Lists', 'Code', 'Grammar'])
        'Headers + Lists +2 more'
        >>> build_format_type([])
        'Standard'
    """
    if max_labels is None:
        max_labels = get_setting('format_type_max_labels', FORMAT_TYPE_MAX_LABELS)
    max_labels = max(2, max_labels)

    unique = list(dict.fromkeys(transforms))
    if not unique:
        return STANDARD_FORMAT_TYPE
    if len(unique) <= max_labels:
        return ' + '.join(unique)
    shown = max_labels - 1
    return f"{' + '.join(unique[:shown])} +{len(unique) - shown} more"


def run_core_pass(text: str, pipeline: StagePipeline | None = None) -> PipelineRun:
    """
    One full pass: all stage groups, then spacing post-processing.

    Returns:
        PipelineRun whose text is already post-processed
    """
    run = (pipeline or _DEFAULT_PIPELINE).run(text)
    return replace(run, text=post_process_spacing(run.text))


def _stabilize(text: str, pipeline: StagePipeline | None, max_passes: int) -> str:
    """
    Re-run the pipeline on its own output until it stops changing.

    With max_passes=2 this is exactly one extra pass whose output is kept
    whenever it differs.
    """
    current = text
    for pass_number in range(2, max_passes + 1):
        with Timer(f"Pipeline pass {pass_number}", auto_log=False) as timer:
            next_text = run_core_pass(current, pipeline).text
        if next_text == current:
            debug_log(f"[FORMATTER] Output stable after pass {pass_number - 1}")
            return current
        debug_log(f"[FORMATTER] Stabilization applied: pass {pass_number} changed the output "
                  f"({timer.duration_ms:.1f} ms)")
        current = next_text

    if max_passes > 2:
        warning(f"[FORMATTER] Output did not converge within {max_passes} passes")
    return current


def _format_normalized(text: str, rules_applied: bool, pipeline: StagePipeline | None) -> FormatResult:
    hit = run_early_exit_detectors(text)
    if hit is not None:
        return FormatResult(formatted=hit.result, format_type=hit.label)

    with Timer("Pipeline pass 1"):
        first = run_core_pass(text, pipeline)

    transforms = ((CUSTOM_RULES_LABEL,) if rules_applied else ()) + first.transforms
    max_passes = get_setting('stabilization_max_passes', STABILIZATION_MAX_PASSES)
    formatted = _stabilize(first.text, pipeline, max_passes)

    return FormatResult(formatted=formatted, format_type=build_format_type(transforms))


def smart_format(
    text: str,
    custom_rules: list[CustomRule] | None = None,
    pipeline: StagePipeline | None = None,
) -> FormatResult:
    """
    Format plain text as Markdown.

    Never raises: an unexpected internal error is logged and the text is
    returned as far as it got, labelled "Standard".

    Args:
        text: Raw pasted text
        custom_rules: User find/replace rules, applied first
        pipeline: Stage pipeline to use (defaults to create_default_pipeline())

    Returns:
        FormatResult with the formatted document and its format type
    """
    formatted = text
    try:
        formatted, rules_applied = apply_custom_rules(text, custom_rules)
        formatted = normalize_whitespace(formatted)
        result = _format_normalized(formatted, rules_applied, pipeline)
    except Exception as e:
        error(f"[FORMATTER] Formatting failed, returning text unformatted: {e}", exc_info=True)
        return FormatResult(formatted=formatted, format_type=STANDARD_FORMAT_TYPE)

    debug_log(f"[FORMATTER] Done: {result.format_type} ({len(text)} -> {len(result.formatted)} chars)")
    return result
