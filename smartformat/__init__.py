"""
SmartFormat - plain text to Markdown formatting engine.

Usage:
    from smartformat import smart_format, CustomRule

    result = smart_format(pasted_text)
    print(result.formatted)
    print(result.format_type)

    rule = CustomRule(id="r1", name="Brand", pattern="acme", replacement="ACME")
    result = smart_format(pasted_text, custom_rules=[rule])
"""

from smartformat.custom_rules import CustomRule, CustomRuleStore, apply_custom_rules
from smartformat.formatter import (
    FormatResult,
    build_format_type,
    normalize_whitespace,
    smart_format,
)

__version__ = "1.0.0"

__all__ = [
    'CustomRule',
    'CustomRuleStore',
    'FormatResult',
    'apply_custom_rules',
    'build_format_type',
    'normalize_whitespace',
    'smart_format',
]
