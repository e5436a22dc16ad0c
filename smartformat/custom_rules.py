"""
Custom Rule Engine

User-defined regex find/replace rules, applied before any built-in stage.

Rules are stored by the editor UI as JSON objects:
    {"id": "r1", "name": "Brand", "pattern": "acme", "replacement": "ACME", "active": true}

Patterns use JavaScript regex syntax as typed in the UI. Named groups written
"(?<name>...)" are translated to Python's "(?P<name>...)". Replacements use
JavaScript replacement syntax: $& (whole match), $1..$99, $<name>, $$ ($),
$` (text before the match) and $' (text after it).

A rule that fails to compile, or whose replacement references a group the
pattern does not define, is skipped with a warning. Other rules still apply.
"""

import json
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

from smartformat.logging_config import debug_log, warning

_JS_NAMED_GROUP = re.compile(r'\(\?<(?![=!])([A-Za-z_][A-Za-z0-9_]*)>')
_JS_REPLACEMENT_TOKEN = re.compile(r"\$(\$|&|`|'|<([^>]*)>|\d{1,2})")


@dataclass(frozen=True)
class CustomRule:
    """
    A single user-defined find/replace rule.

    Attributes:
        id: Stable identifier assigned by the UI
        name: Display name, used in log messages
        pattern: Regex source (JavaScript syntax)
        replacement: Replacement template (JavaScript syntax)
        active: Inactive rules are stored but never applied
    """
    id: str
    name: str
    pattern: str
    replacement: str = ''
    active: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'CustomRule':
        """
        Build a rule from a stored dict.

        Accepts "active", "isActive" or "enabled" for the active flag; a
        missing id falls back to the name.

        Raises:
            ValueError: If the dict has no pattern
        """
        pattern = data.get('pattern')
        if not isinstance(pattern, str) or not pattern:
            raise ValueError(f"custom rule {data.get('name', '?')!r} has no pattern")
        active = data.get('active', data.get('isActive', data.get('enabled', True)))
        name = str(data.get('name', ''))
        return cls(
            id=str(data.get('id') or name),
            name=name,
            pattern=pattern,
            replacement=str(data.get('replacement') or ''),
            active=bool(active),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def translate_pattern(pattern: str) -> str:
    """Rewrite JavaScript named groups "(?<name>" as "(?P<name>"."""
    return _JS_NAMED_GROUP.sub(r'(?P<\1>', pattern)


def _resolve_group_number(digits: str, group_count: int) -> tuple[int, str] | None:
    """
    Resolve "$nn" the way JavaScript does.

    Two digits are used when they name an existing group, otherwise the first
    digit is the group and the second is literal text.

    Returns:
        (group number, trailing literal), or None if no such group exists
    """
    if len(digits) == 2 and 1 <= int(digits) <= group_count:
        return int(digits), ''
    first = int(digits[0])
    if 1 <= first <= group_count:
        return first, digits[1:]
    return None


def validate_replacement(replacement: str, compiled: re.Pattern) -> str | None:
    """
    Check that every group reference in a replacement exists.

    Returns:
        A description of the first bad reference, or None if all are valid
    """
    for token in _JS_REPLACEMENT_TOKEN.finditer(replacement):
        body, name = token.group(1), token.group(2)
        if name is not None:
            if name not in compiled.groupindex:
                return f"unknown named group $<{name}>"
        elif body.isdigit():
            if body == '0' or body == '00':
                continue
            if _resolve_group_number(body, compiled.groups) is None:
                return f"missing group ${body}"
    return None


def expand_replacement(match: re.Match, replacement: str) -> str:
    """Expand a JavaScript-style replacement template for one match."""
    source = match.string

    def expand_token(token: re.Match) -> str:
        body, name = token.group(1), token.group(2)
        if body == '$':
            return '$'
        if body == '&':
            return match.group(0)
        if body == '`':
            return source[:match.start()]
        if body == "'":
            return source[match.end():]
        if name is not None:
            return match.group(name) or ''
        resolved = _resolve_group_number(body, match.re.groups)
        if resolved is None:
            # "$0" is literal text in JavaScript
            return token.group(0)
        number, trailing = resolved
        return (match.group(number) or '') + trailing

    return _JS_REPLACEMENT_TOKEN.sub(expand_token, replacement)


def compile_rule(rule: CustomRule) -> re.Pattern | None:
    """
    Compile a rule's pattern (MULTILINE, like the UI's "gm" flags).

    Returns:
        The compiled pattern, or None if the rule cannot be applied
    """
    try:
        compiled = re.compile(translate_pattern(rule.pattern), re.MULTILINE)
    except re.error as e:
        warning(f"[RULES] Invalid regex in custom rule {rule.name!r}: {e}")
        return None

    problem = validate_replacement(rule.replacement, compiled)
    if problem:
        warning(f"[RULES] Skipping custom rule {rule.name!r}: {problem}")
        return None
    return compiled


def apply_custom_rules(text: str, rules: list[CustomRule] | None) -> tuple[str, bool]:
    """
    Apply active rules in order, each globally across the text.

    Args:
        text: Raw input text
        rules: Rules in UI order; inactive ones are ignored

    Returns:
        (rewritten text, True if any rule changed it)
    """
    result = text
    applied = False

    for rule in rules or ():
        if not rule.active:
            continue
        compiled = compile_rule(rule)
        if compiled is None:
            continue
        try:
            rewritten = compiled.sub(lambda m, r=rule: expand_replacement(m, r.replacement), result)
        except (re.error, IndexError, RecursionError) as e:
            warning(f"[RULES] Custom rule {rule.name!r} failed, skipping: {e}")
            continue
        if rewritten != result:
            debug_log(f"[RULES] Custom rule {rule.name!r} changed the text")
            result = rewritten
            applied = True

    return result, applied


class CustomRuleStore:
    """
    Loads and saves the custom rule list.

    The file format follows the suffix: .json, or .yaml / .yml. A missing
    file is an empty rule list; a corrupt file or malformed entry is logged
    and skipped rather than raised.
    """

    YAML_SUFFIXES = ('.yaml', '.yml')

    def __init__(self, rules_file: Path):
        """
        Initialize the store.

        Args:
            rules_file: Path to the rules file (need not exist yet)
        """
        self.rules_file = Path(rules_file)

    @property
    def is_yaml(self) -> bool:
        return self.rules_file.suffix.lower() in self.YAML_SUFFIXES

    def _read_entries(self) -> list:
        if not self.rules_file.exists():
            debug_log(f"[RULES] No rules file at {self.rules_file}")
            return []
        try:
            with open(self.rules_file, encoding='utf-8') as f:
                data = yaml.safe_load(f) if self.is_yaml else json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            warning(f"[RULES] Could not read rules file {self.rules_file}: {e}")
            return []

        if isinstance(data, dict):
            data = data.get('rules', [])
        if not isinstance(data, list):
            warning(f"[RULES] Rules file {self.rules_file} does not contain a list")
            return []
        return data

    def load(self) -> list[CustomRule]:
        """
        Load all well-formed rules from the file.

        Returns:
            Rules in file order (empty when the file is missing or corrupt)
        """
        rules = []
        for entry in self._read_entries():
            if not isinstance(entry, dict):
                warning(f"[RULES] Ignoring non-object rule entry: {entry!r}")
                continue
            try:
                rules.append(CustomRule.from_dict(entry))
            except ValueError as e:
                warning(f"[RULES] Ignoring rule: {e}")
        debug_log(f"[RULES] Loaded {len(rules)} custom rules from {self.rules_file}")
        return rules

    def save(self, rules: list[CustomRule]) -> None:
        """Write rules to the file, creating parent directories as needed."""
        payload = [rule.to_dict() for rule in rules]
        self.rules_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.rules_file, 'w', encoding='utf-8') as f:
            if self.is_yaml:
                yaml.safe_dump(payload, f, sort_keys=False, allow_unicode=True)
            else:
                json.dump(payload, f, indent=2, ensure_ascii=False)
