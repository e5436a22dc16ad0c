"""
Tests for the custom rule engine and rule store.
"""

import json
import re

import pytest
import yaml

from smartformat import custom_rules
from smartformat.custom_rules import (
    CustomRule,
    CustomRuleStore,
    apply_custom_rules,
    expand_replacement,
    translate_pattern,
)


def rule(pattern, replacement='', active=True, rule_id='r1'):
    return CustomRule(id=rule_id, name=rule_id, pattern=pattern, replacement=replacement, active=active)


class TestApplyCustomRules:
    """Tests for apply_custom_rules."""

    def test_simple_replacement(self):
        assert apply_custom_rules("acme rocks, acme wins", [rule("acme", "ACME")]) == \
            ("ACME rocks, ACME wins", True)

    def test_invalid_rule_does_not_block_others(self):
        rules = [rule("(unclosed", "x", rule_id='bad'), rule("cat", "dog", rule_id='good')]

        assert apply_custom_rules("cat", rules) == ("dog", True)

    def test_failing_substitution_skips_only_that_rule(self, monkeypatch):
        expand = custom_rules.expand_replacement

        def expand_or_fail(match, template):
            if template == "boom":
                raise IndexError("no such group")
            return expand(match, template)

        monkeypatch.setattr(custom_rules, 'expand_replacement', expand_or_fail)
        rules = [rule("cat", "boom", rule_id='bad'), rule("cat", "dog", rule_id='good')]

        assert apply_custom_rules("cat", rules) == ("dog", True)

    def test_inactive_rule_is_ignored(self):
        assert apply_custom_rules("cat", [rule("cat", "dog", active=False)]) == ("cat", False)

    def test_no_rules(self):
        assert apply_custom_rules("cat", None) == ("cat", False)

    def test_numbered_groups(self):
        result, _ = apply_custom_rules("bob@example", [rule(r"(\w+)@(\w+)", "$2 at $1")])

        assert result == "example at bob"

    def test_whole_match_and_dollar(self):
        result, _ = apply_custom_rules("TODO: five", [rule("TODO", "**$&**"), rule("five", "$$5", rule_id='r2')])

        assert result == "**TODO**: $5"

    def test_named_groups(self):
        result, _ = apply_custom_rules(
            "2024-05", [rule(r"(?<year>\d{4})-(?<month>\d{2})", "$<month>/$<year>")]
        )

        assert result == "05/2024"

    def test_missing_group_skips_rule(self):
        assert apply_custom_rules("x", [rule("x", "$2")]) == ("x", False)

    def test_rules_are_multiline(self):
        result, _ = apply_custom_rules("a\nb", [rule("^", "> ")])

        assert result == "> a\n> b"


class TestReplacementTemplates:
    def test_translate_named_groups(self):
        assert translate_pattern(r"(?<word>\w+)(?<=x)(?<!y)") == r"(?P<word>\w+)(?<=x)(?<!y)"

    def test_two_digit_reference_falls_back_to_one_group(self):
        match = re.search(r"(a)", "a")

        assert expand_replacement(match, "$10") == "a0"

    def test_dollar_zero_is_literal(self):
        match = re.search(r"a", "a")

        assert expand_replacement(match, "$0") == "$0"


class TestCustomRuleFromDict:
    def test_accepts_ui_field_names(self):
        r = CustomRule.from_dict({'name': 'Brand', 'pattern': 'acme', 'replacement': 'ACME', 'isActive': False})

        assert r.id == 'Brand'
        assert r.active is False

    def test_missing_pattern_raises(self):
        with pytest.raises(ValueError):
            CustomRule.from_dict({'name': 'Empty'})


class TestCustomRuleStore:
    """Tests for CustomRuleStore persistence."""

    def test_json_round_trip(self, tmp_path):
        store = CustomRuleStore(tmp_path / "rules.json")
        rules = [rule("acme", "ACME"), rule("cat", "dog", active=False, rule_id='r2')]
        store.save(rules)

        assert store.load() == rules
        assert json.loads((tmp_path / "rules.json").read_text())[0]['pattern'] == "acme"

    def test_yaml_file_with_rules_key(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(yaml.safe_dump({'rules': [{'id': 'a', 'name': 'A', 'pattern': 'x', 'replacement': 'y'}]}))

        assert CustomRuleStore(path).load() == [CustomRule(id='a', name='A', pattern='x', replacement='y')]

    def test_missing_file_is_empty(self, tmp_path):
        assert CustomRuleStore(tmp_path / "none.json").load() == []

    def test_corrupt_file_is_empty(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json")

        assert CustomRuleStore(path).load() == []

    def test_malformed_entries_are_skipped(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([{'name': 'no pattern'}, "junk", {'id': 'ok', 'pattern': 'a'}]))

        assert [r.id for r in CustomRuleStore(path).load()] == ['ok']
