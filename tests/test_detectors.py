"""
Tests for the early-exit format detectors.
"""

import pytest

from smartformat.detectors import (
    DetectionResult,
    detect_language,
    js_number,
    run_early_exit_detectors,
    try_detect_code,
    try_detect_table,
    try_format_json,
    try_preserve_yaml,
)


class TestJsonDetector:
    """Tests for try_format_json."""

    def test_prettifies_object(self):
        result = try_format_json('{"a":1,"b":2}')

        assert result == DetectionResult('```json\n{\n  "a": 1,\n  "b": 2\n}\n```', 'JSON Prettify')

    def test_prettifies_array_and_keeps_unicode(self):
        result = try_format_json('["café", 2]')

        assert result.result == '```json\n[\n  "café",\n  2\n]\n```'

    def test_invalid_json_falls_through(self):
        assert try_format_json('{not json}') is None

    def test_scalar_is_not_json_document(self):
        assert try_format_json('"just a string"') is None

    def test_rejects_nan(self):
        assert try_format_json('[NaN]') is None

    def test_numbers_print_like_javascript(self):
        result = try_format_json('{"a":1.0,"b":1e2,"c":-0.5,"d":1.5e-7}')

        assert result.result == (
            '```json\n{\n  "a": 1,\n  "b": 100,\n  "c": -0.5,\n  "d": 1.5e-7\n}\n```'
        )

    def test_index_keys_come_first(self):
        result = try_format_json('{"b":1,"10":2,"a":3,"2":4}')

        assert result.result == '```json\n{\n  "2": 4,\n  "10": 2,\n  "b": 1,\n  "a": 3\n}\n```'

    def test_nested_and_empty_containers(self):
        result = try_format_json('{"a":[],"b":{"c":[1,{}]},"d":null,"e":true}')

        assert result.result == (
            '```json\n{\n  "a": [],\n  "b": {\n    "c": [\n      1,\n      {}\n    ]\n  },\n'
            '  "d": null,\n  "e": true\n}\n```'
        )


class TestJsNumber:
    """Tests for js_number."""

    @pytest.mark.parametrize("value, expected", [
        (1.0, "1"),
        (100.0, "100"),
        (-0.5, "-0.5"),
        (1.5e-7, "1.5e-7"),
        (0.000001, "0.000001"),
        (2.5e-5, "0.000025"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (-0.0, "0"),
        (3.14, "3.14"),
        (42, "42"),
        (12345678901234567890, "12345678901234567000"),
        (float('inf'), "null"),
    ])
    def test_matches_number_to_string(self, value, expected):
        assert js_number(value) == expected


class TestYamlDetector:
    """Tests for try_preserve_yaml."""

    def test_preserves_front_matter_and_body(self):
        text = "---\ntitle: Notes\ntags: work\n---\nbody text here"
        result = try_preserve_yaml(text)

        assert result.label == 'YAML Front Matter'
        assert result.result == "---\ntitle: Notes\ntags: work\n---\n\nbody text here"

    def test_requires_key_value_line(self):
        assert try_preserve_yaml("---\njust words\n---\nbody") is None

    def test_requires_closing_marker(self):
        assert try_preserve_yaml("---\ntitle: Notes") is None


class TestCodeDetector:
    """Tests for try_detect_code and detect_language."""

    def test_fences_python(self):
        code = "import os\n\ndef main():\n    print(os.getcwd())\n\nmain()"
        result = try_detect_code(code)

        assert result.label == 'Auto-Code Block'
        assert result.result.startswith('```python\n')
        assert result.result.endswith('\n```')

    def test_prose_is_not_code(self):
        text = "We met on Monday.\nThe plan is simple.\nShip it by Friday."

        assert try_detect_code(text) is None

    def test_already_fenced_is_ignored(self):
        assert try_detect_code("```\nconst a = 1;\nlet b = 2;\nreturn a;\n```") is None

    def test_language_needs_two_indicators(self):
        assert detect_language("const x = 1;\nconsole.log(x);") == 'javascript'
        assert detect_language("print") == ''


class TestTableDetector:
    """Tests for try_detect_table."""

    def test_tab_delimited_rows(self):
        result = try_detect_table("Name\tAge\nAda\t36\nAlan\t41")

        assert result.label == 'Table Auto-Format'
        assert result.result == "| Name | Age |\n| --- | --- |\n| Ada | 36 |\n| Alan | 41 |"

    def test_pipe_delimited_rows(self):
        result = try_detect_table("Name | Age\nAda | 36")

        assert result.result == "| Name | Age |\n| --- | --- |\n| Ada | 36 |"

    def test_existing_markdown_table_is_left_alone(self):
        assert try_detect_table("| A | B |\n| --- | --- |\n| 1 | 2 |") is None

    def test_single_line_is_not_a_table(self):
        assert try_detect_table("a\tb") is None


class TestRunEarlyExitDetectors:
    """Tests for detector ordering."""

    def test_json_wins_over_code(self):
        result = run_early_exit_detectors('{"const": "let", "function": [1, 2]}')

        assert result.label == 'JSON Prettify'

    def test_prose_passes_through(self):
        assert run_early_exit_detectors("Just a short note about lunch.") is None
