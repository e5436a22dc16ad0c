"""
Tests for the command-line interface.
"""

import io
import json

from smartformat.cli import main

PROMPT = "You are a helpful pirate assistant. Explain the treasure map."


class TestCli:
    """Tests for main()."""

    def test_writes_formatted_files(self, tmp_path, capsys):
        source = tmp_path / "prompt.txt"
        source.write_text(PROMPT, encoding='utf-8')
        out_dir = tmp_path / "out"

        exit_code = main(['--input', str(source), '--output-dir', str(out_dir)])

        assert exit_code == 0
        written = (out_dir / "prompt_formatted.md").read_text(encoding='utf-8')
        assert written == f"> **ROLE:** {PROMPT}\n"
        assert "FORMATTING SUMMARY" in capsys.readouterr().out

    def test_missing_file_is_an_error(self, tmp_path, capsys):
        exit_code = main(['--input', str(tmp_path / "missing.txt")])

        assert exit_code == 1
        assert "[ERROR]" in capsys.readouterr().err

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr('sys.stdin', io.StringIO('{"a":1}'))

        assert main([]) == 0
        captured = capsys.readouterr()
        assert captured.out.startswith('```json\n{\n  "a": 1\n}\n```')
        assert "Format: JSON Prettify" in captured.err

    def test_applies_rules_file(self, tmp_path, capsys):
        rules = tmp_path / "rules.json"
        rules.write_text(json.dumps([{'id': '1', 'name': 'Brand', 'pattern': 'acme', 'replacement': 'ACME'}]))
        source = tmp_path / "note.txt"
        source.write_text("acme is great", encoding='utf-8')

        assert main(['--input', str(source), '--rules', str(rules)]) == 0
        assert capsys.readouterr().out.startswith("ACME is great\n")
