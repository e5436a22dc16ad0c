"""
Tests for inline formatting stages.
"""

from smartformat.stages.inline import (
    AllCapsEmphasis,
    DefinitionTermBolder,
    InlineCodeWrapper,
    QuotedTermEmphasis,
    TechAcronymWrapper,
    is_emphasizable_quote,
)


class TestInlineCodeWrapper:
    """Tests for InlineCodeWrapper."""

    def setup_method(self):
        self.stage = InlineCodeWrapper()

    def test_wraps_identifiers_paths_and_flags(self):
        result = self.stage.process("set max_retries in ./config/app.yaml via --force")

        assert result.text == "set `max_retries` in `./config/app.yaml` via `--force`"
        assert result.changes_made == 3

    def test_camel_and_pascal_case(self):
        result = self.stage.process("call getUserName from DataLoader now")

        assert result.text == "call `getUserName` from `DataLoader` now"

    def test_env_var(self):
        assert self.stage.process("export $HOME_DIR first").text == "export `$HOME_DIR` first"

    def test_second_pass_is_a_no_op(self):
        once = self.stage.process("set max_retries in ./config/app.yaml via --force").text

        assert not self.stage.process(once).applied

    def test_urls_are_not_paths(self):
        text = "see https://example.com/docs/setup.html for details"

        assert self.stage.process(text).text == text

    def test_heading_lines_are_protected(self):
        assert self.stage.process("## max_retries").text == "## max_retries"

    def test_abbreviations_are_not_snake_case(self):
        assert not self.stage.process("bring snacks e_g chips").applied


class TestTechAcronymWrapper:
    """Tests for TechAcronymWrapper."""

    def test_wraps_known_acronyms(self):
        result = TechAcronymWrapper().process("Call the API and parse JSON.")

        assert result.text == "Call the `API` and parse `JSON`."
        assert result.changes_made == 2

    def test_unknown_capitals_are_left(self):
        assert not TechAcronymWrapper().process("We are OK with NASA.").applied

    def test_blockquote_lines_are_protected(self):
        text = "> Call the API first.\nThen parse JSON."

        assert TechAcronymWrapper().process(text).text == "> Call the API first.\nThen parse `JSON`."


class TestAllCapsEmphasis:
    """Tests for AllCapsEmphasis."""

    def test_bolds_shouted_phrase(self):
        result = AllCapsEmphasis().process("Please DO NOT SHARE this file.")

        assert result.text == "Please **Do Not Share** this file."

    def test_single_acronym_is_not_emphasis(self):
        assert not AllCapsEmphasis().process("Ask the CTO today.").applied

    def test_list_item_keeps_capitals(self):
        assert AllCapsEmphasis().process("- DO NOT SHARE").text == "- DO NOT SHARE"


class TestDefinitionTermBolder:
    def test_term_dash_definition(self):
        result = DefinitionTermBolder().process("Latency - time between request and response")

        assert result.text == "**Latency** — time between request and response"

    def test_long_term_is_a_sentence(self):
        text = "We went to the shop - it was closed all day"

        assert DefinitionTermBolder().process(text).text == text


class TestQuotedTermEmphasis:
    """Tests for QuotedTermEmphasis."""

    def test_technical_term(self):
        result = QuotedTermEmphasis().process('Set the "Max Tokens" value.')

        assert result.text == 'Set the **Max Tokens** value.'

    def test_speech_keeps_quotes(self):
        text = 'She said "yes" and left.'

        assert QuotedTermEmphasis().process(text).text == text

    def test_emphasizable_quote(self):
        assert is_emphasizable_quote("config.yaml")
        assert not is_emphasizable_quote("https://example.com")
        assert not is_emphasizable_quote("this is a much longer spoken phrase")

    def test_blockquote_lines_are_protected(self):
        text = '> Set the "Max Tokens" value.\nSet the "Top P" value.'
        result = QuotedTermEmphasis().process(text)

        assert result.text == '> Set the "Max Tokens" value.\nSet the **Top P** value.'
        assert result.changes_made == 1
