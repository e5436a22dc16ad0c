"""
Tests for structural detection and paragraph splitting stages.
"""

from smartformat.stages.paragraphs import (
    WallOfTextSplitter,
    sentences_with_tail,
    starts_with_transition,
)
from smartformat.stages.structural import (
    AllCapsHeaders,
    ChatTranscriptHeaders,
    ColonLineHeaders,
    KeywordHeaders,
    ShortLineHeaders,
    XmlTagHeaders,
    expand_tabs,
    looks_like_short_title,
)
from smartformat.utils.text_utils import split_sentences

LONG_LINE = (
    "The migration started in March after the old cluster ran out of disk space "
    "and the team decided to move everything over to the new region."
)


class TestChatTranscriptHeaders:
    """Tests for ChatTranscriptHeaders."""

    def setup_method(self):
        self.stage = ChatTranscriptHeaders()

    def test_converts_roles(self):
        result = self.stage.process("System: You are terse.\nUser: Summarize this.")

        assert result.text == "## System\n\nYou are terse.\n\n## User\n\nSummarize this."
        assert result.changes_made == 2

    def test_single_marker_is_prose(self):
        result = self.stage.process("User: hi there")

        assert result.text == "User: hi there"
        assert not result.applied


class TestXmlTagHeaders:
    """Tests for XmlTagHeaders."""

    def test_open_and_close_tags(self):
        result = XmlTagHeaders().process("<instructions>\nBe brief.\n</instructions>")

        assert result.text == "## Instructions\n\nBe brief.\n\n---"
        assert result.changes_made == 2

    def test_unknown_tag_is_ignored(self):
        result = XmlTagHeaders().process("<div>\nhello\n</div>")

        assert not result.applied


class TestAllCapsHeaders:
    """Tests for AllCapsHeaders."""

    def test_promotes_known_name(self):
        result = AllCapsHeaders().process("CONSTRAINTS\nBe brief.")

        assert result.text == "\n## Constraints\n\nBe brief."
        assert result.changes_made == 1

    def test_multi_word_name(self):
        result = AllCapsHeaders().process("OUTPUT FORMAT:")

        assert result.text == "\n## Output Format\n"

    def test_existing_heading_is_left_alone(self):
        result = AllCapsHeaders().process("## Constraints\nBe brief.")

        assert result.text == "## Constraints\nBe brief."
        assert result.changes_made == 0


class TestKeywordHeaders:
    """Tests for KeywordHeaders."""

    def test_keyword_maps_to_canonical_heading(self):
        result = KeywordHeaders().process("background:\nWe migrated last year.")

        assert result.text == "\n## Context\n\nWe migrated last year."
        assert result.changes_made == 1

    def test_canonical_heading_is_stable(self):
        result = KeywordHeaders().process("## Context\nWe migrated last year.")

        assert result.changes_made == 0

    def test_keyword_inside_sentence_is_ignored(self):
        result = KeywordHeaders().process("Give me some background on this.")

        assert not result.applied


class TestColonLineHeaders:
    """Tests for ColonLineHeaders."""

    def test_label_line_becomes_heading(self):
        result = ColonLineHeaders().process("Project Timeline:\nWe start Monday.")

        assert result.text == "\n## Project Timeline\n\nWe start Monday."

    def test_callout_words_are_skipped(self):
        assert not ColonLineHeaders().process("Note:").applied

    def test_clause_with_two_ands_is_skipped(self):
        assert not ColonLineHeaders().process("Cats and dogs and birds:").applied


class TestShortLineHeaders:
    """Tests for ShortLineHeaders."""

    def test_short_title_before_long_paragraph(self):
        result = ShortLineHeaders().process(f"Project Background\n{LONG_LINE}")

        assert result.text == f"\n## Project Background\n\n{LONG_LINE}"
        assert result.changes_made == 1

    def test_greeting_is_not_a_title(self):
        result = ShortLineHeaders().process(f"Dear Team\n{LONG_LINE}")

        assert not result.applied

    def test_short_title_needs_long_paragraph(self):
        result = ShortLineHeaders().process("Project Background\nShort follow up.")

        assert not result.applied

    def test_verb_makes_fragment(self):
        assert looks_like_short_title("Project Background")
        assert not looks_like_short_title("Users Need Help")


class TestExpandTabs:
    def test_tabs_become_two_spaces(self):
        assert expand_tabs("a\tb\t\tc") == "a  b    c"


class TestWallOfTextSplitter:
    """Tests for WallOfTextSplitter."""

    def test_splits_at_transition(self):
        first = (
            "The old billing system stored every invoice in a single table that grew "
            "without limits for years. Reports slowed down badly each quarter end."
        )
        second = (
            "However, the new design splits invoices by month and archives anything older "
            "than two years automatically. Queries now finish in a few seconds."
        )
        result = WallOfTextSplitter().process(f"{first} {second}")

        assert result.text == f"{first}\n\n{second}"
        assert result.changes_made == 1

    def test_mechanical_split_without_transitions(self):
        sentence = "The team reviewed the quarterly numbers and found several gaps in the regional sales data. "
        result = WallOfTextSplitter().process((sentence * 6).strip())

        expected_chunk = (sentence * 3).strip()
        assert result.text == f"{expected_chunk}\n\n{expected_chunk}"

    def test_short_paragraph_is_untouched(self):
        result = WallOfTextSplitter().process("Short. Very short. Still short.")

        assert result.text == "Short. Very short. Still short."
        assert not result.applied

    def test_headings_are_never_split(self):
        sentence = "The team reviewed the quarterly numbers and found several gaps in the regional sales data. "
        heading = "## " + (sentence * 6).strip()

        assert WallOfTextSplitter().process(heading).text == heading


class TestSentenceHelpers:
    def test_tail_joins_last_sentence(self):
        assert sentences_with_tail("One. Two. and a tail") == ["One. ", "Two. and a tail"]

    def test_transition_detection(self):
        assert starts_with_transition("  However, it failed.")
        assert not starts_with_transition("Howeverish words.")

    def test_sentences_keep_their_spacing(self):
        assert split_sentences("One.  Two? Three") == ["One.  ", "Two? "]
