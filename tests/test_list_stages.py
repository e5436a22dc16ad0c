"""
Tests for list formatting stages.
"""

from smartformat.stages.lists import (
    EmbeddedListExtractor,
    RunOnListSplitter,
    SequentialInstructionExtractor,
    StepHeaders,
    UnbulletedListDetector,
    is_category_label,
    normalize_bullets,
    split_comma_items,
)


class TestStepHeaders:
    """Tests for StepHeaders."""

    def test_step_and_phase_prefixes(self):
        result = StepHeaders().process("Step 1: Install deps\nphase 2 - run it")

        assert result.text == "### Step 1: Install deps\n### Phase 2: run it"
        assert result.changes_made == 2

    def test_existing_sub_heading_is_stable(self):
        assert not StepHeaders().process("### Step 1: Install deps").applied


class TestNormalizeBullets:
    def test_glyphs_and_markers(self):
        text = "• one\n* two\n  + three\n1) four"

        assert normalize_bullets(text) == "- one\n- two\n  - three\n1. four"

    def test_bold_text_is_not_a_bullet(self):
        assert normalize_bullets("**Bold:** text") == "**Bold:** text"


class TestRunOnListSplitter:
    """Tests for RunOnListSplitter."""

    def test_dash_items_on_one_line(self):
        result = RunOnListSplitter().process("- eggs - milk - flour")

        assert result.text == "- eggs\n- milk\n- flour"
        assert result.changes_made == 1

    def test_numbered_items_on_one_line(self):
        result = RunOnListSplitter().process("1. one 2. two 3. three")

        assert result.text == "1. one\n2. two\n3. three"

    def test_two_items_are_not_split(self):
        text = "- Pay attention to the time - it matters"

        assert RunOnListSplitter().process(text).text == text


class TestUnbulletedListDetector:
    """Tests for UnbulletedListDetector."""

    def test_bulletizes_short_lines_under_heading(self):
        text = "## Skills\nPython\nDistributed systems\nTechnical writing"
        result = UnbulletedListDetector().process(text)

        assert result.text == "## Skills\n- Python\n- Distributed systems\n- Technical writing"
        assert result.changes_made == 1

    def test_requires_heading(self):
        text = "Python\nDistributed systems\nTechnical writing"

        assert UnbulletedListDetector().process(text).text == text

    def test_two_lines_are_not_a_list(self):
        text = "## Skills\nPython\nGo"

        assert not UnbulletedListDetector().process(text).applied


class TestEmbeddedListExtractor:
    """Tests for EmbeddedListExtractor."""

    def test_oxford_comma_list(self):
        result = EmbeddedListExtractor().process("Languages: Python, Go, and Rust")

        assert result.text == "\n**Languages:**\n\n- Python\n- Go\n- Rust"
        assert result.changes_made == 1

    def test_list_without_oxford_comma(self):
        result = EmbeddedListExtractor().process("Tools: hammer, saw and drill")

        assert result.text == "\n**Tools:**\n\n- Hammer\n- Saw\n- Drill"

    def test_semicolon_list(self):
        result = EmbeddedListExtractor().process("Rules: be kind; be brief; cite sources")

        assert result.text == "\n**Rules:**\n\n- Be kind\n- Be brief\n- Cite sources"

    def test_sentence_label_is_skipped(self):
        text = "The reason: it was late, cold, and dark"

        assert EmbeddedListExtractor().process(text).text == text

    def test_category_label(self):
        assert is_category_label("Languages")
        assert not is_category_label("This needs")
        assert not is_category_label("Things we need to buy")

    def test_long_items_are_not_a_list(self):
        assert split_comma_items("we tried the first approach for a very long time, it failed, and then we stopped") is None


class TestSequentialInstructionExtractor:
    """Tests for SequentialInstructionExtractor."""

    def test_narrated_steps_become_numbered_list(self):
        text = "First, install the CLI. Then, log in. Finally, deploy the app."
        result = SequentialInstructionExtractor().process(text)

        assert result.text == "1. Install the CLI.\n2. Log in.\n3. Deploy the app."
        assert result.changes_made == 1

    def test_weak_marker_without_comma_does_not_count(self):
        text = "We met. Then the dog ran. It rained."

        assert not SequentialInstructionExtractor().process(text).applied

    def test_unpunctuated_tail_is_kept(self):
        text = "First, install the CLI. Then, log in. Finally, deploy the app. done"
        result = SequentialInstructionExtractor().process(text)

        assert result.text.endswith("3. Deploy the app. done")
