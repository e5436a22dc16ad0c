"""
Tests for header promotion stages.
"""

from smartformat.stages.headers import (
    AutoSection,
    EnsureTitle,
    NumberedSectionHeaders,
    TitleCaseHeaders,
    is_title_candidate,
)


class TestTitleCandidate:
    def test_candidates(self):
        assert is_title_candidate("Quarterly Report Draft")
        assert not is_title_candidate("Report")
        assert not is_title_candidate("Hey there team")
        assert not is_title_candidate("- Quarterly report")
        assert not is_title_candidate("This is a sentence.")


class TestNumberedSectionHeaders:
    """Tests for NumberedSectionHeaders."""

    def test_promotes_heading_line(self):
        result = NumberedSectionHeaders().process("1. getting started\nInstall it.")

        # The heading text must start uppercase to count
        assert not result.applied

        result = NumberedSectionHeaders().process("1. Getting Started\nInstall it.")
        assert result.text == "\n## 1. Getting Started\n\nInstall it."
        assert result.changes_made == 1

    def test_sentence_list_item_is_left_alone(self):
        text = "1. Open the file and save it."

        assert NumberedSectionHeaders().process(text).text == text


class TestAutoSection:
    """Tests for AutoSection."""

    def test_tags_blocks_and_synthesizes_title(self):
        text = "You are a senior data analyst.\n\nDo not use jargon. Never invent statistics."
        result = AutoSection().process(text)

        assert result.text == (
            "# Senior Data Analyst\n\n"
            "## System Role\n\nYou are a senior data analyst.\n\n"
            "## Constraints\n\nDo not use jargon. Never invent statistics."
        )
        assert result.changes_made == 3
        assert sorted(result.metadata['sections']) == ['constraints', 'role']

    def test_first_line_title(self):
        text = "Quarterly Planning Notes\nDo not use jargon. Never invent statistics.\n\nSee you soon."
        result = AutoSection().process(text)

        assert result.text.startswith(
            "# Quarterly Planning Notes\n\n## Constraints\n\nDo not use jargon."
        )

    def test_single_block_is_untouched(self):
        text = "You are a senior data analyst."

        assert AutoSection().process(text).text == text

    def test_skipped_when_already_structured(self):
        text = "## Role\n\nYou are terse.\n\n## Task\n\nSummarize."

        assert not AutoSection().process(text).applied

    def test_each_kind_used_once(self):
        text = "Hello team.\n\nDo not use jargon. Never guess.\n\nAvoid slang. Never swear."
        result = AutoSection().process(text)

        assert result.text.count("## Constraints") == 1

    def test_first_person_bio_is_not_tagged(self):
        text = "Hello team.\n\nI avoid meetings. I never skip lunch. I do my best work early."
        result = AutoSection().process(text)

        assert "## Constraints" not in result.text


class TestEnsureTitle:
    """Tests for EnsureTitle."""

    def test_explicit_title_line(self):
        result = EnsureTitle().process("Subject: quarterly report\nBody.")

        assert result.text == "# Quarterly Report\nBody."

    def test_short_first_line(self):
        result = EnsureTitle().process("Onboarding checklist\nBring a laptop.")

        assert result.text == "# Onboarding Checklist\nBring a laptop."

    def test_single_line_document_has_no_title(self):
        assert not EnsureTitle().process("Onboarding checklist").applied

    def test_existing_heading(self):
        assert not EnsureTitle().process("# Already\nText").applied


class TestTitleCaseHeaders:
    """Tests for TitleCaseHeaders."""

    def test_title_cases_heading(self):
        result = TitleCaseHeaders().process("## the ROLE of the assistant\nbody")

        assert result.text == "## The Role of the Assistant\nbody"
        assert result.changes_made == 1

    def test_title_cased_heading_is_unchanged(self):
        assert TitleCaseHeaders().process("## Done Right").changes_made == 0
