"""
Tests for the section classifier and title synthesis.
"""

from smartformat.config import SECTION_SCORE_THRESHOLD
from smartformat.sections import (
    SectionKind,
    generate_title,
    infer_section,
    is_first_person_narrative,
    score_sections,
)


class TestInferSection:
    """Tests for infer_section / score_sections."""

    def test_role_block(self):
        assert infer_section("You are a senior data analyst.") is SectionKind.ROLE

    def test_constraints_block(self):
        block = "Do not use jargon. Never invent statistics."

        assert infer_section(block) is SectionKind.CONSTRAINTS

    def test_output_format_block(self):
        block = "Format your response as a markdown table."

        assert infer_section(block) is SectionKind.OUTPUT

    def test_single_weak_keyword_is_not_enough(self):
        """One incidental 'workflow' in a bio scores exactly the threshold."""
        block = "Lately the team has been tuning our workflow for releases."

        assert score_sections(block)[SectionKind.STEPS] == SECTION_SCORE_THRESHOLD
        assert infer_section(block) is None

    def test_tie_keeps_earlier_kind(self):
        # "you are" (role 5) and "your task" (task 5)
        block = "You are ready. Your task is simple."

        assert infer_section(block) is SectionKind.ROLE

    def test_numbered_lines_score_as_steps(self):
        block = "1. Open the file\n2. Edit the header\n3. Save it"

        assert infer_section(block) is SectionKind.STEPS

    def test_empty_block_scores_zero(self):
        assert all(score == 0 for score in score_sections("   ").values())

    def test_fallback_label(self):
        assert SectionKind.FALLBACK.label == 'Details'
        assert SectionKind.TONE.label == 'Tone & Style'


class TestFirstPersonNarrative:
    """Tests for is_first_person_narrative."""

    def test_bio_is_narrative(self):
        assert is_first_person_narrative("I build tools. I ship weekly with my team.")

    def test_instructions_are_not(self):
        assert not is_first_person_narrative("Summarize the report. I need it short.")


class TestGenerateTitle:
    """Tests for generate_title."""

    def test_title_from_role(self):
        assert generate_title("You are a senior data analyst who loves charts.") == "Senior Data Analyst"

    def test_title_from_task(self):
        assert generate_title("Please write a cover letter, short and sweet.") == "Cover Letter Prompt"

    def test_title_from_need(self):
        assert generate_title("I need a weekly meal plan.") == "Weekly Meal Plan"

    def test_no_title(self):
        assert generate_title("Hello there.") is None
