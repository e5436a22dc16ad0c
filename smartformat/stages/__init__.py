"""
Formatting Stages

Each stage rewrites prose text and reports how many changes it made.
Stages are grouped in the order the default pipeline runs them:

1. Structural Detection: chat roles, XML tags, ALL-CAPS / keyword / colon / short-line headings
2. Paragraph Splitting: walls of text
3. Header Promotion: numbered sections, auto-section, title, title case
4. List Formatting: steps, bullets, run-on / unbulleted / embedded / sequential lists
5. Inline Formatting: inline code, acronyms, emphasis
6. Grammar Correction: contractions, pronoun I, repeats, spacing, capitals, misspellings
7. Semantic Formatting: roles, constraints, variables, callouts, key-values, links
8. Final Polish: sentence endings, smart punctuation
"""

from smartformat.stages.base import (
    BaseStage,
    FunctionStage,
    PipelineRun,
    StageGroup,
    StagePipeline,
    StageResult,
)
from smartformat.stages.grammar import (
    CommonMisspellingFixer,
    ContractionFixer,
    PronounFixer,
    RepeatedWordFixer,
    SentenceCapitalizer,
    SpacingFixer,
)
from smartformat.stages.headers import (
    AutoSection,
    EnsureTitle,
    NumberedSectionHeaders,
    TitleCaseHeaders,
)
from smartformat.stages.inline import (
    AllCapsEmphasis,
    DefinitionTermBolder,
    InlineCodeWrapper,
    QuotedTermEmphasis,
    TechAcronymWrapper,
)
from smartformat.stages.lists import (
    EmbeddedListExtractor,
    RunOnListSplitter,
    SequentialInstructionExtractor,
    StepHeaders,
    UnbulletedListDetector,
    normalize_bullets,
)
from smartformat.stages.paragraphs import WallOfTextSplitter
from smartformat.stages.polish import SentenceEndingFixer, SmartPunctuation
from smartformat.stages.semantic import (
    CalloutEnhancer,
    ConstraintHighlighter,
    RoleHighlighter,
    VariableStandardizer,
    auto_link_urls,
    format_key_values,
    normalize_dividers,
    normalize_quotes,
)
from smartformat.stages.structural import (
    AllCapsHeaders,
    ChatTranscriptHeaders,
    ColonLineHeaders,
    KeywordHeaders,
    ShortLineHeaders,
    XmlTagHeaders,
    expand_tabs,
)


def create_default_pipeline() -> StagePipeline:
    """
    Create the standard eight-group formatting pipeline.

    Returns:
        StagePipeline with all groups in their canonical order
    """
    return StagePipeline([
        StageGroup("Structural Detection", (
            FunctionStage("Tab Expansion", expand_tabs),
            ChatTranscriptHeaders(),
            XmlTagHeaders(),
            AllCapsHeaders(),
            KeywordHeaders(),
            ColonLineHeaders(),
            ShortLineHeaders(),
        )),
        StageGroup("Paragraph Splitting", (
            WallOfTextSplitter(),
        )),
        StageGroup("Header Promotion", (
            NumberedSectionHeaders(),
            AutoSection(),
            EnsureTitle(),
            TitleCaseHeaders(),
        )),
        StageGroup("List Formatting", (
            StepHeaders(),
            FunctionStage("Bullet Normalization", normalize_bullets),
            RunOnListSplitter(),
            UnbulletedListDetector(),
            EmbeddedListExtractor(),
            SequentialInstructionExtractor(),
        )),
        StageGroup("Inline Formatting", (
            InlineCodeWrapper(),
            TechAcronymWrapper(),
            AllCapsEmphasis(),
            DefinitionTermBolder(),
            QuotedTermEmphasis(),
        )),
        StageGroup("Grammar Correction", (
            ContractionFixer(),
            PronounFixer(),
            RepeatedWordFixer(),
            SpacingFixer(),
            SentenceCapitalizer(),
            CommonMisspellingFixer(),
        )),
        StageGroup("Semantic Formatting", (
            RoleHighlighter(),
            ConstraintHighlighter(),
            VariableStandardizer(),
            CalloutEnhancer(),
            FunctionStage("Key-Value Formatting", format_key_values),
            FunctionStage("URL Auto-Linking", auto_link_urls),
            FunctionStage("Divider Normalization", normalize_dividers),
            FunctionStage("Blockquote Normalization", normalize_quotes),
        )),
        StageGroup("Final Polish", (
            SentenceEndingFixer(),
            SmartPunctuation(),
        )),
    ])


__all__ = [
    'BaseStage',
    'FunctionStage',
    'PipelineRun',
    'StageGroup',
    'StagePipeline',
    'StageResult',
    'create_default_pipeline',
]
