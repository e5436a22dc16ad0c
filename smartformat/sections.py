"""
Section Classifier

Scores a block of prose against weighted indicators for each section kind
(Role, Context, Task, ...) and returns the best kind if it clears the
confidence threshold.

Scoring:
- Each indicator is a boolean check on the block (regex presence, bullet
  density, numbered-line count) worth a fixed number of points.
- Points are summed per kind; the highest total wins only if it is strictly
  greater than SECTION_SCORE_THRESHOLD. Ties keep the earlier kind.
- One weak keyword hit scores at most 3, so it never produces a header.

The weights are empirical. Preserve them verbatim; changing one changes
which documents receive headers.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from smartformat.config import FIRST_PERSON_MIN_HITS, SECTION_SCORE_THRESHOLD
from smartformat.utils.text_utils import to_title_case


class SectionKind(Enum):
    ROLE = 'role'
    CONTEXT = 'context'
    TASK = 'task'
    INSTRUCTIONS = 'instructions'
    STEPS = 'steps'
    OUTPUT = 'output'
    CONSTRAINTS = 'constraints'
    EXAMPLES = 'examples'
    TONE = 'tone'
    AUDIENCE = 'audience'
    INPUT = 'input'
    DEFINITIONS = 'definitions'
    FALLBACK = 'fallback'  # display label only; never selected by the classifier

    @property
    def label(self) -> str:
        return SECTION_LABELS[self]


SECTION_LABELS: dict[SectionKind, str] = {
    SectionKind.ROLE: 'System Role',
    SectionKind.CONTEXT: 'Context',
    SectionKind.TASK: 'Task',
    SectionKind.INSTRUCTIONS: 'Instructions',
    SectionKind.STEPS: 'Steps',
    SectionKind.OUTPUT: 'Output Format',
    SectionKind.CONSTRAINTS: 'Constraints',
    SectionKind.EXAMPLES: 'Examples',
    SectionKind.TONE: 'Tone & Style',
    SectionKind.AUDIENCE: 'Audience',
    SectionKind.INPUT: 'Input',
    SectionKind.DEFINITIONS: 'Definitions',
    SectionKind.FALLBACK: 'Details',
}


@dataclass(frozen=True)
class BlockFeatures:
    """
    Precomputed view of a block shared by all indicators.

    Attributes:
        lower: The block lowercased
        line_count: Number of non-blank lines
        bullet_count: Lines starting with -, *, + or a bullet glyph
        numbered_count: Lines starting with "1." or "1)"
    """
    lower: str
    line_count: int
    bullet_count: int
    numbered_count: int

    @classmethod
    def from_block(cls, block: str) -> 'BlockFeatures':
        lines = [line for line in block.split('\n') if line.strip()]
        return cls(
            lower=block.lower(),
            line_count=len(lines),
            bullet_count=sum(1 for line in lines if re.match(r'^\s*[-*+•]\s', line)),
            numbered_count=sum(1 for line in lines if re.match(r'^\s*\d+[.)]\s', line)),
        )

    def has(self, pattern: str) -> bool:
        return re.search(pattern, self.lower) is not None


@dataclass(frozen=True)
class Indicator:
    kind: SectionKind
    weight: int
    test: Callable[[BlockFeatures], bool]


def _phrase(pattern: str) -> Callable[[BlockFeatures], bool]:
    compiled = re.compile(pattern)

    def test(features: BlockFeatures) -> bool:
        return compiled.search(features.lower) is not None

    return test


def _helpful_assistant(f: BlockFeatures) -> bool:
    return f.has(r'\bassistant\b') and f.has(r'\bhelpful\b')


def _mostly_bullets(f: BlockFeatures) -> bool:
    return f.bullet_count >= 2 and f.bullet_count / f.line_count > 0.4


def _should_with_bullets(f: BlockFeatures) -> bool:
    return f.has(r'\bshould\b') and f.bullet_count >= 1


def _first_then(f: BlockFeatures) -> bool:
    return f.has(r'\bfirst,?\s') and f.has(r'\bthen,?\s')


def _two_numbered(f: BlockFeatures) -> bool:
    return f.numbered_count >= 2


def _three_numbered(f: BlockFeatures) -> bool:
    return f.numbered_count >= 3


def _input_output_pair(f: BlockFeatures) -> bool:
    return f.has(r'\binput:\s') and f.has(r'\boutput:\s')


R, CTX, T, INS, ST, OUT, CON, EX, TONE, AUD, INP, DEF = (
    SectionKind.ROLE, SectionKind.CONTEXT, SectionKind.TASK, SectionKind.INSTRUCTIONS,
    SectionKind.STEPS, SectionKind.OUTPUT, SectionKind.CONSTRAINTS, SectionKind.EXAMPLES,
    SectionKind.TONE, SectionKind.AUDIENCE, SectionKind.INPUT, SectionKind.DEFINITIONS,
)

INDICATORS: tuple[Indicator, ...] = (
    Indicator(R, 5, _phrase(r'\byou are\b')),
    Indicator(R, 5, _phrase(r'\bact as\b')),
    Indicator(R, 4, _phrase(r'\bbehave as\b')),
    Indicator(R, 4, _phrase(r"\bpretend (to be|you'?re)\b")),
    Indicator(R, 4, _phrase(r'\byour role\b')),
    Indicator(R, 3, _phrase(r'\bpersona\b')),
    Indicator(R, 5, _phrase(r'\bsystem prompt\b')),
    Indicator(R, 3, _phrase(r'\bexpert (in|at|on)\b')),
    Indicator(R, 3, _helpful_assistant),

    Indicator(CTX, 4, _phrase(r'\bgiven (that|the following)\b')),
    Indicator(CTX, 3, _phrase(r'\bbackground\b')),
    Indicator(CTX, 3, _phrase(r'\bcontext\b')),
    Indicator(CTX, 4, _phrase(r'\bthe following (information|data|text|content|details)\b')),
    Indicator(CTX, 2, _phrase(r'\bbased on\b')),
    Indicator(CTX, 2, _phrase(r'\bhere is\b')),
    Indicator(CTX, 2, _phrase(r'\bscenario\b')),

    Indicator(T, 5, _phrase(r'\byour (task|job|assignment)\b')),
    Indicator(T, 5, _phrase(r'\bi (want|need) you to\b')),
    Indicator(T, 4, _phrase(
        r'\bplease (create|write|generate|help|analyze|summarize|review|build|design|explain|'
        r'translate|draft|compose|produce|develop|prepare|make|provide)\b')),
    Indicator(T, 2, _phrase(r'\bgoal\b')),
    Indicator(T, 2, _phrase(r'\bobjective\b')),
    Indicator(T, 3, _phrase(r'\bhelp me\b')),
    Indicator(T, 2, _phrase(r'\bi want\b')),

    Indicator(INS, 4, _mostly_bullets),
    Indicator(INS, 2, _phrase(r'\bmake sure\b')),
    Indicator(INS, 3, _phrase(r'\bfollow (these|the)\b')),
    Indicator(INS, 2, _phrase(r'\bkeep in mind\b')),
    Indicator(INS, 2, _phrase(r'\bremember to\b')),
    Indicator(INS, 2, _should_with_bullets),

    Indicator(ST, 5, _phrase(r'\bstep \d')),
    Indicator(ST, 4, _first_then),
    Indicator(ST, 4, _two_numbered),
    Indicator(ST, 2, _three_numbered),
    Indicator(ST, 3, _phrase(r'\bprocedure\b')),
    Indicator(ST, 3, _phrase(r'\bworkflow\b')),

    Indicator(OUT, 6, _phrase(r'\boutput format\b')),
    Indicator(OUT, 6, _phrase(r'\bresponse format\b')),
    Indicator(OUT, 5, _phrase(r'\bformat (your|the) (response|output|answer|reply)\b')),
    Indicator(OUT, 3, _phrase(r'\brespond (in|with|using)\b')),
    Indicator(OUT, 4, _phrase(
        r'\b(as|in) (a )?(json|markdown|csv|table|list|bullet|numbered|xml|html|yaml)\b')),

    Indicator(CON, 3, _phrase(r'\bdo not\b')),
    Indicator(CON, 3, _phrase(r'\bavoid\b')),
    Indicator(CON, 3, _phrase(r'\bnever\b')),
    Indicator(CON, 4, _phrase(r'\bmust not\b')),
    Indicator(CON, 3, _phrase(r'\brefrain from\b')),
    Indicator(CON, 3, _phrase(r'\bkeep .{2,30}(short|brief|concise|simple|minimal)\b')),

    Indicator(EX, 3, _phrase(r'\bexamples?\b')),
    Indicator(EX, 3, _phrase(r'\bfor instance\b')),
    Indicator(EX, 5, _input_output_pair),
    Indicator(EX, 4, _phrase(r'\bfew[- ]shot\b')),

    Indicator(TONE, 5, _phrase(r'\btone\b')),
    Indicator(TONE, 5, _phrase(r'\bwriting style\b')),
    Indicator(TONE, 2, _phrase(
        r'\b(professional|casual|formal|friendly|concise|verbose|academic|conversational)\b')),

    Indicator(AUD, 5, _phrase(r'\baudience\b')),
    Indicator(AUD, 4, _phrase(r'\btarget (reader|user|group)\b')),
    Indicator(AUD, 3, _phrase(r'\bintended for\b')),

    Indicator(INP, 5, _phrase(r'\binput data\b')),
    Indicator(INP, 4, _phrase(r'\bthe (data|text|content|document|code|file) (is|below|above|follows)\b')),

    Indicator(DEF, 4, _phrase(r'\bdefin(e|ition|itions)\b')),
    Indicator(DEF, 5, _phrase(r'\bglossary\b')),
)


def score_sections(block: str) -> dict[SectionKind, int]:
    """
    Sum indicator weights per section kind.

    Returns:
        Score for every classifiable kind (FALLBACK excluded), in enum order.
    """
    features = BlockFeatures.from_block(block)
    scores = {kind: 0 for kind in SectionKind if kind is not SectionKind.FALLBACK}
    if features.line_count == 0:
        return scores
    for indicator in INDICATORS:
        if indicator.test(features):
            scores[indicator.kind] += indicator.weight
    return scores


def infer_section(block: str) -> SectionKind | None:
    """
    Classify a block, or return None when no kind is confident enough.

    Example:
        >>> infer_section("You are a helpful assistant.")
        <SectionKind.ROLE: 'role'>
        >>> infer_section("I enjoy my workflow.") is None
        True
    """
    best, best_score = None, SECTION_SCORE_THRESHOLD
    for kind, score in score_sections(block).items():
        if score > best_score:
            best, best_score = kind, score
    return best


_FIRST_PERSON = re.compile(r"\bI\b|\bI'm\b|\bI've\b|\bmy\b|\bmyself\b")


def is_first_person_narrative(block: str) -> bool:
    """Bios and personal intros: too many I / my / myself to tag as a section."""
    return len(_FIRST_PERSON.findall(block)) >= FIRST_PERSON_MIN_HITS


# --- Title synthesis ---

_ROLE_TITLE = re.compile(r'you are (?:a |an )?(.{4,50}?)(?:\.|,|\n|$)')
_TASK_TITLE = re.compile(
    r'(?:create|write|generate|build|design|develop|analyze|review|summarize|explain|translate|'
    r'draft|compose|produce) (?:a |an |the )?(.{4,45}?)(?:\.|,|\n|$)'
)
_NEED_TITLE = re.compile(r'i (?:need|want) (?:you to |a |an |the )?(.{4,45}?)(?:\.|,|\n|$)')


def generate_title(full_text: str) -> str | None:
    """
    Synthesize a document title from a role, task or need phrase.

    Tried in order:
    1. "you are a senior data analyst who..."  -> "Senior Data Analyst"
    2. "write a cover letter for..."           -> "Cover Letter for ... Prompt"
    3. "I need a weekly meal plan."             -> "Weekly Meal Plan"

    Returns:
        Title-cased title, or None when no phrase matches.
    """
    lower = full_text.lower()

    m = _ROLE_TITLE.search(lower)
    if m:
        candidate = re.sub(r'\s+(?:who|that|with)\b.*$', '', m.group(1)).strip()
        if len(candidate) >= 4:
            return to_title_case(candidate)

    m = _TASK_TITLE.search(lower)
    if m:
        candidate = re.sub(r'\s+(?:that|which|for me)\b.*$', '', m.group(1)).strip()
        if len(candidate) >= 4:
            return to_title_case(candidate) + ' Prompt'

    m = _NEED_TITLE.search(lower)
    if m:
        candidate = re.sub(r'\s+(?:that|which|for me)\b.*$', '', m.group(1)).strip()
        if len(candidate) >= 4:
            return to_title_case(candidate)

    return None
