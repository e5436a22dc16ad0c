"""
Base Stage Classes

Defines the abstract base class for formatting stages, stage groups, and the
pipeline runner that applies them to prose segments.

Design Principles:
- Single Responsibility: Each stage does one rewrite well
- Open/Closed: Add new stages without modifying existing code
- Testable: Each stage can be unit tested in isolation on plain strings
- Stateless: A stage never stores anything between calls, and the pipeline
  returns everything it learned in a PipelineRun instead of keeping it.
  One pipeline instance can therefore serve concurrent callers.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any

from smartformat.logging_config import debug_log, error
from smartformat.segments import Segment, reassemble, segment_document


@dataclass(frozen=True)
class StageResult:
    """
    Result of one stage on one prose segment.

    Attributes:
        text: The processed text
        changes_made: Number of rewrites performed (0 means text is unchanged)
        metadata: Additional info about the processing
    """
    text: str
    changes_made: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def applied(self) -> bool:
        return self.changes_made > 0


class BaseStage(ABC):
    """
    Abstract base class for text-transform stages.

    All stages must implement `process`, which takes prose text and returns a
    StageResult. A stage that finds nothing to do must return the input
    unchanged with changes_made=0.

    Attributes:
        name: Human-readable name for logging and stats
        label: Transform-log label reported in the format type, or None for
               untracked normalizers (bullet glyphs, dividers, ...)
        enabled: Whether this stage is active

    Example:
        class ShoutStage(BaseStage):
            name = "Shout"
            label = "Emphasis"

            def process(self, text: str) -> StageResult:
                shouted = text.replace("!", "!!")
                return StageResult(text=shouted, changes_made=text.count("!"))
    """

    name: str = "Base Stage"
    label: str | None = None
    enabled: bool = True

    @abstractmethod
    def process(self, text: str) -> StageResult:
        """
        Process the input text and return the rewritten version.

        Args:
            text: Prose text (never contains fenced code)

        Returns:
            StageResult containing rewritten text and change count
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(enabled={self.enabled})"


class FunctionStage(BaseStage):
    """
    Wraps a plain `str -> str` normalizer as an untracked stage.

    Used for rewrites that never contribute to the format type (bullet glyph
    normalization, dividers, blockquote spacing).
    """

    def __init__(self, name: str, fn, label: str | None = None):
        self.name = name
        self.label = label
        self._fn = fn

    def process(self, text: str) -> StageResult:
        result = self._fn(text)
        return StageResult(text=result, changes_made=int(result != text))


@dataclass(frozen=True)
class StageGroup:
    """
    A named, ordered group of stages (e.g. "List Formatting").

    Attributes:
        name: Group name used in logs
        stages: Stages executed in order
    """
    name: str
    stages: tuple[BaseStage, ...]


@dataclass(frozen=True)
class PipelineRun:
    """
    Outcome of one full pass of the pipeline.

    Attributes:
        text: Reassembled document after all groups
        transforms: Transform-log labels in the order they fired (may repeat)
        stats: Per-stage counters: changes, time_ms, and error if it raised
    """
    text: str
    transforms: tuple[str, ...] = ()
    stats: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def total_changes(self) -> int:
        return sum(s.get('changes', 0) for s in self.stats.values())


class StagePipeline:
    """
    Runs stage groups over the prose segments of a document.

    Each stage is applied to every prose segment in turn; code segments are
    never passed to a stage. The transform log is folded into an immutable
    tuple and returned with the text, never stored on the pipeline.

    Attributes:
        groups: Ordered stage groups

    Example:
        pipeline = StagePipeline([
            StageGroup("Grammar Correction", (ContractionFixer(), PronounFixer())),
        ])
        run = pipeline.run("i dont know")
        print(run.text, run.transforms)
    """

    def __init__(self, groups: list[StageGroup] | None = None):
        """
        Initialize the pipeline with a list of stage groups.

        Args:
            groups: StageGroup instances. If None, an empty pipeline is created.
        """
        self.groups: list[StageGroup] = list(groups or [])

    def add_group(self, group: StageGroup) -> 'StagePipeline':
        """
        Add a stage group to the end of the pipeline.

        Returns:
            Self for method chaining
        """
        self.groups.append(group)
        return self

    @property
    def stages(self) -> list[BaseStage]:
        return [stage for group in self.groups for stage in group.stages]

    def run(self, text: str) -> PipelineRun:
        """
        Run all enabled stages on the prose segments of text.

        Args:
            text: Whitespace-normalized document

        Returns:
            PipelineRun with the reassembled text, transform log and stats
        """
        segments = segment_document(text)
        transforms: tuple[str, ...] = ()
        stats: dict[str, dict[str, Any]] = {}
        pipeline_start = time.perf_counter()

        for group in self.groups:
            for stage in group.stages:
                if not stage.enabled:
                    debug_log(f"[STAGES] Skipping disabled: {stage.name}")
                    continue
                segments, labels, stage_stats = self._apply_stage(stage, segments)
                transforms += labels
                stats[stage.name] = stage_stats

        elapsed_ms = (time.perf_counter() - pipeline_start) * 1000
        debug_log(f"[STAGES] Pass complete: {len(transforms)} stage hits "
                  f"in {elapsed_ms:.1f}ms")

        return PipelineRun(text=reassemble(segments), transforms=transforms, stats=stats)

    @staticmethod
    def _apply_stage(
        stage: BaseStage, segments: list[Segment]
    ) -> tuple[list[Segment], tuple[str, ...], dict[str, Any]]:
        """Apply one stage to every prose segment, collecting labels and stats."""
        start_time = time.perf_counter()
        out: list[Segment] = []
        labels: tuple[str, ...] = ()
        changes = 0
        failure = None

        for segment in segments:
            if not segment.is_prose:
                out.append(segment)
                continue
            try:
                result = stage.process(segment.content)
            except Exception as e:
                # A broken stage must not take the document down with it
                error(f"[STAGES] Error in {stage.name}: {e}", exc_info=True)
                failure = str(e)
                out.append(segment)
                continue
            changes += result.changes_made
            if result.applied and stage.label:
                labels += (stage.label,)
            out.append(replace(segment, content=result.text))

        stage_stats: dict[str, Any] = {
            'changes': changes,
            'time_ms': (time.perf_counter() - start_time) * 1000,
        }
        if failure is not None:
            stage_stats['error'] = failure
        if changes:
            debug_log(f"[STAGES] {stage.name}: {changes} changes")
        return out, labels, stage_stats

    def __repr__(self) -> str:
        names = [g.name for g in self.groups]
        return f"StagePipeline({names})"
