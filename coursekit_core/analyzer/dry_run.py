"""
DryRunSimulator - static analysis of course execution paths.

Explores every scene-to-scene walk a course can statically produce without
a live store or real events, and reports on the same pass:

- execution paths (complete walks and walks that loop back on themselves)
- state mutations (``setVar``/``incVar``/``addScore`` sites)
- event -> action mapping per trigger
- coverage (reachable scenes, referenced nodes, trigger shapes, action mix)
- dead code (unreachable scenes, unused nodes, delay-only triggers)
- complexity metrics

The analyzer cannot know which branch a live condition would take, so both
``then`` and ``else`` transitions are always followed. Loop detection is
path-local: the same scene may appear on many independent paths.

The simulator holds no state between calls and never mutates its input.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import networkx as nx

from coursekit_core.actions import (
    SCORE_PATH,
    AddScoreAction,
    DelayAction,
    GotoSceneAction,
    IncVarAction,
    ParallelAction,
    SequenceAction,
    SetVarAction,
    action_tag,
    iter_actions,
    optional_target,
)
from coursekit_core.analyzer.models import (
    ActionCoverage,
    Complexity,
    CoverageReport,
    DeadCode,
    DeadTrigger,
    DryRunResult,
    EventActionMapping,
    ExecutionPath,
    ExecutionStep,
    NodeCoverage,
    SceneCoverage,
    StateMutation,
    StepType,
    TriggerCoverage,
)
from coursekit_core.analyzer.report import render_report
from coursekit_core.document import Course, Scene, Trigger
from coursekit_core.utils.logging import get_logger

logger = get_logger("core.analyzer")

DEFAULT_MAX_PATHS = 10_000


# ============================================================================
# Scene Graph
# ============================================================================


def goto_targets(actions: Iterable[Any]) -> list[str]:
    """``gotoScene`` targets in ``actions`` (composites included), first mention first."""
    targets: list[str] = []
    for action in iter_actions(list(actions)):
        if isinstance(action, GotoSceneAction) and action.scene_id not in targets:
            targets.append(action.scene_id)
    return targets


def next_scenes(scene: Scene) -> list[str]:
    """Every scene a ``gotoScene`` in any trigger of ``scene`` could lead to."""
    targets: list[str] = []
    for trigger in scene.triggers:
        for target in goto_targets(_branch_actions(trigger)):
            if target not in targets:
                targets.append(target)
    return targets


def build_scene_graph(course: Course) -> nx.DiGraph:
    """Directed scene-transition graph of ``course``.

    Declared scenes carry ``declared=True``; ``gotoScene`` targets that no
    scene declares are added with ``declared=False``. Successor order
    follows first mention in the document.
    """
    graph = nx.DiGraph()
    for scene in course.scenes:
        graph.add_node(
            scene.id,
            declared=True,
            node_count=len(scene.nodes),
            trigger_count=len(scene.triggers),
        )
    for scene in course.scenes:
        for target in next_scenes(scene):
            if target not in graph:
                graph.add_node(target, declared=False, node_count=0, trigger_count=0)
            graph.add_edge(scene.id, target)
    return graph


def _branch_actions(trigger: Trigger) -> list[Any]:
    return list(trigger.then) + list(trigger.otherwise or [])


def _is_significant(actions: Iterable[Any]) -> bool:
    """True when at least one action does more than wait."""
    for action in actions:
        if isinstance(action, DelayAction):
            continue
        if isinstance(action, (SequenceAction, ParallelAction)):
            if _is_significant(action.actions):
                return True
            continue
        return True
    return False


def _percent(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


# ============================================================================
# Simulator
# ============================================================================


@dataclass
class _Analysis:
    """Scratch state for a single ``analyze`` call."""

    course: Course
    graph: nx.DiGraph
    max_paths: int
    visited_scenes: set[str] = field(default_factory=set)
    paths: list[ExecutionPath] = field(default_factory=list)
    unknown_targets: list[str] = field(default_factory=list)
    truncated: bool = False

    def next_path_id(self) -> str:
        return f"path-{len(self.paths) + 1}"


class DryRunSimulator:
    """Static analyzer for course documents.

    Usage:
        simulator = DryRunSimulator()
        result = simulator.analyze(course)
        print(simulator.generate_report(result))
    """

    def __init__(self, max_paths: int = DEFAULT_MAX_PATHS):
        """Initialize the simulator.

        Args:
            max_paths: Stop enumerating paths after this many (``truncated`` is set)
        """
        self.max_paths = max_paths

    def analyze(self, document: Course | dict[str, Any]) -> DryRunResult:
        """Run the full dry-run analysis on a course."""
        course = Course.coerce(document)
        analysis = _Analysis(
            course=course,
            graph=build_scene_graph(course),
            max_paths=self.max_paths,
        )

        event_action_map = self._collect_event_action_map(course)
        referenced_nodes = self._collect_referenced_nodes(course)
        mutations = self._collect_mutations(course)

        self._simulate_paths(analysis)

        coverage = self._calculate_coverage(course, analysis, referenced_nodes)
        dead_code = self._find_dead_code(course, analysis, referenced_nodes)
        complexity = self._calculate_complexity(course, analysis.paths)

        logger.debug(
            f"Dry run of '{course.meta.id}': {len(analysis.paths)} paths, "
            f"{coverage.scenes.reachable}/{coverage.scenes.total} scenes reachable"
        )

        return DryRunResult(
            paths=analysis.paths,
            mutations=mutations,
            event_action_map=event_action_map,
            coverage=coverage,
            dead_code=dead_code,
            complexity=complexity,
            unknown_scene_targets=analysis.unknown_targets,
            truncated=analysis.truncated,
        )

    def generate_report(self, result: DryRunResult) -> str:
        """Render ``result`` as a human-readable text report."""
        return render_report(result)

    # ------------------------------------------------------------------
    # Linear scans
    # ------------------------------------------------------------------

    def _collect_event_action_map(self, course: Course) -> list[EventActionMapping]:
        mappings = []
        for scene in course.scenes:
            for trigger in scene.triggers:
                tags: list[str] = []
                for action in iter_actions(_branch_actions(trigger)):
                    tag = action_tag(action)
                    if tag not in tags:
                        tags.append(tag)
                mappings.append(
                    EventActionMapping(
                        event=trigger.on.event,
                        target=trigger.on.target or None,
                        scene_id=scene.id,
                        actions=tags,
                        conditions=len(trigger.conditions or []),
                    )
                )
        return mappings

    def _collect_referenced_nodes(self, course: Course) -> set[str]:
        """``scene:node`` keys named as a trigger target or an action target."""
        referenced = set()
        for scene in course.scenes:
            for trigger in scene.triggers:
                if trigger.on.target:
                    referenced.add(f"{scene.id}:{trigger.on.target}")
                for action in iter_actions(_branch_actions(trigger)):
                    target = optional_target(action)
                    if target:
                        referenced.add(f"{scene.id}:{target}")
        return referenced

    def _collect_mutations(self, course: Course) -> list[StateMutation]:
        mutations = []
        for scene in course.scenes:
            for index, trigger in enumerate(scene.triggers):
                for action in iter_actions(_branch_actions(trigger)):
                    if isinstance(action, (SetVarAction, IncVarAction)):
                        path = action.path
                    elif isinstance(action, AddScoreAction):
                        path = SCORE_PATH
                    else:
                        continue
                    mutations.append(
                        StateMutation(
                            path=path,
                            action=action_tag(action),
                            scene_id=scene.id,
                            trigger_index=index,
                        )
                    )
        return mutations

    # ------------------------------------------------------------------
    # Path exploration
    # ------------------------------------------------------------------

    def _simulate_paths(self, analysis: _Analysis) -> None:
        """Depth-first walk from the start scene.

        Uses an explicit stack so long scene chains do not hit the
        interpreter's recursion limit. Branches are explored in
        first-mention order, matching a recursive walk.
        """
        course = analysis.course
        start = course.start_scene_id
        stack: list[tuple[str, tuple[ExecutionStep, ...], frozenset[str]]] = [
            (start, (), frozenset())
        ]

        while stack:
            if len(analysis.paths) >= analysis.max_paths:
                analysis.truncated = True
                logger.warning(
                    f"Dry run of '{course.meta.id}' stopped after {analysis.max_paths} paths"
                )
                return

            scene_id, steps, on_path = stack.pop()
            scene = course.get_scene(scene_id)

            if scene is None:
                if scene_id not in analysis.unknown_targets:
                    analysis.unknown_targets.append(scene_id)
                self._record_path(analysis, steps, end_scene=scene_id)
                continue

            analysis.visited_scenes.add(scene_id)

            if scene_id in on_path:
                self._record_path(analysis, steps, end_scene=scene_id, loop=True)
                continue

            successors = list(analysis.graph.successors(scene_id))
            step = ExecutionStep(
                type=StepType.SCENE_ENTER,
                scene_id=scene_id,
                details={"nodeCount": len(scene.nodes)},
                possible_next_steps=successors,
            )
            walked = steps + (step,)

            if not successors:
                self._record_path(analysis, walked, end_scene=scene_id, complete=True)
                continue

            branch_path = on_path | {scene_id}
            for successor in reversed(successors):
                stack.append((successor, walked, branch_path))

    def _record_path(
        self,
        analysis: _Analysis,
        steps: tuple[ExecutionStep, ...],
        end_scene: Optional[str],
        complete: bool = False,
        loop: bool = False,
    ) -> None:
        analysis.paths.append(
            ExecutionPath(
                id=analysis.next_path_id(),
                steps=list(steps),
                start_scene=analysis.course.start_scene_id,
                end_scene=end_scene,
                is_complete=complete,
                loop_detected=loop,
            )
        )

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def _calculate_coverage(
        self,
        course: Course,
        analysis: _Analysis,
        referenced_nodes: set[str],
    ) -> CoverageReport:
        total_scenes = len(course.scenes)
        reachable = len(analysis.visited_scenes)

        declared_nodes = [f"{scene.id}:{node_id}" for scene in course.scenes for node_id in scene.node_ids]
        referenced = sum(1 for key in declared_nodes if key in referenced_nodes)

        triggers = [trigger for scene in course.scenes for trigger in scene.triggers]
        by_type: Counter[str] = Counter()
        for trigger in triggers:
            for action in iter_actions(_branch_actions(trigger)):
                by_type[action_tag(action)] += 1

        return CoverageReport(
            scenes=SceneCoverage(
                total=total_scenes,
                reachable=reachable,
                coverage=_percent(reachable, total_scenes),
            ),
            nodes=NodeCoverage(
                total=len(declared_nodes),
                referenced=referenced,
                coverage=_percent(referenced, len(declared_nodes)),
            ),
            triggers=TriggerCoverage(
                total=len(triggers),
                with_conditions=sum(1 for t in triggers if t.has_conditions),
                with_else=sum(1 for t in triggers if t.has_else),
            ),
            actions=ActionCoverage(
                total=sum(by_type.values()),
                by_type=dict(by_type),
            ),
        )

    def _find_dead_code(
        self,
        course: Course,
        analysis: _Analysis,
        referenced_nodes: set[str],
    ) -> DeadCode:
        unreachable = [scene.id for scene in course.scenes if scene.id not in analysis.visited_scenes]

        unused = [
            f"{scene.id}:{node_id}"
            for scene in course.scenes
            for node_id in scene.node_ids
            if f"{scene.id}:{node_id}" not in referenced_nodes
        ]

        dead_triggers = [
            DeadTrigger(scene_id=scene.id, trigger_index=index)
            for scene in course.scenes
            for index, trigger in enumerate(scene.triggers)
            if not _is_significant(trigger.then) and not _is_significant(trigger.otherwise or [])
        ]

        return DeadCode(
            unreachable_scenes=unreachable,
            unused_nodes=unused,
            dead_triggers=dead_triggers,
        )

    def _calculate_complexity(self, course: Course, paths: list[ExecutionPath]) -> Complexity:
        total_triggers = 0
        total_actions = 0
        total_branches = 0

        for scene in course.scenes:
            total_triggers += len(scene.triggers)
            for trigger in scene.triggers:
                total_actions += len(trigger.then)
                if trigger.otherwise is not None:
                    total_actions += len(trigger.otherwise)
                    total_branches += 1
                if trigger.has_conditions:
                    total_branches += 1

        lengths = [path.length for path in paths]
        average = sum(lengths) / len(lengths) if lengths else 0.0
        branching = total_branches / total_triggers if total_triggers else 0.0

        return Complexity(
            total_scenes=len(course.scenes),
            total_nodes=sum(len(scene.nodes) for scene in course.scenes),
            total_triggers=total_triggers,
            total_actions=total_actions,
            max_path_length=max(lengths, default=0),
            average_path_length=round(average, 2),
            branching_factor=round(branching, 2),
        )


# ============================================================================
# Convenience Functions
# ============================================================================


def dry_run(document: Course | dict[str, Any], max_paths: int = DEFAULT_MAX_PATHS) -> DryRunResult:
    """Analyze ``document`` with a fresh simulator."""
    return DryRunSimulator(max_paths=max_paths).analyze(document)


def dry_run_report(document: Course | dict[str, Any], max_paths: int = DEFAULT_MAX_PATHS) -> str:
    """Analyze ``document`` and render the text report."""
    simulator = DryRunSimulator(max_paths=max_paths)
    return simulator.generate_report(simulator.analyze(document))
