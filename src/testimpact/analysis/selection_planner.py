import logging

from ..models.dependency_graph import DependencyGraph
from ..models.file_node import FileType
from ..models.impact_analysis import ImpactAnalysis, SelectionPlan
from ..parser.file_classifier import FileClassifier

logger = logging.getLogger(__name__)


class TestSelectionPlanner:
    """Turns an impact analysis into the list of tests a runner should execute."""

    # Keeps pytest from collecting this class
    __test__ = False

    def __init__(self, force_full_run: bool = False):
        self.force_full_run = force_full_run

    def plan(self, graph: DependencyGraph, analysis: ImpactAnalysis) -> SelectionPlan:
        changed = sorted(analysis.changed_files)

        if self.force_full_run:
            return self._full_plan(graph, changed, "Force full run requested")

        if not changed:
            return SelectionPlan(strategy="none", reason="No changes detected")

        changed_configs = [
            path for path in changed
            if (graph.type_of(path) or FileClassifier.classify(path)) == FileType.CONFIG
        ]
        if changed_configs:
            # Tooling configuration can change the outcome of any test
            return self._full_plan(graph, changed, f"Configuration changed: {', '.join(changed_configs)}")

        tests = sorted(analysis.affected_test_files)
        return SelectionPlan(
            strategy="incremental" if tests else "none",
            tests_to_run=tests,
            affected_files=changed,
            reason=f"{len(changed)} files changed, {len(tests)} tests affected",
        )

    def _full_plan(self, graph: DependencyGraph, changed, reason: str) -> SelectionPlan:
        logger.info(f"Selecting all tests: {reason}")
        return SelectionPlan(
            strategy="full",
            tests_to_run=sorted(graph.files_of_type(FileType.TEST)),
            affected_files=changed,
            reason=reason,
        )
