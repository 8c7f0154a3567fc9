import logging
import posixpath
from collections import deque
from typing import Iterable, Optional, Sequence, Set, Union

from ..models.dependency_graph import DependencyGraph
from ..models.file_node import FileType
from ..models.impact_analysis import ChangedFile, ImpactAnalysis
from ..parser.file_classifier import FileClassifier
from ..parser.path_resolver import normalize_path

logger = logging.getLogger(__name__)


class ImpactAnalyzer:
    """
    Computes which files and tests a change set affects.

    The analyzer only reads the graphs it is given; it keeps no state between
    calls and never raises for unknown or malformed paths.
    """

    # Companion test names: <base><suffix><extension>, next to the source or in a test directory below it
    TEST_SUFFIXES = ('.test', '.spec')
    TEST_EXTENSIONS = FileClassifier.TEST_FILE_EXTENSIONS
    TEST_SUBDIRECTORIES = ('__tests__', 'test', 'tests')

    def __init__(self,
                 project_root=None,
                 test_extensions: Sequence[str] = TEST_EXTENSIONS,
                 test_subdirectories: Sequence[str] = TEST_SUBDIRECTORIES):
        self.project_root = project_root
        self.test_extensions = tuple(test_extensions)
        self.test_subdirectories = tuple(test_subdirectories)

    def analyze(self,
                graph: DependencyGraph,
                changed_files: Iterable[Union[ChangedFile, str]],
                previous_graph: Optional[DependencyGraph] = None) -> ImpactAnalysis:
        """
        Analyze the impact of a set of changed files.

        Args:
            graph: A built dependency graph
            changed_files: Changed paths, plain or as ChangedFile values
            previous_graph: The graph as it was before the change set was applied.
                            Deleted files and the old side of renames are gone from
                            ``graph``; their dependents are looked up here instead.

        Returns:
            ImpactAnalysis with pairwise disjoint changed/direct/transitive sets
        """
        changed_files = list(changed_files)
        changed = self._normalize_changes(changed_files)
        vanished = self._vanished_paths(graph, previous_graph, changed_files, changed)

        def dependents_of(path: str) -> Set[str]:
            if path in graph.reverse_edges:
                return graph.reverse_edges[path]
            if previous_graph is not None:
                return previous_graph.reverse_edges.get(path, set())
            return set()

        # Files importing a changed file
        direct: Set[str] = set()
        for changed_file in changed | vanished:
            direct |= dependents_of(changed_file)
        direct -= changed | vanished

        # Everything reachable further up the reverse edges
        transitive: Set[str] = set()
        visited = changed | vanished | direct
        queue = deque(sorted(direct))
        while queue:
            current = queue.popleft()
            for dependent in dependents_of(current):
                if dependent not in visited:
                    visited.add(dependent)
                    transitive.add(dependent)
                    queue.append(dependent)

        affected_tests = {path for path in visited - vanished if self._type_of(graph, path) == FileType.TEST}
        for changed_file in changed:
            if self._type_of(graph, changed_file) == FileType.SOURCE:
                affected_tests |= self.find_tests_for_source(graph, changed_file)

        test_coverage = {test: self.covered_sources(graph, test) for test in affected_tests}

        logger.debug(f"Impact of {len(changed)} changed files: {len(direct)} direct, "
                     f"{len(transitive)} transitive, {len(affected_tests)} tests")

        return ImpactAnalysis(
            changed_files=changed,
            directly_affected_files=direct,
            transitively_affected_files=transitive,
            affected_test_files=affected_tests,
            test_coverage=test_coverage,
        )

    def find_tests_for_source(self, graph: DependencyGraph, source_file: str) -> Set[str]:
        """
        Tests paired with a source file, by naming convention or by importing it.

        Convention matches count even without an import edge, which covers tests
        that reach the module through a re-exporting entry point.
        """
        tests = set()
        base_name = posixpath.splitext(posixpath.basename(source_file))[0]
        directory = posixpath.dirname(source_file)

        directories = [directory] + [posixpath.join(directory, sub) for sub in self.test_subdirectories]
        for test_dir in directories:
            for suffix in self.TEST_SUFFIXES:
                for extension in self.test_extensions:
                    candidate = posixpath.join(test_dir, f"{base_name}{suffix}{extension}")
                    if graph.type_of(candidate) == FileType.TEST:
                        tests.add(candidate)

        for dependent in graph.reverse_edges.get(source_file, ()):
            if graph.type_of(dependent) == FileType.TEST:
                tests.add(dependent)

        return tests

    @staticmethod
    def covered_sources(graph: DependencyGraph, test_file: str) -> Set[str]:
        """Source files a test imports directly."""
        node = graph.get_node(test_file)
        if node is None:
            return set()
        return {dep for dep in node.dependencies if graph.type_of(dep) == FileType.SOURCE}

    def _normalize_changes(self, changed_files: Iterable[Union[ChangedFile, str]]) -> Set[str]:
        normalized = set()
        for item in changed_files:
            path = item.path if isinstance(item, ChangedFile) else item
            path = normalize_path(path, self.project_root)
            if path:
                normalized.add(path)
        return normalized

    @staticmethod
    def _type_of(graph: DependencyGraph, path: str) -> Optional[FileType]:
        # Changed files missing from a stale graph still get a type from their name
        return graph.type_of(path) or FileClassifier.classify(path)

    def _vanished_paths(self,
                        graph: DependencyGraph,
                        previous_graph: Optional[DependencyGraph],
                        changed_files: Iterable[Union[ChangedFile, str]],
                        changed: Set[str]) -> Set[str]:
        """Changed paths and renamed-from paths that only the previous graph still has."""
        if previous_graph is None:
            return set()

        candidates = set(changed)
        for item in changed_files:
            if isinstance(item, ChangedFile) and item.old_path:
                old_path = normalize_path(item.old_path, self.project_root)
                if old_path:
                    candidates.add(old_path)

        return {path for path in candidates if previous_graph.has_node(path) and not graph.has_node(path)}
