import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..models.dependency_graph import DependencyGraph, Diagnostic
from ..models.file_node import FileType
from ..models.impact_analysis import ChangedFile, ChangeOperation
from ..parser.dependency_extractor import DependencyExtractor, ExtractionStrategy
from ..parser.file_classifier import FileClassifier
from ..parser.path_resolver import DEFAULT_EXTENSIONS, PathResolver, normalize_path
from ..processing.parallel_reader import ParallelFileReader

logger = logging.getLogger(__name__)

# Repo-relative paths, or paths mapped to their content
FileSet = Union[Iterable[str], Mapping]


@dataclass
class FileScan:
    """Private per-file result of the edge pass, merged into the graph afterwards."""
    path: str
    specifiers: List[str] = field(default_factory=list)
    last_modified: Optional[float] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)


class DependencyGraphBuilder:
    """
    Builds and maintains a file-level DependencyGraph.

    A build runs in two passes: every file becomes a node first, then each
    file's specifiers are extracted and resolved into edges. Reads happen on a
    thread pool; the graph itself is only mutated from the calling thread after
    all reads finished.
    """

    def __init__(self,
                 project_root=None,
                 reader=None,
                 extensions: Sequence[str] = DEFAULT_EXTENSIONS,
                 aliases: Optional[Dict[str, str]] = None,
                 max_workers: Optional[int] = None,
                 extractor: Optional[DependencyExtractor] = None):
        """
        Initialize the builder.

        Args:
            project_root: Repository root used for reading files and relativizing paths
            reader: Optional callback returning a file's content from its repo-relative path
            extensions: Ordered extensions the resolver tries for extensionless specifiers
            aliases: Specifier prefixes mapped to repo-relative directories
            max_workers: Maximum number of reader threads
            extractor: Specifier extractor, mainly for tests
        """
        self.project_root = project_root
        self.extensions = tuple(extensions)
        self.aliases = dict(aliases or {})
        self.max_workers = max_workers
        self.extractor = extractor or DependencyExtractor()
        self.file_reader = ParallelFileReader(project_root, reader=reader, max_workers=max_workers)

    def build(self, file_set: FileSet) -> DependencyGraph:
        """
        Build a graph from scratch.

        Args:
            file_set: Repo-relative paths read through the builder's reader,
                      or a mapping of path to content

        Returns:
            A fully linked DependencyGraph
        """
        start_time = time.time()
        reader = self._reader_for(file_set)
        paths = self._normalize_file_set(file_set)

        graph = DependencyGraph()

        # Node pass: every file is known before any edge is added
        for path in paths:
            graph.add_node(path, FileClassifier.classify(path))

        # Edge pass
        scans = self._scan_files(graph, paths, reader)
        self._apply_scans(graph, scans)
        self._link_all(graph)

        graph.check_invariants()

        elapsed_time = time.time() - start_time
        logger.info(f"Built dependency graph with {graph.file_count} files and "
                    f"{sum(len(deps) for deps in graph.edges.values())} edges in {elapsed_time:.2f} seconds")
        return graph

    def update_file(self, graph: DependencyGraph, path: str, content: Optional[str] = None) -> DependencyGraph:
        """
        Re-scan a single file and patch its edges.

        Args:
            graph: Graph to update in place
            path: File that changed; added to the graph if it is not a node yet
            content: New content, read through the builder's reader when None
        """
        path = normalize_path(path, self.project_root)
        if not path:
            return graph

        node_added = self._ensure_node(graph, path)

        if content is None:
            reader = self.file_reader
        else:
            reader = ParallelFileReader(reader=lambda _path: content, max_workers=1)
        self._apply_scans(graph, self._scan_files(graph, [path], reader))

        if node_added:
            # A new file can satisfy specifiers that previously resolved nowhere
            self._link_all(graph)
        else:
            self._link(graph, path, self._resolver_for(graph))

        graph.check_invariants()
        return graph

    def remove_file(self, graph: DependencyGraph, path: str) -> bool:
        """Drop a deleted file and every edge touching it."""
        path = normalize_path(path, self.project_root)
        if not self._remove(graph, path):
            return False

        # Importers of the removed file may now resolve to another candidate
        self._link_all(graph)
        graph.check_invariants()
        return True

    def apply_changes(self, graph: DependencyGraph, changes: Iterable[Union[ChangedFile, str]]) -> DependencyGraph:
        """
        Bring the graph up to date with a change detector's output.

        Added and modified files are re-scanned, deleted files removed, and
        renamed files removed under their old path and scanned under the new one.
        """
        to_scan = []
        node_set_changed = False

        for change in changes:
            if not isinstance(change, ChangedFile):
                change = ChangedFile(path=str(change))
            path = normalize_path(change.path, self.project_root)

            if change.operation == ChangeOperation.DELETED:
                node_set_changed |= self._remove(graph, path)
                continue

            if change.operation == ChangeOperation.RENAMED and change.old_path:
                node_set_changed |= self._remove(graph, normalize_path(change.old_path, self.project_root))

            if path:
                node_set_changed |= self._ensure_node(graph, path)
                to_scan.append(path)

        self._apply_scans(graph, self._scan_files(graph, sorted(set(to_scan)), self.file_reader))

        if node_set_changed:
            self._link_all(graph)
        else:
            resolver = self._resolver_for(graph)
            for path in sorted(set(to_scan)):
                self._link(graph, path, resolver)

        graph.check_invariants()
        return graph

    def refresh(self, graph: DependencyGraph, file_set: FileSet) -> DependencyGraph:
        """
        Incrementally rebuild ``graph`` for the current file set.

        Vanished files are removed, new files added, and only files whose
        modification time differs from the recorded one are re-scanned.
        """
        reader = self._reader_for(file_set)
        paths = self._normalize_file_set(file_set)
        wanted = set(paths)

        removed = [path for path in sorted(graph.nodes) if path not in wanted]
        for path in removed:
            self._remove(graph, path)

        added = [path for path in paths if self._ensure_node(graph, path)]
        added_set = set(added)

        stale = [
            path for path in paths
            if path in added_set or self._is_stale(graph.nodes[path].last_modified, reader.last_modified(path))
        ]
        self._apply_scans(graph, self._scan_files(graph, stale, reader))

        if removed or added:
            self._link_all(graph)
        else:
            resolver = self._resolver_for(graph)
            for path in stale:
                self._link(graph, path, resolver)

        graph.check_invariants()
        logger.info(f"Refreshed dependency graph: {len(added)} added, {len(removed)} removed, "
                    f"{len(stale)} re-scanned")
        return graph

    def _reader_for(self, file_set: FileSet) -> ParallelFileReader:
        if isinstance(file_set, Mapping):
            contents = {normalize_path(path, self.project_root): content for path, content in file_set.items()}
            return ParallelFileReader(reader=contents.__getitem__, max_workers=self.max_workers)
        return self.file_reader

    def _normalize_file_set(self, file_set: FileSet) -> List[str]:
        paths = {normalize_path(path, self.project_root) for path in file_set}
        paths.discard('')
        return sorted(paths)

    def _resolver_for(self, graph: DependencyGraph) -> PathResolver:
        return PathResolver(graph.nodes.keys(), extensions=self.extensions, aliases=self.aliases)

    def _ensure_node(self, graph: DependencyGraph, path: str) -> bool:
        """Add ``path`` as a node if needed; True when the node set grew."""
        if graph.has_node(path):
            graph.nodes[path].type = FileClassifier.classify(path)
            return False
        graph.add_node(path, FileClassifier.classify(path))
        return True

    def _remove(self, graph: DependencyGraph, path: str) -> bool:
        if graph.remove_node(path) is None:
            return False
        graph.diagnostics[:] = [d for d in graph.diagnostics if d.path != path]
        return True

    def _scan_files(self, graph: DependencyGraph, paths: List[str], reader: ParallelFileReader) -> Dict[str, FileScan]:
        """Read and extract each file. Touches no graph state besides node types."""
        scannable = [path for path in paths if graph.nodes[path].type != FileType.ASSET]
        reads = reader.read_files(scannable)

        scans = {}
        for path in paths:
            if path not in reads:
                # Assets take part in the graph but are never parsed
                scans[path] = FileScan(path=path, last_modified=reader.last_modified(path))
                continue

            read = reads[path]
            scan = FileScan(path=path, last_modified=read.last_modified)
            if read.error is not None:
                scan.diagnostics.append(Diagnostic(path=path, kind='read_error', message=read.error))
                scans[path] = scan
                continue

            result = self.extractor.extract_with_strategy(read.content, path)
            scan.specifiers = result.specifiers
            if result.strategy == ExtractionStrategy.FALLBACK and result.error:
                scan.diagnostics.append(Diagnostic(path=path, kind='parse_fallback', message=result.error))
            elif result.strategy == ExtractionStrategy.FAILED:
                logger.warning(f"No dependencies extracted from {path}: {result.error}")
                scan.diagnostics.append(Diagnostic(path=path, kind='extraction_failed', message=result.error or ''))
            scans[path] = scan

        return scans

    def _apply_scans(self, graph: DependencyGraph, scans: Dict[str, FileScan]) -> None:
        # A fresh scan supersedes every earlier diagnostic of that file
        graph.diagnostics[:] = [d for d in graph.diagnostics if d.path not in scans]
        for path in sorted(scans):
            scan = scans[path]
            node = graph.nodes[path]
            node.specifiers = list(scan.specifiers)
            node.last_modified = scan.last_modified
            graph.diagnostics.extend(scan.diagnostics)

    def _link_all(self, graph: DependencyGraph) -> None:
        graph.diagnostics[:] = [d for d in graph.diagnostics if d.kind != 'unresolved']
        resolver = self._resolver_for(graph)
        for path in sorted(graph.nodes):
            self._link(graph, path, resolver, drop_previous=False)

    def _link(self, graph: DependencyGraph, path: str, resolver: PathResolver, drop_previous: bool = True) -> None:
        """Resolve the recorded specifiers of ``path`` and replace its outgoing edges."""
        if drop_previous:
            graph.diagnostics[:] = [
                d for d in graph.diagnostics if not (d.path == path and d.kind == 'unresolved')
            ]

        resolved = []
        for specifier in graph.nodes[path].specifiers:
            target = resolver.resolve(specifier, path)
            if target is not None:
                resolved.append(target)
            elif not resolver.is_external(specifier):
                logger.debug(f"Unresolved import '{specifier}' in {path}")
                graph.diagnostics.append(Diagnostic(
                    path=path,
                    kind='unresolved',
                    message=f"No file found for '{specifier}'",
                    specifier=specifier,
                ))

        graph.set_dependencies(path, resolved)

    @staticmethod
    def _is_stale(recorded: Optional[float], current: Optional[float]) -> bool:
        if recorded is None or current is None:
            return True
        return recorded != current
