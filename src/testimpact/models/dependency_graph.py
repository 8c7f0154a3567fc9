from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from ..errors import GraphInvariantError
from .file_node import FileNode, FileType


@dataclass
class Diagnostic:
    """A recoverable per-file problem recorded while building the graph."""
    path: str
    kind: str  # read_error, parse_fallback, extraction_failed, unresolved
    message: str
    specifier: Optional[str] = None


@dataclass
class DependencyGraph:
    """
    File-level dependency graph with forward and reverse adjacency.

    ``edges[p]`` and ``reverse_edges[p]`` are the very same set objects as
    ``nodes[p].dependencies`` and ``nodes[p].dependents``. Every mutation goes
    through the methods below so the two maps stay exact inverses.
    """
    nodes: Dict[str, FileNode] = field(default_factory=dict)
    edges: Dict[str, Set[str]] = field(default_factory=dict)
    reverse_edges: Dict[str, Set[str]] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list, compare=False, repr=False)

    def add_node(self, path: str, file_type: FileType = FileType.SOURCE,
                 last_modified: Optional[float] = None) -> FileNode:
        """Register a file with empty adjacency. Adding an existing key is a defect."""
        if path in self.nodes:
            raise GraphInvariantError(f"Duplicate node key: {path}")
        node = FileNode(path=path, type=file_type, last_modified=last_modified)
        self.nodes[path] = node
        self.edges[path] = node.dependencies
        self.reverse_edges[path] = node.dependents
        return node

    def has_node(self, path: str) -> bool:
        return path in self.nodes

    def get_node(self, path: str) -> Optional[FileNode]:
        return self.nodes.get(path)

    def add_edge(self, source: str, target: str) -> None:
        """Record that ``source`` imports ``target``."""
        if source not in self.nodes or target not in self.nodes:
            raise GraphInvariantError(f"Edge {source} -> {target} references an unknown node")
        self.edges[source].add(target)
        self.reverse_edges[target].add(source)

    def remove_edge(self, source: str, target: str) -> None:
        self.edges.get(source, set()).discard(target)
        self.reverse_edges.get(target, set()).discard(source)

    def clear_dependencies(self, path: str) -> None:
        """Drop every outgoing edge of ``path``."""
        for target in list(self.edges.get(path, ())):
            self.remove_edge(path, target)

    def set_dependencies(self, path: str, dependencies: Iterable[str]) -> None:
        """Replace the outgoing edges of ``path``, removing stale ones first."""
        self.clear_dependencies(path)
        for target in dependencies:
            self.add_edge(path, target)

    def remove_node(self, path: str) -> Optional[FileNode]:
        """Remove a file together with all edges touching it."""
        if path not in self.nodes:
            return None
        self.clear_dependencies(path)
        for dependent in list(self.reverse_edges[path]):
            self.remove_edge(dependent, path)
        del self.edges[path]
        del self.reverse_edges[path]
        return self.nodes.pop(path)

    def files_of_type(self, file_type: FileType) -> Set[str]:
        return {path for path, node in self.nodes.items() if node.type == file_type}

    def type_of(self, path: str) -> Optional[FileType]:
        node = self.nodes.get(path)
        return node.type if node else None

    def copy(self) -> "DependencyGraph":
        """Independent copy with its own nodes and adjacency sets."""
        clone = DependencyGraph()
        for path, node in self.nodes.items():
            copied = clone.add_node(path, node.type, node.last_modified)
            copied.specifiers = list(node.specifiers)
        for path, targets in self.edges.items():
            for target in targets:
                clone.add_edge(path, target)
        clone.diagnostics = list(self.diagnostics)
        return clone

    def check_invariants(self) -> None:
        """Assert that forward and reverse adjacency are exact mutual inverses."""
        if set(self.edges) != set(self.nodes) or set(self.reverse_edges) != set(self.nodes):
            raise GraphInvariantError("Adjacency keys do not match node keys")

        for path, node in self.nodes.items():
            if node.path != path:
                raise GraphInvariantError(f"Node stored under {path} claims path {node.path}")
            if self.edges[path] is not node.dependencies or self.reverse_edges[path] is not node.dependents:
                raise GraphInvariantError(f"Adjacency of {path} detached from its node")

            for target in self.edges[path]:
                if target not in self.nodes:
                    raise GraphInvariantError(f"Edge {path} -> {target} points outside the graph")
                if path not in self.reverse_edges[target]:
                    raise GraphInvariantError(f"Missing reverse edge {target} <- {path}")

            for source in self.reverse_edges[path]:
                if source not in self.nodes:
                    raise GraphInvariantError(f"Reverse edge {path} <- {source} points outside the graph")
                if path not in self.edges[source]:
                    raise GraphInvariantError(f"Missing forward edge {source} -> {path}")

    def stats(self) -> Dict[str, float]:
        """Counts per file type and dependency totals."""
        total_files = len(self.nodes)
        total_dependencies = sum(len(deps) for deps in self.edges.values())
        return {
            "total_files": total_files,
            "source_files": len(self.files_of_type(FileType.SOURCE)),
            "test_files": len(self.files_of_type(FileType.TEST)),
            "config_files": len(self.files_of_type(FileType.CONFIG)),
            "asset_files": len(self.files_of_type(FileType.ASSET)),
            "total_dependencies": total_dependencies,
            "average_dependencies": total_dependencies / total_files if total_files else 0,
        }

    @property
    def file_count(self) -> int:
        return len(self.nodes)
