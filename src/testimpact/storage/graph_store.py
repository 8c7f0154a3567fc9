import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import GraphInvariantError, GraphStoreError
from ..models.dependency_graph import DependencyGraph
from ..models.file_node import FileType
from ..processing.atomic_writer import AtomicWriter

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def graph_to_dict(graph: DependencyGraph) -> Dict[str, Any]:
    """Serialize nodes and forward edges. Reverse edges are derived data and never stored."""
    nodes = [
        {
            "path": path,
            "type": node.type.value,
            "last_modified": node.last_modified,
            "specifiers": list(node.specifiers),
        }
        for path, node in sorted(graph.nodes.items())
    ]
    edges = [
        {"from": path, "to": sorted(targets)}
        for path, targets in sorted(graph.edges.items())
        if targets
    ]
    return {"version": FORMAT_VERSION, "nodes": nodes, "edges": edges}


def graph_from_dict(data: Dict[str, Any]) -> DependencyGraph:
    """
    Restore a graph, recomputing reverse edges from the forward ones.

    Raises:
        GraphStoreError: If the document is malformed or inconsistent
    """
    if not isinstance(data, dict) or data.get("version") != FORMAT_VERSION:
        raise GraphStoreError(f"Unsupported graph document version: {data.get('version') if isinstance(data, dict) else None}")

    graph = DependencyGraph()
    try:
        for node_data in data.get("nodes", []):
            node = graph.add_node(
                node_data["path"],
                FileType(node_data.get("type", FileType.SOURCE.value)),
                node_data.get("last_modified"),
            )
            node.specifiers = list(node_data.get("specifiers", []))

        for edge_data in data.get("edges", []):
            for target in edge_data["to"]:
                graph.add_edge(edge_data["from"], target)

        graph.check_invariants()
    except (KeyError, TypeError, ValueError, GraphInvariantError) as e:
        raise GraphStoreError(f"Corrupt graph document: {e}") from e

    return graph


class GraphStore:
    """Persists a DependencyGraph as JSON between runs."""

    def __init__(self, path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, graph: DependencyGraph) -> bool:
        """
        Write the graph atomically.

        Returns:
            bool: True if successful, False otherwise
        """
        saved = AtomicWriter.write_json(self.path, graph_to_dict(graph))
        if saved:
            logger.info(f"Saved dependency graph with {graph.file_count} files to {self.path}")
        return saved

    def load(self) -> Optional[DependencyGraph]:
        """
        Load a previously saved graph.

        Returns:
            The restored graph, or None if nothing was saved yet

        Raises:
            GraphStoreError: If the stored document cannot be restored
        """
        try:
            data = AtomicWriter.read_json(self.path)
        except json.JSONDecodeError as e:
            raise GraphStoreError(f"Graph file {self.path} is not valid JSON: {e}") from e

        if data is None:
            return None

        graph = graph_from_dict(data)
        logger.info(f"Loaded dependency graph with {graph.file_count} files from {self.path}")
        return graph

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
