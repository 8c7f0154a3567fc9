from .models import (
    ChangedFile,
    ChangeOperation,
    DependencyGraph,
    Diagnostic,
    FileNode,
    FileType,
    ImpactAnalysis,
    SelectionPlan,
)
from .parser import DependencyExtractor, FileClassifier, PathResolver, normalize_path
from .graph import DependencyGraphBuilder
from .analysis import ImpactAnalyzer, TestSelectionPlanner
from .storage import GraphStore
from .errors import ChangeDetectionError, GraphInvariantError, GraphStoreError

__version__ = "0.1.0"

__all__ = [
    'ChangedFile',
    'ChangeOperation',
    'DependencyGraph',
    'Diagnostic',
    'FileNode',
    'FileType',
    'ImpactAnalysis',
    'SelectionPlan',
    'DependencyExtractor',
    'FileClassifier',
    'PathResolver',
    'normalize_path',
    'DependencyGraphBuilder',
    'ImpactAnalyzer',
    'TestSelectionPlanner',
    'GraphStore',
    'ChangeDetectionError',
    'GraphInvariantError',
    'GraphStoreError',
]
