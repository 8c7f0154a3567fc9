from .file_node import FileNode, FileType
from .dependency_graph import DependencyGraph, Diagnostic
from .impact_analysis import ChangedFile, ChangeOperation, ImpactAnalysis, SelectionPlan

__all__ = [
    'FileNode',
    'FileType',
    'DependencyGraph',
    'Diagnostic',
    'ChangedFile',
    'ChangeOperation',
    'ImpactAnalysis',
    'SelectionPlan',
]
