from .builder import DependencyGraphBuilder, FileScan

__all__ = ['DependencyGraphBuilder', 'FileScan']
