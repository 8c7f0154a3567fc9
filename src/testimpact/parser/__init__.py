from .file_classifier import FileClassifier
from .dependency_extractor import DependencyExtractor, ExtractionResult, ExtractionStrategy
from .path_resolver import PathResolver, normalize_path, DEFAULT_EXTENSIONS

__all__ = [
    'FileClassifier',
    'DependencyExtractor',
    'ExtractionResult',
    'ExtractionStrategy',
    'PathResolver',
    'normalize_path',
    'DEFAULT_EXTENSIONS',
]
