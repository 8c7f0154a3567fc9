from .base_parser import BaseParser
from .javascript_parser import JavaScriptParser
from .tree_sitter_parser import TreeSitterParser, ParseError
from .tree_sitter_javascript_parser import TreeSitterJavaScriptParser
from .tree_sitter_typescript_parser import TreeSitterTypeScriptParser, TreeSitterTSXParser

__all__ = [
    'BaseParser',
    'JavaScriptParser',
    'TreeSitterParser',
    'ParseError',
    'TreeSitterJavaScriptParser',
    'TreeSitterTypeScriptParser',
    'TreeSitterTSXParser',
]
