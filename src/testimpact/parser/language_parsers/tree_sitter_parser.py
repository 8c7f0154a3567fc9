import logging
from typing import List, Optional

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from .base_parser import BaseParser


class ParseError(ValueError):
    """Raised when Tree-sitter cannot produce an error-free syntax tree."""


class TreeSitterParser(BaseParser):
    """Base class for syntax-tree based specifier extraction using Tree-sitter."""

    # Class variables for sharing parser and language instances
    _parsers = {}
    _languages = {}

    # Grammar entry points for the language names we know about
    TS_LANGUAGE_LOADERS = {
        'javascript': tree_sitter_javascript.language,
        'typescript': tree_sitter_typescript.language_typescript,
        'tsx': tree_sitter_typescript.language_tsx,
    }

    # Statements whose ``source`` field names a module
    SOURCE_NODE_TYPES = {'import_statement', 'export_statement', 'import_require_clause'}

    def __init__(self, language_name):
        """
        Initialize a Tree-sitter parser for the specified language.

        Args:
            language_name: Name of the language to parse
        """
        self.language_name = language_name
        self.logger = logging.getLogger(__name__)

        # Initialize parser for this language
        self.available = self._initialize_parser()

    def _initialize_parser(self) -> bool:
        """Initialize Tree-sitter parser for the language."""
        if self.language_name in self._parsers:
            return True

        try:
            ts_language = self._get_ts_language()
            self._parsers[self.language_name] = tree_sitter.Parser(ts_language)
            return True
        except Exception as e:
            self.logger.error(f"Failed to initialize Tree-sitter parser for {self.language_name}: {str(e)}")
            return False

    def _get_ts_language(self) -> tree_sitter.Language:
        """Get Tree-sitter language for the specified language name."""
        if self.language_name in self._languages:
            return self._languages[self.language_name]

        loader = self.TS_LANGUAGE_LOADERS.get(self.language_name)
        if loader is None:
            raise ValueError(f"Unsupported language: {self.language_name}")

        language = tree_sitter.Language(loader())
        self._languages[self.language_name] = language
        return language

    def extract_specifiers(self, content: str, path: str) -> List[str]:
        """
        Collect the string-literal operand of every import, re-export,
        dynamic import() and require() in the file.

        Raises:
            ParseError: If the parser is unavailable or the source has syntax errors
        """
        parser = self._parsers.get(self.language_name)
        if parser is None:
            raise ParseError(f"No Tree-sitter parser initialized for {self.language_name}")

        tree = parser.parse(bytes(content, 'utf-8'))
        if tree.root_node.has_error:
            raise ParseError(f"Syntax errors in {path}")

        specifiers = []
        # Iterative pre-order walk keeps source order without recursion limits
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            specifier = self._specifier_of(node)
            if specifier is not None:
                specifiers.append(specifier)
            stack.extend(reversed(node.children))

        return specifiers

    def _specifier_of(self, node) -> Optional[str]:
        if node.type in self.SOURCE_NODE_TYPES:
            source = node.child_by_field_name('source')
            if source is None and node.type == 'import_require_clause':
                # Older grammars leave the require() operand unnamed
                source = next((child for child in node.named_children if child.type == 'string'), None)
            return self._string_value(source)

        if node.type == 'call_expression':
            function = node.child_by_field_name('function')
            arguments = node.child_by_field_name('arguments')
            if function is None or arguments is None:
                return None

            is_dynamic_import = function.type == 'import'
            is_require = function.type == 'identifier' and function.text == b'require'
            if (is_dynamic_import or is_require) and arguments.named_children:
                return self._string_value(arguments.named_children[0])

        return None

    @staticmethod
    def _string_value(node) -> Optional[str]:
        """Text of a plain string literal without its quotes."""
        if node is None or node.type != 'string':
            return None
        return node.text.decode('utf-8')[1:-1]
