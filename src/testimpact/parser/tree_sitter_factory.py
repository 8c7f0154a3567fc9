import logging
import posixpath
from typing import Dict, Optional, Type

from .language_parsers.tree_sitter_parser import TreeSitterParser
from .language_parsers.tree_sitter_javascript_parser import TreeSitterJavaScriptParser
from .language_parsers.tree_sitter_typescript_parser import TreeSitterTypeScriptParser, TreeSitterTSXParser

class TreeSitterFactory:
    """
    Factory for creating Tree-sitter parsers for different languages.
    """

    # Map of language names to parser classes
    PARSER_CLASSES: Dict[str, Type[TreeSitterParser]] = {
        'javascript': TreeSitterJavaScriptParser,
        'typescript': TreeSitterTypeScriptParser,
        'tsx': TreeSitterTSXParser,
    }

    # File extensions with a registered grammar
    EXTENSION_LANGUAGES = {
        '.js': 'javascript',
        '.jsx': 'javascript',
        '.mjs': 'javascript',
        '.cjs': 'javascript',
        '.ts': 'typescript',
        '.mts': 'typescript',
        '.cts': 'typescript',
        '.tsx': 'tsx',
    }

    # Singleton parsers; None marks a grammar that failed to load
    _parsers: Dict[str, Optional[TreeSitterParser]] = {}
    _logger = logging.getLogger(__name__)

    @classmethod
    def get_parser(cls, language: str) -> Optional[TreeSitterParser]:
        """
        Get a Tree-sitter parser for the specified language.

        Args:
            language: Name of the language

        Returns:
            TreeSitterParser instance or None if language is not supported
        """
        # Check if we already tried this language
        if language in cls._parsers:
            return cls._parsers[language]

        if not cls.supports_language(language):
            cls._logger.debug(f"No Tree-sitter parser class for language: {language}")
            return None

        # Create and cache a new parser, remembering failures so they are reported once
        parser = cls.PARSER_CLASSES[language]()
        if not parser.available:
            cls._logger.error(f"Tree-sitter parser for {language} could not be initialized, "
                              f"falling back to text scanning")
            parser = None
        cls._parsers[language] = parser
        return parser

    @classmethod
    def language_for_path(cls, path: str) -> Optional[str]:
        """Language whose grammar handles this file, judged by extension."""
        extension = posixpath.splitext(str(path))[1].lower()
        return cls.EXTENSION_LANGUAGES.get(extension)

    @classmethod
    def parser_for_path(cls, path: str) -> Optional[TreeSitterParser]:
        language = cls.language_for_path(path)
        if language is None:
            return None
        return cls.get_parser(language)

    @classmethod
    def supports_language(cls, language: str) -> bool:
        """Check if a language is supported by Tree-sitter."""
        return language in cls.PARSER_CLASSES
