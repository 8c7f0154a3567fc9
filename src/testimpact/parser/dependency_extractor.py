import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .language_parsers.javascript_parser import JavaScriptParser
from .tree_sitter_factory import TreeSitterFactory

logger = logging.getLogger(__name__)


class ExtractionStrategy(str, Enum):
    STRUCTURED = "structured"
    FALLBACK = "fallback"
    FAILED = "failed"


@dataclass
class ExtractionResult:
    """Specifiers found in one file and how they were found."""
    specifiers: List[str] = field(default_factory=list)
    strategy: ExtractionStrategy = ExtractionStrategy.STRUCTURED
    error: Optional[str] = None  # why the structured strategy was abandoned


class DependencyExtractor:
    """
    Extracts raw module specifiers from file content.

    Files with a registered Tree-sitter grammar are parsed into a syntax tree;
    everything else, and any file the grammar rejects, goes through the
    text-scanning fallback. Extraction never raises.
    """

    def __init__(self, fallback_parser: Optional[JavaScriptParser] = None):
        self.fallback_parser = fallback_parser or JavaScriptParser()

    def extract(self, content: str, path: str) -> List[str]:
        return self.extract_with_strategy(content, path).specifiers

    def extract_with_strategy(self, content: str, path: str) -> ExtractionResult:
        error = None

        parser = TreeSitterFactory.parser_for_path(path)
        if parser is not None:
            try:
                return ExtractionResult(
                    specifiers=parser.extract_specifiers(content, path),
                    strategy=ExtractionStrategy.STRUCTURED,
                )
            except Exception as e:
                error = str(e)
                logger.debug(f"Structured extraction failed for {path}, using fallback: {error}")

        try:
            return ExtractionResult(
                specifiers=self.fallback_parser.extract_specifiers(content, path),
                strategy=ExtractionStrategy.FALLBACK,
                error=error,
            )
        except Exception as e:
            logger.warning(f"Could not extract dependencies from {path}: {e}")
            return ExtractionResult(specifiers=[], strategy=ExtractionStrategy.FAILED, error=str(e))
