import os
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

from .parser.path_resolver import DEFAULT_EXTENSIONS

logger = logging.getLogger(__name__)

# Files the scanner collects when no include list is configured
DEFAULT_INCLUDE = ('.ts', '.tsx', '.js', '.jsx', '.mjs', '.cjs', '.json')


@dataclass
class Settings:
    """Runtime configuration, read from the environment and overridable from the CLI."""
    project_root: str = "."
    graph_file: str = ".testimpact/graph.json"
    base_branch: str = "main"
    max_workers: Optional[int] = None
    include_extensions: Tuple[str, ...] = DEFAULT_INCLUDE
    resolve_extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    path_aliases: Dict[str, str] = field(default_factory=dict)

    @property
    def graph_path(self) -> str:
        if os.path.isabs(self.graph_file):
            return self.graph_file
        return os.path.join(self.project_root, self.graph_file)


def _split_list(value: str) -> Tuple[str, ...]:
    items = [item.strip() for item in value.split(',') if item.strip()]
    return tuple(item if item.startswith('.') else f".{item}" for item in items)


def parse_aliases(value: str) -> Dict[str, str]:
    """Parse ``'@/=src/,~/=src/'`` into a prefix -> directory map."""
    aliases = {}
    for entry in value.split(','):
        entry = entry.strip()
        if not entry:
            continue
        if '=' not in entry:
            logger.warning(f"Ignoring malformed path alias: {entry}")
            continue
        prefix, target = entry.split('=', 1)
        aliases[prefix.strip()] = target.strip()
    return aliases


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from environment variables, after reading a .env file if present.

    Args:
        env_file: Explicit .env path; python-dotenv searches upwards when None
    """
    load_dotenv(env_file)

    settings = Settings()
    settings.project_root = os.getenv("TESTIMPACT_ROOT", settings.project_root)
    settings.graph_file = os.getenv("TESTIMPACT_GRAPH_FILE", settings.graph_file)
    settings.base_branch = os.getenv("TESTIMPACT_BASE_BRANCH", settings.base_branch)

    max_workers = os.getenv("TESTIMPACT_MAX_WORKERS")
    if max_workers:
        try:
            settings.max_workers = max(1, int(max_workers))
        except ValueError:
            logger.warning(f"Ignoring invalid TESTIMPACT_MAX_WORKERS value: {max_workers}")

    include = os.getenv("TESTIMPACT_INCLUDE")
    if include:
        settings.include_extensions = _split_list(include)

    resolve = os.getenv("TESTIMPACT_RESOLVE_EXTENSIONS")
    if resolve:
        settings.resolve_extensions = _split_list(resolve)

    aliases = os.getenv("TESTIMPACT_PATH_ALIASES")
    if aliases:
        settings.path_aliases = parse_aliases(aliases)

    return settings
