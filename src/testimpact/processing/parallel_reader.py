import os
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..parser.path_resolver import normalize_path

logger = logging.getLogger(__name__)

# Directories never worth scanning
SKIP_DIRS = {'.git', '__pycache__', 'node_modules', 'venv', '.venv', 'dist', 'build', '.next', 'coverage'}


@dataclass
class FileRead:
    """Outcome of reading one file. Exactly one of content/error is set."""
    path: str
    content: Optional[str] = None
    last_modified: Optional[float] = None
    error: Optional[str] = None


class ParallelFileReader:
    """
    Reads file contents on a thread pool.

    Each worker returns its own FileRead; nothing shared is mutated while the
    pool is running, so callers can merge the results afterwards in any order.
    """

    def __init__(self,
                 project_root=None,
                 reader: Optional[Callable[[str], str]] = None,
                 max_workers: Optional[int] = None):
        """
        Args:
            project_root: Directory repo-relative paths are read from
            reader: Callback returning the content of a repo-relative path;
                    replaces filesystem reads when given
            max_workers: Maximum number of worker threads (default: CPU count)
        """
        self.project_root = Path(project_root) if project_root is not None else Path.cwd()
        self.reader = reader
        self.max_workers = max_workers or os.cpu_count() or 1

    def read_file(self, path: str) -> FileRead:
        try:
            if self.reader is not None:
                return FileRead(path=path, content=self.reader(path))

            full_path = self.project_root / path
            content = full_path.read_text(encoding='utf-8')
            return FileRead(path=path, content=content, last_modified=full_path.stat().st_mtime)
        except Exception as e:
            logger.warning(f"Failed to read {path}: {e}")
            return FileRead(path=path, error=str(e))

    def last_modified(self, path: str) -> Optional[float]:
        """Modification time on disk, None when reading through a callback or missing."""
        if self.reader is not None:
            return None
        try:
            return (self.project_root / path).stat().st_mtime
        except OSError:
            return None

    def read_files(self, paths: Iterable[str]) -> Dict[str, FileRead]:
        """Read every path, returning results keyed by path once all reads finished."""
        paths = list(paths)
        if not paths:
            return {}

        start_time = time.time()
        results: Dict[str, FileRead] = {}

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(paths))) as pool:
            futures = {pool.submit(self.read_file, path): path for path in paths}
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        elapsed_time = time.time() - start_time
        logger.debug(f"Read {len(results)} files in {elapsed_time:.2f} seconds")
        return results

    def discover_files(self, extensions: Optional[Iterable[str]] = None) -> List[str]:
        """
        Walk the project and list repo-relative paths.

        Args:
            extensions: Only keep files with one of these extensions (all files when None)

        Returns:
            Sorted list of normalized paths
        """
        wanted = {ext.lower() for ext in extensions} if extensions else None
        files = []

        for root, dirs, filenames in os.walk(self.project_root):
            # Skip unwanted directories
            dirs[:] = [d for d in dirs if d not in SKIP_DIRS]

            for filename in filenames:
                if wanted is not None and os.path.splitext(filename)[1].lower() not in wanted:
                    continue
                file_path = Path(root) / filename
                files.append(normalize_path(file_path.relative_to(self.project_root).as_posix()))

        logger.info(f"Found {len(files)} files in {self.project_root}")
        return sorted(files)
