import os
import posixpath
from typing import Dict, Iterable, Iterator, Optional, Sequence

# Tried in order after the literal path, then as index files
DEFAULT_EXTENSIONS = ('.ts', '.tsx', '.js', '.jsx', '.json')


def normalize_path(path, root=None) -> str:
    """
    Bring a path into graph-key form: forward slashes, relative to the
    repository root, no ``./`` segments. Best effort, never raises.

    Args:
        path: Path as given by a caller or a tool
        root: Repository root used to relativize absolute paths

    Returns:
        The normalized repo-relative path ('' for the root itself)
    """
    text = str(path).strip().replace('\\', '/')
    if not text:
        return ''

    if root is not None and posixpath.isabs(text):
        root_text = os.path.abspath(str(root)).replace('\\', '/').rstrip('/')
        absolute = posixpath.normpath(text)
        if absolute == root_text:
            return ''
        if absolute.startswith(root_text + '/'):
            text = absolute[len(root_text) + 1:]

    normalized = posixpath.normpath(text)
    return '' if normalized == '.' else normalized


class PathResolver:
    """
    Resolves module specifiers to files of the project being analysed.

    Existence is judged against the known file set, so anything this returns
    is a path the graph has a node for.
    """

    def __init__(self,
                 known_files: Iterable[str],
                 extensions: Sequence[str] = DEFAULT_EXTENSIONS,
                 aliases: Optional[Dict[str, str]] = None):
        """
        Args:
            known_files: Normalized repo-relative paths that exist
            extensions: Ordered extensions tried after the literal path
            aliases: Specifier prefixes mapped to repo-relative directories, e.g. {'@/': 'src/'}
        """
        self.known_files = set(known_files)
        self.extensions = tuple(extensions)
        # Longest prefix first so '@/lib/' wins over '@/'
        self.aliases = sorted((aliases or {}).items(), key=lambda item: len(item[0]), reverse=True)

        self.directories = set()
        for file_path in self.known_files:
            parent = posixpath.dirname(file_path)
            while parent and parent not in self.directories:
                self.directories.add(parent)
                parent = posixpath.dirname(parent)

    def is_external(self, specifier: str) -> bool:
        """Bare specifiers name packages, not project files."""
        if specifier.startswith('.') or specifier.startswith('/'):
            return False
        return not any(specifier.startswith(prefix) for prefix, _ in self.aliases)

    def resolve(self, specifier: str, from_file: str) -> Optional[str]:
        """
        Resolve ``specifier`` as written in ``from_file``.

        Returns:
            The repo-relative path of the first existing candidate, or None for
            external packages and specifiers with no matching file
        """
        base = self._candidate_base(specifier, from_file)
        if base is None:
            return None

        for candidate in self._candidates(base):
            if candidate in self.known_files:
                return candidate
        return None

    def _candidate_base(self, specifier: str, from_file: str) -> Optional[str]:
        if not specifier or self.is_external(specifier):
            return None

        # Bundler query and hash suffixes ('./icon.svg?raw') are not part of the path
        specifier = specifier.split('?', 1)[0].split('#', 1)[0]

        if specifier.startswith('.'):
            joined = posixpath.join(posixpath.dirname(normalize_path(from_file)), specifier)
        elif specifier.startswith('/'):
            joined = specifier.lstrip('/')
        else:
            prefix, target = next(
                (prefix, target) for prefix, target in self.aliases if specifier.startswith(prefix)
            )
            joined = posixpath.join(target, specifier[len(prefix):])

        base = normalize_path(joined)
        if base == '..' or base.startswith('../'):
            return None
        return base

    def _candidates(self, base: str) -> Iterator[str]:
        if base:
            yield base
            for extension in self.extensions:
                yield base + extension

        if not base or base in self.directories:
            for extension in self.extensions:
                yield posixpath.join(base, 'index' + extension)
