import os
import logging
from typing import Dict, List

import git

from ..errors import ChangeDetectionError
from ..models.impact_analysis import ChangedFile, ChangeOperation
from ..parser.path_resolver import normalize_path

logger = logging.getLogger(__name__)


class GitChangeDetector:
    """Lists files changed on the current branch and in the working tree."""

    # git's diff letters mapped to our operations
    CHANGE_TYPES = {
        'A': ChangeOperation.ADDED,
        'C': ChangeOperation.ADDED,
        'D': ChangeOperation.DELETED,
        'M': ChangeOperation.MODIFIED,
        'T': ChangeOperation.MODIFIED,
        'R': ChangeOperation.RENAMED,
    }

    def __init__(self, project_root="."):
        self.project_root = os.path.realpath(str(project_root))
        try:
            self.repo = git.Repo(self.project_root, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise ChangeDetectionError(f"Not a git repository: {self.project_root}") from e

    def detect(self, base_ref: str = "main", include_working_directory: bool = True) -> List[ChangedFile]:
        """
        Collect changed files relative to ``base_ref``.

        Args:
            base_ref: Branch or commit the current branch is compared against
            include_working_directory: Also report staged, unstaged and untracked files

        Returns:
            Changed files sorted by path, one entry per path

        Raises:
            ChangeDetectionError: If git cannot compute the diff
        """
        changes: Dict[str, ChangedFile] = {}

        try:
            head = self.repo.head.commit
            merge_bases = self.repo.merge_base(base_ref, head)
            if merge_bases:
                for diff in merge_bases[0].diff(head):
                    self._record(changes, diff)
            else:
                logger.warning(f"No common ancestor between {base_ref} and HEAD")

            if include_working_directory:
                # Staged changes; R=True keeps the direction HEAD -> index
                for diff in self.repo.index.diff(head, R=True):
                    self._record(changes, diff)
                # Unstaged changes
                for diff in self.repo.index.diff(None):
                    self._record(changes, diff)
                for path in self.repo.untracked_files:
                    self._add(changes, ChangedFile(path=path, operation=ChangeOperation.ADDED))

        except (git.GitCommandError, ValueError) as e:
            raise ChangeDetectionError(f"Failed to detect changes against {base_ref}: {e}") from e

        logger.info(f"Detected {len(changes)} changed files against {base_ref}")
        return [changes[path] for path in sorted(changes)]

    def _record(self, changes: Dict[str, ChangedFile], diff) -> None:
        operation = self.CHANGE_TYPES.get(diff.change_type, ChangeOperation.MODIFIED)
        if operation == ChangeOperation.DELETED:
            change = ChangedFile(path=diff.a_path, operation=operation)
        elif operation == ChangeOperation.RENAMED:
            change = ChangedFile(path=diff.b_path, operation=operation, old_path=diff.a_path)
        else:
            change = ChangedFile(path=diff.b_path or diff.a_path, operation=operation)
        self._add(changes, change)

    def _add(self, changes: Dict[str, ChangedFile], change: ChangedFile) -> None:
        path = self._project_path(change.path)
        if path is None:
            return
        old_path = self._project_path(change.old_path) if change.old_path else None
        changes[path] = ChangedFile(path=path, operation=change.operation, old_path=old_path)

    def _project_path(self, repo_path: str):
        """Translate a path relative to the git work tree into one relative to the project root."""
        absolute = os.path.join(os.path.realpath(self.repo.working_tree_dir), repo_path)
        path = normalize_path(absolute, self.project_root)
        if not path or path.startswith('../') or os.path.isabs(path):
            return None
        return path
