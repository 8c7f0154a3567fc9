from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set


class ChangeOperation(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class ChangedFile:
    """A path reported by the change detector, tagged with what happened to it."""
    path: str
    operation: ChangeOperation = ChangeOperation.MODIFIED
    old_path: Optional[str] = None


@dataclass
class ImpactAnalysis:
    """Files affected by a change set and the tests that should re-run."""
    changed_files: Set[str] = field(default_factory=set)
    directly_affected_files: Set[str] = field(default_factory=set)
    transitively_affected_files: Set[str] = field(default_factory=set)
    affected_test_files: Set[str] = field(default_factory=set)
    test_coverage: Dict[str, Set[str]] = field(default_factory=dict)  # test -> covered sources

    @property
    def all_affected_files(self) -> Set[str]:
        return self.changed_files | self.directly_affected_files | self.transitively_affected_files

    def to_dict(self) -> Dict[str, Any]:
        return {
            "changed_files": sorted(self.changed_files),
            "directly_affected_files": sorted(self.directly_affected_files),
            "transitively_affected_files": sorted(self.transitively_affected_files),
            "affected_test_files": sorted(self.affected_test_files),
            "test_coverage": {
                test: sorted(sources) for test, sources in sorted(self.test_coverage.items())
            },
        }


@dataclass
class SelectionPlan:
    """Which tests a runner should execute for a change set."""
    strategy: str  # full, incremental, none
    tests_to_run: List[str] = field(default_factory=list)
    affected_files: List[str] = field(default_factory=list)
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "tests_to_run": list(self.tests_to_run),
            "affected_files": list(self.affected_files),
            "reason": self.reason,
        }
