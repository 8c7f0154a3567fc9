from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set


class FileType(str, Enum):
    """Category a file is assigned to when it enters the graph."""
    SOURCE = "source"
    TEST = "test"
    CONFIG = "config"
    ASSET = "asset"


@dataclass
class FileNode:
    """A single file in the dependency graph."""
    path: str
    type: FileType = FileType.SOURCE
    dependencies: Set[str] = field(default_factory=set)  # files this one imports
    dependents: Set[str] = field(default_factory=set)    # files importing this one
    last_modified: Optional[float] = None
    specifiers: List[str] = field(default_factory=list, repr=False)
