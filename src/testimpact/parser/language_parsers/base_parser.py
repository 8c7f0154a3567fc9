from abc import ABC, abstractmethod
from typing import List


class BaseParser(ABC):
    """Abstract base class for module specifier extraction strategies."""

    @abstractmethod
    def extract_specifiers(self, content: str, path: str) -> List[str]:
        """Return the raw module specifiers referenced by ``content``, in source order."""
        pass
