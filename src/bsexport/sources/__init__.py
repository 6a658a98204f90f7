"""Hash source interface and base classes.

A hash source reads one local file and yields the content hashes of the maps
to export, in file order.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ..errors import MalformedRecordError, NoMapsFoundError
from ..logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class HashSource(Protocol):
    """Protocol for map hash sources.
    
    Implement this protocol to export from another local file.
    """

    @property
    def name(self) -> str:
        """Unique identifier for this source."""
        ...

    def extract_hashes(self) -> list[str]:
        """Extract map hashes in source order.
        
        Returns:
            Non-empty list of hashes, duplicates preserved

        Raises:
            NoMapsFoundError: If nothing matched
        """
        ...


class BaseHashSource(ABC):
    """Abstract base class for hash sources with common functionality."""

    def __init__(self, path: Path):
        self.path = path

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this source."""
        pass

    @abstractmethod
    def _collect_hashes(self, document: Any) -> list[str]:
        """Collect matching hashes from the parsed JSON document."""
        pass

    def load_document(self) -> Any:
        """Read and parse the source file as JSON."""
        try:
            return json.loads(self.path.read_text(encoding="utf-8-sig"))
        except json.JSONDecodeError as e:
            raise MalformedRecordError(str(self.path), detail=f"invalid JSON: {e}") from e

    def extract_hashes(self) -> list[str]:
        hashes = self._collect_hashes(self.load_document())
        if not hashes:
            logger.error("no_maps_found", source=self.name, path=str(self.path))
            raise NoMapsFoundError()

        logger.info("hashes_extracted", source=self.name, count=len(hashes))
        return hashes


from .favorites import PlayerDataSource
from .votes import VoteFileSource

__all__ = [
    "HashSource",
    "BaseHashSource",
    "PlayerDataSource",
    "VoteFileSource",
]
