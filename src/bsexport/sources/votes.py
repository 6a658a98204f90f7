"""Vote file source: hashes of maps voted up or down in votedSongs.json."""

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import MalformedRecordError, describe_validation_error
from ..logging import get_logger
from ..models import VoteRecord, VoteType
from . import BaseHashSource

logger = get_logger(__name__)


class VoteFileSource(BaseHashSource):
    """Reads votedSongs.json and keeps the hashes voted in one direction.

    The file is a JSON object mapping each map hash to an object holding at
    least a ``voteType`` string.
    """

    def __init__(self, path: Path, vote_type: VoteType):
        """Initialize the vote file source.

        Args:
            path: Path to votedSongs.json
            vote_type: Vote direction to keep
        """
        super().__init__(path)
        self.vote_type = vote_type

    @property
    def name(self) -> str:
        return f"votes({self.vote_type.value})"

    def parse_records(self, document: Any) -> list[VoteRecord]:
        """Validate every entry of the vote file.

        Raises:
            MalformedRecordError: If the document is not an object or an
                entry lacks a string ``voteType``
        """
        if not isinstance(document, dict):
            raise MalformedRecordError(
                str(self.path), detail="expected a JSON object keyed by map hash"
            )

        records = []
        for map_hash, value in document.items():
            if not isinstance(value, dict):
                raise MalformedRecordError(f"vote for map {map_hash}", ["voteType"])
            try:
                records.append(VoteRecord.model_validate({**value, "hash": map_hash}))
            except ValidationError as e:
                raise MalformedRecordError(
                    f"vote for map {map_hash}", describe_validation_error(e)
                ) from e
        return records

    def _collect_hashes(self, document: Any) -> list[str]:
        hashes = []
        for record in self.parse_records(document):
            if self.vote_type.matches(record.vote_type):
                hashes.append(record.hash)
            else:
                logger.debug("vote_not_matched", hash=record.hash, vote_type=record.vote_type)
        return hashes
