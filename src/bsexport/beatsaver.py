"""BeatSaver catalog client.

Resolves map content hashes to BeatSaver keys and song names through the
batch hash lookup endpoint.
API documentation: https://api.beatsaver.com/docs/
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, TypeVar

import httpx
from pydantic import ValidationError

from .errors import CatalogRequestError, ResponseParseError, describe_validation_error
from .logging import get_logger
from .models import CatalogEntry, ResolvedMap, SkippedMap

logger = get_logger(__name__)

T = TypeVar("T")

MAX_BATCH_SIZE = 50


def chunked(items: list[T], size: int) -> Iterator[list[T]]:
    """Split a list into contiguous chunks of at most ``size`` items."""
    if size < 1:
        raise ValueError("size must be at least 1")
    for i in range(0, len(items), size):
        yield items[i : i + size]


@dataclass
class ResolveResult:
    """Result of resolving a list of hashes."""

    resolved: list[ResolvedMap] = field(default_factory=list)
    skipped: list[SkippedMap] = field(default_factory=list)


class BeatSaverClient:
    """BeatSaver API client for batch hash lookups.

    The HTTP client is owned by the caller, which decides its lifetime,
    timeout and headers. Chunks are requested one after another; a failed
    request aborts the whole resolution.
    """

    BASE_URL = "https://api.beatsaver.com"

    def __init__(
        self,
        http_client: httpx.Client,
        base_url: str = BASE_URL,
        batch_size: int = MAX_BATCH_SIZE,
    ):
        """Initialize the BeatSaver client.

        Args:
            http_client: HTTP client used for every request
            base_url: API root URL
            batch_size: Hashes per request (1-50)
        """
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        self._client = http_client
        self.base_url = base_url.rstrip("/")
        self.batch_size = batch_size

    def _fetch(self, chunk: list[str]) -> Any:
        url = f"{self.base_url}/maps/hash/{','.join(chunk)}"
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "catalog_request_failed",
                status_code=e.response.status_code,
                url=url,
            )
            raise CatalogRequestError(url, e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error("catalog_request_failed", error=str(e), url=url)
            raise CatalogRequestError(url, detail=str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseParseError(None, detail=f"invalid JSON from {url}") from e

        if not isinstance(data, dict):
            raise ResponseParseError(None, detail=f"expected a JSON object from {url}")
        return data

    def _parse_entry(self, map_hash: str, data: dict[str, Any]) -> ResolvedMap:
        try:
            entry = CatalogEntry.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(map_hash, describe_validation_error(e)) from e
        return ResolvedMap(beatsaver_id=entry.id, hash=map_hash, name=entry.name)

    def _resolve_single(self, map_hash: str, data: dict[str, Any], result: ResolveResult) -> None:
        # An error response never carries a usable map, whatever else it holds.
        error = data.get("error")
        if error is not None and str(error).strip():
            logger.warning("map_skipped", hash=map_hash, reason=str(error))
            result.skipped.append(SkippedMap(hash=map_hash, reason=str(error)))
            return
        result.resolved.append(self._parse_entry(map_hash, data))

    def _resolve_many(self, data: dict[str, Any], result: ResolveResult) -> None:
        for map_hash, entry in data.items():
            if not entry:
                logger.warning("map_skipped", hash=map_hash, reason="Not Found")
                result.skipped.append(SkippedMap(hash=map_hash, reason="Not Found"))
                continue
            if not isinstance(entry, dict):
                raise ResponseParseError(map_hash, detail="expected a map object")
            result.resolved.append(self._parse_entry(map_hash, entry))

    def resolve(self, hashes: list[str]) -> ResolveResult:
        """Resolve map hashes to BeatSaver keys and names.

        Args:
            hashes: Map content hashes, duplicates allowed

        Returns:
            ResolveResult with resolved maps (in response order) and skipped hashes

        Raises:
            CatalogRequestError: If any request fails or returns a non-success status
            ResponseParseError: If a found map lacks ``id`` or ``name``
        """
        result = ResolveResult()
        chunks = list(chunked(hashes, self.batch_size))

        for batch_num, chunk in enumerate(chunks, 1):
            logger.info(
                "catalog_chunk_requested",
                batch_num=batch_num,
                batches=len(chunks),
                count=len(chunk),
            )
            data = self._fetch(chunk)

            # The endpoint answers a single hash with the map object itself and
            # several hashes with an object keyed by hash.
            if len(chunk) == 1:
                self._resolve_single(chunk[0], data, result)
            else:
                self._resolve_many(data, result)

            logger.debug(
                "catalog_chunk_resolved",
                batch_num=batch_num,
                resolved=len(result.resolved),
                skipped=len(result.skipped),
            )

        logger.info(
            "catalog_resolution_complete",
            requested=len(hashes),
            resolved=len(result.resolved),
            skipped=len(result.skipped),
        )
        return result
