"""Exception hierarchy for bsexport.

Every hard failure of an export run derives from ExportError so the CLI can
report it uniformly. Soft failures (catalog misses) are never raised; see
``beatsaver.ResolveResult.skipped``.
"""

from pydantic import ValidationError


def describe_validation_error(error: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into dotted field locations."""
    return [".".join(str(part) for part in err["loc"]) or "<root>" for err in error.errors()]


class ExportError(Exception):
    """Base class for all export failures."""


class InvalidPathError(ExportError):
    """The Beat Saber installation directory does not exist."""

    def __init__(self, path: object):
        self.path = path
        super().__init__(f'Invalid path "{path}"')


class SourceFileNotFoundError(ExportError, FileNotFoundError):
    """The vote file or player-data file could not be found."""

    def __init__(self, path: object):
        self.path = path
        super().__init__(f"Unable to locate {path}")


class MalformedRecordError(ExportError):
    """A source file record is missing a required field or has the wrong shape."""

    def __init__(self, source: str, missing_fields: list[str] | None = None, detail: str | None = None):
        self.source = source
        self.missing_fields = missing_fields or []
        message = f"Malformed record in {source}"
        if self.missing_fields:
            message += f": missing or invalid {', '.join(self.missing_fields)}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class NoPlayersError(ExportError):
    """The player-data file lists no local players."""

    def __init__(self) -> None:
        super().__init__("No players found in player data.")


class PlayerSelectionError(ExportError):
    """The entered player index is not an integer or is out of range."""

    def __init__(self, value: str, player_count: int):
        self.value = value
        self.player_count = player_count
        super().__init__(
            f'Invalid player index "{value}", expected a number from 0 to {player_count - 1}'
        )


class NoMapsFoundError(ExportError):
    """No map hashes matched the selected export mode."""

    def __init__(self) -> None:
        super().__init__("No maps found.")


class CatalogRequestError(ExportError):
    """A BeatSaver batch request failed or returned a non-success status."""

    def __init__(self, url: str, status_code: int | None = None, detail: str | None = None):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"BeatSaver request failed with HTTP {status_code}: {url}"
        else:
            message = f"BeatSaver request failed: {url}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class ResponseParseError(ExportError):
    """A BeatSaver response is missing required map fields or is not JSON."""

    def __init__(self, map_hash: str | None, missing_fields: list[str] | None = None, detail: str | None = None):
        self.map_hash = map_hash
        self.missing_fields = missing_fields or []
        message = "Error parsing BeatSaver response"
        if map_hash:
            message += f" for map {map_hash}"
        if self.missing_fields:
            message += f": missing {', '.join(self.missing_fields)}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class PlaylistWriteError(ExportError):
    """The playlist file could not be written."""

    def __init__(self, path: object, detail: str):
        self.path = path
        super().__init__(f"Unable to write playlist {path}: {detail}")
