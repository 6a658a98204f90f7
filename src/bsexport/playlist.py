"""Build and write .bplist playlists."""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from .errors import PlaylistWriteError
from .logging import get_logger
from .models import ExportMode, Playlist, ResolvedMap

logger = get_logger(__name__)

PLAYLIST_EXTENSION = ".bplist"
DISPLAY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"
FILENAME_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def sort_key(resolved: ResolvedMap) -> tuple[int, str]:
    """Order BeatSaver keys by length, then lexicographically.

    Keys are hexadecimal, so shorter keys are older maps.
    """
    return len(resolved.beatsaver_id), resolved.beatsaver_id


def sort_maps(maps: list[ResolvedMap]) -> list[ResolvedMap]:
    return sorted(maps, key=sort_key)


def build_playlist(
    mode: ExportMode,
    maps: list[ResolvedMap],
    author: str,
    exported_at: datetime,
) -> Playlist:
    """Assemble the playlist record for an export.

    Args:
        mode: Export mode, used as the title prefix
        maps: Resolved maps in any order
        author: Playlist author
        exported_at: Export time, rendered in UTC

    Returns:
        Playlist with songs sorted by BeatSaver key
    """
    timestamp = _as_utc(exported_at).strftime(DISPLAY_TIMESTAMP_FORMAT)
    return Playlist(
        title=f"{mode.value} ({timestamp})",
        author=author,
        description=f"Exported at {timestamp}.",
        image=None,
        songs=sort_maps(maps),
    )


def playlist_filename(mode: ExportMode, exported_at: datetime) -> str:
    """File name for an export, safe on every filesystem."""
    timestamp = _as_utc(exported_at).strftime(FILENAME_TIMESTAMP_FORMAT)
    return f"{mode.value}_{timestamp}{PLAYLIST_EXTENSION}"


def write_playlist(playlist: Playlist, path: Path) -> Path:
    """Write a playlist, replacing any existing file.

    The document goes to a temporary file next to the target first and is
    moved into place in one step, so the target is either the old file or
    the complete new one.

    Raises:
        PlaylistWriteError: If the directory or file cannot be written
    """
    document = playlist.to_json()
    tmp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(document)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        logger.error("playlist_write_failed", path=str(path), error=str(e))
        raise PlaylistWriteError(path, str(e)) from e

    logger.info("playlist_written", path=str(path), songs=len(playlist.songs))
    return path


def load_playlist(path: Path) -> Playlist:
    return Playlist.from_json(path.read_text(encoding="utf-8"))
