"""Locate the file an export reads from.

Vote exports read ``UserData/votedSongs.json`` below the Beat Saber
installation directory. Favorites exports read the per-user
``PlayerData.dat`` that the game keeps under ``AppData/LocalLow``.
"""

import os
import sys
from pathlib import Path

from .errors import InvalidPathError, SourceFileNotFoundError
from .logging import get_logger
from .models import ExportMode

logger = get_logger(__name__)

VOTE_FILE_RELATIVE_PATH = Path("UserData") / "votedSongs.json"
PLAYER_DATA_RELATIVE_PATH = Path("AppData") / "LocalLow" / "Hyperbolic Magnetism" / "Beat Saber" / "PlayerData.dat"

BEAT_SABER_STEAM_APP_ID = "620980"


def _proton_user_dir(steam_root: Path) -> Path:
    return (
        steam_root / "steamapps" / "compatdata" / BEAT_SABER_STEAM_APP_ID
        / "pfx" / "drive_c" / "users" / "steamuser"
    )


def default_player_data_path() -> Path:
    """Get the default PlayerData.dat location for this platform.

    Returns:
        Path: Player data file path
            - Windows: %USERPROFILE%/AppData/LocalLow/Hyperbolic Magnetism/Beat Saber/PlayerData.dat
            - Linux: same path inside the Steam Proton prefix of Beat Saber
            - macOS: same path inside the Steam Proton prefix under Application Support
    """
    if sys.platform == "win32" or os.name == "nt":
        base = Path(os.environ.get("USERPROFILE", Path.home()))
    elif sys.platform == "darwin":
        base = _proton_user_dir(Path.home() / "Library" / "Application Support" / "Steam")
    else:
        base = _proton_user_dir(Path.home() / ".local" / "share" / "Steam")
    return base / PLAYER_DATA_RELATIVE_PATH


def vote_file_path(install_dir: Path) -> Path:
    """Resolve votedSongs.json inside a Beat Saber installation.

    Raises:
        InvalidPathError: If the installation directory does not exist
    """
    if not install_dir.is_dir():
        raise InvalidPathError(install_dir)
    return install_dir / VOTE_FILE_RELATIVE_PATH


def locate_source(
    mode: ExportMode,
    install_dir: Path | None = None,
    player_data_path: Path | None = None,
) -> Path:
    """Resolve the readable source file for an export mode.

    Args:
        mode: Export mode
        install_dir: Beat Saber installation directory, required for vote modes
        player_data_path: Override for the favorites source file

    Raises:
        InvalidPathError: If a vote mode has no valid installation directory
        SourceFileNotFoundError: If the resolved file does not exist
    """
    if mode is ExportMode.FAVORITES:
        path = player_data_path or default_player_data_path()
    elif mode is ExportMode.UPVOTES or mode is ExportMode.DOWNVOTES:
        if install_dir is None:
            raise InvalidPathError(install_dir)
        path = vote_file_path(install_dir)
    else:
        raise ValueError(f"Unsupported export mode: {mode!r}")

    if not path.is_file():
        raise SourceFileNotFoundError(path)

    logger.info("source_located", mode=mode.value, path=str(path))
    return path
