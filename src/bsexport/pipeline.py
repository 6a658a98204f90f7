"""Export orchestrator for bsexport.

Coordinates the full flow:
1. Locate the source file for the export mode
2. Extract map hashes
3. Resolve hashes on BeatSaver
4. Build and write the playlist
"""

from datetime import datetime, timezone
from pathlib import Path

import httpx

from .beatsaver import BeatSaverClient
from .config import Settings, get_settings
from .errors import PlayerSelectionError
from .locator import locate_source
from .logging import get_logger
from .models import ExportMode, ExportResult
from .playlist import build_playlist, playlist_filename, write_playlist
from .sources import HashSource, PlayerDataSource, VoteFileSource
from .sources.favorites import PlayerChooser

logger = get_logger(__name__)


class Exporter:
    """Runs one export from a local source file to a .bplist file."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.Client | None = None,
        choose_player: PlayerChooser | None = None,
    ):
        """Initialize the exporter.

        Args:
            settings: Optional settings override
            http_client: Optional HTTP client; one is created and owned otherwise
            choose_player: Callback asked for a player index when the player
                data holds several players
        """
        self.settings = settings or get_settings()
        self.choose_player = choose_player or _no_player_choice

        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            headers={
                "Accept": "application/json",
                "User-Agent": self.settings.user_agent,
            },
            timeout=self.settings.request_timeout,
        )
        self.beatsaver = BeatSaverClient(
            self._http,
            base_url=self.settings.beatsaver_base_url,
            batch_size=self.settings.batch_size,
        )

    def source_for(self, mode: ExportMode, path: Path) -> HashSource:
        """Build the hash source for an export mode."""
        if mode is ExportMode.FAVORITES:
            return PlayerDataSource(path, self.choose_player)
        if mode is ExportMode.UPVOTES or mode is ExportMode.DOWNVOTES:
            return VoteFileSource(path, mode.vote_type)
        raise ValueError(f"Unsupported export mode: {mode!r}")

    def run(
        self,
        mode: ExportMode,
        install_dir: Path | None = None,
        player_data_path: Path | None = None,
        output_dir: Path | None = None,
        now: datetime | None = None,
    ) -> ExportResult:
        """Run a full export.

        Args:
            mode: What to export
            install_dir: Beat Saber installation directory (vote modes)
            player_data_path: Player data file override (favorites mode)
            output_dir: Directory for the playlist file
            now: Export time, defaults to the current UTC time

        Returns:
            ExportResult describing the written playlist

        Raises:
            ExportError: On any hard failure; no file is written then
        """
        exported_at = now or datetime.now(timezone.utc)
        logger.info("export_start", mode=mode.value)

        source_path = locate_source(
            mode,
            install_dir=install_dir,
            player_data_path=player_data_path or self.settings.player_data_path,
        )
        hashes = self.source_for(mode, source_path).extract_hashes()

        resolution = self.beatsaver.resolve(hashes)

        playlist = build_playlist(
            mode,
            resolution.resolved,
            author=self.settings.playlist_author,
            exported_at=exported_at,
        )
        target_dir = output_dir or self.settings.output_dir
        output_path = write_playlist(playlist, target_dir / playlist_filename(mode, exported_at))

        logger.info(
            "export_complete",
            mode=mode.value,
            path=str(output_path),
            songs=len(playlist.songs),
            skipped=len(resolution.skipped),
        )

        return ExportResult(
            mode=mode,
            output_path=output_path,
            playlist=playlist,
            requested=len(hashes),
            skipped=resolution.skipped,
            exported_at=exported_at,
        )

    def close(self) -> None:
        """Close the HTTP client if this exporter created it."""
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "Exporter":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def _no_player_choice(players) -> str:
    raise PlayerSelectionError("", len(players))
