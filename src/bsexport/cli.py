"""bsexport CLI using Typer.

Exports Beat Saber favorites, upvotes or downvotes to a .bplist playlist.
Anything not given as an option is asked for on the console.
"""

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

from .config import get_settings
from .errors import ExportError
from .logging import configure_logging, get_logger
from .models import ExportMode, LocalPlayer
from .pipeline import Exporter

app = typer.Typer(
    name="bsexport",
    help="Export Beat Saber favorites and votes to a playlist file.",
    add_completion=False,
)

DEFAULT_MODE = ExportMode.UPVOTES


def prompt_mode() -> ExportMode:
    """Ask for the export mode, defaulting to upvotes."""
    answer = typer.prompt(
        "[F]avorites, [U]pvotes (default) or [D]ownvotes?",
        default="",
        show_default=False,
    )
    if not answer.strip():
        return DEFAULT_MODE
    try:
        return ExportMode.parse(answer)
    except ValueError:
        typer.echo("Unrecognized option, defaulting to [u]pvotes.")
        return DEFAULT_MODE


def prompt_install_dir() -> Path:
    answer = typer.prompt("Enter Beat Saber path (contains 'Beat Saber.exe')")
    return Path(answer.strip().strip('"'))


def player_chooser(preselected: Optional[int]):
    """Build the callback that picks a player from PlayerData.dat."""

    def choose(players: list[LocalPlayer]) -> str:
        if preselected is not None:
            return str(preselected)
        typer.echo("Multiple players found:")
        for i, player in enumerate(players):
            typer.echo(f"  [{i}] {player.player_id} ({player.player_name})")
        return typer.prompt("Enter player index")

    return choose


def wait_for_keypress() -> None:
    """Hold the console window open until a key is pressed."""
    if not sys.stdin.isatty():
        return
    typer.echo("Press any key to continue...")
    typer.getchar()


@app.command()
def export(
    mode: Annotated[Optional[str], typer.Option("--mode", "-m", help="Export mode: f(avorites), u(pvotes) or d(ownvotes)")] = None,
    beat_saber_dir: Annotated[Optional[Path], typer.Option("--beat-saber-dir", "-b", help="Beat Saber installation directory (vote modes)")] = None,
    player_data: Annotated[Optional[Path], typer.Option("--player-data", help="Path to PlayerData.dat (favorites mode)")] = None,
    player: Annotated[Optional[int], typer.Option("--player", "-p", help="Player index when PlayerData.dat lists several players")] = None,
    output_dir: Annotated[Optional[Path], typer.Option("--output-dir", "-o", help="Directory for the playlist file")] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")] = None,
    log_format: Annotated[Optional[str], typer.Option("--log-format", help="Log format (console, json)")] = None,
    no_pause: Annotated[bool, typer.Option("--no-pause", help="Exit without waiting for a key press")] = False,
) -> None:
    """Export favorites or votes to a .bplist playlist.

    Example:
        bsexport --mode upvotes --beat-saber-dir "C:/Program Files/Steam/steamapps/common/Beat Saber"
    """
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        format=log_format or settings.log_format,
    )
    logger = get_logger(__name__)

    try:
        if mode is None:
            export_mode = prompt_mode()
        else:
            try:
                export_mode = ExportMode.parse(mode)
            except ValueError as e:
                raise typer.BadParameter(str(e), param_hint="--mode")

        install_dir = beat_saber_dir
        if export_mode is not ExportMode.FAVORITES and install_dir is None:
            install_dir = prompt_install_dir()

        typer.echo(f"Exporting {export_mode.value.lower()}...")

        with Exporter(settings, choose_player=player_chooser(player)) as exporter:
            result = exporter.run(
                export_mode,
                install_dir=install_dir,
                player_data_path=player_data,
                output_dir=output_dir,
            )
    except typer.Abort:
        typer.echo("Aborted.", err=True)
    except typer.BadParameter as e:
        typer.echo(f"Error: {e.format_message()}", err=True)
    except ExportError as e:
        typer.echo(f"Error: {e}", err=True)
    except Exception as e:
        logger.exception("export_failed", error=str(e))
        typer.echo(f"Error: Export failed - {e!r}", err=True)
    else:
        typer.echo(f"Maps requested: {result.requested}")
        typer.echo(f"Maps exported: {len(result.playlist.songs)}")
        if result.skipped:
            typer.echo(f"Maps skipped: {len(result.skipped)}")
            for skipped in result.skipped:
                typer.echo(f"  - {skipped.hash}: {skipped.reason}")
        typer.echo(f"Playlist written to: {result.output_path}")

    typer.echo()
    if not no_pause:
        wait_for_keypress()


def main() -> None:
    """CLI entry point."""
    app()
