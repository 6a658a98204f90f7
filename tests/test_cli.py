import httpx
import pytest
from typer.testing import CliRunner

from bsexport import cli
from bsexport.cli import app
from bsexport.playlist import load_playlist

from .conftest import write_json

runner = CliRunner()


@pytest.fixture(autouse=True)
def fake_http(monkeypatch, beatsaver):
    """Route every Exporter-owned client to the fake BeatSaver."""
    real_client = httpx.Client

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(beatsaver.handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "Client", client_factory)


def test_upvote_export_with_options(install_dir, tmp_path, beatsaver):
    out = tmp_path / "out"
    result = runner.invoke(
        app,
        ["--mode", "u", "--beat-saber-dir", str(install_dir), "--output-dir", str(out), "--no-pause"],
    )

    assert result.exit_code == 0, result.output
    assert "Maps exported: 2" in result.output
    written = list(out.glob("Upvotes_*.bplist"))
    assert len(written) == 1
    assert [s.beatsaver_id for s in load_playlist(written[0]).songs] == ["1", "10"]


def test_interactive_prompts(install_dir, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(
        app,
        ["--output-dir", str(out), "--no-pause"],
        input=f"d\n{install_dir}\n",
    )

    assert result.exit_code == 0, result.output
    assert "Enter Beat Saber path" in result.output
    assert len(list(out.glob("Downvotes_*.bplist"))) == 1


def test_blank_mode_defaults_to_upvotes(install_dir, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["--output-dir", str(out), "--no-pause"], input=f"\n{install_dir}\n")

    assert result.exit_code == 0, result.output
    assert len(list(out.glob("Upvotes_*.bplist"))) == 1


def test_unrecognized_mode_defaults_to_upvotes(install_dir, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["--output-dir", str(out), "--no-pause"], input=f"x\n{install_dir}\n")

    assert "Unrecognized option" in result.output
    assert len(list(out.glob("Upvotes_*.bplist"))) == 1


def test_favorites_player_prompt(tmp_path):
    player_data = write_json(
        tmp_path / "PlayerData.dat",
        {
            "localPlayers": [
                {"playerId": "1", "playerName": "Alice", "favoritesLevelIds": ["custom_level_AAA"]},
                {"playerId": "2", "playerName": "Bob", "favoritesLevelIds": ["custom_level_DDD"]},
            ]
        },
    )
    out = tmp_path / "out"
    result = runner.invoke(
        app,
        ["-m", "favorites", "--player-data", str(player_data), "-o", str(out), "--no-pause"],
        input="1\n",
    )

    assert result.exit_code == 0, result.output
    assert "[0] 1 (Alice)" in result.output
    assert "[1] 2 (Bob)" in result.output
    [written] = out.glob("Favorites_*.bplist")
    assert [s.hash for s in load_playlist(written).songs] == ["DDD"]


def test_favorites_player_option(tmp_path):
    player_data = write_json(
        tmp_path / "PlayerData.dat",
        {
            "localPlayers": [
                {"playerId": "1", "playerName": "Alice", "favoritesLevelIds": ["custom_level_AAA"]},
                {"playerId": "2", "playerName": "Bob", "favoritesLevelIds": ["custom_level_DDD"]},
            ]
        },
    )
    out = tmp_path / "out"
    result = runner.invoke(
        app,
        ["-m", "f", "--player-data", str(player_data), "-p", "0", "-o", str(out), "--no-pause"],
    )

    assert result.exit_code == 0, result.output
    [written] = out.glob("Favorites_*.bplist")
    assert [s.hash for s in load_playlist(written).songs] == ["AAA"]


def test_errors_are_reported_without_exit_code(tmp_path):
    result = runner.invoke(
        app,
        ["-m", "u", "-b", str(tmp_path / "missing"), "-o", str(tmp_path / "out"), "--no-pause"],
    )

    assert result.exit_code == 0
    assert "Invalid path" in result.output
    assert not (tmp_path / "out").exists()


def test_invalid_mode_option(tmp_path):
    result = runner.invoke(app, ["-m", "sideways", "-o", str(tmp_path), "--no-pause"])

    assert result.exit_code == 0
    assert "Unrecognized export mode" in result.output



def combined_output(result) -> str:
    try:
        stderr = result.stderr
    except ValueError:
        stderr = ""
    return result.stdout + stderr


def test_pause_before_exit(monkeypatch, tmp_path):
    paused = []
    monkeypatch.setattr(cli, "wait_for_keypress", lambda: paused.append(True))

    runner.invoke(app, ["-m", "u", "-b", str(tmp_path / "missing")])

    assert paused == [True]


def test_no_pause_skips_wait(monkeypatch, tmp_path):
    paused = []
    monkeypatch.setattr(cli, "wait_for_keypress", lambda: paused.append(True))

    runner.invoke(app, ["-m", "u", "-b", str(tmp_path / "missing"), "--no-pause"])

    assert paused == []


def test_default_run_returns_normally(install_dir, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["-m", "u", "-b", str(install_dir), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert result.exception is None
    assert len(list(out.glob("Upvotes_*.bplist"))) == 1


def test_failed_run_without_no_pause_returns_normally(tmp_path):
    result = runner.invoke(app, ["-m", "u", "-b", str(tmp_path / "missing")])

    assert result.exit_code == 0
    assert result.exception is None
    assert "Invalid path" in result.output


def test_wait_for_keypress_reads_a_key_on_a_terminal(monkeypatch, capsys):
    keys = []

    class Terminal:
        def isatty(self):
            return True

    monkeypatch.setattr(cli.sys, "stdin", Terminal())
    monkeypatch.setattr(cli.typer, "getchar", lambda *args, **kwargs: keys.append(True) or "x")

    cli.wait_for_keypress()

    assert keys == [True]
    assert "Press any key to continue..." in capsys.readouterr().out


def test_wait_for_keypress_skipped_without_terminal(monkeypatch):
    class Pipe:
        def isatty(self):
            return False

    monkeypatch.setattr(cli.sys, "stdin", Pipe())
    monkeypatch.setattr(cli.typer, "getchar", lambda *args, **kwargs: pytest.fail("getchar called"))

    cli.wait_for_keypress()


def test_log_level_error_silences_info_and_debug(install_dir, tmp_path):
    result = runner.invoke(
        app,
        ["-m", "u", "-b", str(install_dir), "-o", str(tmp_path / "out"), "--log-level", "ERROR", "--no-pause"],
    )

    assert result.exit_code == 0, result.output
    output = combined_output(result)
    assert "[info" not in output
    assert "[debug" not in output
    assert "export_start" not in output


def test_log_format_json(install_dir, tmp_path):
    result = runner.invoke(
        app,
        [
            "-m", "u", "-b", str(install_dir), "-o", str(tmp_path / "out"),
            "--log-level", "INFO", "--log-format", "json", "--no-pause",
        ],
    )

    assert result.exit_code == 0, result.output
    assert '"event": "export_start"' in combined_output(result)
    assert "[info" not in combined_output(result)


def test_log_lines_stay_off_stdout(install_dir, tmp_path):
    result = runner.invoke(
        app,
        ["-m", "u", "-b", str(install_dir), "-o", str(tmp_path / "out"), "--log-level", "DEBUG", "--no-pause"],
    )

    assert result.exit_code == 0, result.output
    try:
        result.stderr
    except ValueError:
        pytest.skip("stderr is mixed into stdout by this click version")
    assert "export_start" not in result.stdout
    assert "Maps exported: 2" in result.stdout


def test_eof_at_prompt_is_reported_briefly(tmp_path):
    result = runner.invoke(app, ["-o", str(tmp_path / "out"), "--no-pause"], input="")

    assert result.exit_code == 0
    output = combined_output(result)
    assert "Aborted." in output
    assert "Traceback" not in output
    assert "export_failed" not in output
