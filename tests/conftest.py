"""Shared fixtures: source files on disk and a fake BeatSaver API."""

import json
from pathlib import Path

import httpx
import pytest
import structlog

from bsexport.config import Settings


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def map_hash(n: int) -> str:
    """A 40-character hex hash, distinct for each n."""
    return f"{n:040x}"


def catalog_entry(key: str, name: str) -> dict:
    return {"id": key, "name": name, "uploader": {"name": "mapper"}, "versions": []}


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    """A Beat Saber installation with a vote file."""
    root = tmp_path / "Beat Saber"
    write_json(
        root / "UserData" / "votedSongs.json",
        {
            "AAA": {"hash": "AAA", "voteType": "Upvote"},
            "BBB": {"hash": "BBB", "voteType": "Downvote"},
            "CCC": {"hash": "CCC", "voteType": "upvote"},
            "DDD": {"hash": "DDD", "voteType": "DOWNVOTE"},
        },
    )
    return root


@pytest.fixture
def player_data(tmp_path: Path) -> Path:
    return write_json(
        tmp_path / "PlayerData.dat",
        {
            "version": "2.0.26",
            "localPlayers": [
                {
                    "playerId": "76561198000000001",
                    "playerName": "Alice",
                    "favoritesLevelIds": ["custom_level_AAA", "someBuiltin", "custom_level_CCC"],
                }
            ],
        },
    )


class FakeBeatSaver:
    """Serves /maps/hash/ lookups from a dict and records every request."""

    def __init__(self, catalog: dict[str, dict] | None = None):
        self.catalog = catalog or {}
        self.requests: list[list[str]] = []
        self.status_code = 200

    def batches(self) -> list[int]:
        return [len(batch) for batch in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        hashes = request.url.path.rsplit("/", 1)[-1].split(",")
        self.requests.append(hashes)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "Server Error"})
        if len(hashes) == 1:
            entry = self.catalog.get(hashes[0])
            return httpx.Response(200, json=entry if entry is not None else {"error": "Not Found"})
        return httpx.Response(200, json={h: self.catalog.get(h) for h in hashes})

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def beatsaver() -> FakeBeatSaver:
    return FakeBeatSaver(
        {
            "AAA": catalog_entry("10", "Alpha"),
            "BBB": catalog_entry("2b", "Bravo"),
            "CCC": catalog_entry("1", "Charlie"),
            "DDD": catalog_entry("ff", "Delta"),
        }
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(output_dir=tmp_path / "out", player_data_path=None)
