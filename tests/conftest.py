import asyncio
import json
import os
from pathlib import Path
from typing import Any, Callable, Dict

import httpx
import pytest
from typer.testing import CliRunner

from gazelle_api.infrastructure.api.client import GazelleClient
from gazelle_api.infrastructure.api.factory import GazelleClientFactory, GazelleClientOptions
from gazelle_api.infrastructure.config import settings

TEST_URL = "https://tracker.test"
TEST_KEY = "test-api-key"


class FakeClock:
    """Manually advanced monotonic clock; ``sleep`` advances it instantly."""

    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path: Path):
    """Keeps tests away from the real ~/.gazelle config, .env files and GAZELLE_* variables."""
    for key in list(os.environ):
        if key.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "missing-config.yaml")
    monkeypatch.chdir(tmp_path)
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()


def envelope(response: Any = None, error: str = None, status: str = None) -> bytes:
    """Builds a Gazelle JSON body."""
    body: Dict[str, Any] = {"status": status or ("failure" if error else "success")}
    if response is not None:
        body["response"] = response
    if error is not None:
        body["error"] = error
    return json.dumps(body).encode()


def json_response(status_code: int, body: bytes) -> httpx.Response:
    return httpx.Response(status_code, content=body, headers={"Content-Type": "application/json"})


@pytest.fixture
def make_client() -> Callable[..., GazelleClient]:
    """Factory for clients whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], name: str = "ops", **limits: Any) -> GazelleClient:
        options = GazelleClientOptions(
            name=name,
            key=TEST_KEY,
            url=TEST_URL,
            requests_allowed_per_duration=limits.get("requests"),
            request_limit_duration=limits.get("window"),
        )
        return GazelleClientFactory(options, transport=httpx.MockTransport(handler)).create()

    return _make


@pytest.fixture
def group_payload() -> Dict[str, Any]:
    return {
        "wikiBody": "<p>Debut album</p>",
        "bbBody": "Debut album",
        "wikiImage": "https://img.test/cover.jpg",
        "id": 72189,
        "name": "Sample Album",
        "year": 2012,
        "recordLabel": "Sample Records",
        "catalogueNumber": "SR-001",
        "releaseType": 1,
        "categoryId": 0,
        "categoryName": "Music",
        "time": "2012-05-01 12:00:00",
        "vanityHouse": False,
        "isBookmarked": False,
        "tags": ["electronic", "ambient"],
        "musicInfo": {
            "composers": [],
            "dj": [],
            "artists": [{"id": 1460, "name": "Sample Artist"}],
            "with": [{"id": 1461, "name": "Guest Artist"}],
            "conductor": [],
            "remixedBy": [],
            "producer": [],
        },
    }


@pytest.fixture
def torrent_item() -> Dict[str, Any]:
    return {
        "id": 12345,
        "media": "CD",
        "format": "FLAC",
        "encoding": "Lossless",
        "remastered": True,
        "remasterYear": 2012,
        "remasterTitle": "Deluxe",
        "remasterRecordLabel": "Sample Records",
        "remasterCatalogueNumber": "SR-001D",
        "scene": False,
        "hasLog": True,
        "hasCue": True,
        "logScore": 100,
        "fileCount": 2,
        "size": 314572800,
        "seeders": 12,
        "leechers": 0,
        "snatched": 40,
        "freeTorrent": False,
        "reported": False,
        "time": "2012-05-01 12:30:00",
        "description": "",
        "fileList": "01 - Intro.flac{{{1024}}}|||02 - Outro.flac{{{2048}}}|||folder.jpg{{{512}}}",
        "filePath": "Sample Artist - Sample Album (2012) [FLAC]",
        "userId": 42,
        "username": "uploader",
        "trumpable": False,
    }


@pytest.fixture
def torrent_payload(group_payload, torrent_item) -> Dict[str, Any]:
    return {"group": group_payload, "torrent": torrent_item}


@pytest.fixture
def user_payload() -> Dict[str, Any]:
    return {
        "username": "listener",
        "avatar": "",
        "isFriend": False,
        "profileText": "",
        "stats": {
            "joinedDate": "2015-01-01 00:00:00",
            "lastAccess": "2024-01-01 00:00:00",
            "uploaded": 10737418240,
            "downloaded": 5368709120,
            "ratio": 2.0,
            "requiredRatio": 0.6,
        },
        "ranks": {
            "uploaded": 90, "downloaded": 80, "uploads": 70, "requests": 0,
            "bounty": 0, "posts": 10, "artists": 0, "overall": 75,
        },
        "personal": {
            "class": "Power User",
            "paranoia": 0,
            "paranoiaText": "Off",
            "donor": False,
            "warned": False,
            "enabled": True,
            "passkey": "secret-passkey",
        },
        "community": {
            "posts": 3, "torrentComments": 1, "collagesStarted": 0, "collagesContrib": 0,
            "requestsFilled": 2, "requestsVoted": 5, "perfectFlacs": 7, "uploaded": 9,
            "groups": 8, "seeding": 20, "leeching": 0, "snatched": 30, "invited": None,
        },
    }
