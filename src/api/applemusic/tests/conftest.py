"""
Shared fixtures and utilities for Apple Music service tests.
"""

# Set environment to test mode FIRST, before any imports
import os

os.environ["ENVIRONMENT"] = "test"

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from api.applemusic.auth import AppleMusicAuth
from api.applemusic.core import AppleMusicService
from api.applemusic.models import AuthorizationStatus, SourceAPI
from api.applemusic.wrappers import AppleMusicWrapper

TEST_KEY_ID = "C234234AS"
TEST_TEAM_ID = "AS234ASF2"
TEST_TOKEN_SERVER = "https://tokens.example.com/api/apple"
TEST_DEVELOPER_TOKEN = "alf9dsahf92fjdsa.fdsaifjds89a4fh"
TEST_USER_TOKEN = "user-token-12345"

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(filename: str) -> dict:
    """Load a fixture from JSON file.

    Args:
        filename: Name of the fixture file

    Returns:
        Parsed JSON data
    """
    fixture_path = FIXTURES_DIR / filename
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

    with open(fixture_path) as f:
        return json.load(f)


class FakeAuthorizer:
    """MediaAuthorizer double that records calls."""

    def __init__(
        self,
        status: AuthorizationStatus = AuthorizationStatus.AUTHORIZED,
        user_token: str | None = TEST_USER_TOKEN,
        exchange_error: Exception | None = None,
    ):
        self.status = status
        self.user_token = user_token
        self.exchange_error = exchange_error
        self.authorization_calls = 0
        self.exchanged_tokens: list[str] = []

    async def request_authorization(self) -> AuthorizationStatus:
        self.authorization_calls += 1
        return self.status

    async def request_user_token(self, developer_token: str) -> str | None:
        self.exchanged_tokens.append(developer_token)
        if self.exchange_error is not None:
            raise self.exchange_error
        return self.user_token


@pytest.fixture(autouse=True)
def clear_applemusic_env(monkeypatch):
    """Keep real credentials from the shell out of unit tests."""
    for name in ("APPLE_MUSIC_KEY_ID", "APPLE_MUSIC_TEAM_ID", "APPLE_MUSIC_TOKEN_SERVER"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def auth():
    """AppleMusicAuth configured in developer mode."""
    instance = AppleMusicAuth()
    instance.initialize(key_id=TEST_KEY_ID, team_id=TEST_TEAM_ID, token_server=TEST_TOKEN_SERVER)
    return instance


@pytest.fixture
def unconfigured_auth():
    return AppleMusicAuth()


@pytest.fixture
def user_auth(auth):
    """AppleMusicAuth in user mode with an authorizer that grants and exchanges."""
    auth.source = SourceAPI.USER
    auth.media_authorizer = FakeAuthorizer()
    return auth


@pytest.fixture
def mock_token_server(auth):
    """Token server answering 200 {"token": ...}."""
    with patch.object(
        auth,
        "_core_async_post_request",
        new_callable=AsyncMock,
        return_value=({"token": TEST_DEVELOPER_TOKEN}, 200),
    ) as mock_post:
        yield mock_post


@pytest.fixture
def service(auth):
    return AppleMusicService(auth=auth)


@pytest.fixture
def wrapper(service):
    return AppleMusicWrapper(service=service)


@pytest.fixture
def mock_catalog(service):
    """Patch the catalog GET; set .return_value to (body, status) in each test."""
    with patch.object(service, "_core_async_request", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = ({"data": []}, 200)
        yield mock_get


@pytest.fixture
def artist_response():
    return load_fixture("artist.json")


@pytest.fixture
def multiple_songs_response():
    return load_fixture("songs.json")


@pytest.fixture
def not_found_response():
    return {
        "errors": [
            {
                "id": "QMJ4ACPKZXKBBRCCAQ2X4XHT7Q",
                "status": "404",
                "code": "40400",
                "title": "Resource Not Found",
                "detail": "Resource with requested id was not found",
            }
        ]
    }
