"""
Apple Music Auth Service - Session configuration and token acquisition.

Developer tokens come from your own token server, which signs the JWT. It
receives a POST with a JSON body like:

    {"kid": "C234234AS", "tid": "AS234ASF2"}

and must answer 200 with:

    {"token": "alf9dsahf92fjdsa.fdsaifjds89a4fh"}

In user mode the developer token is then exchanged for a Music-User-Token
through the configured MediaAuthorizer. Nothing is cached: every call to
acquire_token() performs the full round trip.
"""

import asyncio
import os

from pydantic import ValidationError

from api.applemusic.media_auth import MediaAuthorizer
from api.applemusic.models import (
    AuthorizationStatus,
    DebugLevel,
    SourceAPI,
    TokenPair,
    TokenResponse,
)
from utils.base_api_client import BaseAPIClient
from utils.get_logger import get_logger, set_level

logger = get_logger(__name__)

KEY_ID_ENV = "APPLE_MUSIC_KEY_ID"
TEAM_ID_ENV = "APPLE_MUSIC_TEAM_ID"
TOKEN_SERVER_ENV = "APPLE_MUSIC_TOKEN_SERVER"


class AppleMusicAuth(BaseAPIClient):
    """
    Session configuration plus the two-tier token flow.

    Set once at startup with initialize(); read by every request afterwards.
    Values never passed to initialize() are looked up in the environment on
    first use.
    """

    def __init__(
        self,
        source: SourceAPI = SourceAPI.DEVELOPER,
        media_authorizer: MediaAuthorizer | None = None,
    ):
        self._key_id: str | None = None
        self._team_id: str | None = None
        self._token_server: str | None = None
        self.source = source
        self.media_authorizer = media_authorizer
        self._debug_level = DebugLevel.NONE

    def initialize(self, key_id: str, team_id: str, token_server: str) -> None:
        """
        Store the credentials used to ask the token server for a developer token.

        Args:
            key_id: The ID of the MusicKit private key ('.p8' file)
            team_id: The ID of your Apple Developer account team
            token_server: URL of your own server that signs the JWT,
                e.g. https://localhost/getToken
        """
        self._key_id = key_id
        self._team_id = team_id
        self._token_server = token_server

    def reset(self) -> None:
        """Forget all configuration, including values loaded from the environment."""
        self._key_id = None
        self._team_id = None
        self._token_server = None
        self.source = SourceAPI.DEVELOPER
        self.media_authorizer = None
        self.debug_level = DebugLevel.NONE

    @property
    def key_id(self) -> str | None:
        if self._key_id is None:
            self._key_id = os.getenv(KEY_ID_ENV) or None
        return self._key_id

    @property
    def team_id(self) -> str | None:
        if self._team_id is None:
            self._team_id = os.getenv(TEAM_ID_ENV) or None
        return self._team_id

    @property
    def token_server(self) -> str | None:
        if self._token_server is None:
            self._token_server = os.getenv(TOKEN_SERVER_ENV) or None
        return self._token_server

    @property
    def debug_level(self) -> DebugLevel:
        return self._debug_level

    @debug_level.setter
    def debug_level(self, level: DebugLevel) -> None:
        self._debug_level = DebugLevel(level)
        set_level(self._debug_level.log_level)

    def has_token_information(self) -> bool:
        return bool(self.key_id and self.team_id and self.token_server)

    async def get_developer_token(self) -> str | None:
        """POST {kid, tid} to the token server. Any failure yields None."""
        if not self.has_token_information():
            logger.error("Missing token information for 'teamID'/'keyID'/'tokenServer'")
            return None

        response, status = await self._core_async_post_request(
            url=str(self.token_server),
            json_body={"kid": self.key_id, "tid": self.team_id},
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

        if status != 200:
            logger.error(f"statusCode should be 200, but is {status}")
            logger.debug(f"response = {response}")
            return None

        try:
            return TokenResponse.model_validate(response).token
        except ValidationError as e:
            logger.error(f"Token server returned an unexpected body: {e}")
            return None

    async def get_user_token(self, developer_token: str) -> TokenPair:
        """
        Ask the platform service for authorization, then exchange the developer token.

        Denied authorization discards the developer token entirely; a failed
        exchange keeps it.
        """
        if self.media_authorizer is None:
            logger.error("User token requested but no media authorizer is configured")
            return TokenPair()

        try:
            status = await self.media_authorizer.request_authorization()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Media authorization request failed: {e}")
            return TokenPair()

        if status != AuthorizationStatus.AUTHORIZED:
            logger.error(f"Media authorization not granted: {status}")
            return TokenPair()

        try:
            user_token = await self.media_authorizer.request_user_token(developer_token)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"User token exchange failed: {e}")
            user_token = None

        return TokenPair(developer_token=developer_token, user_token=user_token or None)

    async def acquire_token(self) -> TokenPair:
        """
        Run the token flow for the configured source.

        Returns:
            TokenPair: developer mode gives (developer, None); user mode gives
            (developer, user), (developer, None) when the exchange fails, or
            (None, None) when authorization is denied.
        """
        developer_token = await self.get_developer_token()
        if developer_token is None:
            return TokenPair()

        if self.source == SourceAPI.DEVELOPER:
            return TokenPair(developer_token=developer_token)

        return await self.get_user_token(developer_token)


# Singleton instance for use across the application
applemusic_auth = AppleMusicAuth()


def initialize(key_id: str, team_id: str, token_server: str) -> None:
    """Configure the shared session. Call before any resource request."""
    applemusic_auth.initialize(key_id=key_id, team_id=team_id, token_server=token_server)
