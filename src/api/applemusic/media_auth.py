"""
Platform media-authorization collaborators.

In user mode the token provider asks one of these for permission to act for
the listener, then exchanges the developer token for a Music-User-Token.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from api.applemusic.models import AuthorizationStatus


class MediaAuthorizer(Protocol):
    """Interface the token provider needs from the platform service."""

    async def request_authorization(self) -> AuthorizationStatus: ...

    async def request_user_token(self, developer_token: str) -> str | None: ...


class StaticUserTokenAuthorizer:
    """
    Authorizer for server-side use, where a MusicKit front end already obtained
    the listener's Music-User-Token and passed it along.
    """

    def __init__(self, music_user_token: str | None):
        self.music_user_token = music_user_token

    async def request_authorization(self) -> AuthorizationStatus:
        if self.music_user_token:
            return AuthorizationStatus.AUTHORIZED
        return AuthorizationStatus.DENIED

    async def request_user_token(self, developer_token: str) -> str | None:
        return self.music_user_token


class CallbackAuthorizer:
    """Adapts two async callables to the MediaAuthorizer interface."""

    def __init__(
        self,
        authorize: Callable[[], Awaitable[AuthorizationStatus]],
        exchange: Callable[[str], Awaitable[str | None]],
    ):
        self._authorize = authorize
        self._exchange = exchange

    async def request_authorization(self) -> AuthorizationStatus:
        return await self._authorize()

    async def request_user_token(self, developer_token: str) -> str | None:
        return await self._exchange(developer_token)
