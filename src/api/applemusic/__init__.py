"""
Apple Music Service Package - Async client for the Apple Music catalog API.

This package provides:
- AppleMusicAuth: Session configuration and developer/user token acquisition
- AppleMusicService: Catalog URL building, dispatch and envelope decoding
- AppleMusicWrapper: One method per catalog resource type
- Models: Pydantic models for resources and normalized errors

Usage:
    from api.applemusic import applemusic_wrapper, initialize

    initialize(key_id="C234234AS", team_id="AS234ASF2", token_server="https://localhost/getToken")
    artist, error = await applemusic_wrapper.get_artist("179934", storefront="us")
"""

from api.applemusic.auth import AppleMusicAuth, applemusic_auth, initialize
from api.applemusic.core import AppleMusicService
from api.applemusic.media_auth import CallbackAuthorizer, MediaAuthorizer, StaticUserTokenAuthorizer
from api.applemusic.models import (
    Album,
    AMError,
    AppleCurator,
    Artist,
    Artwork,
    AuthorizationStatus,
    CatalogOutcome,
    Curator,
    DebugLevel,
    EditorialNotes,
    ErrorCode,
    ErrorOutcome,
    Genre,
    MusicVideo,
    PlayParams,
    Playlist,
    Preview,
    Rating,
    Relationship,
    ResourceObject,
    ResourceOutcome,
    ResourceType,
    Song,
    SourceAPI,
    Station,
    Storefront,
    TokenPair,
    UnauthorizedOutcome,
)
from api.applemusic.relationships import RELATIONSHIP_REGISTRY, merge_relationships
from api.applemusic.wrappers import AppleMusicWrapper, applemusic_wrapper

__all__ = [
    # Auth
    "AppleMusicAuth",
    "applemusic_auth",
    "initialize",
    "MediaAuthorizer",
    "StaticUserTokenAuthorizer",
    "CallbackAuthorizer",
    # Core
    "AppleMusicService",
    # Wrappers
    "AppleMusicWrapper",
    "applemusic_wrapper",
    # Relationships
    "RELATIONSHIP_REGISTRY",
    "merge_relationships",
    # Enums
    "SourceAPI",
    "DebugLevel",
    "Rating",
    "AuthorizationStatus",
    "ResourceType",
    "ErrorCode",
    # Errors & envelope
    "AMError",
    "TokenPair",
    "ResourceObject",
    "ResourceOutcome",
    "ErrorOutcome",
    "UnauthorizedOutcome",
    "CatalogOutcome",
    # Resource models
    "Artist",
    "Album",
    "Song",
    "MusicVideo",
    "Playlist",
    "Station",
    "Curator",
    "AppleCurator",
    "Genre",
    "Storefront",
    # Value models
    "Artwork",
    "EditorialNotes",
    "PlayParams",
    "Preview",
    "Relationship",
]
