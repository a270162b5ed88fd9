"""
Apple Music Models - Pydantic models for Apple Music catalog API data structures.

Resource models are decoded from the `attributes` bag of one `data` entry.
Relationship data is merged in afterwards (see relationships.py).
"""

import logging
from enum import Enum
from typing import Any, ClassVar

from pydantic import Field, field_validator

from utils.pydantic_tools import BaseModelWithMethods

# ============================================================================
# Enums
# ============================================================================


class SourceAPI(str, Enum):
    """Which token the client authenticates with."""

    DEVELOPER = "developer"
    USER = "user"


class DebugLevel(str, Enum):
    """Console verbosity for the package loggers."""

    NONE = "none"
    VERBOSE = "verbose"

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self is DebugLevel.VERBOSE else logging.CRITICAL


class Rating(str, Enum):
    """RIAA content rating. An empty string means no rating."""

    CLEAN = "clean"
    EXPLICIT = "explicit"
    NO_RATING = ""


class AuthorizationStatus(str, Enum):
    """Answer from the platform media-authorization service."""

    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    AUTHORIZED = "authorized"


class ResourceType(str, Enum):
    """Path segment for each catalog resource type."""

    ARTISTS = "artists"
    ALBUMS = "albums"
    SONGS = "songs"
    MUSIC_VIDEOS = "music-videos"
    PLAYLISTS = "playlists"
    STATIONS = "stations"
    CURATORS = "curators"
    APPLE_CURATORS = "apple-curators"
    GENRES = "genres"
    STOREFRONTS = "storefronts"


class ErrorCode(str, Enum):
    """Machine codes produced locally. Upstream codes pass through as plain strings."""

    UNAUTHORIZED = "unauthorized"


# ============================================================================
# Errors
# ============================================================================

def as_text(value: Any) -> Any:
    """Render non-string scalars (numeric ids, status codes) as strings."""
    if value is None or isinstance(value, str):
        return value
    return str(value)


UNAUTHORIZED_TITLE = "Unauthorized request"
UNAUTHORIZED_DETAIL = "Missing token, refresh current token or request a new token"


class AMError(BaseModelWithMethods):
    """Normalized error: one entry of an `errors` envelope, or synthesized locally."""

    id: str | None = None
    status: str | None = None
    code: str | None = None
    title: str | None = None
    detail: str | None = None
    # passed through as sent; usually objects, but not always
    source: Any = None
    meta: Any = None

    @field_validator("id", "status", "code", "title", "detail", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return as_text(value)

    @classmethod
    def unauthorized(cls) -> "AMError":
        return cls(
            status="401",
            code=ErrorCode.UNAUTHORIZED.value,
            title=UNAUTHORIZED_TITLE,
            detail=UNAUTHORIZED_DETAIL,
        )

    @property
    def is_unauthorized(self) -> bool:
        return self.code == ErrorCode.UNAUTHORIZED.value


# ============================================================================
# Tokens
# ============================================================================


class TokenResponse(BaseModelWithMethods):
    """Body returned by the token server."""

    token: str


class TokenPair(BaseModelWithMethods):
    """Result of one token acquisition round trip."""

    developer_token: str | None = None
    user_token: str | None = None


# ============================================================================
# Shared value models
# ============================================================================


class Artwork(BaseModelWithMethods):
    """Artwork URL template plus its dominant colors."""

    url: str | None = None
    width: int | None = None
    height: int | None = None
    bg_color: str | None = Field(None, alias="bgColor")
    text_color1: str | None = Field(None, alias="textColor1")
    text_color2: str | None = Field(None, alias="textColor2")
    text_color3: str | None = Field(None, alias="textColor3")
    text_color4: str | None = Field(None, alias="textColor4")

    def image_url(self, width: int | None = None, height: int | None = None) -> str | None:
        """Fill the {w}x{h} template, defaulting to the artwork's own size."""
        if not self.url:
            return None
        w = width or self.width or 0
        h = height or self.height or 0
        return self.url.replace("{w}", str(w)).replace("{h}", str(h))


class EditorialNotes(BaseModelWithMethods):
    standard: str | None = None
    short: str | None = None


class PlayParams(BaseModelWithMethods):
    """Parameters used to play back a resource."""

    id: str | None = None
    kind: str | None = None


class Preview(BaseModelWithMethods):
    url: str | None = None
    artwork: Artwork | None = None


class Relationship(BaseModelWithMethods):
    """Reference to a related resource (`id`/`type`/`href` without attributes)."""

    id: str | None = None
    type: str | None = None
    href: str | None = None

    @field_validator("id", "type", "href", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return as_text(value)


# ============================================================================
# Envelope
# ============================================================================


class ResourceObject(BaseModelWithMethods):
    """One entry of a `data` array."""

    id: str | None = None
    type: str | None = None
    href: str | None = None
    attributes: dict[str, Any]
    relationships: dict[str, Any] | None = None

    @field_validator("id", "type", "href", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return as_text(value)


class ResourceOutcome(BaseModelWithMethods):
    """`data` envelope: resource objects in response order."""

    resources: list[ResourceObject] = Field(default_factory=list)


class ErrorOutcome(BaseModelWithMethods):
    """`errors` envelope: the first upstream error."""

    error: AMError


class UnauthorizedOutcome(BaseModelWithMethods):
    """No token, transport failure, or a body matching neither envelope."""

    error: AMError = Field(default_factory=AMError.unauthorized)


CatalogOutcome = ResourceOutcome | ErrorOutcome | UnauthorizedOutcome


# ============================================================================
# Catalog resources
# ============================================================================


class CatalogResource(BaseModelWithMethods):
    """Fields every decoded resource carries, copied from its `data` entry."""

    resource_type: ClassVar[ResourceType]

    id: str | None = None
    type: str | None = None
    href: str | None = None


class RatedResource(CatalogResource):
    content_rating: Rating | None = Field(None, alias="contentRating")

    @field_validator("content_rating", mode="before")
    @classmethod
    def _known_rating(cls, value: Any) -> Any:
        if isinstance(value, str) and value not in {r.value for r in Rating}:
            return None
        return value


class Song(RatedResource):
    """Song resource. https://developer.apple.com/documentation/applemusicapi/song"""

    resource_type: ClassVar[ResourceType] = ResourceType.SONGS

    album_name: str | None = Field(None, alias="albumName")
    artist_name: str | None = Field(None, alias="artistName")
    artwork: Artwork | None = None
    composer_name: str | None = Field(None, alias="composerName")
    disc_number: int | None = Field(None, alias="discNumber")
    duration_in_millis: int | None = Field(None, alias="durationInMillis")
    editorial_notes: EditorialNotes | None = Field(None, alias="editorialNotes")
    genre_names: list[str] | None = Field(None, alias="genreNames")
    isrc: str | None = None
    movement_count: int | None = Field(None, alias="movementCount")
    movement_name: str | None = Field(None, alias="movementName")
    movement_number: int | None = Field(None, alias="movementNumber")
    name: str | None = None
    play_params: PlayParams | None = Field(None, alias="playParams")
    previews: list[Preview] | None = None
    release_date: str | None = Field(None, alias="releaseDate")
    track_number: int | None = Field(None, alias="trackNumber")
    url: str | None = None
    work_name: str | None = Field(None, alias="workName")

    relationships: list[Relationship] | None = None

    @field_validator("previews", mode="after")
    @classmethod
    def _empty_previews(cls, value: list[Preview] | None) -> list[Preview] | None:
        return value or None


class MusicVideo(RatedResource):
    """Music video resource."""

    resource_type: ClassVar[ResourceType] = ResourceType.MUSIC_VIDEOS

    album_name: str | None = Field(None, alias="albumName")
    artist_name: str | None = Field(None, alias="artistName")
    artwork: Artwork | None = None
    duration_in_millis: int | None = Field(None, alias="durationInMillis")
    editorial_notes: EditorialNotes | None = Field(None, alias="editorialNotes")
    genre_names: list[str] | None = Field(None, alias="genreNames")
    has_4k: bool | None = Field(None, alias="has4K")
    has_hdr: bool | None = Field(None, alias="hasHDR")
    isrc: str | None = None
    name: str | None = None
    play_params: PlayParams | None = Field(None, alias="playParams")
    previews: list[Preview] | None = None
    release_date: str | None = Field(None, alias="releaseDate")
    track_number: int | None = Field(None, alias="trackNumber")
    url: str | None = None
    video_sub_type: str | None = Field(None, alias="videoSubType")

    relationships: list[Relationship] | None = None


class Artist(CatalogResource):
    """Artist resource. https://developer.apple.com/documentation/applemusicapi/artist"""

    resource_type: ClassVar[ResourceType] = ResourceType.ARTISTS

    artwork: Artwork | None = None
    editorial_notes: EditorialNotes | None = Field(None, alias="editorialNotes")
    genre_names: list[str] | None = Field(None, alias="genreNames")
    name: str | None = None
    url: str | None = None

    relationships: list[Relationship] | None = None
    music_videos: list[MusicVideo] | None = None


class Album(RatedResource):
    """Album resource."""

    resource_type: ClassVar[ResourceType] = ResourceType.ALBUMS

    artist_name: str | None = Field(None, alias="artistName")
    artwork: Artwork | None = None
    copyright: str | None = None
    editorial_notes: EditorialNotes | None = Field(None, alias="editorialNotes")
    genre_names: list[str] | None = Field(None, alias="genreNames")
    is_complete: bool | None = Field(None, alias="isComplete")
    is_compilation: bool | None = Field(None, alias="isCompilation")
    is_mastered_for_itunes: bool | None = Field(None, alias="isMasteredForItunes")
    is_single: bool | None = Field(None, alias="isSingle")
    name: str | None = None
    play_params: PlayParams | None = Field(None, alias="playParams")
    record_label: str | None = Field(None, alias="recordLabel")
    release_date: str | None = Field(None, alias="releaseDate")
    track_count: int | None = Field(None, alias="trackCount")
    upc: str | None = None
    url: str | None = None

    relationships: list[Relationship] | None = None
    tracks: list[Song] | None = None


class Playlist(CatalogResource):
    """Playlist resource."""

    resource_type: ClassVar[ResourceType] = ResourceType.PLAYLISTS

    artwork: Artwork | None = None
    curator_name: str | None = Field(None, alias="curatorName")
    description: EditorialNotes | None = None
    last_modified_date: str | None = Field(None, alias="lastModifiedDate")
    name: str | None = None
    play_params: PlayParams | None = Field(None, alias="playParams")
    playlist_type: str | None = Field(None, alias="playlistType")
    url: str | None = None

    relationships: list[Relationship] | None = None
    tracks: list[Song] | None = None


class Station(CatalogResource):
    """Station resource. https://developer.apple.com/documentation/applemusicapi/station"""

    resource_type: ClassVar[ResourceType] = ResourceType.STATIONS

    artwork: Artwork | None = None
    duration_in_millis: int | None = Field(None, alias="durationInMillis")
    editorial_notes: EditorialNotes | None = Field(None, alias="editorialNotes")
    episode_number: int | None = Field(None, alias="episodeNumber")
    is_live: bool | None = Field(None, alias="isLive")
    name: str | None = None
    url: str | None = None


class Curator(CatalogResource):
    """Curator resource."""

    resource_type: ClassVar[ResourceType] = ResourceType.CURATORS

    artwork: Artwork | None = None
    editorial_notes: EditorialNotes | None = Field(None, alias="editorialNotes")
    name: str | None = None
    url: str | None = None

    playlists: list[Playlist] | None = None


class AppleCurator(Curator):
    """Apple curator resource (an Apple-owned curator such as a radio show)."""

    resource_type: ClassVar[ResourceType] = ResourceType.APPLE_CURATORS


class Genre(CatalogResource):
    resource_type: ClassVar[ResourceType] = ResourceType.GENRES

    name: str | None = None
    parent_id: str | None = Field(None, alias="parentId")
    parent_name: str | None = Field(None, alias="parentName")


class Storefront(CatalogResource):
    resource_type: ClassVar[ResourceType] = ResourceType.STOREFRONTS

    default_language_tag: str | None = Field(None, alias="defaultLanguageTag")
    explicit_content_policy: str | None = Field(None, alias="explicitContentPolicy")
    name: str | None = None
    supported_language_tags: list[str] | None = Field(None, alias="supportedLanguageTags")
