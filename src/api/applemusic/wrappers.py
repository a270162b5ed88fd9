"""
Apple Music Async Wrappers - One method per catalog resource type.

Every method resolves exactly once to (resource, None) or (None, AMError);
multi-id methods return a list, possibly empty, in response order.
Nothing raises across this boundary.
"""

import asyncio
from typing import TypeVar

from pydantic import ValidationError

from api.applemusic.core import AppleMusicService
from api.applemusic.models import (
    AMError,
    Album,
    AppleCurator,
    Artist,
    CatalogResource,
    Curator,
    Genre,
    MusicVideo,
    Playlist,
    ResourceObject,
    ResourceOutcome,
    Song,
    Station,
    Storefront,
)
from api.applemusic.relationships import merge_relationships
from utils.get_logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=CatalogResource)


def decode_resource(model: type[T], resource: ResourceObject) -> T:
    """Decode one `data` entry: attributes first, then relationships."""
    item = model.model_validate(resource.attributes)
    item.id = resource.id
    item.type = resource.type
    item.href = resource.href
    merge_relationships(item, resource.relationships)
    return item


class AppleMusicWrapper:
    def __init__(self, service: AppleMusicService | None = None):
        self._service = service

    @property
    def service(self) -> AppleMusicService:
        """Lazy-load service instance on first use."""
        if self._service is None:
            self._service = AppleMusicService()
        return self._service

    async def _get_one(self, model: type[T], url: str) -> tuple[T | None, AMError | None]:
        try:
            tokens = await self.service.acquire_tokens()
            outcome = await self.service.fetch(url, tokens, single=True)

            if isinstance(outcome, ResourceOutcome):
                return decode_resource(model, outcome.resources[0]), None
            return None, outcome.error
        except asyncio.CancelledError:
            raise
        except ValidationError as e:
            logger.error(f"Could not decode {model.__name__} from {url}: {e}")
            return None, AMError.unauthorized()
        except Exception as e:
            logger.error(f"Error fetching {model.__name__} from {url}: {e}")
            return None, AMError.unauthorized()

    async def _get_many(
        self, model: type[T], ids: list[str], url: str
    ) -> tuple[list[T] | None, AMError | None]:
        try:
            tokens = await self.service.acquire_tokens()

            # an empty id list still needs a token, but never reaches the catalog
            if not ids:
                if not tokens.developer_token:
                    logger.error("Missing token")
                    return None, AMError.unauthorized()
                return [], None

            outcome = await self.service.fetch(url, tokens)

            if isinstance(outcome, ResourceOutcome):
                return [decode_resource(model, resource) for resource in outcome.resources], None
            return None, outcome.error
        except asyncio.CancelledError:
            raise
        except ValidationError as e:
            logger.error(f"Could not decode {model.__name__} list from {url}: {e}")
            return None, AMError.unauthorized()
        except Exception as e:
            logger.error(f"Error fetching {model.__name__} list from {url}: {e}")
            return None, AMError.unauthorized()

    def _catalog_url(
        self,
        model: type[CatalogResource],
        storefront: str,
        resource_id: str | None = None,
        ids: list[str] | None = None,
        lang: str | None = None,
    ) -> str:
        return self.service.build_catalog_url(
            storefront, model.resource_type, resource_id=resource_id, ids=ids, lang=lang
        )

    # ------------------------------------------------------------------ #
    #  Artists                                                           #
    # ------------------------------------------------------------------ #

    async def get_artist(
        self, artist_id: str, storefront: str, lang: str | None = None
    ) -> tuple[Artist | None, AMError | None]:
        """
        Get an Artist by storefront and artist id.

        Args:
            artist_id: The id of the artist. Example: "179934"
            storefront: Two-letter store code. Example: "us"
            lang: Optional language tag, e.g. "en-us"

        Example: https://api.music.apple.com/v1/catalog/us/artists/179934
        """
        url = self._catalog_url(Artist, storefront, resource_id=artist_id, lang=lang)
        return await self._get_one(Artist, url)

    async def get_multiple_artists(
        self, artist_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[Artist] | None, AMError | None]:
        """
        Get several artists at once.

        Example: https://api.music.apple.com/v1/catalog/us/artists?ids=179934,463106
        """
        url = self._catalog_url(Artist, storefront, ids=artist_ids, lang=lang)
        return await self._get_many(Artist, artist_ids, url)

    # ------------------------------------------------------------------ #
    #  Albums                                                            #
    # ------------------------------------------------------------------ #

    async def get_album(
        self, album_id: str, storefront: str, lang: str | None = None
    ) -> tuple[Album | None, AMError | None]:
        url = self._catalog_url(Album, storefront, resource_id=album_id, lang=lang)
        return await self._get_one(Album, url)

    async def get_multiple_albums(
        self, album_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[Album] | None, AMError | None]:
        url = self._catalog_url(Album, storefront, ids=album_ids, lang=lang)
        return await self._get_many(Album, album_ids, url)

    # ------------------------------------------------------------------ #
    #  Songs                                                             #
    # ------------------------------------------------------------------ #

    async def get_song(
        self, song_id: str, storefront: str, lang: str | None = None
    ) -> tuple[Song | None, AMError | None]:
        """
        Get a Song by storefront and song id.

        Example: https://api.music.apple.com/v1/catalog/us/songs/900032829
        """
        url = self._catalog_url(Song, storefront, resource_id=song_id, lang=lang)
        return await self._get_one(Song, url)

    async def get_multiple_songs(
        self, song_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[Song] | None, AMError | None]:
        url = self._catalog_url(Song, storefront, ids=song_ids, lang=lang)
        return await self._get_many(Song, song_ids, url)

    # ------------------------------------------------------------------ #
    #  Music videos                                                      #
    # ------------------------------------------------------------------ #

    async def get_music_video(
        self, music_video_id: str, storefront: str, lang: str | None = None
    ) -> tuple[MusicVideo | None, AMError | None]:
        url = self._catalog_url(MusicVideo, storefront, resource_id=music_video_id, lang=lang)
        return await self._get_one(MusicVideo, url)

    async def get_multiple_music_videos(
        self, music_video_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[MusicVideo] | None, AMError | None]:
        url = self._catalog_url(MusicVideo, storefront, ids=music_video_ids, lang=lang)
        return await self._get_many(MusicVideo, music_video_ids, url)

    # ------------------------------------------------------------------ #
    #  Playlists                                                         #
    # ------------------------------------------------------------------ #

    async def get_playlist(
        self, playlist_id: str, storefront: str, lang: str | None = None
    ) -> tuple[Playlist | None, AMError | None]:
        url = self._catalog_url(Playlist, storefront, resource_id=playlist_id, lang=lang)
        return await self._get_one(Playlist, url)

    async def get_multiple_playlists(
        self, playlist_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[Playlist] | None, AMError | None]:
        url = self._catalog_url(Playlist, storefront, ids=playlist_ids, lang=lang)
        return await self._get_many(Playlist, playlist_ids, url)

    # ------------------------------------------------------------------ #
    #  Stations                                                          #
    # ------------------------------------------------------------------ #

    async def get_station(
        self, station_id: str, storefront: str, lang: str | None = None
    ) -> tuple[Station | None, AMError | None]:
        """
        Get a Station by storefront and station id.

        Example: https://api.music.apple.com/v1/catalog/us/stations/ra.985484166
        """
        url = self._catalog_url(Station, storefront, resource_id=station_id, lang=lang)
        return await self._get_one(Station, url)

    async def get_multiple_stations(
        self, station_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[Station] | None, AMError | None]:
        url = self._catalog_url(Station, storefront, ids=station_ids, lang=lang)
        return await self._get_many(Station, station_ids, url)

    # ------------------------------------------------------------------ #
    #  Curators                                                          #
    # ------------------------------------------------------------------ #

    async def get_curator(
        self, curator_id: str, storefront: str, lang: str | None = None
    ) -> tuple[Curator | None, AMError | None]:
        url = self._catalog_url(Curator, storefront, resource_id=curator_id, lang=lang)
        return await self._get_one(Curator, url)

    async def get_multiple_curators(
        self, curator_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[Curator] | None, AMError | None]:
        url = self._catalog_url(Curator, storefront, ids=curator_ids, lang=lang)
        return await self._get_many(Curator, curator_ids, url)

    async def get_apple_curator(
        self, curator_id: str, storefront: str, lang: str | None = None
    ) -> tuple[AppleCurator | None, AMError | None]:
        url = self._catalog_url(AppleCurator, storefront, resource_id=curator_id, lang=lang)
        return await self._get_one(AppleCurator, url)

    async def get_multiple_apple_curators(
        self, curator_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[AppleCurator] | None, AMError | None]:
        url = self._catalog_url(AppleCurator, storefront, ids=curator_ids, lang=lang)
        return await self._get_many(AppleCurator, curator_ids, url)

    # ------------------------------------------------------------------ #
    #  Genres & storefronts                                              #
    # ------------------------------------------------------------------ #

    async def get_genre(
        self, genre_id: str, storefront: str, lang: str | None = None
    ) -> tuple[Genre | None, AMError | None]:
        url = self._catalog_url(Genre, storefront, resource_id=genre_id, lang=lang)
        return await self._get_one(Genre, url)

    async def get_multiple_genres(
        self, genre_ids: list[str], storefront: str, lang: str | None = None
    ) -> tuple[list[Genre] | None, AMError | None]:
        url = self._catalog_url(Genre, storefront, ids=genre_ids, lang=lang)
        return await self._get_many(Genre, genre_ids, url)

    async def get_storefront(
        self, storefront_id: str, lang: str | None = None
    ) -> tuple[Storefront | None, AMError | None]:
        """
        Get a Storefront by its two-letter id.

        Example: https://api.music.apple.com/v1/storefronts/us
        """
        url = self.service.build_storefront_url(storefront_id, lang=lang)
        return await self._get_one(Storefront, url)

    async def get_multiple_storefronts(
        self, storefront_ids: list[str], lang: str | None = None
    ) -> tuple[list[Storefront] | None, AMError | None]:
        url = self.service.build_storefront_url(ids=storefront_ids, lang=lang)
        return await self._get_many(Storefront, storefront_ids, url)


applemusic_wrapper = AppleMusicWrapper()
