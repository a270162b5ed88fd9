"""
Relationship merging for decoded catalog resources.

Each resource type maps relationship names (keys of the `relationships` bag)
to the model field they fill and the decoder that turns the relationship's
`data` array into values for that field. Several relationship names may feed
the same field; their values are appended in table order.
"""

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from api.applemusic.models import (
    CatalogResource,
    MusicVideo,
    Playlist,
    Relationship,
    ResourceType,
    Song,
    as_text,
)
from utils.get_logger import get_logger

logger = get_logger(__name__)

RelationshipDecoder = Callable[[list[dict[str, Any]]], list[Any]]


def as_references(entries: list[dict[str, Any]]) -> list[Relationship]:
    """Keep only the id/type/href of each related resource."""
    return [Relationship.model_validate(entry) for entry in entries if isinstance(entry, dict)]


def as_resources(model: type[CatalogResource]) -> RelationshipDecoder:
    """Decode each related resource's attributes into `model`; entries without attributes are skipped."""

    def decode(entries: list[dict[str, Any]]) -> list[Any]:
        decoded = []
        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("attributes"), dict):
                continue
            item = model.model_validate(entry["attributes"])
            item.id = as_text(entry.get("id"))
            item.type = as_text(entry.get("type"))
            item.href = as_text(entry.get("href"))
            decoded.append(item)
        return decoded

    return decode


RELATIONSHIP_REGISTRY: dict[ResourceType, dict[str, tuple[str, RelationshipDecoder]]] = {
    ResourceType.ARTISTS: {
        "albums": ("relationships", as_references),
        "genres": ("relationships", as_references),
        "music-videos": ("music_videos", as_resources(MusicVideo)),
        "playlists": ("relationships", as_references),
    },
    ResourceType.SONGS: {
        "albums": ("relationships", as_references),
        "artists": ("relationships", as_references),
        "genres": ("relationships", as_references),
    },
    ResourceType.ALBUMS: {
        "artists": ("relationships", as_references),
        "genres": ("relationships", as_references),
        "tracks": ("tracks", as_resources(Song)),
    },
    ResourceType.MUSIC_VIDEOS: {
        "albums": ("relationships", as_references),
        "artists": ("relationships", as_references),
        "genres": ("relationships", as_references),
    },
    ResourceType.PLAYLISTS: {
        "curator": ("relationships", as_references),
        "tracks": ("tracks", as_resources(Song)),
    },
    ResourceType.CURATORS: {
        "playlists": ("playlists", as_resources(Playlist)),
    },
    ResourceType.APPLE_CURATORS: {
        "playlists": ("playlists", as_resources(Playlist)),
    },
}


def merge_relationships(resource: CatalogResource, relationships: dict[str, Any] | None) -> None:
    """
    Attach related resources to an already-decoded resource, in place.

    Relationship names the registry does not know, and relationships without
    a `data` array, are ignored. Fields are only set when something decoded,
    so a resource with no usable relationships keeps None there.

    Raises:
        ValidationError: if a related resource's attributes do not fit its model
    """
    if not relationships:
        return

    table = RELATIONSHIP_REGISTRY.get(resource.resource_type, {})
    collected: dict[str, list[Any]] = {}

    for name, (field, decode) in table.items():
        root = relationships.get(name)
        if not isinstance(root, dict) or not isinstance(root.get("data"), list):
            continue
        try:
            values = decode(root["data"])
        except ValidationError:
            logger.error(f"Could not decode '{name}' relationship of {resource.resource_type.value}")
            raise
        collected.setdefault(field, []).extend(values)

    for field, values in collected.items():
        if values:
            setattr(resource, field, values)
