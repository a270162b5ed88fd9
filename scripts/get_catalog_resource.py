#!/usr/bin/env python3
"""CLI script to fetch Apple Music catalog resources and print them as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from api.applemusic import (
    AppleMusicWrapper,
    DebugLevel,
    SourceAPI,
    StaticUserTokenAuthorizer,
    applemusic_auth,
    initialize,
)

# Load env after imports so E402 is satisfied; path setup is via PYTHONPATH
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(str(_PROJECT_ROOT / "config" / "local.env"))

# CLI resource name -> (single method, multiple method)
RESOURCE_METHODS = {
    "artist": ("get_artist", "get_multiple_artists"),
    "album": ("get_album", "get_multiple_albums"),
    "song": ("get_song", "get_multiple_songs"),
    "music-video": ("get_music_video", "get_multiple_music_videos"),
    "playlist": ("get_playlist", "get_multiple_playlists"),
    "station": ("get_station", "get_multiple_stations"),
    "curator": ("get_curator", "get_multiple_curators"),
    "apple-curator": ("get_apple_curator", "get_multiple_apple_curators"),
    "genre": ("get_genre", "get_multiple_genres"),
    "storefront": ("get_storefront", "get_multiple_storefronts"),
}


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch one or more Apple Music catalog resources.",
        usage="%(prog)s <resource> <id> [<id> ...] [--storefront us] [--lang TAG] [--user-token T]",
    )
    parser.add_argument("resource", choices=sorted(RESOURCE_METHODS), help="Resource type.")
    parser.add_argument("ids", nargs="+", help="Catalog id(s). More than one uses the ids= form.")
    parser.add_argument("--storefront", default="us", help="Storefront code (default: us).")
    parser.add_argument("--lang", default=None, help="Language tag, e.g. en-us.")
    parser.add_argument(
        "--user-token",
        default=os.getenv("APPLE_MUSIC_USER_TOKEN"),
        help="Music-User-Token; switches the session to user mode.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log requests to stderr.")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2).")
    return parser.parse_args()


def _to_serializable(payload: Any) -> Any:
    if isinstance(payload, list):
        return [_to_serializable(item) for item in payload]
    if hasattr(payload, "to_dict"):
        return payload.to_dict()
    return payload


async def main() -> None:
    args = _parse_args()

    key_id = os.getenv("APPLE_MUSIC_KEY_ID")
    team_id = os.getenv("APPLE_MUSIC_TEAM_ID")
    token_server = os.getenv("APPLE_MUSIC_TOKEN_SERVER")
    if not (key_id and team_id and token_server):
        print(
            "APPLE_MUSIC_KEY_ID, APPLE_MUSIC_TEAM_ID and APPLE_MUSIC_TOKEN_SERVER must be set. "
            "Source config/local.env or export them.",
            file=sys.stderr,
        )
        sys.exit(1)

    initialize(key_id=key_id, team_id=team_id, token_server=token_server)
    if args.verbose:
        applemusic_auth.debug_level = DebugLevel.VERBOSE
    if args.user_token:
        applemusic_auth.source = SourceAPI.USER
        applemusic_auth.media_authorizer = StaticUserTokenAuthorizer(args.user_token)

    wrapper = AppleMusicWrapper()
    single_name, multiple_name = RESOURCE_METHODS[args.resource]

    if len(args.ids) == 1:
        method = getattr(wrapper, single_name)
        target = args.ids[0]
    else:
        method = getattr(wrapper, multiple_name)
        target = args.ids

    if args.resource == "storefront":
        result, error = await method(target, lang=args.lang)
    else:
        result, error = await method(target, storefront=args.storefront, lang=args.lang)

    if error is not None:
        print(
            f"Error fetching {args.resource} {' '.join(args.ids)}: "
            f"{error.title} - {error.status} ({error.detail})",
            file=sys.stderr,
        )
        sys.exit(2)

    print(json.dumps(_to_serializable(result), indent=args.indent, default=str, ensure_ascii=False))
    sys.exit(0)


if __name__ == "__main__":
    asyncio.run(main())
