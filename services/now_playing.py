from typing import Any, Callable, Dict, List, Optional, TypeVar
import logging
from pydantic import BaseModel
from models.spotify import (
    NowPlaying,
    NowPlayingAlbum,
    NowPlayingArtist,
    NowPlayingImage,
    SpotifyCurrentlyPlaying,
)
from services.spotify import SpotifyClient

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _then(value: Optional[T], step: Callable[[T], Optional[R]]) -> Optional[R]:
    """Apply step to value, short-circuiting to None when value is absent"""
    if value is None:
        return None
    return step(value)


def _sent(payload: Optional[BaseModel], *names: str) -> Dict[str, Any]:
    """Fields Spotify actually included in payload, explicit nulls kept"""
    if payload is None:
        return {}
    return {name: getattr(payload, name) for name in names if name in payload.model_fields_set}


def _sent_url(payload: Optional[BaseModel]) -> Dict[str, Any]:
    urls = _then(payload, lambda p: p.external_urls)
    if urls is None:
        return {}
    sent = _sent(urls, "spotify")
    return {"url": sent["spotify"]} if sent else {}


def map_now_playing(response: SpotifyCurrentlyPlaying) -> NowPlaying:
    """Flatten Spotify's currently-playing payload into the public shape.

    Only fields Spotify sent are set on the result, so serializing with
    exclude_unset drops missing levels but keeps explicit nulls. Artists and
    album images keep Spotify's order and count.
    """
    item = response.item
    album = _then(item, lambda i: i.album)
    artists: List[NowPlayingArtist] = [
        NowPlayingArtist(**_sent(artist, "name"), **_sent_url(artist))
        for artist in (_then(item, lambda i: i.artists) or [])
    ]
    images: List[NowPlayingImage] = [
        NowPlayingImage(url=image.url, height=image.height, width=image.width)
        for image in (_then(album, lambda a: a.images) or [])
    ]

    return NowPlaying(
        album=NowPlayingAlbum(**_sent(album, "name"), **_sent_url(album)),
        artists=artists,
        images=images,
        **_sent(response, "is_playing", "progress_ms"),
        **_sent(item, "duration_ms", "name"),
        **_sent_url(item),
    )


class NowPlayingService:
    def __init__(self, spotify_client: SpotifyClient, market: str):
        self.spotify_client = spotify_client
        self.market = market

    async def fetch_now_playing(self, access_token: str) -> NowPlaying:
        """Read what is playing right now with an already-loaded access token"""
        response = await self.spotify_client.get_currently_playing(access_token, self.market)
        if response.item is None:
            logger.info("Nothing is currently playing")
        return map_now_playing(response)
