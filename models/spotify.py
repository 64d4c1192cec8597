from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class RefreshedToken(BaseModel):
    """Refresh grant result; refresh_token is only present when Spotify rotates it"""
    access_token: str
    refresh_token: Optional[str] = None


class SpotifyAuthError(BaseModel):
    error: str
    error_description: Optional[str] = None


# Raw "currently playing" payload. Spotify may omit any level of it, so every
# field is optional and unknown fields are ignored.

class _SpotifyPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SpotifyExternalUrls(_SpotifyPayload):
    spotify: Optional[str] = None


class SpotifyImage(_SpotifyPayload):
    url: str
    height: Optional[int] = None
    width: Optional[int] = None


class SpotifyAlbum(_SpotifyPayload):
    name: Optional[str] = None
    external_urls: Optional[SpotifyExternalUrls] = None
    images: Optional[List[SpotifyImage]] = None


class SpotifyTrackArtist(_SpotifyPayload):
    name: Optional[str] = None
    external_urls: Optional[SpotifyExternalUrls] = None


class SpotifyTrack(_SpotifyPayload):
    album: Optional[SpotifyAlbum] = None
    artists: Optional[List[SpotifyTrackArtist]] = None
    duration_ms: Optional[int] = None
    external_urls: Optional[SpotifyExternalUrls] = None
    name: Optional[str] = None


class SpotifyCurrentlyPlaying(_SpotifyPayload):
    progress_ms: Optional[int] = None
    is_playing: Optional[bool] = None
    item: Optional[SpotifyTrack] = None


# Public shape served to the website widget

class NowPlayingAlbum(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None


class NowPlayingArtist(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None


class NowPlayingImage(BaseModel):
    url: str
    height: Optional[int] = None
    width: Optional[int] = None


class NowPlaying(BaseModel):
    album: NowPlayingAlbum = Field(default_factory=NowPlayingAlbum)
    artists: List[NowPlayingArtist] = Field(default_factory=list)
    duration_ms: Optional[int] = None
    images: List[NowPlayingImage] = Field(default_factory=list)
    is_playing: Optional[bool] = None
    name: Optional[str] = None
    progress_ms: Optional[int] = None
    url: Optional[str] = None


class TokenStatus(BaseModel):
    setup_mode: bool
    has_access_token: bool
    has_refresh_token: bool
    refresh_interval_seconds: int
