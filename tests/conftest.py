# tests/conftest.py
import base64
from typing import Callable, Dict, Optional
from urllib.parse import parse_qs
import httpx
import pytest
from config.settings import Settings
from services.spotify import SpotifyClient
from services.token_store import TokenStore

CLIENT_ID = "client-id"
CLIENT_SECRET = "client-secret"


class InMemoryRedis:
    """Just enough of redis.asyncio.Redis for TokenStore, with a write log"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.writes = []

    async def ping(self):
        return True

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.writes.append((key, value))
        self.data[key] = value
        return True

    async def aclose(self):
        pass


def basic_auth_header(client_id: str = CLIENT_ID, client_secret: str = CLIENT_SECRET) -> str:
    credentials = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()
    return f"Basic {credentials}"


def form_body(request: httpx.Request) -> Dict[str, str]:
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


@pytest.fixture
def settings():
    return Settings(client_id=CLIENT_ID, client_secret=CLIENT_SECRET)


@pytest.fixture
def setup_settings():
    return Settings(
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        redirect_url="https://bridge.example.com/callback"
    )


@pytest.fixture
def redis_backend():
    return InMemoryRedis()


@pytest.fixture
def token_store(redis_backend):
    return TokenStore("redis://unused", redis=redis_backend)


@pytest.fixture
def make_spotify_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], SpotifyClient]:
    """Build a SpotifyClient whose HTTP calls are answered by handler"""
    def factory(handler):
        return SpotifyClient(
            client_id=CLIENT_ID,
            client_secret=CLIENT_SECRET,
            transport=httpx.MockTransport(handler)
        )
    return factory


@pytest.fixture
def playing_payload():
    return {
        "progress_ms": 42000,
        "is_playing": True,
        "currently_playing_type": "track",
        "item": {
            "album": {
                "name": "Album",
                "external_urls": {"spotify": "https://open.spotify.com/album/1"},
                "images": [
                    {"url": "https://i.scdn.co/image/640", "height": 640, "width": 640},
                    {"url": "https://i.scdn.co/image/300", "height": 300, "width": 300},
                    {"url": "https://i.scdn.co/image/64", "height": None, "width": None},
                ],
            },
            "artists": [
                {"name": "First", "external_urls": {"spotify": "https://open.spotify.com/artist/1"}},
                {"name": "Second"},
            ],
            "duration_ms": 215000,
            "external_urls": {"spotify": "https://open.spotify.com/track/1"},
            "name": "Track",
        },
    }
