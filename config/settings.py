from typing import Optional
from functools import lru_cache
import os
from pydantic import BaseModel, ConfigDict
from dotenv import load_dotenv
from services.errors import ConfigurationError

DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_ALLOWED_ORIGIN = "https://shadeofyou.github.io"
DEFAULT_MARKET = "JP"
DEFAULT_REFRESH_INTERVAL_SECONDS = 30 * 60  # Spotify access tokens live for an hour


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    redirect_url: Optional[str] = None
    redis_url: str = DEFAULT_REDIS_URL
    market: str = DEFAULT_MARKET
    refresh_interval_seconds: int = DEFAULT_REFRESH_INTERVAL_SECONDS

    @property
    def setup_mode(self) -> bool:
        """True while the one-time authorization flow is enabled"""
        return bool(self.redirect_url)

    @classmethod
    def from_env(cls) -> "Settings":
        client_id = os.getenv('CLIENT_ID')
        client_secret = os.getenv('CLIENT_SECRET')
        missing = [
            name for name, value in (("CLIENT_ID", client_id), ("CLIENT_SECRET", client_secret))
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=os.getenv('REDIRECT_URL') or None,
            redis_url=os.getenv('REDIS_URL', DEFAULT_REDIS_URL),
            market=os.getenv('SPOTIFY_MARKET', DEFAULT_MARKET),
            refresh_interval_seconds=get_refresh_interval(),
        )


def get_allowed_origin(dotenv_path: Optional[str] = None) -> str:
    """CORS origin of the website widget; needed before settings can be loaded"""
    load_dotenv(dotenv_path)
    return os.getenv('ALLOWED_ORIGIN', DEFAULT_ALLOWED_ORIGIN)


def get_refresh_interval() -> int:
    return int(os.getenv('REFRESH_INTERVAL_SECONDS', DEFAULT_REFRESH_INTERVAL_SECONDS))


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process"""
    load_dotenv()
    return Settings.from_env()
