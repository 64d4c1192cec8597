from redis.asyncio import Redis
from typing import Optional
import logging
from models.spotify import TokenPair

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access-token"
REFRESH_TOKEN_KEY = "refresh-token"


class TokenStore:
    """Keeps the Spotify token pair in Redis as two plain string keys.

    The keys are written independently; there is no transaction spanning both.
    """

    def __init__(self, redis_url: str, redis: Optional[Redis] = None):
        self.redis_url = redis_url
        self.redis: Optional[Redis] = redis

    async def init(self):
        """Open the Redis connection if it is not open yet"""
        if not self.redis:
            try:
                self.redis = Redis.from_url(
                    self.redis_url,
                    decode_responses=True
                )
                await self.redis.ping()
            except Exception as e:
                logger.error(f"Failed to initialize Redis: {str(e)}")
                if self.redis:
                    await self.redis.aclose()
                    self.redis = None
                raise
        return self

    async def close(self):
        """Close Redis connection safely"""
        if self.redis:
            try:
                await self.redis.aclose()
            except Exception as e:
                logger.error(f"Error closing Redis connection: {str(e)}")
            finally:
                self.redis = None

    async def get(self, key: str) -> Optional[str]:
        if not self.redis:
            await self.init()
        value = await self.redis.get(key)
        # empty strings count as absent
        return value or None

    async def put(self, key: str, value: str) -> None:
        if not self.redis:
            await self.init()
        await self.redis.set(key, value)

    async def get_access_token(self) -> Optional[str]:
        return await self.get(ACCESS_TOKEN_KEY)

    async def get_refresh_token(self) -> Optional[str]:
        return await self.get(REFRESH_TOKEN_KEY)

    async def save_token_pair(self, tokens: TokenPair) -> None:
        await self.put(ACCESS_TOKEN_KEY, tokens.access_token)
        await self.put(REFRESH_TOKEN_KEY, tokens.refresh_token)
        logger.info("Stored new access and refresh tokens")
