from celery_config import celery_app
import asyncio
import logging
from config.settings import get_settings
from services.spotify import SpotifyClient
from services.token_refresh import refresh_tokens
from services.token_store import TokenStore

logger = logging.getLogger(__name__)


@celery_app.task(name='tasks.refresh_access_token', max_retries=0)
def refresh_access_token():
    """Refresh the stored access token; a failed run waits for the next beat tick"""
    try:
        return asyncio.run(_async_refresh_access_token())
    except Exception as e:
        logger.error(f"Scheduled token refresh failed: {str(e)}")
        raise


async def _async_refresh_access_token():
    settings = get_settings()
    spotify_client = SpotifyClient(
        client_id=settings.client_id,
        client_secret=settings.client_secret
    )
    token_store = TokenStore(settings.redis_url)
    await token_store.init()

    try:
        return await refresh_tokens(token_store, spotify_client)
    finally:
        await token_store.close()
