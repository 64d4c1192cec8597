from typing import Dict
import logging
from services.errors import MissingCredentialError
from services.spotify import SpotifyClient
from services.token_store import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, TokenStore

logger = logging.getLogger(__name__)


async def refresh_tokens(token_store: TokenStore, spotify_client: SpotifyClient) -> Dict[str, bool]:
    """Swap the stored refresh token for a fresh access token.

    Nothing is written unless the exchange succeeds. The stored refresh token
    is only replaced when Spotify hands out a new one.
    """
    refresh_token = await token_store.get(REFRESH_TOKEN_KEY)
    if not refresh_token:
        logger.error("No refresh token stored; complete the authorization flow first")
        raise MissingCredentialError("refresh-token is null")

    refreshed = await spotify_client.refresh_access_token(refresh_token)

    await token_store.put(ACCESS_TOKEN_KEY, refreshed.access_token)
    rotated = refreshed.refresh_token is not None
    if rotated:
        await token_store.put(REFRESH_TOKEN_KEY, refreshed.refresh_token)
        logger.info("Refresh token rotated by Spotify")

    logger.info("Access token refreshed")
    return {
        "refreshed": True,
        "rotated_refresh_token": rotated,
    }
