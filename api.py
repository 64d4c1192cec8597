# api.py
from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager
from models.spotify import NowPlaying, TokenStatus
from services.errors import ConfigurationError, MissingCredentialError, SpotifyAPIError
from services.now_playing import NowPlayingService
from services.spotify import SpotifyClient
from services.token_store import TokenStore
from config.settings import Settings, get_allowed_origin, get_settings
import os
from dotenv import load_dotenv
import logging
import uvicorn


logger = logging.getLogger(__name__)
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=logging.INFO)
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_allowed_origin()],  # the website widget is the only consumer
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def load_settings() -> Settings:
    try:
        return get_settings()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


def get_spotify_client(settings: Settings = Depends(load_settings)) -> SpotifyClient:
    return SpotifyClient(
        client_id=settings.client_id,
        client_secret=settings.client_secret
    )


async def get_token_store(
    settings: Settings = Depends(load_settings)
) -> AsyncGenerator[TokenStore, None]:
    token_store = TokenStore(settings.redis_url)
    await token_store.init()
    try:
        yield token_store
    finally:
        await token_store.close()


@app.get("/status", response_model=TokenStatus)
async def get_status(
    settings: Settings = Depends(load_settings),
    token_store: TokenStore = Depends(get_token_store),
):
    """Whether setup has been completed; token values are never returned"""
    return TokenStatus(
        setup_mode=settings.setup_mode,
        has_access_token=await token_store.get_access_token() is not None,
        has_refresh_token=await token_store.get_refresh_token() is not None,
        refresh_interval_seconds=settings.refresh_interval_seconds,
    )


# Catch-all, registered last: every other path is the widget read (or the setup flow)
@app.get("/{path:path}", response_model=NowPlaying, response_model_exclude_unset=True)
async def now_playing(
    path: str,
    code: Optional[str] = Query(default=None, description="Authorization code from Spotify"),
    settings: Settings = Depends(load_settings),
    spotify_client: SpotifyClient = Depends(get_spotify_client),
    token_store: TokenStore = Depends(get_token_store),
):
    """Currently playing track, or the one-time authorization flow when REDIRECT_URL is set"""
    if settings.setup_mode:
        if not code:
            return RedirectResponse(
                spotify_client.authorize_url(settings.redirect_url),
                status_code=302
            )
        return await _complete_authorization(code, settings, spotify_client, token_store)

    try:
        access_token = await token_store.get_access_token()
        if not access_token:
            raise MissingCredentialError("access-token is null")
        service = NowPlayingService(spotify_client, settings.market)
        return await service.fetch_now_playing(access_token)
    except MissingCredentialError as e:
        logger.warning(f"Now playing requested before setup: {str(e)}")
        raise HTTPException(status_code=503, detail=str(e))
    except SpotifyAPIError as e:
        raise HTTPException(status_code=502, detail=str(e))


async def _complete_authorization(
    code: str,
    settings: Settings,
    spotify_client: SpotifyClient,
    token_store: TokenStore,
) -> JSONResponse:
    try:
        tokens = await spotify_client.exchange_authorization_code(code, settings.redirect_url)
    except SpotifyAPIError as e:
        raise HTTPException(status_code=502, detail=str(e))

    await token_store.save_token_pair(tokens)
    return JSONResponse(content=tokens.model_dump())


if __name__ == '__main__':
    uvicorn.run(
        app,
        host=os.getenv('HOST', '0.0.0.0'),
        port=int(os.getenv('PORT', 8000))
    )
