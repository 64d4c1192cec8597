from typing import Dict, Optional
from urllib.parse import urlencode
import httpx
import logging
from pydantic import ValidationError
from models.spotify import (
    RefreshedToken,
    SpotifyAuthError,
    SpotifyCurrentlyPlaying,
    TokenPair,
)
from services.errors import SpotifyAPIError

logger = logging.getLogger(__name__)

SCOPE = "user-read-currently-playing"


class SpotifyClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = "https://api.spotify.com/v1",
        auth_url: str = "https://accounts.spotify.com/api/token",
        authorize_base_url: str = "https://accounts.spotify.com/authorize",
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url
        self.auth_url = auth_url
        self.authorize_base_url = authorize_base_url
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    def authorize_url(self, redirect_url: str) -> str:
        """URL the user is sent to for granting the currently-playing scope"""
        query = urlencode({
            "response_type": "code",
            "client_id": self.client_id,
            "scope": SCOPE,
            "redirect_uri": redirect_url,
        })
        return f"{self.authorize_base_url}?{query}"

    async def _request_token(self, data: Dict[str, str]) -> dict:
        """POST a grant to the token endpoint with client credentials Basic auth"""
        try:
            async with self._client() as client:
                response = await client.post(
                    self.auth_url,
                    data=data,
                    auth=(self.client_id, self.client_secret),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Token request failed ({data['grant_type']}): {str(e)}")
            raise SpotifyAPIError() from e

        if response.status_code != 200:
            logger.error(
                f"Token request rejected ({data['grant_type']}): "
                f"{response.status_code} {self._describe_auth_error(response)}"
            )
            raise SpotifyAPIError(status_code=response.status_code)

        return response.json()

    @staticmethod
    def _describe_auth_error(response: httpx.Response) -> str:
        try:
            error = SpotifyAuthError.model_validate(response.json())
        except (ValueError, ValidationError):
            return response.text
        return f"{error.error}: {error.error_description or ''}".strip()

    async def exchange_authorization_code(self, code: str, redirect_url: str) -> TokenPair:
        """Exchange a one-time authorization code for an access/refresh token pair"""
        token_data = await self._request_token({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_url,
        })
        return TokenPair(
            access_token=token_data["access_token"],
            refresh_token=token_data["refresh_token"],
        )

    async def refresh_access_token(self, refresh_token: str) -> RefreshedToken:
        """Mint a new access token; Spotify may or may not rotate the refresh token"""
        token_data = await self._request_token({
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.client_id,
        })
        return RefreshedToken(
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token") or None,
        )

    async def get_currently_playing(self, access_token: str, market: str) -> SpotifyCurrentlyPlaying:
        """Fetch the raw currently-playing payload; 204 means nothing is playing"""
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/me/player/currently-playing",
                    params={"market": market},
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Error fetching currently playing: {str(e)}")
            raise SpotifyAPIError() from e

        if response.status_code == 204:
            return SpotifyCurrentlyPlaying()
        if response.status_code != 200:
            logger.error(f"Currently playing request failed: {response.status_code}")
            raise SpotifyAPIError(status_code=response.status_code)

        payload = response.json() if response.content else None
        return SpotifyCurrentlyPlaying.model_validate(payload or {})
