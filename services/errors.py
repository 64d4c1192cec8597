from typing import Optional


class TokenBridgeError(Exception):
    """Base class for errors raised by the token bridge services"""


class SpotifyAPIError(TokenBridgeError):
    """Spotify answered with an unexpected status, or could not be reached"""

    def __init__(self, message: str = "Spotify API Error", status_code: Optional[int] = None):
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (status {status_code})"
        super().__init__(message)


class MissingCredentialError(TokenBridgeError):
    """A token required for the operation is not in the token store"""


class ConfigurationError(TokenBridgeError):
    """Required client credentials are missing from the environment"""
