"""
Token Storage
=============
Persistence for the access/refresh token pair used by the API client.

Two implementations:
- MemoryTokenStorage: process lifetime only (tests, one-shot commands)
- FileTokenStorage: JSON file readable only by the current user
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

TokenPair = Tuple[str, str]


class TokenStorage:
    """Interface for token persistence."""

    async def save_tokens(self, access_token: str, refresh_token: str) -> None:
        raise NotImplementedError

    async def get_tokens(self) -> Optional[TokenPair]:
        """
        Return the stored (access_token, refresh_token) pair.

        Returns:
            The pair, or None when either token is missing
        """
        raise NotImplementedError

    async def clear_tokens(self) -> None:
        raise NotImplementedError


class MemoryTokenStorage(TokenStorage):
    """Keeps tokens in memory."""

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self._access_token = access_token
        self._refresh_token = refresh_token

    async def save_tokens(self, access_token: str, refresh_token: str) -> None:
        self._access_token = access_token
        self._refresh_token = refresh_token

    async def get_tokens(self) -> Optional[TokenPair]:
        if self._access_token and self._refresh_token:
            return self._access_token, self._refresh_token
        return None

    async def clear_tokens(self) -> None:
        self._access_token = None
        self._refresh_token = None


class FileTokenStorage(TokenStorage):
    """Stores tokens as JSON in a file created with 0600 permissions."""

    def __init__(self, path: str):
        self.path = Path(path).expanduser()

    async def save_tokens(self, access_token: str, refresh_token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps({"access_token": access_token, "refresh_token": refresh_token})

        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
        logger.debug(f"Tokens saved - path={self.path}")

    async def get_tokens(self) -> Optional[TokenPair]:
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable token file - path={self.path}, error={e}")
            return None

        access_token = data.get("access_token") if isinstance(data, dict) else None
        refresh_token = data.get("refresh_token") if isinstance(data, dict) else None
        if access_token and refresh_token:
            return access_token, refresh_token
        return None

    async def clear_tokens(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.debug(f"Tokens cleared - path={self.path}")


def get_token_storage(path: Optional[str] = None) -> TokenStorage:
    """File storage when a path is configured, memory storage otherwise."""
    if path:
        return FileTokenStorage(path)
    return MemoryTokenStorage()
