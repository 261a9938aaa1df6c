"""
API Module
==========
HTTP client for the Garry auth and warranty services and token storage.
"""

from .client import ApiException, GarryAPIClient, SessionExpired
from .token_storage import FileTokenStorage, MemoryTokenStorage, TokenStorage, get_token_storage

__all__ = [
    "ApiException",
    "FileTokenStorage",
    "GarryAPIClient",
    "MemoryTokenStorage",
    "SessionExpired",
    "TokenStorage",
    "get_token_storage",
]
