"""
Garry API Client
================
Async client for the Garry auth and warranty services.

This module handles:
- REST calls to the auth service (login, register, refresh, logout, me)
- REST calls to the warranty service (CRUD, expiring, stats, categories)
- Bearer token management with a single refresh-and-retry on 401
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from garry.api.token_storage import MemoryTokenStorage, TokenStorage
from garry.config import GarryConfig
from garry.models import (
    AuthResponse,
    CategoryInfo,
    CreateWarrantyRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    Stats,
    UpdateWarrantyRequest,
    User,
    Warranty,
    WarrantyCategory,
    WarrantyListResponse,
)

logger = logging.getLogger(__name__)


class ApiException(Exception):
    """Non-success response from a Garry service."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionExpired(ApiException):
    """The access token was rejected and could not be refreshed."""

    def __init__(self, message: str = "Session expirée"):
        super().__init__(message, 401)


class GarryAPIClient:
    """Client for the auth and warranty services."""

    def __init__(
        self,
        auth_base_url: str = "http://localhost:8081/api/v1",
        api_base_url: str = "http://localhost:8080/api/v1",
        token_storage: Optional[TokenStorage] = None,
        timeout_seconds: float = 15.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize API client.

        Args:
            auth_base_url: Base URL of the auth service
            api_base_url: Base URL of the warranty service
            token_storage: Where the token pair is kept (memory by default)
            timeout_seconds: Total timeout per request
            session: Existing aiohttp session (not closed by this client)
        """
        self.auth_base_url = auth_base_url.rstrip("/")
        self.api_base_url = api_base_url.rstrip("/")
        self.token_storage = token_storage or MemoryTokenStorage()
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.session = session
        self._owns_session = session is None
        self._refresh_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: GarryConfig, token_storage: Optional[TokenStorage] = None) -> "GarryAPIClient":
        return cls(
            auth_base_url=config.auth_service.base_url,
            api_base_url=config.warranty_service.base_url,
            token_storage=token_storage,
            timeout_seconds=config.request_timeout_seconds,
        )

    async def __aenter__(self) -> "GarryAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close HTTP session."""
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self.session

    async def _send(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        access_token: Optional[str] = None,
    ) -> Tuple[int, str, str]:
        """Send one HTTP request and read the whole body."""
        headers = {"Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        session = self._get_session()
        async with session.request(method, url, json=payload, params=params, headers=headers) as response:
            body = await response.text()
            return response.status, response.reason or "", body

    async def request(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> Any:
        """
        Call an endpoint and decode its JSON body.

        On a 401 with a refresh token available, the token pair is refreshed
        once and the request is retried once.

        Args:
            method: HTTP method
            url: Absolute URL
            payload: JSON body
            params: Query parameters
            authenticated: Send the bearer token

        Returns:
            Decoded JSON, or None for empty responses (204)

        Raises:
            SessionExpired: If the token was rejected and refresh failed
            ApiException: For any other non-success status
        """
        tokens = await self.token_storage.get_tokens() if authenticated else None
        access_token = tokens[0] if tokens else None

        logger.debug(f"API request - method={method}, url={url}")
        status, reason, body = await self._send(method, url, payload, params, access_token)

        if status == 401 and tokens:
            logger.info(f"Access token rejected, refreshing - url={url}")
            refreshed = None
            if await self.refresh_tokens(stale_access_token=access_token):
                refreshed = await self.token_storage.get_tokens()
            if not refreshed:
                raise SessionExpired()
            status, reason, body = await self._send(method, url, payload, params, refreshed[0])

        if not 200 <= status < 300:
            raise ApiException(self._error_message(status, reason, body), status)

        if status == 204 or not body:
            return None

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise ApiException(f"Invalid JSON response: {e}", status) from e

    @staticmethod
    def _error_message(status: int, reason: str, body: str) -> str:
        try:
            data = json.loads(body) if body else {}
        except json.JSONDecodeError:
            data = {}
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return f"Erreur {status}: {reason}"

    async def refresh_tokens(self, stale_access_token: Optional[str] = None) -> bool:
        """
        Exchange the refresh token for a new token pair.

        Concurrent callers share one refresh: if the stored access token
        already differs from the one that was rejected, it is reused.

        Args:
            stale_access_token: The access token that got a 401

        Returns:
            True when a valid token pair is stored, False after clearing tokens
        """
        async with self._refresh_lock:
            tokens = await self.token_storage.get_tokens()
            if not tokens:
                return False
            if stale_access_token and tokens[0] != stale_access_token:
                return True

            url = f"{self.auth_base_url}/auth/refresh"
            payload = RefreshRequest(refresh_token=tokens[1]).to_payload()
            try:
                status, _, body = await self._send("POST", url, payload)
                if not 200 <= status < 300:
                    logger.warning(f"Token refresh rejected - status={status}")
                    await self.token_storage.clear_tokens()
                    return False
                auth = AuthResponse.model_validate_json(body)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.warning(f"Token refresh failed - error={e}")
                await self.token_storage.clear_tokens()
                return False

            await self.token_storage.save_tokens(auth.access_token, auth.refresh_token)
            logger.info("Token pair refreshed")
            return True

    # ------------------------------------------------------------------
    # Auth service
    # ------------------------------------------------------------------

    async def _authenticate(self, path: str, payload: Dict[str, Any]) -> AuthResponse:
        data = await self.request("POST", f"{self.auth_base_url}{path}", payload, authenticated=False)
        auth = AuthResponse.model_validate(data)
        await self.token_storage.save_tokens(auth.access_token, auth.refresh_token)
        return auth

    async def login(self, email: str, password: str) -> AuthResponse:
        """Log in and store the returned token pair."""
        auth = await self._authenticate("/auth/login", LoginRequest(email=email, password=password).to_payload())
        logger.info(f"Logged in - email={email}")
        return auth

    async def register(self, email: str, password: str, name: str) -> AuthResponse:
        """Create an account and store the returned token pair."""
        request = RegisterRequest(email=email, password=password, name=name)
        auth = await self._authenticate("/auth/register", request.to_payload())
        logger.info(f"Registered - email={email}")
        return auth

    async def logout(self) -> None:
        """Revoke the session server-side when possible, always clear local tokens."""
        try:
            if await self.token_storage.get_tokens():
                await self.request("POST", f"{self.auth_base_url}/auth/logout")
        except (ApiException, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Server-side logout failed - error={e}")
        await self.token_storage.clear_tokens()

    async def get_current_user(self) -> User:
        data = await self.request("GET", f"{self.auth_base_url}/auth/me")
        return User.model_validate(data)

    # ------------------------------------------------------------------
    # Warranty service
    # ------------------------------------------------------------------

    async def get_warranties(
        self,
        category: Optional[WarrantyCategory] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Warranty]:
        """
        List the user's warranties.

        Args:
            category: Only this category
            status: Server-side status filter (active, expiring_soon, expired)
            limit: Page size
            offset: Page offset

        Returns:
            Warranties
        """
        params = {}
        if category is not None:
            params["category"] = WarrantyCategory(category).value
        if status:
            params["status"] = status
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset

        data = await self.request("GET", f"{self.api_base_url}/warranties", params=params or None)
        return self._parse_warranty_list(data)

    async def get_warranty(self, warranty_id: str) -> Warranty:
        data = await self.request("GET", f"{self.api_base_url}/warranties/{warranty_id}")
        return Warranty.model_validate(data)

    async def create_warranty(self, request: CreateWarrantyRequest) -> Warranty:
        data = await self.request("POST", f"{self.api_base_url}/warranties", request.to_payload())
        warranty = Warranty.model_validate(data)
        logger.info(f"Warranty created - id={warranty.id}")
        return warranty

    async def update_warranty(self, warranty_id: str, request: UpdateWarrantyRequest) -> Warranty:
        data = await self.request("PUT", f"{self.api_base_url}/warranties/{warranty_id}", request.to_payload())
        return Warranty.model_validate(data)

    async def delete_warranty(self, warranty_id: str) -> None:
        await self.request("DELETE", f"{self.api_base_url}/warranties/{warranty_id}")
        logger.info(f"Warranty deleted - id={warranty_id}")

    async def get_expiring_warranties(self, days: int = 30) -> List[Warranty]:
        """Warranties the service reports as ending within `days` days."""
        data = await self.request("GET", f"{self.api_base_url}/warranties/expiring", params={"days": days})
        return self._parse_warranty_list(data)

    async def get_stats(self) -> Stats:
        data = await self.request("GET", f"{self.api_base_url}/stats")
        return Stats.model_validate(data)

    async def get_categories(self) -> List[CategoryInfo]:
        """Category catalog; plain category ids are expanded locally."""
        data = await self.request("GET", f"{self.api_base_url}/categories", authenticated=False)
        categories = []
        for item in data or []:
            if isinstance(item, str):
                categories.append(CategoryInfo.from_category(WarrantyCategory.from_value(item)))
            else:
                categories.append(CategoryInfo.model_validate(item))
        return categories

    @staticmethod
    def _parse_warranty_list(data: Any) -> List[Warranty]:
        # The service wraps lists as {"warranties": [...], "total": n}
        if isinstance(data, dict):
            return WarrantyListResponse.model_validate(data).warranties
        return [Warranty.model_validate(item) for item in data or []]
