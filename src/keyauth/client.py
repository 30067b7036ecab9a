"""
KeyAuth seller API client.

Purpose
-------
Single async client for the KeyAuth endpoint. Every operation is one
form-encoded POST carrying `type`, `sessionid`, `name` and `ownerid` plus
operation-specific fields, and yields an `ApiResult`.

Session Handling
----------------
The session id is acquired lazily on the first remote operation with an
`init` request and cached for the lifetime of the client. When the handshake
fails for any reason (network error, non-2xx status, malformed body,
`success=false`) a random id is generated locally and cached the same way,
so the bot stays usable while the init endpoint misbehaves. Acquisition is
single-flight: concurrent first calls share one `init` request. The cached
id is never refreshed.

Error Handling
--------------
- Non-2xx status on an operation -> TransportError carrying the status code.
- Network failures, timeouts and undecodable bodies -> TransportError.
- `success=false` is not an exception here; callers inspect `ApiResult`.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any, Dict, Mapping, Optional, Tuple

import aiohttp

from src.core.config.settings import KeyAuthSettings
from src.core.exceptions import ConfigurationError, TransportError
from src.core.logging.logger import get_logger
from src.keyauth.models import ApiResult, StatsInfo, UserInfo, as_bool

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class KeyAuthClient:
    """
    Async KeyAuth API client.

    Args:
        settings: Application name, owner id, version and endpoint
        http_session: Optional aiohttp session; when omitted the client
            creates and owns one on first use

    Raises:
        ConfigurationError: If the application name or owner id is empty
    """

    def __init__(
        self,
        settings: KeyAuthSettings,
        http_session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        if not settings.name or not settings.name.strip():
            raise ConfigurationError(
                "KEYAUTH_NAME",
                "KeyAuth configuration is missing. Please set KEYAUTH_NAME and KEYAUTH_OWNER_ID.",
            )
        if not settings.owner_id or not settings.owner_id.strip():
            raise ConfigurationError(
                "KEYAUTH_OWNER_ID",
                "KeyAuth configuration is missing. Please set KEYAUTH_NAME and KEYAUTH_OWNER_ID.",
            )

        self._settings = settings
        self._http: Optional[aiohttp.ClientSession] = http_session
        self._owns_http = http_session is None
        self._session_id: Optional[str] = None
        self._session_lock = asyncio.Lock()

    @property
    def settings(self) -> KeyAuthSettings:
        return self._settings

    @property
    def session_id(self) -> Optional[str]:
        """Cached session id, None until the first remote operation."""
        return self._session_id

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    def _get_http(self) -> aiohttp.ClientSession:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._settings.timeout_seconds),
            )
            self._owns_http = True
        return self._http

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": FORM_CONTENT_TYPE,
            "User-Agent": self._settings.user_agent,
        }

    async def _post(self, form: Mapping[str, str]) -> Tuple[int, str, Any]:
        """POST one form; the body is decoded only for 2xx answers."""
        http = self._get_http()
        async with http.post(self._settings.url, data=dict(form), headers=self._headers) as response:
            reason = response.reason or ""
            if not 200 <= response.status < 300:
                return response.status, reason, None
            return response.status, reason, await response.json(content_type=None)

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_http and self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None

    async def __aenter__(self) -> "KeyAuthClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------ #
    # Session
    # ------------------------------------------------------------------ #

    async def get_session_id(self) -> str:
        """Return the cached session id, acquiring it on first use."""
        if self._session_id is not None:
            return self._session_id

        async with self._session_lock:
            if self._session_id is None:
                self._session_id = await self._init_session()

        return self._session_id

    async def _init_session(self) -> str:
        form = {
            "type": "init",
            "ver": self._settings.version,
            "name": self._settings.name,
            "ownerid": self._settings.owner_id,
        }

        try:
            status, reason, payload = await self._post(form)
            if not 200 <= status < 300:
                logger.warning(
                    "KeyAuth init rejected, using local session id",
                    extra={"status_code": status, "reason": reason},
                )
            elif not isinstance(payload, dict):
                logger.warning("KeyAuth init returned a malformed body, using local session id")
            elif as_bool(payload.get("success")) and payload.get("sessionid"):
                logger.info("KeyAuth session initialized")
                return str(payload["sessionid"])
            else:
                logger.warning(
                    "KeyAuth init unsuccessful, using local session id",
                    extra={"upstream_message": payload.get("message")},
                )
        except Exception as exc:
            logger.warning(
                "Failed to initialize KeyAuth session, using local session id",
                extra={"error": str(exc), "error_type": type(exc).__name__},
                exc_info=True,
            )

        return str(uuid.uuid4())

    # ------------------------------------------------------------------ #
    # Generic request
    # ------------------------------------------------------------------ #

    async def request(
        self,
        request_type: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiResult:
        """
        Issue one authenticated request.

        Args:
            request_type: KeyAuth `type` field
            params: Extra fields; values are sent as strings

        Raises:
            TransportError: On network failure, non-2xx status or a body that
                is not a JSON object
        """
        session_id = await self.get_session_id()

        form: Dict[str, str] = {
            "type": request_type,
            "sessionid": session_id,
            "name": self._settings.name,
            "ownerid": self._settings.owner_id,
        }
        for key, value in (params or {}).items():
            form[key] = str(value)

        logger.debug("KeyAuth request", extra={"request_type": request_type})

        try:
            status, reason, payload = await self._post(form)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning(
                "KeyAuth request failed",
                extra={"request_type": request_type, "error": str(exc), "error_type": type(exc).__name__},
            )
            raise TransportError(f"KeyAuth API request failed: {str(exc) or type(exc).__name__}") from exc

        if not 200 <= status < 300:
            logger.warning(
                "KeyAuth request returned HTTP error",
                extra={"request_type": request_type, "status_code": status},
            )
            raise TransportError(
                f"KeyAuth API request failed: HTTP {status}: {reason}",
                status_code=status,
            )

        if not isinstance(payload, dict):
            raise TransportError("KeyAuth API request failed: response is not a JSON object")

        return ApiResult.from_payload(payload)

    # ------------------------------------------------------------------ #
    # User management
    # ------------------------------------------------------------------ #

    async def get_user_info(self, username: str) -> ApiResult:
        result = await self.request("user", {"username": username})
        if result.success and result.info is not None:
            return result.with_info(UserInfo.from_payload(result.info))
        return result

    async def ban_user(self, username: str) -> ApiResult:
        return await self.request("ban", {"username": username})

    async def unban_user(self, username: str) -> ApiResult:
        return await self.request("unban", {"username": username})

    async def delete_user(self, username: str) -> ApiResult:
        return await self.request("deleteuser", {"username": username})

    async def reset_hwid(self, username: str) -> ApiResult:
        return await self.request("resetuser", {"username": username})

    # ------------------------------------------------------------------ #
    # License management
    # ------------------------------------------------------------------ #

    async def create_license(self, key: str, days: int) -> ApiResult:
        return await self.request("add", {"key": key, "days": int(days)})

    async def delete_license(self, key: str) -> ApiResult:
        return await self.request("delete", {"key": key})

    async def use_license(self, key: str, username: str) -> ApiResult:
        return await self.request("use", {"key": key, "username": username})

    # ------------------------------------------------------------------ #
    # Subscriptions & statistics
    # ------------------------------------------------------------------ #

    async def extend_subscription(self, username: str, subscription: str, days: int) -> ApiResult:
        return await self.request(
            "extend",
            {"username": username, "subscription": subscription, "days": int(days)},
        )

    async def get_stats(self) -> ApiResult:
        result = await self.request("stats")
        if result.success and result.info is not None:
            return result.with_info(StatsInfo.from_payload(result.info))
        return result

    # ------------------------------------------------------------------ #
    # Webhooks & chat channels
    # ------------------------------------------------------------------ #

    async def set_webhook(self, webhook: str) -> ApiResult:
        return await self.request("webhook", {"webhook": webhook})

    async def add_channel(self, channel: str) -> ApiResult:
        return await self.request("addchannel", {"channel": channel})

    async def delete_channel(self, channel: str) -> ApiResult:
        return await self.request("deletechannel", {"channel": channel})
