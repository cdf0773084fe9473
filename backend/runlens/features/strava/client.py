"""
Strava API client.

Provides:
- OAuth: authorization URL, code exchange, token refresh
  (access tokens live 6 hours)
- Activity list (paged)
- Activity streams (time/velocity series for one activity)

Strava API Limits:
- 200 requests per 15 minutes
- 2,000 requests per day
"""

import logging
import time
from typing import Optional
from urllib.parse import urlencode

import httpx

from runlens.config import settings
from runlens.shared.constants import DEFAULT_STREAM_KEYS

logger = logging.getLogger(__name__)

# Scopes needed to read private activities and their streams
DEFAULT_SCOPE = "read,activity:read_all,profile:read_all"

# Strava caps per_page at 200
MAX_PER_PAGE = 200


# =============================================================================
# Exceptions
# =============================================================================

class StravaError(Exception):
    """Base Strava error."""
    pass


class StravaAPIError(StravaError):
    """Strava API error."""
    pass


class StravaAuthError(StravaError):
    """Authentication/authorization error."""
    pass


class StravaNotFoundError(StravaError):
    """Requested resource does not exist (or is not visible to this athlete)."""
    pass


class StravaRateLimitError(StravaError):
    """Rate limit exceeded."""
    pass


# =============================================================================
# Strava Client
# =============================================================================

class StravaClient:
    """
    Async client for Strava API.

    Usage:
        client = StravaClient()
        tokens = await client.exchange_code(code)
        if token_expired(expires_at):
            tokens = await client.refresh_token(refresh_token)
        streams = await client.get_activity_streams(access_token, activity_id)
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        api_url: Optional[str] = None,
        oauth_url: Optional[str] = None,
        authorize_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            client_id / client_secret: App credentials (default: settings)
            api_url / oauth_url / authorize_url: Endpoint overrides (default: settings)
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.client_id = client_id or settings.strava_client_id
        self.client_secret = client_secret or settings.strava_client_secret
        self.api_url = (api_url or settings.strava_api_url).rstrip("/")
        self.oauth_url = oauth_url or settings.strava_oauth_url
        self.authorize_url = authorize_url or settings.strava_authorize_url
        self.timeout = timeout or settings.http_timeout_seconds
        self._transport = transport

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.timeout)

    # -------------------------------------------------------------------------
    # OAuth
    # -------------------------------------------------------------------------

    def get_authorization_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        scope: str = DEFAULT_SCOPE
    ) -> str:
        """
        Generate Strava OAuth authorization URL.

        Args:
            redirect_uri: URL Strava redirects to with ?code=...
            state: Optional state parameter for CSRF protection
            scope: Comma-separated OAuth scopes

        Returns:
            Authorization URL string
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": scope,
            "approval_prompt": "auto"
        }
        if state:
            params["state"] = state

        return f"{self.authorize_url}?{urlencode(params)}"

    async def _token_request(self, grant: dict, action: str) -> dict:
        """
        POST to the token endpoint with app credentials.

        Raises:
            StravaAuthError: If Strava rejects the code/token (400/401)
            StravaAPIError: On any other failure
        """
        async with self._http() as client:
            try:
                response = await client.post(
                    self.oauth_url,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        **grant
                    }
                )
            except httpx.HTTPError as e:
                logger.error(f"Strava {action} request failed: {e}")
                raise StravaAPIError(f"{action} failed: {e}") from e

        if response.status_code in (400, 401):
            logger.warning(f"Strava {action} rejected: {response.text}")
            raise StravaAuthError(f"{action} rejected")
        if response.status_code != 200:
            logger.error(f"Strava {action} failed: {response.text}")
            raise StravaAPIError(f"{action} failed: {response.status_code}")

        return response.json()

    async def exchange_code(self, code: str) -> dict:
        """
        Exchange authorization code for tokens.

        Args:
            code: Authorization code from Strava callback

        Returns:
            {
                "access_token": "...",
                "refresh_token": "...",
                "expires_at": 1234567890,
                "athlete": {"id": 123, "firstname": "...", ...}
            }
        """
        return await self._token_request(
            {"code": code, "grant_type": "authorization_code"},
            "Token exchange"
        )

    async def refresh_token(self, refresh_token: str) -> dict:
        """
        Refresh an expired access token.

        Args:
            refresh_token: Current refresh token

        Returns:
            {
                "access_token": "...",
                "refresh_token": "...",
                "expires_at": 1234567890
            }
        """
        return await self._token_request(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"},
            "Token refresh"
        )

    # -------------------------------------------------------------------------
    # API Calls
    # -------------------------------------------------------------------------

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None
    ):
        """
        Make an authenticated API request.

        Raises:
            StravaAuthError: If authentication fails
            StravaNotFoundError: If resource is missing
            StravaRateLimitError: If rate limit exceeded
            StravaAPIError: If API returns error
        """
        async with self._http() as client:
            try:
                response = await client.request(
                    method=method,
                    url=f"{self.api_url}{endpoint}",
                    headers={"Authorization": f"Bearer {access_token}"},
                    params=params
                )
            except httpx.HTTPError as e:
                logger.error(f"Strava request {method} {endpoint} failed: {e}")
                raise StravaAPIError(f"Request failed: {e}") from e

        # Log rate limit headers from Strava
        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if response.status_code == 401:
            raise StravaAuthError("Invalid or expired token")
        elif response.status_code == 404:
            raise StravaNotFoundError(f"Not found: {endpoint}")
        elif response.status_code == 429:
            raise StravaRateLimitError("Strava rate limit exceeded")
        elif response.status_code != 200:
            raise StravaAPIError(
                f"API error: {response.status_code} - {response.text}"
            )

        return response.json()

    async def get_activity_streams(
        self,
        access_token: str,
        activity_id: int,
        keys: Optional[list[str]] = None
    ) -> dict:
        """
        Get time series streams for an activity.

        Args:
            access_token: Valid access token
            activity_id: Strava activity ID
            keys: Stream types (default: time, distance, velocity_smooth,
                heartrate, altitude, latlng)

        Returns:
            Streams keyed by type, e.g. {"time": {"data": [...], ...}, ...}.
            Streams the activity does not have are simply absent.
        """
        params = {
            "keys": ",".join(keys or DEFAULT_STREAM_KEYS),
            "key_by_type": "true",
        }
        streams = await self._api_request(
            "GET",
            f"/activities/{activity_id}/streams",
            access_token,
            params=params
        )
        logger.info(f"Fetched streams for activity {activity_id}")
        return streams

    async def get_activities(
        self,
        access_token: str,
        page: int = 1,
        per_page: int = 30
    ) -> list[dict]:
        """
        Get one page of the athlete's activities (newest first).

        Args:
            access_token: Valid access token
            page: Page number (default 1)
            per_page: Results per page (max 200)
        """
        params = {"page": page, "per_page": min(per_page, MAX_PER_PAGE)}
        return await self._api_request(
            "GET",
            "/athlete/activities",
            access_token,
            params
        )

    async def get_all_activities(
        self,
        access_token: str,
        per_page: int = MAX_PER_PAGE
    ) -> list[dict]:
        """
        Get every activity by walking pages until a short page comes back.
        """
        activities: list[dict] = []
        page = 1
        while True:
            batch = await self.get_activities(access_token, page=page, per_page=per_page)
            activities.extend(batch)
            if len(batch) < min(per_page, MAX_PER_PAGE):
                break
            page += 1

        logger.info(f"Fetched {len(activities)} activities in {page} page(s)")
        return activities


def token_expired(expires_at: Optional[int], now: Optional[float] = None) -> bool:
    """True if an access token with this expiry (epoch seconds) must be refreshed."""
    if expires_at is None:
        return False
    if now is None:
        now = time.time()
    return expires_at < int(now)
