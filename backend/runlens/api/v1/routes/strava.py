"""
Strava Routes

Endpoints for Strava login and the activity list:
- /auth/strava - Initiate OAuth flow
- /auth/strava/callback - Handle OAuth callback, store tokens in cookies
- /activities - List the athlete's activities

Tokens live in httpOnly cookies; the helpers here are shared with the
analysis routes.
"""

import logging
import secrets
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import RedirectResponse

from runlens.config import settings
from runlens.features.strava import (
    ActivitySummary,
    StravaClient,
    StravaError,
    StravaAuthError,
    StravaNotFoundError,
    StravaRateLimitError,
    token_expired,
)
from runlens.features.strava.client import MAX_PER_PAGE

logger = logging.getLogger(__name__)

router = APIRouter()

ACCESS_TOKEN_COOKIE = "strava_access_token"
REFRESH_TOKEN_COOKIE = "strava_refresh_token"
EXPIRES_AT_COOKIE = "strava_expires_at"
OAUTH_STATE_COOKIE = "strava_oauth_state"

# Refresh token and expiry outlive the 6-hour access token
REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 365
OAUTH_STATE_MAX_AGE = 60 * 10


def get_strava_client() -> StravaClient:
    """Dependency: Strava client with configured credentials."""
    return StravaClient()


# =============================================================================
# Token cookies
# =============================================================================

def set_token_cookies(response: Response, tokens: dict, now: Optional[int] = None) -> None:
    """
    Write access token, refresh token and expiry cookies.

    The access token cookie expires with the token itself; the other
    two are kept for a year so an expired token can still be refreshed.
    """
    if now is None:
        now = int(time.time())
    expires_at = int(tokens["expires_at"])
    secure = not settings.debug

    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        tokens["access_token"],
        httponly=True,
        secure=secure,
        max_age=max(0, expires_at - now),
        path="/",
    )
    response.set_cookie(
        EXPIRES_AT_COOKIE,
        str(expires_at),
        httponly=True,
        secure=secure,
        max_age=REFRESH_COOKIE_MAX_AGE,
        path="/",
    )
    if tokens.get("refresh_token"):
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            tokens["refresh_token"],
            httponly=True,
            secure=secure,
            max_age=REFRESH_COOKIE_MAX_AGE,
            path="/",
        )


def strava_http_error(
    e: StravaError,
    not_found: str = "Not found",
    failed: str = "Strava request failed"
) -> HTTPException:
    """Map Strava client errors to HTTP errors."""
    if isinstance(e, StravaAuthError):
        return HTTPException(status_code=401, detail="Strava authorization expired")
    if isinstance(e, StravaNotFoundError):
        return HTTPException(status_code=404, detail=not_found)
    if isinstance(e, StravaRateLimitError):
        return HTTPException(status_code=429, detail="Strava rate limit exceeded, try later")
    return HTTPException(status_code=502, detail=failed)


async def resolve_access_token(
    request: Request,
    response: Response,
    client: StravaClient
) -> str:
    """
    Get a usable access token from the request cookies.

    An expired token is refreshed and the new cookies are written to
    response. A missing expiry cookie means no refresh; an unreadable
    one forces it.

    Raises:
        HTTPException: 401 if not logged in, mapped status if refresh fails
    """
    access_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    expires_at = request.cookies.get(EXPIRES_AT_COOKIE)

    if not access_token or not refresh_token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        expires_at_ts = int(expires_at) if expires_at else None
    except ValueError:
        expires_at_ts = 0

    if not token_expired(expires_at_ts):
        return access_token

    logger.info("Refreshing expired Strava token")
    try:
        tokens = await client.refresh_token(refresh_token)
    except StravaError as e:
        logger.error(f"Token refresh failed: {e}")
        raise strava_http_error(e)

    set_token_cookies(response, tokens)
    return tokens["access_token"]


# =============================================================================
# OAuth Flow
# =============================================================================

def _get_callback_url() -> str:
    """OAuth callback URL registered with Strava."""
    return f"{settings.base_url.rstrip('/')}/api/v1/auth/strava/callback"


def _frontend_redirect(path: str = "", error: Optional[str] = None) -> RedirectResponse:
    url = f"{settings.frontend_url.rstrip('/')}{path}"
    if error:
        url = f"{url}?error={error}"
    return RedirectResponse(url=url, status_code=307)


@router.get("/auth/strava")
async def strava_auth(client: StravaClient = Depends(get_strava_client)):
    """
    Initiate Strava OAuth flow.

    Redirects to Strava's consent page; the state is kept in a
    short-lived cookie and checked on callback.
    """
    if not client.client_id:
        raise HTTPException(
            status_code=503,
            detail="Strava integration not configured"
        )

    state = secrets.token_urlsafe(32)
    auth_url = client.get_authorization_url(_get_callback_url(), state=state)

    response = RedirectResponse(url=auth_url, status_code=307)
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        httponly=True,
        secure=not settings.debug,
        max_age=OAUTH_STATE_MAX_AGE,
        path="/",
    )
    logger.info("Strava OAuth initiated")
    return response


@router.get("/auth/strava/callback")
async def strava_callback(
    request: Request,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    client: StravaClient = Depends(get_strava_client)
):
    """
    Handle Strava OAuth callback.

    Exchanges the code for tokens, stores them in cookies and sends the
    browser to the activity list. Failures redirect to the frontend with
    ?error=auth_failed or ?error=token_exchange_failed.
    """
    if error or not code:
        logger.warning(f"Strava OAuth error: {error or 'missing code'}")
        return _frontend_redirect(error="auth_failed")

    expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.warning("Invalid OAuth state")
        return _frontend_redirect(error="auth_failed")

    try:
        tokens = await client.exchange_code(code)
    except StravaError as e:
        logger.error(f"Token exchange failed: {e}")
        return _frontend_redirect(error="token_exchange_failed")

    athlete_id = tokens.get("athlete", {}).get("id")
    logger.info(f"Strava connected: athlete_id={athlete_id}")

    response = _frontend_redirect("/all-activities")
    set_token_cookies(response, tokens)
    response.delete_cookie(OAUTH_STATE_COOKIE, path="/")
    return response


# =============================================================================
# Activities
# =============================================================================

@router.get("/activities", response_model=List[ActivitySummary])
async def list_activities(
    request: Request,
    response: Response,
    page: Optional[int] = Query(default=None, ge=1, description="Page number; all pages if omitted"),
    per_page: int = Query(default=30, ge=1, le=MAX_PER_PAGE),
    client: StravaClient = Depends(get_strava_client)
):
    """
    List the athlete's activities, newest first.

    Without page every page is fetched (200 per request).
    """
    access_token = await resolve_access_token(request, response, client)

    try:
        if page is None:
            activities = await client.get_all_activities(access_token)
        else:
            activities = await client.get_activities(access_token, page=page, per_page=per_page)
    except StravaError as e:
        logger.error(f"Error fetching activities: {e}")
        raise strava_http_error(e, failed="Failed to fetch activities")

    return [ActivitySummary.from_strava(activity) for activity in activities]
