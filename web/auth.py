"""HTTP Basic auth for the shrink API.

Credentials come from the app's ``Settings`` (``WEB_USER`` / ``WEB_PASSWORD``)
kept on ``app.state.settings``. With either of them empty every request is
refused.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from slide_shrink_bot.settings import Settings

log = logging.getLogger("slide_shrink.web.auth")

basic = HTTPBasic(auto_error=False)


def check_credentials(
        credentials: Optional[HTTPBasicCredentials],
        expected_user: str,
        expected_password: str,
) -> Optional[str]:
    """Return why ``credentials`` are rejected, or None when they match."""
    if not expected_user or not expected_password:
        return "API credentials are not configured"
    if credentials is None:
        return "Authentication required"

    # both parts are always compared
    user_ok = secrets.compare_digest(credentials.username.encode("utf-8"), expected_user.encode("utf-8"))
    password_ok = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))
    if user_ok and password_ok:
        return None
    return "Invalid credentials"


def require_basic_auth(
        request: Request,
        credentials: Optional[HTTPBasicCredentials] = Depends(basic),
) -> str:
    """FastAPI dependency; returns the authenticated user name."""
    settings: Settings = request.app.state.settings
    reason = check_credentials(credentials, settings.web_user, settings.web_password)
    if reason is not None:
        log.warning("Rejected %s %s: %s", request.method, request.url.path, reason)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=reason,
            headers={"WWW-Authenticate": 'Basic realm="slide-shrink"'},
        )
    return credentials.username
