"""HTTP Basic Auth for the admin dashboard.

Any username is accepted; the password must match the one the backend was
built with (ADMIN_WEB_PASSWORD). An unset password locks the dashboard.
"""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from healthcare.api.deps import get_backend

basic_auth = HTTPBasic()


def _password_matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


async def verify_admin(
    request: Request,
    credentials: HTTPBasicCredentials = Depends(basic_auth),  # noqa: B008
) -> str:
    """Return the admin username, or raise 503 (no password set) / 401 (wrong password)."""
    expected = get_backend(request).admin_password
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin dashboard is disabled: no password configured",
        )

    if not _password_matches(credentials.password, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
