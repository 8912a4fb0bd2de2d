"""API Dependencies — bearer-token auth and container access for routes.

Invariants:
    - Missing or wrong token → AuthenticationError (403) when API_AUTH_TOKEN is set
    - Empty API_AUTH_TOKEN disables the check (local development only)
    - Tokens are compared as UTF-8 bytes, so non-ASCII input is a 403, not a 500
"""

import hmac
import logging

from fastapi import Depends, Request

from callrelay.config import Settings, get_settings
from callrelay.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

_BEARER = "Bearer "


def require_bearer_token(
    request: Request, settings: Settings = Depends(get_settings),
) -> None:
    expected = settings.api_auth_token
    if not expected:
        return
    header = request.headers.get("authorization", "")
    token = header[len(_BEARER):] if header.startswith(_BEARER) else ""
    if not token or not hmac.compare_digest(token.encode(), expected.encode()):
        logger.warning(
            "Rejected request with invalid token",
            extra={"path": request.url.path},
        )
        raise AuthenticationError()
