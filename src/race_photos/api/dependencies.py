"""Shared FastAPI dependencies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Header, Request

from race_photos.domain.profiles import AuthUser  # noqa: TC001
from race_photos.errors import InternalError, MarketplaceError

if TYPE_CHECKING:
    from race_photos.containers import AppContainer

logger = logging.getLogger(__name__)


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> AuthUser:
    """Resolve the bearer token to a user or fail with 401."""
    container = get_container(request)
    try:
        return container.auth_service.authenticate(authorization)
    except MarketplaceError:
        raise
    except Exception as exc:
        logger.exception("Identity provider lookup failed")
        raise InternalError() from exc
