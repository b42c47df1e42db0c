"""Request-scoped dependencies shared by the API routers."""

from fastapi import Depends, Header, Request

from plant_tracker.containers import AppContainer
from plant_tracker.domain.auth import AuthContext

ACCESS_TOKEN_COOKIE = "sb-access-token"


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> AuthContext:
    """Resolve the caller from a bearer token or the session cookie."""
    token = _bearer_token(authorization) or request.cookies.get(ACCESS_TOKEN_COOKIE)
    return container.auth_service.authenticate(token)


def _bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
