"""Request authentication against the hosted auth service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from plant_tracker.domain.auth import AuthContext
from plant_tracker.errors import AuthorizationError


class AuthGateway(Protocol):
    """Interface for resolving access tokens to users."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token, or None."""


@dataclass
class AuthService:
    """Resolves the caller for a request."""

    gateway: AuthGateway

    def authenticate(self, access_token: str | None) -> AuthContext:
        """Return the caller's context or raise AuthorizationError."""
        if not access_token:
            raise AuthorizationError()
        user_id = self.gateway.get_user_id(access_token)
        if user_id is None:
            raise AuthorizationError()
        return AuthContext(user_id=user_id, access_token=access_token)
