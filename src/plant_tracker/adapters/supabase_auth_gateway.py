"""Supabase Auth token verification."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from plant_tracker.services.auth import AuthGateway

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Verifies access tokens with Supabase Auth."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            _logger.warning("Access token rejected: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))
