"""Domain models for request authentication."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller resolved once per request."""

    user_id: UUID
    access_token: str
