"""HTTP client for the identification continuation endpoint."""

from dataclasses import dataclass
from uuid import UUID

import httpx

from plant_tracker.domain.auth import AuthContext
from plant_tracker.errors import DownstreamError
from plant_tracker.services.selection import ContinuationClient

_FAILURE_MESSAGE = "Failed to continue identification"


@dataclass
class HttpxContinuationClient(ContinuationClient):
    """Calls the continuation endpoint with the caller's credentials."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 60

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 60
    ) -> "HttpxContinuationClient":
        """Create a continuation client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def continue_identification(
        self,
        auth: AuthContext,
        session_id: UUID,
        species: str,
        scientific_name: str,
    ) -> None:
        """POST the committed selection to the continuation endpoint."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/api/identify-plant/continue",
                json={
                    "sessionId": str(session_id),
                    "species": species,
                    "scientific_name": scientific_name,
                },
                headers={"Authorization": f"Bearer {auth.access_token}"},
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise DownstreamError(f"{_FAILURE_MESSAGE}: {exc}") from exc
        if response.is_error:
            raise DownstreamError(_error_detail(response))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return _FAILURE_MESSAGE
    if isinstance(payload, dict) and payload.get("error"):
        return f"{_FAILURE_MESSAGE}: {payload['error']}"
    return _FAILURE_MESSAGE
