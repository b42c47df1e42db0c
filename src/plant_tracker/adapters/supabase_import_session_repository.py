"""Supabase-backed import session repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from plant_tracker.domain.import_sessions import ImportSessionRecord
from plant_tracker.services.import_sessions import ImportSessionRepository

_TABLE = "import_sessions"


@dataclass
class SupabaseImportSessionRepository(ImportSessionRepository):
    """Supabase implementation for import sessions."""

    client: Client

    def list_sessions(self, user_id: UUID) -> list[ImportSessionRecord]:
        """Return the owner's sessions, newest first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_record(row) for row in response.data or []]

    def get_session(
        self, session_id: UUID, user_id: UUID
    ) -> ImportSessionRecord | None:
        """Return an owned session by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(session_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def create_session(
        self, user_id: UUID, fields: dict[str, object]
    ) -> ImportSessionRecord:
        """Create a session row and return it."""
        payload = _serialize(fields)
        payload["user_id"] = str(user_id)
        response = self.client.table(_TABLE).insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create import session")
        return _to_record(response.data[0])

    def update_session(
        self, session_id: UUID, user_id: UUID, fields: dict[str, object]
    ) -> ImportSessionRecord | None:
        """Apply a partial update to an owned session."""
        response = (
            self.client.table(_TABLE)
            .update(_serialize(fields))
            .eq("id", str(session_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def update_session_if_status(
        self,
        session_id: UUID,
        user_id: UUID,
        expected_status: str,
        fields: dict[str, object],
    ) -> ImportSessionRecord | None:
        """Apply an update only while the row still has the expected status."""
        response = (
            self.client.table(_TABLE)
            .update(_serialize(fields))
            .eq("id", str(session_id))
            .eq("user_id", str(user_id))
            .eq("status", expected_status)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def delete_session(self, session_id: UUID, user_id: UUID) -> bool:
        """Delete an owned session."""
        response = (
            self.client.table(_TABLE)
            .delete()
            .eq("id", str(session_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _serialize(fields: dict[str, object]) -> dict[str, object]:
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in fields.items()
    }


def _to_record(row: dict[str, object]) -> ImportSessionRecord:
    confidence = row.get("confidence")
    return ImportSessionRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        status=str(row["status"]),
        image_url=row.get("image_url"),
        identified_species=row.get("identified_species"),
        scientific_name=row.get("scientific_name"),
        confidence=float(confidence) if confidence is not None else None,
        suggestions=row.get("suggestions"),
        research_sources=row.get("research_sources") or [],
        care_requirements=row.get("care_requirements") or None,
        error_message=row.get("error_message"),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _parse_datetime(value: object) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))
