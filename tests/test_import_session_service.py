"""Tests for import session CRUD and transitions."""

from uuid import uuid4

import pytest

from plant_tracker.errors import NotFoundError, StateConflictError, ValidationError


def test_create_session_starts_pending(session_service, repository, owner) -> None:
    session = session_service.create_session(owner, "https://img.example/1.jpg")

    assert session.status == "pending"
    assert session.user_id == owner.user_id
    assert repository.sessions[session.id].image_url == "https://img.example/1.jpg"


def test_list_sessions_is_owner_scoped(
    session_service, repository, owner, other
) -> None:
    mine = repository.add(owner.user_id)
    repository.add(other.user_id)

    assert [s.id for s in session_service.list_sessions(owner)] == [mine.id]


def test_get_session_hides_foreign_sessions(
    session_service, repository, owner, other
) -> None:
    session = repository.add(owner.user_id)

    assert session_service.get_session(owner, session.id) == session
    with pytest.raises(NotFoundError, match="Session not found"):
        session_service.get_session(other, session.id)
    with pytest.raises(NotFoundError):
        session_service.get_session(owner, uuid4())


def test_update_session_edits_allowed_fields(
    session_service, repository, owner
) -> None:
    session = repository.add(owner.user_id)

    updated = session_service.update_session(
        owner, session.id, {"image_url": "https://img.example/2.jpg"}
    )

    assert updated.image_url == "https://img.example/2.jpg"
    assert updated.status == "pending"
    assert updated.updated_at > session.updated_at


def test_update_session_rejects_engine_fields(
    session_service, repository, owner
) -> None:
    session = repository.add(owner.user_id, status="needs_selection")

    with pytest.raises(ValidationError, match="identified_species"):
        session_service.update_session(
            owner, session.id, {"identified_species": "Pothos", "status": "failed"}
        )

    assert repository.sessions[session.id] == session


def test_update_session_can_only_cancel(session_service, repository, owner) -> None:
    session = repository.add(owner.user_id, status="researching")

    with pytest.raises(ValidationError, match="only be changed to failed"):
        session_service.update_session(owner, session.id, {"status": "pending"})

    failed = session_service.update_session(
        owner, session.id, {"status": "failed", "error_message": "Cancelled"}
    )
    assert failed.status == "failed"
    assert failed.error_message == "Cancelled"


def test_update_session_rejects_terminal_sessions(
    session_service, repository, owner
) -> None:
    session = repository.add(owner.user_id, status="complete")

    with pytest.raises(StateConflictError):
        session_service.update_session(owner, session.id, {"error_message": "x"})

    assert repository.sessions[session.id] == session


def test_delete_session(session_service, repository, owner, other) -> None:
    session = repository.add(owner.user_id)

    with pytest.raises(NotFoundError):
        session_service.delete_session(other, session.id)
    session_service.delete_session(owner, session.id)

    assert session.id not in repository.sessions
    with pytest.raises(NotFoundError):
        session_service.delete_session(owner, session.id)


def test_transition_detects_concurrent_change(
    session_service, repository, owner
) -> None:
    session = repository.add(owner.user_id, status="needs_selection")
    repository.update_session_if_status(
        session.id, owner.user_id, "needs_selection", {"status": "researching"}
    )

    with pytest.raises(StateConflictError, match="modified by another request"):
        session_service.transition(owner, session, "researching")


@pytest.mark.parametrize(
    ("status", "target"),
    [
        ("needs_selection", "researching"),
        ("needs_selection", "complete"),
        ("pending", "complete"),
        ("pending", "needs_selection"),
    ],
)
def test_update_session_cannot_skip_engine_or_selection(
    session_service, repository, owner, status, target
) -> None:
    session = repository.add(
        owner.user_id, status=status, suggestions=[{"species": "Pothos"}]
    )

    with pytest.raises(ValidationError):
        session_service.update_session(owner, session.id, {"status": target})

    assert repository.sessions[session.id] == session
    assert repository.calls == []


def test_cancelling_a_session_clears_suggestions(
    session_service, repository, owner
) -> None:
    session = repository.add(
        owner.user_id, status="needs_selection", suggestions=[{"species": "Pothos"}]
    )

    cancelled = session_service.update_session(owner, session.id, {"status": "failed"})

    assert cancelled.status == "failed"
    assert cancelled.suggestions is None
