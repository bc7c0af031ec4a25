from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from campus_connect.auth.principal import Principal
from campus_connect.db import get_database
from campus_connect.models import Event, Registration
from campus_connect.services import registration_service
from campus_connect.services.exceptions import ConflictError
from tests.helpers import auth_headers, create_event

CREATOR = auth_headers("creator-1", "Casey")


def test_stale_event_version_is_detected(client: TestClient):
    event_id = create_event(client, CREATOR).json()["id"]
    database = get_database()
    first, second = database.session(), database.session()
    try:
        a = first.get(Event, event_id)
        b = second.get(Event, event_id)

        a.attendees = [*a.attendees, "u-a"]
        first.commit()

        b.attendees = [*b.attendees, "u-b"]
        with pytest.raises(StaleDataError):
            second.commit()
        second.rollback()
    finally:
        first.close()
        second.close()


def test_duplicate_registration_violates_constraint(client: TestClient, db_session):
    event_id = create_event(client, CREATOR).json()["id"]
    db_session.add(Registration(event_id=event_id, user_id="u-1", user_name="U", registration_data={}))
    db_session.commit()

    db_session.add(Registration(event_id=event_id, user_id="u-1", user_name="U", registration_data={}))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_retry_gives_up_after_bounded_attempts(db_session):
    calls = []

    def always_stale():
        calls.append(1)
        raise StaleDataError("stale")

    with pytest.raises(ConflictError) as exc_info:
        registration_service._retry_on_version_conflict(db_session, "evt", always_stale)
    assert exc_info.value.code == "CONCURRENT_UPDATE"
    assert len(calls) == registration_service.MAX_VERSION_ATTEMPTS


def test_lost_race_is_reevaluated_against_fresh_state(client: TestClient, db_session, monkeypatch):
    event_id = create_event(client, CREATOR, capacity=1).json()["id"]
    original_count = registration_service.current_registration_count
    fired = []

    def count_with_competitor(db, evt_id):
        if not fired:
            fired.append(1)
            seen = original_count(db, evt_id)
            # another request takes the last seat between our check and our write
            other = get_database().session()
            try:
                registration_service.register_for_event(
                    other, Principal(user_id="rival", user_details="Rival"), evt_id
                )
            finally:
                other.close()
            return seen
        return original_count(db, evt_id)

    monkeypatch.setattr(registration_service, "current_registration_count", count_with_competitor)

    me = Principal(user_id="me", user_details="Me")
    with pytest.raises(ConflictError) as exc_info:
        registration_service.register_for_event(db_session, me, event_id)
    assert exc_info.value.code == "AT_CAPACITY"

    db_session.expire_all()
    event = db_session.get(Event, event_id)
    assert event.attendees == ["rival"]
    assert db_session.query(Registration).filter_by(event_id=event_id).count() == 1


def test_delete_racing_a_registration_conflicts(client: TestClient, db_session, monkeypatch):
    from campus_connect.services import events_service

    event_id = create_event(client, CREATOR).json()["id"]
    original_get_event = events_service.get_event

    def get_event_then_rival_registers(db, evt_id):
        event = original_get_event(db, evt_id)
        other = get_database().session()
        try:
            registration_service.register_for_event(
                other, Principal(user_id="rival", user_details="Rival"), evt_id
            )
        finally:
            other.close()
        return event

    monkeypatch.setattr(events_service, "get_event", get_event_then_rival_registers)

    creator = Principal(user_id="creator-1", user_details="Casey")
    with pytest.raises(ConflictError) as exc_info:
        events_service.delete_event(db_session, creator, event_id)
    assert exc_info.value.code == "CONCURRENT_UPDATE"

    db_session.expire_all()
    event = db_session.get(Event, event_id)
    assert event is not None
    assert event.attendees == ["rival"]
    assert db_session.query(Registration).filter_by(event_id=event_id).count() == 1
