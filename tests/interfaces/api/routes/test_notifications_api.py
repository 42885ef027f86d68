"""Integration tests for the notification and notifiable endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from pydantic import ValidationError
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.orm import Query

from notifyhub.application.use_cases.notifications import NotificationManager
from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import AmbiguousResultError, ConfigurationError, NotFoundError
from notifyhub.interfaces.api.dependencies import get_notification_manager
from notifyhub.interfaces.api.routes_helpers import notification_to_schema, to_http_exception
from notifyhub.main import create_app


@pytest.fixture()
def client(session, discovery, dispatcher):
    """Return a test client whose requests share the test session."""

    app = create_app()
    app.dependency_overrides[get_notification_manager] = lambda: NotificationManager(
        session, discovery=discovery, dispatcher=dispatcher
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _user(account_id: int) -> dict:
    return {"name": "user", "identifiers": {"id": account_id}}


def _entity_id(session, account) -> int:
    from notifyhub.infrastructure.models import NotifiableEntityModel

    return (
        session.query(NotifiableEntityModel.id)
        .filter(NotifiableEntityModel.identifier == str(account.id))
        .scalar()
    )


def test_list_registered_notifiables(client):
    response = client.get("/notifiables/")

    assert response.status_code == 200
    by_name = {item["name"]: item for item in response.json()}
    assert by_name["user"]["identifiers"] == ["id"]
    assert by_name["team"]["class_name"] == "conftest:TeamModel"


def test_create_assign_and_read_flow(client, session, make_account, received):
    account = make_account(1)

    response = client.post(
        "/notifications/",
        json={"subject": "Welcome", "message": "Hello there", "notifiables": [_user(1)]},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["subject"] == "Welcome"
    assert body["message"] == "Hello there"
    notification_id = body["id"]
    assert [topic for topic, _ in received] == ["notification.created", "notification.assigned"]

    recipients = client.get(f"/notifications/{notification_id}/notifiables").json()
    assert recipients == [_user(1)]

    entity_id = _entity_id(session, account)
    entry = client.get(f"/notifiables/{entity_id}").json()
    assert entry["identifier"] == "1"
    assert entry["notifiable"] == _user(1)

    unseen = client.get(f"/notifiables/{entity_id}/notifications", params={"seen": False})
    assert [item["id"] for item in unseen.json()] == [notification_id]

    seen = client.post(f"/notifiables/{entity_id}/notifications/{notification_id}/seen")
    assert seen.json() == {
        "notification_id": notification_id,
        "notifiable_id": entity_id,
        "seen": True,
    }
    counts = client.get(f"/notifiables/{entity_id}/notifications/count").json()
    assert counts == {"all": 1, "seen": 1, "unseen": 0}

    unseen_again = client.post(f"/notifiables/{entity_id}/notifications/{notification_id}/unseen")
    assert unseen_again.json()["seen"] is False


def test_assign_and_remove_recipients(client, make_account):
    make_account(1)
    make_account(2)
    notification_id = client.post("/notifications/", json={"subject": "News"}).json()["id"]

    assigned = client.post(
        f"/notifications/{notification_id}/assignments",
        json={"notifiables": [_user(1), _user(2)]},
    )
    assert assigned.status_code == 200
    assert assigned.json() == [_user(1), _user(2)]

    removed = client.post(
        f"/notifications/{notification_id}/removals", json={"notifiables": [_user(1)]}
    )
    assert removed.json() == [_user(2)]


def test_mark_all_seen_returns_counts(client, session, make_account):
    account = make_account(1)
    for subject in ("one", "two"):
        client.post("/notifications/", json={"subject": subject, "notifiables": [_user(1)]})
    entity_id = _entity_id(session, account)

    response = client.post(f"/notifiables/{entity_id}/notifications/seen")

    assert response.json() == {"all": 2, "seen": 2, "unseen": 0}


def test_patch_updates_only_sent_fields(client):
    created = client.post(
        "/notifications/", json={"subject": "Draft", "message": "Body", "link": "/a"}
    ).json()

    response = client.patch(f"/notifications/{created['id']}", json={"message": "Edited"})

    assert response.status_code == 200
    body = response.json()
    assert body["subject"] == "Draft"
    assert body["message"] == "Edited"
    assert body["link"] == "/a"


def test_patch_rejects_null_subject_and_unknown_fields(client):
    created = client.post("/notifications/", json={"subject": "Draft"}).json()

    assert client.patch(f"/notifications/{created['id']}", json={"subject": None}).status_code == 400
    assert client.patch(f"/notifications/{created['id']}", json={"color": "red"}).status_code == 422


def test_delete_notification(client, session, make_account):
    account = make_account(1)
    created = client.post(
        "/notifications/", json={"subject": "Temporary", "notifiables": [_user(1)]}
    ).json()
    entity_id = _entity_id(session, account)

    response = client.delete(f"/notifications/{created['id']}")

    assert response.status_code == 204
    assert client.get(f"/notifications/{created['id']}").status_code == 404
    counts = client.get(f"/notifiables/{entity_id}/notifications/count").json()
    assert counts["all"] == 0


def test_unknown_recipient_is_not_found_and_nothing_is_created(client, received):
    response = client.post(
        "/notifications/", json={"subject": "Lost", "notifiables": [_user(99)]}
    )

    assert response.status_code == 404
    assert client.get("/notifications/").json() == []
    assert received == []


def test_unknown_notifiable_kind_is_not_found(client):
    response = client.post(
        "/notifications/",
        json={"subject": "Lost", "notifiables": [{"name": "robot", "identifiers": {"id": 1}}]},
    )

    assert response.status_code == 404


def test_missing_identifier_is_bad_request(client):
    response = client.post(
        "/notifications/",
        json={"subject": "Lost", "notifiables": [{"name": "team", "identifiers": {"slug": "x"}}]},
    )

    assert response.status_code == 400


def test_seen_without_assignment_is_not_found(client, session, make_account):
    account = make_account(1)
    make_account(2)
    notification_id = client.post(
        "/notifications/", json={"subject": "Private", "notifiables": [_user(2)]}
    ).json()["id"]
    client.post("/notifications/", json={"subject": "Other", "notifiables": [_user(1)]})
    entity_id = _entity_id(session, account)

    response = client.post(f"/notifiables/{entity_id}/notifications/{notification_id}/seen")

    assert response.status_code == 404


def test_missing_resources_return_404(client):
    assert client.get("/notifications/999").status_code == 404
    assert client.delete("/notifications/999").status_code == 404
    assert client.get("/notifiables/999").status_code == 404
    assert client.get("/notifiables/999/notifications/count").status_code == 404


def test_repeated_assignment_is_idempotent(client, make_account):
    make_account(3)
    notification_id = client.post("/notifications/", json={"subject": "Once"}).json()["id"]

    for _ in range(2):
        response = client.post(
            f"/notifications/{notification_id}/assignments",
            json={"notifiables": [_user(3)]},
        )
        assert response.status_code == 200
        assert response.json() == [_user(3)]


def test_duplicate_links_are_reported_as_conflict(client, session, make_account, monkeypatch):
    account = make_account(1)
    notification_id = client.post(
        "/notifications/", json={"subject": "Twice", "notifiables": [_user(1)]}
    ).json()["id"]
    entity_id = _entity_id(session, account)

    def multiple_rows(self):
        raise MultipleResultsFound("Multiple rows were found when one or none was required")

    monkeypatch.setattr(Query, "one_or_none", multiple_rows)

    response = client.post(f"/notifiables/{entity_id}/notifications/{notification_id}/seen")

    assert response.status_code == 409


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (NotFoundError("missing"), 404),
        (AmbiguousResultError("twice"), 409),
        (ConfigurationError("broken"), 500),
        (ValueError("bad input"), 400),
    ],
)
def test_errors_map_to_http_status(error, status_code):
    assert to_http_exception(error).status_code == status_code


def test_unsaved_notification_cannot_be_serialized():
    with pytest.raises(ValidationError):
        notification_to_schema(Notification(id=None, subject="Draft"))
