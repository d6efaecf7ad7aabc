import uuid
from datetime import datetime, timedelta, timezone

import pytest

from tests.utils import API


@pytest.fixture
def laptop(alice, create_asset):
    return create_asset(alice, name="Laptop")


def assign(client, principal, asset_id, assignee_id, **extra):
    return client.post(
        f"{API}/assets/{asset_id}/assignments",
        json={"assigned_to": str(assignee_id), **extra},
        headers=principal.headers,
    )


def test_assign_sets_asset_status(client, alice, bob, laptop):
    due = (datetime.now(timezone.utc) + timedelta(days=7)).isoformat()

    response = assign(client, alice, laptop["id"], bob.id, due_date=due)

    assert response.status_code == 201
    body = response.json()
    assert body["assigned_to"] == str(bob.id)
    assert body["assigned_by"] == str(alice.id)
    assert body["return_date"] is None
    asset = client.get(f"{API}/assets/{laptop['id']}", headers=alice.headers).json()
    assert asset["status"] == "assigned"


def test_second_open_assignment_conflicts(client, alice, bob, laptop):
    assert assign(client, alice, laptop["id"], bob.id).status_code == 201

    second = assign(client, alice, laptop["id"], alice.id)

    assert second.status_code == 409
    assert second.json()["detail"] == "Asset already has an open assignment"


def test_only_owner_can_assign(client, alice, bob, laptop):
    response = assign(client, bob, laptop["id"], bob.id)
    assert response.status_code == 403


def test_assigning_missing_asset_is_denied(client, alice, bob):
    assert assign(client, alice, uuid.uuid4(), bob.id).status_code == 403


def test_assignee_must_exist(client, alice, laptop):
    assert assign(client, alice, laptop["id"], uuid.uuid4()).status_code == 400


def test_retired_asset_cannot_be_assigned(client, alice, bob, create_asset):
    retired = create_asset(alice, name="Old phone", status="retired")
    assert assign(client, alice, retired["id"], bob.id).status_code == 409


def test_return_makes_asset_available_again(client, alice, bob, laptop):
    assignment = assign(client, alice, laptop["id"], bob.id).json()

    returned = client.post(
        f"{API}/assignments/{assignment['id']}/return",
        json={"return_condition": "Scratched lid"},
        headers=alice.headers,
    )

    assert returned.status_code == 200
    assert returned.json()["return_date"] is not None
    assert returned.json()["return_condition"] == "Scratched lid"
    asset = client.get(f"{API}/assets/{laptop['id']}", headers=alice.headers).json()
    assert asset["status"] == "available"

    # Asset can be handed out again once returned
    assert assign(client, alice, laptop["id"], alice.id).status_code == 201


def test_returning_twice_conflicts(client, alice, bob, laptop):
    assignment = assign(client, alice, laptop["id"], bob.id).json()
    url = f"{API}/assignments/{assignment['id']}/return"

    assert client.post(url, json={}, headers=alice.headers).status_code == 200
    second = client.post(url, json={}, headers=alice.headers)

    assert second.status_code == 409
    assert second.json()["detail"] == "Assignment already returned"


def test_assignee_cannot_return_or_list(client, alice, bob, laptop):
    assignment = assign(client, alice, laptop["id"], bob.id).json()

    assert client.post(
        f"{API}/assignments/{assignment['id']}/return", json={}, headers=bob.headers
    ).status_code == 403
    assert client.get(f"{API}/assets/{laptop['id']}/assignments", headers=bob.headers).status_code == 403


def test_list_history_newest_first(client, alice, bob, laptop):
    first = assign(client, alice, laptop["id"], bob.id).json()
    client.post(f"{API}/assignments/{first['id']}/return", json={}, headers=alice.headers)
    second = assign(client, alice, laptop["id"], alice.id).json()

    history = client.get(f"{API}/assets/{laptop['id']}/assignments", headers=alice.headers).json()

    assert [a["id"] for a in history] == [second["id"], first["id"]]


def test_update_due_date(client, alice, bob, laptop):
    assignment = assign(client, alice, laptop["id"], bob.id).json()
    due = "2030-01-15T09:00:00+00:00"

    response = client.patch(
        f"{API}/assignments/{assignment['id']}", json={"due_date": due}, headers=alice.headers
    )

    assert response.status_code == 200
    assert response.json()["due_date"].startswith("2030-01-15T09:00:00")
    assert client.patch(
        f"{API}/assignments/{assignment['id']}", json={"due_date": due}, headers=bob.headers
    ).status_code == 403


def test_status_change_blocked_while_assigned(client, alice, bob, laptop):
    assign(client, alice, laptop["id"], bob.id)

    response = client.patch(
        f"{API}/assets/{laptop['id']}", json={"status": "maintenance"}, headers=alice.headers
    )

    assert response.status_code == 409
