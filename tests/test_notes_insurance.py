import uuid

import pytest

from tests.utils import API


@pytest.fixture
def car(alice, create_asset):
    return create_asset(alice, name="Golf GTI", category="Vehicles")


# ---- Notes ----


def test_note_crud(client, alice, car):
    created = client.post(
        f"{API}/assets/{car['id']}/notes",
        json={"note_text": "Oil change at 60k", "note_category": "maintenance"},
        headers=alice.headers,
    )
    assert created.status_code == 201
    note = created.json()
    assert note["owner_id"] == str(alice.id)

    updated = client.patch(f"{API}/notes/{note['id']}", json={"note_text": "Oil change at 65k"}, headers=alice.headers)
    assert updated.status_code == 200
    assert updated.json()["note_text"] == "Oil change at 65k"
    assert updated.json()["note_category"] == "maintenance"

    assert client.delete(f"{API}/notes/{note['id']}", headers=alice.headers).status_code == 204
    assert client.get(f"{API}/assets/{car['id']}/notes", headers=alice.headers).json() == []


def test_note_category_filter(client, alice, car):
    client.post(f"{API}/assets/{car['id']}/notes", json={"note_text": "General"}, headers=alice.headers)
    client.post(
        f"{API}/assets/{car['id']}/notes",
        json={"note_text": "New tyres", "note_category": "repairs"},
        headers=alice.headers,
    )

    repairs = client.get(f"{API}/assets/{car['id']}/notes", params={"category": "repairs"}, headers=alice.headers)

    assert [n["note_text"] for n in repairs.json()] == ["New tyres"]


def test_cannot_attach_note_to_foreign_asset(client, bob, car):
    response = client.post(f"{API}/assets/{car['id']}/notes", json={"note_text": "Mine now"}, headers=bob.headers)
    assert response.status_code == 403


def test_foreign_note_is_hidden(client, alice, bob, car):
    note = client.post(f"{API}/assets/{car['id']}/notes", json={"note_text": "Private"}, headers=alice.headers).json()

    assert client.get(f"{API}/assets/{car['id']}/notes", headers=bob.headers).status_code == 403
    assert client.patch(f"{API}/notes/{note['id']}", json={"note_text": "x"}, headers=bob.headers).status_code == 403
    assert client.delete(f"{API}/notes/{note['id']}", headers=bob.headers).status_code == 403


def test_note_text_limits(client, alice, car):
    url = f"{API}/assets/{car['id']}/notes"
    assert client.post(url, json={"note_text": ""}, headers=alice.headers).status_code == 422
    assert client.post(url, json={"note_text": "x" * 2001}, headers=alice.headers).status_code == 422
    assert client.post(url, json={"note_text": "x", "note_category": "gossip"}, headers=alice.headers).status_code == 422


# ---- Insurance ----


def test_insurance_upsert_and_read(client, alice, car):
    url = f"{API}/assets/{car['id']}/insurance"
    payload = {
        "is_insured": True,
        "insurance_provider": "Santam",
        "policy_number": "POL-1",
        "coverage_amount": 350000,
        "premium_amount": 1200,
        "renewal_date": "2031-03-01",
    }

    created = client.put(url, json=payload, headers=alice.headers)
    replaced = client.put(url, json={**payload, "insurance_provider": "Discovery"}, headers=alice.headers)

    assert created.status_code == 200
    assert replaced.status_code == 200
    assert replaced.json()["id"] == created.json()["id"]

    fetched = client.get(url, headers=alice.headers)
    assert fetched.json()["insurance_provider"] == "Discovery"


def test_provider_required_when_insured(client, alice, car):
    response = client.put(
        f"{API}/assets/{car['id']}/insurance", json={"is_insured": True}, headers=alice.headers
    )
    assert response.status_code == 422


def test_missing_insurance_looks_like_denial(client, alice, car):
    response = client.get(f"{API}/assets/{car['id']}/insurance", headers=alice.headers)
    assert response.status_code == 403


def test_insurance_is_owner_only(client, alice, bob, car):
    url = f"{API}/assets/{car['id']}/insurance"
    client.put(url, json={"is_insured": True, "insurance_provider": "Santam"}, headers=alice.headers)

    assert client.get(url, headers=bob.headers).status_code == 403
    assert client.put(url, json={"is_insured": False}, headers=bob.headers).status_code == 403
    assert client.delete(url, headers=bob.headers).status_code == 403
    assert client.put(
        f"{API}/assets/{uuid.uuid4()}/insurance", json={"is_insured": False}, headers=alice.headers
    ).status_code == 403


def test_delete_insurance(client, alice, car):
    url = f"{API}/assets/{car['id']}/insurance"
    client.put(url, json={"is_insured": False}, headers=alice.headers)

    assert client.delete(url, headers=alice.headers).status_code == 204
    assert client.get(url, headers=alice.headers).status_code == 403
