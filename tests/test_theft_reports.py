import uuid
from datetime import datetime, timedelta, timezone

import pytest

from keep.models.theft_report import TheftReport
from keep.repositories.asset_repo import AssetRepository
from keep.repositories.theft_report_repo import TheftReportRepository
from keep.services.theft_report_service import TheftReportService
from tests.utils import API, make_token


@pytest.fixture
def bike(alice, create_asset):
    return create_asset(alice, name="Trek bicycle", category="Vehicles", serial_number="WTU123", description="Red frame")


def report(client, asset_id, headers=None, **payload):
    body = {"reporter_name": "Good Samaritan", "location": "Long Street", **payload}
    return client.post(f"{API}/public/assets/{asset_id}/theft-reports", json=body, headers=headers or {})


def test_public_lookup_exposes_only_public_fields(client, bike):
    response = client.get(f"{API}/public/assets/{bike['id']}")

    assert response.status_code == 200
    assert response.json() == {"id": bike["id"], "name": "Trek bicycle", "category": "Vehicles"}


def test_public_lookup_of_missing_asset(client):
    assert client.get(f"{API}/public/assets/{uuid.uuid4()}").status_code == 404


def test_anonymous_report_is_accepted_as_pending(client, bike):
    response = report(client, bike["id"], reporter_email="finder@example.com")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert set(body) == {"id", "status", "created_at"}


def test_reporter_cannot_choose_status(client, bike):
    response = report(client, bike["id"], status="resolved")
    assert response.status_code == 422


def test_report_email_is_validated(client, bike):
    assert report(client, bike["id"], reporter_email="not-an-email").status_code == 422
    assert report(client, bike["id"], reporter_email="").status_code == 201


def test_report_on_missing_asset(client):
    assert report(client, uuid.uuid4()).status_code == 404


def test_authenticated_stranger_can_report(client, bob, bike):
    assert report(client, bike["id"], headers=bob.headers).status_code == 201


def test_owner_sees_reports_others_do_not(client, alice, bob, bike, create_asset):
    report(client, bike["id"], description="Found near the station")
    bob_asset = create_asset(bob, name="Scooter", category="Vehicles")
    report(client, bob_asset["id"])

    alice_reports = client.get(f"{API}/theft-reports", headers=alice.headers).json()
    per_asset = client.get(f"{API}/assets/{bike['id']}/theft-reports", headers=alice.headers).json()

    assert [r["description"] for r in alice_reports] == ["Found near the station"]
    assert [r["asset_id"] for r in per_asset] == [bike["id"]]
    assert client.get(f"{API}/assets/{bike['id']}/theft-reports", headers=bob.headers).status_code == 403
    assert len(client.get(f"{API}/theft-reports", headers=bob.headers).json()) == 1


def test_anonymous_cannot_list_reports(client, bike):
    report(client, bike["id"])
    assert client.get(f"{API}/theft-reports").status_code == 401


def test_owner_triages_report(client, alice, bob, bike):
    created = report(client, bike["id"]).json()
    url = f"{API}/theft-reports/{created['id']}"

    assert client.patch(url, json={"status": "resolved"}, headers=bob.headers).status_code == 403
    updated = client.patch(url, json={"status": "resolved"}, headers=alice.headers)
    assert updated.status_code == 200
    assert updated.json()["status"] == "resolved"

    pending = client.get(f"{API}/theft-reports", params={"status": "pending"}, headers=alice.headers)
    assert pending.json() == []


def test_report_access_follows_asset_transfer(client, engine, alice, bob, bike):
    from sqlmodel import Session

    from keep.models.asset import Asset

    created = report(client, bike["id"]).json()
    with Session(engine) as session:
        asset = session.get(Asset, uuid.UUID(bike["id"]))
        asset.owner_id = bob.id
        session.add(asset)
        session.commit()

    url = f"{API}/theft-reports/{created['id']}"
    assert client.patch(url, json={"status": "dismissed"}, headers=alice.headers).status_code == 403
    assert client.patch(url, json={"status": "dismissed"}, headers=bob.headers).status_code == 200


def test_cleanup_removes_only_old_resolved_reports(session, alice, bike):
    asset_id = uuid.UUID(bike["id"])
    old = datetime.now(timezone.utc) - timedelta(days=400)
    session.add_all(
        [
            TheftReport(asset_id=asset_id, status="resolved", created_at=old),
            TheftReport(asset_id=asset_id, status="pending", created_at=old),
            TheftReport(asset_id=asset_id, status="resolved"),
        ]
    )
    session.commit()

    service = TheftReportService(TheftReportRepository(), AssetRepository())
    removed = service.cleanup_resolved(session, days_old=365)

    assert removed == 1
    remaining = TheftReportRepository().list_for_principal(session, alice.id)
    assert sorted(r.status for r in remaining) == ["pending", "resolved"]


def test_stale_token_does_not_block_public_report(client, bike):
    stale = make_token(uuid.uuid4(), "finder@example.com", expires_in=-60)

    response = report(client, bike["id"], headers={"Authorization": f"Bearer {stale}"})
    assert response.status_code == 201

    garbage = report(client, bike["id"], headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 201
