from datetime import date, datetime, timedelta, timezone

from tests.utils import API


def test_statistics_cover_only_own_inventory(client, alice, bob, create_asset):
    laptop = create_asset(alice, name="Laptop", asset_value_zar=20000)
    create_asset(alice, name="Drill", category="Equipment", asset_value_zar=1500.5, status="maintenance")
    create_asset(alice, name="Fax", status="retired")
    create_asset(bob, name="Yacht", category="Vehicles", asset_value_zar=5_000_000)

    client.put(
        f"{API}/assets/{laptop['id']}/insurance",
        json={"is_insured": True, "insurance_provider": "Santam"},
        headers=alice.headers,
    )
    client.post(f"{API}/assets/{laptop['id']}/notes", json={"note_text": "One"}, headers=alice.headers)
    client.post(f"{API}/assets/{laptop['id']}/notes", json={"note_text": "Two"}, headers=alice.headers)
    client.post(
        f"{API}/assets/{laptop['id']}/assignments",
        json={"assigned_to": str(bob.id)},
        headers=alice.headers,
    )

    response = client.get(f"{API}/dashboard/stats", headers=alice.headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["total_assets"] == 3
    assert stats["available_assets"] == 0
    assert stats["assigned_assets"] == 1
    assert stats["maintenance_assets"] == 1
    assert stats["retired_assets"] == 1
    assert stats["total_value"] == 21500.5
    assert stats["insured_assets"] == 1
    assert stats["assets_with_notes"] == 1
    assert {a["name"] for a in stats["recent_assets"]} == {"Laptop", "Drill", "Fax"}


def test_empty_inventory_statistics(client, alice):
    stats = client.get(f"{API}/dashboard/stats", headers=alice.headers).json()
    assert stats["total_assets"] == 0
    assert stats["total_value"] == 0.0
    assert stats["recent_assets"] == []


def test_renewal_reminders_within_window(client, alice, create_asset):
    today = datetime.now(timezone.utc).date()
    soon = create_asset(alice, name="Car")
    later = create_asset(alice, name="House", category="Property")
    lapsed = create_asset(alice, name="Boat", category="Vehicles")

    for asset, renewal, insured in (
        (soon, today + timedelta(days=10), True),
        (later, today + timedelta(days=60), True),
        (lapsed, today + timedelta(days=5), False),
    ):
        client.put(
            f"{API}/assets/{asset['id']}/insurance",
            json={
                "is_insured": insured,
                "insurance_provider": "Santam" if insured else None,
                "renewal_date": renewal.isoformat(),
            },
            headers=alice.headers,
        )

    reminders = client.get(f"{API}/dashboard/renewals", headers=alice.headers).json()
    wider = client.get(f"{API}/dashboard/renewals", params={"days_ahead": 90}, headers=alice.headers).json()

    assert [r["asset_name"] for r in reminders] == ["Car"]
    assert reminders[0]["days_until_renewal"] == 10
    assert date.fromisoformat(reminders[0]["renewal_date"]) == today + timedelta(days=10)
    assert [r["asset_name"] for r in wider] == ["Car", "House"]


def test_renewal_window_is_bounded(client, alice):
    assert client.get(f"{API}/dashboard/renewals", params={"days_ahead": -1}, headers=alice.headers).status_code == 400
    assert client.get(f"{API}/dashboard/renewals", params={"days_ahead": 366}, headers=alice.headers).status_code == 400


def test_overdue_assignments(client, alice, bob, create_asset):
    late = create_asset(alice, name="Projector")
    on_time = create_asset(alice, name="Tablet")
    now = datetime.now(timezone.utc)

    client.post(
        f"{API}/assets/{late['id']}/assignments",
        json={"assigned_to": str(bob.id), "due_date": (now - timedelta(days=3, hours=1)).isoformat()},
        headers=alice.headers,
    )
    client.post(
        f"{API}/assets/{on_time['id']}/assignments",
        json={"assigned_to": str(bob.id), "due_date": (now + timedelta(days=3)).isoformat()},
        headers=alice.headers,
    )

    overdue = client.get(f"{API}/dashboard/overdue-assignments", headers=alice.headers).json()

    assert len(overdue) == 1
    item = overdue[0]
    assert item["asset_name"] == "Projector"
    assert item["assigned_to_name"] == "Bob"
    assert item["assigned_to_email"] == "bob@example.com"
    assert item["days_overdue"] == 3

    # The assignee sees nothing: overdue lists follow asset ownership
    assert client.get(f"{API}/dashboard/overdue-assignments", headers=bob.headers).json() == []
