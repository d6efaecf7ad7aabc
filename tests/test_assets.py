import uuid

from sqlmodel import Session, select

from keep.models.asset_detail import AssetNote
from tests.utils import API


def test_create_asset_stamps_owner_and_qr_payload(client, alice, create_asset):
    asset = create_asset(alice, name="  Canon EOS R5 ", serial_number="SN-123")

    assert asset["owner_id"] == str(alice.id)
    assert asset["name"] == "Canon EOS R5"
    assert asset["status"] == "available"
    assert asset["asset_condition"] == "excellent"
    assert asset["qr_code"] == f"https://keep.test/asset/{asset['id']}"


def test_owner_id_cannot_be_supplied(client, alice, bob):
    response = client.post(
        f"{API}/assets",
        json={"name": "Car", "category": "Vehicles", "owner_id": str(bob.id)},
        headers=alice.headers,
    )
    assert response.status_code == 422


def test_new_asset_cannot_start_assigned(client, alice):
    response = client.post(
        f"{API}/assets",
        json={"name": "Car", "category": "Vehicles", "status": "assigned"},
        headers=alice.headers,
    )
    assert response.status_code == 400


def test_asset_validation_limits(client, alice):
    too_long = client.post(
        f"{API}/assets", json={"name": "x" * 256, "category": "Vehicles"}, headers=alice.headers
    )
    negative = client.post(
        f"{API}/assets",
        json={"name": "Car", "category": "Vehicles", "asset_value_zar": -1},
        headers=alice.headers,
    )
    blank = client.post(f"{API}/assets", json={"name": "   ", "category": "Vehicles"}, headers=alice.headers)

    assert too_long.status_code == 422
    assert negative.status_code == 422
    assert blank.status_code == 422
    fields = {e["field"] for e in too_long.json()["errors"]}
    assert fields == {"name"}


def test_list_is_scoped_to_owner(client, alice, bob, create_asset):
    create_asset(alice, name="Laptop")
    create_asset(alice, name="Phone")
    create_asset(bob, name="Bike", category="Vehicles")

    alice_assets = client.get(f"{API}/assets", headers=alice.headers).json()
    bob_assets = client.get(f"{API}/assets", headers=bob.headers).json()

    assert {a["name"] for a in alice_assets} == {"Laptop", "Phone"}
    assert [a["name"] for a in bob_assets] == ["Bike"]


def test_list_filters(client, alice, create_asset):
    create_asset(alice, name="Laptop")
    create_asset(alice, name="Truck", category="Vehicles", status="maintenance")

    by_status = client.get(f"{API}/assets", params={"status": "maintenance"}, headers=alice.headers)
    by_category = client.get(f"{API}/assets", params={"category": "Electronics"}, headers=alice.headers)

    assert [a["name"] for a in by_status.json()] == ["Truck"]
    assert [a["name"] for a in by_category.json()] == ["Laptop"]


def test_foreign_and_missing_assets_look_the_same(client, alice, bob, create_asset):
    asset = create_asset(alice)

    foreign = client.get(f"{API}/assets/{asset['id']}", headers=bob.headers)
    missing = client.get(f"{API}/assets/{uuid.uuid4()}", headers=bob.headers)

    assert foreign.status_code == missing.status_code == 403
    assert foreign.json() == missing.json() == {"detail": "Access denied"}


def test_only_owner_can_update(client, alice, bob, create_asset):
    asset = create_asset(alice)

    denied = client.patch(f"{API}/assets/{asset['id']}", json={"name": "Mine"}, headers=bob.headers)
    updated = client.patch(
        f"{API}/assets/{asset['id']}",
        json={"name": "MacBook Air", "asset_value_zar": 18999.5, "custom_fields": {"colour": "silver"}},
        headers=alice.headers,
    )

    assert denied.status_code == 403
    assert updated.status_code == 200
    body = updated.json()
    assert body["name"] == "MacBook Air"
    assert body["asset_value_zar"] == 18999.5
    assert body["custom_fields"] == {"colour": "silver"}
    assert body["owner_id"] == str(alice.id)


def test_status_cannot_be_set_to_assigned_directly(client, alice, create_asset):
    asset = create_asset(alice)
    response = client.patch(f"{API}/assets/{asset['id']}", json={"status": "assigned"}, headers=alice.headers)
    assert response.status_code == 400


def test_delete_cascades_and_removes_files(client, engine, storage, alice, bob, create_asset):
    asset = create_asset(alice)
    client.post(f"{API}/assets/{asset['id']}/notes", json={"note_text": "Bought new"}, headers=alice.headers)
    client.post(
        f"{API}/assets/{asset['id']}/photos",
        files={"file": ("front.jpg", b"\xff\xd8jpeg", "image/jpeg")},
        headers=alice.headers,
    )
    assert len(storage.photos.objects) == 1

    assert client.delete(f"{API}/assets/{asset['id']}", headers=bob.headers).status_code == 403
    assert client.delete(f"{API}/assets/{asset['id']}", headers=alice.headers).status_code == 204

    assert client.get(f"{API}/assets/{asset['id']}", headers=alice.headers).status_code == 403
    assert storage.photos.objects == {}
    with Session(engine) as session:
        assert session.exec(select(AssetNote)).all() == []


def test_delete_survives_storage_failure(client, storage, alice, create_asset):
    asset = create_asset(alice)
    client.post(
        f"{API}/assets/{asset['id']}/photos",
        files={"file": ("front.png", b"\x89PNG", "image/png")},
        headers=alice.headers,
    )
    storage.photos.fail_with = Exception("storage unavailable")

    response = client.delete(f"{API}/assets/{asset['id']}", headers=alice.headers)

    assert response.status_code == 204
    assert client.get(f"{API}/assets/{asset['id']}", headers=alice.headers).status_code == 403


def test_search_ranks_name_matches_first(client, alice, bob, create_asset):
    create_asset(alice, name="Office chair", description="Toyota dealership giveaway")
    create_asset(alice, name="Toyota Hilux", category="Vehicles", vin_identifier="TOYOTA123")
    create_asset(alice, name="Spare tyre", category="Vehicles", serial_number="toyota-spare")
    create_asset(bob, name="Toyota Corolla", category="Vehicles")

    response = client.get(f"{API}/assets/search", params={"q": "toyota"}, headers=alice.headers)

    assert response.status_code == 200
    results = response.json()
    assert [r["name"] for r in results] == ["Toyota Hilux", "Spare tyre", "Office chair"]
    assert results[0]["rank"] > results[1]["rank"] > results[2]["rank"]


def test_search_requires_query(client, alice):
    assert client.get(f"{API}/assets/search", params={"q": ""}, headers=alice.headers).status_code == 422
    assert client.get(f"{API}/assets/search", params={"q": "   "}, headers=alice.headers).status_code == 400


def test_search_treats_wildcards_literally(client, alice, create_asset):
    create_asset(alice, name="Drill")
    response = client.get(f"{API}/assets/search", params={"q": "%"}, headers=alice.headers)
    assert response.json() == []


def test_qr_code_png(client, alice, bob, create_asset):
    asset = create_asset(alice)

    response = client.get(f"{API}/assets/{asset['id']}/qr-code.png", headers=alice.headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")
    assert client.get(f"{API}/assets/{asset['id']}/qr-code.png", headers=bob.headers).status_code == 403


def test_health_check(client):
    assert client.get("/").json() == {"status": "ok", "service": "keep-backend"}


def test_search_requires_every_term(client, alice, create_asset):
    create_asset(alice, name="Dell laptop")
    create_asset(alice, name="HP laptop")
    create_asset(alice, name="Dell monitor")
    create_asset(alice, name="Work machine", description="Laptop", serial_number="DELL-7420")

    response = client.get(f"{API}/assets/search", params={"q": "dell laptop"}, headers=alice.headers)

    assert response.status_code == 200
    assert sorted(r["name"] for r in response.json()) == ["Dell laptop", "Work machine"]
