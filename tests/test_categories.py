from tests.utils import API


def test_lists_own_and_global_categories(client, alice, bob, default_categories):
    client.post(f"{API}/categories", json={"name": "Cameras"}, headers=alice.headers)
    client.post(f"{API}/categories", json={"name": "Boats"}, headers=bob.headers)

    response = client.get(f"{API}/categories", headers=alice.headers)

    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert names == sorted(names)
    assert "Cameras" in names
    assert "Vehicles" in names
    assert "Boats" not in names


def test_seeding_defaults_is_idempotent(session, default_categories):
    from keep.repositories.asset_repo import CategoryRepository
    from keep.services.category_service import CategoryService

    assert default_categories == 5
    assert CategoryService(CategoryRepository()).seed_default_categories(session) == 0


def test_duplicate_name_per_owner_conflicts(client, alice, bob):
    first = client.post(f"{API}/categories", json={"name": "Cameras"}, headers=alice.headers)
    duplicate = client.post(f"{API}/categories", json={"name": "Cameras"}, headers=alice.headers)
    other_owner = client.post(f"{API}/categories", json={"name": "Cameras"}, headers=bob.headers)

    assert first.status_code == 201
    assert first.json()["owner_id"] == str(alice.id)
    assert duplicate.status_code == 409
    assert other_owner.status_code == 201


def test_global_categories_cannot_be_modified(client, alice, default_categories):
    categories = client.get(f"{API}/categories", headers=alice.headers).json()
    global_id = next(c["id"] for c in categories if c["owner_id"] is None)

    patch = client.patch(f"{API}/categories/{global_id}", json={"name": "Mine"}, headers=alice.headers)
    delete = client.delete(f"{API}/categories/{global_id}", headers=alice.headers)

    assert patch.status_code == 403
    assert delete.status_code == 403


def test_only_owner_can_update_or_delete(client, alice, bob):
    category = client.post(f"{API}/categories", json={"name": "Cameras"}, headers=alice.headers).json()

    assert client.patch(
        f"{API}/categories/{category['id']}", json={"name": "Lenses"}, headers=bob.headers
    ).status_code == 403
    assert client.delete(f"{API}/categories/{category['id']}", headers=bob.headers).status_code == 403

    renamed = client.patch(
        f"{API}/categories/{category['id']}", json={"name": "Lenses"}, headers=alice.headers
    )
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Lenses"
    assert client.delete(f"{API}/categories/{category['id']}", headers=alice.headers).status_code == 204


def test_category_name_length_is_validated(client, alice):
    response = client.post(f"{API}/categories", json={"name": "x" * 101}, headers=alice.headers)
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "name"
