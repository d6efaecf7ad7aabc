from tests.utils import API, FakeBucket, Principal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from keep.core.storage_utils import AssetStorage, get_storage
from keep.database import get_session
from keep.main import app
from keep.models.profile import Profile
from keep.repositories.asset_repo import CategoryRepository
from keep.services.category_service import CategoryService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage():
    return AssetStorage(
        photos=FakeBucket("asset-photos", public=True),
        documents=FakeBucket("asset-documents", public=False),
    )


@pytest.fixture
def client(engine, storage):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_storage] = lambda: storage
    # No context manager: the lifespan (real DB + seeding) must not run
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def alice(session):
    principal = Principal("alice@example.com")
    session.add(Profile(id=principal.id, email=principal.email, full_name="Alice"))
    session.commit()
    return principal


@pytest.fixture
def bob(session):
    principal = Principal("bob@example.com")
    session.add(Profile(id=principal.id, email=principal.email, full_name="Bob"))
    session.commit()
    return principal


@pytest.fixture
def default_categories(session):
    return CategoryService(CategoryRepository()).seed_default_categories(session)


@pytest.fixture
def create_asset(client):
    def _create(principal: Principal, **overrides) -> dict:
        payload = {"name": "MacBook Pro", "category": "Electronics"}
        payload.update(overrides)
        response = client.post(f"{API}/assets", json=payload, headers=principal.headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
