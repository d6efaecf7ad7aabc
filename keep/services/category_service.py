# keep/services/category_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from keep.core.errors import translate_integrity_error
from keep.core.policy import EntityType, Operation, ensure_authorized, load_authorized
from keep.models.asset import Category
from keep.models.profile import Profile
from keep.repositories.asset_repo import CategoryRepository
from keep.schemas.asset import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)

# Shared defaults visible to every principal (owner_id NULL)
DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("Vehicles", "Cars, motorcycles, trucks, and other vehicles"),
    ("Electronics", "Computers, phones, tablets, and electronic devices"),
    ("Property", "Real estate and property assets"),
    ("Furniture", "Office and home furniture"),
    ("Equipment", "Tools, machinery, and specialized equipment"),
]


def _duplicate_name() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="A category with this name already exists. Please choose a different name.",
    )


class CategoryService:
    """
    Business logic for categories.

    Responsibilities:
      - private categories per principal, unique by name per owner
      - read access to the shared defaults
      - seeding the shared defaults
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    def list_categories(self, session: Session, principal: Profile) -> list[Category]:
        return self.repo.list_visible(session, principal.id)

    def create_category(
        self,
        session: Session,
        principal: Profile,
        payload: CategoryCreate,
    ) -> Category:
        category = Category(
            name=payload.name,
            description=payload.description,
            owner_id=principal.id,
        )
        ensure_authorized(session, Operation.CREATE, EntityType.CATEGORY, category, principal.id)

        if self.repo.get_by_owner_and_name(session, principal.id, payload.name) is not None:
            raise _duplicate_name()

        try:
            return self.repo.create(session, category)
        except IntegrityError as exc:
            session.rollback()
            raise translate_integrity_error(exc, "create category") from exc

    def update_category(
        self,
        session: Session,
        principal: Profile,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> Category:
        category = load_authorized(
            session, Operation.UPDATE, EntityType.CATEGORY, category_id, principal.id
        )

        if payload.name is not None and payload.name != category.name:
            if self.repo.get_by_owner_and_name(session, principal.id, payload.name) is not None:
                raise _duplicate_name()
            category.name = payload.name

        if payload.description is not None:
            category.description = payload.description

        try:
            return self.repo.update(session, category)
        except IntegrityError as exc:
            session.rollback()
            raise translate_integrity_error(exc, "update category") from exc

    def delete_category(
        self,
        session: Session,
        principal: Profile,
        category_id: uuid.UUID,
    ) -> None:
        category = load_authorized(
            session, Operation.DELETE, EntityType.CATEGORY, category_id, principal.id
        )
        self.repo.delete(session, category)

    def seed_default_categories(self, session: Session) -> int:
        """
        Insert missing shared defaults. Returns how many were created.
        """
        created = 0
        for name, description in DEFAULT_CATEGORIES:
            if self.repo.get_by_owner_and_name(session, None, name) is None:
                self.repo.create(session, Category(name=name, description=description))
                created += 1
        if created:
            logger.info("Seeded %d default categories", created)
        return created
