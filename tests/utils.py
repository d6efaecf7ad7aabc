import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read once at import time; point them at test values first.
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-keep-backend")
os.environ.setdefault("PUBLIC_BASE_URL", "https://keep.test")

from jose import jwt

from keep.core.config import get_settings

API = get_settings().API_V1_STR


class FakeBucket:
    """In-memory stand-in for a Supabase Storage bucket."""

    def __init__(self, name: str, public: bool):
        self.name = name
        self.public = public
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail_with: Exception | None = None

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if path in self.objects:
            raise Exception("The resource already exists")
        self.objects[path] = (file_bytes, content_type)

    def public_url(self, path: str) -> str:
        return f"https://storage.test/{self.name}/{path}"

    def signed_url(self, path: str, expires_in: int) -> str:
        return f"https://storage.test/{self.name}/{path}?token=signed&expires={expires_in}"

    def remove(self, paths: list[str]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        for path in paths:
            self.objects.pop(path, None)


def make_token(user_id: uuid.UUID, email: str, expires_in: int = 3600, **claims) -> str:
    settings = get_settings()
    payload = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    payload.update(claims)
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm=settings.SUPABASE_JWT_ALG)


class Principal:
    def __init__(self, email: str):
        self.id = uuid.uuid4()
        self.email = email
        self.headers = {"Authorization": f"Bearer {make_token(self.id, email)}"}
