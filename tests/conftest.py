# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Builds apps on the in-memory record store
# - Issues real session tokens so the identity gate is exercised end-to-end
# =============================================================================

import os
import time

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("JWT_SECRET", "test-secret-key-0123456789")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import Settings
from app.main import create_app
from core.models.resource import FieldSpec, FieldType, Relation, ResourceDescriptor
from core.resources import expenses, tasks
from core.services.schema_deriver import derive_schemas
from lib.memory_store import InMemoryRecordStore
from lib.utils import foreign_key_for

ORG_A = "org-a"
ORG_B = "org-b"
USER_A = "user-a"
USER_B = "user-b"


# =============================================================================
# Test Entities
# =============================================================================
# A parent/dependent pair used to exercise cascade soft-delete.

projects = ResourceDescriptor(
    name="projects",
    fields=(
        FieldSpec("name", FieldType.TEXT, example="Website relaunch"),
    ),
    relations=(
        Relation("projects", "milestones", foreign_key_for("projects")),
    ),
)

milestones = ResourceDescriptor(
    name="milestones",
    fields=(
        FieldSpec("title", FieldType.TEXT, example="Beta"),
        FieldSpec("projectId", FieldType.INTEGER, example=1),
    ),
)

TEST_RESOURCES = (tasks, expenses, projects, milestones)


# =============================================================================
# Helpers
# =============================================================================

def make_token(
    secret: str | None = None,
    user_id: str | None = USER_A,
    organization_id: str | None = ORG_A,
    audience: str | None = "authenticated",
    expires_in: int | None = 3600,
    **claims,
) -> str:
    """Sign a session token the way the authentication provider does."""
    payload = dict(claims)
    if audience is not None:
        payload["aud"] = audience
    if expires_in is not None:
        payload["exp"] = int(time.time()) + expires_in
    if user_id is not None:
        payload["sub"] = user_id
    if organization_id is not None:
        payload["organization_id"] = organization_id
    return jwt.encode(payload, secret or os.environ["JWT_SECRET"], algorithm="HS256")


def auth_headers(**kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(**kwargs)}"}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Fresh settings from the test environment."""
    return Settings()


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store, resources=TEST_RESOURCES)


@pytest.fixture
def client(app) -> TestClient:
    """Client authenticated as USER_A of ORG_A."""
    return TestClient(app, headers=auth_headers(), raise_server_exceptions=False)


@pytest.fixture
def other_tenant_client(app) -> TestClient:
    """Client authenticated as USER_B of ORG_B."""
    return TestClient(
        app,
        headers=auth_headers(user_id=USER_B, organization_id=ORG_B),
        raise_server_exceptions=False,
    )


@pytest.fixture
def anonymous_client(app) -> TestClient:
    """Client without an Authorization header."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def task_schemas():
    return derive_schemas(tasks)


@pytest.fixture
def project_schemas():
    return derive_schemas(projects)
