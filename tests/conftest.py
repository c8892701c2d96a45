"""Pytest configuration and fixtures for medonboard.

SECRET_KEY is set before anything imports medonboard so Settings validates.
HTTP tests run against create_app() through ASGITransport with repository
and service dependencies overridden by in-memory fakes; DB-dependent
fixtures skip when DATABASE_URL is not configured.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("EMAIL_BACKEND", "log")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from medonboard.api.v1.dependencies import (
    get_authorization_service,
    get_onboarding_service,
    get_onboarding_service_for_read,
    get_patient_service,
    get_patient_service_for_read,
    get_permission_service,
    get_permission_service_for_write,
    get_role_service,
    get_role_service_for_read,
    get_user_repo,
    get_user_service,
    get_user_service_for_read,
)
from medonboard.application.services.profile_auto_create import ProfileAutoCreateService
from medonboard.application.services.user_service import UserService
from medonboard.core.config import get_settings
from medonboard.infrastructure.persistence import database
from medonboard.main import create_app
from tests.fakes import OnboardingWorld, RbacWorld

get_settings.cache_clear()


def _provide(instance):
    def _dependency():
        return instance

    return _dependency


@pytest.fixture
def world() -> OnboardingWorld:
    """Onboarding services over in-memory repositories (admin fallback)."""
    return OnboardingWorld()


@pytest.fixture
async def rbac() -> RbacWorld:
    """Authorization, role and permission services with the catalogue seeded."""
    return await RbacWorld().seeded()


@pytest.fixture
def api_world(rbac: RbacWorld) -> OnboardingWorld:
    """Onboarding world sharing its user repository with rbac."""
    return OnboardingWorld(users=rbac.users)


@pytest.fixture
def app(api_world: OnboardingWorld, rbac: RbacWorld) -> FastAPI:
    """FastAPI app whose repositories and services read the fake worlds."""
    world = api_world
    application = create_app()
    user_service = UserService(
        rbac.users,
        world.doctors,
        world.clinics,
        ProfileAutoCreateService(world.doctors, world.clinics),
        world.dispatcher,
        rbac.roles,
    )
    overrides = {
        get_user_repo: rbac.users,
        get_authorization_service: rbac.authorization,
        get_role_service: rbac.role_service,
        get_role_service_for_read: rbac.role_service,
        get_permission_service: rbac.permission_service,
        get_permission_service_for_write: rbac.permission_service,
        get_user_service: user_service,
        get_user_service_for_read: user_service,
        get_onboarding_service: world.service,
        get_onboarding_service_for_read: world.service,
        get_patient_service: world.patient_service,
        get_patient_service_for_read: world.patient_service,
    }
    for dependency, instance in overrides.items():
        application.dependency_overrides[dependency] = _provide(instance)
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Skips (pytest.skip) when DATABASE_URL is not configured. Use
    @pytest.mark.requires_db on tests that need it; run without a DB via:
    pytest -m 'not requires_db'.
    """
    if database.get_engine() is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
    await database.dispose_engine()
