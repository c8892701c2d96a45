"""Repository dependencies (composition root).

Read variants share a non-transactional session; *_for_write variants use
the request's transactional session (commit on success, rollback on error).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medonboard.infrastructure.persistence.database import get_db, get_db_transactional
from medonboard.infrastructure.persistence.repositories import (
    ApprovalRequestRepository,
    ClinicRepository,
    DoctorRepository,
    PatientRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
)


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    """User repository for read operations."""
    return UserRepository(db)


async def get_user_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserRepository:
    """User repository for writes (transactional)."""
    return UserRepository(db)


async def get_role_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RoleRepository:
    return RoleRepository(db)


async def get_role_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleRepository:
    return RoleRepository(db)


async def get_permission_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PermissionRepository:
    return PermissionRepository(db)


async def get_permission_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> PermissionRepository:
    return PermissionRepository(db)


async def get_role_permission_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RolePermissionRepository:
    return RolePermissionRepository(db)


async def get_role_permission_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RolePermissionRepository:
    return RolePermissionRepository(db)


async def get_doctor_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DoctorRepository:
    return DoctorRepository(db)


async def get_doctor_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> DoctorRepository:
    return DoctorRepository(db)


async def get_clinic_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ClinicRepository:
    return ClinicRepository(db)


async def get_clinic_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ClinicRepository:
    return ClinicRepository(db)


async def get_approval_request_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApprovalRequestRepository:
    return ApprovalRequestRepository(db)


async def get_approval_request_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ApprovalRequestRepository:
    return ApprovalRequestRepository(db)


async def get_patient_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PatientRepository:
    return PatientRepository(db)


async def get_patient_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> PatientRepository:
    return PatientRepository(db)
