"""Unit tests for ApprovalRequestStore (idempotent submit, scoping, entity attach)."""

import pytest

from medonboard.application.dtos.approval_request import ClinicEntity, DoctorEntity
from medonboard.application.services.approval_request_store import belongs_to_clinic
from medonboard.domain.enums import RequestType
from medonboard.domain.exceptions import ValidationException
from medonboard.domain.value_objects.approval_scope import AdminScope, ClinicScope
from tests.fakes import OnboardingWorld


async def test_submit_is_idempotent_per_pending_key(world: OnboardingWorld) -> None:
    """Resubmitting refreshes request_data of the same PENDING row."""
    user, doctor = world.doctor()
    first = await world.store.submit(user.id, "doctor", doctor.id, {"specialization": "ENT"})
    second = await world.store.submit(
        user.id, RequestType.DOCTOR, doctor.id, {"specialization": "Cardiology"}
    )
    assert second.id == first.id
    assert second.request_data == {"specialization": "Cardiology"}
    assert len(world.requests.rows) == 1


async def test_submit_to_other_clinic_is_a_new_request(world: OnboardingWorld) -> None:
    _, clinic_a = world.clinic("a@example.com")
    _, clinic_b = world.clinic("b@example.com")
    user, doctor = world.doctor(clinic_id=clinic_a.id)
    a = await world.store.submit(user.id, "DOCTOR", doctor.id, {}, clinic_id=clinic_a.id)
    b = await world.store.submit(user.id, "DOCTOR", doctor.id, {}, clinic_id=clinic_b.id)
    assert a.id != b.id


async def test_submit_rejects_clinic_scoped_clinic_request(world: OnboardingWorld) -> None:
    clinic_user, clinic = world.clinic()
    with pytest.raises(ValidationException):
        await world.store.submit(
            clinic_user.id, RequestType.CLINIC, clinic.id, {}, clinic_id=clinic.id
        )
    assert world.requests.rows == {}


async def test_submit_rejects_unknown_type(world: OnboardingWorld) -> None:
    with pytest.raises(ValidationException):
        await world.store.submit("u1", "PATIENT", "e1", {})


async def test_reads_attach_entity(world: OnboardingWorld) -> None:
    doctor_user, doctor = world.doctor()
    clinic_user, clinic = world.clinic()
    d = await world.store.submit(doctor_user.id, "DOCTOR", doctor.id, {})
    c = await world.store.submit(clinic_user.id, "CLINIC", clinic.id, {})

    loaded_d = await world.store.get_by_id(d.id)
    loaded_c = await world.store.get_by_id(c.id)

    assert isinstance(loaded_d.entity, DoctorEntity)
    assert loaded_d.entity.doctor.id == doctor.id
    assert isinstance(loaded_c.entity, ClinicEntity)
    assert loaded_c.entity.clinic.user.email == "clinic@example.com"


async def test_admin_and_clinic_queues_are_disjoint(world: OnboardingWorld) -> None:
    _, clinic = world.clinic()
    linked_user, linked = world.doctor("linked@example.com", clinic_id=clinic.id)
    solo_user, solo = world.doctor("solo@example.com")
    routed = await world.store.submit(linked_user.id, "DOCTOR", linked.id, {}, clinic_id=clinic.id)
    admin_only = await world.store.submit(solo_user.id, "DOCTOR", solo.id, {})

    admin_queue = await world.store.get_pending(AdminScope())
    clinic_queue = await world.store.get_pending(ClinicScope(clinic.id))

    assert [r.id for r in admin_queue] == [admin_only.id]
    assert [r.id for r in clinic_queue] == [routed.id]
    assert await world.store.get_in_scope(routed.id, AdminScope()) is None
    assert await world.store.get_clinic_request_by_id(admin_only.id, clinic.id) is None


async def test_clinic_view_drops_doctor_that_moved_clinic(world: OnboardingWorld) -> None:
    """A request stays tagged with its clinic but hides once the doctor moves away."""
    _, clinic_a = world.clinic("a@example.com")
    _, clinic_b = world.clinic("b@example.com")
    user, doctor = world.doctor(clinic_id=clinic_a.id)
    request = await world.store.submit(user.id, "DOCTOR", doctor.id, {}, clinic_id=clinic_a.id)

    await world.doctors.update_doctor(doctor.id, {"clinic_id": clinic_b.id})

    assert await world.store.get_pending(ClinicScope(clinic_a.id)) == []
    assert await world.store.get_clinic_request_by_id(request.id, clinic_a.id) is None
    assert await world.store.get_pending(ClinicScope(clinic_b.id)) == []


async def test_get_by_status_and_user(world: OnboardingWorld) -> None:
    user, doctor = world.doctor()
    request = await world.store.submit(user.id, "DOCTOR", doctor.id, {})
    assert await world.store.get_by_status("approved", AdminScope()) == []
    assert [r.id for r in await world.store.get_by_status(None, AdminScope())] == [request.id]
    assert [r.id for r in await world.store.get_by_user(user.id, "PENDING")] == [request.id]
    with pytest.raises(ValidationException):
        await world.store.get_by_status("WAITING", AdminScope())


async def test_latest_by_user_follows_updates(world: OnboardingWorld) -> None:
    user, doctor = world.doctor()
    _, clinic = world.clinic()
    older = await world.store.submit(user.id, "DOCTOR", doctor.id, {})
    newer = await world.store.submit(user.id, "DOCTOR", doctor.id, {}, clinic_id=clinic.id)
    assert (await world.store.get_latest_by_user(user.id)).id == newer.id
    await world.store.submit(user.id, "DOCTOR", doctor.id, {"again": True})
    assert (await world.store.get_latest_by_user(user.id)).id == older.id
    assert await world.store.get_latest_by_user("nobody") is None


async def test_belongs_to_clinic_requires_doctor_entity(world: OnboardingWorld) -> None:
    user, doctor = world.doctor()
    request = await world.store.submit(user.id, "DOCTOR", doctor.id, {})
    assert not belongs_to_clinic(request, "clinic-1")
