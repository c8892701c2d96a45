"""API tests for the doctor/clinic onboarding flow and adjudication endpoints."""

from datetime import timedelta

from httpx import AsyncClient

from medonboard.shared.utils.datetime import utc_now
from tests.fakes import OnboardingWorld, bearer


async def test_independent_doctor_submission_reaches_admin_queue(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    """Doctor submits, admin lists and approves; the doctor sees the decision."""
    admin = api_world.admin()
    doctor_user, _ = api_world.doctor()

    submitted = await client.put(
        "/api/v1/doctors/me/profile",
        json={"specialization": "Cardiology", "experience_years": 12},
        headers=bearer(doctor_user),
    )
    assert submitted.status_code == 200
    body = submitted.json()
    assert body["onboarding_stage"] == "DOCTOR_APPROVAL_PENDING"
    assert body["notification_target"] == "admin"
    assert body["profile"]["specialization"] == "Cardiology"
    request_id = body["request"]["id"]

    queue = await client.get("/api/v1/admin/approval-requests", headers=bearer(admin))
    assert [r["id"] for r in queue.json()] == [request_id]
    assert queue.json()[0]["entity"]["kind"] == "DOCTOR"

    approved = await client.post(
        f"/api/v1/admin/approval-requests/{request_id}/approve", headers=bearer(admin)
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    again = await client.post(
        f"/api/v1/admin/approval-requests/{request_id}/approve", headers=bearer(admin)
    )
    assert again.status_code == 404

    status = await client.get("/api/v1/users/me/request-status", headers=bearer(doctor_user))
    assert status.json()["status"] == "APPROVED"

    directory = await client.get("/api/v1/doctors/approved", headers=bearer(doctor_user))
    assert [d["user_id"] for d in directory.json()] == [doctor_user.id]


async def test_request_status_is_null_before_submission(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    doctor_user, _ = api_world.doctor()
    response = await client.get("/api/v1/users/me/request-status", headers=bearer(doctor_user))
    assert response.status_code == 200
    assert response.json() is None


async def test_admin_reject_requires_reason(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    admin = api_world.admin()
    clinic_user, _ = api_world.clinic()
    submitted = await client.put(
        "/api/v1/clinics/me/profile",
        json={"name": "Harbor Health", "phone": "+1-555-0100"},
        headers=bearer(clinic_user),
    )
    request_id = submitted.json()["request"]["id"]
    assert submitted.json()["request"]["request_type"] == "CLINIC"

    blank = await client.post(
        f"/api/v1/admin/approval-requests/{request_id}/reject",
        json={"rejection_reason": "  "},
        headers=bearer(admin),
    )
    assert blank.status_code == 400

    rejected = await client.post(
        f"/api/v1/admin/approval-requests/{request_id}/reject",
        json={"rejection_reason": "Registration number missing"},
        headers=bearer(admin),
    )
    assert rejected.status_code == 200
    assert rejected.json()["rejection_reason"] == "Registration number missing"
    assert api_world.stage_of(clinic_user.id) == "REJECTED"


async def test_doctor_submission_from_wrong_stage_is_400(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    doctor_user, _ = api_world.doctor(stage="clinic-detail")
    response = await client.put(
        "/api/v1/doctors/me/profile", json={}, headers=bearer(doctor_user)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_STAGE_TRANSITION"


async def test_doctor_routes_require_doctor_role(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    clinic_user, _ = api_world.clinic()
    response = await client.get("/api/v1/doctors/me", headers=bearer(clinic_user))
    assert response.status_code == 403


async def test_clinic_managed_doctor_flow(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    """Clinic invites a doctor, the doctor submits, the clinic approves with renewal."""
    clinic_user, clinic = api_world.clinic("owner@clinic.example.com")

    created = await client.post(
        "/api/v1/clinics/me/doctors",
        json={"email": "invitee@example.com", "name": "Dr. Invitee", "license_number": "LIC-7"},
        headers=bearer(clinic_user),
    )
    assert created.status_code == 201
    assert created.json()["clinic_id"] == clinic.id
    invitee = await api_world.users.get_by_email("invitee@example.com")
    assert invitee.onboarding_stage == "doctor-clinic-detail"

    duplicate = await client.post(
        "/api/v1/clinics/me/doctors",
        json={"email": "INVITEE@example.com", "name": "Again"},
        headers=bearer(clinic_user),
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "EMAIL_ALREADY_EXISTS"

    submitted = await client.put(
        "/api/v1/doctors/me/documents",
        json={"documents": {"license": "lic.pdf"}},
        headers=bearer(invitee),
    )
    assert submitted.json()["notification_target"] == "clinic"
    request_id = submitted.json()["request"]["id"]

    admin_view = await client.get(
        f"/api/v1/admin/approval-requests/{request_id}",
        headers=bearer(api_world.admin()),
    )
    assert admin_view.status_code == 404

    queue = await client.get(
        "/api/v1/clinics/me/requests", params={"status": "PENDING"}, headers=bearer(clinic_user)
    )
    assert [r["id"] for r in queue.json()] == [request_id]

    past = await client.post(
        f"/api/v1/clinics/me/requests/{request_id}/approve",
        json={"renewal_date": (utc_now() - timedelta(days=1)).isoformat()},
        headers=bearer(clinic_user),
    )
    assert past.status_code == 400

    approved = await client.post(
        f"/api/v1/clinics/me/requests/{request_id}/approve",
        json={"renewal_date": (utc_now() + timedelta(days=365)).isoformat()},
        headers=bearer(clinic_user),
    )
    assert approved.status_code == 200
    assert approved.json()["renewal_date"] is not None
    assert api_world.stage_of(invitee.id) == "APPROVED_BY_CLINIC"


async def test_other_clinic_cannot_see_or_decide(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    _, clinic_a = api_world.clinic("a@clinic.example.com")
    other_user, _ = api_world.clinic("b@clinic.example.com")
    doctor_user, _ = api_world.doctor(stage="doctor-clinic-detail", clinic_id=clinic_a.id)
    submitted = await client.put(
        "/api/v1/doctors/me/profile", json={}, headers=bearer(doctor_user)
    )
    request_id = submitted.json()["request"]["id"]

    view = await client.get(
        f"/api/v1/clinics/me/requests/{request_id}", headers=bearer(other_user)
    )
    decide = await client.post(
        f"/api/v1/clinics/me/requests/{request_id}/reject",
        json={"rejection_reason": "not ours"},
        headers=bearer(other_user),
    )
    assert view.status_code == 404
    assert decide.status_code == 404
    assert api_world.stage_of(doctor_user.id) == "CLINIC_APPROVAL_PENDING"


async def test_clinic_documents_do_not_open_request(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    api_world.admin()
    clinic_user, _ = api_world.clinic(stage="APPROVED_BY_ADMIN")
    response = await client.put(
        "/api/v1/clinics/me/documents",
        json={"documents": {"permit": "permit.pdf"}},
        headers=bearer(clinic_user),
    )
    assert response.status_code == 200
    assert response.json()["request"] is None
    assert response.json()["onboarding_stage"] == "APPROVED_BY_ADMIN"
    assert api_world.sender.recipients() == ["admin@example.com"]


async def test_doctor_pending_in_both_queues_is_decided_twice(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    """Clinic approval of the profile does not block the admin decision on documents."""
    admin = api_world.admin()
    clinic_user, clinic = api_world.clinic("owner@clinic.example.com")
    doctor_user, _ = api_world.doctor(stage="doctor-detail", clinic_id=clinic.id)

    documents = await client.put(
        "/api/v1/doctors/me/documents",
        json={"documents": {"license": "lic.pdf"}},
        headers=bearer(doctor_user),
    )
    profile = await client.put(
        "/api/v1/doctors/me/profile", json={}, headers=bearer(doctor_user)
    )
    admin_request = documents.json()["request"]["id"]
    clinic_request = profile.json()["request"]["id"]
    assert profile.json()["notification_target"] == "clinic"

    by_clinic = await client.post(
        f"/api/v1/clinics/me/requests/{clinic_request}/approve", headers=bearer(clinic_user)
    )
    by_admin = await client.post(
        f"/api/v1/admin/approval-requests/{admin_request}/approve", headers=bearer(admin)
    )
    assert by_clinic.status_code == 200
    assert by_admin.status_code == 200
    assert api_world.stage_of(doctor_user.id) == "APPROVED_BY_ADMIN"

    history = await client.get("/api/v1/doctors/me/requests", headers=bearer(doctor_user))
    assert {r["id"]: r["status"] for r in history.json()} == {
        admin_request: "APPROVED",
        clinic_request: "APPROVED",
    }
    pending = await client.get(
        "/api/v1/doctors/me/requests", params={"status": "PENDING"}, headers=bearer(doctor_user)
    )
    assert pending.json() == []


async def test_own_request_detail_is_private(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    doctor_user, _ = api_world.doctor()
    other_user, _ = api_world.doctor("other@example.com")
    submitted = await client.put(
        "/api/v1/doctors/me/profile", json={}, headers=bearer(doctor_user)
    )
    request_id = submitted.json()["request"]["id"]

    mine = await client.get(
        f"/api/v1/users/me/requests/{request_id}", headers=bearer(doctor_user)
    )
    theirs = await client.get(
        f"/api/v1/users/me/requests/{request_id}", headers=bearer(other_user)
    )
    assert mine.status_code == 200
    assert mine.json()["entity"]["kind"] == "DOCTOR"
    assert theirs.status_code == 404


async def test_clinic_doctor_directory(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    clinic_user, clinic = api_world.clinic("owner@clinic.example.com")
    _, approved = api_world.doctor(stage="APPROVED_BY_CLINIC", clinic_id=clinic.id)
    _, pending = api_world.doctor(
        "pending@example.com", stage="CLINIC_APPROVAL_PENDING", clinic_id=clinic.id
    )

    listed = await client.get("/api/v1/clinics/me/doctors", headers=bearer(clinic_user))
    detail = await client.get(
        f"/api/v1/clinics/me/doctors/{approved.id}", headers=bearer(clinic_user)
    )
    hidden = await client.get(
        f"/api/v1/clinics/me/doctors/{pending.id}", headers=bearer(clinic_user)
    )

    assert [d["id"] for d in listed.json()] == [approved.id]
    assert detail.json()["user"]["email"] == "doctor@example.com"
    assert hidden.status_code == 404


async def test_clinic_submission_history(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    clinic_user, _ = api_world.clinic()
    submitted = await client.put(
        "/api/v1/clinics/me/profile", json={"name": "Harbor Health"}, headers=bearer(clinic_user)
    )
    history = await client.get("/api/v1/clinics/me/submissions", headers=bearer(clinic_user))
    assert [r["id"] for r in history.json()] == [submitted.json()["request"]["id"]]
    assert history.json()[0]["entity"]["kind"] == "CLINIC"

    invalid = await client.get(
        "/api/v1/clinics/me/submissions", params={"status": "LOST"}, headers=bearer(clinic_user)
    )
    assert invalid.status_code == 400


async def test_patient_profile_completion(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    patient = api_world.users.add("pat@example.com", role="PATIENT", stage="patient-detail")

    missing = await client.get("/api/v1/patients/me", headers=bearer(patient))
    assert missing.status_code == 404

    saved = await client.put(
        "/api/v1/patients/me/profile",
        json={
            "date_of_birth": "1990-04-12",
            "gender": "male",
            "phone_code": "+256",
            "phone_number": "700123456",
            "street_address": "Plot 4 Kampala Rd",
            "city": "Kampala",
            "country": "Uganda",
        },
        headers=bearer(patient),
    )
    assert saved.status_code == 200
    body = saved.json()
    assert body["onboarding_stage"] == "PATIENT_PROFILE_COMPLETED"
    assert body["profile"]["phone_number"] == "+256 700123456"
    assert body["profile"]["phone_code"] == "+256"
    assert body["profile"]["date_of_birth"] == "1990-04-12"

    profile = await client.get("/api/v1/patients/me", headers=bearer(patient))
    assert profile.json()["city"] == "Kampala"


async def test_patient_routes_require_patient_role(
    client: AsyncClient, api_world: OnboardingWorld
) -> None:
    doctor_user, _ = api_world.doctor()
    response = await client.put(
        "/api/v1/patients/me/profile", json={"city": "Kampala"}, headers=bearer(doctor_user)
    )
    assert response.status_code == 403
    bad_date = await client.put(
        "/api/v1/patients/me/profile",
        json={"date_of_birth": "not-a-date"},
        headers=bearer(api_world.users.add("p@example.com", role="PATIENT")),
    )
    assert bad_date.status_code == 422
