"""Visibility scopes for approval requests.

A request with clinic_id set belongs only to that clinic's queue; a request
with clinic_id NULL belongs only to the admin queue. Every store query takes
one of these scopes.
"""

from dataclasses import dataclass

from medonboard.domain.enums import RequestType
from medonboard.domain.exceptions import ValidationException


@dataclass(frozen=True)
class AdminScope:
    """Admin review queue: clinic_id IS NULL."""


@dataclass(frozen=True)
class ClinicScope:
    """A clinic's review queue: request_type DOCTOR and clinic_id == clinic_id."""

    clinic_id: str

    def __post_init__(self) -> None:
        if not self.clinic_id:
            raise ValidationException("clinic_id is required for clinic scope", field="clinic_id")


type ApprovalScope = AdminScope | ClinicScope


def validate_request_scope(request_type: RequestType, clinic_id: str | None) -> None:
    """Enforce that only DOCTOR requests may carry a clinic_id.

    Raises:
        ValidationException: If a CLINIC request is given a clinic_id.
    """
    if clinic_id is not None and request_type is not RequestType.DOCTOR:
        raise ValidationException(
            "Only DOCTOR approval requests can be clinic-scoped",
            field="clinic_id",
        )
