"""Domain value objects."""

from medonboard.domain.value_objects.approval_scope import (
    AdminScope,
    ApprovalScope,
    ClinicScope,
    validate_request_scope,
)

__all__ = ["AdminScope", "ApprovalScope", "ClinicScope", "validate_request_scope"]
