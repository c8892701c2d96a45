"""Onboarding email templates: template key → subject/body (Jinja).

Context keys used by the defaults: name, email, login_link, reason,
clinic_name, applicant_name, applicant_email, renewal_date, role_name.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, Template, TemplateError

from medonboard.domain.exceptions import DependencyFailure

_SIGNOFF = "\n\nThe MedOnboard Team"

_DEFAULT_TEMPLATES: dict[str, tuple[str, str]] = {
    "patient.welcome": (
        "Welcome to MedOnboard, your digital health partner",
        "Dear {{ name | default('there', true) }},\n\n"
        "Your patient account is ready. Sign in to book appointments and manage "
        "your health records: {{ login_link }}" + _SIGNOFF,
    ),
    "generic.welcome": (
        "Welcome to MedOnboard, your digital health partner",
        "Hello {{ name | default('there', true) }},\n\n"
        "Your account is ready. Sign in to continue setting up your profile: "
        "{{ login_link }}" + _SIGNOFF,
    ),
    "practitioner.application_received": (
        "We've received your practitioner application",
        "Dear {{ name | default('Doctor', true) }},\n\n"
        "Thank you for submitting your details. Our team will review your "
        "application and let you know once a decision has been made."
        "{% if clinic_name %}\n\nYour application was sent to {{ clinic_name }}.{% endif %}"
        + _SIGNOFF,
    ),
    "practitioner.account_approved": (
        "Your MedOnboard practitioner account has been approved",
        "Dear {{ name | default('Doctor', true) }},\n\n"
        "Congratulations! Your account has been approved. You can now log in and "
        "start accepting appointments: {{ login_link }}"
        "{% if renewal_date %}\n\nYour documents are due for renewal on "
        "{{ renewal_date }}.{% endif %}" + _SIGNOFF,
    ),
    "practitioner.account_rejected": (
        "Update on your MedOnboard practitioner application",
        "Dear {{ name | default('Doctor', true) }},\n\n"
        "Unfortunately your application was not approved.\n\n"
        "Reason: {{ reason }}\n\n"
        "You can update your details and resubmit at {{ login_link }}" + _SIGNOFF,
    ),
    "practitioner.profile_setup_invitation": (
        "Welcome to MedOnboard: complete your doctor profile",
        "Dear {{ name | default('Doctor', true) }},\n\n"
        "{{ clinic_name | default('Your clinic', true) }} has added you as a "
        "practitioner. Sign in with {{ email }} to complete your profile: "
        "{{ login_link }}" + _SIGNOFF,
    ),
    "clinic.application_received": (
        "We've received your clinic registration",
        "Dear {{ name | default('Clinic team', true) }},\n\n"
        "Thank you for registering your clinic. Our team will review your "
        "details and get back to you shortly." + _SIGNOFF,
    ),
    "clinic.account_approved": (
        "Your clinic account has been approved",
        "Dear {{ name | default('Clinic team', true) }},\n\n"
        "Your clinic account has been approved. Sign in to manage your "
        "practitioners: {{ login_link }}" + _SIGNOFF,
    ),
    "clinic.account_rejected": (
        "Update on your clinic registration",
        "Dear {{ name | default('Clinic team', true) }},\n\n"
        "Unfortunately your clinic registration was not approved.\n\n"
        "Reason: {{ reason }}\n\n"
        "You can update your details and resubmit at {{ login_link }}" + _SIGNOFF,
    ),
    "admin.new_practitioner": (
        "New practitioner application submitted",
        "A practitioner application needs review.\n\n"
        "Name: {{ applicant_name | default('N/A', true) }}\n"
        "Email: {{ applicant_email | default('N/A', true) }}\n"
        "{% if clinic_name %}Clinic: {{ clinic_name }}\n{% endif %}"
        "\nReview it at {{ login_link }}",
    ),
    "clinic.new_practitioner_request": (
        "A practitioner at your clinic is awaiting your approval",
        "Dear {{ clinic_name | default('Clinic team', true) }},\n\n"
        "{{ applicant_name | default('One of your practitioners', true) }} "
        "({{ applicant_email | default('no email', true) }}) submitted their "
        "profile for your review.\n\n"
        "Approve or reject the request at {{ login_link }}" + _SIGNOFF,
    ),
    "admin.team_member_credentials": (
        "You've been added to the MedOnboard admin team",
        "Dear {{ name | default('there', true) }},\n\n"
        "An administrator added you to the team as "
        "{{ role_name | default('a team member', true) }}.\n\n"
        "Sign in with {{ email }} at {{ login_link }}" + _SIGNOFF,
    ),
    "admin.new_clinic": (
        "New clinic application pending approval",
        "A clinic registration needs review.\n\n"
        "Clinic: {{ clinic_name | default('N/A', true) }}\n"
        "Email: {{ applicant_email | default('N/A', true) }}\n"
        "\nReview it at {{ login_link }}",
    ),
    "admin.clinic_documents_updated": (
        "Clinic documents updated",
        "{{ clinic_name | default('A clinic', true) }} uploaded new regulatory "
        "documents.\n\nReview them at {{ login_link }}",
    ),
}


class EmailTemplateRenderer:
    """Renders subject and body for a template key."""

    def __init__(self, templates: dict[str, tuple[str, str]] | None = None) -> None:
        self._env = Environment(autoescape=False, keep_trailing_newline=False)
        self._compiled: dict[str, tuple[Template, Template]] = {
            key: (self._env.from_string(subject), self._env.from_string(body))
            for key, (subject, body) in (templates or _DEFAULT_TEMPLATES).items()
        }

    @property
    def template_keys(self) -> frozenset[str]:
        return frozenset(self._compiled)

    def render(self, template_key: str, context: dict[str, Any]) -> tuple[str, str]:
        """Render (subject, body). Raises DependencyFailure for unknown keys or render errors."""
        compiled = self._compiled.get(template_key)
        if compiled is None:
            raise DependencyFailure("templates", f"Unknown email template: {template_key}")
        subject_tpl, body_tpl = compiled
        try:
            return subject_tpl.render(**context), body_tpl.render(**context)
        except TemplateError as e:
            raise DependencyFailure(
                "templates", f"Failed to render {template_key}: {e}"
            ) from e
