"""Domain layer: enums, exceptions, permission model and onboarding transitions."""
