"""Shared cross-cutting utilities (telemetry, time, id generation)."""
