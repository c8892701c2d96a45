"""Operational CLI scripts (run with python -m scripts.<name>)."""
