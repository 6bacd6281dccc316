"""Logging setup and HTTP diagnostics."""
