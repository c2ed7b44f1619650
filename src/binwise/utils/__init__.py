"""Shared helpers for binwise."""
