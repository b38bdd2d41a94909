"""Identifier helpers."""

from uuid import uuid4


def new_id() -> str:
    """Return a new opaque 32-character record id."""
    return uuid4().hex
