"""Identifier generation for theme and bundle descriptors."""

from __future__ import annotations

import uuid


def new_identifier() -> str:
    """Return a fresh upper-case UUID string, as ``uuidgen`` prints it."""

    return str(uuid.uuid4()).upper()
