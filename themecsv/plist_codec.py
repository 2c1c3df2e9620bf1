"""XML property-list encoding for theme and bundle descriptors."""

from __future__ import annotations

import plistlib
from typing import Any, Mapping, Union

from .document import ThemeDocument

Encodable = Union[ThemeDocument, Mapping[str, Any]]


def encode(document: Encodable) -> bytes:
    """Serialize ``document`` as an XML property list."""

    payload = (
        document.to_plist()
        if isinstance(document, ThemeDocument)
        else dict(document)
    )
    try:
        return plistlib.dumps(payload, fmt=plistlib.FMT_XML)
    except (TypeError, OverflowError) as exc:
        raise ValueError(f"Failed to encode plist: {exc}") from exc


def decode(data: bytes) -> dict[str, Any]:
    """Parse an XML or binary property list with a mapping at the top."""

    try:
        payload = plistlib.loads(data)
    except Exception as exc:
        raise ValueError(f"Failed to parse plist: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Top-level plist value must be a mapping")
    return payload
