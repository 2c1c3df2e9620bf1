from __future__ import annotations

import uuid

from themecsv.identifiers import new_identifier


def test_new_identifier_is_uppercase_uuid() -> None:
    value = new_identifier()

    assert value == value.upper()
    assert str(uuid.UUID(value)).upper() == value


def test_new_identifier_is_fresh_each_call() -> None:
    assert new_identifier() != new_identifier()
