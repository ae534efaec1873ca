"""Partial-update helper shared by the CRUD services."""

from __future__ import annotations

from typing import Any


def apply_changes(entity: Any, changes: dict[str, Any], allowed: frozenset[str]) -> list[str]:
    """Copy allowed keys from *changes* onto *entity*; return the names applied.

    Keys absent from *changes* are left untouched. An explicit ``None`` clears
    the field.
    """
    applied = []
    for name, value in changes.items():
        if name in allowed:
            setattr(entity, name, value)
            applied.append(name)
    return applied
