# core/updates.py
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping


def apply_updates(instance: Any, updates: Mapping[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    """
    Apply a field update set to a model instance.

    Only keys present in `updates` and listed in `allowed` are written; every
    other attribute is left untouched. Returns the changes that were actually
    applied (field -> new value), which callers use for audit entries.
    """
    allowed = set(allowed)
    unknown = set(updates) - allowed
    if unknown:
        raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")

    changes: Dict[str, Any] = {}
    for field, value in updates.items():
        if getattr(instance, field) != value:
            setattr(instance, field, value)
            changes[field] = value

    if changes and hasattr(instance, "updated_at"):
        instance.updated_at = datetime.utcnow()
    return changes
