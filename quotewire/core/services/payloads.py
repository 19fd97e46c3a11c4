"""Helpers for the loosely shaped JSON bodies the backend returns."""

from collections.abc import Mapping
from typing import Any

from quotewire.core.entities.common import WireModel


def unwrap_list(payload: Any, *keys: str) -> list[Any]:
    """
    Extract a list from a bare array or from ``{key: [...]}``.

    Keys are tried in order; anything unrecognized yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


def unwrap_object(payload: Any, *keys: str) -> Any:
    """Extract an object from ``{key: {...}}`` or return payload as is."""
    if isinstance(payload, Mapping):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, Mapping):
                return value
    return payload


def to_payload(data: WireModel | Mapping[str, Any], exclude: set[str] | None = None) -> dict[str, Any]:
    """Request body from an entity (camelCase, unset dropped) or a raw dict."""
    if isinstance(data, WireModel):
        return data.to_wire(exclude=exclude)
    return dict(data)
