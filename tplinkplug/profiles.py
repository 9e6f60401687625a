"""Hardware profile lookup for normalizing device fields."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from .const import HARDWARE_PROFILES
from .models import FieldMapping

_TABLE = MappingProxyType(
    {
        (hw_ver, section, raw_name): FieldMapping(name, factor)
        for hw_ver, sections in HARDWARE_PROFILES.items()
        for section, fields in sections.items()
        for raw_name, (name, factor) in fields.items()
    }
)


def lookup(hw_ver: str | None, section: tuple[str, str], raw_name: str) -> FieldMapping:
    """Return the mapping for a raw field, or an identity mapping if unknown."""
    return _TABLE.get((hw_ver, section, raw_name), FieldMapping(raw_name))


def normalize(
    hw_ver: str | None, section: tuple[str, str], raw_name: str, value: Any
) -> tuple[str, Any]:
    """Rename a raw field and scale its value for the given hardware version."""
    mapping = lookup(hw_ver, section, raw_name)
    if mapping.factor != 1 and isinstance(value, (int, float)):
        value = value * mapping.factor
    return mapping.name, value
