from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

"""Extraction domain models for the calculator pricing extractor.

Column roles, the role assignment produced once per run, the four pricing maps
and the final artifact structure. Everything here is frozen: each run builds
these once and hands them to the serializer untouched.
"""

__all__ = [
    "CellValue",
    "Grid",
    "Role",
    "ResolvedColumn",
    "ColumnRoleAssignment",
    "PricingMaps",
    "ExtractionResult",
]

CellValue = Union[str, int, float, bool, datetime]
Grid = list[list[Any]]


class Role(str, Enum):
    """Semantic purpose of a pricing sheet column.

    Values double as the keys used in config/extract.yml.
    """
    POWER_KEY = "power_key"
    PRICE_VARIANT_D = "price_variant_d"
    PRICE_VARIANT_E = "price_variant_e"
    INVERTER_KEY = "inverter_key"
    INVERTER_PRICE = "inverter_price"
    BATTERY_KEY = "battery_key"
    BATTERY_PRICE = "battery_price"


@dataclass(frozen=True)
class ResolvedColumn:
    """A header column chosen for a role."""
    index: int  # 0-based column index
    label: str  # trimmed header text (may be "" for positional fallbacks)
    via_fallback: bool = False


@dataclass(frozen=True)
class ColumnRoleAssignment:
    """Role -> column mapping for one pricing sheet (None = unresolved)."""
    columns: dict[Role, ResolvedColumn | None] = field(default_factory=dict)

    def get(self, role: Role) -> ResolvedColumn | None:
        return self.columns.get(role)

    def index_of(self, role: Role) -> int | None:
        resolved = self.columns.get(role)
        return resolved.index if resolved is not None else None

    @property
    def unresolved(self) -> list[Role]:
        return [role for role in Role if self.columns.get(role) is None]

    def describe(self) -> str:
        parts = []
        for role in Role:
            resolved = self.columns.get(role)
            if resolved is None:
                parts.append(f"{role.value}=none")
            else:
                how = "fallback" if resolved.via_fallback else "header"
                parts.append(f"{role.value}={resolved.index}:{resolved.label!r}({how})")
        return " ".join(parts)


@dataclass(frozen=True)
class PricingMaps:
    """Label -> raw price lookups built from the pricing sheet.

    Each map is stored as a read-only copy of what was passed in.
    """
    pv_power_price_d: Mapping[str, Any] = field(default_factory=dict)
    pv_power_price_e: Mapping[str, Any] = field(default_factory=dict)
    inverter_map: Mapping[str, Any] = field(default_factory=dict)
    battery_map: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, MappingProxyType(dict(getattr(self, f.name))))


@dataclass(frozen=True)
class ExtractionResult:
    """The artifact handed to the downstream calculator.

    `headers` keeps the original pricing header labels in column order for
    traceability.
    """
    settings: dict[str, Any]
    pricing: PricingMaps
    headers: list[str] = field(default_factory=list)
