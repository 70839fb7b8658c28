from __future__ import annotations

from collections.abc import Callable
from functools import reduce
from typing import Any, NamedTuple

from ..excel.reader import cell_at, cell_to_label, is_blank
from ..models.extraction import ColumnRoleAssignment, Grid, PricingMaps, Role

"""Pricing map construction.

One pass over the body rows of the pricing grid (every row after row 0, the
header). Three label families are read independently from each row:

    power tier  -> pvPowerPriceD (price_variant_d) and pvPowerPriceE (price_variant_e)
    inverter    -> inverterMap
    battery     -> batteryMap

so a single row may feed several maps at once. An entry is written only when
the trimmed label and the price cell are both non-blank. Prices are kept as
raw cell values. Later rows overwrite earlier rows carrying the same label
(last-write-wins), matching the settings table policy.

Cells past the end of a short row are blank, which skips the row for that
family rather than flagging it.
"""

__all__ = [
    "build_pricing_maps",
]

_Acc = dict[str, dict[str, Any]]


class _Target(NamedTuple):
    field: str
    key_role: Role
    price_role: Role


_TARGETS: tuple[_Target, ...] = (
    _Target("pv_power_price_d", Role.POWER_KEY, Role.PRICE_VARIANT_D),
    _Target("pv_power_price_e", Role.POWER_KEY, Role.PRICE_VARIANT_E),
    _Target("inverter_map", Role.INVERTER_KEY, Role.INVERTER_PRICE),
    _Target("battery_map", Role.BATTERY_KEY, Role.BATTERY_PRICE),
)


def _fold_row(roles: ColumnRoleAssignment) -> Callable[[_Acc, list[Any]], _Acc]:
    indices = {
        t.field: (roles.index_of(t.key_role), roles.index_of(t.price_role)) for t in _TARGETS
    }

    def step(acc: _Acc, row: list[Any]) -> _Acc:
        for name, (key_idx, price_idx) in indices.items():
            if key_idx is None or price_idx is None:
                continue
            label = cell_to_label(cell_at(row, key_idx))
            if not label:
                continue
            price = cell_at(row, price_idx)
            if is_blank(price):
                continue
            acc[name][label] = price
        return acc

    return step


def build_pricing_maps(grid: Grid, roles: ColumnRoleAssignment) -> PricingMaps:
    """Fold the body rows of `grid` into the four pricing maps."""
    initial: _Acc = {t.field: {} for t in _TARGETS}
    maps = reduce(_fold_row(roles), grid[1:], initial)
    return PricingMaps(**maps)
