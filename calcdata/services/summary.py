from __future__ import annotations

from ..models.extraction import ExtractionResult

"""SUMMARY line rendering for an extraction run."""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very short runs
        return f"{seconds:.6f}".rstrip('0').rstrip('.')
    return f"{seconds:.3f}".rstrip('0').rstrip('.')


def render_summary_line(
    source_name: str,
    result: ExtractionResult,
    unresolved_roles: int,
    outputs: int,
    elapsed_seconds: float,
) -> str:
    """Render the SUMMARY line for one run.

    Examples:
        >>> from calcdata.models.extraction import PricingMaps
        >>> r = ExtractionResult(settings={"VAT": "23"}, pricing=PricingMaps(pv_power_price_d={"5kW": 1000}))
        >>> render_summary_line("prices.xlsx", r, unresolved_roles=4, outputs=2, elapsed_seconds=0.5)
        'SUMMARY source=prices.xlsx settings=1 pv_d=1 pv_e=0 inverters=0 batteries=0 unresolved_roles=4 outputs=2 elapsed_sec=0.5'
    """
    p = result.pricing
    return (
        f"SUMMARY source={source_name} "
        f"settings={len(result.settings)} "
        f"pv_d={len(p.pv_power_price_d)} "
        f"pv_e={len(p.pv_power_price_e)} "
        f"inverters={len(p.inverter_map)} "
        f"batteries={len(p.battery_map)} "
        f"unresolved_roles={unresolved_roles} "
        f"outputs={outputs} "
        f"elapsed_sec={_format_seconds(elapsed_seconds)}"
    )
