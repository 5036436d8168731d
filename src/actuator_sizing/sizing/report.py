"""Tabular views of sizing results for display and CSV export.

Provides:
- results_frame: one row per valve input.
- analysis_frame: the six-position safety-factor table of a matched valve.
- pricing_frame: itemised actuator and accessory lines.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .matcher import MatchResult, MatchSuccess
from .pricing import PricingSummary
from .session import SizingReport, ValveSizing

LOGGER = logging.getLogger(__name__)

RESULT_COLUMNS = (
    "input",
    "bto_nm",
    "status",
    "model",
    "price",
    "tier",
    "min_safety_factor",
    "message",
)
ANALYSIS_COLUMNS = ("position", "required_nm", "actuator_nm", "safety_factor", "in_band")
PRICING_COLUMNS = ("kind", "id", "name", "unit_price", "quantity", "subtotal")


def results_frame(report: SizingReport) -> pd.DataFrame:
    """Summarise each valve of ``report`` in one row."""
    rows = []
    for valve in report.valves:
        result = valve.result
        row = {
            "input": valve.raw_input,
            "bto_nm": valve.bto,
            "status": "success" if isinstance(result, MatchSuccess) else "failed",
            "model": None,
            "price": None,
            "tier": None,
            "min_safety_factor": None,
            "message": None,
        }
        if isinstance(result, MatchSuccess):
            row.update(
                model=result.model,
                price=result.price,
                tier=result.tier,
                min_safety_factor=result.min_safety_factor,
            )
        else:
            row["message"] = result.message
        rows.append(row)
    return pd.DataFrame(rows, columns=list(RESULT_COLUMNS))


def analysis_frame(item: ValveSizing | MatchResult) -> pd.DataFrame:
    """Return the per-position analysis; empty for failed valves."""
    result = item.result if isinstance(item, ValveSizing) else item
    if not isinstance(result, MatchSuccess):
        return pd.DataFrame(columns=list(ANALYSIS_COLUMNS))
    rows = [
        {
            "position": row.position.value,
            "required_nm": row.required,
            "actuator_nm": row.actual,
            "safety_factor": row.safety_factor,
            "in_band": row.in_band,
        }
        for row in result.analysis
    ]
    return pd.DataFrame(rows, columns=list(ANALYSIS_COLUMNS))


def pricing_frame(summary: PricingSummary) -> pd.DataFrame:
    """Itemise actuator and accessory lines behind the totals."""
    rows = [
        {
            "kind": "actuator",
            "id": line.record.id,
            "name": line.record.model,
            "unit_price": line.record.price,
            "quantity": line.quantity,
            "subtotal": line.subtotal,
        }
        for line in summary.actuator_lines
    ]
    rows.extend(
        {
            "kind": "accessory",
            "id": line.accessory.id,
            "name": line.accessory.name,
            "unit_price": line.accessory.price,
            "quantity": line.quantity,
            "subtotal": line.subtotal,
        }
        for line in summary.accessory_lines
    )
    return pd.DataFrame(rows, columns=list(PRICING_COLUMNS))


def write_report_csv(report: SizingReport, path: str | Path) -> tuple[Path, Path]:
    """Write the results table to ``path`` and the pricing lines beside it.

    Returns:
        tuple[Path, Path]: The results CSV and the ``<stem>_pricing.csv`` file.
    """
    results_path = Path(path)
    results_path.parent.mkdir(parents=True, exist_ok=True)
    pricing_path = results_path.with_name(f"{results_path.stem}_pricing.csv")
    results_frame(report).to_csv(results_path, index=False)
    pricing_frame(report.pricing).to_csv(pricing_path, index=False)
    LOGGER.info("Wrote sizing results to %s and pricing to %s", results_path, pricing_path)
    return results_path, pricing_path


def format_report(report: SizingReport, *, details: bool = False) -> str:
    """Render ``report`` as plain-text tables."""
    lines = [
        f"Policy: {report.policy}    Pressure: {report.pressure_level or 'n/a'}",
        "",
        results_frame(report).to_string(index=False, na_rep="-"),
    ]
    if details:
        for valve in report.valves:
            if not valve.success:
                continue
            lines.extend(
                [
                    "",
                    f"Torque analysis for {valve.bto:g} Nm ({valve.result.model}):",  # type: ignore[union-attr]
                    analysis_frame(valve).to_string(index=False, float_format="{:.2f}".format),
                ]
            )
    pricing = report.pricing
    lines.append("")
    if pricing.actuator_lines or pricing.accessory_lines:
        lines.append(pricing_frame(pricing).to_string(index=False))
    lines.extend(
        [
            f"Actuators:   {pricing.actuator_subtotal:,.2f} {report.currency}",
            f"Accessories: {pricing.accessory_subtotal:,.2f} {report.currency}",
            f"Total:       {pricing.grand_total:,.2f} {report.currency}",
        ]
    )
    return "\n".join(lines)
