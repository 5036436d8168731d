"""Roll sized actuators and per-valve accessories into a cost breakdown."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..catalog.base import Accessory, ActuatorRecord
from .matcher import MatchResult, MatchSuccess


@dataclass(frozen=True, slots=True)
class ActuatorLine:
    """All valves that resolved to the same actuator."""

    record: ActuatorRecord
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.record.price * self.quantity


@dataclass(frozen=True, slots=True)
class AccessoryLine:
    """One selected accessory, fitted to every valid valve."""

    accessory: Accessory
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.accessory.price * self.quantity


@dataclass(frozen=True, slots=True)
class PricingSummary:
    """Cost breakdown for a sizing batch.

    Attributes:
        actuator_subtotal: Sum of unit price times quantity over the
            actuators selected for successfully sized valves.
        accessory_subtotal: Selected accessory prices times the number of
            valid valve inputs.
        grand_total: ``actuator_subtotal + accessory_subtotal``.
        actuator_lines: Per-record grouping behind the actuator subtotal, in
            order of first selection.
        accessory_lines: Per-accessory lines behind the accessory subtotal.
    """

    actuator_subtotal: float
    accessory_subtotal: float
    grand_total: float
    actuator_lines: tuple[ActuatorLine, ...] = ()
    accessory_lines: tuple[AccessoryLine, ...] = ()


def aggregate_pricing(
    results: Iterable[MatchResult],
    selected_accessories: Iterable[Accessory],
    valid_input_count: int,
) -> PricingSummary:
    """Price the actuators in ``results`` plus accessories for each valid valve.

    Args:
        results: Match outcome per valve input; failures contribute nothing.
        selected_accessories: Accessories fitted to every valve.
        valid_input_count: Number of inputs that parsed as a positive torque,
            whether or not an actuator was found for them.

    Returns:
        PricingSummary: Subtotals, grand total and the itemised lines.

    Raises:
        ValueError: If ``valid_input_count`` is negative.
    """
    count = int(valid_input_count)
    if count < 0:
        raise ValueError(f"valid_input_count must be non-negative, got {valid_input_count}")

    # Keyed by the record itself: ids can repeat across catalog snapshots.
    counts: dict[ActuatorRecord, int] = {}
    for result in results:
        if isinstance(result, MatchSuccess):
            counts[result.record] = counts.get(result.record, 0) + 1
    actuator_lines = tuple(
        ActuatorLine(record=record, quantity=quantity) for record, quantity in counts.items()
    )
    accessory_lines = tuple(
        AccessoryLine(accessory=accessory, quantity=count) for accessory in selected_accessories
    )

    actuator_subtotal = sum((line.subtotal for line in actuator_lines), 0.0)
    accessory_subtotal = sum((line.subtotal for line in accessory_lines), 0.0)
    return PricingSummary(
        actuator_subtotal=actuator_subtotal,
        accessory_subtotal=accessory_subtotal,
        grand_total=actuator_subtotal + accessory_subtotal,
        actuator_lines=actuator_lines,
        accessory_lines=accessory_lines,
    )
