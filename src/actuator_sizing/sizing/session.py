"""Size a batch of valves against one catalog snapshot and price the result."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from ..catalog.base import Accessory, ActuatorCatalog, ActuatorRecord, TorqueProfile
from ..config.models import SizingSettings
from ..config.policy import TIERED_POLICY, SafetyPolicy
from .matcher import (
    INVALID_INPUT_MESSAGE,
    FailureReason,
    MatchFailure,
    MatchResult,
    MatchSuccess,
    match_actuator,
)
from .pricing import PricingSummary, aggregate_pricing
from .torques import InvalidTorqueError, derive_required_torques, parse_torque

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ValveSizing:
    """Outcome for a single valve input.

    Attributes:
        index: Position of the input in the caller's sequence.
        raw_input: Value exactly as supplied.
        bto: Parsed break-to-open torque, or ``None`` when the input was invalid.
        required: Derived torque requirement, or ``None`` when invalid.
        result: Match outcome for the valve.
    """

    index: int
    raw_input: object
    bto: float | None
    required: TorqueProfile | None
    result: MatchResult

    @property
    def valid(self) -> bool:
        return self.bto is not None

    @property
    def success(self) -> bool:
        return isinstance(self.result, MatchSuccess)


@dataclass(frozen=True, slots=True)
class SizingReport:
    """Everything computed for one batch request."""

    valves: tuple[ValveSizing, ...]
    pricing: PricingSummary
    accessories: tuple[Accessory, ...]
    pressure_level: str | None
    policy: str
    currency: str

    @property
    def results(self) -> tuple[MatchResult, ...]:
        return tuple(valve.result for valve in self.valves)

    @property
    def valid_input_count(self) -> int:
        return sum(1 for valve in self.valves if valve.valid)

    @property
    def matched_count(self) -> int:
        return sum(1 for valve in self.valves if valve.success)


def size_valve(
    value: object,
    catalog: Iterable[ActuatorRecord],
    *,
    pressure_level: object | None = None,
    policy: SafetyPolicy = TIERED_POLICY,
    index: int = 0,
) -> ValveSizing:
    """Derive the requirement for one input torque and match it.

    Invalid inputs are reported in the returned :class:`ValveSizing` rather
    than raised so a batch keeps going.
    """
    try:
        bto = parse_torque(value)
        required = derive_required_torques(bto)
    except InvalidTorqueError:
        LOGGER.debug("Input #%d (%r) is not a valid BTO", index, value)
        failure = MatchFailure(FailureReason.INVALID_INPUT, INVALID_INPUT_MESSAGE)
        return ValveSizing(index=index, raw_input=value, bto=None, required=None, result=failure)
    result = match_actuator(required, catalog, pressure_level, policy=policy)
    return ValveSizing(index=index, raw_input=value, bto=bto, required=required, result=result)


def size_valves(
    torques: Sequence[object],
    catalog: ActuatorCatalog,
    *,
    pressure_level: object | None = None,
    accessory_ids: Iterable[str] = (),
    settings: SizingSettings | None = None,
) -> SizingReport:
    """Size every valve in ``torques`` and price the selection.

    Blank entries (``None`` or whitespace-only strings) are ignored. Every
    other entry yields a :class:`ValveSizing`, including invalid ones.

    Args:
        torques: Break-to-open torque per valve, as numbers or numeric text.
        catalog: Catalog snapshot to select from.
        pressure_level: Supply pressure level; defaults to the settings value.
        accessory_ids: Accessories fitted to every valve.
        settings: Policy and limits; package defaults when omitted.

    Returns:
        SizingReport: Per-valve outcomes and the pricing breakdown.

    Raises:
        ValueError: If more than ``settings.max_inputs`` torques are supplied
            or the pressure level is not selectable.
        CatalogError: If an accessory id is not in the catalog.
    """
    settings = settings or SizingSettings()
    entries = [(index, value) for index, value in enumerate(torques) if not _is_blank(value)]
    if len(entries) > settings.max_inputs:
        raise ValueError(
            f"At most {settings.max_inputs} valve torques can be sized at once, got {len(entries)}"
        )
    level = settings.resolve_pressure_level(pressure_level)
    accessories = tuple(
        catalog.accessory(accessory_id) for accessory_id in dict.fromkeys(accessory_ids)
    )

    records = tuple(catalog)
    valves = tuple(
        size_valve(value, records, pressure_level=level, policy=settings.policy, index=index)
        for index, value in entries
    )
    valid_count = sum(1 for valve in valves if valve.valid)
    pricing = aggregate_pricing((valve.result for valve in valves), accessories, valid_count)
    report = SizingReport(
        valves=valves,
        pricing=pricing,
        accessories=accessories,
        pressure_level=level,
        policy=settings.policy.name,
        currency=settings.currency,
    )
    LOGGER.info(
        "Sized %d valve(s): %d matched, grand total %.2f %s",
        len(valves),
        report.matched_count,
        pricing.grand_total,
        settings.currency,
    )
    return report


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()
