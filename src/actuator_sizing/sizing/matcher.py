"""Select the cheapest catalog actuator that satisfies a safety-factor policy."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import ClassVar, Iterable, Union

import numpy as np

from ..catalog.base import (
    POSITIONS,
    ActuatorRecord,
    TorquePosition,
    TorqueProfile,
    id_sort_key,
    normalise_pressure_level,
)
from ..config.policy import TIERED_POLICY, SafetyPolicy, SafetyTier

LOGGER = logging.getLogger(__name__)

NO_SUITABLE_ACTUATOR_MESSAGE = "No suitable actuator found"
INVALID_INPUT_MESSAGE = "Invalid BTO value"


class FailureReason(str, enum.Enum):
    """Why a valve could not be sized."""

    INVALID_INPUT = "invalid_input"
    NO_SUITABLE_ACTUATOR = "no_suitable_actuator"


@dataclass(frozen=True, slots=True)
class AnalysisRow:
    """Required versus delivered torque at one stroke position.

    Attributes:
        position: Stroke position the row describes.
        required: Torque the valve needs at this position in Nm.
        actual: Torque the selected actuator delivers in Nm.
        safety_factor: ``actual / required``.
        in_band: Whether ``safety_factor`` lies inside the tier that selected
            the actuator.
    """

    position: TorquePosition
    required: float
    actual: float
    safety_factor: float
    in_band: bool


@dataclass(frozen=True, slots=True)
class MatchSuccess:
    """Actuator chosen for a valve, with the per-position audit trail."""

    record: ActuatorRecord
    analysis: tuple[AnalysisRow, ...]
    tier: str
    pressure_level: str | None = None

    success: ClassVar[bool] = True

    @property
    def model(self) -> str:
        return self.record.model

    @property
    def price(self) -> float:
        return self.record.price

    @property
    def min_safety_factor(self) -> float:
        return min(row.safety_factor for row in self.analysis)


@dataclass(frozen=True, slots=True)
class MatchFailure:
    """Reportable outcome for a valve that could not be sized."""

    reason: FailureReason
    message: str

    success: ClassVar[bool] = False


MatchResult = Union[MatchSuccess, MatchFailure]


def safety_factors(required: TorqueProfile, actual: TorqueProfile) -> np.ndarray:
    """Return ``actual / required`` for every position in legacy array order."""
    required_values = np.asarray(required.as_tuple(), dtype=float)
    actual_values = np.asarray(actual.as_tuple(), dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return actual_values / required_values


def match_actuator(
    required: TorqueProfile,
    catalog: Iterable[ActuatorRecord],
    pressure_level: object | None = None,
    *,
    policy: SafetyPolicy = TIERED_POLICY,
) -> MatchResult:
    """Pick the cheapest actuator whose safety factors fit the policy.

    Tiers are tried in order. Within the first tier that admits at least one
    actuator at every position, the lowest price wins and ties go to the
    lowest id. Records without a usable curve for ``pressure_level`` are
    skipped.

    Args:
        required: Torque the valve needs at each position.
        catalog: Current catalog snapshot; read in full on every call.
        pressure_level: Supply pressure used to pick curves from
            pressure-tabulated records. ``None`` limits the search to flat
            records.
        policy: Safety-factor tiers to apply.

    Returns:
        MatchResult: :class:`MatchSuccess` with the analysis rows, or
        :class:`MatchFailure` when no tier admits any actuator.
    """
    level = normalise_pressure_level(pressure_level) if pressure_level is not None else None
    candidates = _eligible_candidates(required, catalog, level)
    for index, tier in enumerate(policy.tiers):
        admitted = [candidate for candidate in candidates if tier.admits(candidate[2])]
        if not admitted:
            LOGGER.debug("No actuator fits tier '%s' (%s)", tier.name, _band_label(tier))
            continue
        record, profile, factors = min(
            admitted, key=lambda candidate: (candidate[0].price, id_sort_key(candidate[0].id))
        )
        if index > 0:
            LOGGER.info(
                "Selected %s from fallback tier '%s' (%s)",
                record.model,
                tier.name,
                _band_label(tier),
            )
        return MatchSuccess(
            record=record,
            analysis=build_analysis(required, profile, factors, tier),
            tier=tier.name,
            pressure_level=level,
        )
    LOGGER.debug(
        "No suitable actuator among %d candidates for BTO %.2f Nm", len(candidates), required.bto
    )
    return MatchFailure(FailureReason.NO_SUITABLE_ACTUATOR, NO_SUITABLE_ACTUATOR_MESSAGE)


def build_analysis(
    required: TorqueProfile,
    actual: TorqueProfile,
    factors: np.ndarray,
    tier: SafetyTier,
) -> tuple[AnalysisRow, ...]:
    """Return one :class:`AnalysisRow` per position, flagged against ``tier``."""
    rows = []
    for index, position in enumerate(POSITIONS):
        factor = float(factors[index])
        in_band = tier.contains(factor)
        rows.append(
            AnalysisRow(
                position=position,
                required=required.value_at(position),
                actual=actual.value_at(position),
                safety_factor=factor,
                in_band=in_band,
            )
        )
    return tuple(rows)


def _eligible_candidates(
    required: TorqueProfile,
    catalog: Iterable[ActuatorRecord],
    level: str | None,
) -> list[tuple[ActuatorRecord, TorqueProfile, np.ndarray]]:
    candidates = []
    for record in catalog:
        profile = record.profile_for(level)
        if profile is None:
            LOGGER.debug(
                "Skipping %s: no usable torque curve for pressure %s", record.model, level
            )
            continue
        candidates.append((record, profile, safety_factors(required, profile)))
    return candidates


def _band_label(tier: SafetyTier) -> str:
    upper = "inf" if tier.maximum is None else f"{tier.maximum:g}"
    return f"{tier.minimum:g}x-{upper}x"
