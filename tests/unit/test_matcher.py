"""Tests for actuator selection under the safety-factor policies."""

from __future__ import annotations

import numpy as np
import pytest

from actuator_sizing.catalog.base import ActuatorCatalog, ActuatorRecord, TorquePosition
from actuator_sizing.config.policy import (
    MINIMUM_ONLY_POLICY,
    TIERED_POLICY,
    SafetyPolicy,
    SafetyTier,
)
from actuator_sizing.sizing.matcher import (
    NO_SUITABLE_ACTUATOR_MESSAGE,
    FailureReason,
    MatchFailure,
    MatchSuccess,
    build_analysis,
    match_actuator,
    safety_factors,
)
from actuator_sizing.sizing.torques import derive_required_torques

AT_50 = ActuatorRecord(id="1", model="AT-50", price=150, torque_curve=(80, 60, 40, 100, 120, 140))
AT_101 = ActuatorRecord(
    id="2", model="AT-101", price=250, torque_curve=(160, 120, 90, 180, 220, 250)
)

# Required torques for a 100 Nm valve, rounded to the nearest Nm.
_BASE_100 = (100, 50, 80, 90, 60, 110)


def _scaled(record_id: str, price: float, factor: float) -> ActuatorRecord:
    curve = tuple(value * factor for value in _BASE_100)
    return ActuatorRecord(id=record_id, model=f"X-{record_id}", price=price, torque_curve=curve)


def _curve(bto_value: float) -> tuple[float, ...]:
    """Curve with a chosen BTO torque and 2x margin everywhere else."""
    return (bto_value, 100, 160, 180, 120, 220)


IDEAL_A = _scaled("11", 500, 2.0)
IDEAL_B = _scaled("12", 400, 3.0)
LOOSE = _scaled("13", 300, 5.0)
HUGE = _scaled("14", 100, 7.0)
WEAK = _scaled("15", 50, 1.4)


def test_scenario_eto_shortfall_fails_at_50_nm() -> None:
    """AT-50 only reaches 1.0x at ETO for a 50 Nm valve."""
    required = derive_required_torques(50)
    factors = safety_factors(required, AT_50.profile_for())
    assert factors[2] == pytest.approx(1.0)
    for policy in (TIERED_POLICY, MINIMUM_ONLY_POLICY):
        result = match_actuator(required, [AT_50], policy=policy)
        assert isinstance(result, MatchFailure)
        assert result.reason is FailureReason.NO_SUITABLE_ACTUATOR
        assert result.message == NO_SUITABLE_ACTUATOR_MESSAGE
        assert result.success is False


def test_scenario_eto_shortfall_fails_at_40_nm() -> None:
    required = derive_required_torques(40)
    factors = safety_factors(required, AT_50.profile_for())
    assert factors[:3] == pytest.approx([2.0, 3.0, 1.25])
    result = match_actuator(required, [AT_50], policy=MINIMUM_ONLY_POLICY)
    assert isinstance(result, MatchFailure)


def test_scenario_minimum_only_selects_at_101() -> None:
    """Under the 1.5x floor AT-101 qualifies at every position for 50 Nm."""
    required = derive_required_torques(50)
    result = match_actuator(required, [AT_50, AT_101], policy=MINIMUM_ONLY_POLICY)
    assert isinstance(result, MatchSuccess)
    assert result.record is AT_101
    assert result.tier == "minimum"
    assert [row.position for row in result.analysis] == list(TorquePosition)
    assert [row.safety_factor for row in result.analysis] == pytest.approx(
        [3.2, 4.8, 2.25, 4.0, 220 / 30, 250 / 55]
    )
    assert [row.required for row in result.analysis] == pytest.approx([50, 25, 40, 45, 30, 55])
    assert [row.actual for row in result.analysis] == [160, 120, 90, 180, 220, 250]
    assert all(row.in_band for row in result.analysis)


def test_scenario_tiered_rejects_oversized_rtc() -> None:
    """AT-101's 7.3x RTC factor is beyond the 6x ceiling of the tiered policy."""
    required = derive_required_torques(50)
    result = match_actuator(required, [AT_50, AT_101])
    assert isinstance(result, MatchFailure)


def test_cheaper_qualifying_actuator_wins() -> None:
    strong_small = ActuatorRecord(
        id="3", model="AT-50S", price=150, torque_curve=(100, 60, 80, 100, 110, 140)
    )
    required = derive_required_torques(50)
    for policy in (TIERED_POLICY, MINIMUM_ONLY_POLICY):
        result = match_actuator(required, [AT_101, strong_small], policy=policy)
        assert isinstance(result, MatchSuccess)
        assert result.model == "AT-50S"
        assert result.price == 150


def test_tiered_prefers_cheapest_ideal_over_cheaper_acceptable() -> None:
    required = derive_required_torques(100)
    result = match_actuator(required, [IDEAL_A, LOOSE, HUGE, WEAK, IDEAL_B])
    assert isinstance(result, MatchSuccess)
    assert result.record is IDEAL_B
    assert result.tier == "ideal"


def test_tiered_falls_back_to_acceptable_band() -> None:
    required = derive_required_torques(100)
    result = match_actuator(required, [HUGE, LOOSE, WEAK])
    assert isinstance(result, MatchSuccess)
    assert result.record is LOOSE
    assert result.tier == "acceptable"
    assert all(4.0 < row.safety_factor <= 6.0 for row in result.analysis)


def test_tiered_rejects_oversized_and_undersized() -> None:
    required = derive_required_torques(100)
    assert isinstance(match_actuator(required, [HUGE, WEAK]), MatchFailure)


def test_minimum_only_accepts_oversized() -> None:
    required = derive_required_torques(100)
    result = match_actuator(required, [IDEAL_B, HUGE, WEAK], policy=MINIMUM_ONLY_POLICY)
    assert isinstance(result, MatchSuccess)
    assert result.record is HUGE


@pytest.mark.parametrize(
    ("bto_value", "expected_tier"),
    [(150, "ideal"), (400, "ideal"), (600, "acceptable"), (149.99, None), (600.01, None)],
)
def test_band_edges_are_inclusive(bto_value: float, expected_tier: str | None) -> None:
    record = ActuatorRecord(id="1", model="EDGE", price=10, torque_curve=_curve(bto_value))
    result = match_actuator(derive_required_torques(100), [record])
    if expected_tier is None:
        assert isinstance(result, MatchFailure)
    else:
        assert isinstance(result, MatchSuccess)
        assert result.tier == expected_tier


def test_price_tie_goes_to_lowest_id() -> None:
    required = derive_required_torques(100)
    nine = _scaled("9", 400, 3.0)
    ten = _scaled("10", 400, 3.0)
    alpha = _scaled("a", 400, 3.0)
    beta = _scaled("b", 400, 3.0)
    assert match_actuator(required, [ten, nine]).record is nine  # type: ignore[union-attr]
    assert match_actuator(required, [beta, alpha]).record is alpha  # type: ignore[union-attr]
    assert match_actuator(required, [alpha, ten]).record is ten  # type: ignore[union-attr]


def test_custom_policy_tiers_are_searched_in_order() -> None:
    policy = SafetyPolicy(
        name="strict",
        tiers=(SafetyTier("tight", 2.5, 3.5), SafetyTier("wide", 1.5, 5.5)),
    )
    required = derive_required_torques(100)
    result = match_actuator(required, [IDEAL_A, IDEAL_B, LOOSE], policy=policy)
    assert isinstance(result, MatchSuccess)
    assert result.record is IDEAL_B
    result = match_actuator(required, [IDEAL_A, LOOSE], policy=policy)
    assert isinstance(result, MatchSuccess)
    assert (result.record, result.tier) == (LOOSE, "wide")


PNEU_S = ActuatorRecord(
    id="21",
    model="PNEU-S",
    price=200,
    pressure_curves={
        "4": tuple(v * 1.2 for v in _BASE_100),
        "6": tuple(v * 2.0 for v in _BASE_100),
    },
)
PNEU_L = ActuatorRecord(
    id="22",
    model="PNEU-L",
    price=350,
    pressure_curves={
        4: tuple(v * 2.0 for v in _BASE_100),
        6.0: tuple(v * 3.5 for v in _BASE_100),
    },
)
ELEC = _scaled("23", 500, 2.0)
BROKEN = ActuatorRecord(id="24", model="BROKEN", price=1, torque_curve=(500, 250, 400, 450, 300))
BROKEN_PRESSURE = ActuatorRecord(
    id="25", model="BROKEN-P", price=2, pressure_curves={"6": (500, 250, 400)}
)
PRESSURE_CATALOG = [BROKEN, PNEU_L, ELEC, PNEU_S, BROKEN_PRESSURE]


@pytest.mark.parametrize(
    ("pressure", "expected"),
    [("6", PNEU_S), (6.0, PNEU_S), ("6.0", PNEU_S), ("4", PNEU_L), (4, PNEU_L), ("5.5", ELEC)],
)
def test_pressure_level_selects_sub_profile(pressure: object, expected: ActuatorRecord) -> None:
    result = match_actuator(derive_required_torques(100), PRESSURE_CATALOG, pressure)
    assert isinstance(result, MatchSuccess)
    assert result.record is expected
    assert result.pressure_level == str(pressure).replace(".0", "")


def test_without_pressure_only_flat_records_are_eligible() -> None:
    result = match_actuator(derive_required_torques(100), PRESSURE_CATALOG)
    assert isinstance(result, MatchSuccess)
    assert result.record is ELEC
    assert result.pressure_level is None


def test_malformed_entries_are_silently_ineligible() -> None:
    required = derive_required_torques(100)
    result = match_actuator(required, [BROKEN, BROKEN_PRESSURE], "6")
    assert isinstance(result, MatchFailure)
    assert result.reason is FailureReason.NO_SUITABLE_ACTUATOR


def test_matching_is_repeatable_and_does_not_mutate_catalog() -> None:
    catalog = ActuatorCatalog(records=(IDEAL_A, IDEAL_B, LOOSE))
    required = derive_required_torques(100)
    first = match_actuator(required, catalog)
    second = match_actuator(required, catalog)
    assert first == second
    assert catalog.records == (IDEAL_A, IDEAL_B, LOOSE)


def _random_catalog(seed: int, size: int = 60) -> list[ActuatorRecord]:
    rng = np.random.default_rng(seed)
    records = []
    for index in range(size):
        scales = rng.uniform(1.0, 7.5, size=6)
        curve = tuple(float(base * scale) for base, scale in zip(_BASE_100, scales))
        price = round(float(rng.uniform(100, 5000)), 2)
        records.append(
            ActuatorRecord(id=str(index + 1), model=f"R-{index}", price=price, torque_curve=curve)
        )
    return records


def _factors(required, record: ActuatorRecord) -> list[float]:
    return [actual / need for actual, need in zip(record.torque_curve, required.as_tuple())]


def _cheapest(records: list[ActuatorRecord]) -> ActuatorRecord | None:
    if not records:
        return None
    return min(records, key=lambda record: (record.price, int(record.id)))


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_minimum_only_matches_exhaustive_scan(seed: int) -> None:
    catalog = _random_catalog(seed)
    required = derive_required_torques(100)
    qualifying = [r for r in catalog if all(f >= 1.5 for f in _factors(required, r))]
    expected = _cheapest(qualifying)
    result = match_actuator(required, catalog, policy=MINIMUM_ONLY_POLICY)
    if expected is None:
        assert isinstance(result, MatchFailure)
        return
    assert isinstance(result, MatchSuccess)
    assert result.record is expected
    assert all(row.safety_factor >= 1.5 for row in result.analysis)


@pytest.mark.parametrize("seed", [11, 12, 13, 14, 15])
def test_tiered_matches_exhaustive_scan(seed: int) -> None:
    catalog = _random_catalog(seed, size=200)
    required = derive_required_torques(100)
    ideal = [r for r in catalog if all(1.5 <= f <= 4.0 for f in _factors(required, r))]
    acceptable = [r for r in catalog if all(1.5 <= f <= 6.0 for f in _factors(required, r))]
    expected = _cheapest(ideal) or _cheapest(acceptable)
    result = match_actuator(required, catalog)
    if expected is None:
        assert isinstance(result, MatchFailure)
        return
    assert isinstance(result, MatchSuccess)
    assert result.record is expected
    factors = [row.safety_factor for row in result.analysis]
    assert min(factors) >= 1.5
    if max(factors) > 4.0:
        assert not ideal
        assert result.tier == "acceptable"


def test_analysis_flags_positions_outside_the_tier() -> None:
    required = derive_required_torques(50)
    actual = AT_101.profile_for()
    assert actual is not None
    factors = safety_factors(required, actual)
    rows = build_analysis(required, actual, factors, TIERED_POLICY.tiers[1])
    assert [row.in_band for row in rows] == [True, True, True, True, False, True]
    rows = build_analysis(required, actual, factors, MINIMUM_ONLY_POLICY.tiers[0])
    assert all(row.in_band for row in rows)
