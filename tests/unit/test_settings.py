"""Tests for sizing settings, policies and the settings loader."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from actuator_sizing.config import (
    MINIMUM_ONLY_POLICY,
    TIERED_POLICY,
    SafetyPolicy,
    SafetyTier,
    SettingsError,
    SizingSettings,
    default_settings,
    get_policy,
    load_settings,
    parse_settings,
)


def test_packaged_settings_match_defaults() -> None:
    settings = default_settings()
    assert settings.policy == TIERED_POLICY
    assert settings.pressure_levels == ("4", "5", "5.5", "6")
    assert settings.default_pressure_level is None
    assert settings.max_inputs == 5
    assert settings.currency == "EUR"


def test_tier_bands_are_closed() -> None:
    ideal = TIERED_POLICY.tiers[0]
    assert ideal.contains(1.5)
    assert ideal.contains(4.0)
    assert not ideal.contains(1.49)
    assert not ideal.contains(float("nan"))
    assert ideal.admits(np.array([1.5, 2.0, 4.0]))
    assert not ideal.admits(np.array([1.5, 4.01]))
    floor = MINIMUM_ONLY_POLICY.tiers[0]
    assert floor.admits(np.array([1.5, 1e6]))


def test_invalid_tiers() -> None:
    with pytest.raises(ValueError):
        SafetyTier("bad", 0)
    with pytest.raises(ValueError):
        SafetyTier("bad", 2.0, 1.0)
    with pytest.raises(ValueError):
        SafetyPolicy("empty", ())


def test_get_policy() -> None:
    assert get_policy(" Minimum_Only ") is MINIMUM_ONLY_POLICY
    with pytest.raises(ValueError, match="Unknown safety policy"):
        get_policy("loose")


def test_settings_validation() -> None:
    with pytest.raises(SettingsError):
        SizingSettings(max_inputs=0)
    with pytest.raises(SettingsError):
        SizingSettings(pressure_levels=("6", 6.0))
    with pytest.raises(SettingsError):
        SizingSettings(default_pressure_level="7")
    settings = SizingSettings(pressure_levels=(), default_pressure_level=7)
    assert settings.default_pressure_level == "7"


def test_resolve_pressure_level() -> None:
    settings = SizingSettings(default_pressure_level=6.0)
    assert settings.resolve_pressure_level(None) == "6"
    assert settings.resolve_pressure_level("  ") == "6"
    assert settings.resolve_pressure_level(5.5) == "5.5"
    assert settings.resolve_pressure_level("4.0") == "4"
    with pytest.raises(ValueError):
        settings.resolve_pressure_level("8")
    assert SizingSettings(pressure_levels=()).resolve_pressure_level("8") == "8"


def test_parse_named_and_custom_policies() -> None:
    settings = parse_settings({"settings": {"policy": "minimum_only", "currency": "USD"}})
    assert settings.policy is MINIMUM_ONLY_POLICY
    assert settings.currency == "USD"

    custom = parse_settings(
        {
            "settings": {
                "policy": {
                    "name": "strict",
                    "tiers": [{"name": "tight", "min": 2, "max": 3}, {"min": 1.5}],
                },
                "pressure_levels": [4, 6],
                "default_pressure_level": 6,
                "max_inputs": 3,
            }
        }
    )
    assert custom.policy.name == "strict"
    assert [tier.name for tier in custom.policy.tiers] == ["tight", "tier2"]
    assert custom.policy.tiers[1].maximum is None
    assert custom.pressure_levels == ("4", "6")
    assert custom.default_pressure_level == "6"
    assert custom.max_inputs == 3


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"settings": []},
        {"settings": {"policy": "loose"}},
        {"settings": {"policy": {"name": "x"}}},
        {"settings": {"policy": {"name": "x", "tiers": []}}},
        {"settings": {"policy": {"name": "x", "tiers": [{"max": 2}]}}},
        {"settings": {"policy": {"name": "x", "tiers": [{"min": 3, "max": 2}]}}},
        {"settings": {"max_inputs": "five"}},
        {"settings": {"max_inputs": True}},
        {"settings": {"max_inputs": 0}},
        {"settings": {"pressure_levels": "6"}},
        {"settings": {"default_pressure_level": "9"}},
    ],
)
def test_invalid_settings(raw: object) -> None:
    with pytest.raises(SettingsError):
        parse_settings(raw)


def test_load_settings_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("settings:\n  policy: minimum_only\n  max_inputs: 10\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings.policy is MINIMUM_ONLY_POLICY
    assert settings.max_inputs == 10

    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_settings(empty).policy == TIERED_POLICY

    broken = tmp_path / "broken.yaml"
    broken.write_text("settings: [", encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(broken)
    undecodable = tmp_path / "undecodable.yaml"
    undecodable.write_bytes(b"\xff\xfe settings: {}")
    with pytest.raises(SettingsError):
        load_settings(undecodable)
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")
