"""Load sizing settings from YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from .models import DEFAULT_PRESSURE_LEVELS, SettingsError, SizingSettings
from .policy import POLICIES, TIERED_POLICY, SafetyPolicy, SafetyTier, get_policy

DEFAULT_SETTINGS_PATH = Path(__file__).with_name("default_settings.yaml")


def load_settings(path: str | Path) -> SizingSettings:
    """Parse a YAML file describing the sizing policy and batch limits.

    Args:
        path: Filesystem path to the settings YAML file.

    Returns:
        SizingSettings: Validated settings.

    Raises:
        FileNotFoundError: If the settings path does not exist.
        SettingsError: When sections or fields are missing or invalid.
    """
    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(settings_path)
    try:
        with settings_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise SettingsError(f"Settings file {settings_path} is not valid YAML: {exc}") from exc
    return parse_settings(raw)


def default_settings() -> SizingSettings:
    """Return the settings shipped with the package."""
    return load_settings(DEFAULT_SETTINGS_PATH)


def parse_settings(raw: Any) -> SizingSettings:
    """Build :class:`SizingSettings` from decoded YAML data."""
    if not isinstance(raw, Mapping):
        raise SettingsError("Settings YAML must be a mapping")
    section = raw.get("settings", {})
    if not isinstance(section, Mapping):
        raise SettingsError("Settings YAML 'settings' entry must be a mapping")

    policy = _parse_policy(section.get("policy", TIERED_POLICY.name))

    levels = section.get("pressure_levels", list(DEFAULT_PRESSURE_LEVELS))
    if levels is None:
        levels = []
    if not isinstance(levels, list):
        raise SettingsError("'pressure_levels' must be a list")

    max_inputs = section.get("max_inputs", 5)
    if isinstance(max_inputs, bool) or not isinstance(max_inputs, int):
        raise SettingsError(f"'max_inputs' must be an integer, got {max_inputs!r}")

    try:
        return SizingSettings(
            policy=policy,
            pressure_levels=tuple(levels),
            default_pressure_level=section.get("default_pressure_level"),
            max_inputs=max_inputs,
            currency=str(section.get("currency", "EUR")),
        )
    except SettingsError:
        raise
    except ValueError as exc:
        raise SettingsError(str(exc)) from exc


def _parse_policy(payload: Any) -> SafetyPolicy:
    if isinstance(payload, str):
        try:
            return get_policy(payload)
        except ValueError as exc:
            raise SettingsError(str(exc)) from exc
    if not isinstance(payload, Mapping):
        raise SettingsError("'policy' must be a policy name or a mapping")
    name = str(payload.get("name", "custom"))
    tiers_payload = payload.get("tiers")
    if tiers_payload is None:
        if name.strip().lower() in POLICIES:
            return get_policy(name)
        raise SettingsError(f"Policy '{name}' must define 'tiers'")
    if not isinstance(tiers_payload, list) or not tiers_payload:
        raise SettingsError(f"Policy '{name}' must define a non-empty 'tiers' list")
    tiers: list[SafetyTier] = []
    for idx, definition in enumerate(tiers_payload):
        if not isinstance(definition, Mapping):
            raise SettingsError(f"Policy '{name}' tier #{idx} must be a mapping")
        minimum = definition.get("min", definition.get("minimum"))
        if minimum is None:
            raise SettingsError(f"Policy '{name}' tier #{idx} missing 'min'")
        maximum = definition.get("max", definition.get("maximum"))
        try:
            tiers.append(
                SafetyTier(
                    name=str(definition.get("name", f"tier{idx + 1}")),
                    minimum=float(minimum),
                    maximum=float(maximum) if maximum is not None else None,
                )
            )
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"Policy '{name}' tier #{idx} is invalid: {exc}") from exc
    return SafetyPolicy(name=name, tiers=tuple(tiers))
