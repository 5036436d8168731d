"""Convenience exports for sizing settings and safety policies."""

from __future__ import annotations

from .loader import DEFAULT_SETTINGS_PATH, default_settings, load_settings, parse_settings
from .models import DEFAULT_PRESSURE_LEVELS, SettingsError, SizingSettings
from .policy import (
    MINIMUM_ONLY_POLICY,
    POLICIES,
    TIERED_POLICY,
    SafetyPolicy,
    SafetyTier,
    get_policy,
)

__all__ = [
    "load_settings",
    "default_settings",
    "parse_settings",
    "DEFAULT_SETTINGS_PATH",
    "DEFAULT_PRESSURE_LEVELS",
    "SizingSettings",
    "SettingsError",
    "SafetyPolicy",
    "SafetyTier",
    "TIERED_POLICY",
    "MINIMUM_ONLY_POLICY",
    "POLICIES",
    "get_policy",
]
