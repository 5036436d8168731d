"""Declarative settings that steer a sizing run.

Settings carry policy and limits only; catalog data is loaded separately so a
single settings file can be reused across catalogs.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..catalog.base import normalise_pressure_level
from .policy import TIERED_POLICY, SafetyPolicy

DEFAULT_PRESSURE_LEVELS: tuple[str, ...] = ("4", "5", "5.5", "6")


class SettingsError(ValueError):
    """Raised when a settings file is malformed or inconsistent."""


@dataclass(slots=True)
class SizingSettings:
    """Policy, pressure selector values and batch limits.

    Args:
        policy: Safety-factor tiers used by the matcher.
        pressure_levels: Allowed supply pressure levels in bar. An empty tuple
            accepts any level.
        default_pressure_level: Level used when a request names none.
        max_inputs: Largest number of valve torques accepted in one batch.
        currency: Currency code shown next to prices.
    """

    policy: SafetyPolicy = TIERED_POLICY
    pressure_levels: tuple[str, ...] = DEFAULT_PRESSURE_LEVELS
    default_pressure_level: str | None = None
    max_inputs: int = 5
    currency: str = "EUR"

    def __post_init__(self) -> None:
        self.pressure_levels = tuple(
            normalise_pressure_level(level) for level in self.pressure_levels
        )
        if self.default_pressure_level is not None:
            self.default_pressure_level = normalise_pressure_level(self.default_pressure_level)
        self.validate()

    def validate(self) -> None:
        """Ensure limits are positive and the default level is selectable."""
        if self.max_inputs < 1:
            raise SettingsError(f"max_inputs must be at least 1, got {self.max_inputs}")
        if len(set(self.pressure_levels)) != len(self.pressure_levels):
            raise SettingsError("pressure_levels contains duplicates")
        if (
            self.default_pressure_level is not None
            and self.pressure_levels
            and self.default_pressure_level not in self.pressure_levels
        ):
            raise SettingsError(
                f"default_pressure_level '{self.default_pressure_level}' is not one of "
                f"{list(self.pressure_levels)}"
            )

    def resolve_pressure_level(self, level: object | None) -> str | None:
        """Return the canonical pressure level for a request.

        Raises:
            ValueError: If ``level`` is not one of :attr:`pressure_levels`.
        """
        if level is None or (isinstance(level, str) and not level.strip()):
            return self.default_pressure_level
        canonical = normalise_pressure_level(level)
        if self.pressure_levels and canonical not in self.pressure_levels:
            raise ValueError(
                f"Unknown pressure level '{level}'; expected one of {list(self.pressure_levels)}"
            )
        return canonical
