"""Safety-factor policies used to qualify actuators."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class SafetyTier:
    """Closed band of acceptable safety factors.

    Args:
        name: Label reported with a selection made in this tier.
        minimum: Lowest acceptable actuator/required torque ratio.
        maximum: Highest acceptable ratio, or ``None`` for no ceiling.
    """

    name: str
    minimum: float
    maximum: float | None = None

    def __post_init__(self) -> None:
        minimum = float(self.minimum)
        if not math.isfinite(minimum) or minimum <= 0:
            raise ValueError(f"Safety tier '{self.name}' minimum must be positive")
        object.__setattr__(self, "minimum", minimum)
        if self.maximum is not None:
            maximum = float(self.maximum)
            if not maximum >= minimum:
                raise ValueError(
                    f"Safety tier '{self.name}' maximum {maximum} is below minimum {minimum}"
                )
            object.__setattr__(self, "maximum", maximum)

    def contains(self, factor: float) -> bool:
        """Whether a single safety factor lies inside the band."""
        if not factor >= self.minimum:
            return False
        return self.maximum is None or factor <= self.maximum

    def admits(self, factors: np.ndarray) -> bool:
        """Whether every safety factor in ``factors`` lies inside the band."""
        if not bool(np.all(factors >= self.minimum)):
            return False
        return self.maximum is None or bool(np.all(factors <= self.maximum))


@dataclass(frozen=True, slots=True)
class SafetyPolicy:
    """Ordered tiers searched until one yields a qualifying actuator."""

    name: str
    tiers: tuple[SafetyTier, ...]

    def __post_init__(self) -> None:
        tiers = tuple(self.tiers)
        if not tiers:
            raise ValueError(f"Safety policy '{self.name}' must define at least one tier")
        object.__setattr__(self, "tiers", tiers)


TIERED_POLICY = SafetyPolicy(
    name="tiered",
    tiers=(
        SafetyTier(name="ideal", minimum=1.5, maximum=4.0),
        SafetyTier(name="acceptable", minimum=1.5, maximum=6.0),
    ),
)

# Single 1.5x floor with no ceiling, as used by the first sizing tool releases.
MINIMUM_ONLY_POLICY = SafetyPolicy(
    name="minimum_only",
    tiers=(SafetyTier(name="minimum", minimum=1.5),),
)

POLICIES: dict[str, SafetyPolicy] = {
    TIERED_POLICY.name: TIERED_POLICY,
    MINIMUM_ONLY_POLICY.name: MINIMUM_ONLY_POLICY,
}


def get_policy(name: str) -> SafetyPolicy:
    """Return a built-in policy by name."""
    try:
        return POLICIES[name.strip().lower()]
    except KeyError as exc:
        raise ValueError(
            f"Unknown safety policy '{name}'; expected one of {sorted(POLICIES)}"
        ) from exc
