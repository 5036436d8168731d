"""Derive the required torque profile of a valve from its break-to-open torque."""

from __future__ import annotations

import math
from typing import Mapping

from ..catalog.base import TorquePosition, TorqueProfile

# Fraction of the break-to-open torque the valve needs at each stroke position.
REQUIRED_TORQUE_FACTORS: Mapping[TorquePosition, float] = {
    TorquePosition.BTO: 1.0,
    TorquePosition.RTO: 0.5,
    TorquePosition.ETO: 0.8,
    TorquePosition.ETC: 0.9,
    TorquePosition.RTC: 0.6,
    TorquePosition.BTC: 1.1,
}


class InvalidTorqueError(ValueError):
    """Raised when an input torque is not a finite positive number."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid BTO value: {value!r}")
        self.value = value


def parse_torque(value: object) -> float:
    """Return ``value`` as a finite positive torque in Nm.

    Numeric strings are accepted so form or command-line text can be passed
    straight through.

    Raises:
        InvalidTorqueError: If the value is non-numeric, non-finite, zero or
            negative.
    """
    if isinstance(value, bool):
        raise InvalidTorqueError(value)
    try:
        torque = float(value.strip() if isinstance(value, str) else value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidTorqueError(value) from exc
    if not math.isfinite(torque) or torque <= 0:
        raise InvalidTorqueError(value)
    return torque


def derive_required_torques(bto: object) -> TorqueProfile:
    """Return the torque the valve requires at each of the six positions.

    Args:
        bto: Break-to-open torque of the valve in Nm.

    Returns:
        TorqueProfile: Required torques, ``BTO = bto`` and the remaining
        positions scaled by :data:`REQUIRED_TORQUE_FACTORS`.

    Raises:
        InvalidTorqueError: If ``bto`` is not a finite number greater than 0,
            or is so large that a derived torque overflows.
    """
    torque = parse_torque(bto)
    required = {
        position.field_name: torque * factor for position, factor in REQUIRED_TORQUE_FACTORS.items()
    }
    if not all(math.isfinite(value) for value in required.values()):
        raise InvalidTorqueError(bto)
    return TorqueProfile(**required)
