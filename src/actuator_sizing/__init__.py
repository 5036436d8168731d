"""Valve actuator sizing: required torques, catalog matching and pricing."""

from .catalog import Accessory, ActuatorCatalog, ActuatorRecord, TorqueProfile
from .sizing import (
    aggregate_pricing,
    derive_required_torques,
    match_actuator,
    size_valves,
)

__version__ = "0.1.0"

__all__ = [
    "ActuatorCatalog",
    "ActuatorRecord",
    "Accessory",
    "TorqueProfile",
    "aggregate_pricing",
    "derive_required_torques",
    "match_actuator",
    "size_valves",
]
