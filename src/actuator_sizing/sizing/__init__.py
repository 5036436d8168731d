"""Sizing package: torque derivation, actuator matching, pricing, batches."""

from .matcher import (
    INVALID_INPUT_MESSAGE,
    NO_SUITABLE_ACTUATOR_MESSAGE,
    AnalysisRow,
    FailureReason,
    MatchFailure,
    MatchResult,
    MatchSuccess,
    build_analysis,
    match_actuator,
    safety_factors,
)
from .pricing import AccessoryLine, ActuatorLine, PricingSummary, aggregate_pricing
from .report import (
    analysis_frame,
    format_report,
    pricing_frame,
    results_frame,
    write_report_csv,
)
from .session import SizingReport, ValveSizing, size_valve, size_valves
from .torques import (
    REQUIRED_TORQUE_FACTORS,
    InvalidTorqueError,
    derive_required_torques,
    parse_torque,
)

__all__ = [
    "REQUIRED_TORQUE_FACTORS",
    "InvalidTorqueError",
    "derive_required_torques",
    "parse_torque",
    "AnalysisRow",
    "FailureReason",
    "MatchFailure",
    "MatchResult",
    "MatchSuccess",
    "INVALID_INPUT_MESSAGE",
    "NO_SUITABLE_ACTUATOR_MESSAGE",
    "build_analysis",
    "match_actuator",
    "safety_factors",
    "ActuatorLine",
    "AccessoryLine",
    "PricingSummary",
    "aggregate_pricing",
    "SizingReport",
    "ValveSizing",
    "size_valve",
    "size_valves",
    "analysis_frame",
    "format_report",
    "pricing_frame",
    "results_frame",
    "write_report_csv",
]
