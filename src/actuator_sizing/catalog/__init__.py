"""Public catalog interfaces exposed by :mod:`actuator_sizing`."""

from .base import (
    POSITIONS,
    Accessory,
    ActuatorCatalog,
    ActuatorRecord,
    CatalogError,
    TorquePosition,
    TorqueProfile,
    normalise_pressure_level,
    validate_record,
)
from .loader import (
    DEFAULT_CATALOG_PATH,
    catalog_frame,
    default_catalog,
    load_catalog,
    load_catalog_or_default,
    parse_catalog,
    save_catalog,
)

__all__ = [
    "POSITIONS",
    "TorquePosition",
    "TorqueProfile",
    "ActuatorRecord",
    "Accessory",
    "ActuatorCatalog",
    "CatalogError",
    "normalise_pressure_level",
    "validate_record",
    "DEFAULT_CATALOG_PATH",
    "catalog_frame",
    "default_catalog",
    "load_catalog",
    "load_catalog_or_default",
    "parse_catalog",
    "save_catalog",
]
