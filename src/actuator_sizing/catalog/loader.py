"""Load and save actuator catalogs from YAML, JSON or CSV files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import pandas as pd
import yaml

from .base import (
    POSITIONS,
    Accessory,
    ActuatorCatalog,
    ActuatorRecord,
    CatalogError,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).with_name("defaults.yaml")

_CURVE_KEYS = ("torque_curve", "torqueCurve", "torques")
_PRESSURE_KEYS = ("pressure_curves", "pressureCurves")
_POSITION_FIELDS = tuple(position.field_name for position in POSITIONS)


def load_catalog(path: str | Path) -> ActuatorCatalog:
    """Parse a catalog file into an :class:`ActuatorCatalog` snapshot.

    ``.yaml``/``.yml`` files hold ``actuators`` and ``accessories`` sections.
    ``.json`` files may hold the same mapping or the legacy browser export (a
    bare list of ``{id, model, price, torqueCurve}`` objects). ``.csv`` files
    hold one row per actuator, or per actuator and pressure level when a
    ``pressure`` column is present. Files without an accessory section use
    the packaged accessory list.

    Args:
        path: Filesystem path to the catalog file.

    Returns:
        ActuatorCatalog: Parsed catalog snapshot.

    Raises:
        FileNotFoundError: If the catalog path does not exist.
        CatalogError: When the file cannot be parsed or entries are invalid.
    """
    catalog_path = Path(path)
    if not catalog_path.exists():
        raise FileNotFoundError(catalog_path)
    suffix = catalog_path.suffix.lower()
    if suffix == ".csv":
        return _load_csv(catalog_path)
    try:
        with catalog_path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle) if suffix == ".json" else yaml.safe_load(handle)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Catalog file {catalog_path} is not valid: {exc}") from exc
    catalog = parse_catalog(raw, default_accessories=_packaged_accessories(catalog_path))
    LOGGER.debug("Loaded %d actuators from %s", len(catalog), catalog_path)
    return catalog


def parse_catalog(
    raw: Any,
    *,
    default_accessories: tuple[Accessory, ...] = (),
) -> ActuatorCatalog:
    """Build a catalog from already-decoded YAML/JSON data."""
    if raw is None:
        raw = {}
    if isinstance(raw, list):
        actuators_payload: Any = raw
        accessories_payload: Any = None
    elif isinstance(raw, Mapping):
        actuators_payload = raw.get("actuators", [])
        accessories_payload = raw.get("accessories")
    else:
        raise CatalogError("Catalog must be a list of actuators or a mapping")
    if not isinstance(actuators_payload, list):
        raise CatalogError("'actuators' section must be a list")

    records = tuple(
        _parse_record(payload, index) for index, payload in enumerate(actuators_payload)
    )
    if accessories_payload is None:
        accessories = default_accessories
    else:
        accessories = _parse_accessories(accessories_payload)
    return ActuatorCatalog(records=records, accessories=accessories)


def load_catalog_or_default(path: str | Path | None) -> ActuatorCatalog:
    """Load ``path``, falling back to the packaged catalog when it is unusable."""
    if path is None:
        return default_catalog()
    try:
        return load_catalog(path)
    except (FileNotFoundError, CatalogError) as exc:
        LOGGER.error("Failed to load catalog from %s (%s); using default catalog", path, exc)
        return default_catalog()


def default_catalog() -> ActuatorCatalog:
    """Return the catalog shipped with the package."""
    return load_catalog(DEFAULT_CATALOG_PATH)


def save_catalog(catalog: ActuatorCatalog, path: str | Path) -> Path:
    """Write ``catalog`` to ``path``.

    The format follows the suffix: ``.json`` writes the legacy list layout,
    ``.csv`` writes one row per curve, anything else writes YAML.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    suffix = target.suffix.lower()
    if suffix == ".csv":
        catalog_frame(catalog).to_csv(target, index=False)
    elif suffix == ".json":
        payload = [_legacy_record(record) for record in catalog.records]
        target.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    else:
        payload = {
            "actuators": [_record_payload(record) for record in catalog.records],
            "accessories": [
                {"id": accessory.id, "name": accessory.name, "price": accessory.price}
                for accessory in catalog.accessories
            ],
        }
        with target.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(payload, handle, sort_keys=False)
    LOGGER.info("Saved %d actuators to %s", len(catalog), target)
    return target


def _packaged_accessories(source: Path) -> tuple[Accessory, ...]:
    if source.resolve() == DEFAULT_CATALOG_PATH.resolve():
        return ()
    return default_catalog().accessories


def _parse_record(payload: Any, index: int) -> ActuatorRecord:
    if not isinstance(payload, Mapping):
        raise CatalogError(f"Actuator entry #{index} must be a mapping")
    record_id = payload.get("id")
    if record_id is None or not str(record_id).strip():
        raise CatalogError(f"Actuator entry #{index} missing 'id'")
    model = payload.get("model", payload.get("name"))
    if model is None:
        raise CatalogError(f"Actuator '{record_id}' missing 'model'")
    if "price" not in payload:
        raise CatalogError(f"Actuator '{record_id}' missing 'price'")
    owner = f"Actuator '{model}'"

    curve_payload = _first_present(payload, _CURVE_KEYS)
    pressure_payload = _first_present(payload, _PRESSURE_KEYS)
    torque_curve: tuple[Any, ...] | None = None
    pressure_curves: dict[Any, tuple[Any, ...]] | None = None
    if isinstance(curve_payload, Mapping) and not _is_position_mapping(curve_payload):
        pressure_payload = curve_payload
    elif curve_payload is not None:
        torque_curve = _parse_curve(curve_payload, owner=owner)
    if pressure_payload is not None:
        if not isinstance(pressure_payload, Mapping):
            raise CatalogError(f"{owner} pressure curves must be a mapping")
        pressure_curves = {
            level: _parse_curve(values, owner=f"{owner} @ {level}")
            for level, values in pressure_payload.items()
        }

    record = ActuatorRecord(
        id=str(record_id),
        model=str(model),
        price=payload["price"],
        torque_curve=torque_curve,
        pressure_curves=pressure_curves,
    )
    _warn_if_unusable(record)
    return record


def _parse_curve(values: Any, *, owner: str) -> tuple[Any, ...]:
    if isinstance(values, Mapping):
        lowered = {str(key).strip().lower(): value for key, value in values.items()}
        return tuple(lowered[name] for name in _POSITION_FIELDS if name in lowered)
    if isinstance(values, (list, tuple)):
        return tuple(values)
    raise CatalogError(f"{owner} torque curve must be a list or mapping")


def _is_position_mapping(values: Mapping[Any, Any]) -> bool:
    return any(str(key).strip().lower() in _POSITION_FIELDS for key in values)


def _first_present(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _warn_if_unusable(record: ActuatorRecord) -> None:
    curves: dict[str, tuple[float, ...]] = dict(record.pressure_curves or {})
    if record.torque_curve is not None:
        curves["flat"] = record.torque_curve
    if not curves:
        LOGGER.warning("Actuator '%s' has no torque curve and will never be selected", record.model)
    for level, curve in curves.items():
        if len(curve) != len(POSITIONS):
            LOGGER.warning(
                "Actuator '%s' curve '%s' has %d values (expected %d); it will be skipped",
                record.model,
                level,
                len(curve),
                len(POSITIONS),
            )


def _parse_accessories(raw_accessories: Any) -> tuple[Accessory, ...]:
    if not isinstance(raw_accessories, list):
        raise CatalogError("'accessories' section must be a list")
    accessories: list[Accessory] = []
    for index, payload in enumerate(raw_accessories):
        if not isinstance(payload, Mapping):
            raise CatalogError(f"Accessory entry #{index} must be a mapping")
        for key in ("id", "name", "price"):
            if payload.get(key) is None:
                raise CatalogError(f"Accessory entry #{index} missing '{key}'")
        accessories.append(
            Accessory(id=str(payload["id"]), name=str(payload["name"]), price=payload["price"])
        )
    return tuple(accessories)


def _load_csv(path: Path) -> ActuatorCatalog:
    try:
        frame = pd.read_csv(path, dtype={"id": str, "model": str, "pressure": str})
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Catalog file {path} is not valid: {exc}") from exc
    frame.columns = [str(column).strip().lower() for column in frame.columns]
    missing = [
        column
        for column in ("id", "model", "price", *_POSITION_FIELDS)
        if column not in frame.columns
    ]
    if missing:
        raise CatalogError(f"Catalog CSV {path} missing columns: {missing}")

    has_pressure = "pressure" in frame.columns
    entries: dict[str, dict[str, Any]] = {}
    for row in frame.to_dict(orient="records"):
        record_id = str(row["id"]).strip()
        entry = entries.setdefault(
            record_id, {"id": record_id, "model": row["model"], "price": row["price"]}
        )
        curve = [row[name] for name in _POSITION_FIELDS]
        level = row.get("pressure") if has_pressure else None
        if level is None or pd.isna(level):
            entry["torque_curve"] = curve
        else:
            entry.setdefault("pressure_curves", {})[level] = curve
    records = tuple(_parse_record(entry, index) for index, entry in enumerate(entries.values()))
    catalog = ActuatorCatalog(records=records, accessories=_packaged_accessories(path))
    LOGGER.debug("Loaded %d actuators from %s", len(catalog), path)
    return catalog


def _record_payload(record: ActuatorRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {"id": record.id, "model": record.model, "price": record.price}
    if record.torque_curve is not None:
        payload["torque_curve"] = list(record.torque_curve)
    if record.pressure_curves:
        payload["pressure_curves"] = {
            level: list(curve) for level, curve in record.pressure_curves.items()
        }
    return payload


def _legacy_record(record: ActuatorRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {"id": record.id, "model": record.model, "price": record.price}
    if record.torque_curve is not None:
        payload["torqueCurve"] = list(record.torque_curve)
    if record.pressure_curves:
        payload["pressureCurves"] = {
            level: list(curve) for level, curve in record.pressure_curves.items()
        }
    return payload


def catalog_frame(catalog: ActuatorCatalog) -> pd.DataFrame:
    """Return one row per actuator curve; ``pressure`` is empty for flat curves."""
    rows: list[dict[str, Any]] = []
    for record in catalog.records:
        curves: list[tuple[str | None, tuple[float, ...]]] = []
        if record.torque_curve is not None:
            curves.append((None, record.torque_curve))
        curves.extend((record.pressure_curves or {}).items())
        for level, curve in curves:
            row: dict[str, Any] = {
                "id": record.id,
                "model": record.model,
                "price": record.price,
                "pressure": level,
            }
            row.update(dict(zip(_POSITION_FIELDS, curve)))
            rows.append(row)
    return pd.DataFrame(rows, columns=["id", "model", "price", "pressure", *_POSITION_FIELDS])
