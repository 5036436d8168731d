"""Catalog records describing purchasable actuators and accessories."""

from __future__ import annotations

import dataclasses
import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Sequence

LOGGER = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when catalog data or a catalog edit is invalid."""


class TorquePosition(str, enum.Enum):
    """Named points of a quarter-turn valve stroke, in legacy array order."""

    BTO = "BTO"
    RTO = "RTO"
    ETO = "ETO"
    ETC = "ETC"
    RTC = "RTC"
    BTC = "BTC"

    @property
    def field_name(self) -> str:
        """Attribute name used by :class:`TorqueProfile`."""
        return self.value.lower()

    @property
    def description(self) -> str:
        return _POSITION_DESCRIPTIONS[self]


_POSITION_DESCRIPTIONS = {
    TorquePosition.BTO: "Break to open",
    TorquePosition.RTO: "Run to open",
    TorquePosition.ETO: "End to open",
    TorquePosition.ETC: "End to close",
    TorquePosition.RTC: "Run to close",
    TorquePosition.BTC: "Break to close",
}

POSITIONS: tuple[TorquePosition, ...] = tuple(TorquePosition)


def normalise_pressure_level(value: object) -> str:
    """Return the canonical string key for an air-pressure level.

    YAML and JSON sources may spell the same level as ``5.5``, ``"5.5"`` or
    ``6.0``; all numeric spellings collapse to the shortest form (``"6"``).
    """
    if isinstance(value, bool):
        raise CatalogError(f"Invalid pressure level {value!r}")
    if isinstance(value, (int, float)):
        return f"{float(value):g}"
    text = str(value).strip()
    if not text:
        raise CatalogError("Pressure level must not be empty")
    try:
        return f"{float(text):g}"
    except ValueError:
        return text


def _as_non_negative(value: object, *, label: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{label} must be a number, got {value!r}")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label} must be a number, got {value!r}") from exc
    if not math.isfinite(number) or number < 0:
        raise ValueError(f"{label} must be a finite non-negative number, got {value!r}")
    return number


@dataclass(frozen=True, slots=True)
class TorqueProfile:
    """Torque in newton-metres at each of the six stroke positions."""

    bto: float
    rto: float
    eto: float
    etc: float
    rtc: float
    btc: float

    def __post_init__(self) -> None:
        for position in POSITIONS:
            value = getattr(self, position.field_name)
            object.__setattr__(
                self, position.field_name, _as_non_negative(value, label=position.value)
            )

    @classmethod
    def from_sequence(cls, values: Sequence[object]) -> "TorqueProfile":
        """Build a profile from a legacy ``[BTO, RTO, ETO, ETC, RTC, BTC]`` array.

        Raises:
            ValueError: If the sequence does not hold exactly six valid torques.
        """
        values = list(values)
        if len(values) != len(POSITIONS):
            raise ValueError(
                f"Torque curve must contain {len(POSITIONS)} values, got {len(values)}"
            )
        return cls(*values)  # type: ignore[arg-type]

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "TorqueProfile":
        """Build a profile from a mapping keyed by position name (any case)."""
        lowered = {str(key).strip().lower(): value for key, value in values.items()}
        missing = [position.value for position in POSITIONS if position.field_name not in lowered]
        if missing:
            raise ValueError(f"Torque mapping missing positions: {missing}")
        return cls(**{position.field_name: lowered[position.field_name] for position in POSITIONS})

    def value_at(self, position: TorquePosition | str) -> float:
        """Return the torque at ``position``."""
        if not isinstance(position, TorquePosition):
            position = TorquePosition(position.strip().upper())
        return getattr(self, position.field_name)

    def as_tuple(self) -> tuple[float, ...]:
        """Return the torques in legacy array order."""
        return tuple(getattr(self, position.field_name) for position in POSITIONS)

    def as_dict(self) -> dict[str, float]:
        return {position.field_name: getattr(self, position.field_name) for position in POSITIONS}


def _coerce_curve(values: Iterable[object], *, owner: str) -> tuple[float, ...]:
    curve: list[float] = []
    for index, value in enumerate(values):
        try:
            curve.append(_as_non_negative(value, label=f"{owner} torque #{index}"))
        except ValueError as exc:
            raise CatalogError(str(exc)) from exc
    return tuple(curve)


@dataclass(frozen=True, slots=True)
class ActuatorRecord:
    """A purchasable actuator and its output torque curve(s).

    Args:
        id: Unique identifier within a catalog. Empty for drafts that have
            not been added to a catalog yet.
        model: Model designation shown to the user.
        price: Unit price in the catalog currency.
        torque_curve: Flat six-point curve in legacy array order.
        pressure_curves: Mapping of air-pressure level to a six-point curve,
            for actuators whose output depends on supply pressure.

    Curves of the wrong length are kept as loaded; :meth:`profile_for`
    reports them as unusable rather than rejecting the whole record.
    """

    id: str
    model: str
    price: float
    torque_curve: tuple[float, ...] | None = None
    pressure_curves: Mapping[str, tuple[float, ...]] | None = field(default=None, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id).strip())
        object.__setattr__(self, "model", str(self.model).strip())
        label = self.model or self.id or "actuator"
        try:
            price = _as_non_negative(self.price, label=f"{label} price")
        except ValueError as exc:
            raise CatalogError(str(exc)) from exc
        object.__setattr__(self, "price", price)
        if self.torque_curve is not None:
            object.__setattr__(self, "torque_curve", _coerce_curve(self.torque_curve, owner=label))
        if self.pressure_curves is not None:
            curves = {
                normalise_pressure_level(level): _coerce_curve(values, owner=f"{label} @ {level}")
                for level, values in self.pressure_curves.items()
            }
            object.__setattr__(self, "pressure_curves", curves)

    @property
    def pressure_aware(self) -> bool:
        """Whether the torque output is tabulated per supply pressure."""
        return bool(self.pressure_curves)

    def profile_for(self, pressure_level: object | None = None) -> TorqueProfile | None:
        """Return the usable torque profile for ``pressure_level``.

        Pressure-tabulated records only answer for a level they list; flat
        records answer for any level. ``None`` means the record cannot be
        considered for that pressure.
        """
        if self.pressure_curves:
            if pressure_level is None:
                return None
            curve = self.pressure_curves.get(normalise_pressure_level(pressure_level))
        else:
            curve = self.torque_curve
        if curve is None or len(curve) != len(POSITIONS):
            return None
        return TorqueProfile.from_sequence(curve)


@dataclass(frozen=True, slots=True)
class Accessory:
    """Optional add-on priced once per sized valve."""

    id: str
    name: str
    price: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id).strip())
        object.__setattr__(self, "name", str(self.name).strip())
        if not self.id:
            raise CatalogError("Accessory id must not be empty")
        try:
            price = _as_non_negative(self.price, label=f"Accessory '{self.id}' price")
        except ValueError as exc:
            raise CatalogError(str(exc)) from exc
        object.__setattr__(self, "price", price)


def validate_record(record: ActuatorRecord) -> ActuatorRecord:
    """Strict checks applied when a record is added or edited.

    Raises:
        CatalogError: If the record lacks an id or model, carries no torque
            data, mixes flat and pressure curves, or has a curve that is not
            exactly six values long.
    """
    if not record.id:
        raise CatalogError("Actuator id must not be empty")
    if not record.model:
        raise CatalogError(f"Actuator '{record.id}' must have a model name")
    if record.torque_curve is None and not record.pressure_curves:
        raise CatalogError(f"Actuator '{record.model}' has no torque curve")
    if record.torque_curve is not None and record.pressure_curves:
        raise CatalogError(
            f"Actuator '{record.model}' defines both a flat curve and pressure curves"
        )
    curves: dict[str, tuple[float, ...]] = {}
    if record.torque_curve is not None:
        curves["flat"] = record.torque_curve
    curves.update(record.pressure_curves or {})
    for level, curve in curves.items():
        if len(curve) != len(POSITIONS):
            raise CatalogError(
                f"Actuator '{record.model}' curve '{level}' must contain "
                f"{len(POSITIONS)} values, got {len(curve)}"
            )
    return record


def id_sort_key(record_id: str) -> tuple[int, int, str]:
    if record_id.isdecimal():
        return (0, int(record_id), record_id)
    return (1, 0, record_id)


@dataclass(frozen=True, slots=True)
class ActuatorCatalog:
    """Immutable snapshot of the actuator catalog and accessory list.

    Editing methods return a new snapshot; callers hand the current snapshot
    to each sizing call.
    """

    records: tuple[ActuatorRecord, ...] = ()
    accessories: tuple[Accessory, ...] = ()

    def __post_init__(self) -> None:
        records = tuple(self.records)
        accessories = tuple(self.accessories)
        _reject_duplicates((record.id for record in records), kind="actuator")
        _reject_duplicates((accessory.id for accessory in accessories), kind="accessory")
        object.__setattr__(self, "records", records)
        object.__setattr__(self, "accessories", accessories)

    def __iter__(self) -> Iterator[ActuatorRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def get(self, record_id: str) -> ActuatorRecord:
        """Return the record with ``record_id``.

        Raises:
            CatalogError: If no record has that id.
        """
        for record in self.records:
            if record.id == str(record_id):
                return record
        raise CatalogError(f"Unknown actuator id '{record_id}'")

    def accessory(self, accessory_id: str) -> Accessory:
        """Return the accessory with ``accessory_id``.

        Raises:
            CatalogError: If no accessory has that id.
        """
        for accessory in self.accessories:
            if accessory.id == str(accessory_id).strip():
                return accessory
        raise CatalogError(f"Unknown accessory id '{accessory_id}'")

    def pressure_levels(self) -> tuple[str, ...]:
        """Return every pressure level tabulated by at least one record."""
        levels: set[str] = set()
        for record in self.records:
            levels.update(record.pressure_curves or {})
        return tuple(sorted(levels, key=_pressure_sort_key))

    def next_id(self) -> str:
        """Return the next free numeric id."""
        numeric = [int(record.id) for record in self.records if record.id.isdecimal()]
        return str(max(numeric, default=0) + 1)

    def add(self, record: ActuatorRecord) -> "ActuatorCatalog":
        """Return a catalog with ``record`` appended, assigning an id if needed."""
        if not record.id:
            record = dataclasses.replace(record, id=self.next_id())
        validate_record(record)
        if any(existing.id == record.id for existing in self.records):
            raise CatalogError(f"Actuator id '{record.id}' already exists")
        LOGGER.debug("Adding actuator %s (%s)", record.id, record.model)
        return dataclasses.replace(self, records=self.records + (record,))

    def replace(self, record: ActuatorRecord) -> "ActuatorCatalog":
        """Return a catalog where the record sharing ``record.id`` is swapped out."""
        validate_record(record)
        self.get(record.id)
        records = tuple(record if existing.id == record.id else existing for existing in self.records)
        return dataclasses.replace(self, records=records)

    def remove(self, record_id: str) -> "ActuatorCatalog":
        """Return a catalog without the record ``record_id``."""
        self.get(record_id)
        records = tuple(record for record in self.records if record.id != str(record_id))
        return dataclasses.replace(self, records=records)

    def sorted_by_id(self) -> tuple[ActuatorRecord, ...]:
        return tuple(sorted(self.records, key=lambda record: id_sort_key(record.id)))


def _pressure_sort_key(level: str) -> tuple[int, float, str]:
    try:
        return (0, float(level), level)
    except ValueError:
        return (1, 0.0, level)


def _reject_duplicates(ids: Iterable[str], *, kind: str) -> None:
    seen: set[str] = set()
    for item in ids:
        if item and item in seen:
            raise CatalogError(f"Duplicate {kind} id '{item}'")
        seen.add(item)
