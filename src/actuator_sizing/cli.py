"""Command-line interface for sizing valve actuators."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Sequence

from .catalog import ActuatorCatalog, catalog_frame, default_catalog, load_catalog
from .config import POLICIES, SizingSettings, default_settings, get_policy, load_settings
from .sizing import SizingReport, format_report, size_valves, write_report_csv
from .utils.logging import configure_logging

LOGGER = logging.getLogger("actuator_sizing.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the sizing tool."""
    parser = argparse.ArgumentParser(description="Size valve actuators from a catalog")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--trace-matcher",
        action="store_true",
        help="With --verbose, also log every candidate the matcher skips",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    size = subparsers.add_parser("size", help="Select and price actuators for valve torques")
    size.add_argument(
        "torques",
        nargs="+",
        help="Break-to-open torque of each valve in Nm",
    )
    _add_catalog_argument(size)
    size.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Path to a settings YAML; packaged defaults when omitted",
    )
    size.add_argument(
        "--pressure",
        type=str,
        default=None,
        help="Supply pressure level in bar (e.g. '5.5')",
    )
    size.add_argument(
        "--accessory",
        dest="accessories",
        action="append",
        default=[],
        help="Accessory id fitted to every valve; repeat for several",
    )
    size.add_argument(
        "--policy",
        choices=sorted(POLICIES),
        default=None,
        help="Override the safety-factor policy from the settings file",
    )
    size.add_argument(
        "--details",
        action="store_true",
        help="Print the per-position torque analysis of each match",
    )
    size.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Write results (and <name>_pricing.csv) to this path",
    )

    listing = subparsers.add_parser("catalog", help="List catalog actuators and accessories")
    _add_catalog_argument(listing)
    return parser.parse_args(argv)


def _add_catalog_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Catalog file (YAML, JSON or CSV); packaged catalog when omitted",
    )


def _load_catalog(path: Path | None) -> ActuatorCatalog:
    if path is None:
        return default_catalog()
    return load_catalog(path.expanduser().resolve())


def _load_settings(path: Path | None, policy_name: str | None) -> SizingSettings:
    settings = default_settings() if path is None else load_settings(path.expanduser().resolve())
    if policy_name is not None:
        settings = dataclasses.replace(settings, policy=get_policy(policy_name))
    return settings


def run_sizing(
    *,
    torques: Sequence[str],
    catalog_path: Path | None,
    settings_path: Path | None,
    pressure_level: str | None,
    accessory_ids: Sequence[str],
    policy_name: str | None,
    details: bool,
    csv_path: Path | None,
) -> SizingReport:
    """Load inputs, size the valves and print the report."""
    catalog = _load_catalog(catalog_path)
    settings = _load_settings(settings_path, policy_name)
    report = size_valves(
        torques,
        catalog,
        pressure_level=pressure_level,
        accessory_ids=accessory_ids,
        settings=settings,
    )
    print(format_report(report, details=details))
    if csv_path is not None:
        write_report_csv(report, csv_path.expanduser())
    return report


def list_catalog(catalog_path: Path | None) -> ActuatorCatalog:
    """Print the actuators and accessories of a catalog."""
    catalog = _load_catalog(catalog_path)
    print(catalog_frame(catalog).to_string(index=False, na_rep="-"))
    if catalog.accessories:
        print()
        for accessory in catalog.accessories:
            print(f"{accessory.id:<8} {accessory.name:<32} {accessory.price:>10,.2f}")
    return catalog


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the sizing CLI."""
    args = parse_args(argv)
    configure_logging(
        logging.DEBUG if args.verbose else logging.INFO,
        quiet_matcher=not args.trace_matcher,
    )

    try:
        if args.command == "catalog":
            list_catalog(args.catalog)
        else:
            report = run_sizing(
                torques=args.torques,
                catalog_path=args.catalog,
                settings_path=args.settings,
                pressure_level=args.pressure,
                accessory_ids=args.accessories,
                policy_name=args.policy,
                details=args.details,
                csv_path=args.csv,
            )
            if report.matched_count < len(report.valves):
                LOGGER.warning(
                    "%d of %d valve(s) could not be sized",
                    len(report.valves) - report.matched_count,
                    len(report.valves),
                )
    except FileNotFoundError as exc:
        LOGGER.error("File not found: %s", exc)
        return 1
    except ValueError as exc:
        LOGGER.error("Invalid request: %s", exc)
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
