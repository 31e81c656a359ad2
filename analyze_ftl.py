#!/usr/bin/env python3
"""
FTL Roster Analyzer - Command Line Interface
============================================

FTL limits and latest arrival times for a parsed roster flight list.
For the HTTP interface, run: uvicorn api.api_server:app

Usage:
    python analyze_ftl.py flights.json --crew-type tech --acclimatization acclimatized
    python analyze_ftl.py flights.csv --config-dir data/
"""

from pathlib import Path
import argparse
import logging
import sys

from core import ConfigurationUnavailable, calculate_ftl_for_flights
from models.data_models import AcclimatizationState, CrewType, FtlSettings
from parsers.config_loader import load_ftl_configuration
from parsers.flight_list_parser import FlightListParser, flights_to_dataframe

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent / 'data'


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calculate FTL data for roster duty cycles")
    parser.add_argument('flights', help="Flight list (.json or .csv)")
    parser.add_argument('--crew-type', default=CrewType.TECH.value,
                        choices=[c.value for c in CrewType])
    parser.add_argument('--acclimatization', default=AcclimatizationState.ACCLIMATIZED.value,
                        choices=[a.value for a in AcclimatizationState])
    parser.add_argument('--config-dir', default=str(DEFAULT_CONFIG_DIR),
                        help="Directory with stations.json, aircraft-groups.json, ftl-limits.json")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log every resolved limit")
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        configuration = load_ftl_configuration(args.config_dir)
    except ConfigurationUnavailable as e:
        print(f"✗ FTL data failed to load: {e}", file=sys.stderr)
        return 2

    parser = FlightListParser()
    try:
        if Path(args.flights).suffix.lower() == '.csv':
            flights = parser.parse_csv(args.flights)
        else:
            flights = parser.parse_json(args.flights)
    except (OSError, ValueError) as e:
        print(f"✗ Flight list could not be read: {e}", file=sys.stderr)
        return 1

    settings = FtlSettings(crew_type=args.crew_type, acclimatization=args.acclimatization)
    calculate_ftl_for_flights(flights, configuration, settings)

    print("=" * 70)
    print(f"FTL ANALYSIS - {settings.crew_type.value}, {settings.acclimatization.value}")
    print("=" * 70)
    print(flights_to_dataframe(flights).to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
