# flight_list_parser.py - Roster flight list reader

"""
Flight List Parser - Read roster flights with duty markers

Supports:
- JSON exports from the roster parser (list of flight objects, or
  {"flights": [...]})
- CSV exports with dutyStart / dutyEnd / aircraft / destinationGMT columns

Flights keep their file order; the duty cycle segmentation depends on it.
"""

from pathlib import Path
from typing import Any, Dict, List, Union
import json
import logging

import pandas as pd

from models.data_models import Flight

logger = logging.getLogger(__name__)


FTL_TABLE_COLUMNS = [
    'Flight', 'Date', 'Origin', 'Destination', 'Aircraft',
    'Duty Start', 'Duty End', 'FTL Limit (hrs)', 'Latest Arrival', 'Sectors',
]


class FlightListParser:
    """Parse roster flight lists into Flight records"""

    def parse_records(self, records: List[Dict[str, Any]]) -> List[Flight]:
        flights = []
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValueError(f"Flight #{i} is not an object: {record!r}")
            flights.append(Flight.from_dict(record))
        return flights

    def parse_json(self, source: Union[str, Path, List[Dict[str, Any]], Dict[str, Any]]) -> List[Flight]:
        """Parse a JSON file path or already-decoded JSON data"""
        if isinstance(source, (str, Path)):
            with open(source, encoding='utf-8') as fh:
                data = json.load(fh)
        else:
            data = source

        if isinstance(data, dict):
            data = data.get('flights', [])
        if not isinstance(data, list):
            raise ValueError("Flight list JSON must be a list or contain a 'flights' list")

        flights = self.parse_records(data)
        logger.info(f"Parsed {len(flights)} flights from JSON")
        return flights

    def parse_csv(self, csv_path: Union[str, Path]) -> List[Flight]:
        """Parse CSV roster export; blank cells become None"""
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        df.columns = [c.strip() for c in df.columns]

        if 'dutyStart' not in df.columns and 'dutyEnd' not in df.columns:
            raise ValueError("CSV roster needs dutyStart / dutyEnd columns")

        records = []
        for _, row in df.iterrows():
            records.append({col: row[col].strip() for col in df.columns})

        flights = self.parse_records(records)
        logger.info(f"Parsed {len(flights)} flights from {csv_path}")
        return flights


def flights_to_dataframe(flights: List[Flight]) -> pd.DataFrame:
    """
    Tabular roster view with the FTL columns.

    FTL cells are blank except on the last flight of each calculated
    duty cycle.
    """
    rows = []
    for flight in flights:
        ftl = flight.ftl_data
        rows.append({
            'Flight': flight.flight_number or '',
            'Date': flight.date or '',
            'Origin': flight.origin or '',
            'Destination': flight.destination or '',
            'Aircraft': flight.aircraft or '',
            'Duty Start': flight.duty_start or '',
            'Duty End': flight.duty_end or '',
            'FTL Limit (hrs)': f"{ftl.limit_hours:.2f}" if ftl else '',
            'Latest Arrival': ftl.latest_arrival_time if ftl else '',
            'Sectors': str(ftl.sector_count) if ftl else '',
        })
    return pd.DataFrame(rows, columns=FTL_TABLE_COLUMNS)
