"""
FTL Configuration Loader
========================

Loads the three regulatory tables from a directory:
- stations.json         station -> details (not used by the calculation)
- aircraft-groups.json  aircraft type prefix -> group ("Widebody", ...)
- ftl-limits.json       nested limit tables

Files are read in parallel; every file must load before any calculation
starts. There is no retry: any failure raises ConfigurationUnavailable.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Union
import json
import logging

from models.data_models import FtlConfiguration
from core.errors import ConfigurationUnavailable

logger = logging.getLogger(__name__)


STATIONS_FILE = 'stations.json'
AIRCRAFT_GROUPS_FILE = 'aircraft-groups.json'
LIMITS_FILE = 'ftl-limits.json'


class FTLConfigurationLoader:
    """Read stations, aircraft groups and FTL limits from JSON files"""

    def __init__(self, config_dir: Union[str, Path]):
        self.config_dir = Path(config_dir)

    def _read_table(self, filename: str) -> Dict[str, Any]:
        path = self.config_dir / filename
        try:
            with open(path, encoding='utf-8') as fh:
                data = json.load(fh)
        except OSError as e:
            raise ConfigurationUnavailable(f"Cannot read {path}: {e}", source=filename) from e
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            raise ConfigurationUnavailable(f"Invalid JSON in {path}: {e}", source=filename) from e

        if not isinstance(data, dict):
            raise ConfigurationUnavailable(
                f"{path} must contain a JSON object, got {type(data).__name__}",
                source=filename,
            )
        return data

    def load(self) -> FtlConfiguration:
        logger.info(f"Loading FTL configuration files from {self.config_dir}...")

        try:
            with ThreadPoolExecutor(max_workers=3) as executor:
                f_stations = executor.submit(self._read_table, STATIONS_FILE)
                f_groups = executor.submit(self._read_table, AIRCRAFT_GROUPS_FILE)
                f_limits = executor.submit(self._read_table, LIMITS_FILE)

                stations = f_stations.result()
                aircraft_groups = f_groups.result()
                limits = f_limits.result()
        except ConfigurationUnavailable as e:
            logger.error(f"Failed to load FTL configuration: {e}")
            raise

        logger.info(
            f"FTL configuration loaded: {len(stations)} stations, "
            f"{len(aircraft_groups)} aircraft groups, {len(limits)} limit families"
        )
        return FtlConfiguration(
            stations=stations,
            aircraft_groups=aircraft_groups,
            limits=limits,
        )


def load_ftl_configuration(config_dir: Union[str, Path]) -> FtlConfiguration:
    return FTLConfigurationLoader(config_dir).load()
