"""
FTL Limit Resolution
====================

Maximum duty time lookup from the regulatory limit tables.

Acclimatized crew:      limits['acclimatized'][crew_type][time_band]
Non-acclimatized crew:  limits['non_acclimatized'][rest_rule][crew_type]

Each table is a list of hours indexed by sector count (index 0 = 1 sector).
Sector counts beyond the table reuse the last entry.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence
import logging
import math
import numbers

from models.data_models import AcclimatizationState, FtlConfiguration, RestRule
from core.errors import LimitNotFound
from core.parameters import FTLParameters
from core.reporting import FTLEvent, LoggingReporter
from core.timestamps import clock_to_minutes

logger = logging.getLogger(__name__)

_DEFAULT_PARAMS = FTLParameters()


def _key(value) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def get_local_start_time_band(local_time: str, params: FTLParameters = None) -> str:
    """
    Map a local duty start ("HH:MM") to its time band label.

    Bands are half-open; everything from 22:00 to 05:59 is the
    overnight band.
    """
    params = params or _DEFAULT_PARAMS
    total_minutes = clock_to_minutes(local_time)

    for start, end, label in params.time_bands:
        if start <= total_minutes < end:
            return label
    return params.overnight_band


def select_rest_rule(rest_hours: Optional[float], params: FTLParameters = None) -> RestRule:
    """
    Pick the non-acclimatized table from the preceding rest period.

    Unknown rest (no previous duty) gets the more restrictive rule.
    """
    params = params or _DEFAULT_PARAMS
    if rest_hours is None:
        return RestRule.LEQ18_OR_GEQ30
    if rest_hours <= params.short_rest_max_hours or rest_hours >= params.long_rest_min_hours:
        return RestRule.LEQ18_OR_GEQ30
    return RestRule.BETWEEN_18_AND_30


def limit_from_table(table: Sequence[float], sector_count: int) -> float:
    """
    Sector count is 1-indexed; counts past the table use its last entry.

    Raises ValueError when the selected entry is not a number.
    """
    sector_index = max(min(sector_count, len(table)) - 1, 0)
    entry = table[sector_index]
    if isinstance(entry, bool) or not isinstance(entry, numbers.Real) or math.isnan(entry):
        raise ValueError(f"entry {sector_index} is not a number: {entry!r}")
    return float(entry)


class FTLLimitResolver:
    """Resolve the maximum duty hours for one duty cycle"""

    def __init__(self, configuration: FtlConfiguration, reporter=None,
                 params: FTLParameters = None):
        self.configuration = configuration
        self.reporter = reporter or LoggingReporter(logger)
        self.params = params or _DEFAULT_PARAMS

    def get_table_key(self, acclimatization, duty_start_time: str,
                      rest_hours: Optional[float] = None) -> str:
        """Time band (acclimatized) or rest rule (non-acclimatized) selecting the table"""
        if _key(acclimatization) == AcclimatizationState.ACCLIMATIZED.value:
            return get_local_start_time_band(duty_start_time, self.params)
        # Time band does not apply; the preceding rest selects the table
        return select_rest_rule(rest_hours, self.params).value

    def get_sector_count(self, acclimatization, sector_count: int) -> int:
        """Non-acclimatized tables only cover up to the sector cap"""
        if _key(acclimatization) == AcclimatizationState.ACCLIMATIZED.value:
            return sector_count
        return min(sector_count, self.params.non_acclimatized_max_sectors)

    def get_limit_table(self, crew_type, acclimatization, table_key: str) -> List[float]:
        """
        Fetch one limit table.

        table_key is the time band (acclimatized) or the rest rule
        (non-acclimatized). Raises LimitNotFound when any level is missing.
        """
        crew_key = _key(crew_type)
        accl_key = _key(acclimatization)
        limits: Dict[str, Any] = self.configuration.limits or {}

        if accl_key == AcclimatizationState.ACCLIMATIZED.value:
            path = (accl_key, crew_key, table_key)
        else:
            path = (AcclimatizationState.NON_ACCLIMATIZED.value, table_key, crew_key)

        node: Any = limits
        for part in path:
            if not isinstance(node, dict) or part not in node:
                raise LimitNotFound(crew_key, accl_key, table_key)
            node = node[part]

        if not isinstance(node, (list, tuple)) or len(node) == 0:
            raise LimitNotFound(crew_key, accl_key, table_key)
        return list(node)

    def get_limit(self, crew_type, acclimatization, table_key: str, sector_count: int) -> float:
        """Hours for one table entry; LimitNotFound when missing or not a number"""
        table = self.get_limit_table(crew_type, acclimatization, table_key)
        try:
            return limit_from_table(table, sector_count)
        except ValueError as e:
            raise LimitNotFound(_key(crew_type), _key(acclimatization), table_key, str(e)) from e

    def resolve_limit(
        self,
        crew_type,
        acclimatization,
        duty_start_time: str,
        sector_count: int,
        rest_hours: Optional[float] = None
    ) -> Optional[float]:
        """
        Maximum duty hours, or None when no table entry exists.

        Args:
            crew_type: CrewType or its value ("tech", "cabin")
            acclimatization: AcclimatizationState or its value
            duty_start_time: Local duty start, "HH:MM"
            sector_count: Flights in the duty cycle
            rest_hours: Rest since the previous duty (None if unknown)
        """
        accl_key = _key(acclimatization)
        table_key = self.get_table_key(acclimatization, duty_start_time, rest_hours)
        sector_count = self.get_sector_count(acclimatization, sector_count)

        context = {
            'crew_type': _key(crew_type),
            'acclimatization': accl_key,
            'table_key': table_key,
            'duty_start_time': duty_start_time,
            'sector_count': sector_count,
            'rest_hours': rest_hours,
        }

        try:
            limit_hours = self.get_limit(crew_type, acclimatization, table_key, sector_count)
        except LimitNotFound as e:
            self.reporter.report(FTLEvent('warning', str(e), context))
            return None

        self.reporter.report(FTLEvent(
            'info',
            f"FTL Limit: {limit_hours}h for {sector_count} sectors, "
            f"{accl_key}, {table_key}, {duty_start_time}",
            dict(context, limit_hours=limit_hours),
        ))
        return limit_hours
