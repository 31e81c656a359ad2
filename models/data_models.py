"""
data_models.py - Core Data Structures
======================================

Data models for roster flights, duty cycles, FTL results and settings.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any
from enum import Enum


# ============================================================================
# ENUMS
# ============================================================================

class CrewType(Enum):
    """Crew category keying the FTL limit tables"""
    TECH = "tech"      # Flight deck (post-flight duty depends on aircraft group)
    CABIN = "cabin"    # Cabin crew (fixed post-flight duty)


class AcclimatizationState(Enum):
    """Acclimatization state selecting the limit table family"""
    ACCLIMATIZED = "acclimatized"
    NON_ACCLIMATIZED = "non_acclimatized"


class RestRule(Enum):
    """
    Non-acclimatized limit tables are keyed by the rest taken before duty.
    Values are the exact keys used in ftl-limits.json.
    """
    LEQ18_OR_GEQ30 = "rest_period_leq18_or_geq30"        # <=18h or >=30h rest
    BETWEEN_18_AND_30 = "rest_period_18_01_to_29_59"     # 18:01 - 29:59 rest


# ============================================================================
# RESULTS
# ============================================================================

@dataclass(frozen=True)
class FtlResult:
    """FTL data attached to the last flight of a closed duty cycle"""
    limit_hours: float
    latest_arrival_time: str       # "HH:MM", local to duty start
    sector_count: int
    duty_start_time: str           # Full duty start timestamp, echoed
    calculated_at: datetime        # UTC

    def to_dict(self) -> Dict[str, Any]:
        return {
            'limitHours': self.limit_hours,
            'latestArrivalTime': self.latest_arrival_time,
            'sectorCount': self.sector_count,
            'dutyStartTime': self.duty_start_time,
            'calculatedAt': self.calculated_at.isoformat(),
        }


# ============================================================================
# ROSTER STRUCTURES
# ============================================================================

@dataclass
class Flight:
    """
    Single roster line as produced by the roster parser.

    duty_start / duty_end carry "YYYY-MM-DD HH:MM" timestamps and mark
    the first and last flight of a duty cycle. Flights in between carry
    neither.
    """
    duty_start: Optional[str] = None
    duty_end: Optional[str] = None
    aircraft: Optional[str] = None       # e.g. "B77W", "A320"
    destination_gmt: Optional[str] = None  # e.g. "+04:00" (passthrough)
    flight_number: Optional[str] = None
    date: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None

    ftl_data: Optional[FtlResult] = None

    # Roster key -> attribute
    _KEY_MAP = {
        'dutyStart': 'duty_start',
        'dutyEnd': 'duty_end',
        'aircraft': 'aircraft',
        'destinationGMT': 'destination_gmt',
        'flight': 'flight_number',
        'flightNumber': 'flight_number',
        'date': 'date',
        'origin': 'origin',
        'destination': 'destination',
    }

    @property
    def starts_duty(self) -> bool:
        return bool(self.duty_start)

    @property
    def ends_duty(self) -> bool:
        return bool(self.duty_end)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Flight':
        """Build from a roster record (camelCase or snake_case keys)"""
        kwargs = {}
        for key, value in data.items():
            attr = cls._KEY_MAP.get(key, key)
            if attr in cls.__dataclass_fields__ and attr != 'ftl_data':
                kwargs[attr] = value if value != '' else None
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'flight': self.flight_number,
            'date': self.date,
            'origin': self.origin,
            'destination': self.destination,
            'dutyStart': self.duty_start,
            'dutyEnd': self.duty_end,
            'aircraft': self.aircraft,
            'destinationGMT': self.destination_gmt,
            'ftlData': self.ftl_data.to_dict() if self.ftl_data else None,
        }


@dataclass
class DutyCycle:
    """Contiguous flights from a duty start flight through a duty end flight"""
    flights: List[Flight] = field(default_factory=list)
    rest_hours: Optional[float] = None   # Rest since previous closed cycle

    @property
    def start_flight(self) -> Flight:
        return self.flights[0]

    @property
    def end_flight(self) -> Flight:
        return self.flights[-1]

    @property
    def sector_count(self) -> int:
        return len(self.flights)

    @property
    def duty_start(self) -> Optional[str]:
        return self.start_flight.duty_start

    @property
    def duty_end(self) -> Optional[str]:
        return self.end_flight.duty_end


# ============================================================================
# CONFIGURATION & SETTINGS
# ============================================================================

@dataclass
class FtlConfiguration:
    """
    Regulatory tables consumed by the calculation.

    limits layout:
        limits['acclimatized'][crew_type][time_band] -> [hours per sector]
        limits['non_acclimatized'][rest_rule][crew_type] -> [hours per sector]
    Index 0 is a single-sector duty.
    """
    stations: Dict[str, Any] = field(default_factory=dict)
    aircraft_groups: Dict[str, str] = field(default_factory=dict)
    limits: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_loaded(self) -> bool:
        return bool(self.limits)


@dataclass
class FtlSettings:
    """Crew type and acclimatization selected by the caller"""
    crew_type: CrewType = CrewType.TECH
    acclimatization: AcclimatizationState = AcclimatizationState.ACCLIMATIZED

    def __post_init__(self):
        # Accept the raw values coming from forms / JSON
        if not isinstance(self.crew_type, CrewType):
            self.crew_type = CrewType(self.crew_type)
        if not isinstance(self.acclimatization, AcclimatizationState):
            self.acclimatization = AcclimatizationState(self.acclimatization)
