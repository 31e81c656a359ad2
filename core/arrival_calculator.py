"""
Latest Arrival Calculation
==========================

Latest arrival = duty start + FTL limit - post-flight duty,
wrapped onto a 24h local clock.
"""

from enum import Enum
from typing import Dict, Optional

from models.data_models import CrewType
from core.parameters import FTLParameters
from core.timestamps import clock_to_minutes, minutes_to_clock


class LatestArrivalCalculator:
    """Convert an FTL limit into a latest on-blocks clock time"""

    def __init__(self, aircraft_groups: Dict[str, str] = None, params: FTLParameters = None):
        self.aircraft_groups = aircraft_groups or {}
        self.params = params or FTLParameters()

    def get_aircraft_group(self, aircraft_code: Optional[str]) -> Optional[str]:
        """Group of the aircraft type prefix ("B77W" -> "B77")"""
        if not aircraft_code:
            return None
        prefix = aircraft_code.strip()[:self.params.aircraft_type_prefix_length]
        return self.aircraft_groups.get(prefix)

    def get_post_flight_minutes(self, crew_type, aircraft_code: Optional[str] = None) -> int:
        """
        Post-flight duty allowance.

        Only tech crew depend on the aircraft: widebody types get the
        longer allowance. Cabin crew always get the default.
        """
        crew_key = crew_type.value if isinstance(crew_type, Enum) else crew_type
        if crew_key == CrewType.TECH.value and aircraft_code:
            if self.get_aircraft_group(aircraft_code) == self.params.widebody_group:
                return self.params.widebody_post_flight_minutes
        return self.params.default_post_flight_minutes

    def calculate_latest_arrival(
        self,
        duty_start_time: str,
        limit_hours: float,
        crew_type,
        aircraft_code: Optional[str] = None,
        destination_gmt: Optional[str] = None
    ) -> str:
        """
        Latest arrival as "HH:MM" in the duty start's local clock.

        destination_gmt is accepted for the caller's convenience only;
        no timezone conversion is applied.
        """
        start_minutes = clock_to_minutes(duty_start_time)
        latest_duty_end = start_minutes + int(round(limit_hours * 60))
        post_flight = self.get_post_flight_minutes(crew_type, aircraft_code)

        return minutes_to_clock(latest_duty_end - post_flight)
