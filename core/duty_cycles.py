"""
Duty Cycle Segmentation & FTL Calculation
=========================================

Walks the roster flights in order, groups them into duty cycles and
attaches an FtlResult to the last flight of every closed cycle.

Marker handling:
- dutyStart opens a new cycle; an unclosed cycle is dropped (last start wins)
- unmarked flights join the open cycle, or are skipped when none is open
- dutyEnd closes the open cycle; a dutyEnd without an open cycle is ignored
- a cycle still open at the end of the roster produces nothing
"""

from datetime import datetime
from typing import Iterator, List, Optional
import logging
import pytz

from models.data_models import DutyCycle, Flight, FtlConfiguration, FtlResult, FtlSettings
from core.arrival_calculator import LatestArrivalCalculator
from core.limit_resolver import FTLLimitResolver
from core.parameters import FTLParameters
from core.reporting import FTLEvent, LoggingReporter
from core.timestamps import parse_duty_timestamp, time_of_day

logger = logging.getLogger(__name__)


def calculate_rest_hours(previous_duty_end: Optional[str],
                         current_duty_start: Optional[str]) -> Optional[float]:
    """Hours between two duty markers; None when either is missing or unusable"""
    end = parse_duty_timestamp(previous_duty_end)
    start = parse_duty_timestamp(current_duty_start)
    if end is None or start is None:
        return None

    try:
        return (start - end).total_seconds() / 3600
    except TypeError:
        # One marker carries an offset, the other does not
        return None


class DutyCycleSegmenter:
    """Segment a roster into duty cycles and compute their FTL data"""

    def __init__(self, configuration: FtlConfiguration, settings: FtlSettings,
                 reporter=None, params: FTLParameters = None):
        self.configuration = configuration
        self.settings = settings
        self.params = params or FTLParameters()
        self.reporter = reporter or LoggingReporter(logger)

        self.resolver = FTLLimitResolver(configuration, self.reporter, self.params)
        self.arrival_calculator = LatestArrivalCalculator(
            configuration.aircraft_groups, self.params
        )

    def _report(self, level: str, message: str, **context) -> None:
        self.reporter.report(FTLEvent(level, message, context))

    def iter_duty_cycles(self, flights: List[Flight]) -> Iterator[DutyCycle]:
        """
        Yield closed duty cycles in roster order.

        Rest hours are measured from the previous *closed* cycle's duty
        end, no matter how many unmarked flights lie in between.
        """
        current: Optional[List[Flight]] = None
        previous_duty_end: Optional[str] = None

        for index, flight in enumerate(flights):
            if flight.starts_duty:
                if current:
                    self._report(
                        'debug',
                        f"Duty start at flight {index} replaces an unclosed cycle "
                        f"of {len(current)} flight(s)",
                        flight_index=index,
                    )
                current = [flight]
            elif current is not None:
                current.append(flight)

            if not flight.ends_duty:
                continue

            if current is None:
                self._report(
                    'debug',
                    f"Duty end at flight {index} without an open duty cycle ignored",
                    flight_index=index,
                )
                continue

            cycle = DutyCycle(
                flights=current,
                rest_hours=calculate_rest_hours(previous_duty_end, current[0].duty_start),
            )
            previous_duty_end = flight.duty_end
            current = None
            yield cycle

    def calculate_cycle(self, cycle: DutyCycle) -> Optional[FtlResult]:
        """FtlResult for one closed cycle, or None if it cannot be resolved"""
        duty_start_time = time_of_day(cycle.duty_start)
        if duty_start_time is None:
            self._report(
                'warning',
                f"Unreadable duty start {cycle.duty_start!r}, duty cycle skipped",
                duty_start=cycle.duty_start,
            )
            return None

        limit_hours = self.resolver.resolve_limit(
            self.settings.crew_type,
            self.settings.acclimatization,
            duty_start_time,
            cycle.sector_count,
            cycle.rest_hours,
        )
        if limit_hours is None:
            return None

        last_flight = cycle.end_flight
        latest_arrival = self.arrival_calculator.calculate_latest_arrival(
            duty_start_time,
            limit_hours,
            self.settings.crew_type,
            last_flight.aircraft,
            last_flight.destination_gmt,
        )

        return FtlResult(
            limit_hours=limit_hours,
            latest_arrival_time=latest_arrival,
            sector_count=cycle.sector_count,
            duty_start_time=cycle.duty_start,
            calculated_at=datetime.now(pytz.utc),
        )

    def calculate(self, flights: List[Flight]) -> List[Flight]:
        """Annotate terminal flights in place and return the same list"""
        for cycle in self.iter_duty_cycles(flights):
            result = self.calculate_cycle(cycle)
            if result is None:
                continue

            cycle.end_flight.ftl_data = result
            self._report(
                'info',
                f"Duty cycle {cycle.duty_start}: {result.sector_count} sectors, "
                f"FTL limit: {result.limit_hours}h, Latest arrival: {result.latest_arrival_time}",
                duty_start=cycle.duty_start,
                sector_count=result.sector_count,
                limit_hours=result.limit_hours,
                latest_arrival_time=result.latest_arrival_time,
                rest_hours=cycle.rest_hours,
            )

        return flights


def calculate_ftl_for_flights(flights: List[Flight], configuration: FtlConfiguration,
                              settings: FtlSettings, reporter=None,
                              params: FTLParameters = None) -> List[Flight]:
    """Main entry point: FTL data for every duty cycle in the roster"""
    logger.info(f"Calculating FTL for {len(flights)} flights "
                f"({settings.crew_type.value}, {settings.acclimatization.value})")
    segmenter = DutyCycleSegmenter(configuration, settings, reporter, params)
    return segmenter.calculate(flights)
