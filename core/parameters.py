"""
Configuration & Parameters for FTL Calculation
==============================================

Fixed regulatory definitions used by the limit resolver and the
latest-arrival calculator:
- Local start time bands for acclimatized crew
- Rest-period thresholds selecting the non-acclimatized table
- Post-flight duty allowances per aircraft group
"""

from dataclasses import dataclass, field
from typing import List, Tuple


MINUTES_PER_DAY = 24 * 60


@dataclass
class FTLParameters:
    """Acclimatized / non-acclimatized FDP ruleset"""

    # Local start time bands: (start_minute, end_minute, label), half-open.
    # Anything not covered falls into the overnight band.
    time_bands: List[Tuple[int, int, str]] = field(default_factory=lambda: [
        (6 * 60, 8 * 60, '0600-0759'),
        (8 * 60, 13 * 60, '0800-1259'),
        (13 * 60, 18 * 60, '1300-1759'),
        (18 * 60, 22 * 60, '1800-2159'),
    ])
    overnight_band: str = '2200-0559'

    # Non-acclimatized rest rule thresholds (hours)
    short_rest_max_hours: float = 18.0   # rest <= 18h -> restrictive table
    long_rest_min_hours: float = 30.0    # rest >= 30h -> restrictive table

    # Non-acclimatized tables only cover up to 4 sectors
    non_acclimatized_max_sectors: int = 4

    # Post-flight duty (minutes)
    default_post_flight_minutes: int = 30
    widebody_post_flight_minutes: int = 45
    widebody_group: str = 'Widebody'

    # Aircraft codes are grouped by their type prefix ("B77W" -> "B77")
    aircraft_type_prefix_length: int = 3

    def __post_init__(self):
        """Validate ruleset"""

        # Bands must be ordered, inside one day and non-overlapping
        previous_end = 0
        for start, end, label in self.time_bands:
            assert 0 <= start < end <= MINUTES_PER_DAY, \
                f"Time band {label} outside the day: {start}-{end}"
            assert start >= previous_end, \
                f"Time band {label} overlaps the previous band"
            previous_end = end

        assert 0 < self.short_rest_max_hours < self.long_rest_min_hours, \
            f"Rest thresholds inverted: {self.short_rest_max_hours} / {self.long_rest_min_hours}"
        assert self.non_acclimatized_max_sectors >= 1, \
            f"Sector cap must be positive: {self.non_acclimatized_max_sectors}"
        assert self.default_post_flight_minutes >= 0
        assert self.widebody_post_flight_minutes >= 0
        assert self.aircraft_type_prefix_length > 0

    @property
    def band_labels(self) -> List[str]:
        return [label for _, _, label in self.time_bands] + [self.overnight_band]

    @classmethod
    def default_config(cls):
        return cls()
