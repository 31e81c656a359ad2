"""
Core FTL Calculation Components
===============================

Main exports for duty cycle segmentation and FTL limit resolution.
"""

from core.parameters import FTLParameters
from core.errors import FTLError, ConfigurationUnavailable, LimitNotFound
from core.reporting import FTLEvent, LoggingReporter, CollectingReporter

from core.limit_resolver import (
    FTLLimitResolver,
    get_local_start_time_band,
    select_rest_rule,
    limit_from_table,
)
from core.arrival_calculator import LatestArrivalCalculator
from core.duty_cycles import (
    DutyCycleSegmenter,
    calculate_rest_hours,
    calculate_ftl_for_flights,
)

__all__ = [
    # Parameters
    'FTLParameters',
    # Errors & reporting
    'FTLError',
    'ConfigurationUnavailable',
    'LimitNotFound',
    'FTLEvent',
    'LoggingReporter',
    'CollectingReporter',
    # Limit resolution
    'FTLLimitResolver',
    'get_local_start_time_band',
    'select_rest_rule',
    'limit_from_table',
    # Latest arrival
    'LatestArrivalCalculator',
    # Duty cycles
    'DutyCycleSegmenter',
    'calculate_rest_hours',
    'calculate_ftl_for_flights',
]
