"""
test_limit_resolver.py
======================

FTL limit lookup:
- Local start time bands
- Non-acclimatized rest rule selection
- Sector indexing, clamping and the 4-sector cap
- Missing tables

Run: python -m pytest tests/test_limit_resolver.py -v
"""

import pytest

from models.data_models import AcclimatizationState, CrewType, FtlConfiguration, RestRule
from core.errors import LimitNotFound
from core.limit_resolver import (
    FTLLimitResolver,
    get_local_start_time_band,
    limit_from_table,
    select_rest_rule,
)
from core.parameters import FTLParameters
from core.reporting import CollectingReporter


# ============================================================================
# HELPERS
# ============================================================================

LIMITS = {
    'acclimatized': {
        'tech': {
            '0600-0759': [13.0, 12.5, 12.0, 11.5],
            '0800-1259': [13.0, 13.0, 12.5, 12.0],
            '1300-1759': [12.5, 12.0, 11.5, 11.0],
            '1800-2159': [11.5, 11.0, 10.5, 10.0],
            '2200-0559': [11.0, 10.5, 9.0, 8.75],
        },
        'cabin': {
            '0600-0759': [14.0, 13.5, 13.0, 12.5],
        },
    },
    'non_acclimatized': {
        'rest_period_leq18_or_geq30': {
            'tech': [11.0, 10.5, 9.0, 8.75, 8.0, 7.5],
        },
        'rest_period_18_01_to_29_59': {
            'tech': [12.0, 11.5, 10.5, 10.0],
            'cabin': [],
        },
    },
}

ALL_BANDS = {'0600-0759', '0800-1259', '1300-1759', '1800-2159', '2200-0559'}


def make_resolver(limits=None):
    reporter = CollectingReporter()
    config = FtlConfiguration(limits=LIMITS if limits is None else limits)
    return FTLLimitResolver(config, reporter), reporter


# ============================================================================
# TIME BANDS
# ============================================================================

class TestTimeBands:

    @pytest.mark.parametrize('clock, band', [
        ('06:00', '0600-0759'),
        ('07:59', '0600-0759'),
        ('08:00', '0800-1259'),
        ('12:59', '0800-1259'),
        ('13:00', '1300-1759'),
        ('17:59', '1300-1759'),
        ('18:00', '1800-2159'),
        ('21:59', '1800-2159'),
        ('22:00', '2200-0559'),
        ('00:00', '2200-0559'),
        ('05:59', '2200-0559'),
    ])
    def test_band_boundaries(self, clock, band):
        assert get_local_start_time_band(clock) == band

    def test_bands_partition_the_day(self):
        """Every minute of the day lands in exactly one of the five bands."""
        counts = {}
        for minute in range(24 * 60):
            clock = f"{minute // 60:02d}:{minute % 60:02d}"
            band = get_local_start_time_band(clock)
            assert band in ALL_BANDS
            counts[band] = counts.get(band, 0) + 1

        assert set(counts) == ALL_BANDS
        assert counts == {
            '0600-0759': 120,
            '0800-1259': 300,
            '1300-1759': 300,
            '1800-2159': 240,
            '2200-0559': 480,
        }

    def test_single_digit_hour_accepted(self):
        assert get_local_start_time_band('6:30') == '0600-0759'

    @pytest.mark.parametrize('clock', ['', '24:00', '12:60', 'noon', '0630', None])
    def test_invalid_clock_raises(self, clock):
        with pytest.raises(ValueError):
            get_local_start_time_band(clock)


# ============================================================================
# REST RULE
# ============================================================================

class TestRestRule:

    @pytest.mark.parametrize('rest_hours, rule', [
        (0.0, RestRule.LEQ18_OR_GEQ30),
        (12.0, RestRule.LEQ18_OR_GEQ30),
        (18.0, RestRule.LEQ18_OR_GEQ30),
        (18.01, RestRule.BETWEEN_18_AND_30),
        (24.0, RestRule.BETWEEN_18_AND_30),
        (29.99, RestRule.BETWEEN_18_AND_30),
        (30.0, RestRule.LEQ18_OR_GEQ30),
        (72.0, RestRule.LEQ18_OR_GEQ30),
    ])
    def test_rest_thresholds(self, rest_hours, rule):
        assert select_rest_rule(rest_hours) == rule

    def test_unknown_rest_uses_restrictive_rule(self):
        assert select_rest_rule(None) == RestRule.LEQ18_OR_GEQ30

    def test_custom_thresholds(self):
        params = FTLParameters(short_rest_max_hours=12.0, long_rest_min_hours=36.0)
        assert select_rest_rule(14.0, params) == RestRule.BETWEEN_18_AND_30
        assert select_rest_rule(33.0, params) == RestRule.BETWEEN_18_AND_30


# ============================================================================
# TABLE INDEXING
# ============================================================================

class TestLimitFromTable:

    def test_sector_count_is_one_indexed(self):
        assert limit_from_table([11, 10.5, 9, 8.75], 1) == 11.0
        assert limit_from_table([11, 10.5, 9, 8.75], 3) == 9.0

    @pytest.mark.parametrize('sectors', [4, 5, 7, 20])
    def test_sectors_past_table_reuse_last_entry(self, sectors):
        assert limit_from_table([11, 10.5, 9, 8.75], sectors) == 8.75

    def test_returns_float(self):
        assert isinstance(limit_from_table([11, 10], 1), float)

    @pytest.mark.parametrize('entry', [None, '12.5', True, float('nan')])
    def test_non_numeric_entry_raises(self, entry):
        with pytest.raises(ValueError):
            limit_from_table([13.0, entry], 2)

    def test_zero_is_a_valid_entry(self):
        assert limit_from_table([0], 1) == 0.0


# ============================================================================
# RESOLVER
# ============================================================================

class TestFTLLimitResolver:

    def test_acclimatized_uses_time_band(self):
        resolver, _ = make_resolver()
        assert resolver.resolve_limit('tech', 'acclimatized', '06:30', 3) == 12.0
        assert resolver.resolve_limit('tech', 'acclimatized', '14:10', 1) == 12.5
        assert resolver.resolve_limit('tech', 'acclimatized', '23:15', 2) == 10.5

    def test_accepts_enums(self):
        resolver, _ = make_resolver()
        limit = resolver.resolve_limit(
            CrewType.CABIN, AcclimatizationState.ACCLIMATIZED, '07:00', 2
        )
        assert limit == 13.5

    def test_acclimatized_clamps_sector_count(self):
        resolver, _ = make_resolver()
        assert resolver.resolve_limit('tech', 'acclimatized', '02:00', 7) == 8.75

    def test_acclimatized_ignores_rest_hours(self):
        resolver, _ = make_resolver()
        assert resolver.resolve_limit('tech', 'acclimatized', '06:30', 1, rest_hours=24.0) == 13.0

    def test_non_acclimatized_ignores_time_band(self):
        resolver, _ = make_resolver()
        morning = resolver.resolve_limit('tech', 'non_acclimatized', '06:30', 2, rest_hours=12.0)
        night = resolver.resolve_limit('tech', 'non_acclimatized', '23:30', 2, rest_hours=12.0)
        assert morning == night == 10.5

    def test_non_acclimatized_rest_selects_table(self):
        resolver, _ = make_resolver()
        assert resolver.resolve_limit('tech', 'non_acclimatized', '10:00', 1, rest_hours=18.0) == 11.0
        assert resolver.resolve_limit('tech', 'non_acclimatized', '10:00', 1, rest_hours=18.01) == 12.0
        assert resolver.resolve_limit('tech', 'non_acclimatized', '10:00', 1, rest_hours=30.0) == 11.0

    def test_non_acclimatized_unknown_rest_is_restrictive(self):
        resolver, _ = make_resolver()
        assert resolver.resolve_limit('tech', 'non_acclimatized', '10:00', 1) == 11.0

    def test_non_acclimatized_caps_sectors_at_four(self):
        """Table has 6 entries but a 6-sector duty still reads the 4th."""
        resolver, reporter = make_resolver()
        limit = resolver.resolve_limit('tech', 'non_acclimatized', '10:00', 6, rest_hours=10.0)
        assert limit == 8.75
        assert reporter.events[-1].context['sector_count'] == 4

    def test_missing_crew_type_returns_none(self):
        resolver, reporter = make_resolver()
        assert resolver.resolve_limit('cabin', 'acclimatized', '14:00', 1) is None
        assert len(reporter.warnings) == 1
        assert 'cabin' in reporter.warnings[0].message
        assert '1300-1759' in reporter.warnings[0].message

    def test_missing_rule_family_returns_none(self):
        resolver, reporter = make_resolver({'acclimatized': LIMITS['acclimatized']})
        assert resolver.resolve_limit('tech', 'non_acclimatized', '10:00', 1) is None
        assert 'rest_period_leq18_or_geq30' in reporter.warnings[0].message

    def test_empty_table_returns_none(self):
        resolver, reporter = make_resolver()
        assert resolver.resolve_limit('cabin', 'non_acclimatized', '10:00', 1, rest_hours=20.0) is None
        assert len(reporter.warnings) == 1

    def test_empty_configuration_returns_none(self):
        resolver, _ = make_resolver({})
        assert resolver.resolve_limit('tech', 'acclimatized', '10:00', 1) is None

    def test_get_limit_table_raises(self):
        resolver, _ = make_resolver()
        with pytest.raises(LimitNotFound) as exc:
            resolver.get_limit_table('tech', 'acclimatized', '9999-9999')
        assert exc.value.table_key == '9999-9999'

    def test_success_reports_info_event(self):
        resolver, reporter = make_resolver()
        resolver.resolve_limit('tech', 'acclimatized', '06:30', 3)
        event = reporter.events[-1]
        assert event.level == 'info'
        assert event.context['limit_hours'] == 12.0
        assert event.context['table_key'] == '0600-0759'

    def test_null_entry_returns_none(self):
        resolver, reporter = make_resolver({'acclimatized': {'tech': {'0600-0759': [13.0, None]}}})
        assert resolver.resolve_limit('tech', 'acclimatized', '06:30', 2) is None
        assert len(reporter.warnings) == 1
        assert 'not a number' in reporter.warnings[0].message

    def test_null_entry_only_affects_its_sector_count(self):
        resolver, _ = make_resolver({'acclimatized': {'tech': {'0600-0759': [13.0, None]}}})
        assert resolver.resolve_limit('tech', 'acclimatized', '06:30', 1) == 13.0

    def test_text_entry_returns_none(self):
        limits = {'non_acclimatized': {'rest_period_leq18_or_geq30': {'tech': ['eleven']}}}
        resolver, reporter = make_resolver(limits)
        assert resolver.resolve_limit('tech', 'non_acclimatized', '10:00', 1) is None
        assert reporter.warnings[0].context['table_key'] == 'rest_period_leq18_or_geq30'

    def test_get_limit_raises_for_null_entry(self):
        resolver, _ = make_resolver({'acclimatized': {'tech': {'0600-0759': [None]}}})
        with pytest.raises(LimitNotFound) as exc:
            resolver.get_limit('tech', 'acclimatized', '0600-0759', 1)
        assert exc.value.detail is not None


class TestTableKey:

    def test_acclimatized_key_is_time_band(self):
        resolver, _ = make_resolver()
        assert resolver.get_table_key('acclimatized', '23:15') == '2200-0559'
        assert resolver.get_table_key(AcclimatizationState.ACCLIMATIZED, '06:00', 24.0) == '0600-0759'

    def test_non_acclimatized_key_is_rest_rule(self):
        resolver, _ = make_resolver()
        assert resolver.get_table_key('non_acclimatized', '23:15', 24.0) == RestRule.BETWEEN_18_AND_30.value
        assert resolver.get_table_key('non_acclimatized', '06:00') == RestRule.LEQ18_OR_GEQ30.value

    def test_invalid_clock_raises(self):
        resolver, _ = make_resolver()
        with pytest.raises(ValueError):
            resolver.get_table_key('acclimatized', '25:61')
