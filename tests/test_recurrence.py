"""
Tests for recurring visit expansion.

These tests validate:
1. One-off jobs produce a single visit
2. Daily/weekly/biweekly/monthly matching and stepping
3. Month-end rollover (Jan 31 -> Feb 28/29 -> Mar 31)
4. The 5 year / 1,825 visit ceilings
5. count() and preview() agree with expand()
6. Malformed input never raises
"""

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from fieldservice.domain.scheduling.recurrence import (
    MAX_VISITS,
    RecurrenceRule,
    count,
    effective_end_date,
    expand,
    has_known_pattern,
    parse_start_time,
    preview,
    should_generate_on_date,
)

MONDAY = datetime(2024, 1, 1)


def dates_of(occurrences):
    return [o.scheduled_at.date() for o in occurrences]


def weekly(days=(), **kwargs):
    defaults = dict(is_recurring=True, pattern="weekly", days_of_week=days, start_date=MONDAY)
    defaults.update(kwargs)
    return RecurrenceRule(**defaults)


class TestOneOff:
    def test_single_visit_at_start_date(self):
        rule = RecurrenceRule(is_recurring=False, start_date=datetime(2024, 3, 5), duration_minutes=45)

        occurrences = expand(rule)

        assert len(occurrences) == 1
        assert occurrences[0].scheduled_at == datetime(2024, 3, 5)
        assert occurrences[0].duration_minutes == 45
        assert occurrences[0].status == "Scheduled"

    def test_start_time_applied(self):
        rule = RecurrenceRule(start_date=datetime(2024, 3, 5), start_time="08:15")
        assert expand(rule)[0].scheduled_at == datetime(2024, 3, 5, 8, 15)

    def test_passes_through_time_of_day_without_start_time(self):
        rule = RecurrenceRule(start_date=datetime(2024, 3, 5, 10, 40))
        assert expand(rule)[0].scheduled_at == datetime(2024, 3, 5, 10, 40)

    def test_pattern_ignored_when_not_recurring(self):
        rule = RecurrenceRule(is_recurring=False, pattern="daily", start_date=MONDAY,
                              end_date=MONDAY + timedelta(days=30))
        assert len(expand(rule)) == 1

    def test_recurring_without_start_date_falls_back_to_now(self):
        now = datetime(2024, 6, 1, 12, 0)
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_time="07:00")

        occurrences = expand(rule, now=now)

        assert len(occurrences) == 1
        assert occurrences[0].scheduled_at == datetime(2024, 6, 1, 7, 0)

    def test_default_duration(self):
        assert expand(RecurrenceRule(start_date=MONDAY))[0].duration_minutes == 120


class TestDaily:
    def test_end_date_is_exclusive(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=MONDAY,
                              end_date=MONDAY + timedelta(days=10))

        occurrences = expand(rule)

        assert dates_of(occurrences) == [(MONDAY + timedelta(days=i)).date() for i in range(10)]

    def test_start_time_and_duration_on_every_visit(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=MONDAY,
                              end_date=MONDAY + timedelta(days=3), start_time="14:30",
                              duration_minutes=60)

        for occurrence in expand(rule):
            assert (occurrence.scheduled_at.hour, occurrence.scheduled_at.minute) == (14, 30)
            assert occurrence.duration_minutes == 60

    def test_start_time_of_day_stripped_before_iterating(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily",
                              start_date=datetime(2024, 1, 1, 18, 45),
                              end_date=datetime(2024, 1, 3))

        assert [o.scheduled_at for o in expand(rule)] == [datetime(2024, 1, 1), datetime(2024, 1, 2)]

    def test_end_before_start_yields_nothing(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=MONDAY,
                              end_date=MONDAY - timedelta(days=5))
        assert expand(rule) == []


class TestWeekly:
    def test_explicit_days(self):
        rule = weekly(days={1, 3, 5}, end_date=MONDAY + timedelta(weeks=2))

        assert dates_of(expand(rule)) == [
            date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 5),
            date(2024, 1, 8), date(2024, 1, 10), date(2024, 1, 12),
        ]

    def test_sunday_is_zero(self):
        rule = weekly(days={0}, end_date=MONDAY + timedelta(weeks=2))
        assert dates_of(expand(rule)) == [date(2024, 1, 7), date(2024, 1, 14)]

    def test_empty_days_use_start_weekday(self):
        wednesday = datetime(2024, 1, 3)
        rule = weekly(days=(), start_date=wednesday, end_date=wednesday + timedelta(weeks=3))

        assert dates_of(expand(rule)) == [date(2024, 1, 3), date(2024, 1, 10), date(2024, 1, 17)]

    def test_out_of_range_days_never_match(self):
        rule = weekly(days={7, 9})
        assert expand(rule) == []


class TestBiweekly:
    def test_only_even_weeks(self):
        rule = RecurrenceRule(is_recurring=True, pattern="biweekly", days_of_week={1},
                              start_date=MONDAY, end_date=MONDAY + timedelta(weeks=4))

        assert dates_of(expand(rule)) == [date(2024, 1, 1), date(2024, 1, 15)]

    def test_parity_anchored_to_start_date(self):
        # Starts on a Wednesday: Monday Jan 8 falls in week 0, Monday Jan 15 in week 1
        wednesday = datetime(2024, 1, 3)
        rule = RecurrenceRule(is_recurring=True, pattern="biweekly", days_of_week={1},
                              start_date=wednesday, end_date=wednesday + timedelta(weeks=4))

        assert dates_of(expand(rule)) == [date(2024, 1, 8), date(2024, 1, 22)]

    def test_empty_days_use_start_weekday(self):
        wednesday = datetime(2024, 1, 3)
        rule = RecurrenceRule(is_recurring=True, pattern="biweekly", start_date=wednesday,
                              end_date=wednesday + timedelta(weeks=4))

        assert dates_of(expand(rule)) == [date(2024, 1, 3), date(2024, 1, 17)]


class TestMonthly:
    def test_rolls_back_to_last_day_of_short_month(self):
        start = datetime(2023, 1, 31)
        rule = RecurrenceRule(is_recurring=True, pattern="monthly", start_date=start,
                              end_date=datetime(2023, 4, 30))

        assert dates_of(expand(rule)) == [date(2023, 1, 31), date(2023, 2, 28), date(2023, 3, 31)]

    def test_leap_year_february(self):
        rule = RecurrenceRule(is_recurring=True, pattern="monthly", start_date=datetime(2024, 1, 31),
                              end_date=datetime(2024, 4, 30))

        assert dates_of(expand(rule)) == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]

    def test_short_month_does_not_drift_later_months(self):
        rule = RecurrenceRule(is_recurring=True, pattern="monthly", start_date=datetime(2023, 1, 31),
                              end_date=datetime(2024, 1, 31))

        days = [d.day for d in dates_of(expand(rule))]

        assert days == [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

    def test_mid_month_without_end_date(self):
        rule = RecurrenceRule(is_recurring=True, pattern="monthly", start_date=datetime(2024, 1, 15))

        occurrences = expand(rule)

        assert len(occurrences) == 60
        assert occurrences[-1].scheduled_at == datetime(2028, 12, 15)

    def test_predicate_accepts_clamped_day_only_at_month_end(self):
        rule = RecurrenceRule(is_recurring=True, pattern="monthly", start_date=datetime(2023, 1, 31))
        start = datetime(2023, 1, 31)

        assert should_generate_on_date(datetime(2023, 2, 28), rule, start)
        assert not should_generate_on_date(datetime(2023, 3, 28), rule, start)
        assert should_generate_on_date(datetime(2023, 4, 30), rule, start)


class TestCeilings:
    def test_end_date_capped_at_five_years(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=MONDAY,
                              end_date=datetime(2034, 1, 1))

        assert effective_end_date(rule) == datetime(2029, 1, 1)

    def test_daily_over_ten_years_hits_visit_cap(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=MONDAY,
                              end_date=datetime(2034, 1, 1))

        occurrences = expand(rule)

        assert len(occurrences) == MAX_VISITS
        assert occurrences[-1].scheduled_at < datetime(2029, 1, 1)

    def test_weekly_without_end_date_stops_at_five_years(self):
        occurrences = expand(weekly())

        assert len(occurrences) == 261
        assert occurrences[-1].scheduled_at == datetime(2028, 12, 25)

    def test_start_near_last_representable_year(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=datetime(9996, 1, 1),
                              end_date=datetime(9996, 1, 5))

        assert dates_of(expand(rule)) == [date(9996, 1, d) for d in range(1, 5)]
        assert effective_end_date(rule) == datetime(9996, 1, 5)

    def test_open_ended_daily_stops_at_last_representable_day(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=datetime(9999, 12, 30))

        assert effective_end_date(rule) == datetime.max
        assert dates_of(expand(rule)) == [date(9999, 12, 30), date(9999, 12, 31)]

    def test_open_ended_monthly_stops_at_last_representable_month(self):
        rule = RecurrenceRule(is_recurring=True, pattern="monthly", start_date=datetime(9999, 10, 31))

        assert dates_of(expand(rule)) == [date(9999, 10, 31), date(9999, 11, 30), date(9999, 12, 31)]

    def test_weekly_near_last_representable_year(self):
        rule = weekly(start_date=datetime(9997, 6, 1))

        occurrences = expand(rule)

        assert occurrences
        assert count(rule) == len(occurrences)
        assert occurrences[-1].scheduled_at.year == 9999

    def test_leap_day_start_caps_on_feb_28(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=datetime(2024, 2, 29))
        assert effective_end_date(rule) == datetime(2029, 2, 28)

    @pytest.mark.parametrize(
        "rule",
        [
            RecurrenceRule(is_recurring=True, pattern="daily", start_date=MONDAY,
                           end_date=datetime(2999, 1, 1)),
            RecurrenceRule(is_recurring=True, pattern="fortnightly", start_date=MONDAY),
            RecurrenceRule(is_recurring=True, pattern=None, start_date=MONDAY),
            RecurrenceRule(is_recurring=True, pattern="weekly", days_of_week={42}, start_date=MONDAY),
            RecurrenceRule(is_recurring=True, pattern="monthly", start_date=datetime(2024, 1, 31),
                           end_date=datetime(2999, 1, 1)),
        ],
    )
    def test_always_terminates_within_bounds(self, rule):
        occurrences = expand(rule)

        assert len(occurrences) <= MAX_VISITS
        for occurrence in occurrences:
            assert occurrence.scheduled_at < datetime(2029, 1, 1)


class TestPatterns:
    def test_unknown_pattern_yields_nothing(self):
        rule = RecurrenceRule(is_recurring=True, pattern="hourly", start_date=MONDAY)

        assert expand(rule) == []
        assert not has_known_pattern(rule)

    def test_pattern_is_case_insensitive(self):
        rule = RecurrenceRule(is_recurring=True, pattern=" Daily ", start_date=MONDAY,
                              end_date=MONDAY + timedelta(days=2))

        assert rule.pattern == "daily"
        assert len(expand(rule)) == 2


class TestInputs:
    @pytest.mark.parametrize("value", ["25:00", "12:60", "ab:cd", "9", "", "14-30", None])
    def test_malformed_start_time_is_ignored(self, value):
        assert parse_start_time(value) is None

        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=MONDAY,
                              end_date=MONDAY + timedelta(days=1), start_time=value)
        assert expand(rule)[0].scheduled_at == MONDAY

    @pytest.mark.parametrize("value,expected", [("9:05", (9, 5)), ("23:59", (23, 59)), ("07:00:30", (7, 0))])
    def test_parse_start_time(self, value, expected):
        assert parse_start_time(value) == expected

    def test_plain_dates_accepted(self):
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=date(2024, 1, 1),
                              end_date=date(2024, 1, 3))

        assert [o.scheduled_at for o in expand(rule)] == [datetime(2024, 1, 1), datetime(2024, 1, 2)]

    def test_aware_start_with_naive_end(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        rule = RecurrenceRule(is_recurring=True, pattern="daily", start_date=start,
                              end_date=datetime(2024, 1, 4))

        occurrences = expand(rule)

        assert len(occurrences) == 3
        assert occurrences[0].scheduled_at.tzinfo == timezone.utc

    def test_from_job(self):
        job = SimpleNamespace(
            is_recurring=True,
            recurring_pattern="weekly",
            recurring_days=[1, 3],
            start_date=MONDAY,
            start_time="09:00",
            recurring_end_date=MONDAY + timedelta(weeks=1),
            duration=0,
        )

        rule = RecurrenceRule.from_job(job)

        assert rule.days_of_week == frozenset({1, 3})
        assert rule.duration_minutes == 120
        assert [o.scheduled_at for o in expand(rule)] == [
            datetime(2024, 1, 1, 9, 0),
            datetime(2024, 1, 3, 9, 0),
        ]

    def test_from_job_without_days(self):
        job = SimpleNamespace(is_recurring=False, recurring_pattern=None, recurring_days=None,
                              start_date=None, start_time=None, recurring_end_date=None,
                              duration=None)

        assert RecurrenceRule.from_job(job).days_of_week == frozenset()


RULES = [
    RecurrenceRule(is_recurring=True, pattern="daily", start_date=MONDAY,
                   end_date=MONDAY + timedelta(days=10)),
    weekly(days={1, 3, 5}, end_date=MONDAY + timedelta(weeks=2)),
    RecurrenceRule(is_recurring=True, pattern="monthly", start_date=datetime(2023, 1, 31)),
    RecurrenceRule(is_recurring=True, pattern="unknown", start_date=MONDAY),
    RecurrenceRule(start_date=MONDAY, start_time="10:00"),
]


class TestHelpers:
    @pytest.mark.parametrize("rule", RULES)
    def test_count_matches_expand(self, rule):
        assert count(rule) == len(expand(rule))

    @pytest.mark.parametrize("rule", RULES)
    @pytest.mark.parametrize("n", [0, 1, 3, 100])
    def test_preview_matches_expand(self, rule, n):
        assert preview(rule, n) == [o.scheduled_at for o in expand(rule)[:n]]

    def test_preview_negative_is_empty(self):
        assert preview(RULES[0], -2) == []

    def test_preview_default_size(self):
        assert len(preview(weekly())) == 10
