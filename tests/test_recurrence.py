"""Tests for reminder time expansion."""

from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from medicine_reminder.domain.medicines import Frequency
from medicine_reminder.services.recurrence import expand, offsets_for

NOW = datetime(2024, 5, 10, 9, 0, tzinfo=UTC)


def test_twice_daily_rolls_second_dose_into_next_day() -> None:
    times = expand(time(14, 0), Frequency.TWICE_DAILY, NOW)

    assert times == [
        datetime(2024, 5, 10, 14, 0, tzinfo=UTC),
        datetime(2024, 5, 11, 2, 0, tzinfo=UTC),
    ]


def test_past_candidate_moves_forward_one_day() -> None:
    times = expand(time(8, 0), Frequency.ONCE_DAILY, NOW)

    assert times == [datetime(2024, 5, 11, 8, 0, tzinfo=UTC)]


def test_every_six_hours_keeps_offset_order() -> None:
    times = expand(time(6, 0), Frequency.EVERY_6_HOURS, NOW)

    assert times == [
        datetime(2024, 5, 11, 6, 0, tzinfo=UTC),
        datetime(2024, 5, 10, 12, 0, tzinfo=UTC),
        datetime(2024, 5, 10, 18, 0, tzinfo=UTC),
        datetime(2024, 5, 11, 0, 0, tzinfo=UTC),
    ]


def test_every_eight_hours_produces_three_future_times() -> None:
    times = expand(time(9, 0), Frequency.EVERY_8_HOURS, NOW)

    assert times == [
        datetime(2024, 5, 10, 9, 0, tzinfo=UTC),
        datetime(2024, 5, 10, 17, 0, tzinfo=UTC),
        datetime(2024, 5, 11, 1, 0, tzinfo=UTC),
    ]
    assert all(at >= NOW for at in times)


def test_unknown_frequency_falls_back_to_single_dose() -> None:
    assert offsets_for("Every 3 Days") == (0,)
    assert expand(time(10, 30), "Every 3 Days", NOW) == [
        datetime(2024, 5, 10, 10, 30, tzinfo=UTC)
    ]


@pytest.mark.parametrize("frequency", list(Frequency))
def test_string_values_match_enum_members(frequency: Frequency) -> None:
    assert offsets_for(frequency.value) == offsets_for(frequency)


def test_results_keep_timezone_of_now() -> None:
    tz = ZoneInfo("Europe/Berlin")
    now = datetime(2024, 5, 10, 23, 0, tzinfo=tz)

    times = expand(time(22, 0), Frequency.ONCE_DAILY, now)

    assert times[0].tzinfo is tz
    assert times[0] - now == timedelta(hours=23)


def test_repeated_wall_time_compares_by_instant() -> None:
    tz = ZoneInfo("Europe/Berlin")
    # 02:15 on the second pass through the repeated hour is already after
    # the first 02:30.
    now = datetime(2024, 10, 27, 2, 15, fold=1, tzinfo=tz)

    times = expand(time(2, 30), Frequency.ONCE_DAILY, now)

    assert times[0].date() == datetime(2024, 10, 28).date()
    assert times[0].timestamp() > now.timestamp()


def test_offset_across_spring_forward_keeps_wall_time() -> None:
    tz = ZoneInfo("Europe/Berlin")
    now = datetime(2024, 3, 30, 22, 0, tzinfo=tz)

    times = expand(time(10, 0), Frequency.ONCE_DAILY, now)

    assert times[0] == datetime(2024, 3, 31, 10, 0, tzinfo=tz)
    assert times[0].timestamp() - now.timestamp() == timedelta(hours=11).total_seconds()
