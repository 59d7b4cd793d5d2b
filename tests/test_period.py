from datetime import date, timedelta

import pytest

from services.exceptions import InvalidPeriodError
from services.period import month_range


@pytest.mark.parametrize(
    "year,month,days",
    [
        (2024, 1, 31),
        (2024, 2, 29),  # leap year
        (2023, 2, 28),
        (1900, 2, 28),  # divisible by 100, not a leap year
        (2000, 2, 29),  # divisible by 400
        (2024, 4, 30),
        (2024, 12, 31),
    ],
)
def test_month_range_spans_exactly_the_calendar_month(year, month, days):
    start, end = month_range(year, month)

    assert start == date(year, month, 1)
    assert (end - start).days + 1 == days
    assert end.month == month
    assert (end + timedelta(days=1)).day == 1


@pytest.mark.parametrize("year,month", [(2024, 0), (2024, 13), (2024, -1), (0, 5), (-2024, 5)])
def test_month_range_rejects_out_of_range_period(year, month):
    with pytest.raises(InvalidPeriodError):
        month_range(year, month)


def test_invalid_period_is_a_value_error():
    with pytest.raises(ValueError):
        month_range(2024, 13)
