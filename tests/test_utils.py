import datetime

from localcert.common.utils import add_years, now_utc


def test_now_utc_is_aware():
    assert now_utc().tzinfo is not None


def test_add_years_keeps_date_and_time():
    t = datetime.datetime(2024, 5, 17, 13, 45, 2, tzinfo=datetime.timezone.utc)
    assert add_years(t, 10) == datetime.datetime(2034, 5, 17, 13, 45, 2, tzinfo=datetime.timezone.utc)


def test_add_years_from_leap_day():
    t = datetime.datetime(2024, 2, 29, 8, 0, tzinfo=datetime.timezone.utc)
    assert add_years(t, 10) == datetime.datetime(2034, 3, 1, 8, 0, tzinfo=datetime.timezone.utc)
    assert add_years(t, 4) == datetime.datetime(2028, 2, 29, 8, 0, tzinfo=datetime.timezone.utc)
