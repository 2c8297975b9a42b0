# localcert/common/utils.py
import datetime


def now_utc() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def add_years(moment: datetime.datetime, years: int) -> datetime.datetime:
    """
    Calendar-year addition.
    Feb 29 moved into a non-leap year becomes Mar 1.
    """
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, month=3, day=1)
