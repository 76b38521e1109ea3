from datetime import date, datetime, timezone

from models import ForecastEntry

MAX_FORECAST_DAYS = 5
TARGET_HOUR = 12


def _utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def reduce_to_daily_digests(
    entries: list[ForecastEntry],
    today: date | None = None,
) -> list[ForecastEntry]:
    """Pick one entry per future UTC day, the one closest to noon.

    Entries are scanned in order and a later entry only replaces the stored
    one for its day when it is strictly closer to 12:00 UTC, so ties keep the
    first entry seen. The current UTC day is skipped and at most five days
    are returned, earliest first.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    by_day: dict[date, ForecastEntry] = {}
    for entry in entries:
        moment = _utc(entry.timestamp)
        day = moment.date()
        kept = by_day.get(day)
        if kept is None:
            by_day[day] = entry
        elif abs(moment.hour - TARGET_HOUR) < abs(_utc(kept.timestamp).hour - TARGET_HOUR):
            by_day[day] = entry

    days = sorted(day for day in by_day if day != today)
    return [by_day[day] for day in days[:MAX_FORECAST_DAYS]]
