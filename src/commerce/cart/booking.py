"""Home-visit booking slots offered when a line is added to the cart."""

from datetime import date, timedelta

TIME_SLOTS = ("10:00 AM", "11:00 AM", "2:00 PM", "3:00 PM", "4:00 PM", "5:00 PM")


def booking_dates(lead_time: int, today: date | None = None, days: int = 7) -> list[str]:
    """ISO dates bookable for an item needing ``lead_time`` days of notice."""
    start = (today or date.today()) + timedelta(days=max(lead_time, 0))
    return [(start + timedelta(days=offset)).isoformat() for offset in range(days)]


def is_iso_date(value) -> bool:
    try:
        date.fromisoformat(str(value))
    except ValueError:
        return False
    return True
