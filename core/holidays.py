from __future__ import annotations

from datetime import date, datetime, timedelta

from core.errors import InvalidInput

# Fixed-date Croatian public holidays as (month, day).
CROATIAN_PUBLIC_HOLIDAYS: frozenset[tuple[int, int]] = frozenset(
    {
        (1, 1),  # Nova godina
        (1, 6),  # Sveta tri kralja
        (5, 1),  # Praznik rada
        (5, 30),  # Dan državnosti
        (6, 22),  # Dan antifašističke borbe
        (8, 5),  # Dan pobjede
        (8, 15),  # Velika Gospa
        (11, 1),  # Dan svih svetih
        (11, 18),  # Dan sjećanja
        (12, 25),  # Božić
        (12, 26),  # Sveti Stjepan
    }
)


def parse_booking_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError as exc:
            raise InvalidInput("Booking date must be an ISO date", field="booking_date", details={"value": value}) from exc
    raise InvalidInput("Booking date must be an ISO date", field="booking_date", details={"value": repr(value)})


def is_weekend(value: date | datetime | str) -> bool:
    return parse_booking_date(value).weekday() >= 5


def is_croatian_public_holiday(value: date | datetime | str) -> bool:
    day = parse_booking_date(value)
    return (day.month, day.day) in CROATIAN_PUBLIC_HOLIDAYS


def generate_available_dates(days_ahead: int = 30, today: date | None = None) -> list[date]:
    """Bookable days after `today`, Sundays excluded."""
    start = today or date.today()
    dates: list[date] = []
    for offset in range(1, days_ahead + 1):
        candidate = start + timedelta(days=offset)
        if candidate.weekday() != 6:
            dates.append(candidate)
    return dates
