"""Booking date-time checks run before a booking is submitted.

The browser reports its offset the JavaScript way (``Date.getTimezoneOffset()``,
minutes *behind* UTC, so UTC+7 is ``-420``). Everything here works on aware
datetimes in the booker's own timezone so that the hour check and the
serialized value both use the wall-clock time the user picked.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Sequence

from workshop_web.config import settings

MSG_NO_SERVICE = "Please select at least one service."
MSG_NO_DATE = "Booking date is required."
MSG_TOO_SOON = "Booking must be at least 1 hour from now."

# datetime.timezone only accepts offsets strictly inside one day
MAX_JS_OFFSET_MINUTES = 24 * 60

_FORM_FORMATS = ("%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S")
_JS_OFFSET_RE = re.compile(r"^-?\d{1,4}$")


@dataclass(frozen=True)
class BookingWindowResult:
    error: str | None = None
    booking_date: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def clock_label(hour: int) -> str:
    """``8`` -> ``8:00 AM``, ``20`` -> ``8:00 PM``."""
    suffix = "AM" if hour % 24 < 12 else "PM"
    return f"{hour % 12 or 12}:00 {suffix}"


def outside_hours_message() -> str:
    opening = clock_label(settings.BOOKING_OPENING_HOUR)
    closing = clock_label(settings.BOOKING_CLOSING_HOUR)
    return f"Booking time must be between {opening} and {closing}."


def parse_js_offset(value: str | None) -> int | None:
    """Read a submitted ``tz_offset``; ``None`` when missing, garbled or out of range."""
    if value is None or not _JS_OFFSET_RE.match(value.strip()):
        return None
    offset = int(value.strip())
    if abs(offset) >= MAX_JS_OFFSET_MINUTES:
        return None
    return offset


def timezone_from_js_offset(offset_minutes: int) -> timezone:
    """Invert a ``getTimezoneOffset()`` value into a UTC offset."""
    return timezone(timedelta(minutes=-offset_minutes))


def browser_timezone(offset_minutes: int | None) -> timezone | None:
    """Timezone of a browser offset, or ``None`` when there is no usable one."""
    if offset_minutes is None or abs(offset_minutes) >= MAX_JS_OFFSET_MINUTES:
        return None
    return timezone_from_js_offset(offset_minutes)


def format_utc_offset(offset: timedelta) -> str:
    """``+07:00`` style offset, zero padded, never ``Z``."""
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def to_local(moment: datetime, tz: timezone | None = None) -> datetime:
    """Attach the booker's timezone to a wall-clock datetime.

    Naive values are read in ``tz`` when given, otherwise in the console's own
    local timezone. Aware values are left on their own offset.
    """
    if moment.tzinfo is not None:
        return moment
    if tz is not None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone()


def serialize_local(moment: datetime) -> str:
    """ISO-8601 with seconds and an explicit numeric offset."""
    moment = to_local(moment)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + format_utc_offset(moment.utcoffset() or timedelta(0))


def parse_form_datetime(value: str | None, offset_minutes: int | None = None) -> datetime | None:
    """Read a ``datetime-local`` form value in the browser's timezone.

    Returns ``None`` for an empty or unreadable value. Without a usable offset
    the value is read in the console's own local timezone.
    """
    if not value:
        return None
    for fmt in _FORM_FORMATS:
        try:
            naive = datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
        return to_local(naive, browser_timezone(offset_minutes))
    return None


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def validate_booking_window(
    booking_date: datetime | None,
    service_ids: Sequence[str],
    now: datetime | None = None,
) -> BookingWindowResult:
    """Check a proposed booking and serialize its date on success.

    The first failing rule wins; failures are reported, never raised.
    """
    if not service_ids:
        return BookingWindowResult(error=MSG_NO_SERVICE)
    if booking_date is None:
        return BookingWindowResult(error=MSG_NO_DATE)

    local = to_local(booking_date)
    lead = local - _now(now)
    if lead < timedelta(minutes=settings.BOOKING_MINIMUM_ADVANCE_MINUTES):
        return BookingWindowResult(error=MSG_TOO_SOON)

    if not settings.BOOKING_OPENING_HOUR <= local.hour < settings.BOOKING_CLOSING_HOUR:
        return BookingWindowResult(error=outside_hours_message())

    return BookingWindowResult(booking_date=serialize_local(local))


def initial_booking_date(tz: timezone | None = None, now: datetime | None = None) -> datetime:
    """Default value of the booking form: the earliest bookable minute in ``tz``.

    Without ``tz`` the console's own local timezone is used.
    """
    current = _now(now)
    current = current.astimezone(tz) if tz is not None else current.astimezone()
    start = current + timedelta(minutes=settings.BOOKING_MINIMUM_ADVANCE_MINUTES)
    if start.second or start.microsecond:
        start = start.replace(second=0, microsecond=0) + timedelta(minutes=1)
    return start


def is_selectable_slot(moment: datetime, now: datetime | None = None) -> bool:
    """Whether the time picker should offer ``moment``."""
    local = to_local(moment)
    current = _now(now).astimezone(local.tzinfo)
    if local.date() == current.date():
        if local < current + timedelta(minutes=settings.BOOKING_MINIMUM_ADVANCE_MINUTES):
            return False
    return settings.BOOKING_OPENING_HOUR <= local.hour < settings.BOOKING_CLOSING_HOUR


def selectable_slots(day: date, tz: timezone, now: datetime | None = None) -> list[datetime]:
    """Time picker entries for ``day``, every ``BOOKING_SLOT_MINUTES``."""
    step = timedelta(minutes=settings.BOOKING_SLOT_MINUTES)
    slot = datetime.combine(day, time(settings.BOOKING_OPENING_HOUR), tzinfo=tz)
    closing = datetime.combine(day, time(0), tzinfo=tz) + timedelta(hours=settings.BOOKING_CLOSING_HOUR)
    slots = []
    while slot < closing:
        if is_selectable_slot(slot, now):
            slots.append(slot)
        slot += step
    return slots
