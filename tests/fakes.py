"""In-memory collaborators and sample data shared by the unit tests."""

from __future__ import annotations

from ical_sync.models.calendar import CalendarItem
from ical_sync.sync.fetch import TransportResponse

SAMPLE_ICS = (
    b"BEGIN:VCALENDAR\r\n"
    b"VERSION:2.0\r\n"
    b"PRODID:-//Test//ical-sync//EN\r\n"
    b"BEGIN:VEVENT\r\n"
    b"UID:lecture-1@example.com\r\n"
    b"SUMMARY:Linear Algebra\r\n"
    b"DTSTART:20261019T080000Z\r\n"
    b"DTEND:20261019T093000Z\r\n"
    b"LOCATION:Room 101\r\n"
    b"END:VEVENT\r\n"
    b"BEGIN:VEVENT\r\n"
    b"UID:holiday-1@example.com\r\n"
    b"SUMMARY:Reading Week\r\n"
    b"DTSTART;VALUE=DATE:20261026\r\n"
    b"DTEND;VALUE=DATE:20261031\r\n"
    b"END:VEVENT\r\n"
    b"END:VCALENDAR\r\n"
)


class InMemoryCalendarStore:
    """Dict-backed store that records every update.

    Set ``fail_listing`` to make :meth:`find_active` raise.
    """

    def __init__(self, items: list[CalendarItem] | None = None) -> None:
        self.items: dict[str, CalendarItem] = {}
        self.updates: list[CalendarItem] = []
        self.fail_listing: Exception | None = None
        for item in items or []:
            self.items[item.id] = item.model_copy()

    def find_active(self) -> list[CalendarItem]:
        if self.fail_listing is not None:
            raise self.fail_listing
        return [item.model_copy() for item in self.items.values() if item.is_active]

    def update(self, item: CalendarItem) -> None:
        self.updates.append(item.model_copy())
        self.items[item.id] = item.model_copy()


class ScriptedTransport:
    """Transport returning queued responses (or raising queued exceptions).

    The last entry repeats once the script runs out.  Every call is
    recorded as ``(url, headers, timeout)``.
    """

    def __init__(self, *script: TransportResponse | Exception) -> None:
        self._script = list(script)
        self.calls: list[tuple[str, dict[str, str], float]] = []

    def get(self, url: str, headers: dict[str, str], timeout: float) -> TransportResponse:
        self.calls.append((url, dict(headers), timeout))
        step = self._script.pop(0) if len(self._script) > 1 else self._script[0]
        if isinstance(step, Exception):
            raise step
        return step


class RoutingTransport:
    """Transport answering per URL; unknown URLs get a 404."""

    def __init__(self, routes: dict[str, TransportResponse | Exception]) -> None:
        self._routes = routes
        self.calls: list[str] = []

    def get(self, url: str, headers: dict[str, str], timeout: float) -> TransportResponse:
        self.calls.append(url)
        step = self._routes.get(url, error_response(404, "Not Found"))
        if isinstance(step, Exception):
            raise step
        return step


def ok_response(content: bytes = SAMPLE_ICS) -> TransportResponse:
    return TransportResponse(status_code=200, reason_phrase="OK", content=content)


def error_response(status: int = 503, reason: str = "Service Unavailable") -> TransportResponse:
    return TransportResponse(status_code=status, reason_phrase=reason, content=b"")


def make_calendar(**overrides: object) -> CalendarItem:
    """Create a CalendarItem with sensible defaults, applying *overrides*."""
    defaults: dict = {
        "id": "cal-1",
        "name": "Lectures",
        "url": "https://calendar.example.com/lectures.ics",
        "is_active": True,
        "num_of_fails": 0,
    }
    defaults.update(overrides)
    return CalendarItem(**defaults)
