"""Tests for event parsing, the event index and the downstream hooks."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ical_sync.events import EventIndex, EventIndexHook, NullHook, parse_events
from ical_sync.exceptions import FeedParseError
from ical_sync.models.calendar import CalendarEvent
from tests.fakes import SAMPLE_ICS, make_calendar


def _event(calendar_id: str, summary: str = "Event") -> CalendarEvent:
    return CalendarEvent(
        calendar_id=calendar_id,
        summary=summary,
        start=datetime(2026, 10, 19, 8, tzinfo=timezone.utc),
    )


class TestParseEvents:
    def test_parses_timed_event(self) -> None:
        events = parse_events("cal-1", SAMPLE_ICS)

        lecture = events[0]
        assert lecture.calendar_id == "cal-1"
        assert lecture.uid == "lecture-1@example.com"
        assert lecture.summary == "Linear Algebra"
        assert lecture.start == datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
        assert lecture.end == datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)
        assert lecture.location == "Room 101"
        assert lecture.all_day is False

    def test_parses_all_day_event(self) -> None:
        events = parse_events("cal-1", SAMPLE_ICS)

        holiday = events[1]
        assert holiday.all_day is True
        assert holiday.start == datetime(2026, 10, 26, tzinfo=timezone.utc)
        assert holiday.location is None

    def test_invalid_payload_raises(self) -> None:
        with pytest.raises(FeedParseError) as exc_info:
            parse_events("cal-1", b"<html>not a calendar</html>")

        assert exc_info.value.calendar_id == "cal-1"

    def test_event_without_start_is_skipped(self) -> None:
        payload = (
            b"BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//T//T//EN\r\n"
            b"BEGIN:VEVENT\r\nUID:x\r\nSUMMARY:No start\r\nEND:VEVENT\r\n"
            b"END:VCALENDAR\r\n"
        )

        assert parse_events("cal-1", payload) == []


class TestEventIndex:
    def test_replace_calendar_only_touches_that_calendar(self) -> None:
        index = EventIndex()
        index.add_events([_event("a", "old"), _event("b", "keep")])

        index.replace_calendar("a", [_event("a", "new")])

        assert [e.summary for e in index.events_for("a")] == ["new"]
        assert [e.summary for e in index.events_for("b")] == ["keep"]

    def test_remove_where_counts(self) -> None:
        index = EventIndex()
        index.add_events([_event("a"), _event("a"), _event("b")])

        removed = index.remove_where(lambda e: e.calendar_id == "a")

        assert removed == 2
        assert len(index) == 1


class TestEventIndexHook:
    def test_apply_installs_parsed_events(self) -> None:
        index = EventIndex()
        index.add_events([_event("cal-1", "stale")])
        hook = EventIndexHook(index)

        hook.apply(make_calendar(), SAMPLE_ICS)

        summaries = [e.summary for e in index.events_for("cal-1")]
        assert summaries == ["Linear Algebra", "Reading Week"]

    def test_apply_with_bad_payload_keeps_previous_events(self) -> None:
        index = EventIndex()
        index.add_events([_event("cal-1", "previous")])
        hook = EventIndexHook(index)

        with pytest.raises(FeedParseError):
            hook.apply(make_calendar(), b"garbage")

        assert [e.summary for e in index.events_for("cal-1")] == ["previous"]

    def test_purge_removes_calendar_events(self) -> None:
        index = EventIndex()
        index.add_events([_event("cal-1"), _event("other")])

        EventIndexHook(index).purge(make_calendar())

        assert index.events_for("cal-1") == []
        assert len(index) == 1


class TestNullHook:
    def test_does_nothing(self) -> None:
        hook = NullHook()

        assert hook.apply(make_calendar(), b"") is None
        assert hook.purge(make_calendar()) is None
