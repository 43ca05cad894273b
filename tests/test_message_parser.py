from datetime import datetime, timezone

import pytest

from timeblock.core.calendar.materializer import build_payload
from timeblock.core.tasks import MessageParser, TimeResolver

NOW = datetime(2026, 10, 19, 8, 15, tzinfo=timezone.utc)


@pytest.fixture
def parser() -> MessageParser:
    return MessageParser(clock=lambda: NOW)


def test_json_array_inside_prose(parser):
    reply = (
        "Here is your plan:\n"
        '[{"title": "Write report", "start_time": "2026-10-19T14:00:00.000Z",'
        ' "end_time": "2026-10-19T15:00:00.000Z", "priority": "High", "category": "work"}]\n'
        "Good luck!"
    )
    tasks = parser.parse(reply)
    assert len(tasks) == 1
    assert tasks[0].title == "Write report"
    assert tasks[0].priority == "high"
    assert tasks[0].category == "work"
    assert tasks[0].description is None


def test_json_records_are_kept_in_order_and_incomplete_ones_dropped(parser):
    reply = """[
      {"title": "A", "start_time": "2026-10-19T09:00:00Z", "end_time": "2026-10-19T10:00:00Z"},
      {"title": "no times"},
      {"title": "", "start_time": "2026-10-19T09:00:00Z", "end_time": "2026-10-19T10:00:00Z"},
      "not an object",
      {"title": "B", "start_time": "2026-10-19T11:00:00Z", "end_time": "2026-10-19T12:00:00Z", "priority": "urgent"}
    ]"""
    tasks = parser.parse(reply)
    assert [t.title for t in tasks] == ["A", "B"]
    assert tasks[1].priority is None


def test_non_object_array_yields_nothing(parser):
    assert parser.parse("numbers: [1, 2]") == []


def test_invalid_json_falls_back_to_lines(parser):
    reply = (
        "Options [a, b] considered.\n"
        "Title: Gym\n"
        "Start: today at 6:00 PM\n"
        "End: today at 7:00 PM\n"
    )
    tasks = parser.parse(reply)
    assert len(tasks) == 1
    assert tasks[0].title == "Gym"
    assert tasks[0].start_time == "2026-10-19T18:00:00.000Z"
    assert tasks[0].end_time == "2026-10-19T19:00:00.000Z"


def test_multiple_line_tasks(parser):
    reply = """
    Task: Standup
    Start Time: today at 9:30 am
    End Time: today at 9:45 am
    Priority: Medium
    Category: work

    Title: Groceries
    Description: milk, eggs
    Start: tomorrow at 5:00 pm
    End: tomorrow at 5:30 pm
    Priority: whenever
    """
    tasks = parser.parse(reply)
    assert [t.title for t in tasks] == ["Standup", "Groceries"]
    assert tasks[0].priority == "medium"
    assert tasks[0].category == "work"
    assert tasks[1].description == "milk, eggs"
    assert tasks[1].start_time == "2026-10-20T17:00:00.000Z"
    assert tasks[1].priority is None


def test_line_task_without_times_is_dropped(parser):
    reply = "Title: Someday\nPriority: low\n\nTitle: Call mom\nStart: today at 1:00 pm\nEnd: today at 1:15 pm"
    tasks = parser.parse(reply)
    assert [t.title for t in tasks] == ["Call mom"]


def test_title_keeps_text_after_first_colon(parser):
    reply = "Title: Meeting: budget review\nStart: today at 3:00 pm\nEnd: today at 4:00 pm"
    assert parser.parse(reply)[0].title == "Meeting: budget review"


def test_explicit_now_overrides_clock(parser):
    reply = "Title: X\nStart: tomorrow at 8:00 am\nEnd: tomorrow at 9:00 am"
    tasks = parser.parse(reply, now=datetime(2026, 12, 31, 12, 0, tzinfo=timezone.utc))
    assert tasks[0].start_time == "2027-01-01T08:00:00.000Z"


def test_plain_chat_reply_yields_nothing(parser):
    assert parser.parse("Sure, happy to help! What would you like to plan?") == []
    assert parser.parse("") == []


def test_unexpected_error_yields_empty_list():
    class BrokenResolver(TimeResolver):
        def resolve(self, text, now):
            raise RuntimeError("boom")

    parser = MessageParser(resolver=BrokenResolver(), clock=lambda: NOW)
    assert parser.parse("Title: X\nStart: today at 1:00 pm\nEnd: today at 2:00 pm") == []


def test_inverted_times_are_kept(parser):
    reply = "Title: Backwards\nStart: today at 4:00 pm\nEnd: today at 3:00 pm"
    tasks = parser.parse(reply)
    assert len(tasks) == 1
    assert tasks[0].end_time < tasks[0].start_time


def test_reply_to_event_payload():
    reply = (
        "Title: Write report\n"
        "Start: today at 2:00 PM\n"
        "End: today at 3:00 PM\n"
        "Priority: high"
    )
    tasks = MessageParser().parse(reply, now=NOW)
    assert len(tasks) == 1
    assert tasks[0].priority == "high"

    body = build_payload(tasks[0], "UTC").to_body()
    assert body == {
        "summary": "Write report",
        "start": {"dateTime": "2026-10-19T14:00:00.000Z", "timeZone": "UTC"},
        "end": {"dateTime": "2026-10-19T15:00:00.000Z", "timeZone": "UTC"},
        "colorId": "11",
    }
