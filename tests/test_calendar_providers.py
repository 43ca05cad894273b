import pytest

import timeblock.core.calendar as calendar_pkg
import timeblock.core.calendar.google as google_module
from timeblock.core.calendar import get_calendar_provider
from timeblock.core.calendar.noop import NoOpCalendarProvider


class FakeRequest:
    def __init__(self, result):
        self.result = result

    def execute(self):
        return self.result


class FakeEvents:
    def __init__(self):
        self.inserted = []
        self.list_params = None

    def insert(self, calendarId, body):
        self.inserted.append((calendarId, body))
        return FakeRequest({"id": "g1", **body})

    def list(self, **params):
        self.list_params = params
        return FakeRequest({"items": [{"id": "g1", "summary": "Gym"}], "nextPageToken": "x"})


class FakeService:
    def __init__(self):
        self._events = FakeEvents()

    def events(self):
        return self._events


@pytest.fixture
def google_provider(tmp_path, monkeypatch):
    key_file = tmp_path / "sa.json"
    key_file.write_text("{}")
    monkeypatch.setattr("timeblock.config.settings.GOOGLE_CALENDAR_CREDENTIALS_JSON", str(key_file))
    monkeypatch.setattr(google_module.Credentials, "from_service_account_file", lambda path, scopes: object())
    service = FakeService()
    monkeypatch.setattr(google_module, "build", lambda *args, **kwargs: service)
    return google_module.GoogleCalendarProvider(), service


@pytest.mark.asyncio
async def test_google_create_event(google_provider):
    provider, service = google_provider
    payload = {"summary": "Gym", "start": {"dateTime": "2099-01-05T17:00:00.000Z", "timeZone": "UTC"}}

    event = await provider.create_event("primary", payload)

    assert event["id"] == "g1"
    assert service.events().inserted == [("primary", payload)]


@pytest.mark.asyncio
async def test_google_list_events(google_provider):
    provider, service = google_provider

    resp = await provider.list_events("primary", time_min="2026-10-19T08:15:00.000Z")

    assert resp == {"items": [{"id": "g1", "summary": "Gym"}]}
    assert service.events().list_params == {
        "calendarId": "primary",
        "maxResults": 10,
        "singleEvents": True,
        "orderBy": "startTime",
        "timeMin": "2026-10-19T08:15:00.000Z",
    }


def test_google_requires_credentials_file(monkeypatch, tmp_path):
    monkeypatch.setattr("timeblock.config.settings.GOOGLE_CALENDAR_CREDENTIALS_JSON", str(tmp_path / "missing.json"))
    with pytest.raises(FileNotFoundError):
        google_module.GoogleCalendarProvider()


def test_provider_factory_caches_instances(monkeypatch):
    monkeypatch.setattr(calendar_pkg, "_provider_instances", {})
    first = get_calendar_provider()
    assert isinstance(first, NoOpCalendarProvider)
    assert get_calendar_provider("NOOP") is first
    with pytest.raises(ValueError):
        get_calendar_provider("outlook")


@pytest.mark.asyncio
async def test_noop_respects_max_results():
    provider = NoOpCalendarProvider()
    for hour in (12, 10, 11):
        await provider.create_event("primary", {
            "summary": f"at {hour}",
            "start": {"dateTime": f"2099-01-01T{hour}:00:00+00:00"},
            "end": {"dateTime": f"2099-01-01T{hour}:30:00+00:00"},
        })
    resp = await provider.list_events("primary", max_results=2)
    assert [ev["summary"] for ev in resp["items"]] == ["at 10", "at 11"]
    assert all(ev["status"] == "confirmed" for ev in resp["items"])
