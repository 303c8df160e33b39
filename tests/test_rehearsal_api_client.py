import httpx
import pytest

from models.entities import AvailabilityEntry
from services.config import PlannerSettings
from services.rehearsal_api_client import RehearsalApiClient

SETTINGS = PlannerSettings(api_base_url="http://api.test/api", api_token="secret", default_timezone="Asia/Jerusalem")


def make_client(handler):
    return RehearsalApiClient(settings=SETTINGS, transport=httpx.MockTransport(handler))


def test_get_members_maps_names():
    def handler(request):
        assert request.url.path == "/api/native/projects/7/members"
        assert request.headers["Authorization"] == "Bearer secret"
        return httpx.Response(200, json={"members": [
            {"userId": 1, "firstName": "Anna", "lastName": "Levi"},
            {"userId": 2, "firstName": "Maya"},
            {"firstName": "Nobody"},
        ]})

    members = make_client(handler).get_members("7")

    assert [(m.id, m.display_name) for m in members] == [("1", "Anna Levi"), ("2", "Maya")]


def test_get_members_availability_sends_range_and_parses_entries():
    def handler(request):
        assert request.url.path == "/api/native/projects/7/members/availability"
        assert request.url.params["startDate"] == "2024-12-01"
        assert request.url.params["endDate"] == "2024-12-07"
        assert request.url.params["userIds"] == "1,2"
        return httpx.Response(200, json={"availability": [{
            "userId": 1,
            "firstName": "Anna",
            "lastName": "Levi",
            "dates": [{"date": "2024-12-02", "timeRanges": [
                {"start": "09:00", "end": "12:00", "type": "busy"},
                {"start": "14:00", "end": "23:00", "type": "available"},
            ]}],
        }]})

    availability = make_client(handler).get_members_availability("7", "2024-12-01", "2024-12-07", ["1", "2"])

    assert len(availability) == 1
    record = availability[0]
    assert record.user_id == "1"
    assert record.for_date("2024-12-02").time_ranges == [
        AvailabilityEntry("09:00", "12:00", "busy"),
        AvailabilityEntry("14:00", "23:00", "available"),
    ]
    assert record.for_date("2024-12-03") is None


def test_get_rehearsals_localizes_timestamps():
    def handler(request):
        return httpx.Response(200, json={"rehearsals": [
            {"id": 1, "startsAt": "2024-12-10T17:00:00Z", "endsAt": "2024-12-10T19:30:00Z"},
            {"id": 2, "date": "2024-12-11", "time": "18:00", "endTime": "20:00"},
            {"id": 3, "startsAt": "2024-12-12T21:00:00+00:00", "endsAt": "2024-12-12T23:00:00+00:00"},
            {"id": 4, "startsAt": "2024-12-13T10:00:00Z"},
            {"id": 5},
            {"id": 6, "startsAt": "not a timestamp"},
        ]})

    rehearsals = make_client(handler).get_rehearsals("7")

    assert [(r.id, r.date, r.start_time, r.end_time) for r in rehearsals] == [
        ("1", "2024-12-10", "19:00", "21:30"),
        ("2", "2024-12-11", "18:00", "20:00"),
        ("3", "2024-12-12", "23:00", "23:59"),
        ("4", "2024-12-13", "12:00", None),
    ]


def test_get_rehearsals_in_explicit_timezone():
    def handler(request):
        return httpx.Response(200, json={"rehearsals": [
            {"id": 1, "startsAt": "2024-12-10T17:00:00Z", "endsAt": "2024-12-10T19:00:00Z", "participantIds": [1, 2]},
        ]})

    rehearsal = make_client(handler).get_rehearsals("7", "Europe/London")[0]

    assert (rehearsal.start_time, rehearsal.end_time) == ("17:00", "19:00")
    assert rehearsal.participant_ids == ["1", "2"]


@pytest.mark.parametrize("status, body", [
    (500, b'{"error": "boom"}'),
    (200, b"<html>"),
])
def test_failures_produce_empty_lists(status, body):
    client = make_client(lambda request: httpx.Response(status, content=body))

    assert client.get_members("7") == []
    assert client.get_members_availability("7", "2024-12-01", "2024-12-02") == []
    assert client.get_rehearsals("7") == []


def test_transport_errors_produce_empty_lists():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert make_client(handler).get_members("7") == []
