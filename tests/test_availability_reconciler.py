from models.entities import (
    AvailabilityDate,
    AvailabilityEntry,
    EventOccurrence,
    MemberAvailability,
    TimeRange,
)
from services.availability_reconciler import (
    AvailabilityReconciler,
    busy_ranges_from_entries,
    event_busy_range,
)

DATE = "2024-12-04"


def tr(start, end):
    return TimeRange.from_strings(start, end)


def manual(user_id, *entries, date=DATE):
    return MemberAvailability(
        user_id=user_id,
        first_name=user_id.title(),
        dates=[AvailabilityDate(date=date, time_ranges=list(entries))]
    )


def profiles_by_key(profiles):
    return {(p.person_id, p.date): p.busy_ranges for p in profiles}


def test_available_entries_never_constrain(alice):
    availability = [manual("alice", AvailabilityEntry("14:00", "23:00", "available"))]

    profiles = AvailabilityReconciler().reconcile([alice], availability, [])

    assert profiles_by_key(profiles) == {("alice", DATE): []}


def test_event_without_manual_entries_becomes_busy_range(alice):
    event = EventOccurrence(id="r1", date=DATE, start_time="10:00", end_time="12:00")

    profiles = AvailabilityReconciler().reconcile([alice], [], [event])

    assert profiles_by_key(profiles) == {("alice", DATE): [tr("10:00", "12:00")]}


def test_busy_tentative_and_events_are_unioned(alice):
    availability = [manual(
        "alice",
        AvailabilityEntry("09:00", "10:00", "busy"),
        AvailabilityEntry("10:00", "11:00", "tentative"),
        AvailabilityEntry("11:00", "20:00", "available"),
    )]
    events = [EventOccurrence(id="r1", date=DATE, start_time="10:30", end_time="12:00")]

    profiles = AvailabilityReconciler().reconcile([alice], availability, events)

    assert profiles_by_key(profiles) == {("alice", DATE): [tr("09:00", "12:00")]}


def test_event_without_end_is_non_blocking_but_touches_date(alice):
    event = EventOccurrence(id="r1", date=DATE, start_time="10:00", end_time=None)

    profiles = AvailabilityReconciler().reconcile([alice], [], [event])

    assert profiles_by_key(profiles) == {("alice", DATE): []}
    assert event_busy_range(event) is None


def test_events_apply_to_listed_participants_only(alice, bob):
    event = EventOccurrence(
        id="r1", date=DATE, start_time="18:00", end_time="20:00", participant_ids=["bob"]
    )

    profiles = AvailabilityReconciler().reconcile([alice, bob], [], [event], dates=[DATE])

    assert profiles_by_key(profiles) == {
        ("alice", DATE): [],
        ("bob", DATE): [tr("18:00", "20:00")],
    }


def test_events_without_participants_apply_to_everyone(alice, bob):
    event = EventOccurrence(id="r1", date=DATE, start_time="18:00", end_time="20:00")

    profiles = AvailabilityReconciler().reconcile([alice, bob], [], [event])

    assert profiles_by_key(profiles) == {
        ("alice", DATE): [tr("18:00", "20:00")],
        ("bob", DATE): [tr("18:00", "20:00")],
    }


def test_requested_dates_yield_empty_profiles_for_idle_people(alice, bob):
    profiles = AvailabilityReconciler().reconcile([alice, bob], [], [], dates=[DATE, "2024-12-05"])

    assert [(p.person_id, p.date, p.busy_ranges) for p in profiles] == [
        ("alice", DATE, []),
        ("alice", "2024-12-05", []),
        ("bob", DATE, []),
        ("bob", "2024-12-05", []),
    ]


def test_without_requested_dates_only_touched_dates_appear(alice, bob):
    availability = [manual("alice", AvailabilityEntry("09:00", "10:00", "busy"))]

    profiles = AvailabilityReconciler().reconcile([alice, bob], availability, [])

    assert profiles_by_key(profiles) == {("alice", DATE): [tr("09:00", "10:00")]}


def test_bad_records_are_dropped_without_failing_the_group(alice, bob):
    availability = [
        manual(
            "alice",
            AvailabilityEntry("25:00", "26:00", "busy"),
            AvailabilityEntry("12:00", "11:00", "busy"),
            AvailabilityEntry("15:00", "16:00", "busy"),
        ),
        manual("bob", AvailabilityEntry("10:00", "11:00", "busy")),
    ]
    events = [EventOccurrence(id="bad", date=DATE, start_time="noon", end_time="13:00")]

    profiles = AvailabilityReconciler().reconcile([alice, bob], availability, events)

    assert profiles_by_key(profiles) == {
        ("alice", DATE): [tr("15:00", "16:00")],
        ("bob", DATE): [tr("10:00", "11:00")],
    }


def test_output_is_independent_of_input_order(alice, bob):
    entries = [
        AvailabilityEntry("15:00", "16:00", "busy"),
        AvailabilityEntry("09:00", "10:00", "tentative"),
        AvailabilityEntry("09:30", "11:00", "busy"),
    ]
    events = [
        EventOccurrence(id="r1", date=DATE, start_time="18:00", end_time="20:00"),
        EventOccurrence(id="r2", date=DATE, start_time="16:00", end_time="17:00"),
    ]
    reconciler = AvailabilityReconciler()

    forward = reconciler.reconcile([alice, bob], [manual("alice", *entries)], events)
    backward = reconciler.reconcile([alice, bob], [manual("alice", *reversed(entries))], events[::-1])

    assert forward == backward


def test_busy_ranges_from_entries_filters_types():
    entries = [
        AvailabilityEntry("09:00", "10:00", "busy"),
        AvailabilityEntry("11:00", "12:00", "available"),
        AvailabilityEntry("13:00", "14:00", "tentative"),
    ]
    assert busy_ranges_from_entries(entries) == [tr("09:00", "10:00"), tr("13:00", "14:00")]
