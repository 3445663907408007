# pools/tests/test_events.py
"""
Tests for event creation rules, capacity changes and per-user event listings.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from pools.models import Event
from pools.services.eventpool import (
    create_event,
    get_event,
    join,
    join_event,
    list_user_events,
    update_event_capacity,
)
from pools.services.eventpool.errors import EventFullError, EventNotFoundError, PoolError, ValidationError

pytestmark = pytest.mark.django_db


class TestCreateEvent:
    @pytest.mark.parametrize("max_participants", [0, -1, "abc", "10", 2.0, True])
    def test_max_participants_must_be_positive_int(self, creator, max_participants):
        with pytest.raises(PoolError) as exc:
            create_event(
                creator_id=creator.id,
                title="Will the match go to penalties?",
                entry_fee="100",
                max_participants=max_participants,
            )
        assert exc.value.code == "INVALID_PARAM"
        assert not Event.objects.exists()

    def test_default_max_participants(self, make_event):
        assert make_event().max_participants == 100

    def test_past_end_date_rejected(self, make_event):
        with pytest.raises(PoolError) as exc:
            make_event(end_date=timezone.now() - timedelta(seconds=1))
        assert exc.value.code == "INVALID_PARAM"

    def test_future_end_date_accepted(self, make_event):
        end_date = timezone.now() + timedelta(days=2)
        assert make_event(end_date=end_date).end_date == end_date

    @pytest.mark.parametrize("entry_fee", ["1e30", "1000000000000000000"])
    def test_oversized_entry_fee(self, make_event, entry_fee):
        with pytest.raises(ValidationError):
            make_event(entry_fee=entry_fee)


class TestEventCapacity:
    def test_added_slots_admit_more_participants(self, make_event, make_user):
        event = make_event(max_participants=1)
        join(event, make_user().id, True, "500")
        with pytest.raises(EventFullError):
            join(get_event(event.id), make_user().id, False, "500")

        updated = update_event_capacity(event.id, 2)

        assert updated.max_participants == 3
        join(updated, make_user().id, False, "500")

    @pytest.mark.parametrize("slots", [0, -5, "3", None])
    def test_rejects_bad_slots(self, make_event, slots):
        event = make_event(max_participants=4)
        with pytest.raises(PoolError) as exc:
            update_event_capacity(event.id, slots)
        assert exc.value.code == "INVALID_PARAM"
        assert get_event(event.id).max_participants == 4

    def test_unknown_event(self):
        with pytest.raises(EventNotFoundError):
            update_event_capacity(777777, 5)


class TestListUserEvents:
    def test_newest_participation_first(self, make_event, make_user):
        older = make_event(entry_fee="100")
        newer = make_event(entry_fee="100")
        user = make_user(balance="200")
        join_event(older.id, user.id, True, "100")
        join_event(newer.id, user.id, False, "100")

        items = list_user_events(user.id)

        assert [p.event_id for p in items] == [newer.id, older.id]
        assert items[0].event.title == newer.title

    def test_user_without_participations(self, make_user):
        assert list_user_events(make_user().id) == []
