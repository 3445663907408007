# pools/tests/test_commands.py
from io import StringIO

import pytest
from django.core.management import call_command

from pools.models import EventStatus
from pools.services.eventpool import admin_set_result, get_event

pytestmark = pytest.mark.django_db


def _run(*args):
    out, err = StringIO(), StringIO()
    call_command("process_event_payouts", *args, stdout=out, stderr=err)
    return out.getvalue(), err.getvalue()


class TestProcessEventPayouts:
    def test_settles_only_declared_events(self, make_event, stake):
        declared = make_event()
        stake(declared, True)
        stake(declared, False)
        admin_set_result(declared.id, True)
        pending = make_event()
        stake(pending, True)

        out, err = _run()

        assert "Successfully settled 1 events" in out
        assert err == ""
        assert get_event(declared.id).status == EventStatus.COMPLETED
        assert get_event(pending.id).status == EventStatus.ACTIVE

    def test_dry_run_pays_nothing(self, make_event, stake):
        event = make_event()
        stake(event, True)
        admin_set_result(event.id, True)

        out, _ = _run("--dry-run")

        assert f"DRY RUN: Would settle 1 events: [{event.id}]" in out
        assert get_event(event.id).status == EventStatus.ACTIVE

    def test_single_event_filter(self, make_event):
        first = make_event()
        second = make_event()
        admin_set_result(first.id, True)
        admin_set_result(second.id, False)

        out, _ = _run("--event", str(second.id))

        assert "Successfully settled 1 events" in out
        assert get_event(first.id).status == EventStatus.ACTIVE
        assert get_event(second.id).status == EventStatus.COMPLETED

    def test_completed_events_are_not_revisited(self, make_event, stake):
        event = make_event()
        stake(event, True)
        admin_set_result(event.id, True)
        _run()

        out, _ = _run()

        assert "Successfully settled 0 events" in out
