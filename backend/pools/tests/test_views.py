# pools/tests/test_views.py
"""
Tests for the HTTP endpoints: auth, error mapping and the
join -> result -> payout flow.
"""

import json
from datetime import timedelta
from decimal import Decimal
from unittest import mock

import pytest
from django.utils import timezone

from pools.models import Event, EventStatus, JoinRequestStatus
from pools.services.eventpool import admin_set_result, get_balance, get_event, request_join

pytestmark = pytest.mark.django_db


def _post(client, url, body, user=None):
    headers = {"HTTP_X_USER_ID": str(user.id)} if user else {}
    return client.post(url, data=json.dumps(body), content_type="application/json", **headers)


def _get(client, url, user=None):
    headers = {"HTTP_X_USER_ID": str(user.id)} if user else {}
    return client.get(url, **headers)


def _future(hours=24):
    return (timezone.now() + timedelta(hours=hours)).isoformat()


class TestCreateEvent:
    def test_user_creates_event_as_creator(self, client, make_user):
        user = make_user()
        resp = _post(
            client,
            "/api/events/",
            {
                "title": "Derby winner: Arsenal?",
                "entry_fee": "250",
                "betting_model": "custom",
                "end_date": _future(),
            },
            user,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["creator_id"] == str(user.id)
        assert body["status"] == EventStatus.ACTIVE
        assert body["betting_model"] == "custom"
        assert Decimal(body["entry_fee"]) == Decimal("250")
        assert Decimal(body["event_pool"]) == Decimal("0")

    def test_requires_user(self, client):
        resp = _post(client, "/api/events/", {"title": "x", "entry_fee": "10", "end_date": _future()})
        assert resp.status_code == 401

    def test_end_date_required(self, client, make_user):
        resp = _post(client, "/api/events/", {"title": "x", "entry_fee": "10"}, make_user())
        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_PARAM"

    def test_past_end_date_rejected(self, client, make_user):
        resp = _post(
            client,
            "/api/events/",
            {"title": "x", "entry_fee": "10", "end_date": _future(hours=-1)},
            make_user(),
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_PARAM"
        assert not Event.objects.exists()

    def test_bad_entry_fee(self, client, make_user):
        resp = _post(
            client, "/api/events/", {"title": "x", "entry_fee": "-5", "end_date": _future()}, make_user()
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_PARAM"

    def test_oversized_entry_fee(self, client, make_user):
        resp = _post(
            client, "/api/events/", {"title": "x", "entry_fee": "1e30", "end_date": _future()}, make_user()
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_AMOUNT"

    @pytest.mark.parametrize("max_participants", ["abc", 0, -3, 2.5, True])
    def test_bad_max_participants(self, client, make_user, max_participants):
        resp = _post(
            client,
            "/api/events/",
            {"title": "x", "entry_fee": "10", "end_date": _future(), "max_participants": max_participants},
            make_user(),
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_PARAM"
        assert not Event.objects.exists()

    def test_unexpected_error_returns_500(self, client, make_user):
        with mock.patch("pools.views.events.create_event", side_effect=RuntimeError("db down")):
            resp = _post(
                client, "/api/events/", {"title": "x", "entry_fee": "10", "end_date": _future()}, make_user()
            )
        assert resp.status_code == 500
        assert resp.json()["code"] == "INTERNAL_ERROR"

    def test_invalid_json(self, client, make_user):
        resp = client.post(
            "/api/events/",
            data="{not json",
            content_type="application/json",
            HTTP_X_USER_ID=str(make_user().id),
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_JSON"


class TestJoinView:
    def test_requires_user(self, client, make_event):
        event = make_event()
        resp = _post(client, f"/api/events/{event.id}/join/", {"prediction": True})
        assert resp.status_code == 401
        assert resp.json()["code"] == "UNAUTHORIZED"

    def test_fixed_amount_defaults_to_entry_fee(self, client, make_event, make_user):
        event = make_event(entry_fee="500")
        user = make_user(balance="800")

        resp = _post(client, f"/api/events/{event.id}/join/", {"prediction": False}, user)

        assert resp.status_code == 201
        body = resp.json()
        assert body["prediction"] is False
        assert Decimal(body["amount"]) == Decimal("500")
        assert get_balance(user.id)["balance"] == Decimal("300")

    def test_json_number_amount(self, client, make_event, make_user):
        event = make_event(entry_fee="10", betting_model="custom")
        user = make_user(balance="100")

        resp = _post(client, f"/api/events/{event.id}/join/", {"prediction": True, "amount": 12.5}, user)

        assert resp.status_code == 201
        assert get_balance(user.id)["balance"] == Decimal("87.50")

    def test_missing_prediction(self, client, make_event, make_user):
        event = make_event()
        resp = _post(client, f"/api/events/{event.id}/join/", {"amount": "500"}, make_user(balance="500"))
        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_PARAM"

    def test_error_codes(self, client, make_event, make_user):
        event = make_event(entry_fee="500")
        poor = make_user(balance="100")

        resp = _post(client, f"/api/events/{event.id}/join/", {"prediction": True}, poor)
        assert resp.status_code == 400
        assert resp.json()["code"] == "INSUFFICIENT_FUNDS"

        resp = _post(client, f"/api/events/{event.id}/join/", {"prediction": True, "amount": "20"}, poor)
        assert resp.json()["code"] == "INVALID_STAKE"

        resp = _post(client, "/api/events/999999/join/", {"prediction": True}, poor)
        assert resp.status_code == 404
        assert resp.json()["code"] == "EVENT_NOT_FOUND"

    def test_already_joined_conflict(self, client, make_event, make_user):
        event = make_event(entry_fee="500")
        user = make_user(balance="1000")
        _post(client, f"/api/events/{event.id}/join/", {"prediction": True}, user)

        resp = _post(client, f"/api/events/{event.id}/join/", {"prediction": True}, user)
        assert resp.status_code == 409
        assert resp.json()["code"] == "ALREADY_JOINED"

    def test_private_event_creates_request(self, client, make_event, make_user):
        event = make_event(is_private=True)
        user = make_user(balance="500")

        resp = _post(client, f"/api/events/{event.id}/join/", {"prediction": True}, user)

        assert resp.status_code == 202
        assert resp.json()["request"]["status"] == JoinRequestStatus.PENDING
        assert get_balance(user.id)["balance"] == Decimal("500")


class TestReadViews:
    def test_pool_and_participants(self, client, make_event, stake):
        event = make_event(entry_fee="500")
        stake(event, True)
        stake(event, False)

        resp = _get(client, f"/api/events/{event.id}/pool/")
        assert resp.status_code == 200
        body = resp.json()
        assert Decimal(body["total_pool"]) == Decimal("1000")
        assert Decimal(body["yes_pool"]) == Decimal("500")
        assert body["participants_count"] == 2

        resp = _get(client, f"/api/events/{event.id}/participants/")
        assert resp.status_code == 200
        assert [p["prediction"] for p in resp.json()["items"]] == [True, False]

    def test_pool_unknown_event(self, client):
        resp = _get(client, "/api/events/31337/pool/")
        assert resp.status_code == 404

    def test_balance_and_transactions(self, client, make_user):
        user = make_user(balance="750", coins=12)

        resp = _get(client, "/api/users/me/balance/", user)
        assert resp.status_code == 200
        assert Decimal(resp.json()["balance"]) == Decimal("750")
        assert resp.json()["coins"] == 12

        resp = _get(client, "/api/users/me/transactions/?limit=5", user)
        assert resp.status_code == 200
        items = resp.json()["items"]
        assert len(items) == 1
        assert items[0]["type"] == "deposit"

    def test_transactions_bad_limit(self, client, make_user):
        resp = _get(client, "/api/users/me/transactions/?limit=abc", make_user())
        assert resp.status_code == 400

    def test_balance_requires_user(self, client):
        assert _get(client, "/api/users/me/balance/").status_code == 401


class TestJoinRequestViews:
    def test_creator_lists_and_approves(self, client, make_event, make_user, creator):
        event = make_event(is_private=True)
        user = make_user(balance="500")
        join_request = request_join(event.id, user.id, True, "500")

        resp = _get(client, f"/api/events/{event.id}/join-requests/", creator)
        assert resp.status_code == 200
        assert [r["id"] for r in resp.json()["items"]] == [join_request.id]

        resp = _post(client, f"/api/events/join-requests/{join_request.id}/approve/", {}, creator)
        assert resp.status_code == 200
        assert resp.json()["user_id"] == str(user.id)
        assert get_balance(user.id)["balance"] == Decimal("0")

        resp = _post(client, f"/api/events/join-requests/{join_request.id}/reject/", {}, creator)
        assert resp.status_code == 409
        assert resp.json()["code"] == "REQUEST_NOT_PENDING"

    def test_non_creator_cannot_list_or_respond(self, client, make_event, make_user):
        event = make_event(is_private=True)
        user = make_user(balance="500")
        join_request = request_join(event.id, user.id, True, "500")

        resp = _get(client, f"/api/events/{event.id}/join-requests/", user)
        assert resp.status_code == 403

        resp = _post(client, f"/api/events/join-requests/{join_request.id}/reject/", {}, user)
        assert resp.status_code == 403


class TestAdminViews:
    def test_result_then_payout(self, client, make_event, stake, admin_user, creator):
        event = make_event(entry_fee="500")
        winner, _ = stake(event, True)
        loser, _ = stake(event, False)

        resp = _post(client, f"/api/admin/events/{event.id}/result/", {"result": True}, admin_user)
        assert resp.status_code == 200
        assert resp.json()["event"]["admin_result"] is True
        assert resp.json()["event"]["status"] == EventStatus.ACTIVE

        resp = _post(client, f"/api/admin/events/{event.id}/payout/", {}, admin_user)
        assert resp.status_code == 200
        body = resp.json()
        assert body["payout"]["winners_count"] == 1
        assert Decimal(body["payout"]["total_payout"]) == Decimal("970")
        assert Decimal(body["payout"]["creator_fee"]) == Decimal("30")
        assert body["event"]["status"] == EventStatus.COMPLETED

        assert get_balance(winner.id)["balance"] == Decimal("970")
        assert get_balance(loser.id)["balance"] == Decimal("0")
        assert get_balance(creator.id)["balance"] == Decimal("30")

        resp = _post(client, f"/api/admin/events/{event.id}/payout/", {}, admin_user)
        assert resp.status_code == 409
        assert resp.json()["code"] == "ALREADY_SETTLED"

    def test_no_winners_message(self, client, make_event, stake, admin_user):
        event = make_event(entry_fee="500")
        stake(event, False)
        admin_set_result(event.id, True)

        resp = _post(client, f"/api/admin/events/{event.id}/payout/", {}, admin_user)

        assert resp.status_code == 200
        assert "paid to creator" in resp.json()["message"]
        assert resp.json()["payout"]["winners_count"] == 0

    def test_result_requires_boolean(self, client, make_event, admin_user):
        event = make_event()
        resp = _post(client, f"/api/admin/events/{event.id}/result/", {"result": "yes"}, admin_user)
        assert resp.status_code == 400
        assert get_event(event.id).admin_result is None

    def test_result_twice_conflicts(self, client, make_event, admin_user):
        event = make_event()
        _post(client, f"/api/admin/events/{event.id}/result/", {"result": False}, admin_user)
        resp = _post(client, f"/api/admin/events/{event.id}/result/", {"result": True}, admin_user)
        assert resp.status_code == 409

    def test_payout_before_result(self, client, make_event, admin_user):
        event = make_event()
        resp = _post(client, f"/api/admin/events/{event.id}/payout/", {}, admin_user)
        assert resp.status_code == 400
        assert resp.json()["code"] == "SETTLEMENT_NOT_READY"

    def test_admin_endpoints_reject_regular_users(self, client, make_event, make_user):
        event = make_event()
        resp = _post(client, f"/api/admin/events/{event.id}/result/", {"result": True}, make_user())
        assert resp.status_code == 403


class TestCapacityAndJoinedEventViews:
    def test_admin_adds_slots(self, client, make_event, admin_user):
        event = make_event(max_participants=2)

        resp = _post(client, f"/api/admin/events/{event.id}/capacity/", {"additional_slots": 3}, admin_user)

        assert resp.status_code == 200
        assert resp.json()["event"]["max_participants"] == 5

    def test_capacity_requires_admin(self, client, make_event, creator):
        event = make_event(max_participants=2)
        resp = _post(client, f"/api/admin/events/{event.id}/capacity/", {"additional_slots": 3}, creator)
        assert resp.status_code == 403
        assert get_event(event.id).max_participants == 2

    def test_capacity_rejects_bad_slots(self, client, make_event, admin_user):
        event = make_event()
        resp = _post(client, f"/api/admin/events/{event.id}/capacity/", {"additional_slots": "ten"}, admin_user)
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_PARAM"

    def test_joined_events_lists_callers_participations(self, client, make_event, make_user):
        first = make_event(entry_fee="100")
        second = make_event(entry_fee="200")
        user = make_user(balance="1000")
        _post(client, f"/api/events/{first.id}/join/", {"prediction": True}, user)
        _post(client, f"/api/events/{second.id}/join/", {"prediction": False}, user)

        resp = _get(client, "/api/users/me/events/", user)

        assert resp.status_code == 200
        items = resp.json()["items"]
        assert [item["event"]["id"] for item in items] == [second.id, first.id]
        assert items[0]["participation"]["prediction"] is False
        assert _get(client, "/api/users/me/events/", make_user()).json()["items"] == []
