import itertools
from decimal import Decimal

import pytest
from django.core.cache import cache

from pools.models import BettingModel, User, UserRole
from pools.services.eventpool import create_event, join_event, record_transaction

_user_seq = itertools.count(1)


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    """Create a user, optionally funded with a completed deposit."""

    def _make(balance="0", role=UserRole.USER, coins=0, name=None):
        user = User.objects.create(
            display_name=name or f"user-{next(_user_seq)}",
            role=role,
            coins=coins,
        )
        if Decimal(str(balance)) != 0:
            record_transaction(user.id, "deposit", str(balance), "Test deposit")
        return user

    return _make


@pytest.fixture
def creator(make_user):
    return make_user(name="creator")


@pytest.fixture
def admin_user(make_user):
    return make_user(name="admin", role=UserRole.ADMIN)


@pytest.fixture
def make_event(creator):
    def _make(entry_fee="500", betting_model=BettingModel.FIXED, **kwargs):
        kwargs.setdefault("creator_id", creator.id)
        kwargs.setdefault("title", "Will it rain in Lagos tomorrow?")
        return create_event(entry_fee=entry_fee, betting_model=betting_model, **kwargs)

    return _make


@pytest.fixture
def stake(make_user):
    """Fund a fresh user with exactly ``amount`` and join them on ``event``."""

    def _stake(event, prediction, amount=None, balance=None):
        amount = str(amount if amount is not None else event.entry_fee)
        user = make_user(balance=balance if balance is not None else amount)
        participant = join_event(event.id, user.id, prediction, amount)
        return user, participant

    return _stake
