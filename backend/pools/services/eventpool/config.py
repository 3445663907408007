"""
Pool economics: creator fee rate and custom-stake ceiling.

Platform defaults live in settings (EVENT_POOL_*); an event may override
either value on its own row.
"""

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULT_CREATOR_FEE_RATE = Decimal("0.03")
DEFAULT_MAX_STAKE_MULTIPLIER = 10


@dataclass(frozen=True)
class PoolConfig:
    creator_fee_rate: Decimal = DEFAULT_CREATOR_FEE_RATE
    max_stake_multiplier: int = DEFAULT_MAX_STAKE_MULTIPLIER

    def __post_init__(self):
        rate = Decimal(str(self.creator_fee_rate))
        if not rate.is_finite() or rate < 0 or rate >= 1:
            raise ImproperlyConfigured(
                f"creator_fee_rate must be in [0, 1), got {self.creator_fee_rate!r}"
            )
        if int(self.max_stake_multiplier) < 1:
            raise ImproperlyConfigured(
                f"max_stake_multiplier must be >= 1, got {self.max_stake_multiplier!r}"
            )
        object.__setattr__(self, "creator_fee_rate", rate)
        object.__setattr__(self, "max_stake_multiplier", int(self.max_stake_multiplier))


def platform_pool_config() -> PoolConfig:
    return PoolConfig(
        creator_fee_rate=Decimal(
            str(getattr(settings, "EVENT_POOL_CREATOR_FEE_RATE", DEFAULT_CREATOR_FEE_RATE))
        ),
        max_stake_multiplier=getattr(
            settings, "EVENT_POOL_MAX_STAKE_MULTIPLIER", DEFAULT_MAX_STAKE_MULTIPLIER
        ),
    )


def resolve_pool_config(event) -> PoolConfig:
    """Platform defaults with the event's own overrides applied."""
    base = platform_pool_config()
    rate = event.creator_fee_rate if event.creator_fee_rate is not None else base.creator_fee_rate
    multiplier = (
        event.max_stake_multiplier
        if event.max_stake_multiplier is not None
        else base.max_stake_multiplier
    )
    return PoolConfig(creator_fee_rate=rate, max_stake_multiplier=multiplier)
