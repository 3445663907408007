from django.db import models
from django.utils import timezone


class BettingModel:
    FIXED = "fixed"
    CUSTOM = "custom"

    ALL = (FIXED, CUSTOM)


class EventStatus:
    ACTIVE = "active"
    COMPLETED = "completed"


class Event(models.Model):
    """
    A YES/NO prediction event with a staked pool.

    yes_pool / no_pool / event_pool are cached running totals maintained by
    joins; event_pool always equals yes_pool + no_pool.
    """

    id = models.BigAutoField(primary_key=True)
    title = models.TextField()
    description = models.TextField(default="", blank=True)
    category = models.TextField(default="general", blank=True)
    creator = models.ForeignKey(
        "pools.User",
        db_column="creator_id",
        on_delete=models.PROTECT,
        related_name="created_events",
    )
    entry_fee = models.DecimalField(max_digits=20, decimal_places=2)
    betting_model = models.TextField(default=BettingModel.FIXED)
    yes_pool = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    no_pool = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    event_pool = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    status = models.TextField(default=EventStatus.ACTIVE)
    admin_result = models.BooleanField(null=True, blank=True)
    result = models.BooleanField(null=True, blank=True)
    creator_fee = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    # Per-event overrides; null falls back to the platform settings.
    creator_fee_rate = models.DecimalField(max_digits=6, decimal_places=4, null=True, blank=True)
    max_stake_multiplier = models.PositiveIntegerField(null=True, blank=True)
    is_private = models.BooleanField(default=False)
    max_participants = models.PositiveIntegerField(default=100)
    end_date = models.DateTimeField(null=True, blank=True)
    resolved_by = models.ForeignKey(
        "pools.User",
        db_column="resolved_by",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="resolved_events",
    )
    resolved_at = models.DateTimeField(null=True, blank=True)
    settled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "events"

    def __str__(self) -> str:
        return self.title


class JoinRequestStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventJoinRequest(models.Model):
    """Pending participation on a private event, waiting for the creator."""

    id = models.BigAutoField(primary_key=True)
    event = models.ForeignKey(
        Event, db_column="event_id", on_delete=models.CASCADE, related_name="join_requests"
    )
    user = models.ForeignKey(
        "pools.User",
        db_column="user_id",
        on_delete=models.CASCADE,
        related_name="event_join_requests",
    )
    prediction = models.BooleanField()
    amount = models.DecimalField(max_digits=20, decimal_places=2)
    status = models.TextField(default=JoinRequestStatus.PENDING)
    requested_at = models.DateTimeField(default=timezone.now)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "event_join_requests"

    def __str__(self) -> str:
        return f"{self.event_id}:{self.user_id}:{self.status}"
