from django.db import models
from django.utils import timezone


class ParticipantStatus:
    ACTIVE = "active"
    MATCHED = "matched"
    WON = "won"
    LOST = "lost"

    SETTLED = (WON, LOST)


class EventParticipant(models.Model):
    id = models.BigAutoField(primary_key=True)
    event = models.ForeignKey(
        "pools.Event", db_column="event_id", on_delete=models.PROTECT, related_name="participants"
    )
    user = models.ForeignKey(
        "pools.User",
        db_column="user_id",
        on_delete=models.PROTECT,
        related_name="participations",
    )
    prediction = models.BooleanField()
    amount = models.DecimalField(max_digits=20, decimal_places=2)
    status = models.TextField(default=ParticipantStatus.ACTIVE)
    matched_with = models.ForeignKey(
        "pools.User",
        db_column="matched_with",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    payout = models.DecimalField(max_digits=20, decimal_places=2, null=True, blank=True)
    payout_at = models.DateTimeField(null=True, blank=True)
    joined_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "event_participants"
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="uniq_event_participant"),
        ]

    def __str__(self) -> str:
        side = "YES" if self.prediction else "NO"
        return f"{self.event_id}:{self.user_id}:{side}:{self.status}"
