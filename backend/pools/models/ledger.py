from django.db import models
from django.utils import timezone


class TransactionType:
    EVENT_ESCROW = "event_escrow"
    EVENT_WIN = "event_win"
    EVENT_NO_WINNERS = "event_no_winners"
    CREATOR_FEE = "creator_fee"
    REFUND = "refund"
    DEPOSIT = "deposit"


class TransactionStatus:
    PENDING = "pending"
    COMPLETED = "completed"


class Transaction(models.Model):
    """
    Append-only ledger entry. A user's balance is the sum of the amounts of
    their completed transactions; rows are never updated or deleted.
    """

    id = models.BigAutoField(primary_key=True)
    user = models.ForeignKey(
        "pools.User", db_column="user_id", on_delete=models.PROTECT, related_name="transactions"
    )
    type = models.TextField()
    amount = models.DecimalField(max_digits=20, decimal_places=2)
    description = models.TextField(default="", blank=True)
    related_id = models.BigIntegerField(null=True, blank=True)
    status = models.TextField(default=TransactionStatus.COMPLETED)
    # Idempotency key; unique when present.
    reference = models.TextField(unique=True, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "transactions"
        indexes = [
            models.Index(fields=["user", "status"], name="idx_tx_user_status"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}:{self.type}:{self.amount}"
