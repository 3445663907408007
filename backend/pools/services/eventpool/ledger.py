"""
Ledger: append-only transaction log and the balance view derived from it.

The ledger records what it is told. Whether a debit is affordable is decided
by the caller (see joins.join_event, which checks and debits under one lock).
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Sum

from ...models import Transaction, TransactionStatus, User
from .errors import DuplicateReferenceError, ValidationError
from .money import ZERO, Number, quantize_money, to_decimal

logger = logging.getLogger(__name__)

ALLOWED_STATUSES = (TransactionStatus.PENDING, TransactionStatus.COMPLETED)


def record_transaction(
    user_id,
    type: str,
    amount: Number,
    description: str,
    related_id: Optional[int] = None,
    reference: Optional[str] = None,
    *,
    status: str = TransactionStatus.COMPLETED,
) -> Transaction:
    """
    Append a signed transaction for a user.

    Raises:
        ValidationError: amount is not a finite number, or status is unknown
        DuplicateReferenceError: reference was already used by another entry
    """
    value = quantize_money(to_decimal(amount, "amount"))
    if status not in ALLOWED_STATUSES:
        raise ValidationError(f"Unknown transaction status '{status}'")

    try:
        # Savepoint so a duplicate reference leaves the caller's transaction usable.
        with transaction.atomic():
            tx = Transaction.objects.create(
                user_id=user_id,
                type=type,
                amount=value,
                description=description or "",
                related_id=related_id,
                status=status,
                reference=reference,
            )
    except IntegrityError as e:
        if reference and Transaction.objects.filter(reference=reference).exists():
            raise DuplicateReferenceError(
                f"Transaction reference '{reference}' already recorded"
            ) from e
        raise

    logger.debug(
        "Ledger entry: user_id=%s, type=%s, amount=%s, reference=%s",
        user_id,
        type,
        value,
        reference,
    )
    return tx


def compute_balance(user_id) -> Decimal:
    total = (
        Transaction.objects.filter(user_id=user_id, status=TransactionStatus.COMPLETED)
        .aggregate(total=Sum("amount"))
        .get("total")
    )
    return quantize_money(Decimal(total)) if total is not None else ZERO


def get_balance(user_id) -> Dict:
    """Balance from completed transactions plus the separate coins counter."""
    coins = User.objects.filter(pk=user_id).values_list("coins", flat=True).first()
    return {
        "balance": compute_balance(user_id),
        "coins": coins or 0,
    }


def list_transactions(user_id, limit: int = 50) -> List[Transaction]:
    return list(
        Transaction.objects.filter(user_id=user_id).order_by("-created_at", "-id")[:limit]
    )
