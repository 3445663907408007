import uuid

from django.db import models
from django.utils import timezone


class UserRole:
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    ADMIN_ROLES = (ADMIN, SUPERADMIN)
    ALL_ROLES = (USER, ADMIN, SUPERADMIN)


class User(models.Model):
    """
    Platform account as seen by the pool core. Identity and sessions belong
    to the auth provider; this row only carries what settlement needs.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    display_name = models.TextField(default="", blank=True)
    role = models.TextField(default=UserRole.USER)
    # Separate integer counter, not derived from the ledger.
    coins = models.IntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "users"

    def __str__(self) -> str:
        return self.display_name or str(self.id)

    @property
    def is_admin(self) -> bool:
        return self.role in UserRole.ADMIN_ROLES
