import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("display_name", models.TextField(blank=True, default="")),
                ("role", models.TextField(default="user")),
                ("coins", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "users",
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("title", models.TextField()),
                ("description", models.TextField(blank=True, default="")),
                ("category", models.TextField(blank=True, default="general")),
                ("entry_fee", models.DecimalField(decimal_places=2, max_digits=20)),
                ("betting_model", models.TextField(default="fixed")),
                ("yes_pool", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
                ("no_pool", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
                ("event_pool", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
                ("status", models.TextField(default="active")),
                ("admin_result", models.BooleanField(blank=True, null=True)),
                ("result", models.BooleanField(blank=True, null=True)),
                ("creator_fee", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
                ("creator_fee_rate", models.DecimalField(blank=True, decimal_places=4, max_digits=6, null=True)),
                ("max_stake_multiplier", models.PositiveIntegerField(blank=True, null=True)),
                ("is_private", models.BooleanField(default=False)),
                ("max_participants", models.PositiveIntegerField(default=100)),
                ("end_date", models.DateTimeField(blank=True, null=True)),
                ("resolved_at", models.DateTimeField(blank=True, null=True)),
                ("settled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "creator",
                    models.ForeignKey(
                        db_column="creator_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="created_events",
                        to="pools.user",
                    ),
                ),
                (
                    "resolved_by",
                    models.ForeignKey(
                        blank=True,
                        db_column="resolved_by",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="resolved_events",
                        to="pools.user",
                    ),
                ),
            ],
            options={
                "db_table": "events",
            },
        ),
        migrations.CreateModel(
            name="EventJoinRequest",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("prediction", models.BooleanField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=20)),
                ("status", models.TextField(default="pending")),
                ("requested_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("responded_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        db_column="event_id",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="join_requests",
                        to="pools.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        db_column="user_id",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_join_requests",
                        to="pools.user",
                    ),
                ),
            ],
            options={
                "db_table": "event_join_requests",
            },
        ),
        migrations.CreateModel(
            name="EventParticipant",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("prediction", models.BooleanField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=20)),
                ("status", models.TextField(default="active")),
                ("payout", models.DecimalField(blank=True, decimal_places=2, max_digits=20, null=True)),
                ("payout_at", models.DateTimeField(blank=True, null=True)),
                ("joined_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "event",
                    models.ForeignKey(
                        db_column="event_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="participants",
                        to="pools.event",
                    ),
                ),
                (
                    "matched_with",
                    models.ForeignKey(
                        blank=True,
                        db_column="matched_with",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="pools.user",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        db_column="user_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="participations",
                        to="pools.user",
                    ),
                ),
            ],
            options={
                "db_table": "event_participants",
                "constraints": [
                    models.UniqueConstraint(fields=("event", "user"), name="uniq_event_participant"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("type", models.TextField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=20)),
                ("description", models.TextField(blank=True, default="")),
                ("related_id", models.BigIntegerField(blank=True, null=True)),
                ("status", models.TextField(default="completed")),
                ("reference", models.TextField(blank=True, null=True, unique=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "user",
                    models.ForeignKey(
                        db_column="user_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="pools.user",
                    ),
                ),
            ],
            options={
                "db_table": "transactions",
                "indexes": [
                    models.Index(fields=["user", "status"], name="idx_tx_user_status"),
                ],
            },
        ),
    ]
