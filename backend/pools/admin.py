from django.contrib import admin

from .models import Event, EventJoinRequest, EventParticipant, Transaction, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "display_name", "role", "coins", "created_at")
    list_filter = ("role",)
    search_fields = ("display_name",)
    readonly_fields = ("id", "created_at")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "title",
        "status",
        "betting_model",
        "entry_fee",
        "event_pool",
        "admin_result",
        "created_at",
    )
    list_filter = ("status", "betting_model", "is_private")
    search_fields = ("title",)
    # Pool totals and settlement fields only change through the pool services.
    readonly_fields = (
        "id",
        "yes_pool",
        "no_pool",
        "event_pool",
        "admin_result",
        "result",
        "creator_fee",
        "resolved_at",
        "settled_at",
        "created_at",
        "updated_at",
    )
    date_hierarchy = "created_at"


@admin.register(EventParticipant)
class EventParticipantAdmin(admin.ModelAdmin):
    list_display = ("id", "event", "user", "prediction", "amount", "status", "payout", "joined_at")
    list_filter = ("status", "prediction")
    raw_id_fields = ("event", "user", "matched_with")
    readonly_fields = ("payout", "payout_at", "joined_at")


@admin.register(EventJoinRequest)
class EventJoinRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "event", "user", "prediction", "amount", "status", "requested_at")
    list_filter = ("status",)
    raw_id_fields = ("event", "user")


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "type", "amount", "status", "reference", "created_at")
    list_filter = ("type", "status")
    search_fields = ("reference", "description")
    raw_id_fields = ("user",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
