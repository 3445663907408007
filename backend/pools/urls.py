from django.urls import path

from .views import admin, events, users

urlpatterns = [
    # Event pools
    path("api/events/", events.create_event_view, name="event-create"),
    path("api/events/<int:event_id>/pool/", events.pool_stats, name="event-pool"),
    path("api/events/<int:event_id>/join/", events.join, name="event-join"),
    path(
        "api/events/<int:event_id>/participants/",
        events.participants,
        name="event-participants",
    ),
    path(
        "api/events/<int:event_id>/join-requests/",
        events.join_requests,
        name="event-join-requests",
    ),
    path(
        "api/events/join-requests/<int:request_id>/approve/",
        events.approve_request,
        name="join-request-approve",
    ),
    path(
        "api/events/join-requests/<int:request_id>/reject/",
        events.reject_request,
        name="join-request-reject",
    ),

    # Admin resolution
    path(
        "api/admin/events/<int:event_id>/result/",
        admin.admin_set_event_result,
        name="admin-event-result",
    ),
    path(
        "api/admin/events/<int:event_id>/payout/",
        admin.admin_process_payout,
        name="admin-event-payout",
    ),
    path(
        "api/admin/events/<int:event_id>/capacity/",
        admin.admin_update_event_capacity,
        name="admin-event-capacity",
    ),

    # Wallet
    path("api/users/me/balance/", users.balance, name="user-balance"),
    path("api/users/me/transactions/", users.transactions, name="user-transactions"),
    path("api/users/me/events/", users.joined_events, name="user-events"),
]
