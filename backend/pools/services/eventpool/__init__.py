from .accumulator import apply_join, get_stats
from .config import PoolConfig, platform_pool_config, resolve_pool_config
from .events import create_event, get_event, list_user_events, update_event_capacity
from .joins import (
    approve_join_request,
    join_event,
    list_join_requests,
    reject_join_request,
    request_join,
)
from .ledger import get_balance, list_transactions, record_transaction
from .matching import try_match
from .registry import join, list_by_event, mark_settled, validate_stake
from .settlement import admin_set_result, compute_payouts, process_payout, settle

__all__ = [
    "PoolConfig",
    "admin_set_result",
    "apply_join",
    "approve_join_request",
    "compute_payouts",
    "create_event",
    "get_balance",
    "get_event",
    "get_stats",
    "join",
    "join_event",
    "list_by_event",
    "list_join_requests",
    "list_transactions",
    "list_user_events",
    "mark_settled",
    "platform_pool_config",
    "process_payout",
    "record_transaction",
    "reject_join_request",
    "request_join",
    "resolve_pool_config",
    "settle",
    "try_match",
    "update_event_capacity",
    "validate_stake",
]
