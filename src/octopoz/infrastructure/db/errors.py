from __future__ import annotations

from sqlalchemy.exc import DBAPIError, IntegrityError

# serialization_failure, deadlock_detected, lock_not_available
_TRANSIENT_SQLSTATES = frozenset({"40001", "40P01", "55P03"})
_TRANSIENT_SQLITE_MESSAGES = ("database is locked", "database table is locked")
ORDER_NUMBER_CONSTRAINT = "uq_orders_tenant_order_number"


def _sqlstate(exc: DBAPIError) -> str | None:
    original = exc.orig
    return getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)


def is_transient_db_error(exc: BaseException) -> bool:
    """True when the store aborted the statement because of a concurrent writer."""
    if not isinstance(exc, DBAPIError):
        return False
    if isinstance(exc, IntegrityError):
        message = str(exc.orig)
        return ORDER_NUMBER_CONSTRAINT in message or "orders.order_number" in message
    if _sqlstate(exc) in _TRANSIENT_SQLSTATES:
        return True
    message = str(exc.orig).lower()
    return any(fragment in message for fragment in _TRANSIENT_SQLITE_MESSAGES)
