from __future__ import annotations

from prometheus_client import Counter

ORDERS_ADMITTED_TOTAL = Counter(
    "octopoz_orders_admitted_total",
    "Total number of orders admitted against the monthly quota.",
    ["tenant_id", "order_type"],
)

CAPACITY_REJECTIONS_TOTAL = Counter(
    "octopoz_capacity_rejections_total",
    "Total number of orders rejected because the monthly quota was reached.",
    ["tenant_id"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "octopoz_order_transition_total",
    "Total number of order status transitions.",
    ["from", "to"],
)

PROMOTION_REDEMPTIONS_TOTAL = Counter(
    "octopoz_promotion_redemptions_total",
    "Total number of promotion redemption attempts by outcome.",
    ["tenant_id", "outcome"],
)

RESERVATIONS_BOOKED_TOTAL = Counter(
    "octopoz_reservations_booked_total",
    "Total number of reservations booked.",
    ["tenant_id"],
)

BOOKING_CONFLICTS_TOTAL = Counter(
    "octopoz_booking_conflicts_total",
    "Total number of booking attempts rejected by the buffer re-check.",
    ["tenant_id"],
)

TRANSACTION_RETRIES_TOTAL = Counter(
    "octopoz_transaction_retries_total",
    "Total number of units of work retried after losing a write race.",
    ["operation"],
)


def record_order_admitted(tenant_id: str, order_type: str) -> None:
    ORDERS_ADMITTED_TOTAL.labels(tenant_id=tenant_id, order_type=order_type).inc()


def record_capacity_rejection(tenant_id: str) -> None:
    CAPACITY_REJECTIONS_TOTAL.labels(tenant_id=tenant_id).inc()


def record_order_transition(from_status: str, to_status: str) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status, "to": to_status}).inc()


def record_promotion_redemption(tenant_id: str, outcome: str) -> None:
    PROMOTION_REDEMPTIONS_TOTAL.labels(tenant_id=tenant_id, outcome=outcome).inc()


def record_reservation_booked(tenant_id: str) -> None:
    RESERVATIONS_BOOKED_TOTAL.labels(tenant_id=tenant_id).inc()


def record_booking_conflict(tenant_id: str) -> None:
    BOOKING_CONFLICTS_TOTAL.labels(tenant_id=tenant_id).inc()


def record_transaction_retry(operation: str) -> None:
    TRANSACTION_RETRIES_TOTAL.labels(operation=operation).inc()
