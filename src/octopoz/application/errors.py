from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base class for errors surfaced to callers of the engine."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class TenantNotFoundError(EngineError):
    pass


class TenantInactiveError(EngineError):
    pass


class CapacityExceededError(EngineError):
    pass


class PromotionNotApplicableError(EngineError):
    pass


class NoTableAvailableError(EngineError):
    pass


class TableUnavailableError(EngineError):
    pass


class ConcurrencyConflictError(EngineError):
    pass


class OrderNotFoundError(EngineError):
    pass


class ReservationNotFoundError(EngineError):
    pass


class InvalidOrderTransitionError(EngineError):
    pass


class OrderVersionConflictError(EngineError):
    pass


class InvalidReservationTransitionError(EngineError):
    pass
