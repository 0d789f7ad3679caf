from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    email: str | None = None
    phone: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("customer name must not be blank")
