"""Order lifecycle events.

Published on commit by the order repository. Payloads carry only what a
subscriber needs to act without reloading the order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    order_number: str = ""
    user_id: Optional[int] = None


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Any forward move along the lifecycle (never a cancellation)."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    old_status: str = ""
