"""Order status state machine."""
from __future__ import annotations

from typing import Dict, FrozenSet

from .models import OrderStatus

# pending -> accepted -> completed, pending -> cancelled; terminal states have no exits.
TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ACCEPTED, OrderStatus.CANCELLED}),
    OrderStatus.ACCEPTED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class InvalidTransitionError(Exception):
    def __init__(self, current: OrderStatus, target: OrderStatus):
        super().__init__(f"Cannot move order from {current.value} to {target.value}")
        self.current = current
        self.target = target


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in TRANSITIONS[current]


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]


def ensure_transition(current: OrderStatus, target: OrderStatus) -> OrderStatus:
    """Return ``target`` if the move is legal, otherwise raise InvalidTransitionError."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
    return target
