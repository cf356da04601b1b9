"""Payment progress of an order screen.

A screen is in exactly one of these states. ``redirecting`` is terminal:
the browser leaves the page for the gateway and the flow resumes elsewhere.
"""

from enum import Enum
from typing import FrozenSet, Mapping


class CheckoutState(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    REDIRECTING = "redirecting"
    ERROR = "error"


TRANSITIONS: Mapping[CheckoutState, FrozenSet[CheckoutState]] = {
    CheckoutState.IDLE: frozenset({CheckoutState.PROCESSING}),
    CheckoutState.PROCESSING: frozenset({CheckoutState.REDIRECTING, CheckoutState.IDLE, CheckoutState.ERROR}),
    CheckoutState.ERROR: frozenset({CheckoutState.PROCESSING, CheckoutState.IDLE}),
    CheckoutState.REDIRECTING: frozenset(),
}

# checkout trigger is disabled in these
BUSY_STATES: FrozenSet[CheckoutState] = frozenset({CheckoutState.PROCESSING, CheckoutState.REDIRECTING})


class InvalidTransition(Exception):
    def __init__(self, current: CheckoutState, target: CheckoutState):
        super().__init__(f"cannot move from {current.value} to {target.value}")
        self.current = current
        self.target = target


def transition(current: CheckoutState, target: CheckoutState) -> CheckoutState:
    if target not in TRANSITIONS[current]:
        raise InvalidTransition(current, target)
    return target
