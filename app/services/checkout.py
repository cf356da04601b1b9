"""Order screen controller.

An :class:`OrderScreen` holds what one customer sees at the counter: the
quantity picked for every catalog product, the contact form, and how far
the payment has got. ``checkout`` runs the whole sale:

1. check the customer still exists and the contact form is valid;
2. save contact details, order and total to the customer store;
3. hand the order to the order backend (best-effort, never blocks);
4. initiate the card payment, falling back to a mock payment once;
5. record ``paid``/``failed`` and move the screen to its next state.

``checkout`` never raises. Every path ends with the screen ``idle``,
``error`` or ``redirecting`` and a view the browser can render.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Awaitable, Callable

from app.catalog import PRODUCTS, seed_order_lines
from app.schemas.orders import OrderLine, OrderScreenOut, OrderSubmission, SuccessHandoff
from app.schemas.payment import PaymentRequest, PaymentResult
from app.services.backend import OrderBackend
from app.services.billing import billable_lines, order_total
from app.services.checkout_state import BUSY_STATES, CheckoutState, transition
from app.services.payment import PaymentClient
from app.services.store import CustomerStore

log = logging.getLogger(__name__)

CUSTOMER_NOT_FOUND = "Customer information not found. Please try again."
NAME_REQUIRED = "Please enter your name"
PHONE_REQUIRED = "Please enter your phone number"
PHONE_INVALID = "Please enter a valid 10-digit phone number"
NO_ITEMS = "Please select at least one item"
PAYMENT_FAILED = "Payment failed. Please try again."
PAYMENT_UNEXPECTED = "An unexpected error occurred during payment. Please try again."
ORDER_NOT_SAVED = "We could not save your order. Please try again."

_TEN_DIGITS = re.compile(r"\d{10}")
_WHITESPACE = re.compile(r"\s")

Sleep = Callable[[float], Awaitable[None]]


class OrderScreen:
    def __init__(
        self,
        customer_id: str,
        store: CustomerStore,
        payment: PaymentClient,
        backend: OrderBackend,
        currency: str = "AUD",
        success_delay: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        customer = store.get_by_id(customer_id)
        if customer is None:
            raise LookupError(f"customer {customer_id} not found")

        self.customer_id = customer_id
        self.store = store
        self.payment = payment
        self.backend = backend
        self.currency = currency
        self.success_delay = success_delay
        self._sleep = sleep

        self.lines: list[OrderLine] = seed_order_lines(PRODUCTS)
        self.name = customer.name or ""
        self.phone = customer.phone or ""
        self.name_error = ""
        self.phone_error = ""
        self.error_message = ""
        self.state = CheckoutState.IDLE
        self.screen = "order"
        self.navigate_to: str | None = None
        self._settled = False

    # ----- form -----
    @property
    def total(self) -> float:
        return order_total(self.lines)

    @property
    def can_checkout(self) -> bool:
        return self.total > 0 and self.state not in BUSY_STATES

    @property
    def checkout_label(self) -> str:
        if self.state == CheckoutState.PROCESSING:
            return "Processing Payment..."
        if self.state == CheckoutState.REDIRECTING:
            return "Redirecting to Payment Gateway..."
        return f"Checkout (${self.total:.2f})"

    def update_quantity(self, product_id: str, delta: int) -> None:
        """Change one line's quantity by ``delta``, never going below zero."""
        for line in self.lines:
            if line.id == product_id:
                line.quantity = max(0, line.quantity + delta)
                return
        raise KeyError(product_id)

    def set_contact(self, name: str, phone: str) -> None:
        self.name = name
        self.phone = phone

    def validate(self) -> bool:
        """Check the contact form, setting or clearing each field's error."""
        ok = True
        if not self.name.strip():
            self.name_error = NAME_REQUIRED
            ok = False
        else:
            self.name_error = ""

        if not self.phone.strip():
            self.phone_error = PHONE_REQUIRED
            ok = False
        elif not _TEN_DIGITS.fullmatch(_WHITESPACE.sub("", self.phone)):
            self.phone_error = PHONE_INVALID
            ok = False
        else:
            self.phone_error = ""
        return ok

    # ----- checkout -----
    def _move(self, target: CheckoutState) -> None:
        self.state = transition(self.state, target)

    async def checkout(self) -> OrderScreenOut:
        if self.state in BUSY_STATES:
            log.warning("checkout already in progress", extra={"extra": {"customer_id": self.customer_id}})
            return self.view()

        if self._settled:
            log.warning("order already paid, checkout ignored", extra={"extra": {"customer_id": self.customer_id}})
            return self.view()

        if self.store.get_by_id(self.customer_id) is None:
            log.error("customer not found", extra={"extra": {"customer_id": self.customer_id}})
            self.error_message = CUSTOMER_NOT_FOUND
            return self.view()

        if not self.validate():
            log.info("contact form invalid", extra={"extra": {"customer_id": self.customer_id}})
            return self.view()

        items = billable_lines(self.lines)
        if not items:
            self.error_message = NO_ITEMS
            return self.view()

        # busy from here on, before the first await
        self._move(CheckoutState.PROCESSING)
        self.error_message = ""
        total = self.total

        try:
            self.store.update_contact_info(self.customer_id, self.name, self.phone)
            self.store.update_order(self.customer_id, items, total)
        except Exception:
            log.exception("could not save order", extra={"extra": {"customer_id": self.customer_id}})
            self._fail(ORDER_NOT_SAVED)
            return self.view()

        try:
            await self.backend.record_order(OrderSubmission.from_lines(self.name, self.phone, items))

            log.info("starting payment", extra={"extra": {"customer_id": self.customer_id, "total": total}})
            request = PaymentRequest(
                amount=total,
                currency=self.currency,
                order_id=self.customer_id,
                customer_name=self.name,
                customer_phone=self.phone,
            )
            result = await self._pay(request)
            settled = self._apply(result)
        except Exception:
            log.exception("unexpected payment error", extra={"extra": {"customer_id": self.customer_id}})
            self._record_failed()
            self._fail(PAYMENT_UNEXPECTED)
            return self.view()

        if settled:
            self._settled = True
            await self._sleep(self.success_delay)
            self.screen = "success"
        return self.view()

    def _record_failed(self) -> None:
        try:
            self.store.update_payment_status(self.customer_id, "failed")
        except Exception:
            log.exception("could not record failed payment", extra={"extra": {"customer_id": self.customer_id}})

    def _fail(self, message: str) -> None:
        if self.state == CheckoutState.PROCESSING:
            self._move(CheckoutState.ERROR)
        self.error_message = message

    async def _pay(self, request: PaymentRequest) -> PaymentResult:
        result = await self.payment.initiate_payment(request)
        if not result.success:
            log.info(
                "payment initiation failed, trying fallback",
                extra={"extra": {"customer_id": self.customer_id, "error": result.error_message}},
            )
            result = await self.payment.create_fallback_payment(request)
        return result

    def _apply(self, result: PaymentResult) -> bool:
        """Record the payment outcome. Returns True when paid with no redirect."""
        if result.success and result.payment_id:
            # paid at initiation time, not on confirmed settlement
            self.store.update_payment_status(self.customer_id, "paid", result.payment_id)
            if result.redirect_url:
                log.info("redirecting to payment gateway", extra={"extra": {"customer_id": self.customer_id}})
                self.navigate_to = result.redirect_url
                self._move(CheckoutState.REDIRECTING)
                return False
            log.info("payment settled without redirect", extra={"extra": {"customer_id": self.customer_id}})
            self._move(CheckoutState.IDLE)
            return True

        log.error("payment failed: %s", result.error_message, extra={"extra": {"customer_id": self.customer_id}})
        self.store.update_payment_status(self.customer_id, "failed")
        self.error_message = result.error_message or PAYMENT_FAILED
        self._move(CheckoutState.ERROR)
        return False

    # ----- view -----
    def view(self) -> OrderScreenOut:
        success = None
        if self.screen == "success":
            success = SuccessHandoff(customer_name=self.name, customer_phone=self.phone)
        return OrderScreenOut(
            customer_id=self.customer_id,
            screen=self.screen,
            state=self.state.value,
            lines=[l.model_copy() for l in self.lines],
            total=self.total,
            name=self.name,
            phone=self.phone,
            name_error=self.name_error,
            phone_error=self.phone_error,
            error_message=self.error_message,
            navigate_to=self.navigate_to,
            can_checkout=self.can_checkout,
            checkout_label=self.checkout_label,
            success=success,
        )


class ScreenRegistry:
    """Open order screens, one per customer id."""

    def __init__(
        self,
        store: CustomerStore,
        payment: PaymentClient,
        backend: OrderBackend,
        currency: str = "AUD",
        success_delay: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.store = store
        self.payment = payment
        self.backend = backend
        self.currency = currency
        self.success_delay = success_delay
        self._sleep = sleep
        self._screens: dict[str, OrderScreen] = {}

    def open(self, customer_id: str) -> OrderScreen:
        screen = self._screens.get(customer_id)
        if screen is None:
            screen = OrderScreen(
                customer_id,
                self.store,
                self.payment,
                self.backend,
                currency=self.currency,
                success_delay=self.success_delay,
                sleep=self._sleep,
            )
            self._screens[customer_id] = screen
        return screen

    def close(self, customer_id: str) -> None:
        self._screens.pop(customer_id, None)
