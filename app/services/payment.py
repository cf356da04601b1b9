"""Card payment client.

Talks to the payment proxy that sits in front of the ANZ Worldline
gateway. Public calls never raise: transport errors and non-2xx answers
come back as failed results.

``create_fallback_payment`` is the degraded-mode path used when the proxy
is unreachable (local development, missing gateway credentials). It makes
no network call and always succeeds without a redirect URL.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Awaitable, Callable

import httpx

from app.schemas.payment import PaymentRequest, PaymentResult, PaymentStatusOut

log = logging.getLogger(__name__)

INITIATION_FAILED = "Payment initiation failed"
INITIATION_UNEXPECTED = "An unexpected error occurred during payment initiation"
KNOWN_STATUSES = {"pending", "paid", "failed"}


class PaymentClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        fallback_delay: float = 1.5,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.fallback_delay = fallback_delay
        self._transport = transport
        self._sleep = sleep

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def initiate_payment(self, request: PaymentRequest) -> PaymentResult:
        """Start a payment; a success may carry a gateway page to redirect to."""
        body = request.model_dump(by_alias=True)
        log.info("initiating payment", extra={"extra": {"order_id": request.order_id, "amount": request.amount}})
        try:
            async with self._client() as client:
                r = await client.post("/api/payment", json=body)
            data = r.json()
            if r.is_success:
                return PaymentResult(
                    success=True,
                    payment_id=data.get("paymentId"),
                    redirect_url=data.get("redirectUrl"),
                )
            message = data.get("errorMessage") or INITIATION_FAILED
        except Exception as e:
            log.error("payment initiation error: %s", e, extra={"extra": {"order_id": request.order_id}})
            return PaymentResult.failed(INITIATION_UNEXPECTED)

        log.warning(
            "payment initiation rejected",
            extra={"extra": {"order_id": request.order_id, "status_code": r.status_code}},
        )
        return PaymentResult.failed(message)

    async def check_payment_status(self, payment_id: str) -> PaymentStatusOut:
        try:
            async with self._client() as client:
                r = await client.get("/api/payment/status", params={"paymentId": payment_id})
            status = r.json().get("status") if r.is_success else None
        except Exception as e:
            log.error("payment status error: %s", e, extra={"extra": {"payment_id": payment_id}})
            return PaymentStatusOut(status="failed")

        if status not in KNOWN_STATUSES:
            log.warning(
                "payment status check failed",
                extra={"extra": {"payment_id": payment_id, "status_code": r.status_code}},
            )
            return PaymentStatusOut(status="failed")
        return PaymentStatusOut(status=status)

    async def create_fallback_payment(self, request: PaymentRequest) -> PaymentResult:
        log.info("using fallback payment", extra={"extra": {"order_id": request.order_id}})
        await self._sleep(self.fallback_delay)
        # time + small random range: not collision free, fine for one terminal
        mock_id = f"TEST-{int(time.time() * 1000)}-{random.randrange(1000)}"
        log.info("created fallback payment", extra={"extra": {"order_id": request.order_id, "payment_id": mock_id}})
        return PaymentResult(success=True, payment_id=mock_id)
