import logging

import httpx

from app.schemas.orders import OrderSubmission

log = logging.getLogger(__name__)


class OrderBackend:
    """Order-recording backend at the counter's head office.

    Calls here are best-effort and sit outside the payment flow: failures
    are logged and swallowed, nothing is retried, and the local order is
    kept whatever happens.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def record_order(self, submission: OrderSubmission) -> bool:
        """POST the order, then confirm the check-in. Returns False on any failure."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(f"{self.base_url}/api/orders", json=submission.model_dump(by_alias=True))
                r.raise_for_status()
                r = await client.get(f"{self.base_url}/api/checkin/")
                r.raise_for_status()
        except Exception as e:
            # backend may be down; the counter keeps selling
            log.warning("order submission failed: %s", e, extra={"extra": {"phone": submission.phone}})
            return False
        log.info("order submitted", extra={"extra": {"items": len(submission.items)}})
        return True
