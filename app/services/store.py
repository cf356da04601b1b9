"""Customer record store.

The store owns every checked-in customer's record: contact details, the
order selected at the counter, its total and the payment status. Callers
get copies back and change records only through the update methods. Each
update that hits a record writes the whole collection to the configured
storage backend before returning.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable

from sqlalchemy import delete
from sqlalchemy.orm import sessionmaker

from app.catalog import get_product
from app.models.core import CustomerRow, OrderLineRow, PaymentStatus
from app.schemas.customers import CustomerRecord, PaymentStatusLiteral
from app.schemas.orders import OrderLine

log = logging.getLogger(__name__)

STORAGE_NAME = "customer-storage"


# ── Storage backends ────────────────────────────────────────────────────────

class CustomerStorage(ABC):
    """Durable home for the customer collection."""

    @abstractmethod
    def load(self) -> list[CustomerRecord]:
        ...

    @abstractmethod
    def save(self, records: list[CustomerRecord]) -> None:
        ...


def _dump(records: Iterable[CustomerRecord]) -> dict:
    return {
        "state": {"customers": [r.model_dump(mode="json", by_alias=True) for r in records]},
        "version": 0,
    }


def _parse(doc: dict) -> list[CustomerRecord]:
    customers = (doc.get("state") or {}).get("customers") or []
    return [CustomerRecord.model_validate(c) for c in customers]


class MemoryStorage(CustomerStorage):
    """Keeps a serialised snapshot in memory; nothing survives the process."""

    def __init__(self, records: Iterable[CustomerRecord] = ()) -> None:
        self._doc = _dump(records)

    def load(self) -> list[CustomerRecord]:
        return _parse(self._doc)

    def save(self, records: list[CustomerRecord]) -> None:
        self._doc = _dump(records)


class JsonFileStorage(CustomerStorage):
    """JSON document on local disk, rewritten in full on every save."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def load(self) -> list[CustomerRecord]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as fh:
            return _parse(json.load(fh))

    def save(self, records: list[CustomerRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{STORAGE_NAME}-", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(_dump(records), fh, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class SqlStorage(CustomerStorage):
    """Customer collection kept in the ``customer_record`` tables.

    ``save`` replaces the table contents in a single transaction, so a
    reader never sees half of a save.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def load(self) -> list[CustomerRecord]:
        with self.session_factory() as db:
            rows = db.query(CustomerRow).order_by(CustomerRow.position).all()
            return [
                CustomerRecord(
                    id=r.id,
                    name=r.name,
                    phone=r.phone,
                    timestamp=r.timestamp,
                    completed=r.completed,
                    order=[
                        OrderLine(id=l.product_id, name=l.name, price=float(l.price), quantity=l.quantity)
                        for l in r.lines
                    ],
                    total_amount=float(r.total_amount or 0),
                    payment_status=r.payment_status.value,
                    payment_id=r.payment_id,
                )
                for r in rows
            ]

    def save(self, records: list[CustomerRecord]) -> None:
        with self.session_factory() as db:
            with db.begin():
                db.execute(delete(OrderLineRow))
                db.execute(delete(CustomerRow))
                for pos, rec in enumerate(records):
                    db.add(CustomerRow(
                        id=rec.id,
                        position=pos,
                        name=rec.name,
                        phone=rec.phone,
                        timestamp=rec.timestamp,
                        completed=rec.completed,
                        total_amount=rec.total_amount,
                        payment_status=PaymentStatus(rec.payment_status),
                        payment_id=rec.payment_id,
                        lines=[
                            OrderLineRow(
                                line_index=idx, product_id=l.id, name=l.name, price=l.price, quantity=l.quantity
                            )
                            for idx, l in enumerate(rec.order)
                        ],
                    ))


# ── Store ───────────────────────────────────────────────────────────────────

class CustomerStore:
    """In-process repository of customer records backed by a storage backend.

    Lookups by an unknown id return ``None``; updates for an unknown id do
    nothing and do not raise.
    """

    def __init__(self, storage: CustomerStorage, clock: Callable[[], float] = time.time) -> None:
        self.storage = storage
        self._clock = clock
        self._customers: list[CustomerRecord] = storage.load()
        self._last_id = max((int(c.id) for c in self._customers if c.id.isdigit()), default=0)
        log.info("customer store loaded", extra={"extra": {"customers": len(self._customers)}})

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _next_id(self, now_ms: int) -> str:
        # ms clock, bumped so ids stay strictly increasing
        self._last_id = max(now_ms, self._last_id + 1)
        return str(self._last_id)

    def _find(self, customer_id: str) -> CustomerRecord | None:
        return next((c for c in self._customers if c.id == customer_id), None)

    def _persist(self) -> None:
        self.storage.save(self._customers)

    def _update(self, customer_id: str, **changes) -> bool:
        rec = self._find(customer_id)
        if rec is None:
            log.debug("update for unknown customer ignored", extra={"extra": {"customer_id": customer_id}})
            return False
        for field, value in changes.items():
            setattr(rec, field, value)
        self._persist()
        return True

    # ----- mutations -----
    def create_customer(self, name: str = "", phone: str = "") -> str:
        now_ms = self._now_ms()
        rec = CustomerRecord(id=self._next_id(now_ms), name=name, phone=phone, timestamp=now_ms)
        self._customers.append(rec)
        self._persist()
        log.info("customer created", extra={"extra": {"customer_id": rec.id}})
        return rec.id

    def update_contact_info(self, customer_id: str, name: str, phone: str) -> None:
        self._update(customer_id, name=name, phone=phone)

    def update_order(self, customer_id: str, lines: Iterable[OrderLine], total: float) -> None:
        lines = list(lines)
        unknown = [l.id for l in lines if get_product(l.id) is None]
        if unknown:
            raise ValueError(f"order lines reference unknown products: {unknown}")
        self._update(customer_id, order=[l.model_copy() for l in lines], total_amount=total)

    def update_payment_status(
        self, customer_id: str, status: PaymentStatusLiteral, payment_id: str | None = None
    ) -> None:
        self._update(customer_id, payment_status=status, payment_id=payment_id)

    def mark_completed(self, customer_id: str) -> None:
        self._update(customer_id, completed=True)

    def remove(self, customer_id: str) -> None:
        before = len(self._customers)
        self._customers = [c for c in self._customers if c.id != customer_id]
        if len(self._customers) != before:
            self._persist()
            log.info("customer removed", extra={"extra": {"customer_id": customer_id}})

    # ----- reads -----
    def get_by_id(self, customer_id: str) -> CustomerRecord | None:
        rec = self._find(customer_id)
        return rec.model_copy(deep=True) if rec else None

    def list_active(self) -> list[CustomerRecord]:
        return [c.model_copy(deep=True) for c in self._customers if not c.completed]

    def all(self) -> list[CustomerRecord]:
        return [c.model_copy(deep=True) for c in self._customers]
