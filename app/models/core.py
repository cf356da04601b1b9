from sqlalchemy import String, ForeignKey, Boolean, Numeric, Enum, Integer, BigInteger
from sqlalchemy.orm import Mapped, mapped_column, relationship
from enum import Enum as PyEnum
from app.db import Base
from app.models.common import TSMixin

# ── Enums ───────────────────────────────────────────────────────────────────
class PaymentStatus(PyEnum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"

# ── Customer records (persisted copy of the customer store) ────────────────
class CustomerRow(Base, TSMixin):
    __tablename__ = "customer_record"
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    position: Mapped[int] = mapped_column(Integer)  # store order
    name: Mapped[str] = mapped_column(String(160), default="")
    phone: Mapped[str] = mapped_column(String(32), default="")
    timestamp: Mapped[int] = mapped_column(BigInteger)  # epoch ms
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    total_amount: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), default=0)
    payment_status: Mapped[PaymentStatus] = mapped_column(Enum(PaymentStatus), default=PaymentStatus.PENDING)
    payment_id: Mapped[str | None] = mapped_column(String(64))
    lines: Mapped[list["OrderLineRow"]] = relationship(
        back_populates="customer", cascade="all, delete-orphan", order_by="OrderLineRow.line_index"
    )

class OrderLineRow(Base):
    __tablename__ = "customer_order_line"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[str] = mapped_column(ForeignKey("customer_record.id", ondelete="CASCADE"))
    line_index: Mapped[int] = mapped_column(Integer)
    product_id: Mapped[str] = mapped_column(String(40))
    name: Mapped[str] = mapped_column(String(160))
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    quantity: Mapped[int] = mapped_column(Integer)
    customer: Mapped[CustomerRow] = relationship(back_populates="lines")
