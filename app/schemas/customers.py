from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal

from app.schemas.orders import OrderLine

PaymentStatusLiteral = Literal["pending", "paid", "failed"]

class CustomerRecord(BaseModel):
    """One checked-in customer.

    Serialised with the camelCase names used by the persisted
    ``customer-storage`` document; attributes are snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    phone: str = ""
    timestamp: int  # creation time, epoch ms
    completed: bool = False
    order: list[OrderLine] = Field(default_factory=list)
    total_amount: float = Field(default=0.0, ge=0, alias="totalAmount")
    payment_status: PaymentStatusLiteral = Field(default="pending", alias="paymentStatus")
    payment_id: Optional[str] = Field(default=None, alias="paymentId")

class CheckinIn(BaseModel):
    name: str = ""
    phone: str = ""

class CheckinOut(BaseModel):
    id: str
