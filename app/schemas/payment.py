from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional

from app.schemas.customers import PaymentStatusLiteral

class PaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: float = Field(ge=0)
    currency: str
    order_id: str = Field(alias="orderId")
    customer_name: str = Field(alias="customerName")
    customer_phone: str = Field(alias="customerPhone")

class PaymentResult(BaseModel):
    """Outcome of a payment initiation.

    Either a failure carrying ``error_message`` (and nothing else), or a
    success that may carry a payment id and a gateway redirect URL.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    payment_id: Optional[str] = Field(default=None, alias="paymentId")
    redirect_url: Optional[str] = Field(default=None, alias="redirectUrl")
    error_message: Optional[str] = Field(default=None, alias="errorMessage")

    @model_validator(mode="after")
    def _one_outcome(self):
        if self.success and self.error_message is not None:
            raise ValueError("successful payment result cannot carry an error message")
        if not self.success:
            if not self.error_message:
                raise ValueError("failed payment result needs an error message")
            if self.payment_id is not None or self.redirect_url is not None:
                raise ValueError("failed payment result cannot carry a payment id or redirect url")
        return self

    @classmethod
    def failed(cls, message: str) -> "PaymentResult":
        return cls(success=False, error_message=message)

class PaymentStatusOut(BaseModel):
    status: PaymentStatusLiteral
