from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal

CheckoutStateLiteral = Literal["idle", "processing", "redirecting", "error"]
ScreenLiteral = Literal["order", "success"]

class OrderLine(BaseModel):
    # field names match the persisted customer-storage layout
    id: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(default=0, ge=0)

class QuantityIn(BaseModel):
    product_id: str
    delta: int

class ContactIn(BaseModel):
    name: str = ""
    phone: str = ""

# ── Backend order submission (external order-recording API) ────────────────
class OrderItemSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_name: str = Field(alias="productName")
    product_id: str = Field(alias="productId")
    quantity: int
    unit_price: float = Field(alias="unitPrice")

class OrderSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone: str
    name: str
    items: list[OrderItemSubmission]
    payment_method: Literal["cash"] = Field(default="cash", alias="paymentMethod")
    note: str = ""

    @classmethod
    def from_lines(cls, name: str, phone: str, lines: list[OrderLine]) -> "OrderSubmission":
        return cls(
            name=name,
            phone=phone,
            items=[
                OrderItemSubmission(
                    product_name=l.name, product_id=l.id, quantity=l.quantity, unit_price=l.price
                )
                for l in lines
            ],
        )

# ── Order screen view ───────────────────────────────────────────────────────
class SuccessHandoff(BaseModel):
    customer_name: str
    customer_phone: str

class OrderScreenOut(BaseModel):
    customer_id: str
    screen: ScreenLiteral
    state: CheckoutStateLiteral
    lines: list[OrderLine]
    total: float
    name: str
    phone: str
    name_error: str = ""
    phone_error: str = ""
    error_message: str = ""
    navigate_to: Optional[str] = None
    can_checkout: bool
    checkout_label: str
    success: Optional[SuccessHandoff] = None
