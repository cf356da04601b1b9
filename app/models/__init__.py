# Importing the module registers tables with Base for create_all()
from .core import (  # noqa: F401
    PaymentStatus,
    CustomerRow, OrderLineRow,
)

__all__ = ["PaymentStatus", "CustomerRow", "OrderLineRow"]
