"""Static product catalog for the counter."""

from __future__ import annotations

from app.schemas.catalog import Product
from app.schemas.orders import OrderLine

PRODUCTS: tuple[Product, ...] = (
    Product(
        id="baguette",
        name="Traditional Baguette",
        description="Crispy crust with a soft, airy interior. Perfect for sandwiches or with butter.",
        price=4.5,
        image="/images/baguette.png",
    ),
    Product(
        id="croissant",
        name="Butter Croissant",
        description="Flaky, buttery layers with a golden crust. A French breakfast classic.",
        price=3.75,
        image="/images/croissant.png",
    ),
    Product(
        id="banh-mi",
        name="Bánh Mì Roll",
        description="Light, airy Vietnamese-style roll with a thin crust. Perfect for our signature sandwiches.",
        price=3.25,
        image="/images/banh-mi.png",
    ),
)

_BY_ID: dict[str, Product] = {p.id: p for p in PRODUCTS}


def get_product(product_id: str) -> Product | None:
    return _BY_ID.get(product_id)


def seed_order_lines(products: tuple[Product, ...] = PRODUCTS) -> list[OrderLine]:
    """One zero-quantity line per product, in catalog order."""
    return [OrderLine(id=p.id, name=p.name, price=p.price, quantity=0) for p in products]
