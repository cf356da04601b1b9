from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from app.schemas.orders import OrderLine

def _money(x) -> float:
    return float(Decimal(x).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))

def line_total(line: OrderLine) -> Decimal:
    # str() keeps 3.75 as 3.75 instead of its binary float expansion
    return Decimal(str(line.price)) * line.quantity

def order_total(lines: Iterable[OrderLine]) -> float:
    return _money(sum((line_total(l) for l in lines), Decimal("0")))

def billable_lines(lines: Iterable[OrderLine]) -> list[OrderLine]:
    return [l for l in lines if l.quantity > 0]
