# test_order_totals.py
import pytest

from app.catalog import PRODUCTS, get_product, seed_order_lines
from app.schemas.orders import OrderLine
from app.services.billing import billable_lines, order_total
from app.services.checkout import OrderScreen


def test_catalog_seeds_zero_lines_in_order():
    lines = seed_order_lines()
    assert [l.id for l in lines] == ["baguette", "croissant", "banh-mi"]
    assert all(l.quantity == 0 for l in lines)
    assert [l.price for l in lines] == [p.price for p in PRODUCTS]
    assert get_product("croissant").name == "Butter Croissant"
    assert get_product("sourdough") is None


@pytest.mark.parametrize("quantities,expected", [
    ((0, 0, 0), 0.0),
    ((1, 0, 0), 4.5),
    ((2, 3, 1), 23.5),   # 9.00 + 11.25 + 3.25
    ((0, 7, 0), 26.25),
    ((10, 10, 10), 115.0),
])
def test_total_is_rounded_sum(quantities, expected):
    lines = seed_order_lines()
    for line, qty in zip(lines, quantities):
        line.quantity = qty
    assert order_total(lines) == expected


def test_total_rounds_half_up_to_cents():
    assert order_total([OrderLine(id="x", name="X", price=0.125, quantity=1)]) == 0.13
    assert order_total([OrderLine(id="x", name="X", price=0.1, quantity=3)]) == 0.3


def test_billable_lines_drop_zero_quantities():
    lines = seed_order_lines()
    lines[1].quantity = 2
    assert [l.id for l in billable_lines(lines)] == ["croissant"]


def test_quantity_changes_touch_one_line_and_clamp_at_zero(store):
    cid = store.create_customer()
    screen = OrderScreen(cid, store, payment=None, backend=None)

    screen.update_quantity("croissant", 2)
    screen.update_quantity("banh-mi", 1)
    assert [l.quantity for l in screen.lines] == [0, 2, 1]
    assert screen.total == 10.75

    screen.update_quantity("croissant", -5)
    assert [l.quantity for l in screen.lines] == [0, 0, 1]
    assert screen.total == 3.25

    screen.update_quantity("banh-mi", -1)
    assert screen.total == 0.0
    assert screen.can_checkout is False
    assert screen.checkout_label == "Checkout ($0.00)"


def test_unknown_product_raises_key_error(store):
    screen = OrderScreen(store.create_customer(), store, payment=None, backend=None)
    with pytest.raises(KeyError):
        screen.update_quantity("sourdough", 1)


def test_screen_prefills_contact_from_record(store):
    cid = store.create_customer("Mai", "0412 345 678")
    screen = OrderScreen(cid, store, payment=None, backend=None)
    assert (screen.name, screen.phone) == ("Mai", "0412 345 678")


def test_screen_for_unknown_customer_raises(store):
    with pytest.raises(LookupError):
        OrderScreen("missing", store, payment=None, backend=None)
