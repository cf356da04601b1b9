from fastapi import APIRouter, Depends, HTTPException

from app.deps import require_screen
from app.schemas.orders import ContactIn, OrderScreenOut, QuantityIn
from app.services.checkout import OrderScreen

router = APIRouter(prefix="/order", tags=["order"])


@router.get("/{customer_id}", response_model=OrderScreenOut)
def get_screen(screen: OrderScreen = Depends(require_screen)):
    return screen.view()


@router.post("/{customer_id}/quantity", response_model=OrderScreenOut)
def change_quantity(body: QuantityIn, screen: OrderScreen = Depends(require_screen)):
    try:
        screen.update_quantity(body.product_id, body.delta)
    except KeyError:
        raise HTTPException(404, detail="product not found")
    return screen.view()


@router.put("/{customer_id}/contact", response_model=OrderScreenOut)
def set_contact(body: ContactIn, screen: OrderScreen = Depends(require_screen)):
    screen.set_contact(body.name, body.phone)
    return screen.view()


@router.post("/{customer_id}/checkout", response_model=OrderScreenOut)
async def checkout(body: ContactIn | None = None, screen: OrderScreen = Depends(require_screen)):
    """
    Run checkout for the screen's current selection.

    Always answers 200: validation errors, payment failures and the
    gateway redirect are all reported through the returned screen state.
    """
    if body is not None:
        screen.set_contact(body.name, body.phone)
    return await screen.checkout()
