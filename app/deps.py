from fastapi import Depends, HTTPException, Request

from app.services.checkout import OrderScreen, ScreenRegistry
from app.services.payment import PaymentClient
from app.services.store import CustomerStore

def get_store(request: Request) -> CustomerStore:
    return request.app.state.store

def get_payment_client(request: Request) -> PaymentClient:
    return request.app.state.payment

def get_screens(request: Request) -> ScreenRegistry:
    return request.app.state.screens

def require_screen(customer_id: str, screens: ScreenRegistry = Depends(get_screens)) -> OrderScreen:
    try:
        return screens.open(customer_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="customer not found")
