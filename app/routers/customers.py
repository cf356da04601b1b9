from fastapi import APIRouter, Depends, HTTPException

from app.deps import get_payment_client, get_screens, get_store
from app.schemas.common import Msg
from app.schemas.customers import CheckinIn, CheckinOut, CustomerRecord
from app.schemas.orders import ContactIn
from app.schemas.payment import PaymentStatusOut
from app.services.checkout import ScreenRegistry
from app.services.payment import PaymentClient
from app.services.store import CustomerStore

router = APIRouter(prefix="/customers", tags=["customers"])

def _get_or_404(store: CustomerStore, customer_id: str) -> CustomerRecord:
    rec = store.get_by_id(customer_id)
    if not rec:
        raise HTTPException(404, detail="customer not found")
    return rec

@router.post("/", response_model=CheckinOut)
def check_in(body: CheckinIn, store: CustomerStore = Depends(get_store)):
    return CheckinOut(id=store.create_customer(body.name, body.phone))

@router.get("/active", response_model=list[CustomerRecord])
def list_active(store: CustomerStore = Depends(get_store)):
    """Customers still waiting on the kitchen, oldest first."""
    return store.list_active()

@router.get("/{customer_id}", response_model=CustomerRecord)
def get_customer(customer_id: str, store: CustomerStore = Depends(get_store)):
    return _get_or_404(store, customer_id)

@router.put("/{customer_id}/contact", response_model=CustomerRecord)
def update_contact(customer_id: str, body: ContactIn, store: CustomerStore = Depends(get_store)):
    _get_or_404(store, customer_id)
    store.update_contact_info(customer_id, body.name, body.phone)
    return store.get_by_id(customer_id)

@router.post("/{customer_id}/complete", response_model=CustomerRecord)
def complete(customer_id: str, store: CustomerStore = Depends(get_store)):
    _get_or_404(store, customer_id)
    store.mark_completed(customer_id)
    return store.get_by_id(customer_id)

@router.delete("/{customer_id}", response_model=Msg)
def remove(customer_id: str, store: CustomerStore = Depends(get_store), screens: ScreenRegistry = Depends(get_screens)):
    store.remove(customer_id)
    screens.close(customer_id)
    return Msg(message="deleted")

@router.get("/{customer_id}/payment/status", response_model=PaymentStatusOut)
async def payment_status(
    customer_id: str,
    store: CustomerStore = Depends(get_store),
    payment: PaymentClient = Depends(get_payment_client),
):
    # read-only: the stored status is left as recorded at checkout
    rec = _get_or_404(store, customer_id)
    if not rec.payment_id:
        return PaymentStatusOut(status="failed")
    return await payment.check_payment_status(rec.payment_id)
