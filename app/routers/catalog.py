from fastapi import APIRouter

from app.catalog import PRODUCTS
from app.schemas.catalog import Product

router = APIRouter(prefix="/catalog", tags=["catalog"])

@router.get("/", response_model=list[Product])
def list_products():
    return list(PRODUCTS)
