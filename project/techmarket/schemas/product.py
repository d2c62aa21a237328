# techmarket/schemas/product.py

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

# ────────────── Base schema ──────────────
class ProductBase(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    image: Optional[str] = None
    seller_name: Optional[str] = None

# ────────────── CREATE schema ──────────────
class ProductCreate(ProductBase):
    pass  # the seller form sends whatever it has; the table enforces title/price

class ProductIdResponse(BaseModel):
    id: int
    success: bool = True

# ────────────── RESPONSE schema ──────────────
class Product(ProductBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
