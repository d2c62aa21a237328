# techmarket/routes/product.py

from fastapi import APIRouter, HTTPException, Request, status
from typing import List
from techmarket.schemas.product import Product, ProductCreate, ProductIdResponse
from techmarket.services.product import create_product_service, read_products_service

router = APIRouter()

# ────────────── READ ALL ──────────────
@router.get(
    "",
    response_model=List[Product],
    status_code=status.HTTP_200_OK,
    summary="List products",
    response_description="All listings, newest first",
    responses={
        200: {"description": "Catalog loaded"},
        500: {"description": "Internal server error"},
    },
)
async def read_products(request: Request):
    try:
        return await read_products_service(request)
    except Exception as e:
        await request.app.state.log.log_error("catalog", f"Failed to load products: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to load products")


# ────────────── CREATE ──────────────
@router.post(
    "",
    response_model=ProductIdResponse,
    status_code=status.HTTP_200_OK,
    summary="List a product for sale",
    response_description="ID of the new listing",
    responses={
        200: {"description": "Listing created"},
        500: {"description": "Listing could not be stored (e.g. missing title or price)"},
    },
)
async def create_product(request: Request, product: ProductCreate):
    try:
        db_product = await create_product_service(product, request)
        return {"id": db_product.id, "success": True}
    except Exception as e:
        await request.app.state.log.log_error(
            "catalog", f"Failed to create product: {str(e)}", {"product": product}
        )
        raise HTTPException(status_code=500, detail=f"Failed to create product: {str(e)}")
