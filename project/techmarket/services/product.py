# techmarket/services/product.py

from sqlalchemy.future import select
from fastapi import Request

from techmarket.models.product import Product as ProductModel
from techmarket.schemas.product import ProductCreate


async def read_products_service(request: Request) -> list[ProductModel]:
    """
    All listings, newest first. Rows created within the same second
    fall back to id order.
    """
    db = request.state.db
    log = request.app.state.log

    result = await db.execute(
        select(ProductModel).order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
    )
    products = result.scalars().all()

    await log.log_info("catalog", f"{len(products)} products loaded")
    return products


async def create_product_service(product: ProductCreate, request: Request) -> ProductModel:
    """
    Insert a seller listing. Listings are never updated or deleted.
    """
    db = request.state.db
    log = request.app.state.log

    db_product = ProductModel(**product.model_dump())
    db.add(db_product)
    await db.commit()
    await db.refresh(db_product)

    await log.log_info("catalog", "Product listed", {"id": db_product.id, "seller": db_product.seller_name})
    return db_product
