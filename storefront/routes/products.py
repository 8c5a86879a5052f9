"""
Product API Routes

Create and list products belonging to shops.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from .common import get_store, require_shop
from ..models.product import Product, ProductCreate
from ..storage import ConstraintViolation, Statement, Store
from ..storage.statements import MAX_INTEGER, MIN_INTEGER

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_products(
    shop_id: Optional[int] = Query(None, ge=MIN_INTEGER, le=MAX_INTEGER),
    store: Store = Depends(get_store)
):
    """
    List products, most recently created first.

    Args:
        shop_id: Optional filter by owning shop
    """
    if shop_id is None:
        result = await store.execute(Statement.LIST_PRODUCTS)
    else:
        await require_shop(store, shop_id)
        result = await store.execute(Statement.LIST_PRODUCTS_BY_SHOP, (shop_id,))

    products = [Product(**row) for row in result.rows]

    return {"success": True, "count": len(products), "products": products}


@router.post("", status_code=201)
async def create_product(data: ProductCreate, store: Store = Depends(get_store)):
    """Create a product for an existing shop."""
    await require_shop(store, data.shop_id)

    try:
        result = await store.execute(
            Statement.INSERT_PRODUCT,
            (data.shop_id, data.name, data.description, data.price, data.stock)
        )
    except ConstraintViolation as e:
        if 'FOREIGN KEY' not in str(e).upper():
            raise
        # Shop removed between the lookup and the insert
        raise HTTPException(status_code=404, detail="Shop not found")

    created = await store.execute(Statement.GET_PRODUCT_BY_ID, (result.inserted_id,))

    logger.info(f"Product created: {data.name} (id={result.inserted_id}, shop={data.shop_id})")

    return {"success": True, "product": Product(**created.first())}
