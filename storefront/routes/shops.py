"""
Shop API Routes

Create, list and look up shops.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from .common import get_store
from ..models.shop import Shop, ShopCreate
from ..storage import ConstraintViolation, Statement, Store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_shops(store: Store = Depends(get_store)):
    """List all shops, most recently created first."""
    result = await store.execute(Statement.LIST_SHOPS)
    shops = [Shop(**row) for row in result.rows]

    return {"success": True, "count": len(shops), "shops": shops}


@router.get("/{subdomain}")
async def get_shop(subdomain: str, store: Store = Depends(get_store)):
    """Get a shop by subdomain."""
    result = await store.execute(Statement.GET_SHOP_BY_SUBDOMAIN, (subdomain,))
    shop = result.first()

    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")

    return {"success": True, "shop": Shop(**shop)}


@router.post("", status_code=201)
async def create_shop(data: ShopCreate, store: Store = Depends(get_store)):
    """
    Create a new shop.

    Subdomains are unique; a taken subdomain answers 409.
    """
    existing = await store.execute(Statement.GET_SHOP_BY_SUBDOMAIN, (data.subdomain,))
    if existing.rows:
        raise HTTPException(status_code=409, detail="Subdomain already taken")

    try:
        result = await store.execute(
            Statement.INSERT_SHOP,
            (data.name, data.subdomain, data.owner_email)
        )
    except ConstraintViolation as e:
        logger.warning(f"Shop insert rejected for {data.subdomain}: {e}")
        raise HTTPException(status_code=409, detail="Subdomain already taken")

    created = await store.execute(Statement.GET_SHOP_BY_ID, (result.inserted_id,))

    logger.info(f"Shop created: {data.subdomain} (id={result.inserted_id})")

    return {"success": True, "shop": Shop(**created.first())}
