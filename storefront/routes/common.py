"""
Shared route dependencies.
"""

from fastapi import HTTPException, Request

from ..storage import Statement, Store


def get_store(request: Request) -> Store:
    """Store instance owned by the running application."""
    return request.app.state.store


async def require_shop(store: Store, shop_id: int) -> dict:
    """
    Fetch a shop by ID.

    Raises HTTPException if the shop does not exist.
    """
    result = await store.execute(Statement.GET_SHOP_BY_ID, (shop_id,))
    shop = result.first()
    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")
    return shop
