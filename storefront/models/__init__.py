"""
Models Package

Request and response models for shops and products.
"""

from .shop import Shop, ShopCreate
from .product import Product, ProductCreate

__all__ = [
    'Shop', 'ShopCreate',
    'Product', 'ProductCreate'
]
