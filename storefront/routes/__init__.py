"""
Routes Package

API routes for the storefront server.
"""

from . import shops, products

__all__ = ['shops', 'products']
