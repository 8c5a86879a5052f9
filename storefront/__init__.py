"""
Storefront API

Multi-tenant shop and product service built on FastAPI and SQLite.
"""

__version__ = "1.0.0"
