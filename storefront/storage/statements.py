"""
Statements

Schema definition and the fixed set of parameterized statements the store runs.
"""

from enum import Enum

# Range of an SQLite INTEGER column
MIN_INTEGER = -2 ** 63
MAX_INTEGER = 2 ** 63 - 1

# SQL Schema
SCHEMA = """
-- Shops (tenants)
CREATE TABLE IF NOT EXISTS shops (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    subdomain TEXT UNIQUE NOT NULL,
    owner_email TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

-- Products (owned by exactly one shop)
CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    shop_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    price REAL NOT NULL CHECK (price >= 0),
    stock INTEGER DEFAULT 0 CHECK (stock >= 0),
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (shop_id) REFERENCES shops(id) ON DELETE CASCADE
);

-- Create index for product lookups by shop
CREATE INDEX IF NOT EXISTS idx_products_shop_id ON products(shop_id);
"""


class Statement(Enum):
    """Statements accepted by ``Store.execute``."""

    LIST_SHOPS = 'list_shops'
    GET_SHOP_BY_ID = 'get_shop_by_id'
    GET_SHOP_BY_SUBDOMAIN = 'get_shop_by_subdomain'
    INSERT_SHOP = 'insert_shop'
    DELETE_SHOP = 'delete_shop'
    COUNT_SHOPS = 'count_shops'

    LIST_PRODUCTS = 'list_products'
    LIST_PRODUCTS_BY_SHOP = 'list_products_by_shop'
    GET_PRODUCT_BY_ID = 'get_product_by_id'
    INSERT_PRODUCT = 'insert_product'
    COUNT_PRODUCTS = 'count_products'

    @property
    def sql(self) -> str:
        return _SQL[self]

    @property
    def is_read(self) -> bool:
        return self.sql.lstrip().upper().startswith('SELECT')

    @property
    def is_insert(self) -> bool:
        return self.sql.lstrip().upper().startswith('INSERT')


_SQL = {
    Statement.LIST_SHOPS:
        "SELECT * FROM shops ORDER BY created_at DESC, id DESC",
    Statement.GET_SHOP_BY_ID:
        "SELECT * FROM shops WHERE id = ?",
    Statement.GET_SHOP_BY_SUBDOMAIN:
        "SELECT * FROM shops WHERE subdomain = ?",
    Statement.INSERT_SHOP:
        """INSERT INTO shops (name, subdomain, owner_email)
           VALUES (?, ?, ?)""",
    Statement.DELETE_SHOP:
        "DELETE FROM shops WHERE id = ?",
    Statement.COUNT_SHOPS:
        "SELECT COUNT(*) AS count FROM shops",

    Statement.LIST_PRODUCTS:
        "SELECT * FROM products ORDER BY created_at DESC, id DESC",
    Statement.LIST_PRODUCTS_BY_SHOP:
        """SELECT * FROM products
           WHERE shop_id = ?
           ORDER BY created_at DESC, id DESC""",
    Statement.GET_PRODUCT_BY_ID:
        "SELECT * FROM products WHERE id = ?",
    Statement.INSERT_PRODUCT:
        """INSERT INTO products (shop_id, name, description, price, stock)
           VALUES (?, ?, ?, ?, ?)""",
    Statement.COUNT_PRODUCTS:
        "SELECT COUNT(*) AS count FROM products",
}
