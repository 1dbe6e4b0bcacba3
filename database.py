# database.py
import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from models.product import Product

logger = logging.getLogger(__name__)

DB_FILE = Path(os.getenv("DB_FILE", "products.db"))

# sqlite INTEGER is signed 64-bit
SQLITE_INT_MIN, SQLITE_INT_MAX = -2**63, 2**63 - 1


class StoreError(Exception):
    """Raised when the underlying storage fails."""


def create_database(db_file=None):
    conn = sqlite3.connect(db_file or DB_FILE)
    cursor = conn.cursor()
    # ids are assigned by the caller, never by sqlite
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS products (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            price REAL NOT NULL
        )
    """)
    conn.commit()
    conn.close()


def get_db_connection(db_file=None):
    conn = sqlite3.connect(db_file or DB_FILE)
    conn.row_factory = sqlite3.Row
    return conn


class ProductStore(ABC):
    """Storage capability the product endpoints delegate to."""

    @abstractmethod
    def list_all(self) -> List[Any]:
        ...

    @abstractmethod
    def insert(self, product: Product) -> Any:
        ...

    @abstractmethod
    def update_by_id(self, product_id: int, fields: Dict[str, Any]) -> Any:
        ...

    @abstractmethod
    def delete_by_id(self, product_id: int) -> None:
        ...


def _storable_id(product_id: int) -> bool:
    return SQLITE_INT_MIN <= product_id <= SQLITE_INT_MAX


class SQLiteProductStore(ProductStore):
    def __init__(self, db_file=None):
        self.db_file = db_file or DB_FILE

    def _execute(self, sql: str, params=()) -> sqlite3.Cursor:
        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.cursor()
            cursor.execute(sql, params)
            conn.commit()
            return cursor
        except (sqlite3.Error, OverflowError) as e:
            conn.rollback()
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def list_all(self) -> List[Product]:
        conn = get_db_connection(self.db_file)
        try:
            rows = conn.execute("SELECT id, name, price FROM products ORDER BY id").fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            conn.close()
        return [Product(**dict(r)) for r in rows]

    def insert(self, product: Product) -> Product:
        self._execute(
            "INSERT INTO products (id, name, price) VALUES (?, ?, ?)",
            (product.id, product.name, product.price),
        )
        return product

    def update_by_id(self, product_id: int, fields: Dict[str, Any]) -> int:
        if not _storable_id(product_id):
            return 0
        cursor = self._execute(
            "UPDATE products SET name=?, price=? WHERE id=?",
            (fields["name"], fields["price"], product_id),
        )
        if cursor.rowcount == 0:
            logger.info("Update matched no product with id %s", product_id)
        return cursor.rowcount

    def delete_by_id(self, product_id: int) -> None:
        if not _storable_id(product_id):
            return
        self._execute("DELETE FROM products WHERE id = ?", (product_id,))


def get_store() -> ProductStore:
    return SQLiteProductStore()
