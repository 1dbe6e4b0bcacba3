# models/product.py
from pydantic import BaseModel
from typing import Any, List


class Product(BaseModel):
    id: int
    name: str
    price: float


class ProductUpdate(BaseModel):
    name: str
    price: float


class MessageResponse(BaseModel):
    message: str


class ProductListResponse(MessageResponse):
    result: List[Any]   # forwarded from the store as-is
