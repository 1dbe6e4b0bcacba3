# routers/products.py
from fastapi import APIRouter, Body, Depends, Response
from typing import Any, Optional
from models.product import Product, ProductUpdate, MessageResponse, ProductListResponse
from database import ProductStore, get_store
import logging
import math
import re

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

INVALID_ID_FORMAT = "Invalid ID format"
INVALID_INPUT_DATA = "Invalid input data"

# leading integer, trailing characters ignored ("347abc" -> 347)
_ID_PREFIX_RE = re.compile(r"^\s*([+-]?[0-9]+)")


class ProductRequestError(Exception):
    """A request rejected before reaching the store."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def parse_id(token: str) -> Optional[int]:
    """Parse a path token into a product id, or None if it holds no integer."""
    match = _ID_PREFIX_RE.match(token)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # past the interpreter's int digit limit
        return None


def is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError:
            return False
        return True
    return isinstance(value, float) and math.isfinite(value)


def _describe(payload: Any) -> str:
    # keys only, bodies can be arbitrarily large
    if isinstance(payload, dict):
        return "keys=%.200s" % sorted(map(str, payload))
    return type(payload).__name__


def is_text(value: Any) -> bool:
    return isinstance(value, str)


def validate_create_payload(payload: Any) -> Product:
    """Check a create body and build the Product it describes.

    id and price must be JSON numbers and name a JSON string. A float id is
    accepted only when integral and is stored as an int.
    """
    if not isinstance(payload, dict):
        raise ProductRequestError(INVALID_INPUT_DATA)
    product_id, name, price = payload.get("id"), payload.get("name"), payload.get("price")
    if not (is_number(product_id) and is_text(name) and is_number(price)):
        raise ProductRequestError(INVALID_INPUT_DATA)
    if isinstance(product_id, float):
        if not product_id.is_integer():
            raise ProductRequestError(INVALID_INPUT_DATA)
        product_id = int(product_id)
    return Product(id=product_id, name=name, price=price)


def validate_update_request(token: str, payload: Any) -> tuple:
    # a bad path id is reported as invalid input here, not as an id format error
    product_id = parse_id(token)
    if product_id is None or not isinstance(payload, dict):
        raise ProductRequestError(INVALID_INPUT_DATA)
    name, price = payload.get("name"), payload.get("price")
    if not (is_text(name) and is_number(price)):
        raise ProductRequestError(INVALID_INPUT_DATA)
    return product_id, ProductUpdate(name=name, price=price)


@router.get("", response_model=ProductListResponse)
def list_products(store: ProductStore = Depends(get_store)):
    return {"message": "OK", "result": store.list_all()}


@router.post("", status_code=201, response_model=MessageResponse)
def create_product(payload: Any = Body(None), store: ProductStore = Depends(get_store)):
    try:
        product = validate_create_payload(payload)
    except ProductRequestError:
        logger.warning("Rejected create request: %s", _describe(payload))
        raise
    store.insert(product)
    logger.info("Created product %s (%s)", product.id, product.name)
    return {"message": f"Product {product.name} with ID {product.id} created successfully"}


@router.put("/{product_id}", response_model=MessageResponse)
def update_product(product_id: str, payload: Any = Body(None),
                   store: ProductStore = Depends(get_store)):
    try:
        parsed_id, fields = validate_update_request(product_id, payload)
    except ProductRequestError:
        logger.warning("Rejected update request for id %.40r: %s", product_id, _describe(payload))
        raise
    store.update_by_id(parsed_id, fields.model_dump())
    logger.info("Updated product %s", parsed_id)
    return {"message": f"Product with ID {parsed_id} updated successfully"}


@router.delete("/{product_id}", status_code=204, response_class=Response)
def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
    parsed_id = parse_id(product_id)
    if parsed_id is None:
        logger.warning("Rejected delete request, bad id %.40r", product_id)
        raise ProductRequestError(INVALID_ID_FORMAT)
    store.delete_by_id(parsed_id)
    logger.info("Deleted product %s", parsed_id)
    return Response(status_code=204)
