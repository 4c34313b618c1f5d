"""
api/routes/v1/products.py -- Product routes for the Stockroom REST API.

Routes:
  GET    /products         -- list the caller's products, newest first
  POST   /products         -- create a product owned by the caller
  GET    /products/{id}    -- one of the caller's products
  PUT    /products/{id}    -- partial update of one of the caller's products
  DELETE /products/{id}    -- delete one of the caller's products

Ownership:
  The owner is always current_user.id -- never a value from the request
  body. Every store call passes it, and the store puts it in the WHERE clause.
  A product id that belongs to another account gets the same 404 as one that
  does not exist.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request

from api.models import (
    MessageResponse,
    ProductCreate,
    ProductListResponse,
    ProductOut,
    ProductResponse,
    ProductUpdate,
)
from auth.dependencies import get_current_user
from auth.models import User
from core.errors import NotFound
from products.models import Product
from products.store import ProductStore

# All product routes require authentication.
# Router-level dependency applies to every route registered on this router;
# handlers that need the user also declare it to receive the value.
router = APIRouter(dependencies=[Depends(get_current_user)])

_NOT_FOUND = "Product not found"

# SQLite INTEGER range; anything outside it cannot name a row and is a 404.
ProductId = Annotated[int, Path(ge=1, le=2**63 - 1)]


@router.get("/products", response_model=ProductListResponse)
def list_products(request: Request, current_user: User = Depends(get_current_user)) -> ProductListResponse:
    """Return all of the caller's products, newest first. No pagination."""
    store: ProductStore = request.app.state.product_store
    products = store.list_for_owner(current_user.id)
    return ProductListResponse(data=[ProductOut.from_product(p) for p in products])


@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(
    request: Request,
    body: ProductCreate,
    current_user: User = Depends(get_current_user),
) -> ProductResponse:
    """Create a product. Owner and timestamps are server-assigned."""
    store: ProductStore = request.app.state.product_store
    created = store.create(
        Product(
            name=body.name,
            description=body.description,
            category=body.category,
            price=body.price,
            owner_id=current_user.id,
        )
    )
    return ProductResponse(message="Product created successfully", data=ProductOut.from_product(created))


@router.get("/products/{product_id}", response_model=ProductResponse, response_model_exclude_none=True)
def get_product(request: Request, product_id: ProductId, current_user: User = Depends(get_current_user)) -> ProductResponse:
    store: ProductStore = request.app.state.product_store
    product = store.get_owned(current_user.id, product_id)
    if product is None:
        raise NotFound(_NOT_FOUND)
    return ProductResponse(data=ProductOut.from_product(product))


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    request: Request,
    product_id: ProductId,
    body: ProductUpdate,
    current_user: User = Depends(get_current_user),
) -> ProductResponse:
    """Apply the supplied fields to one of the caller's products.

    Fields left out of the body keep their stored values. The ownership check
    and the write are one conditional UPDATE in the store.
    """
    store: ProductStore = request.app.state.product_store
    updated = store.update_owned(current_user.id, product_id, body.changes())
    if updated is None:
        raise NotFound(_NOT_FOUND)
    return ProductResponse(message="Product updated successfully", data=ProductOut.from_product(updated))


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(request: Request, product_id: ProductId, current_user: User = Depends(get_current_user)) -> MessageResponse:
    """Delete one of the caller's products. Irreversible."""
    store: ProductStore = request.app.state.product_store
    if not store.delete_owned(current_user.id, product_id):
        raise NotFound(_NOT_FOUND)
    return MessageResponse(message="Product deleted successfully")
