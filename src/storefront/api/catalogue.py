"""FastAPI routes for catalogue seeding and product lookup."""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.dependencies import require_admin
from storefront.api.schemas import (
    CategoryIdResponse,
    CategoryResponse,
    ChangePriceRequest,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductIdResponse,
    ProductResponse,
    ReceiveStockRequest,
    StatusResponse,
)
from storefront.catalogue.category import Category
from storefront.catalogue.management import AddProduct, ChangeProductPrice, CreateCategory, ReceiveStock
from storefront.catalogue.stock import load_product
from storefront.shared.errors import NotFound

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse, dependencies=[Depends(require_admin)])
async def add_product(body: CreateProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        stock_count=body.stock_count,
        category_id=body.category_id,
        colors=json.dumps(body.colors) if body.colors else None,
        sizes=json.dumps(body.sizes) if body.sizes else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(load_product(product_id))


@product_router.put("/{product_id}/price", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def change_price(product_id: str, body: ChangePriceRequest) -> StatusResponse:
    current_domain.process(ChangeProductPrice(product_id=product_id, price=body.price), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/stock", response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def receive_stock(product_id: str, body: ReceiveStockRequest) -> ProductResponse:
    current_domain.process(ReceiveStock(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return ProductResponse.from_product(load_product(product_id))


# --- Category endpoints ---


@category_router.post("", status_code=201, response_model=CategoryIdResponse, dependencies=[Depends(require_admin)])
async def create_category(body: CreateCategoryRequest) -> CategoryIdResponse:
    result = current_domain.process(
        CreateCategory(name=body.name, description=body.description),
        asynchronous=False,
    )
    return CategoryIdResponse(category_id=result)


@category_router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str) -> CategoryResponse:
    try:
        category = current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise NotFound({"category_id": [f"Category {category_id} not found"]}) from None
    return CategoryResponse(
        id=str(category.id),
        name=category.name,
        slug=category.slug,
        description=category.description,
        is_active=category.is_active,
    )
