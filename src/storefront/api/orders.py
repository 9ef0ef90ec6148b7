"""FastAPI routes for placing, viewing, cancelling and administering orders."""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import current_user_id, get_pipeline, require_admin
from storefront.api.schemas import (
    OrderPageResponse,
    OrderResponse,
    OrderSummaryResponse,
    PlaceOrderRequest,
    QuoteRequest,
    QuoteResponse,
    UpdateOrderRequest,
)
from storefront.order.placement import OrderLine, OrderPipeline
from storefront.order.queries import (
    OrderFilters,
    get_order,
    get_order_by_number,
    list_orders,
    order_summary,
    orders_for_user,
)

order_router = APIRouter(prefix="/orders", tags=["orders"])
admin_order_router = APIRouter(prefix="/admin/orders", tags=["admin"], dependencies=[Depends(require_admin)])


def _page(result) -> OrderPageResponse:
    return OrderPageResponse(
        orders=[OrderResponse.from_order(order) for order in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


# --- Customer endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    body: PlaceOrderRequest,
    user_id: str = Depends(current_user_id),
    pipeline: OrderPipeline = Depends(get_pipeline),
) -> OrderResponse:
    order = pipeline.place_order(
        user_id,
        [OrderLine(**line.model_dump()) for line in body.items],
        body.shipping_address.model_dump(),
        body.billing_address.model_dump(),
        notes=body.notes,
        coupon_code=body.coupon_code,
    )
    return OrderResponse.from_order(order)


@order_router.post("/quote", response_model=QuoteResponse)
async def quote_order(
    body: QuoteRequest,
    _user_id: str = Depends(current_user_id),
    pipeline: OrderPipeline = Depends(get_pipeline),
) -> QuoteResponse:
    """Price a basket exactly as placement would, without reserving anything."""
    quote = pipeline.quote([OrderLine(**line.model_dump()) for line in body.items], coupon_code=body.coupon_code)
    return QuoteResponse.from_quote(quote)


@order_router.get("", response_model=OrderPageResponse)
async def my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(current_user_id),
) -> OrderPageResponse:
    return _page(orders_for_user(user_id, page=page, limit=limit))


@order_router.get("/number/{order_number}", response_model=OrderResponse)
async def my_order_by_number(order_number: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    return OrderResponse.from_order(get_order_by_number(order_number, user_id=user_id))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def my_order(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    return OrderResponse.from_order(get_order(order_id, user_id=user_id))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    user_id: str = Depends(current_user_id),
    pipeline: OrderPipeline = Depends(get_pipeline),
) -> OrderResponse:
    return OrderResponse.from_order(pipeline.cancel_order(user_id, order_id))


# --- Admin endpoints ---


@admin_order_router.get("", response_model=OrderPageResponse)
async def list_all_orders(
    status: str | None = None,
    payment_status: str | None = None,
    user_id: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal["created_at", "total"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> OrderPageResponse:
    filters = OrderFilters(
        status=status,
        payment_status=payment_status,
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
        search=search,
    )
    result = list_orders(filters, page=page, limit=limit, sort_by=sort_by, descending=sort_order == "desc")
    return _page(result)


@admin_order_router.get("/summary", response_model=OrderSummaryResponse)
async def summary() -> OrderSummaryResponse:
    return OrderSummaryResponse(**order_summary())


@admin_order_router.get("/{order_id}", response_model=OrderResponse)
async def any_order(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(get_order(order_id))


@admin_order_router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: str,
    body: UpdateOrderRequest,
    pipeline: OrderPipeline = Depends(get_pipeline),
) -> OrderResponse:
    order = pipeline.update_order(
        order_id,
        status=body.status,
        tracking_number=body.tracking_number,
        estimated_delivery=body.estimated_delivery,
        notes=body.notes,
    )
    return OrderResponse.from_order(order)
