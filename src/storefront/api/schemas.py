"""Pydantic request/response schemas for the storefront API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

# --- Shared ---


class StatusResponse(BaseModel):
    status: str = "ok"


class CountResponse(BaseModel):
    count: int


class AddressPayload(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=30)

    @classmethod
    def from_snapshot(cls, snapshot) -> AddressPayload:
        return cls(
            first_name=snapshot.first_name,
            last_name=snapshot.last_name,
            street=snapshot.street,
            city=snapshot.city,
            state=snapshot.state,
            zip_code=snapshot.zip_code,
            country=snapshot.country,
            phone=snapshot.phone,
        )


class PricingResponse(BaseModel):
    subtotal: float
    shipping: float
    tax: float
    discount: float
    total: float

    @classmethod
    def from_breakdown(cls, pricing) -> PricingResponse:
        return cls(
            subtotal=pricing.subtotal,
            shipping=pricing.shipping,
            tax=pricing.tax,
            discount=pricing.discount,
            total=pricing.total,
        )


# --- Orders ---


class OrderLinePayload(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    selected_color: str | None = Field(None, max_length=50)
    selected_size: str | None = Field(None, max_length=50)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2, "selected_size": "M"}],
                    "shipping_address": {
                        "first_name": "Ada",
                        "last_name": "Lovelace",
                        "street": "12 Analytical Way",
                        "city": "London",
                        "state": "Greater London",
                        "zip_code": "N1 9GU",
                        "country": "UK",
                        "phone": "+44 20 7946 0000",
                    },
                    "billing_address": {
                        "first_name": "Ada",
                        "last_name": "Lovelace",
                        "street": "12 Analytical Way",
                        "city": "London",
                        "state": "Greater London",
                        "zip_code": "N1 9GU",
                        "country": "UK",
                        "phone": "+44 20 7946 0000",
                    },
                    "coupon_code": "WELCOME10",
                }
            ]
        }
    }

    items: list[OrderLinePayload] = Field(..., min_length=1)
    shipping_address: AddressPayload
    billing_address: AddressPayload
    notes: str | None = Field(None, max_length=1000)
    coupon_code: str | None = Field(None, max_length=50)


class QuoteRequest(BaseModel):
    items: list[OrderLinePayload] = Field(..., min_length=1)
    coupon_code: str | None = Field(None, max_length=50)


class QuotedLineResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    selected_color: str | None = None
    selected_size: str | None = None


class QuoteResponse(BaseModel):
    lines: list[QuotedLineResponse]
    pricing: PricingResponse
    coupon_code: str | None = None

    @classmethod
    def from_quote(cls, quote) -> QuoteResponse:
        return cls(
            lines=[
                QuotedLineResponse(
                    product_id=str(line.product_id),
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    selected_color=line.selected_color,
                    selected_size=line.selected_size,
                )
                for line in quote.lines
            ],
            pricing=PricingResponse.from_breakdown(quote.pricing),
            coupon_code=quote.coupon_code,
        )


class CheckoutRequest(BaseModel):
    shipping_address: AddressPayload
    billing_address: AddressPayload
    notes: str | None = Field(None, max_length=1000)
    coupon_code: str | None = Field(None, max_length=50)


class UpdateOrderRequest(BaseModel):
    status: str | None = None
    tracking_number: str | None = Field(None, max_length=100)
    estimated_delivery: date | None = None
    notes: str | None = Field(None, max_length=1000)


class OrderItemResponse(BaseModel):
    id: str
    line_number: int
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    selected_color: str | None = None
    selected_size: str | None = None


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    status: str
    payment_status: str
    payment_method: str
    coupon_code: str | None = None
    pricing: PricingResponse
    items: list[OrderItemResponse]
    shipping_address: AddressPayload
    billing_address: AddressPayload
    shipping_address_id: str | None = None
    billing_address_id: str | None = None
    tracking_number: str | None = None
    estimated_delivery: date | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            coupon_code=order.coupon_code,
            pricing=PricingResponse.from_breakdown(order.pricing),
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    line_number=item.line_number,
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    selected_color=item.selected_color,
                    selected_size=item.selected_size,
                )
                for item in order.lines
            ],
            shipping_address=AddressPayload.from_snapshot(order.shipping_address),
            billing_address=AddressPayload.from_snapshot(order.billing_address),
            shipping_address_id=str(order.shipping_address_id) if order.shipping_address_id else None,
            billing_address_id=str(order.billing_address_id) if order.billing_address_id else None,
            tracking_number=order.tracking_number,
            estimated_delivery=order.estimated_delivery,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
            cancelled_at=order.cancelled_at,
        )


class OrderPageResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    limit: int
    pages: int


class OrderSummaryResponse(BaseModel):
    total_orders: int
    total_revenue: float
    pending_orders: int
    completed_orders: int
    cancelled_orders: int
    average_order_value: float
    by_status: dict[str, int]


# --- Coupons ---


class CreateCouponRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "welcome10",
                    "description": "10% off your first order over $25",
                    "discount_type": "percentage",
                    "discount_value": 10,
                    "minimum_amount": 25,
                    "usage_limit": 1000,
                    "valid_from": "2026-01-01T00:00:00Z",
                    "valid_until": "2026-12-31T23:59:59Z",
                }
            ]
        }
    }

    code: str = Field(..., min_length=1, max_length=50)
    description: str | None = None
    discount_type: Literal["percentage", "fixed", "PERCENTAGE", "FIXED"]
    discount_value: float = Field(..., ge=0)
    minimum_amount: float | None = Field(None, ge=0)
    maximum_discount: float | None = Field(None, ge=0)
    usage_limit: int | None = Field(None, ge=1)
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True


class UpdateCouponRequest(BaseModel):
    code: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = None
    discount_type: Literal["percentage", "fixed", "PERCENTAGE", "FIXED"] | None = None
    discount_value: float | None = Field(None, ge=0)
    minimum_amount: float | None = Field(None, ge=0)
    maximum_discount: float | None = Field(None, ge=0)
    usage_limit: int | None = Field(None, ge=1)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    is_active: bool | None = None


class CouponResponse(BaseModel):
    id: str
    code: str
    description: str | None = None
    discount_type: str
    discount_value: float
    minimum_amount: float | None = None
    maximum_discount: float | None = None
    usage_limit: int | None = None
    used_count: int
    valid_from: datetime
    valid_until: datetime
    is_active: bool

    @classmethod
    def from_coupon(cls, coupon) -> CouponResponse:
        return cls(
            id=str(coupon.id),
            code=coupon.code,
            description=coupon.description,
            discount_type=coupon.discount_type,
            discount_value=coupon.discount_value,
            minimum_amount=coupon.minimum_amount,
            maximum_discount=coupon.maximum_discount,
            usage_limit=coupon.usage_limit,
            used_count=coupon.used_count,
            valid_from=coupon.valid_from,
            valid_until=coupon.valid_until,
            is_active=coupon.is_active,
        )


class CouponIdResponse(BaseModel):
    coupon_id: str


class CouponPreviewRequest(BaseModel):
    order_amount: float = Field(..., ge=0)


class CouponPreviewResponse(BaseModel):
    code: str
    applicable: bool
    reason: str | None = None
    discount: float = 0.0


# --- Catalogue ---


class CreateProductRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    stock_count: int = Field(0, ge=0)
    category_id: str | None = None
    colors: list[str] | None = None
    sizes: list[str] | None = None


class ChangePriceRequest(BaseModel):
    price: float = Field(..., ge=0)


class ReceiveStockRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    stock_count: int
    in_stock: bool
    category_id: str | None = None
    colors: list[str] = []
    sizes: list[str] = []

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=product.price,
            stock_count=product.stock_count,
            in_stock=product.in_stock,
            category_id=str(product.category_id) if product.category_id else None,
            colors=product.color_options,
            sizes=product.size_options,
        )


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class CategoryIdResponse(BaseModel):
    category_id: str


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    is_active: bool


# --- Cart & wishlist ---


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    selected_color: str | None = Field(None, max_length=50)
    selected_size: str | None = Field(None, max_length=50)


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CartItemIdResponse(BaseModel):
    item_id: str


class CartLineResponse(BaseModel):
    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    line_total: float
    in_stock: bool
    selected_color: str | None = None
    selected_size: str | None = None


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    pricing: PricingResponse
    item_count: int

    @classmethod
    def from_view(cls, view) -> CartResponse:
        return cls(
            items=[
                CartLineResponse(
                    item_id=line.item_id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                    in_stock=line.in_stock,
                    selected_color=line.selected_color,
                    selected_size=line.selected_size,
                )
                for line in view.lines
            ],
            pricing=PricingResponse.from_breakdown(view.pricing),
            item_count=view.item_count,
        )


class AddToWishlistRequest(BaseModel):
    product_id: str


class MoveToCartRequest(BaseModel):
    quantity: int = Field(1, ge=1)


class WishlistItemResponse(BaseModel):
    item_id: str
    product_id: str
    added_at: datetime | None = None


class WishlistResponse(BaseModel):
    items: list[WishlistItemResponse]
    count: int
