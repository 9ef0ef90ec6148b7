"""FastAPI routes for the caller's cart and wishlist."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_user_id, get_pipeline
from storefront.api.schemas import (
    AddToCartRequest,
    AddToWishlistRequest,
    CartItemIdResponse,
    CartResponse,
    CheckoutRequest,
    CountResponse,
    MoveToCartRequest,
    OrderResponse,
    StatusResponse,
    UpdateCartItemRequest,
    WishlistItemResponse,
    WishlistResponse,
)
from storefront.cart.checkout import cart_item_count, checkout_cart, view_cart
from storefront.cart.management import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.order.placement import OrderPipeline
from storefront.wishlist.management import AddToWishlist, MoveToCart, RemoveFromWishlist, find_wishlist

cart_router = APIRouter(prefix="/cart", tags=["cart"])
wishlist_router = APIRouter(prefix="/wishlist", tags=["wishlist"])


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user_id), pipeline: OrderPipeline = Depends(get_pipeline)):
    return CartResponse.from_view(view_cart(user_id, policy=pipeline.settings.pricing))


@cart_router.get("/count", response_model=CountResponse)
async def count_cart_items(user_id: str = Depends(current_user_id)) -> CountResponse:
    return CountResponse(count=cart_item_count(user_id))


@cart_router.post("/items", status_code=201, response_model=CartItemIdResponse)
async def add_cart_item(body: AddToCartRequest, user_id: str = Depends(current_user_id)) -> CartItemIdResponse:
    command = AddToCart(
        user_id=user_id,
        product_id=body.product_id,
        quantity=body.quantity,
        selected_color=body.selected_color,
        selected_size=body.selected_size,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartItemIdResponse(item_id=result)


@cart_router.put("/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(
    item_id: str, body: UpdateCartItemRequest, user_id: str = Depends(current_user_id)
) -> StatusResponse:
    current_domain.process(UpdateCartItem(user_id=user_id, item_id=item_id, quantity=body.quantity), asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(item_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(RemoveFromCart(user_id=user_id, item_id=item_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/checkout", status_code=201, response_model=OrderResponse)
async def checkout(
    body: CheckoutRequest,
    user_id: str = Depends(current_user_id),
    pipeline: OrderPipeline = Depends(get_pipeline),
) -> OrderResponse:
    order = checkout_cart(
        pipeline,
        user_id,
        body.shipping_address.model_dump(),
        body.billing_address.model_dump(),
        notes=body.notes,
        coupon_code=body.coupon_code,
    )
    return OrderResponse.from_order(order)


# --- Wishlist endpoints ---


@wishlist_router.get("", response_model=WishlistResponse)
async def get_wishlist(user_id: str = Depends(current_user_id)) -> WishlistResponse:
    wishlist = find_wishlist(user_id)
    items = sorted(wishlist.items, key=lambda i: i.added_at, reverse=True) if wishlist else []
    return WishlistResponse(
        items=[
            WishlistItemResponse(item_id=str(i.id), product_id=str(i.product_id), added_at=i.added_at) for i in items
        ],
        count=len(items),
    )


@wishlist_router.get("/count", response_model=CountResponse)
async def count_wishlist_items(user_id: str = Depends(current_user_id)) -> CountResponse:
    wishlist = find_wishlist(user_id)
    return CountResponse(count=wishlist.item_count if wishlist else 0)


@wishlist_router.post("/items", status_code=201, response_model=CartItemIdResponse)
async def add_wishlist_item(body: AddToWishlistRequest, user_id: str = Depends(current_user_id)):
    result = current_domain.process(AddToWishlist(user_id=user_id, product_id=body.product_id), asynchronous=False)
    return CartItemIdResponse(item_id=result)


@wishlist_router.delete("/items/{item_id}", response_model=StatusResponse)
async def remove_wishlist_item(item_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(RemoveFromWishlist(user_id=user_id, item_id=item_id), asynchronous=False)
    return StatusResponse()


@wishlist_router.post("/items/{item_id}/move-to-cart", status_code=201, response_model=CartItemIdResponse)
async def move_to_cart(
    item_id: str, body: MoveToCartRequest | None = None, user_id: str = Depends(current_user_id)
) -> CartItemIdResponse:
    quantity = body.quantity if body else 1
    result = current_domain.process(
        MoveToCart(user_id=user_id, item_id=item_id, quantity=quantity),
        asynchronous=False,
    )
    return CartItemIdResponse(item_id=result)
