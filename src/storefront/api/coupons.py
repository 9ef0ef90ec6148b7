"""FastAPI routes for coupons: public lookup and preview, admin management."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import require_admin
from storefront.api.schemas import (
    CouponIdResponse,
    CouponPreviewRequest,
    CouponPreviewResponse,
    CouponResponse,
    CreateCouponRequest,
    StatusResponse,
    UpdateCouponRequest,
)
from storefront.coupon.management import CreateCoupon, DeleteCoupon, UpdateCoupon
from storefront.coupon.store import get_by_code, list_coupons
from storefront.coupon.validator import CouponValidator
from storefront.pricing.engine import calculate_discount
from storefront.shared.money import as_float

coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])
admin_coupon_router = APIRouter(prefix="/admin/coupons", tags=["admin"], dependencies=[Depends(require_admin)])


@coupon_router.get("", response_model=list[CouponResponse])
async def active_coupons() -> list[CouponResponse]:
    return [CouponResponse.from_coupon(c) for c in list_coupons(active_only=True)]


@coupon_router.get("/{code}", response_model=CouponResponse)
async def coupon_by_code(code: str) -> CouponResponse:
    return CouponResponse.from_coupon(get_by_code(code))


@coupon_router.post("/{code}/preview", response_model=CouponPreviewResponse)
async def preview_coupon(code: str, body: CouponPreviewRequest) -> CouponPreviewResponse:
    check = CouponValidator().check(code, body.order_amount)
    if not check.applicable:
        return CouponPreviewResponse(code=code.upper(), applicable=False, reason=check.rejection.value)
    return CouponPreviewResponse(
        code=check.coupon.code,
        applicable=True,
        discount=as_float(calculate_discount(body.order_amount, check.coupon)),
    )


@admin_coupon_router.get("", response_model=list[CouponResponse])
async def all_coupons() -> list[CouponResponse]:
    return [CouponResponse.from_coupon(c) for c in list_coupons()]


@admin_coupon_router.post("", status_code=201, response_model=CouponIdResponse)
async def create_coupon(body: CreateCouponRequest) -> CouponIdResponse:
    result = current_domain.process(CreateCoupon(**body.model_dump()), asynchronous=False)
    return CouponIdResponse(coupon_id=result)


@admin_coupon_router.put("/{coupon_id}", response_model=StatusResponse)
async def update_coupon(coupon_id: str, body: UpdateCouponRequest) -> StatusResponse:
    command = UpdateCoupon(coupon_id=coupon_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_coupon_router.delete("/{coupon_id}", response_model=StatusResponse)
async def delete_coupon(coupon_id: str) -> StatusResponse:
    current_domain.process(DeleteCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()
