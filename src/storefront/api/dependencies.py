"""Request-scoped dependencies shared by the routers.

Authentication is handled upstream; the gateway forwards the caller's id in
``X-User-Id`` and their role in ``X-User-Role``.
"""

from fastapi import Header, HTTPException, Request

from storefront.order.placement import OrderPipeline


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id


def require_admin(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> str:
    user_id = current_user_id(x_user_id)
    if (x_user_role or "").lower() != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")
    return user_id


def get_pipeline(request: Request) -> OrderPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = request.app.state.pipeline = OrderPipeline()
    return pipeline
