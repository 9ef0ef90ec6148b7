"""Typed errors raised by the storefront domain.

Every error carries a ``messages`` dict in the ``{"field": ["message"]}``
shape Protean uses for ``ValidationError``, so the HTTP layer renders all
of them the same way.
"""


class StorefrontError(Exception):
    """Base class for business errors that map to a client-facing response."""

    status_code = 400

    def __init__(self, messages: dict[str, list[str]] | str):
        if isinstance(messages, str):
            messages = {"_entity": [messages]}
        self.messages = messages
        super().__init__(messages)

    def __str__(self) -> str:
        return "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in self.messages.items())


class NotFound(StorefrontError):
    status_code = 404


class InsufficientStock(StorefrontError):
    status_code = 409

    def __init__(self, product_id: str, requested: int, available: int, name: str | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        label = name or product_id
        super().__init__(
            {"stock": [f"Insufficient stock for {label}: requested {requested}, available {available}"]}
        )


class InvalidState(StorefrontError):
    status_code = 409


class Conflict(StorefrontError):
    status_code = 409
