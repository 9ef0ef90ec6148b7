"""Compensating actions for multi-step writes.

Every completed write registers how to undo itself. When a later step fails,
the undo actions run newest first. A failing undo is logged and skipped so
the remaining ones still run and the caller still sees the original error.
"""

from collections.abc import Callable

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class Compensations:
    def __init__(self, operation: str, **context):
        self.operation = operation
        self.context = context
        self._undo: list[tuple[str, Callable[[], object]]] = []

    def __len__(self):
        return len(self._undo)

    def register(self, description: str, action: Callable[[], object]) -> None:
        self._undo.append((description, action))

    def rollback(self) -> list[str]:
        """Run every registered action in reverse; return descriptions of the ones that failed."""
        failed = []
        while self._undo:
            description, action = self._undo.pop()
            try:
                action()
            except Exception:
                logger.exception("compensation_failed", operation=self.operation, step=description, **self.context)
                failed.append(description)
            else:
                logger.info("compensation_applied", operation=self.operation, step=description, **self.context)
        return failed
