"""Conditional read-modify-write of a single aggregate."""

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from storefront.shared.errors import Conflict
from storefront.shared.locks import KeyedLocks
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def mutate_under_lock(lock_registry: KeyedLocks, key: str, load, change, attempts: int = 3):
    """Reload, change and save an aggregate while holding ``key``.

    ``load`` returns a fresh copy from the store and ``change`` applies the
    business method to it; any check the method makes therefore sees the
    latest persisted state. Version conflicts raised on save are retried on
    a new copy, up to ``attempts`` times, before giving up with Conflict.
    """
    with lock_registry.hold(key):
        for attempt in range(1, attempts + 1):
            aggregate = load()
            change(aggregate)
            try:
                current_domain.repository_for(type(aggregate)).add(aggregate)
                return aggregate
            except ExpectedVersionError:
                logger.warning("versioned_write_conflict", key=key, attempt=attempt)

    raise Conflict({"_entity": [f"Concurrent updates to {key}; gave up after {attempts} attempts"]})
