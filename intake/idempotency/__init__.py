"""Idempotency cache.

Suppresses duplicate side effects when a logical operation is retried or
re-sent: the first successful result for a key is recorded, and later calls
with the same key replay it instead of running the operation again.

The cache is a fast-path duplicate suppressor, not the source of truth. If the
process dies after the side effect but before the result is cached, a retry
will execute again; the persistence layer's natural-key uniqueness must catch
that case.

Usage:

    from intake.idempotency import IdempotencyKeyBuilder, InMemoryIdempotencyCache

    cache = InMemoryIdempotencyCache(default_ttl_seconds=600)
    key = IdempotencyKeyBuilder("submissions").build("create", client_id="c-1")

    entry = cache.get(key)
    if entry:
        return entry.result

    result = await create_record(...)
    cache.put(key, result)
"""

from intake.idempotency.cache import IdempotencyCache, IdempotencyEntry
from intake.idempotency.key_builder import IdempotencyKeyBuilder, content_digest
from intake.idempotency.memory import InMemoryIdempotencyCache

__all__ = [
    "IdempotencyCache",
    "IdempotencyEntry",
    "IdempotencyKeyBuilder",
    "InMemoryIdempotencyCache",
    "content_digest",
]
