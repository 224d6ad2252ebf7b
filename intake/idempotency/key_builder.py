"""Idempotency key builder for deterministic operation keys."""

import hashlib
import json
from typing import Any, Mapping


def content_digest(content: Mapping[str, Any], length: int = 16) -> str:
    """Return a stable digest of a JSON-compatible mapping.

    Keys are sorted so that field order never changes the digest. Values that
    are not JSON serializable are rendered with ``str``.
    """
    encoded = json.dumps(content, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(encoded.encode()).hexdigest()[:length]


class IdempotencyKeyBuilder:
    """Build deterministic idempotency keys.

    The same components always produce the same key, so a retried or re-sent
    request maps onto the cache entry of the original. Components whose value
    is None are left out, which keeps keys stable when optional fields are
    absent.

    Example:
        builder = IdempotencyKeyBuilder(namespace="submissions")
        key = builder.build(
            operation="create",
            resource_type="questionnaire-42",
            caller_id="volunteer-7",
            client_id="c-123",
        )
        # key == "submissions:create:" + first 16 hex chars of a sha256
    """

    def __init__(self, namespace: str):
        if not namespace:
            raise ValueError("namespace is required")
        self.namespace = namespace

    def build(self, operation: str, **components: Any) -> str:
        """Build an idempotency key from components.

        Args:
            operation: Operation type (e.g. "create", "save_draft")
            **components: Stable key components (resource, caller, natural key)

        Returns:
            Key of the form ``{namespace}:{operation}:{hash}``
        """
        present = sorted((k, v) for k, v in components.items() if v is not None)

        key_parts = [self.namespace, operation]
        key_parts.extend(f"{k}={v}" for k, v in present)
        key_string = "|".join(str(part) for part in key_parts)

        key_hash = hashlib.sha256(key_string.encode()).hexdigest()[:16]

        return f"{self.namespace}:{operation}:{key_hash}"
