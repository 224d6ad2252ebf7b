"""Idempotency key derivation for submissions."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from intake.idempotency.key_builder import IdempotencyKeyBuilder, content_digest
from intake.submissions.models import Submission

DEFAULT_VOLATILE_FIELDS: Tuple[str, ...] = (
    "submitted_at",
    "timestamp",
    "start_time",
    "completion_time",
    "offline_created",
)


@dataclass(frozen=True)
class SubmissionKeyPolicy:
    """Which submission fields identify the logical operation.

    The key always covers the resource type, the caller and the draft flag.
    A client-supplied ``client_id`` identifies a final submission on its own.
    Without one, a digest of the natural-key fields is used: the fields named
    in ``natural_key_fields`` when set, otherwise the whole payload and the
    answers minus ``volatile_fields``. Two submissions that differ only in a
    volatile field therefore share a key.

    Draft keys carry the content digest next to the ``client_id``: an
    unchanged re-save replays the cached receipt, an edited draft is saved
    again.

    Attributes:
        namespace: Key namespace
        natural_key_fields: Payload fields forming the natural key
        volatile_fields: Payload fields ignored by the content digest
    """

    namespace: str = "submissions"
    natural_key_fields: Optional[Sequence[str]] = None
    volatile_fields: Sequence[str] = field(default=DEFAULT_VOLATILE_FIELDS)

    def natural_key(self, submission: Submission) -> Dict[str, Any]:
        if self.natural_key_fields is not None:
            return {f: submission.payload.get(f) for f in self.natural_key_fields}
        content = {
            k: v for k, v in submission.payload.items() if k not in self.volatile_fields
        }
        content["answers"] = [
            answer.model_dump(mode="json") for answer in submission.answers
        ]
        return content

    def key_for(self, submission: Submission, caller_id: str) -> str:
        builder = IdempotencyKeyBuilder(self.namespace)
        operation = "save_draft" if submission.is_draft else "create"
        if submission.client_id:
            identity: Dict[str, Any] = {"client_id": submission.client_id}
            if submission.is_draft:
                # Every change to a draft is a new save of the same record
                identity["content"] = content_digest(self.natural_key(submission))
            return builder.build(
                operation,
                resource_type=submission.resource_type,
                caller_id=caller_id,
                **identity,
            )
        return builder.build(
            operation,
            resource_type=submission.resource_type,
            caller_id=caller_id,
            content=content_digest(self.natural_key(submission)),
        )
