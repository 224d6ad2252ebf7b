"""Collaborator interfaces used by the submission pipeline.

The pipeline does not implement persistence or validation; the request
boundary supplies objects satisfying these protocols.
"""

from typing import Any, Awaitable, Dict, List, Optional, Protocol, Union

from intake.submissions.models import Submission


class SubmissionStore(Protocol):
    """Record-persistence service.

    ``find_by_client_id`` exposes the store's natural-key uniqueness: it is
    the source of truth for duplicates that the idempotency cache missed
    (for example after a process restart).
    """

    async def create(self, record: Dict[str, Any]) -> str:
        """Persist a parent record and return its ID."""
        ...

    async def add_answers(self, record_id: str, answers: List[Dict[str, Any]]) -> None:
        """Persist child rows for an existing record."""
        ...

    async def update(self, record_id: str, record: Dict[str, Any]) -> None:
        """Replace the fields of an existing parent record."""
        ...

    async def delete_answers(self, record_id: str) -> None:
        """Delete every child row of a record, keeping the record."""
        ...

    async def delete(self, record_id: str) -> None:
        """Delete a record and its children."""
        ...

    async def find_by_client_id(
        self, caller_id: str, resource_type: str, client_id: str, is_complete: bool
    ) -> Optional[str]:
        """Return the ID of an existing record with this natural key, if any."""
        ...


class SubmissionValidator(Protocol):
    """Request-validation service.

    Returns a mapping of field name to messages; an empty mapping means the
    submission is valid. May be synchronous or asynchronous.
    """

    def validate(
        self, submission: Submission
    ) -> Union[Dict[str, List[str]], Awaitable[Dict[str, List[str]]]]:
        ...
