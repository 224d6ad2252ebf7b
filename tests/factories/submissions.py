"""Factory functions and fakes for submission pipeline test data."""

import itertools
from typing import Any, Callable, Dict, List, Optional

from intake.submissions.models import Answer, Submission


def make_answers(count: int = 3, prefix: str = "q") -> List[Answer]:
    """Create a list of text answers.

    Args:
        count: Number of answers
        prefix: Question ID prefix

    Returns:
        List of Answer models with question IDs q1..qN
    """
    return [
        Answer(question_id=f"{prefix}{i}", value=f"answer {i}")
        for i in range(1, count + 1)
    ]


def make_submission(
    client_id: Optional[str] = "client-1",
    resource_type: str = "questionnaire-42",
    payload: Optional[Dict[str, Any]] = None,
    answer_count: int = 3,
    is_draft: bool = False,
    metadata: Optional[Dict[str, Any]] = None,
) -> Submission:
    """Create a Submission with sensible defaults."""
    if payload is None:
        payload = {"respondent_name": "Ada", "respondent_age": 36}
    return Submission(
        client_id=client_id,
        resource_type=resource_type,
        payload=payload,
        answers=make_answers(answer_count),
        is_draft=is_draft,
        metadata=metadata or {},
    )


def make_submissions(count: int = 10, **kwargs) -> List[Submission]:
    """Create ``count`` submissions with client IDs client-0..client-N."""
    return [make_submission(client_id=f"client-{i}", **kwargs) for i in range(count)]


class StatusError(Exception):
    """Exception carrying an HTTP-like status code, as store clients raise."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class FakeClock:
    """Manually advanced clock usable as a ``clock`` callable."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleeper:
    """Async sleep replacement recording every requested delay."""

    def __init__(self, clock: Optional[FakeClock] = None):
        self.delays: List[float] = []
        self.clock = clock

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if self.clock is not None:
            self.clock.advance(delay)


class FakeSubmissionStore:
    """In-memory SubmissionStore with failure injection.

    Attributes:
        records: record_id -> parent record
        answers: record_id -> answer rows
        deleted: IDs passed to delete(), in order
        create_errors: Exceptions raised by successive create() calls
        answer_errors: Exceptions raised by successive add_answers() calls
        delete_error: Exception raised by every delete() call, if set
        fail_create_when: Predicate on the record; a truthy return value is
            raised as the create() error for that record
    """

    def __init__(self):
        self.records: Dict[str, Dict[str, Any]] = {}
        self.answers: Dict[str, List[Dict[str, Any]]] = {}
        self.deleted: List[str] = []
        self.create_errors: List[Exception] = []
        self.answer_errors: List[Exception] = []
        self.delete_error: Optional[Exception] = None
        self.fail_create_when: Optional[Callable[[Dict[str, Any]], Any]] = None
        self.create_calls = 0
        self.add_answers_calls = 0
        self.update_calls = 0
        self._ids = itertools.count(1)

    async def create(self, record: Dict[str, Any]) -> str:
        self.create_calls += 1
        if self.create_errors:
            raise self.create_errors.pop(0)
        if self.fail_create_when is not None:
            error = self.fail_create_when(record)
            if error:
                raise error
        record_id = f"rec-{next(self._ids)}"
        self.records[record_id] = record
        self.answers[record_id] = []
        return record_id

    async def add_answers(self, record_id: str, answers: List[Dict[str, Any]]) -> None:
        self.add_answers_calls += 1
        if self.answer_errors:
            raise self.answer_errors.pop(0)
        self.answers[record_id].extend(answers)

    async def update(self, record_id: str, record: Dict[str, Any]) -> None:
        self.update_calls += 1
        self.records[record_id] = record

    async def delete_answers(self, record_id: str) -> None:
        self.answers[record_id] = []

    async def delete(self, record_id: str) -> None:
        self.deleted.append(record_id)
        if self.delete_error is not None:
            raise self.delete_error
        self.records.pop(record_id, None)
        self.answers.pop(record_id, None)

    async def find_by_client_id(
        self, caller_id: str, resource_type: str, client_id: str, is_complete: bool
    ) -> Optional[str]:
        for record_id, record in self.records.items():
            if (
                record["caller_id"] == caller_id
                and record["resource_type"] == resource_type
                and record["metadata"].get("client_id") == client_id
                and record["is_complete"] == is_complete
            ):
                return record_id
        return None


class FakeValidator:
    """SubmissionValidator rejecting submissions by client ID."""

    def __init__(self, invalid_client_ids=()):
        self.invalid_client_ids = set(invalid_client_ids)
        self.calls = 0

    def validate(self, submission: Submission) -> Dict[str, List[str]]:
        self.calls += 1
        if submission.client_id in self.invalid_client_ids:
            return {"respondent_age": ["must be a positive number"]}
        return {}


class AsyncFakeValidator(FakeValidator):
    """Asynchronous variant of FakeValidator."""

    async def validate(self, submission: Submission) -> Dict[str, List[str]]:
        return super().validate(submission)
