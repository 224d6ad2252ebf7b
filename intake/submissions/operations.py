"""Per-submission persistence operation with compensation.

Builds the operation the orchestrator runs for one submission: validate,
short-circuit on a natural-key duplicate, create the parent record, then write
the answers in chunks. If writing the answers fails after the parent exists,
the parent is deleted before the failure propagates so the store never keeps
a partial record. The delete is best effort, not a transaction: its own
failure is logged and does not replace the original error.

Drafts are saved over and over while a form is being filled in. A draft whose
``client_id`` is already stored is overwritten: the record is updated and its
answers replaced. Validation errors on a draft are logged, not raised.
"""

import inspect
from typing import Awaitable, Callable, Optional

from intake.errors import ValidationError
from intake.logging import get_module_logger
from intake.submissions.models import Submission, SubmissionReceipt
from intake.submissions.protocols import SubmissionStore, SubmissionValidator

logger = get_module_logger()

DEFAULT_ANSWER_CHUNK_SIZE = 15


class SubmissionOperationFactory:
    """Create persistence operations for submissions.

    Attributes:
        store: SubmissionStore receiving records and answers
        validator: Optional SubmissionValidator run before anything is written
        answer_chunk_size: Answers written per add_answers call
    """

    def __init__(
        self,
        store: SubmissionStore,
        validator: Optional[SubmissionValidator] = None,
        answer_chunk_size: int = DEFAULT_ANSWER_CHUNK_SIZE,
    ) -> None:
        if answer_chunk_size < 1:
            raise ValueError("answer_chunk_size must be at least 1")
        self.store = store
        self.validator = validator
        self.answer_chunk_size = answer_chunk_size

    def for_submission(
        self, submission: Submission, caller_id: str
    ) -> Callable[[], Awaitable[SubmissionReceipt]]:
        """Return a zero-argument operation persisting ``submission``."""

        async def operation() -> SubmissionReceipt:
            return await self.persist(submission, caller_id)

        return operation

    async def persist(self, submission: Submission, caller_id: str) -> SubmissionReceipt:
        """Persist one submission.

        Raises:
            ValidationError: If the validator reports errors for a final submission
            Exception: Whatever the store raises; the partial record, if any,
                has been deleted
        """
        await self._validate(submission)

        if submission.client_id:
            existing_id = await self.store.find_by_client_id(
                caller_id,
                submission.resource_type,
                submission.client_id,
                not submission.is_draft,
            )
            if existing_id is not None and submission.is_draft:
                return await self._update_draft(existing_id, submission, caller_id)
            if existing_id is not None:
                logger.info(
                    "submission_already_persisted",
                    client_id=submission.client_id,
                    record_id=existing_id,
                )
                return SubmissionReceipt(
                    record_id=existing_id,
                    client_id=submission.client_id,
                    duplicate=True,
                )

        record_id = await self.store.create(submission.to_record(caller_id))

        try:
            written = await self._write_answers(record_id, submission)
        except Exception as error:
            await self._compensate(record_id, submission, error)
            raise

        logger.debug(
            "submission_persisted",
            record_id=record_id,
            client_id=submission.client_id,
            answers_written=written,
        )
        return SubmissionReceipt(
            record_id=record_id,
            client_id=submission.client_id,
            answers_written=written,
        )

    async def _validate(self, submission: Submission) -> None:
        if self.validator is None:
            return
        errors = self.validator.validate(submission)
        if inspect.isawaitable(errors):
            errors = await errors
        if not errors:
            return
        if submission.is_draft:
            logger.warning(
                "draft_validation_warnings",
                client_id=submission.client_id,
                resource_type=submission.resource_type,
                warnings=dict(errors),
                answer_count=len(submission.answers),
            )
            return
        raise ValidationError("Submission failed validation", errors=dict(errors))

    async def _update_draft(
        self, record_id: str, submission: Submission, caller_id: str
    ) -> SubmissionReceipt:
        # The draft existed before this save, so a failure leaves it in place
        await self.store.update(record_id, submission.to_record(caller_id))
        await self.store.delete_answers(record_id)
        written = await self._write_answers(record_id, submission)

        logger.debug(
            "draft_updated",
            record_id=record_id,
            client_id=submission.client_id,
            answers_written=written,
        )
        return SubmissionReceipt(
            record_id=record_id,
            client_id=submission.client_id,
            answers_written=written,
            updated=True,
        )

    async def _write_answers(self, record_id: str, submission: Submission) -> int:
        rows = [answer.to_row(record_id) for answer in submission.answers]
        for start in range(0, len(rows), self.answer_chunk_size):
            await self.store.add_answers(
                record_id, rows[start : start + self.answer_chunk_size]
            )
        return len(rows)

    async def _compensate(
        self, record_id: str, submission: Submission, error: Exception
    ) -> None:
        try:
            await self.store.delete(record_id)
        except Exception as cleanup_error:
            logger.error(
                "partial_submission_cleanup_failed",
                record_id=record_id,
                client_id=submission.client_id,
                error=str(error),
                cleanup_error=str(cleanup_error),
            )
            return
        logger.warning(
            "partial_submission_rolled_back",
            record_id=record_id,
            client_id=submission.client_id,
            error=str(error),
        )
