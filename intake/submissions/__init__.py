"""Submission payloads, collaborator protocols and per-item operations."""

from intake.submissions.keys import SubmissionKeyPolicy
from intake.submissions.models import Answer, Submission, SubmissionReceipt
from intake.submissions.operations import SubmissionOperationFactory
from intake.submissions.protocols import SubmissionStore, SubmissionValidator

__all__ = [
    "Answer",
    "Submission",
    "SubmissionKeyPolicy",
    "SubmissionOperationFactory",
    "SubmissionReceipt",
    "SubmissionStore",
    "SubmissionValidator",
]
