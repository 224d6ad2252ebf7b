"""Submission payload models.

Payloads reach the pipeline already parsed and sanitized by the request
boundary; these models pin down their shape.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

AnswerValue = Union[str, int, float, List[str]]


class SubmissionModel(BaseModel):
    """Base model for submission payloads."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class Answer(SubmissionModel):
    """One answer of a submission, written as a child row of the record."""

    question_id: str = Field(min_length=1)
    value: AnswerValue
    text: Optional[str] = None
    skipped: bool = False

    def to_row(self, record_id: str) -> Dict[str, Any]:
        """Row shape handed to SubmissionStore.add_answers."""
        row: Dict[str, Any] = {"record_id": record_id, "question_id": self.question_id}
        if isinstance(self.value, list):
            row["value_json"] = list(self.value)
            row["value"] = ",".join(self.value)
        elif isinstance(self.value, (int, float)) and not isinstance(self.value, bool):
            row["value_numeric"] = self.value
            row["value"] = str(self.value)
        else:
            row["value"] = str(self.value)
        if self.text is not None:
            row["text"] = self.text
        if self.skipped:
            row["skipped"] = True
        return row


class Submission(SubmissionModel):
    """A client-submitted record.

    Fields:
        client_id: Client-generated identifier used for deduplication
        resource_type: Target the record belongs to (e.g. a questionnaire ID)
        payload: Business fields of the record (e.g. respondent details)
        answers: Child rows written after the record is created
        is_draft: Drafts are saved with a lighter retry policy
        metadata: Free-form client metadata (device, timing, location)
    """

    client_id: Optional[str] = None
    resource_type: str = Field(min_length=1)
    payload: Dict[str, Any] = Field(default_factory=dict)
    answers: List[Answer] = Field(default_factory=list)
    is_draft: bool = False
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_record(self, caller_id: str) -> Dict[str, Any]:
        """Parent record handed to SubmissionStore.create."""
        return {
            **self.payload,
            "resource_type": self.resource_type,
            "caller_id": caller_id,
            "is_complete": not self.is_draft,
            "metadata": {**self.metadata, "client_id": self.client_id},
        }


@dataclass(frozen=True)
class SubmissionReceipt:
    """Result of persisting one submission.

    Fields:
        record_id: Identifier assigned by the store
        client_id: Client identifier of the submission, if any
        duplicate: True if the store already held this submission
        answers_written: Number of answer rows written
        updated: True if an existing draft was overwritten
    """

    record_id: str
    client_id: Optional[str] = None
    duplicate: bool = False
    answers_written: int = 0
    updated: bool = False
