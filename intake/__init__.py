"""Resilient, idempotent submission pipeline."""

from intake.pipeline import SubmissionPipeline

__all__ = ["SubmissionPipeline"]
