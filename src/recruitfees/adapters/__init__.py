"""Record adapters for job-order sources."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .jobs_table import JobsTableAdapter


@runtime_checkable
class JobRecordAdapter(Protocol):
    """Source-specific job-order adapter contract.

    Implementations turn raw records from an external data store into
    dictionaries that validate as :class:`recruitfees.schemas.JobOrder`.
    """

    provider: str

    def parse_record(self, record: dict[str, Any]) -> dict[str, Any]:
        """Return a JobOrder-shaped dictionary for one raw record."""


__all__ = ["JobRecordAdapter", "JobsTableAdapter"]
