"""
Batch schemas — per-row outcomes and the aggregate report of a CSV run.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BatchRowResult(BaseModel):
    """Outcome of one CSV row.

    `key` identifies the row for the operator (product title, CSV id or
    page URL). The optional fields are filled by the driver that knows them.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    row: int
    key: str
    success: bool
    error: Optional[str] = None
    data: Optional[Any] = None

    # bulk upload
    product_title: Optional[str] = None
    ai_analysis: Optional[Dict[str, Any]] = None

    # meta update
    resource_type: Optional[str] = None
    handle: Optional[str] = None


class BatchReport(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    results: List[BatchRowResult] = Field(default_factory=list)
    message: str = ""

    @classmethod
    def from_results(cls, results: List[BatchRowResult], label: str) -> "BatchReport":
        """Build a report whose counts are derived from `results`."""
        succeeded = sum(1 for r in results if r.success)
        failed = len(results) - succeeded
        return cls(
            total=len(results),
            succeeded=succeeded,
            failed=failed,
            results=results,
            message=f"{label} completed. {succeeded} succeeded, {failed} failed.",
        )
