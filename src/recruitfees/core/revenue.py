"""Campaign revenue and margin projection."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .currency import quantize_amount, to_decimal

DEFAULT_MARGIN_RATE = Decimal("0.30")


class InvalidHeadcountError(ValueError):
    """Raised when a job order requests fewer than one candidate."""

    def __init__(self, headcount: int, job_id: str | None = None):
        self.headcount = headcount
        self.job_id = job_id
        target = f" for job order {job_id!r}" if job_id else ""
        super().__init__(f"requested_headcount must be >= 1{target}, got {headcount}")


def validate_headcount(headcount: int, *, job_id: str | None = None) -> int:
    if headcount < 1:
        raise InvalidHeadcountError(headcount, job_id)
    return headcount


@dataclass(frozen=True, slots=True)
class RevenueProjection:
    total_revenue: Decimal
    per_candidate_margin: Decimal
    total_margin: Decimal
    margin_rate: Decimal


class RevenueProjector:
    """Scale a per-candidate fee to a campaign total and estimate margin.

    Headcount is used as given; callers validate it first.
    """

    def __init__(self, *, margin_rate: Decimal | float | str | None = None) -> None:
        self._margin_rate = (
            to_decimal(margin_rate) if margin_rate is not None else DEFAULT_MARGIN_RATE
        )

    @property
    def margin_rate(self) -> Decimal:
        return self._margin_rate

    def project(
        self,
        final_fee_base: Decimal,
        headcount: int,
        margin_rate: Decimal | float | str | None = None,
    ) -> RevenueProjection:
        rate = to_decimal(margin_rate) if margin_rate is not None else self._margin_rate
        total_revenue = final_fee_base * headcount
        per_candidate_margin = quantize_amount(final_fee_base * rate)
        # Derived from the rounded per-candidate figure so the two margins agree exactly.
        total_margin = per_candidate_margin * headcount
        return RevenueProjection(
            total_revenue=total_revenue,
            per_candidate_margin=per_candidate_margin,
            total_margin=total_margin,
            margin_rate=rate,
        )
