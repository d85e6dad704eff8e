"""Fee engine orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..schemas import JobOrder
from .currency import quantize_amount
from .fees import FeeComposer, FundingModel
from .revenue import RevenueProjector, validate_headcount


@dataclass(frozen=True, slots=True)
class FinancialBreakdown:
    """Complete per-order financial view, every amount in base units."""

    job_id: str
    base_currency: str
    funding_model: FundingModel
    headcount: int
    margin_rate: Decimal
    salary_base: Decimal
    input_fee_base: Decimal
    agency_markup_base: Decimal
    company_markup_base: Decimal
    final_fee_base: Decimal
    total_revenue: Decimal
    per_candidate_margin: Decimal
    total_margin: Decimal
    missing_inputs: tuple[str, ...] = ()
    unknown_currencies: tuple[str, ...] = ()


class FeeEngine:
    """Compute a job order's fee, revenue projection and margin.

    Stateless apart from the injected collaborators; every call recomputes
    the breakdown from the record.
    """

    def __init__(
        self,
        *,
        composer: FeeComposer,
        projector: RevenueProjector | None = None,
    ) -> None:
        self._composer = composer
        self._projector = projector or RevenueProjector()

    @property
    def base_currency(self) -> str:
        return self._composer.normalizer.base_currency

    def compute(self, order: JobOrder, *, margin_rate: Decimal | None = None) -> FinancialBreakdown:
        headcount = validate_headcount(order.requested_headcount, job_id=order.job_id)

        normalizer = self._composer.normalizer
        fee = self._composer.compose(order)
        projection = self._projector.project(fee.final_fee_base, headcount, margin_rate)

        return FinancialBreakdown(
            job_id=order.job_id,
            base_currency=normalizer.base_currency,
            funding_model=fee.funding_model,
            headcount=headcount,
            margin_rate=projection.margin_rate,
            salary_base=quantize_amount(normalizer.normalize(order.salary, order.salary_currency)),
            input_fee_base=fee.input_fee_base,
            agency_markup_base=fee.agency_markup_base,
            company_markup_base=fee.company_markup_base,
            final_fee_base=fee.final_fee_base,
            total_revenue=projection.total_revenue,
            per_candidate_margin=projection.per_candidate_margin,
            total_margin=projection.total_margin,
            missing_inputs=tuple(order.missing_monetary_fields()),
            unknown_currencies=self._unknown_currencies(order),
        )

    def _unknown_currencies(self, order: JobOrder) -> tuple[str, ...]:
        normalizer = self._composer.normalizer
        unknown: list[str] = []
        for amount, currency in (
            (order.salary, order.salary_currency),
            (order.input_fee, order.input_fee_currency),
        ):
            if amount is None or currency is None:
                continue
            if not normalizer.is_known(currency) and currency not in unknown:
                unknown.append(currency)
        return tuple(unknown)
