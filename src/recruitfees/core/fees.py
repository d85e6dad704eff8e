"""Fee composition by funding model."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from ..schemas import JobOrder
from .currency import CurrencyNormalizer, quantize_amount
from .markup import MarkupResolver

FundingModel = Literal["employer_funded", "candidate_funded", "hybrid"]

DEFAULT_FUNDING_MODEL: FundingModel = "hybrid"


@dataclass(frozen=True, slots=True)
class FundingPolicy:
    """Which components a funding model charges, plus data-entry rules."""

    model: FundingModel
    components: tuple[str, ...]
    label: str
    required: tuple[str, ...] = ()


FUNDING_POLICIES: dict[FundingModel, FundingPolicy] = {
    "employer_funded": FundingPolicy(
        model="employer_funded",
        components=("agency_markup",),
        label="Agency Markup Only",
    ),
    "candidate_funded": FundingPolicy(
        model="candidate_funded",
        components=("input_fee", "company_markup"),
        label="Input Fee + Company Markup",
        required=("input_fee",),
    ),
    "hybrid": FundingPolicy(
        model="hybrid",
        components=("input_fee", "agency_markup", "company_markup"),
        label="Input Fee + Agency Markup + Company Markup",
        required=("input_fee",),
    ),
}


def resolve_funding_model(payment_type: str | None) -> FundingModel:
    """Map a stored payment type onto a funding model; anything unknown is hybrid."""
    if payment_type in FUNDING_POLICIES:
        return payment_type  # type: ignore[return-value]
    return DEFAULT_FUNDING_MODEL


def policy_for(payment_type: str | None) -> FundingPolicy:
    return FUNDING_POLICIES[resolve_funding_model(payment_type)]


def compose_final_fee(
    funding_model: FundingModel,
    *,
    input_fee: Decimal,
    agency_markup: Decimal,
    company_markup: Decimal,
) -> Decimal:
    components = {
        "input_fee": input_fee,
        "agency_markup": agency_markup,
        "company_markup": company_markup,
    }
    return sum(
        (components[name] for name in FUNDING_POLICIES[funding_model].components),
        Decimal("0"),
    )


def missing_required_fields(order: JobOrder) -> list[str]:
    """Fields the order's funding model expects but the record leaves empty."""
    policy = policy_for(order.payment_type)
    return [name for name in policy.required if getattr(order, name) is None]


@dataclass(frozen=True, slots=True)
class ComposedFee:
    """Per-candidate fee components in base units."""

    funding_model: FundingModel
    input_fee_base: Decimal
    agency_markup_base: Decimal
    company_markup_base: Decimal
    final_fee_base: Decimal


class FeeComposer:
    """Normalize, resolve markups and apply the funding-model formula."""

    def __init__(
        self,
        *,
        normalizer: CurrencyNormalizer,
        markup_resolver: MarkupResolver | None = None,
    ) -> None:
        self._normalizer = normalizer
        self._markups = markup_resolver or MarkupResolver()

    @property
    def normalizer(self) -> CurrencyNormalizer:
        return self._normalizer

    def compose(self, order: JobOrder) -> ComposedFee:
        input_fee = quantize_amount(
            self._normalizer.normalize(order.input_fee, order.input_fee_currency)
        )
        # Both percentage markups use the normalized input fee; they never compound.
        agency = quantize_amount(
            self._markups.resolve(input_fee, order.markup_agency, order.markup_agency_type)
        )
        company = quantize_amount(
            self._markups.resolve(input_fee, order.markup_company, order.markup_company_type)
        )
        funding_model = resolve_funding_model(order.payment_type)

        return ComposedFee(
            funding_model=funding_model,
            input_fee_base=input_fee,
            agency_markup_base=agency,
            company_markup_base=company,
            final_fee_base=compose_final_fee(
                funding_model,
                input_fee=input_fee,
                agency_markup=agency,
                company_markup=company,
            ),
        )
