from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from recruitfees.config import default_rate_table
from recruitfees.core import (
    AMOUNT_QUANTUM,
    CurrencyNormalizer,
    FeeComposer,
    FeeEngine,
    InvalidHeadcountError,
    RateTable,
    RevenueProjector,
)
from recruitfees.schemas import JobOrder


class RecordingProjector(RevenueProjector):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[Decimal, int]] = []

    def project(self, final_fee_base, headcount, margin_rate=None):
        self.calls.append((final_fee_base, headcount))
        return super().project(final_fee_base, headcount, margin_rate)


def build_engine(projector: RevenueProjector | None = None) -> FeeEngine:
    rates = RateTable.from_mapping({"USD": 3700}, base_currency="UGX")
    composer = FeeComposer(normalizer=CurrencyNormalizer(rates))
    return FeeEngine(composer=composer, projector=projector or RevenueProjector())


def build_order(**kwargs: Any) -> JobOrder:
    defaults: dict[str, Any] = {
        "id": "JO-001",
        "requested_headcount": 10,
        "input_fee": Decimal("100"),
        "input_fee_currency": "USD",
        "markup_agency": Decimal("50000"),
        "markup_agency_type": "flat",
    }
    defaults.update(kwargs)
    return JobOrder(**defaults)


def test_employer_funded_charges_agency_markup_only():
    breakdown = build_engine().compute(build_order(payment_type="employer_funded"))

    assert breakdown.input_fee_base == Decimal("370000")
    assert breakdown.agency_markup_base == Decimal("50000")
    assert breakdown.final_fee_base == Decimal("50000")
    assert breakdown.total_revenue == Decimal("500000")
    assert breakdown.per_candidate_margin == Decimal("15000")
    assert breakdown.total_margin == Decimal("150000")
    assert breakdown.base_currency == "UGX"
    assert breakdown.funding_model == "employer_funded"


def test_candidate_funded_adds_company_percentage():
    order = build_order(
        payment_type="candidate_funded",
        markup_company=Decimal("10"),
        markup_company_type="percentage",
    )

    breakdown = build_engine().compute(order)

    assert breakdown.company_markup_base == Decimal("37000")
    assert breakdown.final_fee_base == Decimal("407000")
    assert breakdown.total_revenue == Decimal("4070000")


def test_hybrid_charges_every_component():
    order = build_order(
        payment_type="hybrid",
        markup_company=Decimal("10"),
        markup_company_type="percentage",
    )

    breakdown = build_engine().compute(order)

    assert breakdown.final_fee_base == Decimal("457000")
    assert breakdown.total_revenue == Decimal("4570000")


@pytest.mark.parametrize("payment_type", [None, "", "sponsored", "Hybrid"])
def test_missing_or_unrecognized_payment_type_matches_hybrid(payment_type):
    engine = build_engine()
    extra = {"markup_company": Decimal("10"), "markup_company_type": "percentage"}

    fallback = engine.compute(build_order(payment_type=payment_type, **extra))
    hybrid = engine.compute(build_order(payment_type="hybrid", **extra))

    assert fallback.funding_model == "hybrid"
    assert fallback.final_fee_base == hybrid.final_fee_base == Decimal("457000")
    assert fallback.total_margin == hybrid.total_margin


@pytest.mark.parametrize("headcount", [0, -3])
def test_invalid_headcount_is_rejected_before_projection(headcount):
    projector = RecordingProjector()
    engine = build_engine(projector)

    with pytest.raises(InvalidHeadcountError):
        engine.compute(build_order(requested_headcount=headcount))

    assert projector.calls == []


def test_unknown_currency_passes_through_and_is_reported():
    breakdown = build_engine().compute(
        build_order(input_fee=Decimal("250"), input_fee_currency="XYZ", payment_type="candidate_funded")
    )

    assert breakdown.input_fee_base == Decimal("250")
    assert breakdown.final_fee_base == Decimal("250")
    assert breakdown.unknown_currencies == ("XYZ",)


@pytest.mark.parametrize("payment_type", ["employer_funded", "candidate_funded", "hybrid", None])
@pytest.mark.parametrize("headcount", [1, 4, 50])
def test_all_amounts_absent_yield_zero_breakdown(payment_type, headcount):
    order = JobOrder(id="JO-blank", requested_headcount=headcount, payment_type=payment_type)

    breakdown = build_engine().compute(order)

    for name in (
        "salary_base",
        "input_fee_base",
        "agency_markup_base",
        "company_markup_base",
        "final_fee_base",
        "total_revenue",
        "per_candidate_margin",
        "total_margin",
    ):
        assert getattr(breakdown, name) == Decimal("0"), name
    assert breakdown.missing_inputs == ("salary", "input_fee", "markup_agency", "markup_company")


def test_salary_is_normalized_for_display_only():
    order = build_order(salary=Decimal("1200"), salary_currency="USD", payment_type="employer_funded")

    breakdown = build_engine().compute(order)

    assert breakdown.salary_base == Decimal("4440000")
    assert breakdown.final_fee_base == Decimal("50000")
    assert "salary" not in breakdown.missing_inputs


def test_margin_rate_override_per_call():
    breakdown = build_engine().compute(build_order(payment_type="employer_funded"), margin_rate=Decimal("0.2"))

    assert breakdown.margin_rate == Decimal("0.2")
    assert breakdown.total_margin == Decimal("100000")


def test_compute_is_deterministic():
    engine = build_engine()
    order = build_order(markup_company=Decimal("7.5"), markup_company_type="percentage")

    assert engine.compute(order) == engine.compute(order)


def test_breakdown_is_hashable_value_object():
    order = JobOrder(id="JO-hash", requested_headcount=2, input_fee=Decimal("5"), input_fee_currency="XYZ")
    engine = build_engine()

    first, second = engine.compute(order), engine.compute(order)

    assert isinstance(first.missing_inputs, tuple)
    assert isinstance(first.unknown_currencies, tuple)
    assert len({first, second}) == 1


@pytest.mark.parametrize("headcount", [1, 7, 13, 250])
def test_margins_agree_on_usd_base_table(headcount):
    composer = FeeComposer(normalizer=CurrencyNormalizer(default_rate_table("USD")))
    engine = FeeEngine(composer=composer)
    order = JobOrder(
        id="JO-usd",
        requested_headcount=headcount,
        input_fee=Decimal("100"),
        input_fee_currency="UGX",
        payment_type="candidate_funded",
    )

    breakdown = engine.compute(order)

    assert breakdown.final_fee_base > 0
    assert breakdown.total_margin == breakdown.per_candidate_margin * headcount
    assert breakdown.total_revenue == breakdown.final_fee_base * headcount
    for name in ("input_fee_base", "final_fee_base", "per_candidate_margin"):
        assert getattr(breakdown, name).as_tuple().exponent >= AMOUNT_QUANTUM.as_tuple().exponent, name
