"""Printable job-order financial summary."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from .core import FinancialBreakdown, policy_for, resolve_funding_model
from .schemas import JobOrder

NOT_SPECIFIED = "Not specified"
NOT_AVAILABLE = "N/A"

_CENT = Decimal("0.01")


def format_amount(amount: Decimal | int | float) -> str:
    """Thousands-separated amount, at most two decimals, no trailing zeros."""
    value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    value = value.quantize(_CENT, rounding=ROUND_HALF_UP).normalize()
    if value == 0:
        value = Decimal("0")
    return f"{value:,f}"


def format_currency(amount: Decimal | int | float, currency: str) -> str:
    return f"{format_amount(amount)} {currency}"


def format_percent(rate: Decimal) -> str:
    return f"{format_amount(rate * 100)}%"


def build_summary(order: JobOrder, breakdown: FinancialBreakdown) -> dict[str, Any]:
    """Render the financial section of a job-order printout as plain data."""

    base = breakdown.base_currency
    policy = policy_for(order.payment_type)

    return {
        "job_id": order.job_id,
        "position_name": order.position_name,
        "receiving_company": order.receiving_company_name,
        "payment_type": _payment_type_badge(order.payment_type),
        "headcount": f"{breakdown.headcount} positions",
        "commercial_terms": [
            _term_row(
                "Salary",
                order.salary,
                order.salary_currency or base,
                breakdown.salary_base,
                base,
            ),
            _term_row(
                "Input Fee",
                order.input_fee,
                order.input_fee_currency or base,
                breakdown.input_fee_base,
                base,
            ),
        ],
        "markups": [
            _markup_row(
                "Agency Markup",
                order.markup_agency,
                order.markup_agency_type,
                breakdown.agency_markup_base,
                breakdown.input_fee_base,
                base,
            ),
            _markup_row(
                "Company Markup",
                order.markup_company,
                order.markup_company_type,
                breakdown.company_markup_base,
                breakdown.input_fee_base,
                base,
            ),
        ],
        "final_fee": {
            "amount": format_currency(breakdown.final_fee_base, base),
            "formula": policy.label,
        },
        "projection": {
            "fee_per_candidate": format_currency(breakdown.final_fee_base, base),
            "total_headcount": breakdown.headcount,
            "total_revenue": format_currency(breakdown.total_revenue, base),
            "margin_label": f"Estimated Margin ({format_percent(breakdown.margin_rate)})",
            "per_candidate_margin": format_currency(breakdown.per_candidate_margin, base),
            "total_margin": format_currency(breakdown.total_margin, base),
        },
        "notes": _notes(breakdown),
    }


def _payment_type_badge(payment_type: str | None) -> str:
    if resolve_funding_model(payment_type) != payment_type:
        return "HYBRID"
    return payment_type.replace("_", " ").upper()


def _term_row(
    item: str,
    amount: Decimal | None,
    currency: str,
    base_amount: Decimal,
    base_currency: str,
) -> dict[str, str]:
    if amount is None:
        return {"item": item, "original": NOT_SPECIFIED, "base": NOT_AVAILABLE}
    return {
        "item": item,
        "original": format_currency(amount, currency),
        "base": format_currency(base_amount, base_currency),
    }


def _markup_row(
    item: str,
    amount: Decimal | None,
    markup_type: str | None,
    resolved: Decimal,
    input_fee_base: Decimal,
    base_currency: str,
) -> dict[str, str]:
    markup_type = markup_type or "flat"
    entered = amount if amount is not None else Decimal("0")
    if markup_type == "percentage":
        value = f"{format_amount(entered)}%"
        calculation = f"{format_currency(input_fee_base, base_currency)} × {format_amount(entered)}%"
    else:
        value = format_currency(entered, base_currency)
        calculation = value
    return {
        "item": item,
        "type": markup_type,
        "value": value if amount is not None else NOT_SPECIFIED,
        "amount": format_currency(resolved, base_currency),
        "calculation": calculation,
    }


def _notes(breakdown: FinancialBreakdown) -> list[str]:
    notes = [
        f"No exchange rate for {code}; converted 1:1 into {breakdown.base_currency}."
        for code in breakdown.unknown_currencies
    ]
    if breakdown.final_fee_base == 0 and breakdown.missing_inputs:
        notes.append("Fee inputs not specified: " + ", ".join(breakdown.missing_inputs))
    return notes
