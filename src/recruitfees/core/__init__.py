"""Core fee computation components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .currency import (
    AMOUNT_QUANTUM,
    CurrencyNormalizer,
    RateTable,
    RateTableError,
    quantize_amount,
)
from .engine import FeeEngine, FinancialBreakdown
from .fees import (
    FUNDING_POLICIES,
    ComposedFee,
    FeeComposer,
    FundingModel,
    FundingPolicy,
    compose_final_fee,
    missing_required_fields,
    policy_for,
    resolve_funding_model,
)
from .markup import MarkupResolver, MarkupType
from .revenue import (
    DEFAULT_MARGIN_RATE,
    InvalidHeadcountError,
    RevenueProjection,
    RevenueProjector,
    validate_headcount,
)

__all__ = [
    "AMOUNT_QUANTUM",
    "ComposedFee",
    "CurrencyNormalizer",
    "DEFAULT_MARGIN_RATE",
    "FUNDING_POLICIES",
    "FeeComposer",
    "FeeEngine",
    "FinancialBreakdown",
    "FundingModel",
    "FundingPolicy",
    "InvalidHeadcountError",
    "MarkupResolver",
    "MarkupType",
    "RateTable",
    "RateTableError",
    "RevenueProjection",
    "RevenueProjector",
    "compose_final_fee",
    "missing_required_fields",
    "policy_for",
    "quantize_amount",
    "resolve_funding_model",
    "validate_headcount",
]
