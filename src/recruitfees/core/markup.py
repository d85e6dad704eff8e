"""Markup resolution for agency and company markups."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from .currency import ZERO, to_decimal

MarkupType = Literal["flat", "percentage"]

HUNDRED = Decimal("100")


class MarkupResolver:
    """Turn a markup specification into an amount in base units."""

    def resolve(
        self,
        base: Decimal,
        markup_amount: Decimal | int | float | None,
        markup_type: MarkupType | str | None = "flat",
    ) -> Decimal:
        """Resolve one markup against the normalized input fee ``base``.

        Flat markups are taken as already expressed in base units. Anything
        other than ``"percentage"``, including a missing type, is flat.
        Negative amounts act as discounts.
        """
        if markup_amount is None:
            return ZERO
        amount = to_decimal(markup_amount)
        if markup_type == "percentage":
            return base * (amount / HUNDRED)
        return amount
