"""Currency rate table and normalization into the base unit of account."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Iterator, Mapping

ZERO = Decimal("0")
ONE = Decimal("1")

# Computed amounts carry six decimal places, so a quantized amount times a
# headcount stays exact in the default 28-digit context.
AMOUNT_QUANTUM = Decimal("0.000001")


class RateTableError(ValueError):
    """Raised when a rate table cannot be built from its configuration."""


def to_decimal(value: Any) -> Decimal:
    """Convert ints, floats and numeric strings without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize_amount(value: Decimal) -> Decimal:
    return value.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


def _normalize_code(code: str | None) -> str | None:
    if code is None:
        return None
    code = code.strip().upper()
    return code or None


class RateTable(Mapping[str, Decimal]):
    """Read-only mapping currency code -> base units per one unit of it.

    The base currency always maps to 1. Instances never change after
    construction and are safe to share across threads.
    """

    __slots__ = ("_base_currency", "_rates")

    def __init__(self, rates: Mapping[str, Decimal], base_currency: str) -> None:
        self._base_currency = base_currency
        self._rates = MappingProxyType(dict(rates))

    @classmethod
    def from_mapping(
        cls,
        rates: Mapping[str, Any],
        *,
        base_currency: str = "UGX",
    ) -> "RateTable":
        base = _normalize_code(base_currency)
        if base is None:
            raise RateTableError("Base currency must be a non-empty code.")

        parsed: dict[str, Decimal] = {}
        for code, raw in rates.items():
            key = _normalize_code(str(code))
            if key is None:
                raise RateTableError("Currency codes must be non-empty.")
            try:
                rate = to_decimal(raw)
            except (InvalidOperation, TypeError, ValueError) as exc:
                raise RateTableError(f"Rate for {key} is not numeric: {raw!r}") from exc
            if not rate.is_finite() or rate <= ZERO:
                raise RateTableError(f"Rate for {key} must be positive, got {raw!r}")
            parsed[key] = rate

        parsed[base] = ONE
        return cls(parsed, base)

    @classmethod
    def from_quotes(
        cls,
        quotes: Mapping[str, Any],
        *,
        quote_currency: str = "USD",
        base_currency: str | None = None,
    ) -> "RateTable":
        """Build a table from feed quotes of the form 1 quote_currency = q X.

        Rates come out as q[base] / q[X], so 1 X = that many base units.
        ``base_currency`` defaults to ``quote_currency`` and must be quoted
        by the feed otherwise.
        """
        parsed: dict[str, Decimal] = {}
        for code, raw in quotes.items():
            key = _normalize_code(str(code))
            try:
                quote = to_decimal(raw)
            except (InvalidOperation, TypeError, ValueError) as exc:
                raise RateTableError(f"Quote for {key} is not numeric: {raw!r}") from exc
            if not quote.is_finite() or quote <= ZERO:
                raise RateTableError(f"Quote for {key} must be positive, got {raw!r}")
            if key is not None:
                parsed[key] = quote

        quote_code = _normalize_code(quote_currency)
        if quote_code is None:
            raise RateTableError("Quote currency must be a non-empty code.")
        parsed.setdefault(quote_code, ONE)

        base = _normalize_code(base_currency) or quote_code
        if base not in parsed:
            raise RateTableError(f"Feed has no quote for base currency {base!r}")
        pivot = parsed[base]
        return cls.from_mapping(
            {code: pivot / quote for code, quote in parsed.items()},
            base_currency=base,
        )

    def rebased(self, base_currency: str) -> "RateTable":
        """Return the same rates expressed relative to ``base_currency``."""
        base = _normalize_code(base_currency)
        if base is None or base not in self._rates:
            raise RateTableError(f"Cannot rebase onto unknown currency {base_currency!r}")
        if base == self._base_currency:
            return self
        pivot = self._rates[base]
        return RateTable.from_mapping(
            {code: rate / pivot for code, rate in self._rates.items()},
            base_currency=base,
        )

    @property
    def base_currency(self) -> str:
        return self._base_currency

    def rate_for(self, currency: str | None) -> Decimal | None:
        code = _normalize_code(currency)
        if code is None:
            return None
        return self._rates.get(code)

    def __getitem__(self, key: str) -> Decimal:
        return self._rates[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"RateTable(base_currency={self._base_currency!r}, currencies={len(self)})"


class CurrencyNormalizer:
    """Convert amounts into the rate table's base unit of account."""

    def __init__(self, rate_table: RateTable) -> None:
        self._rates = rate_table

    @property
    def base_currency(self) -> str:
        return self._rates.base_currency

    @property
    def rate_table(self) -> RateTable:
        return self._rates

    def is_known(self, currency: str | None) -> bool:
        return self._rates.rate_for(currency) is not None

    def normalize(self, amount: Decimal | int | float | None, currency: str | None) -> Decimal:
        """Return ``amount`` in base units.

        A missing amount contributes zero. A missing or unknown currency code
        converts at rate 1 (pass-through).
        """
        if amount is None:
            return ZERO
        rate = self._rates.rate_for(currency)
        return to_decimal(amount) * (rate if rate is not None else ONE)
