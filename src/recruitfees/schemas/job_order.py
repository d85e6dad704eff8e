from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MONETARY_FIELDS: tuple[str, ...] = (
    "salary",
    "input_fee",
    "markup_agency",
    "markup_company",
)


class JobOrder(BaseModel):
    """One recruitment position opened against one employer."""

    job_id: str = Field(alias="id")
    position_name: str | None = None
    receiving_company_id: str | None = None
    receiving_company_name: str | None = None
    work_country: str | None = None

    requested_headcount: int

    salary: Decimal | None = None
    salary_currency: str | None = None
    input_fee: Decimal | None = None
    input_fee_currency: str | None = None

    markup_agency: Decimal | None = None
    markup_agency_type: Literal["flat", "percentage"] | None = None
    markup_company: Decimal | None = None
    markup_company_type: Literal["flat", "percentage"] | None = None

    # Unrecognized values are kept and resolve to the hybrid formula.
    payment_type: str | None = None

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    @field_validator("salary_currency", "input_fee_currency")
    @classmethod
    def _upper_currency(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().upper()
        return value or None

    def missing_monetary_fields(self) -> list[str]:
        """Monetary fields that are absent on this record."""
        return [name for name in MONETARY_FIELDS if getattr(self, name) is None]
