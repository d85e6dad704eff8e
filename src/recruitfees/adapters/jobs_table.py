"""Adapter for rows of the hosted ``jobs`` table."""

from __future__ import annotations

import re
from typing import Any

_NUMERIC_FIELDS = (
    "salary",
    "input_fee",
    "markup_agency",
    "markup_company",
)
_CODE_FIELDS = (
    "salary_currency",
    "input_fee_currency",
    "markup_agency_type",
    "markup_company_type",
    "payment_type",
)
_GROUPING = re.compile(r"[,\s_]")


class JobsTableAdapter:
    """Turn a raw jobs-table row into a JobOrder-shaped dictionary.

    Rows come from form input: amounts may be strings with thousands
    separators and unset fields are often empty strings.
    """

    provider = "jobs_table"

    def parse_record(self, record: dict[str, Any]) -> dict[str, Any]:
        parsed = dict(record)
        for name in _NUMERIC_FIELDS:
            if name in parsed:
                parsed[name] = self._clean_number(parsed[name])
        for name in _CODE_FIELDS:
            if name in parsed:
                parsed[name] = self._clean_code(parsed[name])
        if isinstance(parsed.get("requested_headcount"), str):
            parsed["requested_headcount"] = self._clean_number(parsed["requested_headcount"])
        if "id" in parsed and parsed["id"] is not None:
            parsed["id"] = str(parsed["id"])
        return parsed

    @staticmethod
    def _clean_number(value: Any) -> Any:
        if not isinstance(value, str):
            return value
        stripped = _GROUPING.sub("", value)
        return stripped or None

    @staticmethod
    def _clean_code(value: Any) -> Any:
        if not isinstance(value, str):
            return value
        stripped = value.strip()
        return stripped or None
