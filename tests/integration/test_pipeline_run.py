from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from recruitfees import __version__
from recruitfees.container import create_container
from recruitfees.core import RateTable
from recruitfees.pipeline import OutputWriter


def test_pipeline_reports_load_errors_and_quotes_valid_orders(tmp_path: Path) -> None:
    orders_path = tmp_path / "orders.jsonl"
    output_path = tmp_path / "results.json"
    lines = [
        json.dumps(
            {
                "provider": "jobs_table",
                "payload": {
                    "id": "JO-A",
                    "requested_headcount": 4,
                    "input_fee": "200",
                    "input_fee_currency": "EUR",
                    "markup_company": "5",
                    "markup_company_type": "percentage",
                    "payment_type": "candidate_funded",
                },
            }
        ),
        "{broken",
        json.dumps({"id": "JO-B", "requested_headcount": 2, "input_fee": "90", "input_fee_currency": "XYZ"}),
    ]
    orders_path.write_text("\n".join(lines), encoding="utf-8")

    rates = RateTable.from_mapping({"USD": 3700, "EUR": 4000}, base_currency="UGX")
    pipeline = create_container(rate_table=rates).pipeline()

    results = pipeline.run(orders_path=orders_path, output_path=output_path)

    assert [entry["job_id"] for entry in results] == ["JO-A", "JO-B"]
    first = results[0]["breakdown"]
    assert Decimal(first["input_fee_base"]) == Decimal("800000")
    assert Decimal(first["company_markup_base"]) == Decimal("40000")
    assert Decimal(first["final_fee_base"]) == Decimal("840000")
    assert Decimal(first["total_revenue"]) == Decimal("3360000")

    second = results[1]["breakdown"]
    assert second["funding_model"] == "hybrid"
    assert Decimal(second["input_fee_base"]) == Decimal("90")
    assert second["unknown_currencies"] == ["XYZ"]

    written = json.loads(output_path.read_text(encoding="utf-8"))
    assert written["results"] == results
    assert written["metadata"]["app_version"] == __version__
    assert len(written["metadata"]["errors"]) == 1
    assert "invalid JSON" in written["metadata"]["errors"][0]
    assert written["metadata"]["rejected"] == []


def test_output_writer_serializes_decimals_only(tmp_path: Path) -> None:
    writer = OutputWriter()
    target = tmp_path / "nested" / "out.json"

    writer.write(target, {"amount": Decimal("137100.000000")})

    assert json.loads(target.read_text(encoding="utf-8")) == {"amount": "137100.000000"}
    with pytest.raises(TypeError, match="set"):
        writer.write(tmp_path / "bad.json", {"amount": {Decimal("1")}})
