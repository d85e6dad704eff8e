"""Batch job-order quoting pipeline."""

from __future__ import annotations

import json
from dataclasses import asdict
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List

import pendulum
import structlog
from pydantic import ValidationError

from .adapters import JobRecordAdapter, JobsTableAdapter
from .core import FeeEngine, InvalidHeadcountError, missing_required_fields
from .report import build_summary
from .schemas import JobOrder
from . import __version__

DEFAULT_PROVIDER = JobsTableAdapter.provider


class AdapterRegistry:
    """Registry mapping providers to job-record adapters."""

    def __init__(self, adapters: Iterable[JobRecordAdapter]):
        self._adapters = {adapter.provider: adapter for adapter in adapters}

    def get(self, provider: str) -> JobRecordAdapter:
        try:
            return self._adapters[provider]
        except KeyError as exc:
            raise KeyError(f"Unsupported provider: {provider!r}") from exc

    def providers(self) -> List[str]:
        return list(self._adapters.keys())


class JobOrderLoadError(ValueError):
    """Raised when job-order loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[JobOrder]):
        super().__init__("Job order loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Job order loading failed: {self.errors}"


class JobOrderLoader:
    """Load job orders from JSON Lines through adapters.

    A line is either a bare record (read with the default provider) or an
    envelope ``{"provider": ..., "payload": {...}}``.
    """

    def __init__(self, registry: AdapterRegistry, *, default_provider: str = DEFAULT_PROVIDER):
        self._registry = registry
        self._default_provider = default_provider

    def load(self, path: Path) -> list[JobOrder]:
        orders: list[JobOrder] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: record must be a JSON object")
                    continue
                order = self._parse(record, idx, errors)
                if order is not None:
                    orders.append(order)
        if errors:
            raise JobOrderLoadError(errors, orders)
        return orders

    def parse(self, record: dict) -> JobOrder:
        """Parse one record; raises KeyError or ValidationError on bad input."""
        provider = record.get("provider", self._default_provider)
        adapter = self._registry.get(provider)
        payload = record.get("payload", record) if "provider" in record else record
        return JobOrder.model_validate(adapter.parse_record(payload))

    def _parse(self, record: dict, idx: int, errors: list[str]) -> JobOrder | None:
        try:
            return self.parse(record)
        except KeyError:
            errors.append(f"line {idx}: unsupported provider '{record.get('provider')}'")
        except ValidationError as exc:
            errors.append(f"line {idx}: {exc}")
        return None


class OutputWriter:
    """Persist quote results."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )


class QuotePipeline:
    """Load job orders, compute breakdowns and write the results."""

    def __init__(
        self,
        *,
        engine: FeeEngine,
        registry: AdapterRegistry,
        loader: JobOrderLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._engine = engine
        self._registry = registry
        self._loader = loader or JobOrderLoader(registry)
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def quote(self, order: JobOrder) -> dict:
        """Compute one order and return its serialized breakdown and summary."""
        breakdown = self._engine.compute(order)

        for code in breakdown.unknown_currencies:
            self._logger.warning("currency.unknown_rate", job_id=order.job_id, currency=code)
        missing_required = missing_required_fields(order)
        if missing_required:
            self._logger.warning(
                "order.missing_required",
                job_id=order.job_id,
                funding_model=breakdown.funding_model,
                fields=missing_required,
            )

        self._logger.info(
            "quote.result",
            job_id=order.job_id,
            funding_model=breakdown.funding_model,
            final_fee_base=str(breakdown.final_fee_base),
            total_revenue=str(breakdown.total_revenue),
        )

        return _jsonable(
            {
                "job_id": order.job_id,
                "breakdown": asdict(breakdown),
                "summary": build_summary(order, breakdown),
            }
        )

    def run(self, *, orders_path: Path, output_path: Path) -> list[dict]:
        load_errors: list[str] = []
        try:
            orders = self._loader.load(orders_path)
        except JobOrderLoadError as exc:
            orders = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("orders.partial_load", errors=exc.errors)

        results: list[dict] = []
        compute_errors: list[dict] = []
        for order in orders:
            try:
                results.append(self.quote(order))
            except InvalidHeadcountError as exc:
                compute_errors.append({"job_id": order.job_id, "error": str(exc)})
                self._logger.warning("quote.rejected", job_id=order.job_id, error=str(exc))

        metadata = {
            "order_count": len(orders),
            "quoted_count": len(results),
            "base_currency": self._engine.base_currency,
            "errors": load_errors,
            "rejected": compute_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "results": results})
        return results


def default_registry() -> AdapterRegistry:
    """Return the default adapter registry."""
    return AdapterRegistry(adapters=[JobsTableAdapter()])


def _jsonable(payload: dict) -> dict:
    return json.loads(json.dumps(payload, default=_json_default, ensure_ascii=False))


def _json_default(value):  # type: ignore[override]
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
