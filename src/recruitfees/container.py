"""Dependency injection container for the fee engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .adapters import JobsTableAdapter
from .config import default_rate_table
from .core import (
    CurrencyNormalizer,
    FeeComposer,
    FeeEngine,
    MarkupResolver,
    RateTable,
    RevenueProjector,
)
from .pipeline import AdapterRegistry, QuotePipeline


class FeeEngineContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    rate_table = providers.Singleton(
        default_rate_table,
        base_currency=config.base_currency,
    )

    normalizer = providers.Singleton(CurrencyNormalizer, rate_table=rate_table)
    markup_resolver = providers.Singleton(MarkupResolver)

    fee_composer = providers.Singleton(
        FeeComposer,
        normalizer=normalizer,
        markup_resolver=markup_resolver,
    )

    revenue_projector = providers.Singleton(
        RevenueProjector,
        margin_rate=config.margin_rate,
    )

    fee_engine = providers.Singleton(
        FeeEngine,
        composer=fee_composer,
        projector=revenue_projector,
    )

    jobs_table_adapter = providers.Singleton(JobsTableAdapter)

    adapter_registry = providers.Singleton(
        AdapterRegistry,
        adapters=providers.List(jobs_table_adapter),
    )

    pipeline = providers.Factory(
        QuotePipeline,
        engine=fee_engine,
        registry=adapter_registry,
    )


def create_container(
    *,
    settings: dict | None = None,
    rate_table: RateTable | None = None,
) -> FeeEngineContainer:
    """Instantiate container with optional overrides.

    ``rate_table`` (e.g. fetched live) wins over ``settings["rates"]``, which
    wins over the packaged table.
    """

    container = FeeEngineContainer()
    settings = settings if isinstance(settings, dict) else {}

    engine_settings = settings.get("engine", {})
    if engine_settings:
        container.config.override(engine_settings)

    if rate_table is not None:
        container.rate_table.override(providers.Object(rate_table))
    elif settings.get("rates"):
        container.rate_table.override(
            providers.Singleton(
                RateTable.from_mapping,
                settings["rates"],
                base_currency=engine_settings.get("base_currency", "UGX"),
            )
        )

    return container
