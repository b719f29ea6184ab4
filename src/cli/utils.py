"""Shared CLI utilities."""

import sys

import structlog
from rich.console import Console

console = Console()
logger = structlog.get_logger()


def get_components(skip_oracle: bool = False):
    """Build the inventory stack from config.

    Args:
        skip_oracle: If True, skip LLM setup (for commands that only read state)
    """
    from cli.config import load_config
    from inventory import (
        Catalog,
        CatalogError,
        InventoryAssistant,
        InventoryRepository,
        LLMIntentOracle,
        ReconciliationEngine,
        StatusReporter,
        StoreError,
        create_store,
        default_catalog,
    )
    from llm import LLMError, create_llm_provider
    from orders import OrderIdGenerator

    try:
        config = load_config()
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)

    try:
        catalog = (
            Catalog.from_yaml(config.paths.catalog_file)
            if config.paths.catalog_file
            else default_catalog()
        )
        store = create_store(config.store.backend, config.paths.data_dir)
    except (CatalogError, StoreError, OSError) as e:
        console.print(f"[red]Startup error:[/] {e}")
        sys.exit(1)

    repository = InventoryRepository(store, catalog)
    engine = ReconciliationEngine(
        repository,
        catalog,
        history_limit=config.inventory.history_limit,
        tonight_hour=config.inventory.tonight_hour,
    )
    reporter = StatusReporter(catalog, recent_count=config.inventory.recent_count)

    assistant = None
    if not skip_oracle:
        try:
            provider = create_llm_provider(
                provider=config.llm.provider,
                api_key=config.llm.api_key,
                model=config.llm.model,
            )
        except LLMError as e:
            console.print(f"[red]Config error:[/] {e}")
            sys.exit(1)
        oracle = LLMIntentOracle(
            catalog,
            provider=provider,
            max_tokens=config.llm.max_tokens,
            max_attempts=config.llm.max_attempts,
        )
        assistant = InventoryAssistant(oracle, engine, reporter)

    return {
        "config": config,
        "catalog": catalog,
        "store": store,
        "engine": engine,
        "reporter": reporter,
        "assistant": assistant,
        "orders": OrderIdGenerator(store),
    }
