import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol

import httpx

from app.core.config import get_settings
from app.models.plan import Plan
from app.services.mock_data import SyntheticSource
from app.services.scrapers import build_scrapers

settings = get_settings()
logger = logging.getLogger(__name__)


class PlanSource(Protocol):
    name: str

    async def fetch_plans(self, country_code: str, country_name: str) -> list[Plan]:
        ...


@dataclass(frozen=True)
class DataSourceStrategy:
    """One step of the fallback chain: a named loader tried in order."""

    name: str
    load: Callable[[str, str], Awaitable[list[Plan]]]


async def scrape_all_providers(country_code: str, country_name: str, sources: list[PlanSource]) -> list[Plan]:
    """Query every source concurrently and merge whatever comes back.

    A failing source never cancels the others; its exception is logged and
    it contributes nothing. The merged list is sorted by price (stable).
    """
    if not sources:
        return []
    results = await asyncio.gather(
        *(source.fetch_plans(country_code, country_name) for source in sources),
        return_exceptions=True,
    )

    merged: list[Plan] = []
    for source, result in zip(sources, results):
        if isinstance(result, BaseException):
            logger.warning("Source %s failed for %s: %s", getattr(source, "name", source), country_code, result)
            continue
        merged.extend(result or [])
    return sorted(merged, key=lambda p: p.price)


async def resolve_plans(
    country_code: str,
    country_name: str,
    strategies: list[DataSourceStrategy],
) -> tuple[str | None, list[Plan]]:
    for strategy in strategies:
        try:
            plans = await strategy.load(country_code, country_name)
        except Exception as exc:
            logger.warning("Plan source %r failed for %s, trying next: %s", strategy.name, country_code, exc)
            continue
        if plans:
            return strategy.name, plans
        logger.warning("Plan source %r returned no plans for %s.", strategy.name, country_code)
    return None, []


def live_strategy(client: httpx.AsyncClient, provider_keys: list[str] | None = None) -> DataSourceStrategy:
    scrapers = build_scrapers(client, provider_keys)

    async def load(country_code: str, country_name: str) -> list[Plan]:
        return await scrape_all_providers(country_code, country_name, scrapers)

    return DataSourceStrategy("live", load)


def synthetic_strategy(source: SyntheticSource | None = None) -> DataSourceStrategy:
    source = source or SyntheticSource()
    return DataSourceStrategy(source.name, source.fetch_plans)


def default_strategies(client: httpx.AsyncClient) -> list[DataSourceStrategy]:
    strategies = []
    if settings.esim_live_scraping:
        strategies.append(live_strategy(client))
    strategies.append(synthetic_strategy())
    return strategies
