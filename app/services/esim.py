import logging
from dataclasses import dataclass

import httpx

from app.core.config import get_settings
from app.models.plan import Plan
from app.services.aggregator import DataSourceStrategy, default_strategies, resolve_plans
from app.services.mock_data import generate_mock_plans
from app.services.normalizer import extract_duration_days

settings = get_settings()
logger = logging.getLogger(__name__)

MISSING_COUNTRY_ERROR = "Country code and name are required"
INTERNAL_ERROR = "Internal server error"


@dataclass
class PlanEnvelope:
    success: bool
    plans: list[Plan] | None = None
    error: str | None = None
    source: str | None = None


def _server_side_filter(plans: list[Plan], min_duration_days, max_price) -> list[Plan]:
    if min_duration_days is None and max_price is None:
        return plans
    min_days = None if min_duration_days is None else max(1, int(min_duration_days))
    price_cap = None if max_price is None else max(0.0, float(max_price))
    return [
        p
        for p in plans
        if (min_days is None or extract_duration_days(p.duration) >= min_days)
        and (price_cap is None or p.price <= price_cap)
    ]


async def _load(country_code: str, country_name: str, strategies) -> tuple[str | None, list[Plan]]:
    if strategies is not None:
        return await resolve_plans(country_code, country_name, strategies)
    async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
        return await resolve_plans(country_code, country_name, default_strategies(client))


async def fetch_esim_plans(
    country_code: str | None,
    country_name: str | None,
    min_duration_days: int | None = None,
    max_price: float | None = None,
    *,
    strategies: list[DataSourceStrategy] | None = None,
) -> PlanEnvelope:
    """Plans for one destination, cheapest first.

    Provider failures never reach the caller: the strategy chain falls back to
    synthetic data, so a valid query always succeeds with a non-empty list
    (before the optional duration / price filter). Only a missing country or an
    unexpected internal error produces ``success=False``.
    """
    code = str(country_code or "").strip()
    name = str(country_name or "").strip()
    if not code or not name:
        return PlanEnvelope(success=False, error=MISSING_COUNTRY_ERROR)

    try:
        source, plans = await _load(code, name, strategies)
        if not plans:
            logger.warning("No plans from any source for %s. Using synthetic data.", code)
            source, plans = "synthetic", generate_mock_plans(code, name)
        plans = _server_side_filter(plans, min_duration_days, max_price)
        return PlanEnvelope(success=True, plans=plans, source=source)
    except Exception:
        logger.exception("Unexpected error while loading eSIM plans for %s", code)
        return PlanEnvelope(success=False, error=INTERNAL_ERROR)
