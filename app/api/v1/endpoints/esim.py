from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.middlewares.rate_limit import limiter
from app.models.plan import Plan
from app.schemas.esim import (
    CompareOut,
    CompareRequest,
    CountryOut,
    CurrencyRateOut,
    FiatCurrency,
    ParsedQuery,
    PlanOut,
    PlansResponse,
    PlanStatsOut,
    PlanViewRequest,
    PlanViewResponse,
)
from app.services.countries import COUNTRIES, find_country, search_countries
from app.services.currency import CURRENCY_SYMBOLS, EXCHANGE_RATES, convert_from_usd, format_currency
from app.services.esim import MISSING_COUNTRY_ERROR, PlanEnvelope, fetch_esim_plans
from app.services.filters import apply_filters
from app.services.nlp_parser import parse_natural_language_query
from app.services.normalizer import price_per_gb
from app.services.scoring import compare_plans, plan_stats, score_plans

router = APIRouter()
settings = get_settings()


def _plan_out(plan: Plan, score: int, currency: str) -> PlanOut:
    return PlanOut(
        **asdict(plan),
        price_per_gb=price_per_gb(plan),
        value_score=score,
        display_price=format_currency(convert_from_usd(plan.price, currency), currency),
        currency=currency,
    )


def _stats_out(plans: list[Plan], currency: str) -> PlanStatsOut | None:
    stats = plan_stats(plans)
    if stats is None:
        return None
    for key in ("min_price", "max_price", "avg_price"):
        stats[key] = round(convert_from_usd(stats[key], currency), 2)
    return PlanStatsOut(**stats)


def _plans_response(envelope: PlanEnvelope, currency: str):
    if not envelope.success:
        status_code = 400 if envelope.error == MISSING_COUNTRY_ERROR else 500
        body = PlansResponse(success=False, error=envelope.error, currency=currency)
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    plans = envelope.plans or []
    return PlansResponse(
        success=True,
        data=[_plan_out(plan, score, currency) for plan, score in score_plans(plans)],
        stats=_stats_out(plans, currency),
        currency=currency,
        source=envelope.source,
    )


@router.get("/plans", response_model=PlansResponse)
@limiter.limit(settings.plans_rate_limit)
async def list_plans(
    request: Request,
    country_code: str | None = None,
    country_name: str | None = None,
    min_duration_days: int | None = None,
    max_price: float | None = None,
    currency: FiatCurrency = "USD",
):
    envelope = await fetch_esim_plans(country_code, country_name, min_duration_days, max_price)
    return _plans_response(envelope, currency)


@router.get("/countries/{slug}/plans", response_model=PlansResponse)
@limiter.limit(settings.plans_rate_limit)
async def list_country_plans(
    request: Request,
    slug: str,
    days: int | None = None,
    budget: float | None = None,
    currency: FiatCurrency = "USD",
):
    country = find_country(slug)
    if not country:
        raise HTTPException(status_code=404, detail="Country not found")
    envelope = await fetch_esim_plans(country.code, country.name, days, budget)
    return _plans_response(envelope, currency)


@router.post("/plans/view", response_model=PlanViewResponse)
def view_plans(payload: PlanViewRequest):
    plans = [item.to_plan() for item in payload.plans]
    visible = apply_filters(plans, payload.filters)
    # Scores are relative to what the user is currently looking at.
    return PlanViewResponse(
        total=len(plans),
        matched=len(visible),
        data=[_plan_out(plan, score, payload.currency) for plan, score in score_plans(visible)],
    )


@router.post("/plans/compare", response_model=CompareOut)
def compare(payload: CompareRequest):
    try:
        result = compare_plans([item.to_plan() for item in payload.plans])
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return CompareOut(
        plans=[_plan_out(entry["plan"], entry["value_score"], payload.currency) for entry in result["plans"]],
        cheapest=result["cheapest"],
        best_rated=result["best_rated"],
        most_data=result["most_data"],
        best_value=result["best_value"],
    )


@router.get("/search", response_model=ParsedQuery)
def search(q: str = Query(..., min_length=1, max_length=500)):
    return parse_natural_language_query(q)


@router.get("/countries", response_model=list[CountryOut])
def list_countries(q: str = ""):
    countries = search_countries(q) if q.strip() else COUNTRIES
    return [CountryOut.model_validate(country) for country in countries]


@router.get("/currencies", response_model=list[CurrencyRateOut])
def list_currencies():
    return [
        CurrencyRateOut(code=code, symbol=CURRENCY_SYMBOLS[code], rate=rate)
        for code, rate in EXCHANGE_RATES.items()
    ]
