import math
from dataclasses import dataclass

from app.models.plan import Plan
from app.services.normalizer import (
    UNKNOWN_PRICE_PER_GB,
    extract_data_gb,
    extract_duration_days,
    price_per_gb,
)

WEIGHTS = {"price": 0.4, "rating": 0.3, "data": 0.2, "duration": 0.1}
EMPTY_SET_SCORE = 50
MAX_COMPARE_PLANS = 3


@dataclass(frozen=True)
class ScoreBreakdown:
    price: float
    rating: float
    data: float
    duration: float

    @property
    def total(self) -> float:
        return (
            self.price * WEIGHTS["price"]
            + self.rating * WEIGHTS["rating"]
            + self.data * WEIGHTS["data"]
            + self.duration * WEIGHTS["duration"]
        )

    @property
    def score(self) -> int:
        # Half-up, so 98.5 scores 99.
        return math.floor(self.total * 100 + 0.5)


@dataclass(frozen=True)
class _SetFacets:
    min_price_per_gb: float | None
    max_price_per_gb: float | None
    max_data_gb: float
    max_days: int


def _set_facets(plans: list[Plan]) -> _SetFacets:
    rates = [price_per_gb(p) for p in plans]
    cheapest = [r for r in rates if r > 0]
    dearest = [r for r in rates if r < UNKNOWN_PRICE_PER_GB]
    finite_data = [gb for gb in (extract_data_gb(p.data) for p in plans) if not math.isinf(gb)]
    return _SetFacets(
        min_price_per_gb=min(cheapest) if cheapest else None,
        max_price_per_gb=max(dearest) if dearest else None,
        max_data_gb=max(finite_data, default=0.0),
        max_days=max((extract_duration_days(p.duration) for p in plans), default=0),
    )


def _breakdown(plan: Plan, facets: _SetFacets) -> ScoreBreakdown:
    rate = price_per_gb(plan)
    low, high = facets.min_price_per_gb, facets.max_price_per_gb
    if low is None or high is None or high <= low:
        price_score = 1.0
    else:
        price_score = min(max(1 - (rate - low) / (high - low), 0.0), 1.0)

    data_gb = extract_data_gb(plan.data)
    if math.isinf(data_gb):
        data_score = 1.0
    elif facets.max_data_gb > 0:
        data_score = min(data_gb / facets.max_data_gb, 1.0)
    else:
        data_score = 0.0

    if facets.max_days > 0:
        duration_score = min(extract_duration_days(plan.duration) / facets.max_days, 1.0)
    else:
        duration_score = 0.5

    return ScoreBreakdown(
        price=price_score,
        rating=plan.network_rating / 5,
        data=data_score,
        duration=duration_score,
    )


def score_breakdown(plan: Plan, plans: list[Plan]) -> ScoreBreakdown | None:
    """Weighted components of the value score of ``plan`` within ``plans``.

    Returns None for an empty comparison set, where the score is fixed.
    """
    if not plans:
        return None
    return _breakdown(plan, _set_facets(plans))


def value_score(plan: Plan, plans: list[Plan]) -> int:
    """0-100 "best value" score of ``plan`` relative to ``plans``.

    The score depends on the whole set, so it must be recomputed whenever the
    set changes (e.g. after filtering).
    """
    breakdown = score_breakdown(plan, plans)
    return EMPTY_SET_SCORE if breakdown is None else breakdown.score


def score_plans(plans: list[Plan], against: list[Plan] | None = None) -> list[tuple[Plan, int]]:
    reference = plans if against is None else against
    if not reference:
        return [(plan, EMPTY_SET_SCORE) for plan in plans]
    facets = _set_facets(reference)
    return [(plan, _breakdown(plan, facets).score) for plan in plans]


def plan_stats(plans: list[Plan]) -> dict | None:
    if not plans:
        return None
    prices = [p.price for p in plans]
    return {
        "min_price": min(prices),
        "max_price": max(prices),
        "avg_price": sum(prices) / len(prices),
        "providers": len({p.provider for p in plans}),
        "total_plans": len(plans),
    }


def _best(entries: list[dict], key) -> str:
    # max() keeps the first plan on ties.
    return max(entries, key=key)["plan"].id


def compare_plans(plans: list[Plan]) -> dict:
    if not plans:
        raise ValueError("Select at least one plan to compare")
    if len(plans) > MAX_COMPARE_PLANS:
        raise ValueError(f"Maximum {MAX_COMPARE_PLANS} plans can be compared")

    entries = [
        {"plan": plan, "price_per_gb": price_per_gb(plan), "value_score": score}
        for plan, score in score_plans(plans)
    ]
    return {
        "plans": entries,
        "cheapest": _best(entries, lambda e: -e["plan"].price),
        "best_rated": _best(entries, lambda e: e["plan"].network_rating),
        "most_data": _best(entries, lambda e: extract_data_gb(e["plan"].data)),
        "best_value": _best(entries, lambda e: e["value_score"]),
    }
