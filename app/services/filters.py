import math

from app.models.plan import Plan
from app.schemas.esim import FilterOptions, SortKey, SortOrder
from app.services.normalizer import (
    extract_data_gb,
    extract_duration_days,
    is_unlimited,
    price_per_gb,
)
from app.services.scoring import score_plans


def filter_plans(plans: list[Plan], options: FilterOptions) -> list[Plan]:
    filtered = list(plans)

    if options.min_price is not None:
        filtered = [p for p in filtered if p.price >= options.min_price]
    if options.max_price is not None:
        filtered = [p for p in filtered if p.price <= options.max_price]

    # Unlimited plans satisfy any data bound.
    if options.min_data_gb is not None:
        filtered = [p for p in filtered if extract_data_gb(p.data) >= options.min_data_gb]
    if options.max_data_gb is not None:
        filtered = [
            p
            for p in filtered
            if extract_data_gb(p.data) <= options.max_data_gb or math.isinf(extract_data_gb(p.data))
        ]

    if options.data_type and options.data_type != "all":
        filtered = [p for p in filtered if p.data_type.value == options.data_type]

    if options.min_duration is not None:
        filtered = [p for p in filtered if extract_duration_days(p.duration) >= options.min_duration]
    if options.max_duration is not None:
        filtered = [p for p in filtered if extract_duration_days(p.duration) <= options.max_duration]

    if options.min_rating is not None:
        filtered = [p for p in filtered if p.network_rating >= options.min_rating]

    if options.max_price_per_gb is not None:
        filtered = [
            p
            for p in filtered
            if price_per_gb(p) <= options.max_price_per_gb or price_per_gb(p) == 0
        ]

    if options.unlimited_only:
        filtered = [p for p in filtered if is_unlimited(p.data)]

    return filtered


def _sort_values(plans: list[Plan], sort_by: SortKey) -> list[float]:
    if sort_by == SortKey.PRICE:
        return [p.price for p in plans]
    if sort_by == SortKey.PRICE_PER_GB:
        return [price_per_gb(p) for p in plans]
    if sort_by == SortKey.RATING:
        return [p.network_rating for p in plans]
    if sort_by == SortKey.DATA:
        return [extract_data_gb(p.data) for p in plans]
    if sort_by == SortKey.DURATION:
        return [float(extract_duration_days(p.duration)) for p in plans]
    return [float(score) for _, score in score_plans(plans)]


def sort_plans(
    plans: list[Plan],
    sort_by: SortKey | str = SortKey.PRICE,
    sort_order: SortOrder | str = SortOrder.ASC,
) -> list[Plan]:
    """Stable sort on one numeric facet.

    Infinite values (unlimited data) land after every finite value when
    ascending and before them when descending; ties keep their input order
    either way.
    """
    values = _sort_values(plans, SortKey(sort_by))
    order = sorted(
        range(len(plans)),
        key=lambda i: values[i],
        reverse=SortOrder(sort_order) == SortOrder.DESC,
    )
    return [plans[i] for i in order]


def apply_filters(plans: list[Plan], options: FilterOptions) -> list[Plan]:
    filtered = filter_plans(plans, options)
    return sort_plans(filtered, options.sort_by, options.sort_order)
