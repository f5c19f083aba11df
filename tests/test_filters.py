import pytest

from app.models.plan import DataType, Plan
from app.schemas.esim import FilterOptions, SortKey, SortOrder
from app.services.filters import apply_filters, filter_plans, sort_plans
from app.services.scoring import score_plans


def _plan(plan_id, price, data, duration, rating, data_type=DataType.FOUR_G_FIVE_G, provider="Airalo"):
    return Plan(
        id=plan_id,
        provider=provider,
        provider_image="",
        data=data,
        data_type=data_type,
        duration=duration,
        price=price,
        network_rating=rating,
    )


P1 = _plan("p1", 9.99, "1 GB", "7 days", 4.0, DataType.FOUR_G, provider="Airalo")
P2 = _plan("p2", 9.99, "3 GB", "15 days", 4.5, DataType.FIVE_G, provider="Nomad")
P3 = _plan("p3", 10.0, "10 GB", "30 days", 4.8)
P4 = _plan("p4", 25.0, "Unlimited", "30 days", 4.7, provider="Holafly")
P5 = _plan("p5", 10.0, "N/A", "N/A", 3.0, DataType.FOUR_G)
PLANS = [P1, P2, P3, P4, P5]


def _ids(plans):
    return [p.id for p in plans]


def test_no_filters_keeps_everything():
    assert filter_plans(PLANS, FilterOptions()) == PLANS


def test_max_data_never_excludes_unlimited():
    result = filter_plans(PLANS, FilterOptions(max_data_gb=5))
    assert "p4" in _ids(result)
    assert _ids(result) == ["p1", "p2", "p4", "p5"]


def test_min_data_keeps_unlimited():
    assert _ids(filter_plans(PLANS, FilterOptions(min_data_gb=5))) == ["p3", "p4"]


def test_equal_price_bounds_return_exact_matches():
    result = filter_plans(PLANS, FilterOptions(min_price=10, max_price=10))
    assert _ids(result) == ["p3", "p5"]
    assert all(p.price == 10 for p in result)


def test_data_type_filter():
    assert _ids(filter_plans(PLANS, FilterOptions(data_type="5G"))) == ["p2"]
    assert filter_plans(PLANS, FilterOptions(data_type="all")) == PLANS


def test_duration_filters():
    assert _ids(filter_plans(PLANS, FilterOptions(min_duration=15))) == ["p2", "p3", "p4"]
    assert _ids(filter_plans(PLANS, FilterOptions(max_duration=7))) == ["p1", "p5"]


def test_min_rating_filter():
    assert _ids(filter_plans(PLANS, FilterOptions(min_rating=4.7))) == ["p3", "p4"]


def test_max_price_per_gb_keeps_unlimited():
    assert _ids(filter_plans(PLANS, FilterOptions(max_price_per_gb=3))) == ["p3", "p4"]


def test_unlimited_only():
    assert _ids(filter_plans(PLANS, FilterOptions(unlimited_only=True))) == ["p4"]


def test_filters_combine():
    options = FilterOptions(max_price=10, min_rating=4.5, max_data_gb=5)
    assert _ids(filter_plans(PLANS, options)) == ["p2"]


def test_sort_by_price_is_stable_in_both_directions():
    assert _ids(sort_plans(PLANS, SortKey.PRICE, SortOrder.ASC)) == ["p1", "p2", "p3", "p5", "p4"]
    assert _ids(sort_plans(PLANS, SortKey.PRICE, SortOrder.DESC)) == ["p4", "p3", "p5", "p1", "p2"]


def test_equal_prices_keep_input_order():
    assert _ids(sort_plans([P2, P1], "price", "asc")) == ["p2", "p1"]
    assert _ids(sort_plans([P1, P2], "price", "asc")) == ["p1", "p2"]


def test_sort_by_data_puts_unlimited_last_ascending():
    ascending = sort_plans(PLANS, SortKey.DATA, SortOrder.ASC)
    assert _ids(ascending) == ["p5", "p1", "p2", "p3", "p4"]
    assert ascending[-1].data == "Unlimited"


def test_sort_by_data_puts_unlimited_first_descending():
    assert _ids(sort_plans(PLANS, "data", "desc")) == ["p4", "p3", "p2", "p1", "p5"]


def test_sort_by_price_per_gb():
    assert _ids(sort_plans(PLANS, SortKey.PRICE_PER_GB)) == ["p4", "p3", "p2", "p1", "p5"]


def test_sort_by_rating_and_duration():
    assert _ids(sort_plans(PLANS, SortKey.RATING, SortOrder.DESC)) == ["p3", "p4", "p2", "p1", "p5"]
    assert _ids(sort_plans(PLANS, SortKey.DURATION)) == ["p5", "p1", "p2", "p3", "p4"]


def test_sort_by_value_score_uses_the_sorted_set():
    ordered = sort_plans(PLANS, SortKey.VALUE_SCORE, SortOrder.DESC)
    scores = {plan.id: score for plan, score in score_plans(PLANS)}
    values = [scores[p.id] for p in ordered]
    assert values == sorted(values, reverse=True)


def test_sort_rejects_unknown_key_and_order():
    with pytest.raises(ValueError):
        sort_plans(PLANS, "popularity")
    with pytest.raises(ValueError):
        sort_plans(PLANS, SortKey.PRICE, "sideways")


def test_apply_filters_sorts_after_filtering():
    options = FilterOptions(max_data_gb=5, sort_by=SortKey.DATA, sort_order=SortOrder.DESC)
    assert _ids(apply_filters(PLANS, options)) == ["p4", "p2", "p1", "p5"]


def test_sort_does_not_mutate_input():
    original = list(PLANS)
    sort_plans(PLANS, SortKey.PRICE, SortOrder.DESC)
    assert PLANS == original
