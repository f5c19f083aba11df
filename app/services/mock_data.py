import logging
import random

from app.models.plan import DataType, NetworkPerformance, Plan, PlanSpecifications
from app.services.provider_logos import get_provider_logo

logger = logging.getLogger(__name__)

UNLIMITED_SURCHARGE = 10

MOCK_PROVIDERS = [
    {
        "name": "Airalo",
        "price_offset": 0,
        "rating": 4.5,
        "reviews": 1250,
        "features": ["Instant activation", "Hotspot included", "No contract", "24/7 support"],
        "operators": ["Verizon", "AT&T", "T-Mobile"],
        "speed": "Up to 150 Mbps",
        "latency": "< 50ms",
        "reliability": "99.9%",
    },
    {
        "name": "Holafly",
        "price_offset": 15,
        "rating": 4.7,
        "reviews": 890,
        "features": ["Unlimited data", "Hotspot included", "No speed limits", "Multi-country"],
        "operators": ["Verizon", "AT&T", "T-Mobile", "Sprint"],
        "speed": "Up to 200 Mbps",
        "latency": "< 40ms",
        "reliability": "99.8%",
    },
    {
        "name": "Orange",
        "price_offset": 5,
        "rating": 4.3,
        "reviews": 650,
        "features": ["5G network", "Fast speeds", "EU coverage", "Easy setup"],
        "operators": ["Orange", "T-Mobile", "Verizon"],
        "speed": "Up to 300 Mbps",
        "latency": "< 30ms",
        "reliability": "99.7%",
    },
    {
        "name": "Nomad",
        "price_offset": 3,
        "rating": 4.4,
        "reviews": 420,
        "features": ["Global coverage", "Flexible plans", "No hidden fees", "Easy top-up"],
        "operators": ["AT&T", "T-Mobile", "Verizon"],
        "speed": "Up to 100 Mbps",
        "latency": "< 60ms",
        "reliability": "99.5%",
    },
    {
        "name": "Ubigi",
        "price_offset": 8,
        "rating": 4.6,
        "reviews": 750,
        "features": ["5G ready", "Instant setup", "Multi-device", "Global network"],
        "operators": ["SoftBank", "T-Mobile", "Orange"],
        "speed": "Up to 250 Mbps",
        "latency": "< 35ms",
        "reliability": "99.6%",
    },
]

DATA_OPTIONS = [
    {"data": "5 GB", "data_type": DataType.FOUR_G_FIVE_G, "duration": "7 days"},
    {"data": "10 GB", "data_type": DataType.FOUR_G_FIVE_G, "duration": "30 days"},
    {"data": "20 GB", "data_type": DataType.FIVE_G, "duration": "30 days"},
    {"data": "Unlimited", "data_type": DataType.FOUR_G_FIVE_G, "duration": "30 days"},
    {"data": "15 GB", "data_type": DataType.FOUR_G_FIVE_G, "duration": "14 days"},
]


def generate_mock_plans(country_code: str, country_name: str, rng: random.Random | None = None) -> list[Plan]:
    """Fabricate one demo plan per provider in MOCK_PROVIDERS.

    Prices share a random base (15-39 USD) per call so regions look different,
    with fixed per-provider offsets on top.
    """
    rng = rng or random.Random()
    base_price = 15 + rng.randint(0, 24)
    code = str(country_code or "").strip().upper()

    plans = []
    for index, provider in enumerate(MOCK_PROVIDERS):
        option = DATA_OPTIONS[index % len(DATA_OPTIONS)]
        surcharge = UNLIMITED_SURCHARGE if option["data"] == "Unlimited" else 0
        plans.append(
            Plan(
                id=f"{provider['name'].lower()}-{code}-{index + 1}",
                provider=provider["name"],
                provider_image=get_provider_logo(provider["name"]),
                data=option["data"],
                data_type=option["data_type"],
                duration=option["duration"],
                price=round(float(base_price + provider["price_offset"] + surcharge), 2),
                network_rating=provider["rating"],
                review_count=provider["reviews"],
                features=tuple(provider["features"]),
                partner_operators=tuple(provider["operators"]),
                network_performance=NetworkPerformance(
                    speed=provider["speed"],
                    latency=provider["latency"],
                    reliability=provider["reliability"],
                ),
                specifications=PlanSpecifications(
                    voice="Not included" if index % 2 == 0 else "Included",
                    sms="Included" if index % 3 == 0 else "Not included",
                ),
            )
        )

    logger.info("Generated %s synthetic plans for %s (%s)", len(plans), country_name, code)
    return sorted(plans, key=lambda p: p.price)


class SyntheticSource:
    """Plan source backed by generate_mock_plans, interchangeable with the scrapers."""

    name = "synthetic"

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng

    async def fetch_plans(self, country_code: str, country_name: str) -> list[Plan]:
        return generate_mock_plans(country_code, country_name, rng=self.rng)
