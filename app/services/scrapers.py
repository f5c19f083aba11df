import logging
import re
import time
from dataclasses import dataclass, field

import httpx
from bs4 import BeautifulSoup

from app.core.config import get_settings, parse_provider_keys
from app.models.plan import DataType, NetworkPerformance, Plan, PlanSpecifications
from app.services.countries import country_slug
from app.services.normalizer import parse_price
from app.services.provider_logos import get_provider_logo

settings = get_settings()
logger = logging.getLogger(__name__)

# Last-resort price lookup when no plan card could be read. Grouped amounts
# ("1,299.00", "1.299,50") are tried before plain ones ("1299", "12,99").
CURRENCY_AMOUNT_RE = re.compile(
    r"(?:US\$|\$|€|£)\s?(\d{1,3}(?:[.,]\d{3})+(?:[.,]\d{1,2})?(?!\d)|\d+(?:[.,]\d{1,2})?)"
)


@dataclass(frozen=True)
class ProviderProfile:
    """Everything needed to scrape one provider's country page.

    Provider pages are unversioned, so each field lists several candidate
    selectors / ``data-*`` attributes tried in order.
    """

    key: str
    name: str
    url_template: str
    card_selectors: tuple[str, ...]
    data_selectors: tuple[str, ...] = ()
    price_selectors: tuple[str, ...] = (".price",)
    duration_selectors: tuple[str, ...] = ()
    data_attrs: tuple[str, ...] = ("data-data", "data-amount")
    price_attrs: tuple[str, ...] = ("data-price",)
    duration_attrs: tuple[str, ...] = ("data-duration", "data-validity")
    default_data: str = "N/A"
    default_duration: str = "30 days"
    data_type: DataType = DataType.FOUR_G_FIVE_G
    rating: float = 4.0
    reviews: int = 0
    features: tuple[str, ...] = ()
    operators: tuple[str, ...] = ("Multiple networks",)
    performance: NetworkPerformance = field(default_factory=NetworkPerformance)
    specifications: PlanSpecifications = field(default_factory=PlanSpecifications)

    def url_for(self, country_code: str, country_name: str) -> str:
        return self.url_template.format(
            code=str(country_code or "").strip().lower(),
            slug=country_slug(country_name),
        )


PROVIDER_PROFILES = {
    "airalo": ProviderProfile(
        key="airalo",
        name="Airalo",
        url_template="https://www.airalo.com/{code}-esim",
        card_selectors=(".plan-card", ".esim-plan", "[data-plan]"),
        data_selectors=(".data-amount", ".data"),
        price_selectors=(".price", ".cost"),
        duration_selectors=(".duration", ".validity"),
        default_duration="N/A",
        rating=4.5,
        reviews=1250,
        features=("Instant activation", "Hotspot included", "No contract"),
        performance=NetworkPerformance(speed="Up to 150 Mbps", latency="< 50ms", reliability="99.9%"),
    ),
    "holafly": ProviderProfile(
        key="holafly",
        name="Holafly",
        url_template="https://esim.holafly.com/{code}",
        card_selectors=(".plan", ".package", "[data-package]"),
        data_selectors=(".data",),
        duration_selectors=(".days", ".duration"),
        default_data="Unlimited",
        rating=4.7,
        reviews=890,
        features=("Unlimited data", "Hotspot included", "No speed limits"),
        performance=NetworkPerformance(speed="Up to 200 Mbps", latency="< 40ms", reliability="99.8%"),
    ),
    "nomad": ProviderProfile(
        key="nomad",
        name="Nomad",
        url_template="https://www.nomad-esim.com/regions/{code}",
        card_selectors=(".plan-card", ".data-plan"),
        data_selectors=(".data-size", ".data"),
        duration_selectors=(".validity", ".duration"),
        rating=4.4,
        reviews=420,
        features=("Global coverage", "Flexible plans", "No hidden fees"),
        performance=NetworkPerformance(speed="Up to 100 Mbps", latency="< 60ms", reliability="99.5%"),
    ),
    "kolet": ProviderProfile(
        key="kolet",
        name="Kolet",
        url_template="https://kolet.com/en/esim/{slug}",
        card_selectors=(".offer-card", ".plan-card", "[data-offer]"),
        data_selectors=(".offer-data", ".data"),
        price_selectors=(".offer-price", ".price"),
        duration_selectors=(".offer-validity", ".validity"),
        rating=4.3,
        reviews=310,
        features=("Pay as you go", "Hotspot included", "No contract"),
        performance=NetworkPerformance(speed="Up to 150 Mbps", latency="< 55ms", reliability="99.5%"),
    ),
}


def _field_text(card, selectors: tuple[str, ...], attrs: tuple[str, ...]) -> str:
    for selector in selectors:
        element = card.select_one(selector)
        if element is not None:
            text = element.get_text(" ", strip=True)
            if text:
                return text
    for attr in attrs:
        value = card.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _build_plan(profile: ProviderProfile, plan_id: str, data: str, duration: str, price: float) -> Plan:
    return Plan(
        id=plan_id,
        provider=profile.name,
        provider_image=get_provider_logo(profile.name),
        data=data,
        data_type=profile.data_type,
        duration=duration,
        price=price,
        network_rating=profile.rating,
        review_count=profile.reviews,
        features=profile.features,
        partner_operators=profile.operators,
        network_performance=profile.performance,
        specifications=profile.specifications,
    )


def _amount_value(token: str) -> float:
    # A trailing separator with one or two digits is the decimal mark; any
    # other "," or "." groups thousands.
    last = max(token.rfind(","), token.rfind("."))
    if last >= 0 and len(token) - last - 1 <= 2:
        whole, cents = token[:last], token[last + 1:]
        return parse_price(f"{re.sub(r'[.,]', '', whole)}.{cents}")
    return parse_price(re.sub(r"[.,]", "", token))


def find_fallback_price(html: str) -> float:
    for match in CURRENCY_AMOUNT_RE.finditer(html or ""):
        price = _amount_value(match.group(1))
        if price > 0:
            return price
    return 0.0


def parse_plan_cards(html: str, profile: ProviderProfile, country_code: str) -> list[Plan]:
    """Extract plans from a provider page.

    Cards whose price does not parse to a positive number are dropped. If no
    card survives, the first currency-prefixed amount on the page becomes a
    single default plan.
    """
    code = str(country_code or "").strip().upper()
    soup = BeautifulSoup(html or "", "html.parser")

    cards = []
    for selector in profile.card_selectors:
        cards = soup.select(selector)
        if cards:
            break

    plans = []
    for index, card in enumerate(cards):
        price = parse_price(_field_text(card, profile.price_selectors, profile.price_attrs))
        if price <= 0:
            continue
        data = _field_text(card, profile.data_selectors, profile.data_attrs) or profile.default_data
        duration = _field_text(card, profile.duration_selectors, profile.duration_attrs) or profile.default_duration
        plans.append(_build_plan(profile, f"{profile.key}-{code}-{index}", data, duration, price))

    if plans:
        return plans

    price = find_fallback_price(html)
    if price > 0:
        logger.info("%s: no plan cards matched, using page price %.2f", profile.name, price)
        return [_build_plan(profile, f"{profile.key}-{code}-default", profile.default_data, profile.default_duration, price)]
    return []


class ProviderScraper:
    def __init__(self, profile: ProviderProfile, client: httpx.AsyncClient, user_agent: str | None = None):
        self.profile = profile
        self.client = client
        self.user_agent = user_agent or settings.scraper_user_agent

    @property
    def name(self) -> str:
        return self.profile.name

    async def fetch_plans(self, country_code: str, country_name: str) -> list[Plan]:
        url = self.profile.url_for(country_code, country_name)
        start = time.time()
        try:
            response = await self.client.get(url, headers={"User-Agent": self.user_agent}, follow_redirects=True)
            duration_ms = round((time.time() - start) * 1000, 2)
            logger.info("Provider %s GET %s status=%s duration=%sms", self.name, url, response.status_code, duration_ms)
            if not response.is_success:
                logger.warning("%s returned HTTP %s for %s", self.name, response.status_code, country_code)
                return []
            plans = parse_plan_cards(response.text, self.profile, country_code)
        except Exception as exc:
            logger.warning("Error scraping %s for %s: %s", self.name, country_code, exc)
            return []
        logger.info("%s: %s plans for %s", self.name, len(plans), country_code)
        return plans


def build_scrapers(client: httpx.AsyncClient, provider_keys: list[str] | None = None) -> list[ProviderScraper]:
    keys = provider_keys if provider_keys is not None else parse_provider_keys(settings.esim_providers)
    scrapers = []
    for key in keys:
        profile = PROVIDER_PROFILES.get(key)
        if profile is None:
            logger.warning("Unknown eSIM provider %r in configuration, skipping.", key)
            continue
        scrapers.append(ProviderScraper(profile, client))
    return scrapers
