import logging
import math
import re

from app.models.plan import DataType, NetworkPerformance, Plan, PlanSpecifications
from app.services.provider_logos import get_provider_logo

logger = logging.getLogger(__name__)

# Price-per-GB for plans whose data allowance cannot be read at all.
UNKNOWN_PRICE_PER_GB = 999.0

_DECIMAL_RE = re.compile(r"(\d+(?:\.\d+)?)")
_INTEGER_RE = re.compile(r"(\d+)")
_THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}\b)")


def is_unlimited(text) -> bool:
    return "unlimited" in str(text or "").lower()


def extract_data_gb(data) -> float:
    """'10 GB' -> 10.0, 'Unlimited' -> inf, anything else unreadable -> 0.0."""
    match = _DECIMAL_RE.search(str(data or ""))
    if match:
        return float(match.group(1))
    return math.inf if is_unlimited(data) else 0.0


def extract_duration_days(duration) -> int:
    match = _INTEGER_RE.search(str(duration or ""))
    return int(match.group(1)) if match else 0


def extract_max_speed(speed) -> int:
    match = _INTEGER_RE.search(str(speed or ""))
    return int(match.group(1)) if match else 0


def parse_price(text) -> float:
    raw = _THOUSANDS_RE.sub("", str(text or ""))
    match = _DECIMAL_RE.search(raw)
    return float(match.group(1)) if match else 0.0


def price_per_gb(plan: Plan) -> float:
    match = _DECIMAL_RE.search(plan.data)
    if not match:
        # 0 marks unlimited as the best possible rate, 999 marks unknown as the worst.
        return 0.0 if is_unlimited(plan.data) else UNKNOWN_PRICE_PER_GB
    data_gb = float(match.group(1))
    if data_gb <= 0:
        return UNKNOWN_PRICE_PER_GB
    return plan.price / data_gb


def _first(item: dict, *keys, default=None):
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return value
    return default


def _as_list(value) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    if isinstance(value, str) and value.strip():
        return [part.strip() for part in value.split(",") if part.strip()]
    return []


def _data_type(value) -> DataType:
    raw = str(value or "").strip().upper().replace(" ", "")
    try:
        return DataType(raw)
    except ValueError:
        return DataType.FOUR_G_FIVE_G


def plan_from_payload(item: dict, index: int = 0) -> Plan:
    """Build a Plan from a loosely shaped provider JSON object.

    Providers that expose JSON name the same fields differently, so every
    field is looked up under a handful of candidate keys.
    """
    provider = str(_first(item, "provider", "providerName", "name", default="Unknown Provider"))
    performance = item.get("networkPerformance") if isinstance(item.get("networkPerformance"), dict) else {}
    specs = item.get("specifications") if isinstance(item.get("specifications"), dict) else {}
    try:
        price = float(_first(item, "price", "cost", "usdPrice", default=0))
    except (TypeError, ValueError):
        price = parse_price(_first(item, "price", "cost", default=""))
    try:
        rating = float(_first(item, "rating", "networkRating", default=4.0))
    except (TypeError, ValueError):
        rating = 4.0
    try:
        reviews = int(_first(item, "reviews", "reviewCount", default=0))
    except (TypeError, ValueError):
        reviews = 0

    return Plan(
        id=str(_first(item, "id", "_id", default=f"plan-{index}")),
        provider=provider,
        provider_image=str(_first(item, "logo", "icon", "providerImage", default=get_provider_logo(provider))),
        data=str(_first(item, "data", "dataAmount", "capacity", default="N/A")),
        data_type=_data_type(_first(item, "dataType", "networkType")),
        duration=str(_first(item, "duration", "validity", "period", default="N/A")),
        price=price,
        network_rating=min(max(rating, 0.0), 5.0),
        review_count=max(reviews, 0),
        features=_as_list(_first(item, "features", "benefits", default=[])),
        partner_operators=_as_list(_first(item, "operators", "networks", "partnerOperators", default=[])),
        network_performance=NetworkPerformance(
            speed=str(_first(item, "speed", "maxSpeed", default=performance.get("speed") or "N/A")),
            latency=str(_first(item, "latency", default=performance.get("latency") or "N/A")),
            reliability=str(_first(item, "reliability", "uptime", default=performance.get("reliability") or "N/A")),
        ),
        specifications=PlanSpecifications(
            activation=str(_first(item, "activation", default=specs.get("activation") or "Instant")),
            hotspot=str(_first(item, "hotspot", default=specs.get("hotspot") or "Included")),
            tethering=str(_first(item, "tethering", default=specs.get("tethering") or "Yes")),
            voice=str(_first(item, "voice", default=specs.get("voice") or "Not included")),
            sms=str(_first(item, "sms", default=specs.get("sms") or "Not included")),
        ),
    )


def plans_from_payload(payload) -> list[Plan]:
    if not isinstance(payload, list):
        return []
    plans = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            continue
        try:
            plans.append(plan_from_payload(item, index))
        except ValueError as exc:
            logger.warning("Skipping provider row %s: %s", index, exc)
    return plans
