import enum
from dataclasses import dataclass, field


class DataType(str, enum.Enum):
    FOUR_G = "4G"
    FIVE_G = "5G"
    FOUR_G_FIVE_G = "4G/5G"


@dataclass(frozen=True)
class NetworkPerformance:
    speed: str = "N/A"
    latency: str = "N/A"
    reliability: str = "N/A"


@dataclass(frozen=True)
class PlanSpecifications:
    activation: str = "Instant"
    hotspot: str = "Included"
    tethering: str = "Yes"
    voice: str = "Not included"
    sms: str = "Not included"


@dataclass(frozen=True)
class Plan:
    """A single eSIM offer as listed by one provider for one country.

    Prices are always in USD. ``data`` and ``duration`` keep the provider's
    wording ("10 GB", "Unlimited", "30 days"); numeric facets are derived by
    ``app.services.normalizer`` when needed.
    """

    id: str
    provider: str
    provider_image: str
    data: str
    duration: str
    price: float
    data_type: DataType = DataType.FOUR_G_FIVE_G
    network_rating: float = 0.0
    review_count: int = 0
    features: tuple[str, ...] = ()
    partner_operators: tuple[str, ...] = ()
    network_performance: NetworkPerformance = field(default_factory=NetworkPerformance)
    specifications: PlanSpecifications = field(default_factory=PlanSpecifications)

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Plan price must not be negative (got {self.price})")
        if not 0 <= self.network_rating <= 5:
            raise ValueError(f"Network rating must be between 0 and 5 (got {self.network_rating})")
        if self.review_count < 0:
            raise ValueError(f"Review count must not be negative (got {self.review_count})")
        # Lists handed in by callers are frozen so the plan stays immutable.
        object.__setattr__(self, "features", tuple(dict.fromkeys(self.features)))
        object.__setattr__(self, "partner_operators", tuple(dict.fromkeys(self.partner_operators)))
        object.__setattr__(self, "data_type", DataType(self.data_type))
