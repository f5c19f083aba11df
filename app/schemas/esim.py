import enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.plan import DataType, NetworkPerformance, Plan, PlanSpecifications

FiatCurrency = Literal["USD", "EUR", "GBP", "CAD", "AUD"]


class SortKey(str, enum.Enum):
    PRICE = "price"
    PRICE_PER_GB = "price_per_gb"
    RATING = "rating"
    DATA = "data"
    DURATION = "duration"
    VALUE_SCORE = "value_score"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class FilterOptions(BaseModel):
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    min_data_gb: Optional[float] = Field(default=None, ge=0)
    max_data_gb: Optional[float] = Field(default=None, ge=0)
    data_type: Optional[Literal["4G", "5G", "4G/5G", "all"]] = None
    min_duration: Optional[int] = Field(default=None, ge=0)
    max_duration: Optional[int] = Field(default=None, ge=0)
    min_rating: Optional[float] = Field(default=None, ge=0, le=5)
    max_price_per_gb: Optional[float] = Field(default=None, ge=0)
    unlimited_only: bool = False
    sort_by: SortKey = SortKey.PRICE
    sort_order: SortOrder = SortOrder.ASC


class CountryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    code: str
    flag: str
    slug: str


class ParsedQuery(BaseModel):
    country: Optional[CountryOut] = None
    days: Optional[int] = None
    budget: Optional[float] = None
    currency: FiatCurrency = "USD"


class NetworkPerformanceSchema(BaseModel):
    speed: str = "N/A"
    latency: str = "N/A"
    reliability: str = "N/A"


class PlanSpecificationsSchema(BaseModel):
    activation: str = "Instant"
    hotspot: str = "Included"
    tethering: str = "Yes"
    voice: str = "Not included"
    sms: str = "Not included"


class PlanIn(BaseModel):
    id: str = Field(..., min_length=1, max_length=128)
    provider: str = Field(..., min_length=1, max_length=64)
    provider_image: str = ""
    data: str
    data_type: DataType = DataType.FOUR_G_FIVE_G
    duration: str
    price: float = Field(..., ge=0)
    network_rating: float = Field(0.0, ge=0, le=5)
    review_count: int = Field(0, ge=0)
    features: list[str] = []
    partner_operators: list[str] = []
    network_performance: NetworkPerformanceSchema = NetworkPerformanceSchema()
    specifications: PlanSpecificationsSchema = PlanSpecificationsSchema()

    def to_plan(self) -> Plan:
        return Plan(
            id=self.id,
            provider=self.provider,
            provider_image=self.provider_image,
            data=self.data,
            data_type=self.data_type,
            duration=self.duration,
            price=self.price,
            network_rating=self.network_rating,
            review_count=self.review_count,
            features=tuple(self.features),
            partner_operators=tuple(self.partner_operators),
            network_performance=NetworkPerformance(**self.network_performance.model_dump()),
            specifications=PlanSpecifications(**self.specifications.model_dump()),
        )


class PlanOut(PlanIn):
    price_per_gb: float
    value_score: int
    display_price: str
    currency: FiatCurrency = "USD"


class PlanStatsOut(BaseModel):
    min_price: float
    max_price: float
    avg_price: float
    providers: int
    total_plans: int


class PlansResponse(BaseModel):
    success: bool
    data: Optional[list[PlanOut]] = None
    error: Optional[str] = None
    stats: Optional[PlanStatsOut] = None
    currency: FiatCurrency = "USD"
    source: Optional[str] = None


class PlanViewRequest(BaseModel):
    plans: list[PlanIn]
    filters: FilterOptions = FilterOptions()
    currency: FiatCurrency = "USD"


class PlanViewResponse(BaseModel):
    total: int
    matched: int
    data: list[PlanOut]


class CompareRequest(BaseModel):
    plans: list[PlanIn]
    currency: FiatCurrency = "USD"


class CompareOut(BaseModel):
    plans: list[PlanOut]
    cheapest: str
    best_rated: str
    most_data: str
    best_value: str


class CurrencyRateOut(BaseModel):
    code: FiatCurrency
    symbol: str
    rate: float
