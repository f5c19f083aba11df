from app.models.plan import DataType, NetworkPerformance, Plan, PlanSpecifications

__all__ = [
    "DataType",
    "NetworkPerformance",
    "Plan",
    "PlanSpecifications",
]
