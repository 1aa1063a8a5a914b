from __future__ import annotations

from pydantic import BaseModel, Field


class ActivityEntry(BaseModel):
    id: int
    name: str
    timestamp: str
    emission_factor: float = Field(ge=0, description="kg CO2 per unit of activity.")
    amount: float = Field(default=0, ge=0)
    carbon: float = Field(default=0, ge=0)
    unit_type: str
    factor_label: str = "Variable"


class ActivityListResponse(BaseModel):
    activities: list[ActivityEntry]
    total_carbon: float
    trees_needed: int


class AdjustAmountRequest(BaseModel):
    change: float = Field(..., description="Signed delta applied to the current amount.")


class SetAmountRequest(BaseModel):
    amount: float = Field(..., ge=0)


class FootprintLevel(BaseModel):
    level: str
    color: str
    message: str


class ReductionSuggestion(BaseModel):
    name: str
    current: float
    reduce_by: float
    new_value: float


class MonthValue(BaseModel):
    month: str
    value: float


class FootprintResponse(BaseModel):
    total_carbon: float
    level: FootprintLevel
    target_footprint: float
    reduction_suggestions: list[ReductionSuggestion]
    past_footprint: list[MonthValue]
    predicted_next: float
    predicted_level: FootprintLevel


class ImpactLevel(BaseModel):
    level: str
    color: str


class EmissionSummaryResponse(BaseModel):
    warehouse_carbon: float
    real_time_carbon: float
    total_carbon: float
    trees_to_offset: int
    cars_equivalent: float
    flights_equivalent: float
    impact_level: ImpactLevel
    monthly_trend: list[MonthValue]


class ReductionFactors(BaseModel):
    electricity: float = Field(default=0, ge=0, le=100)
    packaging: float = Field(default=0, ge=0, le=100)
    diesel: float = Field(default=0, ge=0, le=100)
    cardboard: float = Field(default=0, ge=0, le=100)


class CategoryComparison(BaseModel):
    name: str
    current: float
    reduced: float


class ReductionScenarioResponse(BaseModel):
    factors: ReductionFactors
    comparison: list[CategoryComparison]
    total_current: float
    total_reduced: float
    total_reduction: float
    reduction_percentage: float
    trees_saved: int
