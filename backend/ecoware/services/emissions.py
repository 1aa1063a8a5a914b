from __future__ import annotations

import math
from datetime import datetime

from ecoware.core.errors import UnknownActivityError
from ecoware.schemas.emissions import (
    ActivityEntry,
    CategoryComparison,
    EmissionSummaryResponse,
    FootprintLevel,
    FootprintResponse,
    ImpactLevel,
    MonthValue,
    ReductionFactors,
    ReductionScenarioResponse,
    ReductionSuggestion,
)

KG_CO2_PER_TREE = 20
TARGET_FOOTPRINT_KG = 100.0
CAR_TONNES_PER_YEAR = 2.3
FLIGHT_TONNES = 0.9

DEFAULT_ACTIVITIES = [
    {"id": 1, "name": "Electricity", "timestamp": "2024-01-15", "emission_factor": 0.5, "unit_type": "kWh"},
    {"id": 2, "name": "Cardboard", "timestamp": "2024-01-20", "emission_factor": 0.5, "unit_type": "kg"},
    {"id": 3, "name": "Plastic Packaging", "timestamp": "2024-02-05", "emission_factor": 0.3, "unit_type": "kg"},
    {"id": 4, "name": "Diesel", "timestamp": "2024-02-10", "emission_factor": 2.68, "unit_type": "litres"},
]

FACTOR_LABELS = [
    ("electricity", "0.5 kg CO₂/kWh"),
    ("diesel", "2.68 kg CO₂/litre"),
    ("cardboard", "0.5 kg CO₂/kg"),
    ("plastic packaging", "0.3 kg CO₂/kg"),
]

# (factor key, name substring, display label); first match wins.
REDUCTION_CATEGORIES = [
    ("electricity", "electricity", "Electricity"),
    ("packaging", "plastic packaging", "Plastic Packaging"),
    ("diesel", "diesel", "Diesel"),
    ("cardboard", "cardboard", "Cardboard"),
]

PAST_FOOTPRINT = [("Feb", 120.0), ("Mar", 140.0), ("Apr", 180.0), ("May", 210.0), ("Jun", 250.0)]
MONTHLY_TREND = [
    ("Jan", 120.0),
    ("Feb", 180.0),
    ("Mar", 150.0),
    ("Apr", 220.0),
    ("May", 280.0),
    ("Jun", 300.0),
]


def calculate_carbon_emission(amount: float, emission_factor: float) -> float:
    return amount * emission_factor


def emission_factor_label(activity_name: str) -> str:
    name = activity_name.lower()
    for keyword, label in FACTOR_LABELS:
        if keyword in name:
            return label
    return "Variable"


def default_activities() -> list[ActivityEntry]:
    return [
        ActivityEntry(**row, factor_label=emission_factor_label(row["name"]))
        for row in DEFAULT_ACTIVITIES
    ]


def _find_activity(activities: list[ActivityEntry], activity_id: int) -> ActivityEntry:
    for entry in activities:
        if entry.id == activity_id:
            return entry
    raise UnknownActivityError(f"Activity {activity_id} not found", details={"activity_id": activity_id})


def set_amount(activities: list[ActivityEntry], activity_id: int, amount: float) -> ActivityEntry:
    entry = _find_activity(activities, activity_id)
    entry.amount = max(0.0, amount)
    entry.carbon = max(0.0, calculate_carbon_emission(entry.amount, entry.emission_factor))
    return entry


def adjust_amount(activities: list[ActivityEntry], activity_id: int, change: float) -> ActivityEntry:
    entry = _find_activity(activities, activity_id)
    return set_amount(activities, activity_id, entry.amount + change)


def total_carbon(activities: list[ActivityEntry]) -> float:
    return sum(entry.carbon for entry in activities)


def trees_needed(carbon_kg: float) -> int:
    return math.ceil(carbon_kg / KG_CO2_PER_TREE)


def footprint_level(value: float) -> FootprintLevel:
    if value < 150:
        return FootprintLevel(level="Normal", color="green", message="Your carbon footprint is within a healthy range.")
    if value < 400:
        return FootprintLevel(
            level="Moderate",
            color="yellow",
            message="Your carbon footprint is moderate. Consider reducing emissions.",
        )
    return FootprintLevel(
        level="High",
        color="red",
        message="Warning: Your carbon footprint is high! Take action to reduce emissions.",
    )


def impact_level(emissions: float) -> ImpactLevel:
    if emissions < 100:
        return ImpactLevel(level="Low", color="green")
    if emissions < 500:
        return ImpactLevel(level="Moderate", color="yellow")
    if emissions < 1000:
        return ImpactLevel(level="High", color="orange")
    return ImpactLevel(level="Critical", color="red")


def reduction_suggestions(activities: list[ActivityEntry]) -> list[ReductionSuggestion]:
    total = total_carbon(activities)
    excess = total - TARGET_FOOTPRINT_KG
    if footprint_level(total).level != "High" or excess <= 0 or total <= 0:
        return []

    suggestions = []
    for entry in activities:
        reduce_by = (entry.carbon / total) * excess
        suggestions.append(
            ReductionSuggestion(
                name=entry.name,
                current=entry.carbon,
                reduce_by=reduce_by,
                new_value=max(0.0, entry.carbon - reduce_by),
            )
        )
    return suggestions


def build_footprint(activities: list[ActivityEntry]) -> FootprintResponse:
    total = total_carbon(activities)
    past = [MonthValue(month=month, value=value) for month, value in PAST_FOOTPRINT]
    past.append(MonthValue(month="Jul", value=total))

    predicted_next = max(0.0, past[-1].value + (past[-1].value - past[-2].value))

    return FootprintResponse(
        total_carbon=total,
        level=footprint_level(total),
        target_footprint=TARGET_FOOTPRINT_KG,
        reduction_suggestions=reduction_suggestions(activities),
        past_footprint=past,
        predicted_next=predicted_next,
        predicted_level=footprint_level(predicted_next),
    )


def build_summary(
    activities: list[ActivityEntry],
    real_time_carbon: float,
    now: datetime | None = None,
) -> EmissionSummaryResponse:
    now = now or datetime.now()
    warehouse = total_carbon(activities)
    combined = warehouse + real_time_carbon

    trend = [MonthValue(month=month, value=value) for month, value in MONTHLY_TREND]
    trend.append(MonthValue(month=now.strftime("%b"), value=round(combined, 2)))

    return EmissionSummaryResponse(
        warehouse_carbon=warehouse,
        real_time_carbon=real_time_carbon,
        total_carbon=combined,
        trees_to_offset=trees_needed(combined),
        cars_equivalent=round(combined / 1000 / CAR_TONNES_PER_YEAR * 12, 2),
        flights_equivalent=round(combined / 1000 / FLIGHT_TONNES, 2),
        impact_level=impact_level(combined),
        monthly_trend=trend,
    )


def category_emissions(activities: list[ActivityEntry]) -> dict[str, float]:
    totals = {key: 0.0 for key, _, _ in REDUCTION_CATEGORIES}
    for entry in activities:
        name = entry.name.lower()
        for key, keyword, _ in REDUCTION_CATEGORIES:
            if keyword in name:
                totals[key] += entry.carbon
                break
    return totals


def simulate_reduction(activities: list[ActivityEntry], factors: ReductionFactors) -> ReductionScenarioResponse:
    current = category_emissions(activities)
    reduced = {key: value * (1 - getattr(factors, key) / 100) for key, value in current.items()}

    total_current = sum(current.values())
    total_reduced = sum(reduced.values())
    total_reduction = total_current - total_reduced
    percentage = (total_reduction / total_current) * 100 if total_current > 0 else 0.0

    return ReductionScenarioResponse(
        factors=factors,
        comparison=[
            CategoryComparison(name=label, current=current[key], reduced=reduced[key])
            for key, _, label in REDUCTION_CATEGORIES
        ],
        total_current=total_current,
        total_reduced=total_reduced,
        total_reduction=total_reduction,
        reduction_percentage=percentage,
        trees_saved=trees_needed(total_reduction),
    )
