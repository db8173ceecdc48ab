"""
Compare the model's declared cost totals with the sums of their parts.

Both figures are reported side by side; neither is corrected.
"""

from app.core.schemas import CostReconciliation, DayCostCheck, Itinerary

TOLERANCE = 0.01


def _differs(a: float, b: float) -> bool:
    return abs(a - b) > TOLERANCE


def reconcile_costs(itinerary: Itinerary) -> CostReconciliation:
    checks = []
    for day in itinerary.days:
        breakdown = day.daily_cost_breakdown
        if breakdown is None:
            checks.append(DayCostCheck(day_number=day.day_number, missing_breakdown=True))
            continue
        computed = round(breakdown.category_sum(), 2)
        checks.append(
            DayCostCheck(
                day_number=day.day_number,
                declared_total=breakdown.total,
                computed_total=computed,
                mismatch=_differs(breakdown.total, computed),
            )
        )

    computed_trip_total = round(
        sum(check.declared_total for check in checks if check.declared_total is not None), 2
    )
    trip_total_mismatch = _differs(itinerary.total_estimated_cost, computed_trip_total)

    return CostReconciliation(
        days=checks,
        declared_trip_total=itinerary.total_estimated_cost,
        computed_trip_total=computed_trip_total,
        trip_total_mismatch=trip_total_mismatch,
        has_mismatch=trip_total_mismatch or any(check.mismatch for check in checks),
    )
