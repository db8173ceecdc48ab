"""
Actual-spend aggregates for a trip.

The ledger only ever looks at recorded expenses; planned costs from the
itinerary are reported separately by cost_reconciliation.
"""

from collections.abc import Iterable

from app.core.schemas import BudgetSummary, CategoryBreakdown, Expense, ExpenseCategory

CATEGORY_ORDER = [
    ExpenseCategory.FOOD,
    ExpenseCategory.TRAVEL,
    ExpenseCategory.STAY,
    ExpenseCategory.ACTIVITIES,
]


def total_spent(expenses: Iterable[Expense]) -> float:
    return round(sum(expense.amount for expense in expenses), 2)


def category_breakdown(expenses: list[Expense]) -> list[CategoryBreakdown]:
    """
    Sum expenses per category.

    Categories with no spend are omitted, and an empty list is returned when
    nothing has been spent so percentages never divide by zero.
    """
    spent = total_spent(expenses)
    if spent <= 0:
        return []

    breakdown = []
    for category in CATEGORY_ORDER:
        amount = round(sum(e.amount for e in expenses if e.category == category), 2)
        if amount <= 0:
            continue
        breakdown.append(
            CategoryBreakdown(
                category=category,
                amount=amount,
                percentage=round(amount / spent * 100, 2),
            )
        )
    return breakdown


def summarize(expenses: list[Expense], budget: float | None) -> BudgetSummary:
    spent = total_spent(expenses)
    remaining = None
    if budget is not None:
        remaining = round(budget - spent, 2)
    return BudgetSummary(
        budget=budget,
        total_spent=spent,
        remaining=remaining,
        over_budget=remaining is not None and remaining < 0,
        categories=category_breakdown(expenses),
    )
