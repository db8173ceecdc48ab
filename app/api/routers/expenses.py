import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_owned_trip, get_repo
from app.core.expense_ledger import summarize
from app.core.repository import MongoDBRepo
from app.core.schemas import BudgetSummary, Expense, ExpenseCreate, ExpenseListResponse, Trip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips/{trip_id}", tags=["expenses"])


@router.get("/expenses", response_model=ExpenseListResponse)
def list_expenses(
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> ExpenseListResponse:
    """Expenses newest first, with the budget summary computed from the same list."""
    expenses = repo.list_expenses(trip.id)
    return ExpenseListResponse(expenses=expenses, summary=summarize(expenses, trip.budget))


@router.post("/expenses", response_model=Expense, status_code=status.HTTP_201_CREATED)
def add_expense(
    payload: ExpenseCreate,
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> Expense:
    expense = repo.add_expense(trip.id, trip.user_id, payload)
    logger.info(f"[Expenses] Added {expense.category.value} expense {expense.id} to trip {trip.id}")
    return expense


@router.delete("/expenses/{expense_id}")
def delete_expense(
    expense_id: str,
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, str]:
    if not repo.delete_expense(trip.id, expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    logger.info(f"[Expenses] Deleted expense {expense_id} from trip {trip.id}")
    return {"message": "Expense deleted"}


@router.get("/budget", response_model=BudgetSummary)
def get_budget_summary(
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> BudgetSummary:
    return summarize(repo.list_expenses(trip.id), trip.budget)
