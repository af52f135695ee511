"""
app/api/ledger.py

Purpose: Income and expense endpoints (owner-scoped)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_user_id, get_ledger_service
from app.schemas.ledger import ExpenseCreate, ExpenseOut, IncomeCreate, IncomeOut
from app.schemas.response import ApiResponse
from app.services.ledger_service import LedgerService
from utils.constants import INCOME_FILTER_ALL, MSG_EXPENSE_ADDED, MSG_INCOME_ADDED

router = APIRouter()


@router.get("/incomes", response_model=ApiResponse[List[IncomeOut]])
async def list_incomes(
    status: str = Query(INCOME_FILTER_ALL, description="all | paid | unpaid | last-3-months"),
    vehicle: Optional[str] = Query(None, description="Registration number or 'all'"),
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return ApiResponse(data=await service.list_incomes(user_id, status, vehicle))


@router.post("/incomes", response_model=ApiResponse[IncomeOut])
async def add_income(
    payload: IncomeCreate,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    income = await service.add_income(user_id, payload)
    return ApiResponse(message=MSG_INCOME_ADDED, data=income)


@router.get("/expenses", response_model=ApiResponse[List[ExpenseOut]])
async def list_expenses(
    vehicle: Optional[str] = Query(None, description="Registration number or 'all'"),
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return ApiResponse(data=await service.list_expenses(user_id, vehicle))


@router.post("/expenses", response_model=ApiResponse[ExpenseOut])
async def add_expense(
    payload: ExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
):
    expense = await service.add_expense(user_id, payload)
    return ApiResponse(message=MSG_EXPENSE_ADDED, data=expense)
