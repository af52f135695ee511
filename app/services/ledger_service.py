"""
app/services/ledger_service.py

Purpose: Vehicle, income and expense records

- Boundary validation for ledger writes
- Ownership checks (NotFound vs. another user's record)
- Listing with the payment-status / period filters

Income and expense records point at vehicles by registration number, not
by id. Deleting a vehicle leaves its historical records untouched.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from app.core.logging import get_logger, LogContext
from app.db.store import LedgerStore, VEHICLES, INCOMES, EXPENSES
from app.schemas.ledger import ExpenseCreate, IncomeCreate
from app.schemas.vehicle import VehicleCreate, VehicleUpdate
from utils.constants import (
    INCOME_FILTER_ALL,
    INCOME_FILTER_LAST_3_MONTHS,
    INCOME_FILTERS,
    MSG_DOCUMENT_REQUIRED,
    PAYMENT_STATUSES,
)
from utils.time_utils import Clock, months_ago, parse_timestamp
from utils.validation_utils import normalize_vehicle_filter, normalize_vehicle_no, sanitize_input

logger = get_logger(__name__)


def _clean_documents(documents: Optional[List[str]]) -> List[str]:
    return [ref.strip() for ref in documents or [] if ref and ref.strip()]


class LedgerService:
    """Writes and reads of the per-user ledger."""

    def __init__(self, store: LedgerStore, clock: Clock):
        self.store = store
        self.clock = clock

    def _sort_newest_first(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        oldest = datetime.min.replace(tzinfo=self.clock.tz)
        return sorted(
            records,
            key=lambda record: parse_timestamp(record.get("date"), self.clock.tz) or oldest,
            reverse=True
        )

    async def _owned(self, collection: str, record_id: str, user_id: str) -> Dict[str, Any]:
        record = await self.store.find_by_id(collection, record_id)
        if not record:
            raise NotFoundError(f"{collection[:-1].capitalize()} not found")
        if record.get("user_id") != user_id:
            logger.warning(
                f"Cross-user access attempt on {collection}",
                extra={"user_id": user_id}
            )
            raise UnauthorizedError()
        return record

    async def _require_vehicle(self, user_id: str, vehicle_no: str) -> None:
        if not vehicle_no:
            raise ValidationError("Vehicle is required", details={"missing_fields": ["vehicle"]})
        matches = await self.store.find_by_owner(VEHICLES, user_id, {"vehicle_no": vehicle_no})
        if not matches:
            raise NotFoundError(f"Vehicle {vehicle_no} not found")

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def add_vehicle(self, user_id: str, payload: VehicleCreate) -> Dict[str, Any]:
        """
        Registers a vehicle for the user.

        Raises:
            ValidationError: blank registration number or already registered
        """
        vehicle_no = normalize_vehicle_no(payload.vehicle_no)
        if not vehicle_no:
            raise ValidationError("Vehicle number is required", details={"missing_fields": ["vehicle_no"]})

        with LogContext(user_id=user_id, vehicle_no=vehicle_no):
            existing = await self.store.find_by_owner(VEHICLES, user_id, {"vehicle_no": vehicle_no})
            if existing:
                raise ValidationError(f"Vehicle {vehicle_no} is already registered")

            now = self.clock.now().isoformat()
            vehicle = {
                **payload.model_dump(mode="json"),
                "id": uuid.uuid4().hex,
                "user_id": user_id,
                "vehicle_no": vehicle_no,
                "documents": _clean_documents(payload.documents),
                "created_at": now,
                "updated_at": now,
            }
            vehicle = await self.store.insert(VEHICLES, vehicle)
            logger.info("Vehicle added")
            return vehicle

    async def list_vehicles(self, user_id: str) -> List[Dict[str, Any]]:
        vehicles = await self.store.find_by_owner(VEHICLES, user_id)
        return sorted(vehicles, key=lambda vehicle: vehicle.get("created_at") or "")

    async def get_vehicle(self, user_id: str, vehicle_id: str) -> Dict[str, Any]:
        return await self._owned(VEHICLES, vehicle_id, user_id)

    async def update_vehicle(self, user_id: str, vehicle_id: str, payload: VehicleUpdate) -> Dict[str, Any]:
        """
        Partially updates a vehicle. Renaming the registration number does
        not rewrite income/expense references.
        """
        current = await self._owned(VEHICLES, vehicle_id, user_id)
        changes = payload.model_dump(mode="json", exclude_unset=True)

        if "vehicle_no" in changes:
            vehicle_no = normalize_vehicle_no(changes["vehicle_no"])
            if not vehicle_no:
                raise ValidationError("Vehicle number is required", details={"missing_fields": ["vehicle_no"]})
            if vehicle_no != current["vehicle_no"]:
                clash = await self.store.find_by_owner(VEHICLES, user_id, {"vehicle_no": vehicle_no})
                if clash:
                    raise ValidationError(f"Vehicle {vehicle_no} is already registered")
            changes["vehicle_no"] = vehicle_no

        if "documents" in changes:
            changes["documents"] = _clean_documents(changes["documents"])

        changes["updated_at"] = self.clock.now().isoformat()
        updated = await self.store.update(VEHICLES, vehicle_id, user_id, changes)
        if updated is None:
            raise NotFoundError("Vehicle not found")

        with LogContext(user_id=user_id, vehicle_no=updated["vehicle_no"]):
            logger.info("Vehicle updated", extra={"fields": sorted(changes)})
        return updated

    async def delete_vehicle(self, user_id: str, vehicle_id: str) -> None:
        await self._owned(VEHICLES, vehicle_id, user_id)
        if not await self.store.delete(VEHICLES, vehicle_id, user_id):
            raise NotFoundError("Vehicle not found")
        logger.info("Vehicle deleted", extra={"user_id": user_id})

    # ------------------------------------------------------------------
    # Income
    # ------------------------------------------------------------------

    async def add_income(self, user_id: str, payload: IncomeCreate) -> Dict[str, Any]:
        vehicle_no = normalize_vehicle_no(payload.vehicle)
        await self._require_vehicle(user_id, vehicle_no)

        now = self.clock.now()
        income = {
            **payload.model_dump(mode="json"),
            "id": uuid.uuid4().hex,
            "user_id": user_id,
            "vehicle": vehicle_no,
            "notes": sanitize_input(payload.notes or ""),
            "documents": _clean_documents(payload.documents),
            "date": payload.date.isoformat() if payload.date else now.isoformat(),
            "created_at": now.isoformat(),
        }
        income = await self.store.insert(INCOMES, income)

        with LogContext(user_id=user_id, vehicle_no=vehicle_no):
            logger.info("Income added", extra={"payment_status": income["payment_status"]})
        return income

    async def list_incomes(
        self,
        user_id: str,
        status: str = INCOME_FILTER_ALL,
        vehicle_filter: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Income records, newest first.

        Args:
            status: "all", "paid", "unpaid" or "last-3-months"
            vehicle_filter: registration number or "all"
        """
        if status not in INCOME_FILTERS:
            raise ValidationError(
                f"Unknown income filter: {status}",
                details={"allowed": list(INCOME_FILTERS)}
            )

        filters = {}
        vehicle_no = normalize_vehicle_filter(vehicle_filter)
        if vehicle_no:
            filters["vehicle"] = vehicle_no
        if status in PAYMENT_STATUSES:
            filters["payment_status"] = status

        incomes = await self.store.find_by_owner(INCOMES, user_id, filters)

        if status == INCOME_FILTER_LAST_3_MONTHS:
            cutoff = months_ago(self.clock.now(), 3)
            recent = []
            for income in incomes:
                dated = parse_timestamp(income.get("date"), self.clock.tz)
                if dated is not None and dated >= cutoff:
                    recent.append(income)
            incomes = recent

        return self._sort_newest_first(incomes)

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def add_expense(self, user_id: str, payload: ExpenseCreate) -> Dict[str, Any]:
        """
        Records an expense. At least one document reference is mandatory;
        the check runs before anything touches the store.
        """
        documents = _clean_documents(payload.documents)
        if not documents:
            raise ValidationError(MSG_DOCUMENT_REQUIRED, details={"missing_fields": ["documents"]})

        vehicle_no = normalize_vehicle_no(payload.vehicle)
        await self._require_vehicle(user_id, vehicle_no)

        now = self.clock.now()
        expense = {
            **payload.model_dump(mode="json"),
            "id": uuid.uuid4().hex,
            "user_id": user_id,
            "vehicle": vehicle_no,
            "documents": documents,
            "date": payload.date.isoformat() if payload.date else now.isoformat(),
            "created_at": now.isoformat(),
        }
        expense = await self.store.insert(EXPENSES, expense)

        with LogContext(user_id=user_id, vehicle_no=vehicle_no):
            logger.info("Expense added", extra={"category": expense.get("category")})
        return expense

    async def list_expenses(self, user_id: str, vehicle_filter: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {}
        vehicle_no = normalize_vehicle_filter(vehicle_filter)
        if vehicle_no:
            filters["vehicle"] = vehicle_no
        expenses = await self.store.find_by_owner(EXPENSES, user_id, filters)
        return self._sort_newest_first(expenses)
