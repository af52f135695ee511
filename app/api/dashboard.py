"""
app/api/dashboard.py

Purpose: Dashboard reads, compliance alerts and notifications

- GET  /dashboard/stats    -> totals, net profit, counts
- GET  /dashboard/monthly  -> 6-month income/expense series
- GET  /alerts             -> compliance dates due within the horizon
- POST /notify             -> SMS through the configured notifier
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import (
    get_alert_service,
    get_current_user_id,
    get_dashboard_service,
    get_notifier,
)
from app.core.exceptions import ValidationError
from app.core.logging import get_logger, mask_phone
from app.schemas.dashboard import AlertOut, MonthBucket, NotifyRequest, StatsOut
from app.schemas.response import ApiResponse
from app.services.aggregation_service import DashboardService
from app.services.alert_service import AlertService
from app.services.notification_service import Notifier
from utils.constants import ALL_VEHICLES, MSG_NOTIFICATION_SENT
from utils.validation_utils import find_blank_fields, normalize_phone, validate_phone_number

logger = get_logger(__name__)
router = APIRouter()


@router.get("/dashboard/stats", response_model=ApiResponse[StatsOut])
async def dashboard_stats(
    vehicle_no: Optional[str] = Query(ALL_VEHICLES, description="Registration number or 'all'"),
    user_id: str = Depends(get_current_user_id),
    service: DashboardService = Depends(get_dashboard_service),
):
    return ApiResponse(data=await service.get_stats(user_id, vehicle_no))


@router.get("/dashboard/monthly", response_model=ApiResponse[List[MonthBucket]])
async def dashboard_monthly(
    vehicle_no: Optional[str] = Query(ALL_VEHICLES, description="Registration number or 'all'"),
    user_id: str = Depends(get_current_user_id),
    service: DashboardService = Depends(get_dashboard_service),
):
    return ApiResponse(data=await service.get_monthly_series(user_id, vehicle_no))


@router.get("/alerts", response_model=ApiResponse[List[AlertOut]])
async def due_alerts(
    horizon_days: Optional[int] = Query(None, ge=0, le=365, description="Forward window in days"),
    include_overdue: bool = Query(False, description="Also list past-due dates"),
    user_id: str = Depends(get_current_user_id),
    service: AlertService = Depends(get_alert_service),
):
    return ApiResponse(data=await service.get_alerts(user_id, horizon_days, include_overdue))


@router.post("/notify", response_model=ApiResponse[None])
async def notify(
    payload: NotifyRequest,
    user_id: str = Depends(get_current_user_id),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Sends a message (e.g. a payment reminder) to a mobile number.
    Delivery failures surface as EXTERNAL_SERVICE_ERROR; retrying is up to the caller.
    """
    blank = find_blank_fields(payload.model_dump(), ("mobile", "message"))
    if blank:
        raise ValidationError("Mobile and message are required", details={"missing_fields": blank})

    mobile = normalize_phone(payload.mobile)
    if not validate_phone_number(mobile):
        raise ValidationError("Invalid mobile number", details={"field": "mobile"})

    await notifier.send_sms(mobile, payload.message.strip())
    logger.info(f"Notification sent to {mask_phone(mobile)}", extra={"user_id": user_id})
    return ApiResponse(message=MSG_NOTIFICATION_SENT)
