"""
app/api/deps.py

Purpose: FastAPI dependencies

- Collaborators (store, clock, notifier) read from app.state
- Service factories
- Bearer-token authentication yielding the caller's user id
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import UnauthenticatedError
from app.db.store import LedgerStore
from app.services.aggregation_service import DashboardService
from app.services.alert_service import AlertService
from app.services.ledger_service import LedgerService
from app.services.notification_service import Notifier
from app.services.otp_service import OTPService
from utils.time_utils import Clock

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> LedgerStore:
    return request.app.state.store


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_otp_service(
    store: LedgerStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    notifier: Notifier = Depends(get_notifier),
) -> OTPService:
    return OTPService(store, clock, notifier)


def get_ledger_service(
    store: LedgerStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> LedgerService:
    return LedgerService(store, clock)


def get_dashboard_service(
    store: LedgerStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> DashboardService:
    return DashboardService(store, clock)


def get_alert_service(
    store: LedgerStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> AlertService:
    return AlertService(store, clock)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    otp_service: OTPService = Depends(get_otp_service),
) -> str:
    """
    Resolves the Authorization: Bearer token to a user id.

    Raises:
        UnauthenticatedError: no token, bad signature or expired
    """
    if credentials is None:
        raise UnauthenticatedError("No token provided")
    return otp_service.authenticate(credentials.credentials)
