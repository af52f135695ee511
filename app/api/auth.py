"""
app/api/auth.py

Purpose: Signup, OTP verification and login endpoints

- POST /auth/signup      -> pending signup, OTP dispatched by SMS
- POST /auth/resend-otp  -> fresh OTP for the pending signup
- POST /auth/verify-otp  -> account + session token
- POST /auth/login       -> session token
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_otp_service
from app.core.config import settings
from app.core.logging import get_logger
from app.schemas.auth import (
    LoginRequest,
    OtpDispatch,
    ResendOtpRequest,
    SessionData,
    SignupRequest,
    VerifyOtpRequest,
)
from app.schemas.response import ApiResponse
from app.services.otp_service import OTPService
from utils.constants import MSG_ACCOUNT_CREATED, MSG_LOGIN_SUCCESS, MSG_OTP_RESENT, MSG_OTP_SENT
from utils.validation_utils import normalize_phone

logger = get_logger(__name__)
router = APIRouter(prefix="/auth")


def _dispatch_result(phone: str, otp: str) -> OtpDispatch:
    return OtpDispatch(
        phone=normalize_phone(phone),
        expires_in_minutes=settings.OTP_EXPIRY_MINUTES,
        otp=otp if settings.EXPOSE_OTP_IN_RESPONSE else None,
    )


@router.post("/signup", response_model=ApiResponse[OtpDispatch])
async def signup(payload: SignupRequest, service: OTPService = Depends(get_otp_service)):
    """
    Starts a signup. The OTP goes out by SMS; it is echoed in the response
    only when EXPOSE_OTP_IN_RESPONSE is enabled.
    """
    otp = await service.request_signup(payload.model_dump())
    return ApiResponse(message=MSG_OTP_SENT, data=_dispatch_result(payload.phone, otp))


@router.post("/resend-otp", response_model=ApiResponse[OtpDispatch])
async def resend_otp(payload: ResendOtpRequest, service: OTPService = Depends(get_otp_service)):
    otp = await service.resend_signup(payload.phone)
    return ApiResponse(message=MSG_OTP_RESENT, data=_dispatch_result(payload.phone, otp))


@router.post("/verify-otp", response_model=ApiResponse[SessionData])
async def verify_otp(payload: VerifyOtpRequest, service: OTPService = Depends(get_otp_service)):
    result = await service.verify_signup(payload.phone, payload.otp)
    return ApiResponse(message=MSG_ACCOUNT_CREATED, data=SessionData(**result))


@router.post("/login", response_model=ApiResponse[SessionData])
async def login(payload: LoginRequest, service: OTPService = Depends(get_otp_service)):
    result = await service.login(payload.phone, payload.password)
    return ApiResponse(message=MSG_LOGIN_SUCCESS, data=SessionData(**result))
