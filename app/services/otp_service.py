"""
app/services/otp_service.py

Purpose: OTP-gated signup and session issuance

- Signup request -> pending signup with a short-lived one-time code
- Resend refreshes code and expiry, keeping the candidate profile
- Verify consumes the pending signup, creates the user, issues a session
- Login with phone + password
- Session token verification for authorized operations

Per phone: NONE -> PENDING -> (VERIFIED | EXPIRED). Expiry is an explicit
timestamp checked against the injected clock at verify time.
"""

import hmac
import secrets
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import (
    DuplicateUserError,
    ExpiredError,
    InvalidCodeError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from app.core.logging import get_logger, LogContext, mask_phone
from app.core.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from app.db.store import LedgerStore
from app.services.notification_service import Notifier
from utils.constants import (
    MSG_INVALID_CREDENTIALS,
    MSG_INVALID_OTP,
    MSG_NO_PENDING_SIGNUP,
    MSG_OTP_EXPIRED,
    MSG_USER_EXISTS,
    OTP_SMS_TEMPLATE,
    SIGNUP_REQUIRED_FIELDS,
)
from utils.time_utils import Clock, calculate_otp_expiry, is_otp_expired
from utils.validation_utils import find_blank_fields, normalize_phone, validate_email, validate_phone_number

logger = get_logger(__name__)

PROFILE_FIELDS = SIGNUP_REQUIRED_FIELDS + ("company",)


def generate_otp(length: int = 5) -> str:
    """
    Uniformly random numeric code without a leading zero.
    For length 5 the range is 10000-99999.
    """
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def public_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    """User document without the password hash."""
    return {key: value for key, value in user.items() if key not in ("password", "password_hash", "_id")}


class OTPService:
    """
    Signup -> verify -> session lifecycle.

    Collaborators are injected: the ledger store, a clock and the notifier
    that carries codes out-of-band.
    """

    def __init__(self, store: LedgerStore, clock: Clock, notifier: Notifier):
        self.store = store
        self.clock = clock
        self.notifier = notifier

    async def _dispatch_code(self, phone: str, otp: str) -> None:
        message = OTP_SMS_TEMPLATE.format(otp=otp, minutes=settings.OTP_EXPIRY_MINUTES)
        await self.notifier.send_sms(phone, message)

    async def request_signup(self, profile: Dict[str, Any]) -> str:
        """
        Starts a signup and sends a one-time code to the phone.

        Args:
            profile: Candidate profile (full_name, phone, email, password,
                address, city, state, zip, optional company)

        Returns:
            The generated code (callers decide whether to expose it)

        Raises:
            ValidationError: a required field is blank or malformed
            DuplicateUserError: phone or email already registered
        """
        blank = find_blank_fields(profile, SIGNUP_REQUIRED_FIELDS)
        if blank:
            raise ValidationError(
                "All required fields must be filled",
                details={"missing_fields": blank}
            )

        phone = normalize_phone(profile["phone"])
        email = profile["email"].strip().lower()
        if not validate_phone_number(phone):
            raise ValidationError("Invalid phone number", details={"field": "phone"})
        if not validate_email(email):
            raise ValidationError("Invalid email address", details={"field": "email"})

        with LogContext(phone=mask_phone(phone)):
            if await self.store.find_user_by_phone(phone) or await self.store.find_user_by_email(email):
                logger.info("Signup rejected: user already exists")
                raise DuplicateUserError(MSG_USER_EXISTS)

            user_data = {field: profile.get(field) for field in PROFILE_FIELDS}
            user_data["phone"] = phone
            user_data["email"] = email

            now = self.clock.now()
            otp = generate_otp(settings.OTP_LENGTH)
            await self.store.save_pending_signup({
                "phone": phone,
                "otp": otp,
                "user_data": user_data,
                "expires_at": calculate_otp_expiry(now, settings.OTP_EXPIRY_MINUTES).isoformat(),
                "created_at": now.isoformat(),
            })
            logger.info("Pending signup stored")

            await self._dispatch_code(phone, otp)
            return otp

    async def resend_signup(self, phone: Optional[str]) -> str:
        """
        Issues a fresh code for an existing pending signup.

        Raises:
            ValidationError: phone blank
            NotFoundError: no pending signup for phone
        """
        phone = normalize_phone(phone)
        if not phone:
            raise ValidationError("Phone is required", details={"missing_fields": ["phone"]})

        with LogContext(phone=mask_phone(phone)):
            pending = await self.store.get_pending_signup(phone)
            if not pending:
                raise NotFoundError(MSG_NO_PENDING_SIGNUP)

            otp = generate_otp(settings.OTP_LENGTH)
            pending["otp"] = otp
            pending["expires_at"] = calculate_otp_expiry(
                self.clock.now(), settings.OTP_EXPIRY_MINUTES
            ).isoformat()
            await self.store.save_pending_signup(pending)
            logger.info("OTP regenerated for pending signup")

            await self._dispatch_code(phone, otp)
            return otp

    async def verify_signup(self, phone: Optional[str], code: Optional[str]) -> Dict[str, Any]:
        """
        Consumes a pending signup and creates the account.

        Returns:
            {"token": <session token>, "user": <profile without password>}

        Raises:
            ValidationError: phone or code blank
            NotFoundError: nothing pending for phone
            ExpiredError: code past its window (pending signup removed)
            InvalidCodeError: code does not match
        """
        phone = normalize_phone(phone)
        code = (code or "").strip()
        blank = [name for name, value in (("phone", phone), ("otp", code)) if not value]
        if blank:
            raise ValidationError("Phone and OTP are required", details={"missing_fields": blank})

        with LogContext(phone=mask_phone(phone)):
            pending = await self.store.get_pending_signup(phone)
            if not pending:
                raise NotFoundError(MSG_NO_PENDING_SIGNUP)

            now = self.clock.now()
            if is_otp_expired(datetime.fromisoformat(pending["expires_at"]), now):
                await self.store.delete_pending_signup(phone)
                logger.info("OTP expired, pending signup discarded")
                raise ExpiredError(MSG_OTP_EXPIRED)

            if not hmac.compare_digest(str(pending["otp"]), code):
                logger.info("OTP mismatch")
                raise InvalidCodeError(MSG_INVALID_OTP)

            user_data = dict(pending["user_data"])
            password = user_data.pop("password")
            user = {
                "id": uuid.uuid4().hex,
                **user_data,
                "password_hash": hash_password(password),
                "created_at": now.isoformat(),
            }
            user = await self.store.insert_user(user)
            await self.store.delete_pending_signup(phone)

            with LogContext(user_id=user["id"]):
                logger.info("Account created")

            token = create_session_token(user["id"], user["phone"], issued_at=now)
            return {"token": token, "user": public_profile(user)}

    async def login(self, phone: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Password login.

        Raises:
            ValidationError: phone or password blank
            InvalidCredentialsError: unknown phone or wrong password (same message)
        """
        phone = normalize_phone(phone)
        blank = [name for name, value in (("phone", phone), ("password", password)) if not value]
        if blank:
            raise ValidationError("Phone and password are required", details={"missing_fields": blank})

        user = await self.store.find_user_by_phone(phone)
        if not user or not verify_password(password, user.get("password_hash", "")):
            logger.info("Login failed", extra={"phone": mask_phone(phone)})
            raise InvalidCredentialsError(MSG_INVALID_CREDENTIALS)

        token = create_session_token(user["id"], user["phone"], issued_at=self.clock.now())
        logger.info("Login succeeded", extra={"user_id": user["id"]})
        return {"token": token, "user": public_profile(user)}

    def authenticate(self, token: Optional[str]) -> str:
        """
        Resolves a session token to the bound user id.

        Raises:
            UnauthenticatedError: missing, invalid or expired token
        """
        claims = decode_session_token(token, now=self.clock.now())
        return claims["sub"]
