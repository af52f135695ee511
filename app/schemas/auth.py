"""
app/schemas/auth.py

Purpose: Signup, OTP and login payloads

Required-field checks live in the OTP service so blank and missing values
fail the same way; fields are optional here.
"""

from pydantic import BaseModel, Field
from typing import Optional


class SignupRequest(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = Field(None, description="Mobile number, used as login key")
    email: Optional[str] = None
    password: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    company: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "full_name": "Ravi Kumar",
                "phone": "+919876543210",
                "email": "ravi@example.com",
                "password": "s3cret-pass",
                "address": "12 MG Road",
                "city": "Bengaluru",
                "state": "Karnataka",
                "zip": "560001",
                "company": "Kumar Logistics"
            }
        }


class ResendOtpRequest(BaseModel):
    phone: Optional[str] = None


class VerifyOtpRequest(BaseModel):
    phone: Optional[str] = None
    otp: Optional[str] = Field(None, description="One-time code received by SMS")


class LoginRequest(BaseModel):
    phone: Optional[str] = None
    password: Optional[str] = None


class OtpDispatch(BaseModel):
    """Signup/resend result. ``otp`` is only filled in development mode."""
    phone: str
    expires_in_minutes: int
    otp: Optional[str] = None


class UserProfile(BaseModel):
    id: str
    full_name: Optional[str] = None
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    company: Optional[str] = None
    created_at: Optional[str] = None


class SessionData(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserProfile
