"""
app/services/notification_service.py

Purpose: Outbound SMS

- Notifier interface used for OTP delivery and payment reminders
- Console notifier for development (logs instead of sending)
- Twilio SMS notifier for production (REST API via httpx)
"""

import httpx
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger, mask_phone

logger = get_logger(__name__)


class Notifier(ABC):
    """Delivers a text message to a phone number."""

    @abstractmethod
    async def send_sms(self, to_phone: str, message: str) -> Dict[str, Any]:
        """
        Sends an SMS.

        Returns:
            Provider metadata (e.g. message SID)

        Raises:
            ExternalServiceError: delivery failed or timed out
        """


class ConsoleNotifier(Notifier):
    """Writes messages to the log. Development default."""

    async def send_sms(self, to_phone: str, message: str) -> Dict[str, Any]:
        logger.info(f"SMS to {mask_phone(to_phone)}: {message}")
        return {"provider": "console", "to": to_phone}


class TwilioSMSNotifier(Notifier):
    """Service for sending SMS via the Twilio Messages API"""

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
        self.from_number = from_number or settings.TWILIO_FROM_NUMBER
        self.timeout = timeout or settings.SMS_TIMEOUT_SECONDS
        self.base_url = f"https://api.twilio.com/2010-04-01/Accounts/{self.account_sid}"
        self._transport = transport

    async def send_sms(self, to_phone: str, message: str) -> Dict[str, Any]:
        """
        Sends an SMS via Twilio

        Args:
            to_phone: Recipient phone (+919876543210)
            message: Message text

        Returns:
            {"provider": "twilio", "message_sid": "SMxxx...", "status": "queued"}
        """
        data = {
            "From": self.from_number,
            "To": to_phone,
            "Body": message
        }

        logger.info(f"Sending Twilio SMS to {mask_phone(to_phone)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/Messages.json",
                    data=data,
                    auth=(self.account_sid, self.auth_token)
                )
        except httpx.TimeoutException:
            logger.error("Twilio API timeout")
            raise ExternalServiceError("SMS provider timed out")
        except httpx.HTTPError as e:
            logger.error(f"Twilio request failed: {e}")
            raise ExternalServiceError("SMS provider unreachable")

        if response.status_code not in (200, 201):
            logger.error(f"Twilio API error: {response.status_code} - {response.text}")
            raise ExternalServiceError(
                "SMS delivery failed",
                details={"provider_status": response.status_code}
            )

        result = response.json()
        logger.info(f"SMS queued: SID={result.get('sid')}")
        return {
            "provider": "twilio",
            "message_sid": result.get("sid"),
            "status": result.get("status")
        }

    def is_configured(self) -> bool:
        """Check if Twilio is properly configured"""
        return bool(self.account_sid and self.auth_token and self.from_number)


def build_notifier() -> Notifier:
    """Notifier selected by SMS_PROVIDER."""
    if settings.SMS_PROVIDER == "twilio":
        return TwilioSMSNotifier()
    return ConsoleNotifier()
