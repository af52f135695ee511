"""
SMS provider check

Verifies the Twilio settings and optionally sends a test SMS through the
same notifier the API uses for OTP delivery.

Usage: python scripts/check_sms.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.services.notification_service import TwilioSMSNotifier
from utils.validation_utils import normalize_phone, validate_phone_number


def check_config(notifier: TwilioSMSNotifier) -> bool:
    print("=" * 60)
    print("  Twilio SMS Configuration")
    print("=" * 60 + "\n")

    print(f"Account SID: {settings.TWILIO_ACCOUNT_SID[:10]}..." if settings.TWILIO_ACCOUNT_SID else "Account SID: not set")
    print(f"Auth Token: {'set' if settings.TWILIO_AUTH_TOKEN else 'not set'}")
    print(f"From Number: {settings.TWILIO_FROM_NUMBER}")
    print(f"SMS_PROVIDER: {settings.SMS_PROVIDER}")
    print(f"\nConfiguration valid: {'yes' if notifier.is_configured() else 'no'}\n")

    return notifier.is_configured()


async def send_test_message(notifier: TwilioSMSNotifier):
    phone = normalize_phone(input("Enter a mobile number (with country code, e.g. +919876543210): "))
    if not validate_phone_number(phone):
        print("Invalid phone number")
        return

    try:
        result = await notifier.send_sms(phone, "FleetLedger test message. SMS delivery is working.")
    except ExternalServiceError as e:
        print(f"Send failed: {e.message} {e.details or ''}")
        return

    print(f"Queued: SID={result['message_sid']} status={result['status']}")


async def main():
    notifier = TwilioSMSNotifier()
    if not check_config(notifier):
        print("Set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_FROM_NUMBER in .env")
        return

    if input("Send a test SMS? [y/N]: ").strip().lower() == "y":
        await send_test_message(notifier)


if __name__ == "__main__":
    asyncio.run(main())
