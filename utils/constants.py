"""
utils/constants.py

Purpose: Centralized static content

- User-facing messages
- Compliance field labels
- Reusable enums and constants

(Prevents hardcoding across the codebase)
"""

# ============================================================
# SIGNUP / LOGIN
# ============================================================

SIGNUP_REQUIRED_FIELDS = (
    "full_name",
    "phone",
    "email",
    "password",
    "address",
    "city",
    "state",
    "zip",
)

OTP_SMS_TEMPLATE = "Your FleetLedger verification code is {otp}. It expires in {minutes} minutes."

MSG_OTP_SENT = "OTP sent to your phone"
MSG_OTP_RESENT = "OTP resent successfully"
MSG_ACCOUNT_CREATED = "Account created successfully"
MSG_LOGIN_SUCCESS = "Login successful"

# Identical for unknown phone and wrong password
MSG_INVALID_CREDENTIALS = "Invalid credentials"

MSG_USER_EXISTS = "User already exists"
MSG_NO_PENDING_SIGNUP = "No pending signup found"
MSG_OTP_EXPIRED = "OTP expired"
MSG_INVALID_OTP = "Invalid OTP"


# ============================================================
# LEDGER
# ============================================================

ALL_VEHICLES = "all"

PAYMENT_STATUSES = ("paid", "unpaid")

# Income list filters
INCOME_FILTER_ALL = "all"
INCOME_FILTER_PAID = "paid"
INCOME_FILTER_UNPAID = "unpaid"
INCOME_FILTER_LAST_3_MONTHS = "last-3-months"
INCOME_FILTERS = (
    INCOME_FILTER_ALL,
    INCOME_FILTER_PAID,
    INCOME_FILTER_UNPAID,
    INCOME_FILTER_LAST_3_MONTHS,
)

MSG_VEHICLE_ADDED = "Vehicle added successfully"
MSG_VEHICLE_UPDATED = "Vehicle updated successfully"
MSG_VEHICLE_DELETED = "Vehicle deleted successfully"
MSG_INCOME_ADDED = "Income added successfully"
MSG_EXPENSE_ADDED = "Expense added successfully"
MSG_DOCUMENT_REQUIRED = "At least one document is required"
MSG_DUPLICATE_RECORD = "A record with the same key already exists"
MSG_NOTIFICATION_SENT = "Notification sent successfully"


# ============================================================
# DASHBOARD
# ============================================================

SERIES_MONTHS = 6
MONTH_LABEL_FORMAT = "%b %Y"

# Vehicle field -> alert label, in display order
COMPLIANCE_FIELDS = (
    ("due_date", "Due Date"),
    ("pollution_date", "Pollution"),
    ("tax_date", "Tax"),
    ("insurance_date", "Insurance"),
    ("fc_date", "FC"),
    ("permit_date", "Permit"),
)
