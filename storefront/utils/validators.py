# storefront/utils/validators.py
import re

PHONE_RE = re.compile(r"^[6-9]\d{9}$")
PINCODE_RE = re.compile(r"^\d{6}$")


def validate_phone(value: str) -> str:
    # 10-digit Indian mobile number
    if not PHONE_RE.match(value or ""):
        raise ValueError("Please enter a valid 10-digit Indian mobile number")
    return value


def validate_pincode(value: str) -> str:
    if not PINCODE_RE.match(value or ""):
        raise ValueError("Please enter a valid 6-digit pincode")
    return value


def validate_currency(value: str | None) -> str:
    v = (value or "INR").strip().upper()
    if len(v) != 3 or not v.isalpha():
        raise ValueError("Invalid currency code: expected ISO 4217 three-letter code")
    return v


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower())
    return slug.strip("-")
