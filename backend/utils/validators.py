import re
from datetime import date
from decimal import Decimal

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$",
    re.IGNORECASE,
)
HEX_COLOR_REGEX = re.compile(r"^#[0-9A-Fa-f]{6}$")

MAX_AMOUNT = Decimal("999999999.99")
MIN_BUDGET_YEAR = 2000
MIN_REPORT_YEAR = 1900
# Ids, page numbers and category references share the 32-bit key range
MAX_ID = 2**31 - 1


def is_valid_email(email: str) -> bool:
    if not email or not email.strip():
        return False

    if len(email) > 255:
        return False

    at_index = email.rfind("@")
    if at_index <= 0 or at_index == len(email) - 1:
        return False

    if ".." in email:
        return False

    local_part = email[:at_index]
    if local_part.startswith(".") or local_part.endswith("."):
        return False

    domain = email[at_index + 1:]
    if "." not in domain:
        return False
    if domain.startswith((".", "-")) or domain.endswith((".", "-")):
        return False

    # TLD needs at least two characters
    if len(domain) - domain.rfind(".") - 1 < 2:
        return False

    return EMAIL_REGEX.match(email) is not None


def is_valid_hex_color(color: str) -> bool:
    return bool(color) and HEX_COLOR_REGEX.match(color) is not None


def max_year(today: date = None) -> int:
    return (today or date.today()).year + 10


def decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    return -exponent if exponent < 0 else 0


def check_amount(value: Decimal, label: str = "Amount") -> Decimal:
    """Shared amount rule for transactions and budgets."""
    if value <= 0:
        raise ValueError(f"{label} must be greater than zero.")
    if value > MAX_AMOUNT:
        raise ValueError(f"{label} is too large.")
    if decimal_places(value) > 2:
        raise ValueError(f"{label} can have at most 2 decimal places.")
    return value
