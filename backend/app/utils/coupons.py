# utils/coupons.py
BASE_PERCENT = 5
UPGRADED_PERCENT = 10
BASE_CODE = "ISHQME5"
UPGRADED_CODE = "ISHQME10"


def select_coupon(
    percent,
    base_percent: int = BASE_PERCENT,
    base_code: str = BASE_CODE,
    upgraded_code: str = UPGRADED_CODE,
) -> str:
    """Base percent gets the base code, every other value the upgraded one."""
    return base_code if percent == base_percent else upgraded_code


def discount_percent_for(
    phone_was_added: bool,
    base_percent: int = BASE_PERCENT,
    upgraded_percent: int = UPGRADED_PERCENT,
) -> int:
    # New contact info earns the upgraded rate
    return upgraded_percent if phone_was_added else base_percent
