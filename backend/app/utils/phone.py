# utils/phone.py
import re
from typing import Optional

_SEPARATORS = re.compile(r"[\s\-()]")
_LOCAL_NUMBER = re.compile(r"^[0-9]{10}$")
_PREFIXED_NUMBER = re.compile(r"^[0-9]{11,13}$")


def normalize_phone(raw, default_country_code: str = "91") -> Optional[str]:
    """
    Rewrite user-entered phone text into one canonical form.

    '98765 43210'   -> '+919876543210'
    '919876543210'  -> '+919876543210'
    '+1 555-0100'   -> '+15550100'
    ''              -> None

    Anything else is returned cleaned but otherwise untouched. Never raises.
    """
    if raw is None:
        return None

    cleaned = _SEPARATORS.sub("", str(raw).strip()).lstrip("0")
    if not cleaned:
        return None

    if cleaned.startswith("+"):
        return cleaned

    if _LOCAL_NUMBER.match(cleaned):
        return f"+{default_country_code.lstrip('+')}{cleaned}"

    if _PREFIXED_NUMBER.match(cleaned):
        return f"+{cleaned}"

    return cleaned
