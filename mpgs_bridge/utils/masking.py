"""
Masking of card and credential fields before anything is logged.
"""
from typing import Any, Optional

_PASSWORD_MASK = "****"
_CVV_MASK = "***"

# MPGS names the same card fields sourceOfFunds.provided.card.{number,securityCode}
_CVV_KEYS = {"cvv", "securityCode"}


def mask_card_number(card_number: str) -> str:
    """Keep the BIN and last four digits, e.g. 411111******1111."""
    return card_number[:6] + "******" + card_number[-4:]


def mask_sensitive_data(data: Any, _parent: Optional[str] = None) -> Any:
    """
    Return a copy of ``data`` with password, cvv and cardNumber masked.

    Nested dicts and lists are walked so card details inside a forwarded
    request body are masked as well. The input is never mutated.
    """
    if isinstance(data, list):
        return [mask_sensitive_data(item, _parent) for item in data]
    if not isinstance(data, dict):
        return data

    masked = {}
    for key, value in data.items():
        if key == "password" and value:
            masked[key] = _PASSWORD_MASK
        elif key in _CVV_KEYS and value:
            masked[key] = _CVV_MASK
        elif (key == "cardNumber" or (key == "number" and _parent == "card")) and value:
            masked[key] = mask_card_number(str(value))
        else:
            masked[key] = mask_sensitive_data(value, key)
    return masked
