"""
Gateway configuration check.

Validates a credential bundle and echoes it back with the password hidden,
together with an example endpoint URL. The gateway itself is never called.
"""

from __future__ import annotations

from typing import Any, Dict
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mpgs_bridge.error_handler import ConfigValidationError
from mpgs_bridge.integrations.contracts.interfaces import GatewayCredentials
from mpgs_bridge.integrations.policy.three_ds_service import build_transaction_url

PASSWORD_PLACEHOLDER = "✓ Provided (hidden)"
TEST_ORDER_ID = "TEST_ORDER"
TEST_TRANSACTION_ID = "TEST_TXN"


class GatewayConfigBundle(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    merchantId: str = Field(..., min_length=1, max_length=40)
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)
    apiBaseUrl: str
    apiVersion: str = Field(default="73", min_length=1)

    @field_validator("apiBaseUrl")
    @classmethod
    def _absolute_uri(cls, value: str) -> str:
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("must be a valid absolute URI")
        return value

    def credentials(self) -> GatewayCredentials:
        return GatewayCredentials(
            merchant_id=self.merchantId,
            username=self.username,
            password=self.password,
            api_base_url=self.apiBaseUrl,
            api_version=self.apiVersion,
        )


def validate_gateway_config(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate ``payload`` and return the masked confirmation.

    Raises:
        ConfigValidationError: carrying the first violated rule
    """
    try:
        bundle = GatewayConfigBundle.model_validate(payload)
    except ValidationError as exc:
        raise ConfigValidationError(_first_error(exc)) from exc

    return {
        "success": True,
        "message": "Configuration validated successfully",
        "config": {
            "merchantId": bundle.merchantId,
            "username": bundle.username,
            "password": PASSWORD_PLACEHOLDER,
            "apiBaseUrl": bundle.apiBaseUrl,
            "apiVersion": bundle.apiVersion,
        },
        "testUrl": build_transaction_url(bundle.credentials(), TEST_ORDER_ID, TEST_TRANSACTION_ID),
    }


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or "body"
    message = error["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{field}: {message}"
