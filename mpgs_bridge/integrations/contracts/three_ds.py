"""
3DS flow contracts.

Defines the inbound payload accepted by the four flow operations. The
``requestBody`` is kept as an opaque JSON value: this service never shapes
or reads the 3DS payload, it only forwards it.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .interfaces import GatewayCredentials


class FlowRequest(BaseModel):
    """Caller-held gateway session plus the call to make against it."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    merchantId: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    apiBaseUrl: Optional[str] = None
    apiVersion: Optional[str] = None
    orderId: Optional[str] = None
    transactionId: Optional[str] = None
    method: Optional[str] = None
    url: Optional[str] = None
    requestBody: Any = None

    def has_credentials(self) -> bool:
        return bool(self.merchantId and self.username and self.password)

    def has_body(self) -> bool:
        value = self.requestBody
        # objects and arrays count even when empty; scalars count only when truthy
        if isinstance(value, (dict, list)):
            return True
        return bool(value)

    def credentials(self, default_api_version: Optional[str] = None) -> GatewayCredentials:
        return GatewayCredentials(
            merchant_id=self.merchantId or "",
            username=self.username or "",
            password=self.password or "",
            api_base_url=self.apiBaseUrl,
            api_version=self.apiVersion or default_api_version,
        )
