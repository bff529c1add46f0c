"""
3DS flow service.

Runs the four gateway operations of the 3-D Secure handshake on behalf of
the front end:

    1. initiate_authentication   PUT  .../order/{orderId}/transaction/{transactionId}
    2. authenticate_payer        PUT  .../order/{orderId}/transaction/{transactionId}
       (challenge redirect happens in the browser, outside this service)
    3. retrieve_order            GET  .../order/{orderId}            (optional)
    3. authorize_pay             PUT  .../order/{orderId}/transaction/{transactionId}

The caller owns the orderId/transactionId pair and must reuse it across the
calls. Nothing is stored between calls and nothing is retried.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from mpgs_bridge.error_handler import (
    GatewayNetworkError,
    GatewayRequestError,
    MissingBodyError,
    MissingCredentialsError,
    UpstreamGatewayError,
)
from mpgs_bridge.integrations.contracts.interfaces import (
    DEFAULT_TIMEOUT_MS,
    ForwardNetworkError,
    ForwardRequest,
    ForwardRequestError,
    ForwardResult,
    ForwardSuccess,
    ForwardUpstreamError,
    GatewayCredentials,
    GatewayForwarder,
)
from mpgs_bridge.integrations.contracts.three_ds import FlowRequest
from mpgs_bridge.integrations.policy.response_wrappers import (
    normalize_authenticate_payer_response,
    normalize_initiate_response,
    normalize_order_response,
    normalize_payment_response,
)
from mpgs_bridge.utils.masking import mask_sensitive_data

logger = logging.getLogger(__name__)

STEP_INITIATE_AUTHENTICATION = 1
STEP_AUTHENTICATE_PAYER = 2
# Retrieve-order and authorize-pay both report step 3 to callers.
STEP_RETRIEVE_ORDER = 3
STEP_AUTHORIZE_PAY = 3

DEFAULT_API_VERSION = "73"


def build_order_url(credentials: GatewayCredentials, order_id: Optional[str]) -> str:
    return (
        f"{credentials.api_base_url or ''}/api/rest/version/{credentials.api_version or ''}"
        f"/merchant/{credentials.merchant_id or ''}/order/{order_id or ''}"
    )


def build_transaction_url(credentials: GatewayCredentials, order_id: Optional[str], transaction_id: Optional[str]) -> str:
    order_url = build_order_url(credentials, order_id)
    return f"{order_url}/transaction/{transaction_id or ''}"


class ThreeDSFlowService:
    def __init__(
        self,
        forwarder: GatewayForwarder,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        default_api_version: str = DEFAULT_API_VERSION,
    ) -> None:
        self.forwarder = forwarder
        self.timeout_ms = timeout_ms
        self.default_api_version = default_api_version

    async def initiate_authentication(self, request: FlowRequest) -> Dict[str, Any]:
        """Step 1: ask the gateway whether 3DS is available for the card."""
        data = await self._forward_transaction_call(request, STEP_INITIATE_AUTHENTICATION)
        return normalize_initiate_response(data, step=STEP_INITIATE_AUTHENTICATION)

    async def authenticate_payer(self, request: FlowRequest) -> Dict[str, Any]:
        """Step 2: frictionless or challenge authentication; surfaces the challenge HTML."""
        data = await self._forward_transaction_call(request, STEP_AUTHENTICATE_PAYER)
        response = normalize_authenticate_payer_response(data, step=STEP_AUTHENTICATE_PAYER)
        if response["redirectHtml"]:
            logger.info("[STEP %s] Challenge redirect HTML returned by gateway", STEP_AUTHENTICATE_PAYER)
        return response

    async def retrieve_order(self, request: FlowRequest) -> Dict[str, Any]:
        """Read the order; always a GET without body whatever method the caller asked for."""
        step = STEP_RETRIEVE_ORDER
        logger.info("[STEP %s] Retrieve order - request received", step)
        if not request.has_credentials():
            raise MissingCredentialsError(step=step)

        credentials = request.credentials(default_api_version=self.default_api_version)
        url = request.url or build_order_url(credentials, request.orderId)
        if request.method and request.method.upper() != "GET":
            logger.info("[STEP %s] Ignoring requested method %s, order retrieval is always GET", step, request.method)
        logger.info("[STEP %s] GET %s", step, url)

        data = await self._send(credentials, "GET", url, None, step)
        logger.info("[STEP %s] Order status: %s", step, data.get("status") if isinstance(data, dict) else None)
        return normalize_order_response(data, step=step)

    async def authorize_pay(self, request: FlowRequest) -> Dict[str, Any]:
        """Final step: authorize or pay using the authentication result."""
        data = await self._forward_transaction_call(request, STEP_AUTHORIZE_PAY)
        response = normalize_payment_response(data, step=STEP_AUTHORIZE_PAY)
        logger.info(
            "[STEP %s] Transaction result: %s, gateway code: %s",
            STEP_AUTHORIZE_PAY,
            response.get("result"),
            response.get("gatewayCode"),
        )
        return response

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _forward_transaction_call(self, request: FlowRequest, step: int) -> Any:
        logger.info("[STEP %s] Request received", step)
        if not request.has_credentials():
            raise MissingCredentialsError(step=step)

        credentials = request.credentials(default_api_version=self.default_api_version)
        url = request.url or build_transaction_url(credentials, request.orderId, request.transactionId)
        if not request.has_body():
            logger.warning("[STEP %s] No request body provided", step)
            raise MissingBodyError(step=step)

        payload = _parse_body(request.requestBody, step)
        method = (request.method or "PUT").upper()
        logger.info("[STEP %s] %s %s", step, method, url)
        logger.info("[STEP %s] Payload: %s", step, json.dumps(mask_sensitive_data(payload), default=str))

        return await self._send(credentials, method, url, payload, step)

    async def _send(self, credentials: GatewayCredentials, method: str, url: str, payload: Any, step: int) -> Any:
        forward_request = ForwardRequest(
            method=method,
            url=url,
            body=payload,
            auth_token=credentials.auth_token,
            timeout_ms=self.timeout_ms,
        )
        result = await self.forwarder.forward(forward_request)
        return _unwrap(result, step)


def _parse_body(raw: Any, step: int) -> Any:
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except ValueError as exc:
        logger.error("[STEP %s] requestBody is not valid JSON: %s", step, exc)
        raise GatewayRequestError(str(exc), step=step) from exc


def _unwrap(result: ForwardResult, step: int) -> Any:
    if isinstance(result, ForwardSuccess):
        logger.info("[STEP %s] Response status: %s", step, result.status)
        logger.debug("[STEP %s] Response data: %s", step, json.dumps(mask_sensitive_data(result.body), default=str))
        return result.body
    if isinstance(result, ForwardUpstreamError):
        logger.error("[STEP %s] Gateway error %s: %s", step, result.status, mask_sensitive_data(result.body))
        raise UpstreamGatewayError(result.status, result.body, step=step)
    if isinstance(result, ForwardNetworkError):
        logger.error("[STEP %s] %s", step, result.message)
        raise GatewayNetworkError(step=step)
    if isinstance(result, ForwardRequestError):
        logger.error("[STEP %s] Request error: %s", step, result.message)
        raise GatewayRequestError(result.message, step=step)
    raise TypeError(f"Unexpected forward result: {result!r}")
