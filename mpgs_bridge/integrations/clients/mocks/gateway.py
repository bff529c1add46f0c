"""
MPGS gateway — MOCK forwarder.

⚠️  This is a mock implementation for development and testing.
    It never opens a socket. Each forwarded call is answered with a canned,
    MPGS-shaped response chosen from the ``apiOperation`` of the body (or
    from the HTTP method for order retrieval). Explicit results can be queued
    so tests can script upstream errors and timeouts.
"""

import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional
from urllib.parse import urlparse

from mpgs_bridge.integrations.contracts.interfaces import (
    ForwardRequest,
    ForwardResult,
    ForwardSuccess,
    ForwardUpstreamError,
    GatewayForwarder,
)

logger = logging.getLogger(__name__)

_CHALLENGE_HTML = (
    '<div id="threedsChallengeRedirect" xmlns="http://www.w3.org/1999/html">'
    '<form id="threedsChallengeRedirectForm" method="POST" '
    'action="https://mtf.gateway.mastercard.com/acs/mastercard/v2/prompt" target="challengeFrame">'
    '<input type="hidden" name="creq" value="eyJ0aHJlZURTU2VydmVyVHJhbnNJRCI6Im1vY2sifQ" /></form>'
    '<iframe id="challengeFrame" name="challengeFrame" width="100%" height="100%"></iframe>'
    "<script>document.getElementById('threedsChallengeRedirectForm').submit();</script></div>"
)


# ---------------------------------------------------------------------------
# Mock forwarder
# ---------------------------------------------------------------------------

class MockGatewayForwarder(GatewayForwarder):
    """
    Mock MPGS gateway.

    Parameters
    ----------
    challenge : bool
        If True, AUTHENTICATE_PAYER answers with a challenge redirect
        (``PENDING`` + HTML). Default False (frictionless ``SUCCESS``).
    decline : bool
        If True, PAY/AUTHORIZE answers with a ``DECLINED`` gateway code.
    """

    def __init__(self, challenge: bool = False, decline: bool = False) -> None:
        self._challenge = challenge
        self._decline = decline
        self._queued: Deque[ForwardResult] = deque()
        self.calls: List[ForwardRequest] = []

        logger.info("[GATEWAY MOCK] Forwarder initialised (challenge=%s, decline=%s)", challenge, decline)

    def queue_result(self, result: ForwardResult) -> None:
        """Return ``result`` for the next call instead of a canned response."""
        self._queued.append(result)

    async def forward(self, request: ForwardRequest) -> ForwardResult:
        self.calls.append(request)
        if self._queued:
            return self._queued.popleft()

        ids = _ids_from_url(request.url)
        if request.method.upper() == "GET":
            return ForwardSuccess(status=200, body=self._order(ids))

        operation = ""
        if isinstance(request.body, dict):
            operation = str(request.body.get("apiOperation", "")).upper()

        logger.info("[GATEWAY MOCK] %s %s (%s)", request.method.upper(), request.url, operation or "no apiOperation")
        if operation == "INITIATE_AUTHENTICATION":
            return ForwardSuccess(status=201, body=self._initiate(ids))
        if operation == "AUTHENTICATE_PAYER":
            return ForwardSuccess(status=201, body=self._authenticate(ids))
        if operation in {"PAY", "AUTHORIZE"}:
            return ForwardSuccess(status=201, body=self._pay(ids, operation, request.body))

        return ForwardUpstreamError(
            status=400,
            body={
                "error": {
                    "cause": "INVALID_REQUEST",
                    "explanation": f"Value '{operation}' is invalid for field 'apiOperation'",
                    "field": "apiOperation",
                    "validationType": "INVALID",
                },
                "result": "ERROR",
            },
        )

    # ------------------------------------------------------------------
    # Canned responses
    # ------------------------------------------------------------------

    def _initiate(self, ids: Dict[str, Optional[str]]) -> Dict[str, Any]:
        return {
            "authentication": {
                "3ds2": {"methodSupported": "NOT_SUPPORTED", "directoryServerId": "A000000004"},
                "acceptVersions": "3DS1,3DS2",
                "channel": "PAYER_BROWSER",
                "purpose": "PAYMENT_TRANSACTION",
                "redirect": {"domainName": "mtf.gateway.mastercard.com"},
                "status": "AUTHENTICATION_AVAILABLE",
                "version": "3DS2",
            },
            "order": {"id": ids["order"], "authenticationStatus": "AUTHENTICATION_AVAILABLE"},
            "response": {"gatewayCode": "SUCCESS", "gatewayRecommendation": "PROCEED"},
            "result": "SUCCESS",
            "transaction": {"id": ids["transaction"], "type": "AUTHENTICATION"},
            "merchant": ids["merchant"],
        }

    def _authenticate(self, ids: Dict[str, Optional[str]]) -> Dict[str, Any]:
        authentication: Dict[str, Any] = {"version": "3DS2", "payerInteraction": "NOT_REQUIRED"}
        if self._challenge:
            authentication.update(
                {
                    "status": "AUTHENTICATION_PENDING",
                    "payerInteraction": "REQUIRED",
                    "redirect": {"html": _CHALLENGE_HTML, "customizedHtml": {"3ds2": {"acsUrl": "https://mtf.gateway.mastercard.com/acs"}}},
                }
            )
        else:
            authentication["status"] = "AUTHENTICATION_SUCCESSFUL"

        return {
            "authentication": authentication,
            "order": {"id": ids["order"], "authenticationStatus": authentication["status"]},
            "response": {"gatewayCode": "PENDING" if self._challenge else "APPROVED", "gatewayRecommendation": "PROCEED"},
            "result": "PENDING" if self._challenge else "SUCCESS",
            "transaction": {"id": ids["transaction"], "type": "AUTHENTICATION"},
            "merchant": ids["merchant"],
        }

    def _pay(self, ids: Dict[str, Optional[str]], operation: str, body: Dict[str, Any]) -> Dict[str, Any]:
        order = body.get("order") if isinstance(body.get("order"), dict) else {}
        amount = order.get("amount", "0.00")
        currency = order.get("currency", "USD")
        gateway_code = "DECLINED" if self._decline else "APPROVED"
        return {
            "authentication": {"status": "AUTHENTICATION_SUCCESSFUL", "version": "3DS2"},
            "order": {
                "id": ids["order"],
                "amount": amount,
                "currency": currency,
                "status": "DECLINED" if self._decline else ("CAPTURED" if operation == "PAY" else "AUTHORIZED"),
            },
            "response": {"gatewayCode": gateway_code, "acquirerCode": "05" if self._decline else "00"},
            "result": "FAILURE" if self._decline else "SUCCESS",
            "transaction": {"id": ids["transaction"], "type": "PAYMENT" if operation == "PAY" else "AUTHORIZATION", "amount": amount},
            "merchant": ids["merchant"],
        }

    def _order(self, ids: Dict[str, Optional[str]]) -> Dict[str, Any]:
        authorized = "0.00" if self._decline else "10.00"
        return {
            "id": ids["order"],
            "merchant": ids["merchant"],
            "status": "DECLINED" if self._decline else "CAPTURED",
            "authenticationStatus": "AUTHENTICATION_SUCCESSFUL",
            "amount": 10.00,
            "currency": "USD",
            "totalAuthorizedAmount": float(authorized),
            "totalCapturedAmount": float(authorized),
            "totalRefundedAmount": 0.0,
            "result": "SUCCESS",
        }


def _ids_from_url(url: str) -> Dict[str, Optional[str]]:
    """Pull merchant/order/transaction ids out of a REST path."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    ids: Dict[str, Optional[str]] = {"merchant": None, "order": None, "transaction": None}
    for name in ids:
        if name in segments:
            index = segments.index(name)
            if index + 1 < len(segments):
                ids[name] = segments[index + 1]
    return ids
