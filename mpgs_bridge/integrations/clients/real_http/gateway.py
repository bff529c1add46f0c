"""
Real Gateway HTTP Forwarder.

Issues one Basic-authenticated call to the upstream gateway per flow
operation and classifies the outcome. Nothing is retried.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from mpgs_bridge.integrations.contracts.interfaces import (
    ForwardNetworkError,
    ForwardRequest,
    ForwardRequestError,
    ForwardResult,
    ForwardSuccess,
    ForwardUpstreamError,
    GatewayForwarder,
)

logger = logging.getLogger(__name__)

# Raised before anything reaches the wire.
_LOCAL_FAILURES = (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError)


class HttpGatewayForwarder(GatewayForwarder):
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.transport = transport

    async def forward(self, request: ForwardRequest) -> ForwardResult:
        try:
            kwargs: Dict[str, Any] = {"headers": request.headers}
            if request.body is not None:
                kwargs["content"] = json.dumps(request.body).encode("utf-8")

            async with httpx.AsyncClient(timeout=request.timeout_ms / 1000, transport=self.transport) as client:
                response = await client.request(request.method.upper(), request.url, **kwargs)
        except _LOCAL_FAILURES as exc:
            logger.warning("Gateway request could not be sent: %s", exc)
            return ForwardRequestError(message=str(exc))
        except httpx.TimeoutException as exc:
            logger.warning("Gateway request timed out after %sms: %s", request.timeout_ms, exc)
            return ForwardNetworkError()
        except httpx.TransportError as exc:
            logger.warning("Gateway request failed without a response: %s", exc)
            return ForwardNetworkError()
        except httpx.RequestError as exc:
            # Undecodable content or redirect loops: a response arrived but cannot be used.
            logger.warning("Gateway response could not be read: %s", exc)
            return ForwardRequestError(message=str(exc))
        except (TypeError, ValueError) as exc:
            logger.warning("Gateway request body could not be encoded: %s", exc)
            return ForwardRequestError(message=str(exc))

        body = _decode_body(response)
        if response.is_success:
            return ForwardSuccess(status=response.status_code, body=body)
        return ForwardUpstreamError(status=response.status_code, body=body)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return response.text
