"""
Integrations layer.
This package contains all code used to talk to the upstream payment gateway:
- contracts/: request/result shapes shared by real and mock clients
- clients/real_http/: the httpx forwarder used against a live gateway
- clients/mocks/: a canned gateway used for development and tests
- policy/: the 3DS flow operations and response normalisation

Key rule:
- Routes MUST NOT call the gateway directly.
- Routes call ThreeDSFlowService, which calls a GatewayForwarder.

Switching implementations:
- The selection of mock vs real forwarder happens in ONE place (mpgs_bridge/api/main.py).
"""

from .contracts.interfaces import (
    ForwardNetworkError,
    ForwardRequest,
    ForwardRequestError,
    ForwardResult,
    ForwardSuccess,
    ForwardUpstreamError,
    GatewayCredentials,
    GatewayForwarder,
    build_auth_token,
)
from .contracts.three_ds import FlowRequest

__all__ = [
    "ForwardNetworkError", "ForwardRequest", "ForwardRequestError",
    "ForwardResult", "ForwardSuccess", "ForwardUpstreamError",
    "GatewayCredentials", "GatewayForwarder", "build_auth_token",
    "FlowRequest",
]
