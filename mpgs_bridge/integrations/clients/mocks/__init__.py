"""
Mock integration clients.

These clients return fake (but realistic) gateway responses without calling any external API.
They are used when:
- Gateway sandbox credentials are not available
- We want to exercise the 3DS flow end-to-end without external dependencies

Important:
- Mock clients must follow the SAME GatewayForwarder interface as the real HTTP client.
- Mock clients should return ForwardResult values from mpgs_bridge/integrations/contracts/*

Switching to real:
Set INTEGRATIONS_MODE=real (the default) and the app wires clients/real_http/* instead.
"""
from .gateway import MockGatewayForwarder

__all__ = ["MockGatewayForwarder"]
