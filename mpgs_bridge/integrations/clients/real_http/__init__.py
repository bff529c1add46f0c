"""
Real HTTP integration clients.

These clients communicate with the live payment gateway via httpx.

Important:
- Must implement the same GatewayForwarder interface as the mock gateway
- Must return ForwardResult values shaped according to mpgs_bridge/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in mpgs_bridge/api/main.py only.
"""
