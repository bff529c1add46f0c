"""
Contracts (data models).

This folder defines the request/result shapes for the gateway integration:
- ForwardRequest / ForwardResult: one authenticated upstream call and its outcome
- FlowRequest: the inbound payload accepted by every 3DS flow operation

Both the real httpx forwarder and the mock gateway use these contracts, so
the flow service never has to guess what a forwarder returns.
"""
