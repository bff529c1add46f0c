import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request

from mpgs_bridge.integrations.contracts.interfaces import GatewayForwarder
from mpgs_bridge.integrations.contracts.three_ds import FlowRequest
from mpgs_bridge.integrations.policy.config_check import validate_gateway_config
from mpgs_bridge.integrations.policy.three_ds_service import ThreeDSFlowService
from mpgs_bridge.utils.config_loader import ServerConfig
from mpgs_bridge.utils.masking import mask_sensitive_data

logger = logging.getLogger(__name__)

api = APIRouter()
three_ds_api = api

ENDPOINTS = {
    "step1": "/api/initiate-authentication",
    "step2": "/api/authenticate-payer",
    "step3": "/api/retrieve-order",
    "step4": "/api/authorize-pay",
    "testConfig": "/api/test-config",
}


def get_forwarder(request: Request) -> GatewayForwarder:
    return request.app.state.forwarder


def get_flow_service(request: Request, forwarder: GatewayForwarder = Depends(get_forwarder)) -> ThreeDSFlowService:
    config: ServerConfig = request.app.state.config
    return ThreeDSFlowService(
        forwarder,
        timeout_ms=config.upstream_timeout_ms,
        default_api_version=config.default_api_version,
    )


def _log_inbound(operation: str, payload: Dict[str, Any]) -> None:
    logger.info("%s request: %s", operation, mask_sensitive_data(payload))


@api.post("/initiate-authentication", tags=["3DS"])
async def initiate_authentication(request: FlowRequest, service: ThreeDSFlowService = Depends(get_flow_service)):
    _log_inbound("initiate-authentication", request.model_dump())
    return await service.initiate_authentication(request)


@api.post("/authenticate-payer", tags=["3DS"])
async def authenticate_payer(request: FlowRequest, service: ThreeDSFlowService = Depends(get_flow_service)):
    _log_inbound("authenticate-payer", request.model_dump())
    return await service.authenticate_payer(request)


@api.post("/retrieve-order", tags=["3DS"])
async def retrieve_order(request: FlowRequest, service: ThreeDSFlowService = Depends(get_flow_service)):
    _log_inbound("retrieve-order", request.model_dump())
    return await service.retrieve_order(request)


@api.post("/authorize-pay", tags=["3DS"])
async def authorize_pay(request: FlowRequest, service: ThreeDSFlowService = Depends(get_flow_service)):
    _log_inbound("authorize-pay", request.model_dump())
    return await service.authorize_pay(request)


@api.post("/test-config", tags=["Config"])
async def test_config(payload: Any = Body(default=None)):
    if isinstance(payload, dict):
        _log_inbound("test-config", payload)
    return validate_gateway_config(payload)
