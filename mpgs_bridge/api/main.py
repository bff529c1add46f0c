"""
FastAPI application - Main entry point
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mpgs_bridge import __version__
from mpgs_bridge.api.endpoints.three_ds import ENDPOINTS, three_ds_api
from mpgs_bridge.error_handler import ErrorHandler, ThreeDSFlowError
from mpgs_bridge.integrations.clients.mocks.gateway import MockGatewayForwarder
from mpgs_bridge.integrations.clients.real_http.gateway import HttpGatewayForwarder
from mpgs_bridge.integrations.contracts.interfaces import GatewayForwarder
from mpgs_bridge.utils.config_loader import ServerConfig, load_server_config

logger = logging.getLogger(__name__)

error_handler = ErrorHandler()


def _select_forwarder(config: ServerConfig) -> GatewayForwarder:
    if config.integrations_mode == "mock":
        logger.warning("INTEGRATIONS_MODE=mock: gateway calls are answered by the mock forwarder")
        return MockGatewayForwarder()
    return HttpGatewayForwarder()


def create_app(config: Optional[ServerConfig] = None, forwarder: Optional[GatewayForwarder] = None) -> FastAPI:
    config = config or load_server_config()
    logging.basicConfig(level=config.log_level)

    app = FastAPI(
        title="MPGS 3DS Bridge API",
        description="Backend intermediary for the MPGS 3-D Secure authentication flow",
        version=__version__,
    )
    app.state.config = config
    app.state.forwarder = forwarder or _select_forwarder(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    app.include_router(three_ds_api, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "port": config.port,
            "cors": "enabled",
            "allowedOrigins": config.cors_origins,
            "endpoints": ENDPOINTS,
        }

    @app.exception_handler(ThreeDSFlowError)
    async def flow_error_handler(request: Request, exc: ThreeDSFlowError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request body", "details": _jsonable_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            details = f"Route {request.method} {request.url.path} not found"
            return JSONResponse(status_code=404, content={"success": False, "error": "Not Found", "details": details})
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.detail, "details": None})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        payload = error_handler.handle_exception(exc, context={"path": request.url.path, "method": request.method})
        return JSONResponse(status_code=500, content=payload)

    logger.info("3DS bridge ready on port %s, allowed origins: %s", config.port, ", ".join(config.cors_origins))
    return app


def _jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in exc.errors()]


app = create_app()
