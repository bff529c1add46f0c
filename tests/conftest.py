"""Pytest fixtures for the 3DS flow, forwarder and API tests."""

import pytest
from fastapi.testclient import TestClient

from mpgs_bridge.api.main import create_app
from mpgs_bridge.integrations.clients.mocks.gateway import MockGatewayForwarder
from mpgs_bridge.integrations.policy.three_ds_service import ThreeDSFlowService
from mpgs_bridge.utils.config_loader import ServerConfig

BASE_URL = "https://mtf.gateway.mastercard.com"


@pytest.fixture
def gateway():
    """Mock gateway that records every forwarded call."""
    return MockGatewayForwarder()


@pytest.fixture
def service(gateway):
    return ThreeDSFlowService(gateway)


@pytest.fixture
def session():
    """Caller-held session fields shared by every step of one transaction."""
    return {
        "merchantId": "TESTMERCHANT01",
        "username": "merchant.TESTMERCHANT01",
        "password": "s3cret-pass",
        "apiBaseUrl": BASE_URL,
        "apiVersion": "73",
        "orderId": "ORD-1001",
        "transactionId": "TXN-1",
    }


@pytest.fixture
def config():
    return ServerConfig(port=3005, frontend_url="https://shop.example.com")


@pytest.fixture
def client(config, gateway):
    app = create_app(config, forwarder=gateway)
    return TestClient(app, raise_server_exceptions=False)
