#!/usr/bin/env python3
"""
Run the full 3DS flow (initiate -> authenticate payer -> retrieve order ->
pay) and print each stage to the terminal, with card data masked.

Uses the mock gateway unless MPGS_MERCHANT_ID, MPGS_USERNAME,
MPGS_PASSWORD and MPGS_API_BASE_URL are set.

Usage (from repo root):
  python scripts/run_flow_demo.py
  python scripts/run_flow_demo.py --challenge
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

from mpgs_bridge.error_handler import ThreeDSFlowError
from mpgs_bridge.integrations.clients.mocks.gateway import MockGatewayForwarder
from mpgs_bridge.integrations.clients.real_http.gateway import HttpGatewayForwarder
from mpgs_bridge.integrations.contracts.three_ds import FlowRequest
from mpgs_bridge.integrations.policy.three_ds_service import ThreeDSFlowService
from mpgs_bridge.utils.masking import mask_sensitive_data


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and masked data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(mask_sensitive_data(data), indent=2, default=str))
    else:
        print(data)
    print()


def session_fields(order_id: str, transaction_id: str) -> dict:
    return {
        "merchantId": os.getenv("MPGS_MERCHANT_ID", "TESTMERCHANT01"),
        "username": os.getenv("MPGS_USERNAME", "merchant.TESTMERCHANT01"),
        "password": os.getenv("MPGS_PASSWORD", "demo-password-123"),
        "apiBaseUrl": os.getenv("MPGS_API_BASE_URL", "https://mtf.gateway.mastercard.com"),
        "apiVersion": os.getenv("MPGS_API_VERSION", "73"),
        "orderId": order_id,
        "transactionId": transaction_id,
    }


async def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--challenge", action="store_true", help="Mock gateway asks for a challenge")
    args = parser.parse_args()

    load_dotenv()
    setup_logging()

    live = all(os.getenv(name) for name in ("MPGS_MERCHANT_ID", "MPGS_USERNAME", "MPGS_PASSWORD", "MPGS_API_BASE_URL"))
    forwarder = HttpGatewayForwarder() if live else MockGatewayForwarder(challenge=args.challenge)
    service = ThreeDSFlowService(forwarder)

    order_id = f"ORD-{uuid.uuid4().hex[:10].upper()}"
    auth_txn = f"AUTH-{uuid.uuid4().hex[:8].upper()}"
    pay_txn = f"PAY-{uuid.uuid4().hex[:8].upper()}"
    card = {
        "number": "5123450000000008",
        "expiry": {"month": "01", "year": "39"},
        "securityCode": "100",
    }

    try:
        initiate = await service.initiate_authentication(
            FlowRequest(
                **session_fields(order_id, auth_txn),
                requestBody={
                    "apiOperation": "INITIATE_AUTHENTICATION",
                    "authentication": {"acceptVersions": "3DS1,3DS2", "channel": "PAYER_BROWSER", "purpose": "PAYMENT_TRANSACTION"},
                    "order": {"currency": "USD"},
                    "sourceOfFunds": {"provided": {"card": card}},
                },
            )
        )
        print_stage("STEP 1: Initiate authentication", initiate)

        authenticate = await service.authenticate_payer(
            FlowRequest(
                **session_fields(order_id, auth_txn),
                requestBody={
                    "apiOperation": "AUTHENTICATE_PAYER",
                    "authentication": {"redirectResponseUrl": "http://localhost:5173/3ds-callback"},
                    "device": {"browser": "MOZILLA", "ipAddress": "127.0.0.1"},
                    "order": {"amount": "10.00", "currency": "USD"},
                    "sourceOfFunds": {"provided": {"card": card}},
                },
            )
        )
        print_stage("STEP 2: Authenticate payer", {k: v for k, v in authenticate.items() if k != "data"})
        if authenticate.get("redirectHtml"):
            print_stage("STEP 2: Challenge required", "Render redirectHtml in the browser, then continue.")

        order = await service.retrieve_order(FlowRequest(**session_fields(order_id, auth_txn)))
        print_stage("STEP 3: Retrieve order", order)

        payment = await service.authorize_pay(
            FlowRequest(
                **session_fields(order_id, pay_txn),
                requestBody={
                    "apiOperation": "PAY",
                    "authentication": {"transactionId": auth_txn},
                    "order": {"amount": "10.00", "currency": "USD"},
                    "sourceOfFunds": {"provided": {"card": card}},
                },
            )
        )
        print_stage("STEP 4: Authorize / pay", payment)
    except ThreeDSFlowError as exc:
        print_stage(f"FLOW FAILED ({exc.status_code})", exc.to_envelope())
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
