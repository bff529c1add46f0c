#!/usr/bin/env python3
"""
Start the 3DS bridge API with uvicorn.

Usage (from repo root):
  python scripts/run_api.py
  INTEGRATIONS_MODE=mock python scripts/run_api.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import uvicorn

from mpgs_bridge.utils.config_loader import load_server_config


def main():
    config = load_server_config()
    print(f"3DS Payment API Server running at http://localhost:{config.port}")
    print(f"Health check: http://localhost:{config.port}/health")
    print("Allowed origins:", ", ".join(config.cors_origins))
    uvicorn.run("mpgs_bridge.api.main:app", host="0.0.0.0", port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
