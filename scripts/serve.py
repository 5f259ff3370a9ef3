#!/usr/bin/env python3
"""Run the Screen Map HTTP API.

Usage:
    python scripts/serve.py            # binds API_HOST:API_PORT
    python scripts/serve.py --reload
"""
from __future__ import annotations

import argparse

import uvicorn

from screenmap import config


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the Screen Map API")
    parser.add_argument("--host", default=config.API_HOST)
    parser.add_argument("--port", type=int, default=config.API_PORT)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args()

    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
