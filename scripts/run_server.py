#!/usr/bin/env python3
"""Run the face enrollment API server.

Usage:
    python scripts/run_server.py
    python scripts/run_server.py --port 3000 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Face enrollment/verification API server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("--host", type=str, default=None, help="Host to bind to (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (default: PORT or 3000)")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override LOG_LEVEL",
    )

    return parser.parse_args()


def main() -> None:
    """Main function."""
    args = parse_args()

    # Must be set before the config singleton is first read
    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level

    from faceauth.api.main import run_server
    from faceauth.core.config import get_config

    config = get_config()
    host = args.host or config.host
    port = args.port or config.port

    print("=" * 50)
    print("Face Enrollment API")
    print("=" * 50)
    print(config)
    print(f"Server will start on http://{host}:{port}")
    print(f"Health Check: http://{host}:{port}/health")
    print("=" * 50)

    try:
        run_server(host=host, port=port)
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
