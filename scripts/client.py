#!/usr/bin/env python3
"""Enroll or verify a face against a running API server.

The server address comes from FACEAUTH_API_URL (or --url).

Usage:
    python scripts/client.py health
    python scripts/client.py enroll path/to/me.jpg
    python scripts/client.py verify path/to/selfie.jpg --url http://192.168.1.20:3000
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from faceauth.client import ClientConfig, ClientRequestError, FaceAuthClient
from faceauth.core.logging_config import get_logger

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="faceauth API client",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--url", type=str, default=None, help="API base URL (overrides FACEAUTH_API_URL)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("health", help="Check that the server is up")

    enroll = subparsers.add_parser("enroll", help="Enroll the face in an image")
    enroll.add_argument("image", type=str, help="Path to image file")

    verify = subparsers.add_parser("verify", help="Verify the face in an image")
    verify.add_argument("image", type=str, help="Path to image file")

    return parser.parse_args()


def main() -> int:
    """Main function."""
    args = parse_args()

    config = ClientConfig.from_env()
    if args.url:
        config = dataclasses.replace(config, base_url=args.url.rstrip("/"))

    if args.command != "health" and not Path(args.image).exists():
        print(f"Error: Image not found: {args.image}")
        return 1

    with FaceAuthClient(config) as client:
        try:
            if args.command == "health":
                print(client.health())
            elif args.command == "enroll":
                client.enroll_face(args.image)
                print("Enrollment Successful")
            else:
                result = client.verify_face(args.image)
                status = "MATCH" if result["success"] else "NO MATCH"
                print(f"{status} (distance: {result['distance']:.4f})")
        except ClientRequestError as e:
            print(e)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
