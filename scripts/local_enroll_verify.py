#!/usr/bin/env python3
"""Enroll or verify a face locally, without the HTTP server.

Uses the configured dlib backend and the same descriptor record as the
server (DESCRIPTOR_PATH). The services delete their input, so the image is
copied to a temporary file first.

Usage:
    python scripts/local_enroll_verify.py enroll path/to/me.jpg
    python scripts/local_enroll_verify.py verify path/to/selfie.jpg
"""

from __future__ import annotations

import argparse
import shutil
import sys
import tempfile
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from faceauth.backends import create_provider
from faceauth.core.config import Config
from faceauth.core.errors import FaceAuthError
from faceauth.core.logging_config import get_logger
from faceauth.services import DescriptorStore, EnrollmentService, VerificationService

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Local face enrollment/verification (dlib backend)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("command", choices=["enroll", "verify"], help="Operation to run")
    parser.add_argument("image", type=str, help="Path to input image file")
    return parser.parse_args()


def main() -> int:
    """Main function."""
    args = parse_args()

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"Error: Image not found: {image_path}")
        return 1

    config = Config.from_env()
    store = DescriptorStore(config.descriptor_path)
    store.load()
    provider = create_provider(config)

    with tempfile.TemporaryDirectory() as tmpdir:
        work_copy = Path(tmpdir) / image_path.name
        shutil.copyfile(image_path, work_copy)

        try:
            if args.command == "enroll":
                EnrollmentService(provider, store).enroll(work_copy)
                print(f"Enrolled face from {image_path} -> {store.path}")
            else:
                result = VerificationService(provider, store).verify(work_copy)
                status = "MATCH" if result.success else "NO MATCH"
                print(f"{status} (distance: {result.distance:.4f})")
        except FaceAuthError as e:
            print(f"Error: {e.message}" + (f" ({e.details})" if e.details else ""))
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
