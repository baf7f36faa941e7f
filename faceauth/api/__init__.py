"""HTTP boundary of the faceauth service."""

from faceauth.api.main import create_app, run_server

__all__ = ["create_app", "run_server"]
