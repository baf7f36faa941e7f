"""faceauth: single-identity face enrollment and verification service."""

__version__ = "1.0.0"
