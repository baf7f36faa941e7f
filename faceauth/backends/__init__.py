"""Backend implementations of the EmbeddingProvider protocol.

This package contains:
- dlib: HOG/CNN detector + ResNet-34 descriptors (128-D)

Use the factory module to create the provider.
"""

from faceauth.backends.factory import BackendType, create_provider

__all__ = [
    "BackendType",
    "create_provider",
]
