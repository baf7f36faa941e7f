"""dlib backend for face enrollment and verification.

Components:
- DlibDetector: Face detection using HOG or CNN via face_recognition
- DlibEmbedder: 128-D face descriptors using ResNet-34
- DlibEmbeddingProvider: detector + embedder behind the EmbeddingProvider protocol
"""

from faceauth.backends.dlib.detector import DlibDetector
from faceauth.backends.dlib.embedder import DlibEmbedder
from faceauth.backends.dlib.provider import DlibEmbeddingProvider

__all__ = [
    "DlibDetector",
    "DlibEmbedder",
    "DlibEmbeddingProvider",
]
