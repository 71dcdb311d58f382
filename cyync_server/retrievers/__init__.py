"""
Retrievers module: transports that execute planned search requests.
"""
from .base import BaseTransport, Transport
from .cyync import CyyncTransport

__all__ = [
    "BaseTransport",
    "Transport",
    "CyyncTransport",
]
