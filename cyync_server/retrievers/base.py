"""
Base transport classes and protocol definitions.
"""
import json
from typing import Any, Dict, Optional, Protocol

from ..models.schema import RequestDescriptor, ResponseEnvelope


class Transport(Protocol):
    """
    Protocol defining the request-execution collaborator used by the searcher.

    ``execute`` either returns the response envelope or raises
    ``TransportError`` carrying ``status`` and ``description``.
    """
    async def execute(self, descriptor: RequestDescriptor) -> ResponseEnvelope:
        ...


class BaseTransport:
    """
    Base class for transports with common utility methods.
    """

    @staticmethod
    def _join_url(base_url: str, *parts: str) -> str:
        """Join a base URL and path segments with exactly one slash between them."""
        url = (base_url or "").rstrip("/")
        for part in parts:
            if part:
                url = f"{url}/{part.strip('/')}"
        return url

    @staticmethod
    def _decode_body(text: str) -> Any:
        """
        Best-effort JSON decoding of a response body.

        - "" -> None
        - JSON text -> decoded value
        - anything else -> the text itself
        """
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    @staticmethod
    def _build_envelope(status: int, headers: Optional[Dict[str, str]], body: Any) -> ResponseEnvelope:
        return {
            "status": status,
            "headers": dict(headers or {}),
            "body": body,
        }
