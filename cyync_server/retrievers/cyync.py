import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

import requests

from .base import BaseTransport
from ..core.config import API_PREFIX, SUCCESS_STATUS_CODES, get_request_timeout
from ..core.error import CyyncError, ErrorType, TransportError
from ..core.logger import get_logger
from ..models.schema import RequestDescriptor, ResponseEnvelope


class CyyncTransport(BaseTransport):
    """
    HTTP transport for the CYYNC Partner API.

    Requests go to ``{url}/api/v1/{endpoint}`` with bearer authentication and
    the configured role. The blocking ``requests`` call runs in the default
    executor so many searches can be in flight on one event loop.
    """

    def __init__(
        self,
        url: str,
        access_token: Optional[str] = None,
        role_id: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not url:
            raise CyyncError("CYYNC url is required", error_type=ErrorType.INVALID_OPTIONS)
        self.base_url = self._join_url(url, API_PREFIX)
        self.access_token = access_token
        self.role_id = role_id
        self.timeout = timeout if timeout is not None else get_request_timeout()
        self.session = session or requests.Session()
        self.logger = logger or get_logger()

    @classmethod
    def from_options(cls, options: Mapping, **kwargs: Any) -> "CyyncTransport":
        return cls(
            url=options.get("url") or "",
            access_token=options.get("accessToken"),
            role_id=options.get("roleId"),
            **kwargs,
        )

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.role_id:
            headers["Role-ID"] = str(self.role_id)
        return headers

    def build_url(self, descriptor: RequestDescriptor) -> str:
        url = self._join_url(self.base_url, descriptor["endpoint"])
        # list endpoints are addressed with their trailing slash
        if descriptor["endpoint"].endswith("/"):
            url += "/"
        return url

    def send(self, descriptor: RequestDescriptor) -> ResponseEnvelope:
        """Issue one request synchronously and return its envelope."""
        url = self.build_url(descriptor)
        method = descriptor.get("method") or "GET"
        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers(),
                params=descriptor.get("query"),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            self.logger.warning(f"CYYNC request to {url} failed: {exc}")
            raise TransportError(str(exc) or type(exc).__name__, status=None) from exc

        self.logger.debug(f"{method} {url} -> {response.status_code}")
        if response.status_code not in SUCCESS_STATUS_CODES:
            raise TransportError(
                response.reason or "Request failed",
                status=response.status_code,
                description=response.text,
            )

        return self._build_envelope(
            response.status_code,
            response.headers,
            self._decode_body(response.text),
        )

    async def execute(self, descriptor: RequestDescriptor) -> ResponseEnvelope:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.send, descriptor)

    def close(self) -> None:
        self.session.close()
