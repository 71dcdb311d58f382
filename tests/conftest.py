"""Shared fixtures for the CYYNC lookup tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeTransport:
    """
    In-memory transport.

    ``responses`` maps ``(entity value, scope)`` to the result list returned in
    ``body.results``; ``failures`` maps a request's start index to the
    exception it raises.
    """

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, str], Any]] = None,
        failures: Optional[Dict[int, Exception]] = None,
        delays: Optional[Dict[int, float]] = None,
    ) -> None:
        self.responses = responses or {}
        self.failures = failures or {}
        self.delays = delays or {}
        self.started: List[Dict[str, Any]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def execute(self, descriptor: Dict[str, Any]) -> Dict[str, Any]:
        index = len(self.started)
        self.started.append(descriptor)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(index, 0))
            if index in self.failures:
                raise self.failures[index]
            results = self.responses.get((descriptor["resultKey"], descriptor["scope"]), [])
            return {"status": 200, "headers": {}, "body": {"results": results}}
        finally:
            self.in_flight -= 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def options() -> Dict[str, Any]:
    return {
        "url": "https://staging.cyync.com",
        "accessToken": "token-123",
        "roleId": "7",
        "workspaceIds": ["ws-1"],
        "searchScopes": [
            {"value": "assets", "display": "Assets"},
            {"value": "forms", "display": "Forms"},
        ],
        "searchLimit": 50,
    }


@pytest.fixture
def entities() -> List[Dict[str, Any]]:
    return [
        {"value": "8.8.8.8", "types": ["IPv4"], "isIP": True},
        {"value": "example.com", "types": ["domain"], "isIP": False},
    ]


@pytest.fixture
def fake_transport_cls():
    return FakeTransport
