"""End-to-end tests for the lookup pipeline with an in-memory transport."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests

from cyync_server.core.error import CyyncError, CyyncLookupError, ErrorType, TransportError
from cyync_server.core.pipeline import run_lookup


class TestRunLookup:
    @pytest.mark.asyncio
    async def test_full_lookup(self, entities, options, now, fake_transport_cls) -> None:
        transport = fake_transport_cls(
            responses={
                ("8.8.8.8", "assets"): [
                    {"id": "a-1", "hostname": "dns", "riskScore": 8.5},
                    {"assetId": "a-2", "riskScore": 4.2},
                    {"deviceId": "a-3", "riskLevel": 6.8},
                ],
                ("8.8.8.8", "forms"): [
                    {"formId": "f-1", "createdAt": (now - timedelta(days=3)).isoformat()},
                    {"formId": "f-2", "created": (now - timedelta(days=10)).isoformat()},
                ],
            }
        )

        results = await run_lookup(entities, options, transport, now=now)

        assert [r["entity"]["value"] for r in results] == ["8.8.8.8", "example.com"]
        data = results[0]["data"]
        assert data["summary"] == ["Assets: 3", "High Risk: 1", "Forms: 2", "Recent: 1"]
        assert data["details"]["assets"]["summary"] == {"totalAssets": 3, "avgRiskScore": 6.5, "highRiskCount": 1}
        assert data["details"]["_metadata"]["searchScopes"] == options["searchScopes"]
        assert data["details"]["_metadata"]["workspaces"] == ["ws-1"]
        assert data["details"]["assets"]["items"][0]["_raw"] == {
            "id": "a-1",
            "hostname": "dns",
            "riskScore": 8.5,
            "scope": "assets",
            "workspaceId": "ws-1",
            "searchEntity": "8.8.8.8",
        }
        assert results[1]["data"] is None
        assert len(transport.started) == 4

    @pytest.mark.asyncio
    async def test_default_scopes(self, entities, options, now, fake_transport_cls) -> None:
        del options["searchScopes"]
        transport = fake_transport_cls(responses={("example.com", "forms"): [{"id": "f-1"}]})

        results = await run_lookup(entities[1:], options, transport, now=now)

        assert {d["scope"] for d in transport.started} == {"assets", "forms"}
        assert results[0]["data"]["details"]["_metadata"]["searchScopes"] == ["assets", "forms", "pages", "tasks"]

    @pytest.mark.asyncio
    async def test_comma_separated_workspaces(self, entities, options, fake_transport_cls) -> None:
        options["workspaceIds"] = "ws-1, ws-2"
        transport = fake_transport_cls()

        results = await run_lookup(entities[:1], options, transport)

        assert [d["workspaceId"] for d in transport.started] == ["ws-1", "ws-1", "ws-2", "ws-2"]
        assert results == [{"entity": entities[0], "data": None}]

    @pytest.mark.asyncio
    async def test_no_entities(self, options, fake_transport_cls) -> None:
        transport = fake_transport_cls()
        assert await run_lookup([], options, transport) == []
        assert transport.started == []

    @pytest.mark.asyncio
    async def test_transport_failure(self, entities, options, fake_transport_cls) -> None:
        transport = fake_transport_cls(
            failures={1: TransportError("Request failed", status=401, description='{"error": "bad token"}')}
        )

        with pytest.raises(CyyncLookupError) as exc_info:
            await run_lookup(entities, options, transport, limit=1)

        error = exc_info.value
        assert error.detail == "Request failed - (401)| bad token"
        assert error.status == 401
        assert error.error_type is ErrorType.NETWORK_ERROR
        assert error.err["name"] == "TransportError"
        assert error.err["status"] == 401
        assert len(transport.started) == 2

    @pytest.mark.asyncio
    async def test_invalid_options(self, entities, options, fake_transport_cls) -> None:
        options["searchScopes"] = 5
        transport = fake_transport_cls()

        with pytest.raises(CyyncLookupError) as exc_info:
            await run_lookup(entities, options, transport)

        assert exc_info.value.error_type is ErrorType.INVALID_OPTIONS
        assert transport.started == []

    @pytest.mark.asyncio
    async def test_builds_transport_from_options(self, entities, options, fake_transport_cls) -> None:
        transport = fake_transport_cls()
        with patch("cyync_server.core.pipeline.CyyncTransport.from_options", return_value=transport) as factory:
            await run_lookup(entities[:1], options)

        factory.assert_called_once()
        assert factory.call_args.args[0]["url"] == "https://staging.cyync.com"
        assert len(transport.started) == 2

    @pytest.mark.asyncio
    async def test_missing_url_without_transport(self, entities, options) -> None:
        options["url"] = ""
        with pytest.raises(CyyncLookupError) as exc_info:
            await run_lookup(entities, options)
        assert isinstance(exc_info.value.__cause__, CyyncError)
        assert exc_info.value.error_type is ErrorType.INVALID_OPTIONS

    @pytest.mark.asyncio
    async def test_malformed_results_do_not_raise(self, entities, options, now, fake_transport_cls) -> None:
        transport = fake_transport_cls(responses={("8.8.8.8", "assets"): [None, "x", {"riskScore": "high"}]})

        results = await run_lookup(entities[:1], options, transport, now=now)

        assets = results[0]["data"]["details"]["assets"]
        assert assets["count"] == 3
        assert assets["summary"]["avgRiskScore"] == 0

    @pytest.mark.asyncio
    async def test_comma_separated_scopes_in_metadata(self, entities, options, now, fake_transport_cls) -> None:
        options["searchScopes"] = "assets,forms"
        transport = fake_transport_cls(responses={("8.8.8.8", "assets"): [{"id": "a-1"}]})

        results = await run_lookup(entities[:1], options, transport, now=now)

        assert [d["scope"] for d in transport.started] == ["assets", "forms"]
        assert results[0]["data"]["details"]["_metadata"]["searchScopes"] == ["assets", "forms"]


class TestTransportLifecycle:
    @pytest.fixture
    def session(self):
        session = MagicMock(spec=requests.Session)
        with patch("cyync_server.retrievers.cyync.requests.Session", return_value=session):
            yield session

    @pytest.mark.asyncio
    async def test_closes_transport_it_builds(self, entities, options, session) -> None:
        response = MagicMock(status_code=200, text='{"results": []}', reason="OK", headers={})
        session.request.return_value = response

        await run_lookup(entities[:1], options)

        assert session.request.call_count == 2
        session.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_closes_transport_on_failure(self, entities, options, session) -> None:
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(CyyncLookupError):
            await run_lookup(entities[:1], options, limit=1)

        session.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_leaves_caller_transport_open(self, entities, options, fake_transport_cls) -> None:
        transport = fake_transport_cls()
        transport.close = MagicMock()

        await run_lookup(entities[:1], options, transport)

        transport.close.assert_not_called()
