"""Tests for option preprocessing and entity filters."""

from __future__ import annotations

import pytest

from cyync_server.core.error import CyyncError, ErrorType
from cyync_server.core.preprocessor import (
    get_entities_of_types,
    normalize_options,
    remove_private_ips,
    validate_options,
)


class TestNormalizeOptions:
    def test_splits_workspace_ids(self) -> None:
        assert normalize_options({"workspaceIds": " ws-1, ,ws-2 "})["workspaceIds"] == ["ws-1", "ws-2"]

    def test_defaults(self) -> None:
        normalized = normalize_options({})
        assert normalized["workspaceIds"] == []
        assert normalized["searchScopes"] == [
            {"value": "assets", "display": "Assets"},
            {"value": "forms", "display": "Forms"},
        ]
        assert normalized["searchLimit"] == 50

    def test_scope_strings_are_mapped(self) -> None:
        normalized = normalize_options({"searchScopes": "pages,tasks"})
        assert normalized["searchScopes"] == [
            {"value": "pages", "display": "Pages"},
            {"value": "tasks", "display": "Tasks"},
        ]

    def test_does_not_mutate_input(self) -> None:
        options = {"workspaceIds": "a,b"}
        normalize_options(options)
        assert options == {"workspaceIds": "a,b"}

    def test_search_limit_coercion(self) -> None:
        assert normalize_options({"searchLimit": "25"})["searchLimit"] == 25

    @pytest.mark.parametrize("limit", [0, -1, "abc", 2.5, True])
    def test_invalid_search_limit(self, limit) -> None:
        with pytest.raises(CyyncError) as exc_info:
            normalize_options({"searchLimit": limit})
        assert exc_info.value.error_type is ErrorType.INVALID_OPTIONS


class TestValidateOptions:
    def test_valid(self, options) -> None:
        assert validate_options(options) == []

    def test_required(self) -> None:
        assert validate_options({}) == [
            {"key": "url", "message": "* Required"},
            {"key": "accessToken", "message": "* Required"},
        ]

    def test_url_format(self, options) -> None:
        options["url"] = "https://staging.cyync.com/"
        assert validate_options(options) == [{"key": "url", "message": "Your Url must not end with a /"}]

        options["url"] = "staging.cyync.com"
        assert validate_options(options)[0]["key"] == "url"

    def test_invalid_scopes(self, options) -> None:
        options["searchScopes"] = ["assets", "users", {"value": "vulnerabilities"}]
        assert validate_options(options) == [
            {
                "key": "searchScopes",
                "message": (
                    "Invalid search scopes: users, vulnerabilities. "
                    "Valid options are: assets, forms, pages, tasks"
                ),
            }
        ]

    def test_empty_scopes_are_allowed(self, options) -> None:
        options["searchScopes"] = []
        assert validate_options(options) == []

    def test_search_limit(self, options) -> None:
        options["searchLimit"] = 0
        assert validate_options(options) == [{"key": "searchLimit", "message": "Search limit must be a positive integer"}]


class TestRemovePrivateIps:
    def test_filters_rfc1918(self) -> None:
        entities = [
            {"value": "10.0.1.100", "isIP": True, "types": ["IPv4"]},
            {"value": "172.16.5.50", "isIP": True, "types": ["IPv4"]},
            {"value": "192.168.1.1", "isIP": True, "types": ["IPv4"]},
            {"value": "8.8.8.8", "isIP": True, "types": ["IPv4"]},
            {"value": "example.com", "isIP": False, "types": ["domain"]},
        ]

        assert remove_private_ips(entities) == [
            {"value": "8.8.8.8", "isIP": True, "types": ["IPv4"]},
            {"value": "example.com", "isIP": False, "types": ["domain"]},
        ]

    def test_range_edges(self) -> None:
        values = ["172.15.255.255", "172.16.0.0", "172.31.255.255", "172.32.0.0", "192.167.255.255", "192.169.0.0", "11.0.0.1"]
        kept = remove_private_ips([{"value": v, "isIP": True} for v in values])
        assert [e["value"] for e in kept] == ["172.15.255.255", "172.32.0.0", "192.167.255.255", "192.169.0.0", "11.0.0.1"]

    def test_entities_without_ip_flag_are_kept(self) -> None:
        entities = [{"value": "10.0.1.100", "types": ["IPv4"]}]
        assert remove_private_ips(entities) == entities
        assert remove_private_ips([]) == []


class TestGetEntitiesOfTypes:
    entities = [
        {"value": "10.0.1.100", "types": ["IPv4"]},
        {"value": "example.com", "types": ["domain"]},
        {"value": "d41d8cd98f00b204e9800998ecf8427e", "types": ["MD5", "hash"]},
        {"value": "Mixed.Case.Domain.Com", "types": ["Domain"]},
        {"value": "no-types"},
    ]

    def test_single_type_case_insensitive(self) -> None:
        assert [e["value"] for e in get_entities_of_types("DOMAIN", self.entities)] == [
            "example.com",
            "Mixed.Case.Domain.Com",
        ]

    def test_type_list(self) -> None:
        assert [e["value"] for e in get_entities_of_types(["md5", "ipv4"], self.entities)] == [
            "10.0.1.100",
            "d41d8cd98f00b204e9800998ecf8427e",
        ]

    def test_no_types(self) -> None:
        assert get_entities_of_types([], self.entities) == []
        assert get_entities_of_types("nonexistent", self.entities) == []
