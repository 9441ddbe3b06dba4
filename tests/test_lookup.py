"""Unit tests for the direct-then-list lookup."""

import pytest

from keep_provider.client import KeepClient
from keep_provider.errors import DecodeError, NotFoundError
from keep_provider.lookup import find_remote, ids_match, scan

from conftest import FakeKeepAPI, load_artifact


class TestScan:
    """Tests for id matching in list responses."""

    def test_numeric_ids_match_strings(self):
        assert ids_match(3, "3")
        assert ids_match(3.0, "3")
        assert not ids_match(3, "30")
        assert not ids_match(None, "3")

    def test_scan_finds_item(self):
        items = load_artifact("extraction_rules.json")
        assert scan(items, "7")["name"] == "region-from-host"

    def test_scan_skips_items_without_id(self):
        assert scan([{"name": "x"}, "junk", {"id": "a"}], "a") == {"id": "a"}

    def test_scan_non_list(self):
        assert scan({"id": "a"}, "a") is None


class TestFindRemote:
    """Tests for find_remote."""

    def test_direct_hit(self, fake_api: FakeKeepAPI, client: KeepClient):
        fake_api.add("GET", "/providers/p1", {"provider": {"id": "p1", "name": "dd"}})

        found = find_remote(
            client, "p1", "/providers", direct_path="/providers/p1", direct_key="provider"
        )

        assert found == {"id": "p1", "name": "dd"}
        assert fake_api.methods() == [("GET", "/providers/p1")]

    def test_falls_back_to_enveloped_list(self, fake_api: FakeKeepAPI, client: KeepClient):
        fake_api.add("GET", "/providers", load_artifact("providers.json"))
        provider_id = "3b0e7e4d-2a11-47b5-8c0a-5d9a7c2e9f02"

        found = find_remote(
            client,
            provider_id,
            "/providers",
            direct_path=f"/providers/{provider_id}",
            direct_key="provider",
            list_key="providers",
        )

        assert found["name"] == "oncall-pagerduty"
        assert fake_api.methods() == [
            ("GET", f"/providers/{provider_id}"),
            ("GET", "/providers"),
        ]

    def test_falls_back_on_undecodable_direct_response(
        self, fake_api: FakeKeepAPI, client: KeepClient
    ):
        fake_api.add("GET", "/mapping/11", text="<html>oops</html>")
        fake_api.add("GET", "/mapping", load_artifact("mapping_rules.json"))

        found = find_remote(client, "11", "/mapping", direct_path="/mapping/11")
        assert found["name"] == "team-ownership"

    def test_falls_back_on_empty_direct_object(self, fake_api: FakeKeepAPI, client: KeepClient):
        fake_api.add("GET", "/mapping/12", {})
        fake_api.add("GET", "/mapping", load_artifact("mapping_rules.json"))

        assert find_remote(client, "12", "/mapping", direct_path="/mapping/12")["id"] == 12

    def test_not_found_in_either(self, fake_api: FakeKeepAPI, client: KeepClient):
        fake_api.add("GET", "/mapping", load_artifact("mapping_rules.json"))

        with pytest.raises(NotFoundError) as exc_info:
            find_remote(client, "99", "/mapping", direct_path="/mapping/99", kind="mapping rule")

        assert exc_info.value.identifier == "99"
        assert exc_info.value.category == "not_found"

    def test_list_must_be_a_list(self, fake_api: FakeKeepAPI, client: KeepClient):
        fake_api.add("GET", "/extraction", {"detail": "unexpected"})

        with pytest.raises(DecodeError):
            find_remote(client, "1", "/extraction")
