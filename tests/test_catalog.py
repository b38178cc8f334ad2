"""Tests for the catalog client and name resolution."""

from unittest.mock import patch

import httpx
import pytest

from profile_calculator.catalog import DEFAULT_CATALOG_URL
from profile_calculator.catalog import CatalogClient
from profile_calculator.catalog import CatalogEntry
from profile_calculator.catalog import NameResolver
from profile_calculator.catalog import parse_catalog
from profile_calculator.errors import ProfileIOError
from profile_calculator.errors import ProfileParseError

URL = "https://catalog.example/modules.json"


def _response(status: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", URL), **kwargs)


def _entry(code: str, name: str) -> CatalogEntry:
    return CatalogEntry(module_id=code, name=name)


class TestCatalogClient:
    def test_defaults_to_public_catalog(self):
        assert CatalogClient().catalog_url == DEFAULT_CATALOG_URL

    def test_fetch_parses_records(self):
        records = [{"ModuleID": "n1", "Name": "Name One", "Author": "someone"}]
        with patch("profile_calculator.catalog.httpx.get", return_value=_response(json=records)) as mock_get:
            entries = CatalogClient(URL, timeout=5.0).fetch()

        assert entries == [_entry("n1", "Name One")]
        mock_get.assert_called_once_with(URL, timeout=5.0, follow_redirects=True)

    def test_fetch_accepts_wrapped_catalog(self):
        document = {"KtaneModules": [{"ModuleID": "a", "Name": "A"}, {"ModuleID": "b", "Name": "B"}]}
        with patch("profile_calculator.catalog.httpx.get", return_value=_response(json=document)):
            entries = CatalogClient(URL).fetch()
        assert [e.module_id for e in entries] == ["a", "b"]

    def test_network_failure_is_io_error(self):
        with patch("profile_calculator.catalog.httpx.get", side_effect=httpx.ConnectError("refused")):
            with pytest.raises(ProfileIOError, match="Failed to fetch"):
                CatalogClient(URL).fetch()

    def test_error_status_is_io_error(self):
        with patch("profile_calculator.catalog.httpx.get", return_value=_response(503)):
            with pytest.raises(ProfileIOError):
                CatalogClient(URL).fetch()

    def test_invalid_json_is_parse_error(self):
        with patch("profile_calculator.catalog.httpx.get", return_value=_response(content=b"<html>")):
            with pytest.raises(ProfileParseError, match="not valid JSON"):
                CatalogClient(URL).fetch()


class TestParseCatalog:
    def test_rejects_non_array(self):
        with pytest.raises(ProfileParseError):
            parse_catalog({"modules": []})

    def test_rejects_record_without_name(self):
        with pytest.raises(ProfileParseError):
            parse_catalog([{"ModuleID": "a"}])


class TestNameResolver:
    def test_resolves_exact_name(self):
        catalog = [_entry("n1", "Name One")]
        assert NameResolver().resolve_all(["Name One"], catalog) == ["n1"]

    def test_match_is_case_insensitive(self):
        catalog = [_entry("btn", "The Button")]
        assert NameResolver().resolve_all(["the BUTTON"], catalog) == ["btn"]

    def test_no_fuzzy_matching(self):
        catalog = [_entry("btn", "The Button")]
        assert NameResolver().resolve_all(["Button", "The Button "], catalog) == []

    def test_unmatched_names_are_dropped_without_error(self):
        catalog = [_entry("n1", "Name One")]
        assert NameResolver().resolve_all(["Unknown"], catalog) == []

    def test_unmatched_callback_receives_name(self):
        missed = []
        resolver = NameResolver(on_unresolved=missed.append)
        resolver.resolve_all(["Name One", "Ghost"], [_entry("n1", "Name One")])
        assert missed == ["Ghost"]

    def test_first_catalog_match_wins(self):
        catalog = [_entry("first", "Dup"), _entry("second", "dup")]
        assert NameResolver().resolve_all(["DUP"], catalog) == ["first"]

    def test_keeps_input_order_and_duplicates(self):
        catalog = [_entry("a", "Alpha"), _entry("b", "Beta")]
        assert NameResolver().resolve_all(["Beta", "Alpha", "Beta"], catalog) == ["b", "a", "b"]
