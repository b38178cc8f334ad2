"""Tests for ProfileCreator."""

from pathlib import Path
from unittest.mock import Mock

import pytest
from rich.console import Console

from profile_calculator.catalog import CatalogEntry
from profile_calculator.creator import ProfileCreator
from profile_calculator.errors import ListFormatError
from profile_calculator.errors import ProfileIOError
from profile_calculator.errors import ProfileParseError


@pytest.fixture
def list_file(tmp_path):
    def _write(text: str, name: str = "modules.txt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


class TestCreateFromCodes:
    def test_writes_codes_in_order(self, list_file, tmp_path, read_profile):
        target = tmp_path / "out.json"
        creator = ProfileCreator(list_file("mod1\n[mod2, mod3]\nALL_SOLVABLE\n"), target_path=target)

        assert creator.create_profile() == ["mod1", "mod2", "mod3"]
        assert read_profile(target) == ["mod1", "mod2", "mod3"]

    def test_default_target_in_current_directory(self, list_file, isolated_env, read_profile):
        ProfileCreator(list_file("a\nb")).create_profile()
        assert read_profile(isolated_env / "calculated.json") == ["a", "b"]

    def test_does_not_fetch_catalog_for_codes(self, list_file, tmp_path):
        fetcher = Mock()
        ProfileCreator(list_file("a"), target_path=tmp_path / "o.json", catalog_fetcher=fetcher).create_profile()
        fetcher.assert_not_called()

    def test_non_json_target_is_io_error(self, list_file, tmp_path):
        target = tmp_path / "out.txt"
        with pytest.raises(ProfileIOError, match="JSON"):
            ProfileCreator(list_file("a"), target_path=target).create_profile()
        assert not target.exists()

    def test_badly_formatted_list(self, list_file, tmp_path):
        target = tmp_path / "out.json"
        with pytest.raises(ListFormatError):
            ProfileCreator(list_file("[a, b\nc"), target_path=target).create_profile()
        assert not target.exists()

    def test_missing_list_is_io_error(self, tmp_path):
        with pytest.raises(ProfileIOError):
            ProfileCreator(tmp_path / "missing.txt", target_path=tmp_path / "o.json").create_profile()


class TestCreateFromNames:
    def test_resolves_names(self, list_file, tmp_path, read_profile):
        target = tmp_path / "named.json"
        fetcher = Mock(return_value=[CatalogEntry(module_id="n1", name="Name One")])

        creator = ProfileCreator(list_file("Name One\n"), target_path=target, use_names=True, catalog_fetcher=fetcher)

        assert creator.create_profile() == ["n1"]
        assert read_profile(target) == ["n1"]
        fetcher.assert_called_once_with()

    def test_unmatched_name_gives_empty_profile(self, list_file, tmp_path, read_profile):
        target = tmp_path / "named.json"
        fetcher = Mock(return_value=[CatalogEntry(module_id="n1", name="Name One")])

        codes = ProfileCreator(
            list_file("Nobody\n"), target_path=target, use_names=True, catalog_fetcher=fetcher
        ).create_profile()

        assert codes == []
        assert read_profile(target) == []

    def test_catalog_failure_propagates(self, list_file, tmp_path):
        fetcher = Mock(side_effect=ProfileParseError("bad catalog"))
        creator = ProfileCreator(list_file("A"), target_path=tmp_path / "o.json", use_names=True, catalog_fetcher=fetcher)
        with pytest.raises(ProfileParseError):
            creator.create_profile()


class TestNarration:
    def test_verbose_narrates_to_console(self, list_file, tmp_path):
        console = Console(record=True, width=120)
        fetcher = Mock(return_value=[CatalogEntry(module_id="n1", name="Name One")])
        ProfileCreator(
            list_file("Name One\nGhost [x]"),
            target_path=tmp_path / "o.json",
            use_names=True,
            verbose=True,
            catalog_fetcher=fetcher,
            console=console,
        ).create_profile()

        output = console.export_text()
        assert "Identified module: Name One" in output
        assert "Unable to find match for module name: Ghost [x]" in output

    def test_quiet_by_default(self, list_file, tmp_path):
        console = Console(record=True)
        ProfileCreator(list_file("a"), target_path=tmp_path / "o.json", console=console).create_profile()
        assert console.export_text() == ""


class TestInjectedStore:
    def test_writes_through_given_store(self, list_file, tmp_path):
        store = Mock()
        target = tmp_path / "o.json"

        codes = ProfileCreator(list_file("a\n[b, c]"), target_path=target, store=store).create_profile()

        assert codes == ["a", "b", "c"]
        store.write.assert_called_once_with(target, ["a", "b", "c"])
        assert not target.exists()
