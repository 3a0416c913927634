"""Tests for resource location."""

from unittest.mock import patch

import pytest

from webjar_extractor.utils.error_handling import IOFailure
from webjar_extractor.utils.resource_locator import (
    DirectoryLocation,
    SearchPathLocator,
    ZipArchiveLocation,
)

from .conftest import JQUERY_FILES, WEBJARS, build_jar

PREFIX = f"{WEBJARS}/"


class TestZipArchiveLocation:
    """Tests for jar/zip locations."""

    def test_iter_entries_skips_other_files(self, tmp_path):
        jar = build_jar(tmp_path / "jquery.jar", JQUERY_FILES)
        location = ZipArchiveLocation(jar)

        entries = list(location.iter_entries(PREFIX))

        assert sorted(e.path for e in entries) == sorted(JQUERY_FILES)
        sizes = {e.path: e.size for e in entries}
        assert sizes[f"{WEBJARS}/jquery/jquery.js"] == 10
        assert all(e.location == str(jar) for e in entries)

    def test_entries_can_be_read_during_walk(self, tmp_path):
        jar = build_jar(tmp_path / "jquery.jar", JQUERY_FILES)

        for entry in ZipArchiveLocation(jar).iter_entries(PREFIX):
            with entry.open() as stream:
                assert stream.read() == JQUERY_FILES[entry.path]

    def test_list_children(self, tmp_path):
        jar = build_jar(tmp_path / "jquery.jar", JQUERY_FILES)
        assert ZipArchiveLocation(jar).list_children(PREFIX) == {"jquery"}

    def test_contains(self, tmp_path):
        jar = build_jar(tmp_path / "jquery.jar", JQUERY_FILES)
        location = ZipArchiveLocation(jar)

        assert location.contains(f"{WEBJARS}/jquery/jquery.js")
        assert not location.contains(f"{WEBJARS}/jquery")

    def test_corrupt_archive(self, tmp_path):
        bad = tmp_path / "bad.jar"
        bad.write_bytes(b"garbage")

        with pytest.raises(IOFailure):
            ZipArchiveLocation(bad).has_entries(PREFIX)
        with pytest.raises(IOFailure):
            list(ZipArchiveLocation(bad).iter_entries(PREFIX))


class TestDirectoryLocation:
    """Tests for exploded directory locations."""

    @pytest.fixture
    def exploded(self, tmp_path):
        root = tmp_path / "exploded"
        for name, data in JQUERY_FILES.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        (root / "index.html").write_text("<html></html>")
        return root

    def test_iter_entries(self, exploded):
        entries = list(DirectoryLocation(exploded).iter_entries(PREFIX))

        assert [e.path for e in entries] == sorted(JQUERY_FILES)
        with entries[0].open() as stream:
            assert stream.read() == JQUERY_FILES[entries[0].path]

    def test_fingerprint_uses_file_stat(self, exploded):
        entry = next(DirectoryLocation(exploded).iter_entries(PREFIX))
        stat = (exploded / entry.path).stat()

        fingerprint = entry.fingerprint()

        assert fingerprint.size == stat.st_size
        assert fingerprint.last_modified == stat.st_mtime

    def test_has_entries_and_children(self, exploded):
        location = DirectoryLocation(exploded)

        assert location.has_entries(PREFIX)
        assert not location.has_entries(f"{WEBJARS}/bootstrap/")
        assert location.list_children(PREFIX) == {"jquery"}
        assert location.contains(f"{WEBJARS}/jquery/jquery.min.js")

    def test_names(self, exploded):
        assert DirectoryLocation(exploded).names() == sorted(
            [*JQUERY_FILES, "index.html"]
        )


class TestSearchPathLocator:
    """Tests for SearchPathLocator."""

    def test_finds_archives_in_directory(self, lib_dir):
        locator = SearchPathLocator([lib_dir])

        locations = locator.find_locations(PREFIX)

        assert sorted(loc.path.name for loc in locations) == [
            "bootstrap-5.3.0.jar",
            "jquery-3.7.1.jar",
            "less-4.2.0.jar",
        ]

    def test_no_duplicate_locations(self, lib_dir):
        jar = lib_dir / "jquery-3.7.1.jar"
        locator = SearchPathLocator([jar, lib_dir, str(jar)])

        names = [loc.path.name for loc in locator.find_locations(f"{WEBJARS}/jquery/")]

        assert names == ["jquery-3.7.1.jar"]

    def test_only_locations_with_path(self, lib_dir):
        locator = SearchPathLocator([lib_dir])

        locations = locator.find_locations(f"{WEBJARS}/bootstrap/")

        assert [loc.path.name for loc in locations] == ["bootstrap-5.3.0.jar"]

    def test_list_packages(self, lib_dir):
        assert SearchPathLocator([lib_dir]).list_packages(PREFIX) == {
            "jquery",
            "bootstrap",
            "less",
        }

    def test_iter_entries_for_package(self, lib_dir):
        locator = SearchPathLocator([lib_dir])

        paths = sorted(e.path for e in locator.iter_entries(PREFIX, "jquery"))

        assert paths == sorted(JQUERY_FILES)

    def test_missing_roots_are_ignored(self, tmp_path):
        locator = SearchPathLocator([tmp_path / "nope", tmp_path / "nope.jar"])
        assert locator.find_locations(PREFIX) == []

    def test_non_archive_files_are_ignored(self, tmp_path):
        text = tmp_path / "notes.txt"
        text.write_text("hello")
        assert SearchPathLocator([text]).candidate_locations() == []

    def test_expands_user_in_roots(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        build_jar(tmp_path / "jquery.jar", JQUERY_FILES)

        locator = SearchPathLocator(["~/jquery.jar"])

        assert len(locator.find_locations(PREFIX)) == 1

    def test_locations_are_reused_between_lookups(self, lib_dir):
        locator = SearchPathLocator([lib_dir])

        first = locator.find_locations(f"{WEBJARS}/jquery/")
        second = locator.find_locations(f"{WEBJARS}/jquery/")

        assert first[0] is second[0]

    def test_archive_listing_is_read_once(self, lib_dir):
        locator = SearchPathLocator([lib_dir])
        locator.list_packages(PREFIX)

        with patch("zipfile.ZipFile", side_effect=AssertionError("reopened")):
            for name in ("jquery", "bootstrap", "less"):
                assert locator.find_locations(f"{WEBJARS}/{name}/")

    def test_refresh_rescans_roots(self, tmp_path):
        lib = tmp_path / "lib"
        build_jar(lib / "jquery.jar", JQUERY_FILES)
        locator = SearchPathLocator([lib])
        assert locator.list_packages(PREFIX) == {"jquery"}

        build_jar(lib / "extra.jar", {f"{WEBJARS}/bootstrap/bootstrap.css": b"css"})
        assert locator.list_packages(PREFIX) == {"jquery"}

        locator.refresh()
        assert locator.list_packages(PREFIX) == {"jquery", "bootstrap"}
