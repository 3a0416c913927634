"""Shared fixtures: WebJar archives built on the fly."""

import zipfile
from pathlib import Path
from typing import Dict, List

import pytest

WEBJARS = "META-INF/resources/webjars"

JQUERY_FILES = {
    f"{WEBJARS}/jquery/jquery.js": b"jquery.js!",
    f"{WEBJARS}/jquery/jquery.min.js": b"jq.js",
}

BOOTSTRAP_FILES = {
    f"{WEBJARS}/bootstrap/css/bootstrap.css": b"body { margin: 0; }",
    f"{WEBJARS}/bootstrap/js/bootstrap.js": b"var bootstrap = {};",
}

LESS_FILES = {
    f"{WEBJARS}/less/package.json": b'{"name": "less"}',
    f"{WEBJARS}/less/lib/less/tree/alpha.js": b"module.exports = 'alpha';",
}


def build_jar(path: Path, files: Dict[str, bytes]) -> Path:
    """Write a jar containing the given files plus some non-WebJar entries."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as jar:
        jar.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        jar.writestr("org/webjars/Placeholder.class", b"\xca\xfe\xba\xbe")
        for name, data in files.items():
            jar.writestr(name, data)
    return path


def all_files(root: Path) -> List[str]:
    """All files below root as sorted '/'-separated relative paths."""
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


@pytest.fixture
def lib_dir(tmp_path):
    """Directory holding jquery, bootstrap and less WebJars."""
    lib = tmp_path / "lib"
    build_jar(lib / "jquery-3.7.1.jar", JQUERY_FILES)
    build_jar(lib / "bootstrap-5.3.0.jar", BOOTSTRAP_FILES)
    build_jar(lib / "less-4.2.0.jar", LESS_FILES)
    return lib


@pytest.fixture
def two_package_jar(tmp_path):
    """Single archive exposing exactly jquery and bootstrap."""
    return build_jar(tmp_path / "bundle.jar", {**JQUERY_FILES, **BOOTSTRAP_FILES})


@pytest.fixture
def dest(tmp_path):
    """Extraction destination (not created)."""
    return tmp_path / "out"
