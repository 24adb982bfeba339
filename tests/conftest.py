"""Shared fixtures: throwaway Bower/npm projects and markup sources in tmp_path."""

import json
from pathlib import Path

import pytest

_LAYOUT = {
    "bower": ("bower_components", ".bower.json"),
    "npm": ("node_modules", "package.json"),
}


@pytest.fixture
def make_project(tmp_path):
    """Write installed manifests into a project folder and return its path.

    ``manifests`` maps folder name -> manifest dict; a ``str`` value is written
    verbatim so tests can plant malformed JSON.
    """

    def _make(manifests, package_manager="bower", name="project"):
        folder, filename = _LAYOUT[package_manager]
        project = tmp_path / name
        deps_dir = project / folder
        deps_dir.mkdir(parents=True, exist_ok=True)
        for dir_name, manifest in manifests.items():
            dep_dir = deps_dir / dir_name
            dep_dir.mkdir()
            text = manifest if isinstance(manifest, str) else json.dumps(manifest)
            (dep_dir / filename).write_text(text, encoding="utf-8")
        return project

    return _make


@pytest.fixture
def source_root(tmp_path) -> Path:
    root = tmp_path / "build" / "public"
    root.mkdir(parents=True)
    return root
