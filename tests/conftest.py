"""Shared test fixtures for spmlink."""

import shutil
from pathlib import Path

import pytest

from spmlink.project.ids import sequential_ids
from spmlink.project.loader import load_project

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def project():
    return load_project(FIXTURES / "project-minimal.json", ids=sequential_ids())


@pytest.fixture
def project_file(tmp_path):
    """A writable copy of the minimal project."""
    dest = tmp_path / "App.xcodeproj" / "project.json"
    dest.parent.mkdir()
    shutil.copy(FIXTURES / "project-minimal.json", dest)
    return dest


@pytest.fixture
def podfile(tmp_path):
    dest = tmp_path / "Podfile"
    shutil.copy(FIXTURES / "Podfile", dest)
    return dest
