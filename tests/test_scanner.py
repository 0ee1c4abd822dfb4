import os

import pytest

from appsync.config import Filter
from appsync.scanner import CatalogScanner

STRUCTURE = ["team-a/app1", "team-a/app2", "team-b/app1", "team-b/app3"]


@pytest.fixture
def catalogue(tmp_path):
    for rel in STRUCTURE:
        (tmp_path / rel).mkdir(parents=True)
    (tmp_path / "README.md").write_text("x")
    (tmp_path / "team-a" / "notes.txt").write_text("x")
    return tmp_path


def test_scan_discovers_all(catalogue):
    found = CatalogScanner(str(catalogue)).scan()
    assert len(found) == 4
    assert [f"{d.team}/{d.app}" for d in found] == STRUCTURE


def test_scan_filter_team(catalogue):
    found = CatalogScanner(str(catalogue), Filter(team="team-b")).scan()
    assert [(d.team, d.app) for d in found] == [("team-b", "app1"), ("team-b", "app3")]


def test_scan_filter_app(catalogue):
    found = CatalogScanner(str(catalogue), Filter(app="app1")).scan()
    assert len(found) == 2
    assert {d.team for d in found} == {"team-a", "team-b"}


def test_scan_filter_team_and_app(catalogue):
    found = CatalogScanner(str(catalogue), Filter(team="team-a", app="app3")).scan()
    assert found == []


def test_scan_source_path(catalogue):
    found = CatalogScanner(str(catalogue), Filter(team="team-a", app="app2")).scan()
    assert [d.source_path for d in found] == [os.path.join(str(catalogue), "team-a", "app2")]


def test_scan_missing_root(tmp_path):
    with pytest.raises(FileNotFoundError):
        CatalogScanner(str(tmp_path / "absent")).scan()