import os

import yaml

from appsync.domain import ApplicationDescriptor, EdgeCRD
from appsync.render import CRDFactory, ManifestRenderer


def _descriptor():
    return ApplicationDescriptor(team="team-a", app="web", source_path="/cat/team-a/web")


def test_factory_creates_three_resources_in_order():
    crds = CRDFactory().create(_descriptor(), "acme/web-repo")
    assert [c.kind for c in crds] == ["Application", "Persistence", "Edge"]


def test_factory_application_fields():
    app = CRDFactory().create(_descriptor(), "acme/web-repo")[0].to_dict()
    assert app["metadata"]["name"] == "web"
    assert app["spec"]["lifecycle"] == "alpha"
    assert app["spec"]["displayName"] == "web"
    assert app["spec"]["links"][0]["location"] == "acme/web-repo"


def test_factory_scoped_resources_use_app_name():
    crds = CRDFactory().create(_descriptor(), "acme/web-repo")
    assert all(c.to_dict()["spec"].get("appName") == "web" for c in crds[1:])


def test_render_keys_and_contents(tmp_path):
    crds = CRDFactory().create(_descriptor(), "acme/web-repo")
    dest = str(tmp_path / "out" / "web")
    files = ManifestRenderer().render(crds, dest)
    assert set(files) == {
        os.path.join(dest, name)
        for name in ("application.yaml", "persistence.yaml", "edge.yaml")
    }
    for crd in crds:
        content = files[os.path.join(dest, crd.file_name)]
        assert yaml.safe_load(content.decode("utf-8")) == crd.to_dict()


def test_render_creates_directory_without_writing(tmp_path):
    dest = tmp_path / "nested" / "dir"
    ManifestRenderer().render([EdgeCRD("x")], str(dest))
    assert dest.is_dir()
    assert os.listdir(dest) == []


def test_render_empty_list(tmp_path):
    assert ManifestRenderer().render([], str(tmp_path / "e")) == {}