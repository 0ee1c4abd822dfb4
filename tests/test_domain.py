import pytest
import yaml

from appsync.domain import (
    API_VERSION,
    CRD,
    ApplicationCRD,
    ApplicationDescriptor,
    EdgeCRD,
    PersistenceCRD,
)


def test_application_crd_dict():
    crd = ApplicationCRD("web", "alpha", "Web", "acme/web-repo")
    assert crd.to_dict() == {
        "apiVersion": "dpe.comcast.com/v1",
        "kind": "Application",
        "metadata": {"name": "web"},
        "spec": {
            "lifecycle": "alpha",
            "displayName": "Web",
            "links": [{"title": "Repo", "type": "repo", "location": "acme/web-repo"}],
        },
    }


def test_application_labels_included_when_set():
    crd = ApplicationCRD("web", "alpha", "Web", "acme/web", labels={"tier": "front"})
    assert crd.to_dict()["metadata"]["labels"] == {"tier": "front"}


def test_edge_crd_dict():
    crd = EdgeCRD("web")
    assert crd.to_dict() == {
        "apiVersion": API_VERSION,
        "kind": "Edge",
        "metadata": {"name": "web-edge"},
        "spec": {"appName": "web"},
    }


def test_persistence_crd_dict():
    data = PersistenceCRD("web").to_dict()
    assert data["kind"] == "Persistence"
    assert data["metadata"]["name"] == "web-persistence"
    assert data["spec"]["appName"] == "web"


@pytest.mark.parametrize(
    "crd,name",
    [
        (ApplicationCRD("a", "alpha", "a", "o/r"), "application.yaml"),
        (EdgeCRD("a"), "edge.yaml"),
        (PersistenceCRD("a"), "persistence.yaml"),
    ],
)
def test_file_names(crd, name):
    assert crd.file_name == name


@pytest.mark.parametrize(
    "crd",
    [
        ApplicationCRD("svc", "alpha", "svc", "owner/repo"),
        EdgeCRD("svc"),
        PersistenceCRD("svc"),
    ],
)
def test_yaml_round_trip_keeps_order(crd):
    text = crd.to_yaml()
    loaded = yaml.safe_load(text)
    assert loaded == crd.to_dict()
    assert list(loaded) == ["apiVersion", "kind", "metadata", "spec"]
    assert text.startswith("apiVersion: dpe.comcast.com/v1\n")


def test_crd_base_is_abstract():
    with pytest.raises(TypeError):
        CRD()


def test_descriptor_fields():
    d = ApplicationDescriptor(team="t", app="a", source_path="/x/t/a")
    assert (d.team, d.app, d.source_path) == ("t", "a", "/x/t/a")