import pytest

from appsync.config import Filter, RepoConfig, RepoConfigs, load_repos_file

SAMPLE = """
repos:
  - team: alpha
    owner: acme
    repo: alpha-apps
  - team: beta
    repo: beta-apps
  - team: alpha
    owner: other
    repo: shadowed
"""


def test_from_yaml_parses_entries_in_order():
    configs = RepoConfigs.from_yaml(SAMPLE)
    assert list(configs) == [
        RepoConfig("alpha", "acme", "alpha-apps"),
        RepoConfig("beta", "", "beta-apps"),
        RepoConfig("alpha", "other", "shadowed"),
    ]
    assert len(configs) == 3


def test_for_team_returns_first_match():
    configs = RepoConfigs.from_yaml(SAMPLE)
    assert configs.for_team("alpha") == ("acme", "alpha-apps")
    assert configs.for_team("beta") == ("", "beta-apps")


def test_for_team_missing_returns_none():
    configs = RepoConfigs.from_yaml(SAMPLE)
    assert configs.for_team("gamma") is None


@pytest.mark.parametrize("text", ["", "other: 1\n", "repos:\n"])
def test_from_yaml_without_entries_is_empty(text):
    assert len(RepoConfigs.from_yaml(text)) == 0


@pytest.mark.parametrize(
    "text",
    ["repos: [unclosed", "- just\n- a list\n", "repos: nope\n", "repos:\n  - plain\n"],
)
def test_from_yaml_rejects_malformed(text):
    with pytest.raises(ValueError):
        RepoConfigs.from_yaml(text)


@pytest.mark.parametrize(
    "flt,team,app,expected",
    [
        (Filter(), "t", "a", True),
        (Filter(team="t"), "t", "a", True),
        (Filter(team="t"), "u", "a", False),
        (Filter(app="a"), "u", "a", True),
        (Filter(app="a"), "u", "b", False),
        (Filter(team="t", app="a"), "t", "b", False),
    ],
)
def test_filter_match(flt, team, app, expected):
    assert flt.match(team, app) is expected


def test_load_repos_file_reads_file(tmp_path):
    path = tmp_path / "repos.yaml"
    path.write_text(SAMPLE, encoding="utf-8")
    assert load_repos_file(path).for_team("beta") == ("", "beta-apps")


def test_load_repos_file_rejects_upward_traversal():
    with pytest.raises(ValueError, match="invalid repos file path"):
        load_repos_file("../repos.yaml")


def test_load_repos_file_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_repos_file(tmp_path / "absent.yaml")