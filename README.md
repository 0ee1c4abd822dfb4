# appsync

`appsync` scans a catalogue of team applications, generates three manifests for
each application (Application, Persistence and Edge resources) and pushes files
into each team's GitHub repository, either as a direct commit or through a pull
request.

## Installation

```
pip install .
```

This installs the `appsync` command.

## The repos file

Each team is mapped to a GitHub repository in a YAML file with a top-level
`repos` list:

```yaml
repos:
  - team: payments
    owner: example-org
    repo: payments-apps
  - team: search
    owner: example-org
    repo: search-apps
```

When a team appears more than once, the first entry wins. A repos file path that
contains `..` is refused.

## Commands

Every command prints `ERROR: <message>` to standard error and exits with status 1
when it fails.

### fetch-repos

Build a repos file from the top-level directories of a GitHub repository:

```
appsync fetch-repos --token token --owner example-org --repo tenants \
    --path .applications --output repos.yaml
```

`--token`, `--owner` and `--repo` are required. Each entry of type `dir` in the
listing is matched against `--regex`, a regular expression with the named groups
`team`, `owner` and `repo` (default
`(?P<team>[^_]+)_(?P<owner>[^_]+)_(?P<repo>[^_]+)$`). Entries that do not match,
or whose pattern has no `team` or `repo` group, are skipped; `owner` is written
only when it captured something. The result is written to `--output` (default
`repos.yaml`) with keys sorted and file mode `0600`.

Other options:

- `--ref`: branch or commit to list.
- `--path`: directory inside the repository (default: its top level).
- `--api-url`: fetch a JSON listing from this URL instead of the GitHub contents
  API. Its host must be `api.github.com` or a loopback address. With `--ref`,
  `ref=<ref>` is appended to its query string. Listing entries may carry `team`,
  `owner` and `repo` fields directly; when all three are present they are used
  as they are and the name is not matched.

### generate

Scan a catalogue laid out as `<root>/<team>/<app>/` and write the manifests for
each application into `<dest>/<app>/`:

```
appsync generate --token token --root ./catalogue --repos-file repos.yaml \
    --dest ./sample/appsync
```

`--token`, `--root` and `--repos-file` are required; `--dest` defaults to
`./sample/appsync`. `--team` and `--app` limit which applications are generated.
Each application gets `application.yaml`, `persistence.yaml` and `edge.yaml`
(mode `0600`), and the command prints `wrote <path>` for each. The Application
resource links to `<owner>/<repo>` of the team; every team found must have an
entry in the repos file.

### sync

Push every file under `<root>` into the repository of the team named by the
file's first path component:

```
appsync sync --token token --root ./sample --repos-file repos.yaml --mode feature
```

Each file is written at its path relative to `<root>` (so it starts with the team
directory). With `--mode feature` (the default, and any value other than
`direct`) the files are written to a new branch `appsync/<unix-seconds>` created
from the default branch, and a pull request titled `appsync sync` is opened
against the default branch. With `--mode direct` the files are committed straight
to the default branch. Each commit carries the message `appsync: update <path>`.
After each team the command prints `sync complete for team <team> → <owner>/<repo>`.

## Library use

```python
from appsync.config import Filter, load_repos_file
from appsync.scanner import CatalogScanner
from appsync.render import CRDFactory, ManifestRenderer

repos = load_repos_file("repos.yaml")
for descriptor in CatalogScanner(root="catalogue", filter=Filter(team="payments")).scan():
    target = repos.for_team(descriptor.team)
    if target is None:
        continue
    owner, repo = target
    crds = CRDFactory().create(descriptor, f"{owner}/{repo}")
    files = ManifestRenderer().render(crds, f"out/{descriptor.app}")
```

- `appsync.config`: `RepoConfig`, `RepoConfigs` (`from_yaml`, `for_team`),
  `Filter` (`match`) and `load_repos_file`.
- `appsync.domain`: `ApplicationDescriptor` and the resources `ApplicationCRD`,
  `PersistenceCRD` and `EdgeCRD`, each with `to_dict()`, `to_yaml()` and a
  `file_name`.
- `appsync.scanner.CatalogScanner.scan()` returns descriptors in name order.
- `appsync.render`: `CRDFactory.create()` builds the three resources;
  `ManifestRenderer.render()` creates the destination directory and returns
  `{path: bytes}` without writing the files.
- `appsync.gateway`: the `RepoGateway` interface, `GitHubGateway` (GitHub REST
  API; `api_url` and a `requests.Session` can be supplied), `GitHubGatewayFactory`
  and `GatewayError`.
- `appsync.strategy`: `DirectCommitStrategy` and `FeatureBranchPRStrategy`, which
  work with any `RepoGateway`.
- `appsync.coordinator.SyncCoordinator.sync()` scans a catalogue, renders each
  application under `target_root` and applies a strategy, placing the files in
  the repository under the base name of the catalogue root.
- `appsync.cli`: `extract_groups`, `run_fetch_repos`, `run_generate`, `run_sync`
  and `main`.

## What it does not do

`SyncCoordinator` is available only from Python; no command runs it. The `sync`
command always talks to `api.github.com` and has no option for another API URL.

## Running the tests

```
pip install .[test]
pytest
```