"""Command-line entry point: fetch-repos, generate and sync."""

from __future__ import annotations

import argparse
import ipaddress
import json
import logging
import os
import re
import sys
from typing import Any, Pattern
from urllib.parse import quote, urlparse

import requests
import yaml

from .config import Filter, load_repos_file
from .gateway import DEFAULT_API_URL, GatewayError, GitHubGatewayFactory
from .render import CRDFactory, ManifestRenderer
from .scanner import CatalogScanner
from .strategy import DirectCommitStrategy, FeatureBranchPRStrategy, PRStrategy

DEFAULT_REGEX = r"(?P<team>[^_]+)_(?P<owner>[^_]+)_(?P<repo>[^_]+)$"
_TIMEOUT = 30.0

log = logging.getLogger(__name__)


def extract_groups(pattern: str | Pattern[str], text: str) -> dict[str, str]:
    """Return the named groups of the first match of *pattern* in *text*.

    An empty mapping means no match; groups that did not take part are ''.
    """
    match = re.compile(pattern).search(text)
    if match is None:
        return {}
    return match.groupdict(default="")


def _write_private(path: str, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


def _check_api_url(api_url: str) -> None:
    try:
        host = urlparse(api_url).hostname or ""
    except ValueError as exc:
        raise ValueError(f"invalid api-url: {exc}") from exc
    try:
        loopback = ipaddress.ip_address(host).is_loopback
    except ValueError:
        loopback = False
    if host != "api.github.com" and not loopback:
        raise ValueError(f"disallowed api-url host: {host}")


def _field(entry: dict[str, Any], key: str) -> str:
    value = entry.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"decode JSON: field {key!r} must be a string")
    return value


def _entries_from_listing(api_url: str, ref: str) -> list[dict[str, str]]:
    _check_api_url(api_url)
    url = api_url
    if ref:
        url += ("&" if "?" in url else "?") + "ref=" + ref
    try:
        resp = requests.get(url, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise GatewayError(f"fetch listing: {exc}") from exc
    try:
        data = resp.json()
    except ValueError as exc:
        raise ValueError(f"decode JSON: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(e, dict) for e in data):
        raise ValueError("decode JSON: expected a list of objects")
    return [
        {key: _field(e, key) for key in ("type", "name", "team", "owner", "repo")}
        for e in data
    ]


def _entries_from_github(token: str, owner: str, repo: str, path: str, ref: str):
    url = (
        f"{DEFAULT_API_URL}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
        f"/contents/{quote(path.strip('/'), safe='/')}"
    )
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    params = {"ref": ref} if ref else None
    try:
        resp = requests.get(url, headers=headers, params=params, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise GatewayError(f"listing content: {exc}") from exc
    if resp.status_code >= 400:
        raise GatewayError(
            f"listing content: {resp.status_code} {resp.reason}", status=resp.status_code
        )
    data = resp.json()
    if not isinstance(data, list):
        return []
    return [
        {"type": str(d.get("type") or ""), "name": str(d.get("name") or "")}
        for d in data
        if isinstance(d, dict)
    ]


def run_fetch_repos(
    token: str,
    owner: str,
    repo: str,
    path: str = "",
    regex: str = DEFAULT_REGEX,
    output: str = "repos.yaml",
    api_url: str = "",
    ref: str = "",
) -> list[dict[str, str]]:
    """Write a repos file built from a repository's top-level directories."""
    try:
        pattern = re.compile(regex)
    except re.error as exc:
        raise ValueError(f"invalid regex {regex!r}: {exc}") from exc

    if api_url:
        entries = _entries_from_listing(api_url, ref)
    else:
        entries = _entries_from_github(token, owner, repo, path, ref)

    repos: list[dict[str, str]] = []
    for entry in entries:
        if entry.get("type") != "dir":
            continue
        if entry.get("team") and entry.get("owner") and entry.get("repo"):
            repos.append(
                {"team": entry["team"], "owner": entry["owner"], "repo": entry["repo"]}
            )
            continue
        groups = extract_groups(pattern, entry.get("name", ""))
        if "team" not in groups or "repo" not in groups:
            continue
        item = {"team": groups["team"], "repo": groups["repo"]}
        if groups.get("owner"):
            item["owner"] = groups["owner"]
        repos.append(item)

    document = yaml.safe_dump({"repos": repos}, sort_keys=True, default_flow_style=False)
    _write_private(output, document.encode("utf-8"))
    return repos


def run_generate(
    root: str,
    dest: str = "./sample/appsync",
    repos_file: str = "",
    team: str = "",
    app: str = "",
) -> list[str]:
    """Render the resources of every catalogued application under *dest*."""
    repos = load_repos_file(repos_file)
    scanner = CatalogScanner(root, Filter(team=team, app=app))
    try:
        descriptors = scanner.scan()
    except OSError as exc:
        raise OSError(f"scan catalogue: {exc}") from exc

    factory = CRDFactory()
    renderer = ManifestRenderer()
    written: list[str] = []
    for descriptor in descriptors:
        target = repos.for_team(descriptor.team)
        if target is None:
            raise LookupError(f"no repo mapping for team {descriptor.team}")
        owner, repo = target
        crds = factory.create(descriptor, f"{owner}/{repo}")
        app_dir = os.path.join(dest, descriptor.app)
        try:
            files = renderer.render(crds, app_dir)
        except OSError as exc:
            raise OSError(f"render app {descriptor.app}: {exc}") from exc
        for path in sorted(files):
            try:
                _write_private(path, files[path])
            except OSError as exc:
                raise OSError(f"writing file {path!r}: {exc}") from exc
            print("wrote", path)
            written.append(path)
    return written


def _raise(exc: OSError) -> None:
    raise exc


def _collect_by_team(root: str) -> dict[str, dict[str, bytes]]:
    by_team: dict[str, dict[str, bytes]] = {}
    os.stat(root)
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            rel = os.path.relpath(path, root)
            if ".." in os.path.normpath(path).split(os.sep):
                raise ValueError(f"invalid walk path: {path!r}")
            team = rel.split(os.sep)[0]
            with open(path, "rb") as handle:
                by_team.setdefault(team, {})[rel] = handle.read()
    return by_team


def run_sync(
    root: str, repos_file: str, mode: str = "feature", token: str = ""
) -> None:
    """Push files under *root* into each team's repository."""
    repos = load_repos_file(repos_file)
    try:
        by_team = _collect_by_team(root)
    except OSError as exc:
        raise OSError(f"walk root: {exc}") from exc

    factory = GitHubGatewayFactory()
    for team in sorted(by_team):
        target = repos.for_team(team)
        if target is None:
            raise LookupError(f"no repository configured for team {team}")
        owner, repo = target
        gateway = factory.new(token, owner, repo)
        strategy: PRStrategy = (
            DirectCommitStrategy() if mode == "direct" else FeatureBranchPRStrategy()
        )
        try:
            strategy.apply(gateway, by_team[team])
        except GatewayError as exc:
            raise GatewayError(
                f"applying PR strategy for team {team}: {exc}", status=exc.status
            ) from exc
        print(f"sync complete for team {team} → {owner}/{repo}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appsync",
        description="Synchronise 1AI application skeletons into tenant repos",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    fetch = commands.add_parser(
        "fetch-repos", help="Generate repos.yaml from a GitHub repo's top-level directories"
    )
    fetch.add_argument("-t", "--token", required=True, help="GitHub token")
    fetch.add_argument("--owner", required=True, help="GitHub owner/org")
    fetch.add_argument("--repo", required=True, help="GitHub repo")
    fetch.add_argument("--path", default="", help="Path inside the repo")
    fetch.add_argument("--regex", default=DEFAULT_REGEX, help="Named-capture regex")
    fetch.add_argument("--output", default="repos.yaml", help="Output file")
    fetch.add_argument("--api-url", default="", help="Override API URL (for tests)")
    fetch.add_argument("--ref", default="", help="Branch or commit SHA")

    generate = commands.add_parser(
        "generate", help="Generate Application CRs into a local sample directory"
    )
    generate.add_argument("-t", "--token", required=True, help="GitHub access token")
    generate.add_argument("--root", required=True, help="catalogue root")
    generate.add_argument(
        "--dest", default="./sample/appsync", help="output directory for generated YAMLs"
    )
    generate.add_argument(
        "--repos-file", required=True, help="YAML file listing team to owner/repo mappings"
    )
    generate.add_argument("--team", default="", help="filter by team")
    generate.add_argument("--app", default="", help="filter by application")

    sync = commands.add_parser(
        "sync", help="Push local manifests under <root> into each team's repo (opens PRs)"
    )
    sync.add_argument("-t", "--token", default="", help="GitHub API token")
    sync.add_argument(
        "--root", required=True, help="root directory containing generated manifests"
    )
    sync.add_argument(
        "--repos-file", required=True, help="YAML file listing team to owner/repo mappings"
    )
    sync.add_argument("--mode", default="feature", help='PR strategy: "direct" | "feature"')
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "fetch-repos":
            run_fetch_repos(
                args.token,
                args.owner,
                args.repo,
                args.path,
                args.regex,
                args.output,
                args.api_url,
                args.ref,
            )
        elif args.command == "generate":
            run_generate(args.root, args.dest, args.repos_file, args.team, args.app)
        else:
            run_sync(args.root, args.repos_file, args.mode, args.token)
    except (ValueError, LookupError, OSError, GatewayError, requests.RequestException, json.JSONDecodeError) as exc:
        log.error("command failed: %s", exc)
        print("ERROR:", exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())