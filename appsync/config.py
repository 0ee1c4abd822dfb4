"""Repository mappings and catalogue filters."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import yaml


@dataclass(frozen=True)
class RepoConfig:
    """Where one team's manifests live."""

    team: str
    owner: str = ""
    repo: str = ""


def _scalar(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise ValueError(f"unmarshal repos file: field {field!r} must be a scalar")
    return str(value)


@dataclass(frozen=True)
class RepoConfigs:
    """An ordered collection of team to repository mappings."""

    configs: tuple[RepoConfig, ...] = ()

    def __iter__(self) -> Iterator[RepoConfig]:
        return iter(self.configs)

    def __len__(self) -> int:
        return len(self.configs)

    def for_team(self, team: str) -> tuple[str, str] | None:
        """Return ``(owner, repo)`` of the first mapping for *team*, or None."""
        for config in self.configs:
            if config.team == team:
                return config.owner, config.repo
        return None

    @classmethod
    def from_yaml(cls, text: str | bytes) -> RepoConfigs:
        """Parse a document with a top-level ``repos`` list."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"unmarshal repos file: {exc}") from exc
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("unmarshal repos file: document must be a mapping")
        entries = data.get("repos") or []
        if not isinstance(entries, list):
            raise ValueError("unmarshal repos file: 'repos' must be a list")
        configs = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValueError("unmarshal repos file: each repo entry must be a mapping")
            configs.append(
                RepoConfig(
                    team=_scalar(entry.get("team"), "team"),
                    owner=_scalar(entry.get("owner"), "owner"),
                    repo=_scalar(entry.get("repo"), "repo"),
                )
            )
        return cls(tuple(configs))


@dataclass(frozen=True)
class Filter:
    """Restricts a catalogue scan to one team and/or one application."""

    team: str = ""
    app: str = ""

    def match(self, team: str, app: str) -> bool:
        if self.team and team != self.team:
            return False
        if self.app and app != self.app:
            return False
        return True


def load_repos_file(path: str | os.PathLike[str]) -> RepoConfigs:
    """Read a repos file, refusing paths that traverse upwards."""
    raw = os.fspath(path)
    if ".." in os.path.normpath(raw):
        raise ValueError(f"invalid repos file path: {raw!r}")
    text = Path(raw).read_text(encoding="utf-8")
    return RepoConfigs.from_yaml(text)