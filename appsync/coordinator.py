"""End-to-end synchronisation of a catalogue into the tenants' repositories."""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, field
from typing import Protocol

from .config import RepoConfigs
from .gateway import RepoGateway
from .render import CRDFactory, ManifestRenderer
from .scanner import CatalogScanner
from .strategy import PRStrategy


class _GatewayFactory(Protocol):
    def new(self, token: str, owner: str, repo: str) -> RepoGateway: ...


def _repo_path(prefix: str, relative: str) -> str:
    return posixpath.normpath(posixpath.join(prefix, relative.replace(os.sep, "/")))


@dataclass
class SyncCoordinator:
    """Scans, renders and pushes every application of a catalogue."""

    scanner: CatalogScanner
    gateway_factory: _GatewayFactory
    pr_strategy: PRStrategy
    target_root: str
    repos: RepoConfigs
    token: str = ""
    factory: CRDFactory = field(default_factory=CRDFactory)
    renderer: ManifestRenderer = field(default_factory=ManifestRenderer)

    def sync(self) -> None:
        """Render each discovered application and apply the strategy to its repository.

        Files are placed in the repository under the base name of the
        catalogue root followed by their path relative to ``target_root``.
        """
        prefix = os.path.basename(os.path.normpath(self.scanner.root))
        for descriptor in self.scanner.scan():
            target = self.repos.for_team(descriptor.team)
            if target is None:
                raise LookupError(f"no repository configured for team {descriptor.team}")
            owner, repo = target
            gateway = self.gateway_factory.new(self.token, owner, repo)

            crds = self.factory.create(descriptor, f"{owner}/{repo}")
            dest = os.path.join(self.target_root, descriptor.app)
            files = self.renderer.render(crds, dest)

            remapped = {
                _repo_path(prefix, os.path.relpath(local_path, self.target_root)): content
                for local_path, content in files.items()
            }
            self.pr_strategy.apply(gateway, remapped)