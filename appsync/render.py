"""Building the resources for an application and rendering them to YAML."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from .domain import CRD, ApplicationCRD, ApplicationDescriptor, EdgeCRD, PersistenceCRD


@dataclass(frozen=True)
class CRDFactory:
    """Creates the standard set of resources for one application."""

    lifecycle: str = "alpha"

    def create(self, descriptor: ApplicationDescriptor, repo_location: str) -> list[CRD]:
        return [
            ApplicationCRD(descriptor.app, self.lifecycle, descriptor.app, repo_location),
            PersistenceCRD(descriptor.app),
            EdgeCRD(descriptor.app),
        ]


@dataclass(frozen=True)
class ManifestRenderer:
    """Renders resources to file contents keyed by their destination path."""

    def render(self, crds: Iterable[CRD], dest_dir: str) -> dict[str, bytes]:
        """Create *dest_dir* and return ``{path: yaml bytes}``; nothing is written."""
        os.makedirs(dest_dir, mode=0o750, exist_ok=True)
        return {
            os.path.join(dest_dir, crd.file_name): crd.to_yaml().encode("utf-8")
            for crd in crds
        }