"""Application descriptors and the custom resources generated for them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

import yaml

API_VERSION = "dpe.comcast.com/v1"


@dataclass(frozen=True)
class ApplicationDescriptor:
    """One application found in the catalogue."""

    team: str
    app: str
    source_path: str


class CRD(ABC):
    """A custom resource that renders to its own YAML file."""

    file_name: ClassVar[str]

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return the resource as an ordered mapping."""

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            self.to_dict(),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )


@dataclass
class ApplicationCRD(CRD):
    """The Application resource, linking to its repository."""

    name: str
    lifecycle: str
    display_name: str
    repo: str
    labels: dict[str, str] = field(default_factory=dict)

    kind: ClassVar[str] = "Application"
    file_name: ClassVar[str] = "application.yaml"

    def to_dict(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": self.name}
        if self.labels:
            metadata["labels"] = dict(self.labels)
        return {
            "apiVersion": API_VERSION,
            "kind": self.kind,
            "metadata": metadata,
            "spec": {
                "lifecycle": self.lifecycle,
                "displayName": self.display_name,
                "links": [{"title": "Repo", "type": "repo", "location": self.repo}],
            },
        }


@dataclass
class _AppScopedCRD(CRD):
    app: str

    kind: ClassVar[str]
    suffix: ClassVar[str]

    @property
    def name(self) -> str:
        return f"{self.app}-{self.suffix}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": API_VERSION,
            "kind": self.kind,
            "metadata": {"name": self.name},
            "spec": {"appName": self.app},
        }


@dataclass
class EdgeCRD(_AppScopedCRD):
    """The Edge resource of an application."""

    kind: ClassVar[str] = "Edge"
    suffix: ClassVar[str] = "edge"
    file_name: ClassVar[str] = "edge.yaml"

    def to_dict(self) -> dict[str, Any]:
        return super().to_dict()


@dataclass
class PersistenceCRD(_AppScopedCRD):
    """The Persistence resource of an application."""

    kind: ClassVar[str] = "Persistence"
    suffix: ClassVar[str] = "persistence"
    file_name: ClassVar[str] = "persistence.yaml"

    def to_dict(self) -> dict[str, Any]:
        return super().to_dict()